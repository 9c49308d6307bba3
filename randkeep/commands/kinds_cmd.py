"""
Resource kind introspection.

Commands:
- randkeep kinds          - List all registered kinds
- randkeep kinds KIND     - Show one kind's attributes and plan rules
"""

from __future__ import annotations

import json

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..resources import RESOURCE_TYPES, get_resource_type, list_resource_types

console = Console()
err = Console(stderr=True)


def run_kinds_list(json_output: bool = False) -> int:
    kinds = list_resource_types()

    if json_output:
        output = [
            {
                "kind": kind,
                "schema_version": RESOURCE_TYPES[kind].schema.version,
                "description": RESOURCE_TYPES[kind].describe(),
            }
            for kind in kinds
        ]
        print(json.dumps(output, indent=2))
        return 0

    table = Table(title="Resource kinds")
    table.add_column("Kind", style="cyan")
    table.add_column("Schema")
    table.add_column("Description")
    for kind in kinds:
        rtype = RESOURCE_TYPES[kind]
        table.add_row(kind, str(rtype.schema.version), escape(rtype.describe()))

    console.print(table)
    console.print(f"\n[dim]Total: {len(kinds)} kinds[/dim]")
    return 0


def run_kind_info(kind: str) -> int:
    rtype = get_resource_type(kind)
    if rtype is None:
        err.print(f"Unknown kind: {escape(kind)}", style="bold red")
        err.print(f"Available: {', '.join(list_resource_types())}", style="dim")
        return 1

    schema = rtype.schema
    console.print(f"[bold]{schema.kind}[/bold] (schema version {schema.version})")
    console.print(escape(schema.description), style="dim")

    table = Table()
    table.add_column("Attribute", style="cyan")
    table.add_column("Type")
    table.add_column("Mode")
    table.add_column("Plan rules")
    for attr in schema.attributes:
        mode = "required" if attr.required else "optional" if attr.optional else "computed"
        if attr.optional and attr.computed:
            mode = "optional, computed"
        if attr.sensitive:
            mode += ", sensitive"
        if attr.deprecated:
            mode += ", deprecated"
        rules = "\n".join(rule.description for rule in attr.rules)
        table.add_row(attr.name, attr.type, mode, escape(rules))

    console.print(table)
    return 0
