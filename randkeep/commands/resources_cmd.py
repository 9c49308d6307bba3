"""
Plan/apply/show/import/upgrade command implementations.

Commands:
- randkeep plan      - Show what apply would change
- randkeep apply     - Generate values and write state
- randkeep show      - Show stored values (sensitive ones hidden)
- randkeep import    - Adopt an existing value into state
- randkeep upgrade   - Rewrite stored records at their current schema version
"""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .. import lifecycle
from ..config import ResourceDecl, load_config
from ..errors import RandkeepError
from ..plan.engine import PlanResult
from ..state.store import PersistedState, StateStore
from ..values import redact

console = Console()
err = Console(stderr=True)


def _print(text: str, style: str | None = None) -> None:
    console.print(escape(text), style=style, soft_wrap=True, highlight=False)


def _plan_all(
    decls: dict[str, ResourceDecl],
    stored: dict[str, PersistedState],
) -> dict[str, PlanResult]:
    plans: dict[str, PlanResult] = {}
    for address in sorted(set(decls) | set(stored)):
        decl = decls.get(address)
        prior = stored.get(address)
        if decl is not None:
            plans[address] = lifecycle.plan(decl.kind, decl.attributes, prior)
        elif prior is not None:
            plans[address] = lifecycle.plan(prior.kind, None, prior)
    return plans


def _render_plans(plans: dict[str, PlanResult]) -> None:
    for address, result in plans.items():
        _print(f"# {address}", style="bold")
        _print(result.summary())
    counts: dict[str, int] = {}
    for result in plans.values():
        counts[result.action] = counts.get(result.action, 0) + 1
    if counts:
        line = ", ".join(f"{n} to {action}" for action, n in sorted(counts.items()))
        _print(f"\nPlan: {line}", style="dim")


def run_plan(config_path: Path, state_path: Path, output_json: bool = False) -> int:
    """
    Plan every declared and stored resource.

    Returns:
        Exit code (0 = plan is applicable, 1 = errors found)
    """
    try:
        decls = load_config(config_path)
        stored = StateStore(state_path).load()
        plans = _plan_all(decls, stored)
    except (OSError, ValueError, RandkeepError) as e:
        err.print(escape(str(e)), style="bold red")
        return 1

    if output_json:
        output = [
            {
                "address": address,
                "kind": result.kind,
                "action": result.action,
                "requires_replace": result.requires_replace,
                "diagnostics": [str(d) for d in result.diagnostics],
            }
            for address, result in plans.items()
        ]
        print(json.dumps(output, indent=2))
    else:
        _render_plans(plans)

    return 1 if any(r.has_errors for r in plans.values()) else 0


def run_apply(config_path: Path, state_path: Path) -> int:
    """
    Plan, then apply every resource and write the state file.

    Nothing is written when any plan carries errors.
    """
    store = StateStore(state_path)
    try:
        decls = load_config(config_path)
        stored = store.load()
        plans = _plan_all(decls, stored)
    except (OSError, ValueError, RandkeepError) as e:
        err.print(escape(str(e)), style="bold red")
        return 1

    failed = {a: r for a, r in plans.items() if r.has_errors}
    if failed:
        for address, result in failed.items():
            for diag in result.diagnostics:
                if diag.is_error:
                    err.print(escape(f"{address}: {diag}"), style="bold red", soft_wrap=True)
        err.print("Planning failed; state was not changed.", style="bold red")
        return 1

    new_state: dict[str, PersistedState] = {}
    try:
        for address, result in plans.items():
            record = lifecycle.apply(result, address=address)
            if record is not None:
                new_state[address] = record
            if result.action != "noop":
                _print(f"{address}: {result.action}")
    except RandkeepError as e:
        err.print(escape(str(e)), style="bold red")
        return 1

    store.save(new_state)
    _print(f"Applied {len(plans)} resource(s); state written to {state_path}", style="dim")
    return 0


def run_show(state_path: Path, address: str | None = None, output_json: bool = False) -> int:
    try:
        stored = StateStore(state_path).load()
    except (OSError, ValueError) as e:
        err.print(escape(str(e)), style="bold red")
        return 1

    if address is not None:
        if address not in stored:
            err.print(escape(f"Resource not found: {address}"), style="bold red")
            return 1
        stored = {address: stored[address]}

    rows = []
    try:
        for addr, record in sorted(stored.items()):
            rtype = lifecycle.resource_type_for(record.kind)
            rows.append((addr, record, redact(record.attributes, rtype.schema.sensitive_names)))
    except ValueError as e:
        err.print(escape(str(e)), style="bold red")
        return 1

    if output_json:
        output = {
            addr: {"kind": record.kind, "schema_version": record.schema_version, "attributes": attrs}
            for addr, record, attrs in rows
        }
        print(json.dumps(output, indent=2, sort_keys=True))
        return 0

    table = Table(title="Managed resources")
    table.add_column("Address", style="cyan")
    table.add_column("Kind")
    table.add_column("Schema")
    table.add_column("Attributes")
    for addr, record, attrs in rows:
        shown = ", ".join(f"{k}={v!r}" for k, v in sorted(attrs.items()) if v is not None)
        table.add_row(escape(addr), record.kind, str(record.schema_version), escape(shown))
    console.print(table)
    console.print(f"\n[dim]Total: {len(rows)} resource(s)[/dim]")
    return 0


def run_import(state_path: Path, kind: str, address: str, import_id: str) -> int:
    store = StateStore(state_path)
    try:
        stored = store.load()
        if address in stored:
            err.print(escape(f"Resource already managed: {address}"), style="bold red")
            return 1
        record = lifecycle.import_resource(kind, import_id)
    except (OSError, ValueError, RandkeepError) as e:
        err.print(escape(str(e)), style="bold red")
        return 1

    stored[address] = record
    store.save(stored)
    _print(f"{address}: imported as {record.kind}")
    return 0


def run_upgrade(state_path: Path) -> int:
    """Upgrade every stored record to its kind's current schema version."""
    store = StateStore(state_path)
    try:
        stored = store.load()
        upgraded: dict[str, PersistedState] = {}
        changed = 0
        for address, record in stored.items():
            new_record = lifecycle.read_state(record)
            if new_record.schema_version != record.schema_version:
                changed += 1
                _print(f"{address}: schema version {record.schema_version} -> {new_record.schema_version}")
            upgraded[address] = new_record
    except (OSError, ValueError, RandkeepError) as e:
        err.print(escape(str(e)), style="bold red")
        return 1

    if changed:
        store.save(upgraded)
    _print(f"Upgraded {changed} of {len(stored)} resource(s)", style="dim")
    return 0
