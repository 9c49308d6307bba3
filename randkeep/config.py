from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .resources import get_resource_type, list_resource_types


@dataclass(frozen=True)
class ResourceDecl:
    """One declared resource: its address, kind and attribute values."""

    address: str
    kind: str
    attributes: dict[str, Any] = field(default_factory=dict)


def parse_config(data: dict[str, Any]) -> dict[str, ResourceDecl]:
    resources = data.get("resources", {})
    if not isinstance(resources, dict):
        raise ValueError("resources must be a table")

    decls: dict[str, ResourceDecl] = {}
    for address, raw in resources.items():
        if not isinstance(raw, dict):
            raise ValueError(f"resources.{address} must be a table")

        kind = str(raw.get("kind", "")).strip()
        if not kind:
            raise ValueError(f"resources.{address}: kind is required")

        rtype = get_resource_type(kind)
        if rtype is None:
            raise ValueError(
                f"resources.{address}: unknown kind {kind!r} (known: {', '.join(list_resource_types())})"
            )

        attributes = {k: v for k, v in raw.items() if k != "kind"}
        keepers = attributes.get("keepers")
        if isinstance(keepers, dict):
            # TOML keeper values may be numbers or booleans; keepers are compared as strings.
            attributes["keepers"] = {str(k): str(v) for k, v in keepers.items()}
        decls[address] = ResourceDecl(address=address, kind=rtype.kind, attributes=attributes)
    return decls


def load_config(path: Path) -> dict[str, ResourceDecl]:
    """
    Load resource declarations from TOML.

    Every table under ``resources`` is one resource; ``kind`` selects the
    resource type and the remaining keys are its attribute values.
    """
    import tomllib

    data = tomllib.loads(path.read_text(encoding="utf-8"))
    return parse_config(data)
