"""
JSON state store.

One document holds every managed resource, keyed by address:

    {"format_version": 1,
     "resources": {"db_password": {"kind": "password",
                                   "schema_version": 3,
                                   "attributes": {...}}}}

Writes go to a temp file that then replaces the document.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

FORMAT_VERSION = 1


@dataclass
class PersistedState:
    kind: str
    schema_version: int
    attributes: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "schema_version": self.schema_version,
            "attributes": dict(self.attributes),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PersistedState:
        if "kind" not in data:
            raise ValueError("Persisted state missing 'kind'")
        return cls(
            kind=str(data["kind"]),
            schema_version=int(data.get("schema_version", 0)),
            attributes=dict(data.get("attributes") or {}),
        )


class StateStore:
    """Load and save the state document at ``path``."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> dict[str, PersistedState]:
        """All persisted resources; empty when the file does not exist yet."""
        if not self.path.exists():
            return {}

        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self.path}: state document must be a JSON object")

        version = data.get("format_version")
        if version != FORMAT_VERSION:
            raise ValueError(f"{self.path}: unsupported state format_version {version!r}")

        resources = data.get("resources", {})
        if not isinstance(resources, dict):
            raise ValueError(f"{self.path}: 'resources' must be an object")

        out: dict[str, PersistedState] = {}
        for address, record in resources.items():
            if not isinstance(record, dict):
                raise ValueError(f"{self.path}: resource {address!r} must be an object")
            try:
                out[address] = PersistedState.from_dict(record)
            except ValueError as e:
                raise ValueError(f"{self.path}: resource {address!r}: {e}") from e
        return out

    def get(self, address: str) -> PersistedState | None:
        return self.load().get(address)

    def save(self, resources: dict[str, PersistedState]) -> None:
        document = {
            "format_version": FORMAT_VERSION,
            "resources": {address: resources[address].to_dict() for address in sorted(resources)},
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        temp_path.write_text(json.dumps(document, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        temp_path.replace(self.path)

    def put(self, address: str, state: PersistedState) -> None:
        resources = self.load()
        resources[address] = state
        self.save(resources)

    def remove(self, address: str) -> bool:
        resources = self.load()
        if address not in resources:
            return False
        del resources[address]
        self.save(resources)
        return True
