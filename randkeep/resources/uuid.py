"""``uuid``: a random UUID (version 4 layout)."""

from __future__ import annotations

import uuid
from typing import Any, Mapping

from ..errors import ImportStateError
from ..generate.source import RandomSource, SystemRandomSource, read_bytes
from ..plan.schema import ResourceSchema
from .base import ResourceType, computed_attribute, keepers_attribute


class UUIDResource(ResourceType):
    kind = "uuid"

    @property
    def schema(self) -> ResourceSchema:
        return ResourceSchema(
            kind=self.kind,
            version=0,
            description="Generates a random uuid string that is intended to be used as a unique identifier.",
            attributes=(
                keepers_attribute(),
                computed_attribute("result", description="The generated uuid presented in string format."),
                computed_attribute("id", description="The generated uuid presented in string format."),
            ),
        )

    def create(self, planned: Mapping[str, Any], source: RandomSource | None = None) -> dict[str, Any]:
        raw = read_bytes(source or SystemRandomSource(), 16)
        result = str(uuid.UUID(bytes=raw, version=4))
        state = dict(planned)
        state["result"] = result
        state["id"] = result
        return state

    def import_state(self, import_id: str) -> dict[str, Any]:
        try:
            parsed = uuid.UUID(import_id)
        except ValueError as e:
            raise ImportStateError(f"There was an error during the parsing of the UUID: {import_id!r}") from e
        result = str(parsed)
        return {"keepers": None, "result": result, "id": result}
