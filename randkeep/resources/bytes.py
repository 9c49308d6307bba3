"""``bytes``: a random byte sequence, kept as base64 and hex."""

from __future__ import annotations

import base64
import binascii
from typing import Any, Mapping

from ..errors import ImportStateError
from ..generate.source import RandomSource, SystemRandomSource, read_bytes
from ..plan.schema import ResourceSchema
from ..plan.validators import Validator, int_at_least
from .base import ResourceType, computed_attribute, keepers_attribute, replacing_input


def encodings(raw: bytes) -> dict[str, str]:
    return {
        "base64": base64.b64encode(raw).decode("ascii"),
        "hex": raw.hex(),
    }


class BytesResource(ResourceType):
    kind = "bytes"

    @property
    def schema(self) -> ResourceSchema:
        return ResourceSchema(
            kind=self.kind,
            version=0,
            description="Generates an array of random bytes intended to be used as a key or secret.",
            attributes=(
                keepers_attribute(),
                replacing_input("length", "int", required=True, description="The number of bytes requested."),
                computed_attribute("base64", description="The generated bytes presented in base64 string format.", sensitive=True),
                computed_attribute("hex", description="The generated bytes presented in lowercase hexadecimal string format.", sensitive=True),
            ),
        )

    @property
    def validators(self) -> tuple[Validator, ...]:
        return (int_at_least("length", 1),)

    def create(self, planned: Mapping[str, Any], source: RandomSource | None = None) -> dict[str, Any]:
        raw = read_bytes(source or SystemRandomSource(), planned["length"])
        state = dict(planned)
        state.update(encodings(raw))
        return state

    def import_state(self, import_id: str) -> dict[str, Any]:
        try:
            raw = base64.b64decode(import_id, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImportStateError(f"There was an error during the parsing of the base64 string: {e}") from e
        state: dict[str, Any] = {"keepers": None, "length": len(raw)}
        state.update(encodings(raw))
        return state
