"""``id``: random bytes rendered as identifiers in several encodings."""

from __future__ import annotations

import base64
import binascii
from typing import Any, Mapping

from ..errors import ImportStateError
from ..generate.source import RandomSource, SystemRandomSource, read_bytes
from ..plan.schema import ResourceSchema
from ..plan.validators import Validator, int_at_least
from .base import ResourceType, computed_attribute, keepers_attribute, replacing_input


def _b64url_unpadded(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def renderings(raw: bytes, prefix: str) -> dict[str, str]:
    """Every output attribute for ``raw``; all but ``id`` carry the prefix."""
    url = _b64url_unpadded(raw)
    return {
        "id": url,
        "b64_url": prefix + url,
        "b64_std": prefix + base64.b64encode(raw).decode("ascii"),
        "hex": prefix + raw.hex(),
        "dec": prefix + str(int.from_bytes(raw, "big")),
    }


class IdResource(ResourceType):
    kind = "id"

    @property
    def schema(self) -> ResourceSchema:
        return ResourceSchema(
            kind=self.kind,
            version=0,
            description="Generates random numbers that are intended to be used as unique identifiers.",
            attributes=(
                keepers_attribute(),
                replacing_input(
                    "byte_length",
                    "int",
                    required=True,
                    description="The number of random bytes to produce. The minimum value is 1.",
                ),
                replacing_input("prefix", "string", description="Arbitrary string to prefix the output value with."),
                computed_attribute("b64_url", description="The generated id presented in base64, URL-safe, without padding."),
                computed_attribute("b64_std", description="The generated id presented in base64 without additional transformations."),
                computed_attribute("hex", description="The generated id presented in padded hexadecimal digits."),
                computed_attribute("dec", description="The generated id presented in non-padded decimal digits."),
                computed_attribute("id", description="The generated id presented in base64 without additional transformations or prefix."),
            ),
        )

    @property
    def validators(self) -> tuple[Validator, ...]:
        return (int_at_least("byte_length", 1),)

    def create(self, planned: Mapping[str, Any], source: RandomSource | None = None) -> dict[str, Any]:
        raw = read_bytes(source or SystemRandomSource(), planned["byte_length"])
        state = dict(planned)
        state.update(renderings(raw, planned.get("prefix") or ""))
        return state

    def import_state(self, import_id: str) -> dict[str, Any]:
        prefix, sep, encoded = import_id.rpartition(",")
        if not sep:
            prefix, encoded = "", import_id
        try:
            raw = base64.b64decode(encoded + "=" * (-len(encoded) % 4), altchars=b"-_", validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImportStateError(f"While attempting to import a random id there was a decoding error: {e}") from e
        if not raw:
            raise ImportStateError("id import id must contain at least one encoded byte")

        state: dict[str, Any] = {
            "keepers": None,
            "byte_length": len(raw),
            "prefix": prefix or None,
        }
        state.update(renderings(raw, prefix))
        state["id"] = encoded
        return state
