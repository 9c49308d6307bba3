"""
``password``: a sensitive random string plus its bcrypt hash.

Schema version history:

    v0  as ``string`` v1, no hash
    v1  ``bcrypt_hash`` added, derived from ``result``
    v2  ``numeric`` added; null inputs left behind by early imports filled in
    v3  ``bcrypt_hash`` verified against ``result`` and regenerated when it
        does not match (some v2 releases hashed the wrong value)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import bcrypt

from ..errors import HashGenerationError, ImportStateError, UpgradeError
from ..generate.compose import compose_string
from ..generate.source import RandomSource
from ..plan.schema import ResourceSchema
from ..plan.validators import Validator, generation_spec_from, generation_spec_valid, int_at_least
from ..state.upgrade import StateRecord, UpgradeChain, UpgradeStep
from .base import ResourceType, computed_attribute
from .string import fill_import_nulls, imported_string_fields, string_like_attributes

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72
BCRYPT_ROUNDS = 10


def _hash_input(value: str) -> bytes:
    return value.encode("utf-8")[:BCRYPT_MAX_BYTES]


def generate_hash(value: str) -> str:
    """bcrypt hash of the first 72 UTF-8 bytes of ``value``."""
    try:
        return bcrypt.hashpw(_hash_input(value), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("ascii")
    except (TypeError, ValueError) as e:
        raise HashGenerationError(f"could not generate bcrypt hash: {e}") from e


def hash_matches(value: str, hashed: str) -> bool:
    """
    True if ``hashed`` is a bcrypt hash of ``value``.

    Raises:
        HashGenerationError: ``hashed`` is not a well-formed bcrypt hash
    """
    try:
        return bcrypt.checkpw(_hash_input(value), hashed.encode("ascii"))
    except (TypeError, ValueError) as e:
        raise HashGenerationError(f"could not compare bcrypt hash: {e}") from e


@dataclass(frozen=True)
class PasswordStateV0(StateRecord):
    result: str
    id: str | None = None
    keepers: dict[str, str | None] | None = None
    length: int | None = None
    special: bool | None = None
    upper: bool | None = None
    lower: bool | None = None
    number: bool | None = None
    min_numeric: int | None = None
    min_upper: int | None = None
    min_lower: int | None = None
    min_special: int | None = None
    override_special: str | None = None


@dataclass(frozen=True)
class PasswordStateV1(PasswordStateV0):
    bcrypt_hash: str | None = None


@dataclass(frozen=True)
class PasswordStateV2(StateRecord):
    result: str
    bcrypt_hash: str | None = None
    id: str | None = None
    keepers: dict[str, str | None] | None = None
    length: int | None = None
    special: bool | None = None
    upper: bool | None = None
    lower: bool | None = None
    number: bool | None = None
    numeric: bool | None = None
    min_numeric: int | None = None
    min_upper: int | None = None
    min_lower: int | None = None
    min_special: int | None = None
    override_special: str | None = None


@dataclass(frozen=True)
class PasswordStateV3(StateRecord):
    result: str
    bcrypt_hash: str
    id: str | None = None
    keepers: dict[str, str | None] | None = None
    length: int = 0
    special: bool = True
    upper: bool = True
    lower: bool = True
    number: bool = True
    numeric: bool = True
    min_numeric: int = 0
    min_upper: int = 0
    min_lower: int = 0
    min_special: int = 0
    override_special: str | None = None


def upgrade_password_v0_to_v1(old: PasswordStateV0) -> PasswordStateV1:
    return PasswordStateV1(**old.to_dict(), bcrypt_hash=generate_hash(old.result))


def upgrade_password_v1_to_v2(old: PasswordStateV1) -> PasswordStateV2:
    fields = fill_import_nulls(old.to_dict())
    fields["numeric"] = fields["number"]
    return PasswordStateV2(**fields)


def upgrade_password_v2_to_v3(old: PasswordStateV2) -> PasswordStateV3:
    fields = fill_import_nulls(old.to_dict())
    if fields.get("numeric") is None:
        fields["numeric"] = fields["number"]

    hashed = fields.get("bcrypt_hash")
    if not hashed:
        fields["bcrypt_hash"] = generate_hash(old.result)
        return PasswordStateV3(**fields)

    try:
        matches = hash_matches(old.result, hashed)
    except HashGenerationError as e:
        raise UpgradeError(
            f"password: stored bcrypt_hash could not be compared with the stored password: {e}"
        ) from e

    if not matches:
        logger.info("password: stored bcrypt_hash does not match the password; regenerating")
        fields["bcrypt_hash"] = generate_hash(old.result)
    return PasswordStateV3(**fields)


class PasswordResource(ResourceType):
    kind = "password"

    @property
    def schema(self) -> ResourceSchema:
        return ResourceSchema(
            kind=self.kind,
            version=3,
            description=(
                "Identical to string with the exception that the result is treated as sensitive "
                "and a bcrypt hash of it is kept alongside."
            ),
            attributes=tuple(
                string_like_attributes(sensitive=True)
                + [
                    computed_attribute(
                        "bcrypt_hash",
                        description="A bcrypt hash of the generated random string.",
                        sensitive=True,
                    ),
                    computed_attribute("id", description='A static value used internally, always "none".'),
                ]
            ),
        )

    @property
    def validators(self) -> tuple[Validator, ...]:
        return (int_at_least("length", 1), generation_spec_valid)

    @property
    def upgrade_chain(self) -> UpgradeChain:
        return UpgradeChain(
            self.kind,
            [
                UpgradeStep(0, PasswordStateV0, upgrade_password_v0_to_v1, "derive bcrypt_hash"),
                UpgradeStep(1, PasswordStateV1, upgrade_password_v1_to_v2, "add numeric; fill import nulls"),
                UpgradeStep(2, PasswordStateV2, upgrade_password_v2_to_v3, "verify bcrypt_hash"),
            ],
            current_version=3,
        )

    def create(self, planned: Mapping[str, Any], source: RandomSource | None = None) -> dict[str, Any]:
        result = compose_string(generation_spec_from(planned), source)
        state = dict(planned)
        state["result"] = result
        state["bcrypt_hash"] = generate_hash(result)
        state["id"] = "none"
        return state

    def import_state(self, import_id: str) -> dict[str, Any]:
        if not import_id:
            raise ImportStateError("password import id must be the existing value and cannot be empty")
        state = imported_string_fields(import_id)
        state["bcrypt_hash"] = generate_hash(import_id)
        state["id"] = "none"
        return state