"""
``string``: a random string kept stable in state.

Schema version history:

    v0  minimum counts could be stored as "" (older flat storage)
    v1  minimum counts are integers or null
    v2  ``numeric`` added (replaces the deprecated ``number``); null inputs
        left behind by early imports are filled in
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..errors import ImportStateError
from ..generate.compose import compose_string
from ..generate.source import RandomSource
from ..plan.rules import (
    DefaultValue,
    PairedFieldReconciliation,
    RequiresReplace,
    RequiresReplaceUnlessEmptyStringToNull,
)
from ..plan.schema import Attribute, ResourceSchema
from ..plan.validators import Validator, generation_spec_from, generation_spec_valid, int_at_least
from ..state.upgrade import StateRecord, UpgradeChain, UpgradeStep
from .base import ResourceType, computed_attribute, keepers_attribute

NUMBER_DEPRECATION = "Use numeric instead. number will be removed in a future release."

_MINIMUMS = ("min_numeric", "min_upper", "min_lower", "min_special")
_FLAGS = ("special", "upper", "lower", "number")


@dataclass(frozen=True)
class StringStateV0(StateRecord):
    result: str
    id: str | None = None
    keepers: dict[str, str | None] | None = None
    length: int | None = None
    special: bool | None = None
    upper: bool | None = None
    lower: bool | None = None
    number: bool | None = None
    min_numeric: int | str | None = None
    min_upper: int | str | None = None
    min_lower: int | str | None = None
    min_special: int | str | None = None
    override_special: str | None = None


@dataclass(frozen=True)
class StringStateV1(StateRecord):
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
class StringStateV2(StateRecord):
    result: str
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


def _count(value: int | str | None) -> int:
    if value is None or value == "":
        return 0
    return int(value)


def upgrade_string_v0_to_v1(old: StringStateV0) -> StringStateV1:
    fields = old.to_dict()
    for name in _MINIMUMS:
        fields[name] = _count(fields[name])
    return StringStateV1(**fields)


def fill_import_nulls(fields: dict[str, Any]) -> dict[str, Any]:
    """
    Replace nulls left by early imports with the values those imports meant.

    ``length`` becomes the code-point length of ``result``, minimums become 0
    and class flags become true, so the upgraded state does not force a new
    value on the next plan.
    """
    out = dict(fields)
    if out.get("length") is None:
        out["length"] = len(out["result"])
    for name in _MINIMUMS:
        if out.get(name) is None:
            out[name] = 0
    for name in _FLAGS:
        if out.get(name) is None:
            out[name] = True
    return out


def upgrade_string_v1_to_v2(old: StringStateV1) -> StringStateV2:
    fields = fill_import_nulls(old.to_dict())
    fields["numeric"] = fields["number"]
    return StringStateV2(**fields)


def string_like_attributes(*, sensitive: bool) -> list[Attribute]:
    """Input attributes shared by ``string`` and ``password``."""
    flag_rules = (DefaultValue(True), RequiresReplace())
    minimum_rules = (DefaultValue(0), RequiresReplace())
    return [
        keepers_attribute(),
        Attribute(
            "length",
            "int",
            required=True,
            description=(
                "The length of the string desired. The minimum value for length is 1 and, length must "
                "also be >= (min_upper + min_lower + min_numeric + min_special)."
            ),
            rules=(RequiresReplace(),),
        ),
        Attribute(
            "special",
            "bool",
            optional=True,
            computed=True,
            description="Include special characters in the result. These are `!@#$%&*()-_=+[]{}<>:?`.",
            rules=flag_rules,
        ),
        Attribute(
            "upper",
            "bool",
            optional=True,
            computed=True,
            description="Include uppercase alphabet characters in the result.",
            rules=flag_rules,
        ),
        Attribute(
            "lower",
            "bool",
            optional=True,
            computed=True,
            description="Include lowercase alphabet characters in the result.",
            rules=flag_rules,
        ),
        Attribute(
            "number",
            "bool",
            optional=True,
            computed=True,
            deprecated=NUMBER_DEPRECATION,
            description="Include numeric characters in the result. Deprecated alias of numeric.",
            rules=(PairedFieldReconciliation("numeric", "number"), RequiresReplace()),
        ),
        Attribute(
            "numeric",
            "bool",
            optional=True,
            computed=True,
            description="Include numeric characters in the result.",
            rules=(PairedFieldReconciliation("numeric", "number"), RequiresReplace()),
        ),
        Attribute(
            "min_numeric",
            "int",
            optional=True,
            computed=True,
            description="Minimum number of numeric characters in the result.",
            rules=minimum_rules,
        ),
        Attribute(
            "min_upper",
            "int",
            optional=True,
            computed=True,
            description="Minimum number of uppercase alphabet characters in the result.",
            rules=minimum_rules,
        ),
        Attribute(
            "min_lower",
            "int",
            optional=True,
            computed=True,
            description="Minimum number of lowercase alphabet characters in the result.",
            rules=minimum_rules,
        ),
        Attribute(
            "min_special",
            "int",
            optional=True,
            computed=True,
            description="Minimum number of special characters in the result.",
            rules=minimum_rules,
        ),
        Attribute(
            "override_special",
            "string",
            optional=True,
            description=(
                "Supply your own list of special characters to use for string generation. This overrides "
                "the default character list in the special argument."
            ),
            rules=(RequiresReplaceUnlessEmptyStringToNull(),),
        ),
        computed_attribute(
            "result",
            description="The generated random string.",
            sensitive=sensitive,
        ),
    ]


def imported_string_fields(value: str) -> dict[str, Any]:
    """State for a value that was generated elsewhere, with every input at its default."""
    return {
        "keepers": None,
        "length": len(value),
        "special": True,
        "upper": True,
        "lower": True,
        "number": True,
        "numeric": True,
        "min_numeric": 0,
        "min_upper": 0,
        "min_lower": 0,
        "min_special": 0,
        "override_special": None,
        "result": value,
    }


class StringResource(ResourceType):
    kind = "string"

    @property
    def schema(self) -> ResourceSchema:
        return ResourceSchema(
            kind=self.kind,
            version=2,
            description=(
                "Generates a random permutation of alphanumeric characters and optionally special "
                "characters. The value is not treated as sensitive; use password for secrets."
            ),
            attributes=tuple(
                string_like_attributes(sensitive=False)
                + [computed_attribute("id", description="The generated random string.")]
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
                UpgradeStep(0, StringStateV0, upgrade_string_v0_to_v1, "empty minimum counts become 0"),
                UpgradeStep(1, StringStateV1, upgrade_string_v1_to_v2, "add numeric; fill import nulls"),
            ],
            current_version=2,
        )

    def create(self, planned: Mapping[str, Any], source: RandomSource | None = None) -> dict[str, Any]:
        result = compose_string(generation_spec_from(planned), source)
        state = dict(planned)
        state["result"] = result
        state["id"] = result
        return state

    def import_state(self, import_id: str) -> dict[str, Any]:
        if not import_id:
            raise ImportStateError("string import id must be the existing value and cannot be empty")
        state = imported_string_fields(import_id)
        state["id"] = import_id
        return state
