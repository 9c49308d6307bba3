"""
Resource type protocol.

A resource type separates planning (pure: schema, validators, upgrade chain)
from generation (``create``, the only place randomness is consumed). The
lifecycle module orchestrates the two.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from ..errors import ImportStateError
from ..generate.source import RandomSource
from ..plan.rules import RequiresReplace, RequiresReplaceIfValuesNotNull, UseStateForUnknown
from ..plan.schema import Attribute, AttrType, ResourceSchema
from ..plan.validators import Validator
from ..state.upgrade import UpgradeChain
from ..values import UNKNOWN


class ResourceType(ABC):
    """Base class for every kind of kept random value."""

    kind: str = ""

    @property
    @abstractmethod
    def schema(self) -> ResourceSchema:
        ...

    @property
    def validators(self) -> tuple[Validator, ...]:
        return ()

    @property
    def upgrade_chain(self) -> UpgradeChain:
        return UpgradeChain(self.kind, (), self.schema.version)

    # -------------------------------------------------------------------------
    # Impure phase: consumes randomness
    # -------------------------------------------------------------------------

    @abstractmethod
    def create(self, planned: Mapping[str, Any], source: RandomSource | None = None) -> dict[str, Any]:
        """
        Generate the value for a new entity.

        ``planned`` holds the planned attributes; every unknown value must be
        filled in the returned state.
        """
        ...

    def update(self, planned: Mapping[str, Any], prior: Mapping[str, Any]) -> dict[str, Any]:
        """Carry the plan forward; computed values stay as stored."""
        return {name: (prior.get(name) if value is UNKNOWN else value) for name, value in planned.items()}

    def import_state(self, import_id: str) -> dict[str, Any]:
        """Build state for an existing value from an import identifier."""
        raise ImportStateError(f"{self.kind} does not support import")

    def describe(self) -> str:
        return self.schema.description


def keepers_attribute() -> Attribute:
    return Attribute(
        "keepers",
        "map",
        optional=True,
        description=(
            "Arbitrary map of values that, when changed, will trigger recreation of the resource."
        ),
        rules=(RequiresReplaceIfValuesNotNull(),),
    )


def computed_attribute(name: str, type: AttrType = "string", description: str = "", sensitive: bool = False) -> Attribute:
    """Computed-only attribute whose stored value is kept until replacement."""
    return Attribute(
        name,
        type,
        computed=True,
        sensitive=sensitive,
        description=description,
        rules=(UseStateForUnknown(),),
    )


def replacing_input(
    name: str,
    type: AttrType,
    *,
    required: bool = False,
    description: str = "",
    extra_rules: tuple = (),
) -> Attribute:
    """Configurable attribute whose change forces a new value."""
    return Attribute(
        name,
        type,
        required=required,
        optional=not required,
        description=description,
        rules=extra_rules + (RequiresReplace(),),
    )
