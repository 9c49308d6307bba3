"""
Attribute plan rules.

Each rule looks at one attribute during planning and may inject a value into
the plan (``default`` phase) or mark the entity for replacement (``replace``
phase). The set is closed: schemas are built from the classes below.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from ..values import UNKNOWN, is_unknown
from .schema import Diagnostic, error

Phase = Literal["default", "replace"]


@dataclass(frozen=True)
class PlanRequest:
    """Everything a rule may look at for one attribute."""

    path: str
    config_value: Any
    state_value: Any
    plan_value: Any
    config: Mapping[str, Any]
    # None while the entity is being created.
    prior_state: Mapping[str, Any] | None
    # None while the entity is being destroyed.
    plan: Mapping[str, Any] | None


@dataclass
class RuleOutcome:
    plan_value: Any
    requires_replace: bool = False
    diagnostics: list[Diagnostic] = field(default_factory=list)


class PlanRule(ABC):
    phase: Phase = "default"

    @property
    @abstractmethod
    def description(self) -> str:
        ...

    @abstractmethod
    def modify(self, req: PlanRequest) -> RuleOutcome:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# -----------------------------------------------------------------------------
# Default phase
# -----------------------------------------------------------------------------


class DefaultValue(PlanRule):
    """Inject ``value`` into the plan when the attribute is null in config."""

    phase: Phase = "default"

    def __init__(self, value: Any):
        self.value = value

    @property
    def description(self) -> str:
        return f"If not configured, defaults to {self.value!r}"

    def modify(self, req: PlanRequest) -> RuleOutcome:
        if req.config_value is not None:
            return RuleOutcome(plan_value=req.plan_value)
        return RuleOutcome(plan_value=self.value)

    def __repr__(self) -> str:
        return f"DefaultValue({self.value!r})"


class UseStateForUnknown(PlanRule):
    """Keep the stored value of a computed attribute instead of planning it unknown."""

    phase: Phase = "default"

    @property
    def description(self) -> str:
        return "Once set, the value of this attribute in state will not change."

    def modify(self, req: PlanRequest) -> RuleOutcome:
        if req.prior_state is None or req.state_value is None:
            return RuleOutcome(plan_value=req.plan_value)
        if not is_unknown(req.plan_value):
            return RuleOutcome(plan_value=req.plan_value)
        if is_unknown(req.config_value):
            return RuleOutcome(plan_value=req.plan_value)
        return RuleOutcome(plan_value=req.state_value)


class PairedFieldReconciliation(PlanRule):
    """
    Keep two attributes that name the same setting in step.

    Both configured and different is an error naming both paths. One configured
    wins for both. Neither configured plans ``default`` for both.
    """

    phase: Phase = "default"

    def __init__(self, primary: str, alias: str, default: Any = True):
        self.primary = primary
        self.alias = alias
        self.default = default

    @property
    def description(self) -> str:
        return f"Ensures that {self.alias} and {self.primary} attributes are kept synchronised."

    def modify(self, req: PlanRequest) -> RuleOutcome:
        primary = req.config.get(self.primary)
        alias = req.config.get(self.alias)

        if is_unknown(primary) or is_unknown(alias):
            return RuleOutcome(plan_value=UNKNOWN)

        if primary is not None and alias is not None and primary != alias:
            # Reported once, from the primary attribute.
            diags = []
            if req.path == self.primary:
                diags.append(
                    error(
                        f"{self.alias} and {self.primary} are both configured with different values",
                        f"{self.alias} ({alias!r}) and {self.primary} ({primary!r}) must agree; "
                        f"{self.alias} is deprecated, use {self.primary} instead",
                        path=self.primary,
                    )
                )
            return RuleOutcome(plan_value=req.plan_value, diagnostics=diags)

        if primary is None and alias is None:
            return RuleOutcome(plan_value=self.default)
        if primary is None:
            return RuleOutcome(plan_value=alias)
        return RuleOutcome(plan_value=primary)

    def __repr__(self) -> str:
        return f"PairedFieldReconciliation({self.primary!r}, {self.alias!r})"


# -----------------------------------------------------------------------------
# Replace phase
# -----------------------------------------------------------------------------


class _ReplaceRule(PlanRule):
    phase: Phase = "replace"

    def modify(self, req: PlanRequest) -> RuleOutcome:
        if req.prior_state is None or req.plan is None:
            return RuleOutcome(plan_value=req.plan_value)
        if not is_unknown(req.plan_value) and req.plan_value == req.state_value:
            return RuleOutcome(plan_value=req.plan_value)
        return RuleOutcome(plan_value=req.plan_value, requires_replace=self.should_replace(req))

    @abstractmethod
    def should_replace(self, req: PlanRequest) -> bool:
        ...


class RequiresReplace(_ReplaceRule):
    """Any change to the attribute destroys and recreates the entity."""

    @property
    def description(self) -> str:
        return "If the value of this attribute changes, the resource will be destroyed and recreated."

    def should_replace(self, req: PlanRequest) -> bool:
        return True


class RequiresReplaceUnlessEmptyStringToNull(_ReplaceRule):
    """
    Replace on change, except for a stored ``""`` whose config is now null.

    Some releases stored an empty-string default for ``override_special``;
    removing it from config must not rotate the generated value.
    """

    @property
    def description(self) -> str:
        return 'Replace on modification unless updating from empty string ("") to null.'

    def should_replace(self, req: PlanRequest) -> bool:
        if is_unknown(req.config_value):
            return False
        if req.config_value is not None or req.state_value is None:
            return True
        return req.state_value != ""


class RequiresReplaceIfValuesNotNull(_ReplaceRule):
    """
    Map replacement that tolerates legacy storage of null-valued keys.

    Older state either dropped null-valued keys or stored the whole map as
    null when every value was null; neither shape forces replacement.
    """

    @property
    def description(self) -> str:
        return "If the value of this attribute changes, the resource will be destroyed and recreated."

    def should_replace(self, req: PlanRequest) -> bool:
        return keyed_map_requires_replace(req.config_value, req.state_value)


def keyed_map_requires_replace(config: Mapping[str, Any] | None, state: Mapping[str, Any] | None) -> bool:
    # A wholly unknown map has no known elements yet.
    if config is UNKNOWN:
        config = {}
    if config == state:
        return False

    config_map = dict(config or {})
    state_map = dict(state or {})

    if state is None:
        return any(v is not None for v in config_map.values())

    for key, value in config_map.items():
        if key not in state_map:
            if value is None:
                continue
            return True
        if is_unknown(value) or value != state_map[key]:
            return True

    return any(key not in config_map for key in state_map)

