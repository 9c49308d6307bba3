"""
Plan-consistency engine.

Given a resource schema, the desired configuration and the prior state, work
out the planned attribute values, whether the entity must be replaced, and
every diagnostic. All attributes are evaluated before returning so that one
pass reports every problem.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Mapping

from ..values import UNKNOWN, is_unknown, redact
from .rules import PlanRequest
from .schema import Attribute, Diagnostic, ResourceSchema, error, has_errors, warning
from .validators import Validator

logger = logging.getLogger(__name__)

Action = Literal["create", "update", "replace", "delete", "noop"]


@dataclass(frozen=True)
class AttributePlan:
    path: str
    value: Any
    requires_replace: bool = False


@dataclass
class PlanResult:
    """Outcome of planning one resource."""

    schema: ResourceSchema
    action: Action
    attributes: dict[str, AttributePlan] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    prior_state: dict[str, Any] | None = None
    config: dict[str, Any] | None = None

    @property
    def kind(self) -> str:
        return self.schema.kind

    @property
    def planned(self) -> dict[str, Any]:
        return {path: ap.value for path, ap in self.attributes.items()}

    @property
    def requires_replace(self) -> list[str]:
        return [path for path, ap in self.attributes.items() if ap.requires_replace]

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

    @property
    def ok(self) -> bool:
        return not self.has_errors

    def summary(self) -> str:
        """Human-readable summary of what apply would do; sensitive values hidden."""
        lines = [f"{self.kind}: {self.action}"]
        sensitive = self.schema.sensitive_names
        before = redact(self.prior_state, sensitive)
        after = redact(self.planned, sensitive)
        forced = set(self.requires_replace)
        for path in self.schema.names:
            old = before.get(path)
            new = after.get(path)
            if self.action not in ("create", "delete") and not is_unknown(new) and old == new:
                continue
            if self.action == "delete":
                new = None
            shown = "(known after apply)" if is_unknown(new) else repr(new)
            line = f"  {path}: {old!r} -> {shown}" if self.prior_state is not None else f"  {path}: {shown}"
            if path in forced:
                line += " (forces replacement)"
            lines.append(line)
        for diag in self.diagnostics:
            lines.append(f"  {diag}")
        return "\n".join(lines)


_PY_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "int": (int,),
    "bool": (bool,),
    "map": (dict,),
    "list": (list,),
}


def _type_ok(attr: Attribute, value: Any) -> bool:
    if value is None or value is UNKNOWN:
        return True
    if attr.type == "int" and isinstance(value, bool):
        return False
    if not isinstance(value, _PY_TYPES[attr.type]):
        return False
    if attr.type == "map":
        return all(isinstance(k, str) for k in value) and all(
            v is None or v is UNKNOWN or isinstance(v, str) for v in value.values()
        )
    return True


def check_conformance(schema: ResourceSchema, config: Mapping[str, Any]) -> tuple[dict[str, Any], list[Diagnostic]]:
    """
    Check a configuration against the schema.

    Returns the configuration with offending values dropped, and diagnostics
    for unknown attributes, missing required ones, computed-only attributes
    that were set, wrongly typed values and deprecated attributes in use.
    """
    diagnostics: list[Diagnostic] = []
    effective: dict[str, Any] = {}

    for name in config:
        if schema.attribute(name) is None:
            diagnostics.append(error("Unsupported attribute", f"{schema.kind} has no attribute named {name!r}", path=name))

    for attr in schema.attributes:
        value = config.get(attr.name)
        if attr.computed_only:
            if value is not None:
                diagnostics.append(
                    error("Invalid configuration", f"{attr.name} is computed and cannot be set", path=attr.name)
                )
            continue
        if value is None:
            if attr.required:
                diagnostics.append(error("Missing required attribute", f"{attr.name} must be set", path=attr.name))
            continue
        if not _type_ok(attr, value):
            diagnostics.append(
                error(
                    "Incorrect attribute value type",
                    f"{attr.name} must be of type {attr.type}, got {type(value).__name__}",
                    path=attr.name,
                )
            )
            continue
        if attr.deprecated:
            diagnostics.append(warning("Deprecated attribute", attr.deprecated, path=attr.name))
        effective[attr.name] = value

    return effective, diagnostics


def _initial_value(attr: Attribute, config: Mapping[str, Any]) -> Any:
    if attr.configurable and config.get(attr.name) is not None:
        return config[attr.name]
    if attr.computed:
        return UNKNOWN
    return None


def _run_phase(
    schema: ResourceSchema,
    phase: str,
    config: Mapping[str, Any],
    prior_state: Mapping[str, Any] | None,
    planned: dict[str, Any],
    replace_paths: set[str],
    diagnostics: list[Diagnostic],
) -> None:
    for attr in schema.attributes:
        for rule in attr.rules:
            if rule.phase != phase:
                continue
            req = PlanRequest(
                path=attr.name,
                config_value=config.get(attr.name),
                state_value=(prior_state or {}).get(attr.name),
                plan_value=planned.get(attr.name),
                config=config,
                prior_state=prior_state,
                plan=dict(planned),
            )
            outcome = rule.modify(req)
            planned[attr.name] = outcome.plan_value
            diagnostics.extend(outcome.diagnostics)
            if outcome.requires_replace:
                replace_paths.add(attr.name)
                logger.debug("%s.%s: %r requires replacement", schema.kind, attr.name, rule)


def plan_resource(
    schema: ResourceSchema,
    config: Mapping[str, Any] | None,
    prior_state: Mapping[str, Any] | None,
    validators: Iterable[Validator] = (),
) -> PlanResult:
    """
    Plan one resource.

    ``config`` is None when the resource is being removed; ``prior_state`` is
    None when it is being created. Diagnostics never raise: a result carrying
    errors must not be applied.
    """
    prior = dict(prior_state) if prior_state is not None else None

    if config is None:
        action: Action = "delete" if prior is not None else "noop"
        logger.debug("%s: %s", schema.kind, action)
        return PlanResult(schema=schema, action=action, prior_state=prior, config=None)

    effective, diagnostics = check_conformance(schema, config)
    for validator in validators:
        diagnostics.extend(validator(effective))

    planned = {attr.name: _initial_value(attr, effective) for attr in schema.attributes}
    replace_paths: set[str] = set()

    _run_phase(schema, "default", effective, prior, planned, replace_paths, diagnostics)
    _run_phase(schema, "replace", effective, prior, planned, replace_paths, diagnostics)

    if prior is None:
        action = "create"
    elif replace_paths:
        action = "replace"
        for attr in schema.attributes:
            if attr.computed_only:
                planned[attr.name] = UNKNOWN
    elif all(planned[name] == prior.get(name) for name in schema.names):
        action = "noop"
    else:
        action = "update"

    attributes = {
        name: AttributePlan(path=name, value=planned[name], requires_replace=name in replace_paths)
        for name in schema.names
    }
    result = PlanResult(
        schema=schema,
        action=action,
        attributes=attributes,
        diagnostics=diagnostics,
        prior_state=prior,
        config=dict(config),
    )
    logger.debug(
        "%s: %s planned=%s diagnostics=%d",
        schema.kind,
        action,
        redact(result.planned, schema.sensitive_names),
        len(diagnostics),
    )
    return result
