"""
Resource lifecycle: read (upgrade) -> plan -> apply.

Planning is pure. ``apply`` is the only step that consumes randomness, and it
refuses plans that carry error diagnostics.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .errors import InconsistentConfigurationError, UnresolvedValuesError
from .generate.source import RandomSource
from .plan.engine import PlanResult, plan_resource
from .resources import ResourceType, get_resource_type, list_resource_types
from .state.store import PersistedState
from .values import is_unknown, redact

logger = logging.getLogger(__name__)


def resource_type_for(kind: str) -> ResourceType:
    rtype = get_resource_type(kind)
    if rtype is None:
        raise ValueError(f"Unknown resource kind {kind!r} (known: {', '.join(list_resource_types())})")
    return rtype


def read_state(record: PersistedState) -> PersistedState:
    """Bring a persisted record up to its kind's current schema version."""
    rtype = resource_type_for(record.kind)
    chain = rtype.upgrade_chain
    if not chain.needs_upgrade(record.schema_version):
        return record
    attributes = chain.upgrade(record.attributes, record.schema_version)
    return PersistedState(kind=rtype.kind, schema_version=chain.current_version, attributes=attributes)


def plan(kind: str, config: Mapping[str, Any] | None, prior: PersistedState | None = None) -> PlanResult:
    """
    Plan one resource of ``kind``.

    ``prior`` is upgraded first when it was written with an older schema.
    """
    rtype = resource_type_for(kind)
    prior_attributes = None
    if prior is not None:
        if prior.kind != rtype.kind:
            raise ValueError(f"Persisted state is a {prior.kind!r}, configuration declares {rtype.kind!r}")
        prior_attributes = read_state(prior).attributes
    return plan_resource(rtype.schema, config, prior_attributes, rtype.validators)


def apply(plan: PlanResult, source: RandomSource | None = None, address: str | None = None) -> PersistedState | None:
    """
    Carry out a plan and return the new persisted state (None once deleted).

    Raises:
        InconsistentConfigurationError: the plan carries error diagnostics
        UnresolvedValuesError: a value is still unknown after create or update
    """
    label = address or plan.kind
    if plan.has_errors:
        raise InconsistentConfigurationError(label, [d for d in plan.diagnostics if d.is_error])

    rtype = resource_type_for(plan.kind)
    sensitive = plan.schema.sensitive_names

    if plan.action == "delete":
        logger.info("%s: removed from state", label)
        return None
    if plan.action == "noop":
        if plan.prior_state is None:
            return None
        attributes = dict(plan.prior_state)
    elif plan.action == "update":
        attributes = rtype.update(plan.planned, plan.prior_state or {})
    else:
        attributes = rtype.create(plan.planned, source)
        logger.info("%s: %s %s", label, "created" if plan.action == "create" else "replaced",
                    redact(attributes, sensitive))

    unresolved = [name for name, value in attributes.items() if is_unknown(value)]
    if unresolved:
        raise UnresolvedValuesError(f"{label}: apply left attributes unknown: {', '.join(unresolved)}")

    return PersistedState(kind=rtype.kind, schema_version=plan.schema.version, attributes=attributes)


def import_resource(kind: str, import_id: str) -> PersistedState:
    """
    State for a value that already exists, parsed from ``import_id``.

    Raises:
        ImportStateError: the identifier cannot be parsed, or the kind has no import
    """
    rtype = resource_type_for(kind)
    attributes = rtype.import_state(import_id)
    logger.info("%s: imported %s", rtype.kind, redact(attributes, rtype.schema.sensitive_names))
    return PersistedState(kind=rtype.kind, schema_version=rtype.schema.version, attributes=attributes)
