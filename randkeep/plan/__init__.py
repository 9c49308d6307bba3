"""Attribute schemas, plan rules, validators and the plan-consistency engine."""

from .engine import AttributePlan, PlanResult, plan_resource
from .rules import (
    DefaultValue,
    PairedFieldReconciliation,
    PlanRule,
    RequiresReplace,
    RequiresReplaceIfValuesNotNull,
    RequiresReplaceUnlessEmptyStringToNull,
    UseStateForUnknown,
)
from .schema import Attribute, Diagnostic, ResourceSchema

__all__ = [
    "AttributePlan",
    "PlanResult",
    "plan_resource",
    "DefaultValue",
    "PairedFieldReconciliation",
    "PlanRule",
    "RequiresReplace",
    "RequiresReplaceIfValuesNotNull",
    "RequiresReplaceUnlessEmptyStringToNull",
    "UseStateForUnknown",
    "Attribute",
    "Diagnostic",
    "ResourceSchema",
]
