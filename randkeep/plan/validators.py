"""
Configuration validators.

A validator takes a resource's configuration mapping and returns diagnostics.
Validators skip values that are still unknown; those are checked again once
they are known.
"""

from __future__ import annotations

import ipaddress
from typing import Any, Callable, Mapping

from ..generate.compose import GenerationSpec
from ..values import is_unknown
from .schema import Diagnostic, error

Validator = Callable[[Mapping[str, Any]], list[Diagnostic]]


def int_at_least(name: str, minimum: int) -> Validator:
    def check(config: Mapping[str, Any]) -> list[Diagnostic]:
        value = config.get(name)
        if value is None or is_unknown(value) or not isinstance(value, int):
            return []
        if value < minimum:
            return [error("Invalid attribute value", f"{name} must be at least {minimum}, got {value}", path=name)]
        return []

    check.__name__ = f"int_at_least[{name}>={minimum}]"
    return check


def int_at_least_attribute(name: str, other: str) -> Validator:
    """``config[name] >= config[other]`` when both are set and known."""

    def check(config: Mapping[str, Any]) -> list[Diagnostic]:
        value = config.get(name)
        bound = config.get(other)
        if value is None or bound is None or is_unknown(value) or is_unknown(bound):
            return []
        if not isinstance(value, int) or not isinstance(bound, int):
            return []
        if value < bound:
            return [
                error(
                    "Invalid attribute value",
                    f"{name} ({value}) must be greater than or equal to {other} ({bound})",
                    path=name,
                )
            ]
        return []

    check.__name__ = f"int_at_least_attribute[{name}>={other}]"
    return check


def valid_cidr(name: str) -> Validator:
    def check(config: Mapping[str, Any]) -> list[Diagnostic]:
        value = config.get(name)
        if value is None or is_unknown(value) or not isinstance(value, str):
            return []
        try:
            ipaddress.ip_network(value, strict=False)
        except ValueError as e:
            return [error("Invalid CIDR range", f"{name}: {e}", path=name)]
        return []

    check.__name__ = f"valid_cidr[{name}]"
    return check


def list_of_strings(name: str) -> Validator:
    def check(config: Mapping[str, Any]) -> list[Diagnostic]:
        value = config.get(name)
        if value is None or is_unknown(value) or not isinstance(value, list):
            return []
        bad = [i for i, item in enumerate(value) if item is not None and not isinstance(item, str)]
        if bad:
            return [error("Invalid attribute value", f"{name} must contain only strings (bad indexes: {bad})", path=name)]
        return []

    check.__name__ = f"list_of_strings[{name}]"
    return check


def generation_spec_from(config: Mapping[str, Any]) -> GenerationSpec:
    """
    Build the generation spec a string-like config will compose with.

    Unset flags default to true and unset minimums to 0; ``numeric`` falls
    back to the deprecated ``number`` attribute.
    """

    def flag(name: str) -> bool:
        value = config.get(name)
        return True if value is None else bool(value)

    numeric = config.get("numeric")
    if numeric is None:
        numeric = config.get("number")

    return GenerationSpec(
        length=int(config.get("length") or 0),
        upper=flag("upper"),
        lower=flag("lower"),
        numeric=True if numeric is None else bool(numeric),
        special=flag("special"),
        min_upper=int(config.get("min_upper") or 0),
        min_lower=int(config.get("min_lower") or 0),
        min_numeric=int(config.get("min_numeric") or 0),
        min_special=int(config.get("min_special") or 0),
        override_special=config.get("override_special") or None,
    )


_SPEC_INPUTS = (
    "length", "upper", "lower", "numeric", "number", "special",
    "min_upper", "min_lower", "min_numeric", "min_special", "override_special",
)


def generation_spec_valid(config: Mapping[str, Any]) -> list[Diagnostic]:
    """Surface every composition problem of a string-like config as a diagnostic."""
    for name in _SPEC_INPUTS:
        value = config.get(name)
        if is_unknown(value):
            return []
        if name.startswith(("length", "min_")) and value is not None and not isinstance(value, int):
            return []
        if name == "override_special" and value is not None and not isinstance(value, str):
            return []
    if config.get("length") is None:
        return []

    spec = generation_spec_from(config)
    return [error("Invalid generation settings", message, path=path) for path, message in spec.problems()]
