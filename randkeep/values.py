"""
Attribute value helpers.

Configuration, plan and state values are plain Python values. ``None`` is a
null value; ``UNKNOWN`` marks a value that will only be known after apply.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping


class _Unknown:
    _instance: "_Unknown | None" = None

    def __new__(cls) -> "_Unknown":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNKNOWN"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Unknown":
        return self

    def __deepcopy__(self, memo: dict) -> "_Unknown":
        return self


UNKNOWN = _Unknown()

SENSITIVE_PLACEHOLDER = "<sensitive>"


def is_unknown(value: Any) -> bool:
    """True if the value, or any element of a collection value, is unknown."""
    if value is UNKNOWN:
        return True
    if isinstance(value, dict):
        return any(is_unknown(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return any(is_unknown(v) for v in value)
    return False


def is_known(value: Any) -> bool:
    return not is_unknown(value)


def redact(attributes: Mapping[str, Any] | None, sensitive: Iterable[str]) -> dict[str, Any]:
    """Copy of an attribute mapping with sensitive values hidden, for logs and output."""
    if attributes is None:
        return {}
    hidden = set(sensitive)
    out: dict[str, Any] = {}
    for key, value in attributes.items():
        if key in hidden and value is not None and value is not UNKNOWN:
            out[key] = SENSITIVE_PLACEHOLDER
        else:
            out[key] = value
    return out
