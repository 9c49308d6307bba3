"""
Character classes used to compose random strings.

The special class can be overridden per spec; the other three are fixed.
"""

from __future__ import annotations

from enum import Enum


class CharClass(str, Enum):
    UPPER = "upper"
    LOWER = "lower"
    NUMERIC = "numeric"
    SPECIAL = "special"


DEFAULT_MEMBERS: dict[CharClass, str] = {
    CharClass.UPPER: "ABCDEFGHIJKLMNOPQRSTUVWXYZ",
    CharClass.LOWER: "abcdefghijklmnopqrstuvwxyz",
    CharClass.NUMERIC: "0123456789",
    CharClass.SPECIAL: "!@#$%&*()-_=+[]{}<>:?",
}

# Order in which selected classes are concatenated into the combined alphabet.
CLASS_ORDER = (CharClass.UPPER, CharClass.LOWER, CharClass.NUMERIC, CharClass.SPECIAL)


def class_members(char_class: CharClass, override_special: str | None = None) -> str:
    """Membership string for a class, honoring a non-empty special override."""
    if char_class is CharClass.SPECIAL and override_special:
        return override_special
    return DEFAULT_MEMBERS[char_class]


def combined_alphabet(selected: dict[CharClass, bool], override_special: str | None = None) -> str:
    """Concatenate the membership strings of every selected class."""
    return "".join(
        class_members(c, override_special) for c in CLASS_ORDER if selected.get(c, False)
    )


def classify(char: str, override_special: str | None = None) -> set[CharClass]:
    """Classes a single character belongs to (may be several with an override)."""
    return {c for c in CLASS_ORDER if char in class_members(c, override_special)}
