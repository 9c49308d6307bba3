"""
Constrained random string composition.

A string is built in three steps: per-class minimum draws, fill draws from the
combined alphabet, then a byte-keyed stable sort that shuffles positions.
Lengths are counted in code points, so multi-byte override characters count
once each.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import InvalidSpecError
from .charset import CLASS_ORDER, CharClass, class_members, combined_alphabet
from .source import RandomSource, SystemRandomSource, draw, read_bytes


@dataclass(frozen=True)
class GenerationSpec:
    length: int
    upper: bool = True
    lower: bool = True
    numeric: bool = True
    special: bool = True
    min_upper: int = 0
    min_lower: int = 0
    min_numeric: int = 0
    min_special: int = 0
    override_special: str | None = None

    def selected(self) -> dict[CharClass, bool]:
        return {
            CharClass.UPPER: self.upper,
            CharClass.LOWER: self.lower,
            CharClass.NUMERIC: self.numeric,
            CharClass.SPECIAL: self.special,
        }

    def minimums(self) -> dict[CharClass, int]:
        return {
            CharClass.UPPER: self.min_upper,
            CharClass.LOWER: self.min_lower,
            CharClass.NUMERIC: self.min_numeric,
            CharClass.SPECIAL: self.min_special,
        }

    def alphabet(self) -> str:
        return combined_alphabet(self.selected(), self.override_special)

    def validate(self) -> list[str]:
        """Return every violation (empty = valid)."""
        return [message for _, message in self.problems()]

    def problems(self) -> list[tuple[str, str]]:
        """Every violation as (attribute path, message)."""
        errors: list[tuple[str, str]] = []
        if self.length < 0:
            errors.append(("length", f"length must not be negative (got {self.length})"))

        minimums = self.minimums()
        for char_class, minimum in minimums.items():
            if minimum < 0:
                errors.append((f"min_{char_class.value}", f"min_{char_class.value} must not be negative (got {minimum})"))

        total = sum(minimums.values())
        if self.length >= 0 and total > self.length:
            errors.append((
                "length",
                f"length ({self.length}) cannot be less than "
                f"min_upper + min_lower + min_numeric + min_special ({total})",
            ))

        selected = self.selected()
        for char_class, minimum in minimums.items():
            if minimum > 0 and not selected[char_class]:
                errors.append((
                    f"min_{char_class.value}",
                    f"min_{char_class.value} is {minimum} but {char_class.value} characters are not selected",
                ))

        if self.length > 0 and not self.alphabet():
            errors.append((
                "length",
                "no character classes selected (at least one of upper, lower, numeric or special must be true)",
            ))

        return errors


def compose_string(spec: GenerationSpec, source: RandomSource | None = None) -> str:
    """
    Compose a random string honoring ``spec``.

    Raises:
        InvalidSpecError: spec violates its invariants (all problems listed)
        RandomSourceError: the source returned short or out-of-range values
    """
    problems = spec.validate()
    if problems:
        raise InvalidSpecError(problems)

    source = source or SystemRandomSource()

    chars: list[str] = []
    for char_class in CLASS_ORDER:
        minimum = spec.minimums()[char_class]
        if minimum > 0:
            chars.extend(_draw_from(class_members(char_class, spec.override_special), minimum, source))

    remaining = spec.length - len(chars)
    if remaining > 0:
        chars.extend(_draw_from(spec.alphabet(), remaining, source))

    return "".join(_byte_keyed_shuffle(chars, source))


def _draw_from(members: str, count: int, source: RandomSource) -> list[str]:
    return [members[draw(source, len(members))] for _ in range(count)]


def _byte_keyed_shuffle(chars: list[str], source: RandomSource) -> list[str]:
    # Ties keep their original relative order (sorted() is stable).
    keys = read_bytes(source, len(chars))
    order = sorted(range(len(chars)), key=lambda i: keys[i])
    return [chars[i] for i in order]
