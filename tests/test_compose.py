from __future__ import annotations

import pytest

from randkeep.errors import InvalidSpecError, RandomSourceError
from randkeep.generate import CharClass, GenerationSpec, SystemRandomSource, compose_string
from randkeep.generate.charset import DEFAULT_MEMBERS, classify, combined_alphabet
from randkeep.generate.source import SeededRandomSource


def _count(result: str, char_class: CharClass, override_special: str | None = None) -> int:
    return sum(1 for c in result if char_class in classify(c, override_special))


# =============================================================================
# Character classes
# =============================================================================


def test_default_special_members() -> None:
    assert DEFAULT_MEMBERS[CharClass.SPECIAL] == "!@#$%&*()-_=+[]{}<>:?"


def test_combined_alphabet_concatenates_selected_classes_in_order() -> None:
    selected = {CharClass.UPPER: False, CharClass.LOWER: True, CharClass.NUMERIC: True, CharClass.SPECIAL: False}
    assert combined_alphabet(selected) == "abcdefghijklmnopqrstuvwxyz0123456789"


def test_empty_override_keeps_default_specials() -> None:
    selected = {CharClass.SPECIAL: True}
    assert combined_alphabet(selected, "") == DEFAULT_MEMBERS[CharClass.SPECIAL]
    assert combined_alphabet(selected, "^~") == "^~"


# =============================================================================
# Composition
# =============================================================================


@pytest.mark.parametrize(
    "spec",
    [
        GenerationSpec(length=16),
        GenerationSpec(length=12, min_upper=2, min_lower=2, min_numeric=2, min_special=2),
        GenerationSpec(length=8, special=False, min_numeric=8),
        GenerationSpec(length=30, upper=False, lower=False, min_special=5, override_special="^~|"),
    ],
)
def test_length_minimums_and_alphabet_hold(spec: GenerationSpec) -> None:
    """Every result has the requested length, meets each minimum and stays inside the alphabet."""
    alphabet = spec.alphabet()
    for _ in range(25):
        result = compose_string(spec, SystemRandomSource())
        assert len(result) == spec.length
        assert set(result) <= set(alphabet)
        for char_class, minimum in spec.minimums().items():
            assert _count(result, char_class, spec.override_special) >= minimum


def test_zero_length_returns_empty_string(source) -> None:
    assert compose_string(GenerationSpec(length=0), source) == ""


def test_numeric_only() -> None:
    spec = GenerationSpec(length=40, upper=False, lower=False, special=False)
    assert compose_string(spec).isdigit()


def test_override_special_replaces_default_specials(source) -> None:
    spec = GenerationSpec(length=20, upper=False, lower=False, numeric=False, override_special="!")
    assert compose_string(spec, source) == "!" * 20


def test_length_counts_code_points_for_multibyte_override(source) -> None:
    spec = GenerationSpec(length=10, upper=False, lower=False, numeric=False, override_special="é€ß")
    result = compose_string(spec, source)
    assert len(result) == 10
    assert set(result) <= {"é", "€", "ß"}


def test_same_seed_same_result() -> None:
    spec = GenerationSpec(length=24, min_special=3)
    first = compose_string(spec, SeededRandomSource("fixed"))
    second = compose_string(spec, SeededRandomSource("fixed"))
    assert first == second


# =============================================================================
# Invalid specs
# =============================================================================


def test_length_below_sum_of_minimums_is_rejected() -> None:
    spec = GenerationSpec(length=3, min_upper=2, min_lower=2)
    with pytest.raises(InvalidSpecError) as exc:
        compose_string(spec)
    assert "min_upper + min_lower + min_numeric + min_special (4)" in str(exc.value)


def test_every_problem_is_reported_together() -> None:
    spec = GenerationSpec(length=-1, min_numeric=-2)
    with pytest.raises(InvalidSpecError) as exc:
        compose_string(spec)
    assert len(exc.value.problems) == 2
    assert any("length must not be negative" in p for p in exc.value.problems)
    assert any("min_numeric must not be negative" in p for p in exc.value.problems)


def test_no_character_classes_selected() -> None:
    spec = GenerationSpec(length=5, upper=False, lower=False, numeric=False, special=False)
    with pytest.raises(InvalidSpecError, match="no character classes selected"):
        compose_string(spec)


def test_minimum_for_unselected_class_is_rejected() -> None:
    problems = GenerationSpec(length=5, special=False, min_special=1).problems()
    assert ("min_special", "min_special is 1 but special characters are not selected") in problems


def test_short_read_from_source_is_fatal(short_source) -> None:
    with pytest.raises(RandomSourceError):
        compose_string(GenerationSpec(length=8), short_source)


# =============================================================================
# Scenarios
# =============================================================================


def test_multibyte_special_minimum(source) -> None:
    spec = GenerationSpec(length=10, min_special=5, override_special="°")
    result = compose_string(spec, source)
    assert len(result) == 10
    assert result.count("°") >= 5


def test_every_minimum_with_override(source) -> None:
    spec = GenerationSpec(length=12, override_special="!#@", min_lower=2, min_upper=3, min_special=1, min_numeric=4)
    result = compose_string(spec, source)
    assert len(result) == 12
    assert sum(c.islower() for c in result) >= 2
    assert sum(c.isupper() for c in result) >= 3
    assert sum(c.isdigit() for c in result) >= 4
    assert sum(c in "!#@" for c in result) >= 1


def test_class_frequencies_follow_alphabet_shares() -> None:
    spec = GenerationSpec(length=20_000)
    result = compose_string(spec)
    alphabet_size = len(spec.alphabet())
    for char_class in CharClass:
        expected = len(DEFAULT_MEMBERS[char_class]) / alphabet_size
        observed = _count(result, char_class) / len(result)
        assert abs(observed - expected) < 0.03, char_class
