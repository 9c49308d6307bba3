"""Random value generation (character classes, sources, string composition)."""

from .charset import CharClass, class_members, combined_alphabet
from .compose import GenerationSpec, compose_string
from .source import RandomSource, SeededRandomSource, SystemRandomSource

__all__ = [
    "CharClass",
    "class_members",
    "combined_alphabet",
    "GenerationSpec",
    "compose_string",
    "RandomSource",
    "SeededRandomSource",
    "SystemRandomSource",
]
