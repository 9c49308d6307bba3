"""``pet``: a random pet name such as ``thoroughly-content-walrus``."""

from __future__ import annotations

from typing import Any, Mapping

from faker.providers.lorem.en_US import Provider as LoremProvider

from ..generate.source import RandomSource, SystemRandomSource, choice
from ..plan.rules import DefaultValue, RequiresReplace
from ..plan.schema import Attribute, ResourceSchema
from ..plan.validators import Validator, int_at_least
from .base import ResourceType, computed_attribute, keepers_attribute, replacing_input

# English word lists shipped with Faker, keyed by part of speech.
_WORDS = LoremProvider.parts_of_speech


def generate_name(words: int, separator: str, source: RandomSource) -> str:
    """
    ``words`` words joined by ``separator``: adverbs, then one adjective, then a noun.

    One word is just a noun; two are an adjective and a noun.
    """
    if words <= 0:
        return ""
    parts = [choice(source, _WORDS["noun"])]
    if words > 1:
        parts.insert(0, choice(source, _WORDS["adjective"]))
    for _ in range(words - 2):
        parts.insert(0, choice(source, _WORDS["adverb"]))
    return separator.join(parts)


class PetResource(ResourceType):
    kind = "pet"

    @property
    def schema(self) -> ResourceSchema:
        return ResourceSchema(
            kind=self.kind,
            version=0,
            description=(
                "Generates random pet names that are intended to be used as unique identifiers "
                "for other resources."
            ),
            attributes=(
                keepers_attribute(),
                Attribute(
                    "length",
                    "int",
                    optional=True,
                    computed=True,
                    description="The length (in words) of the pet name. Defaults to 2.",
                    rules=(DefaultValue(2), RequiresReplace()),
                ),
                replacing_input("prefix", "string", description="A string to prefix the name with."),
                Attribute(
                    "separator",
                    "string",
                    optional=True,
                    computed=True,
                    description='The character to separate words in the pet name. Defaults to "-".',
                    rules=(DefaultValue("-"), RequiresReplace()),
                ),
                computed_attribute("id", description="The random pet name."),
            ),
        )

    @property
    def validators(self) -> tuple[Validator, ...]:
        return (int_at_least("length", 1),)

    def create(self, planned: Mapping[str, Any], source: RandomSource | None = None) -> dict[str, Any]:
        separator = planned["separator"]
        prefix = planned.get("prefix") or ""
        name = generate_name(planned["length"], separator, source or SystemRandomSource()).lower()
        if prefix:
            name = f"{prefix}{separator}{name}"

        state = dict(planned)
        state["id"] = name
        return state
