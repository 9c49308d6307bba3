"""``shuffle``: a random permutation of a list of strings."""

from __future__ import annotations

from typing import Any, Mapping

from ..generate.source import RandomSource, permutation, source_for_seed
from ..plan.schema import ResourceSchema
from ..plan.validators import Validator, int_at_least, list_of_strings
from .base import ResourceType, computed_attribute, keepers_attribute, replacing_input


def shuffle_items(items: list[str], count: int, source: RandomSource) -> list[str]:
    """
    ``count`` items drawn from successive permutations of ``items``.

    Asking for more items than the input holds keeps permuting until filled.
    """
    if count == 0 or not items:
        return []
    out: list[str] = []
    while len(out) < count:
        for i in permutation(source, len(items)):
            out.append(items[i])
            if len(out) >= count:
                break
    return out


class ShuffleResource(ResourceType):
    kind = "shuffle"

    @property
    def schema(self) -> ResourceSchema:
        return ResourceSchema(
            kind=self.kind,
            version=0,
            description="Generates a random permutation of a list of strings given as an argument.",
            attributes=(
                keepers_attribute(),
                replacing_input("input", "list", required=True, description="The list of strings to shuffle."),
                replacing_input(
                    "seed",
                    "string",
                    description="Arbitrary string with which to seed the random number generator.",
                ),
                replacing_input(
                    "result_count",
                    "int",
                    description="The number of results to return. Defaults to the number of items in the input list.",
                ),
                computed_attribute("result", "list", description="Random permutation of the list of strings."),
                computed_attribute("id", description='A static value used internally, always "-".'),
            ),
        )

    @property
    def validators(self) -> tuple[Validator, ...]:
        return (list_of_strings("input"), int_at_least("result_count", 0))

    def create(self, planned: Mapping[str, Any], source: RandomSource | None = None) -> dict[str, Any]:
        items = list(planned["input"])
        count = planned.get("result_count")
        if count is None:
            count = len(items)

        state = dict(planned)
        state["result"] = shuffle_items(items, count, source_for_seed(planned.get("seed"), source))
        state["id"] = "-"
        return state
