"""``integer``: a random integer in ``[min, max]``, deterministic when ``seed`` is set."""

from __future__ import annotations

from typing import Any, Mapping

from ..errors import ImportStateError, InvalidSpecError
from ..generate.source import RandomSource, draw, source_for_seed
from ..plan.schema import ResourceSchema
from ..plan.validators import Validator, int_at_least_attribute
from .base import ResourceType, computed_attribute, keepers_attribute, replacing_input


class IntegerResource(ResourceType):
    kind = "integer"

    @property
    def schema(self) -> ResourceSchema:
        return ResourceSchema(
            kind=self.kind,
            version=0,
            description="Generates a random integer value from a range of possible values.",
            attributes=(
                keepers_attribute(),
                replacing_input("min", "int", required=True, description="The minimum inclusive value of the range."),
                replacing_input("max", "int", required=True, description="The maximum inclusive value of the range."),
                replacing_input("seed", "string", description="A custom seed to always produce the same value."),
                computed_attribute("result", "int", description="The random integer result."),
                computed_attribute("id", description="The string representation of the integer result."),
            ),
        )

    @property
    def validators(self) -> tuple[Validator, ...]:
        return (int_at_least_attribute("max", "min"),)

    def create(self, planned: Mapping[str, Any], source: RandomSource | None = None) -> dict[str, Any]:
        low, high = planned["min"], planned["max"]
        if high < low:
            raise InvalidSpecError(
                "The minimum (min) value needs to be smaller than or equal to maximum (max) value."
            )
        rng = source_for_seed(planned.get("seed"), source)
        number = low + draw(rng, high - low + 1)

        state = dict(planned)
        state["result"] = number
        state["id"] = str(number)
        return state

    def import_state(self, import_id: str) -> dict[str, Any]:
        parts = import_id.split(",")
        if len(parts) not in (3, 4):
            raise ImportStateError(
                "Invalid import usage: expecting {result},{min},{max} or {result},{min},{max},{seed}"
            )

        values = []
        for label, text in zip(("value", "min value", "max value"), parts[:3]):
            try:
                values.append(int(text))
            except ValueError as e:
                raise ImportStateError(f"The {label} supplied could not be parsed as an integer: {text!r}") from e

        result, low, high = values
        return {
            "keepers": None,
            "min": low,
            "max": high,
            "seed": parts[3] if len(parts) == 4 else None,
            "result": result,
            "id": parts[0],
        }
