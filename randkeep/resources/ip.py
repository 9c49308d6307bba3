"""``ip``: a random address inside a CIDR range."""

from __future__ import annotations

import ipaddress
from typing import Any, Mapping

from ..errors import InvalidSpecError
from ..generate.source import RandomSource, SystemRandomSource, choice, draw
from ..plan.rules import RequiresReplace, UseStateForUnknown
from ..plan.schema import Attribute, ResourceSchema
from ..plan.validators import Validator, valid_cidr
from .base import ResourceType, computed_attribute, keepers_attribute

ANY_RANGES = ("0.0.0.0/0", "::/0")


def random_address(cidr_range: str, source: RandomSource) -> str:
    try:
        network = ipaddress.ip_network(cidr_range, strict=False)
    except ValueError as e:
        raise InvalidSpecError(f"invalid cidr_range {cidr_range!r}: {e}") from e
    return str(network[draw(source, network.num_addresses)])


class IPResource(ResourceType):
    kind = "ip"

    @property
    def schema(self) -> ResourceSchema:
        return ResourceSchema(
            kind=self.kind,
            version=0,
            description="Generates a random IP address from a given CIDR range.",
            attributes=(
                keepers_attribute(),
                Attribute(
                    "cidr_range",
                    "string",
                    optional=True,
                    computed=True,
                    description=(
                        "A CIDR range from which to allocate the IP address. When unset either "
                        "0.0.0.0/0 or ::/0 is chosen at random and kept."
                    ),
                    rules=(UseStateForUnknown(), RequiresReplace()),
                ),
                computed_attribute("result", description="The random IP address allocated from cidr_range."),
                computed_attribute("id", description='A static value used internally, always "-".'),
            ),
        )

    @property
    def validators(self) -> tuple[Validator, ...]:
        return (valid_cidr("cidr_range"),)

    def create(self, planned: Mapping[str, Any], source: RandomSource | None = None) -> dict[str, Any]:
        source = source or SystemRandomSource()
        cidr_range = planned.get("cidr_range")
        if not isinstance(cidr_range, str) or not cidr_range:
            cidr_range = choice(source, ANY_RANGES)

        state = dict(planned)
        state["cidr_range"] = cidr_range
        state["result"] = random_address(cidr_range, source)
        state["id"] = "-"
        return state
