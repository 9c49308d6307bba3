"""
State upgrade chain.

Persisted state carries the schema version it was written with. A chain holds
one step per version transition (N -> N+1); upgrading parses the stored
attributes into the typed model of the stored version, runs each step in
order, and returns the current-version attribute map.

A step must never alter the generated ``result``. Either every step succeeds
or nothing is returned.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Protocol

from ..errors import HashGenerationError, UpgradeChainBrokenError, UpgradeError

logger = logging.getLogger(__name__)


class StateModel(Protocol):
    """Typed attribute set for one schema version."""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StateModel":
        ...

    def to_dict(self) -> dict[str, Any]:
        ...


class StateRecord:
    """``from_dict``/``to_dict`` for per-version state dataclasses keyed by ``result``."""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        if "result" not in data:
            raise KeyError("result")
        return cls(**{f.name: data.get(f.name) for f in dataclasses.fields(cls)})

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in dataclasses.fields(self)}


@dataclass(frozen=True)
class UpgradeStep:
    """Transform from ``from_version`` to ``from_version + 1``."""

    from_version: int
    model: type
    fn: Callable[[StateModel], StateModel]
    description: str = ""

    @property
    def to_version(self) -> int:
        return self.from_version + 1


class UpgradeChain:
    def __init__(self, kind: str, steps: Iterable[UpgradeStep], current_version: int):
        self.kind = kind
        self.current_version = current_version
        self.steps = sorted(steps, key=lambda s: s.from_version)
        self._check_contiguous()

    def _check_contiguous(self) -> None:
        if not self.steps:
            return
        expected = self.steps[0].from_version
        for step in self.steps:
            if step.from_version != expected:
                raise UpgradeChainBrokenError(
                    f"{self.kind}: no upgrade step from schema version {expected} "
                    f"(next step starts at {step.from_version})"
                )
            expected += 1
        if expected != self.current_version:
            raise UpgradeChainBrokenError(
                f"{self.kind}: upgrade steps end at version {expected}, "
                f"current schema version is {self.current_version}"
            )

    @property
    def oldest_version(self) -> int:
        return self.steps[0].from_version if self.steps else self.current_version

    def needs_upgrade(self, from_version: int) -> bool:
        return from_version != self.current_version

    def upgrade(self, attributes: Mapping[str, Any], from_version: int) -> dict[str, Any]:
        """
        Upgrade stored ``attributes`` written at ``from_version``.

        Raises:
            UpgradeChainBrokenError: no path from ``from_version`` to current
            UpgradeError: a step failed or altered ``result``
        """
        if from_version == self.current_version:
            return dict(attributes)
        if from_version > self.current_version or from_version < self.oldest_version:
            raise UpgradeChainBrokenError(
                f"{self.kind}: cannot upgrade state from schema version {from_version} "
                f"(supported: {self.oldest_version}..{self.current_version})"
            )

        pending = [s for s in self.steps if s.from_version >= from_version]
        result_before = attributes.get("result")

        try:
            model = pending[0].model.from_dict(attributes)
        except (KeyError, TypeError, ValueError) as e:
            raise UpgradeError(
                f"{self.kind}: stored state does not match schema version {from_version}: {e}"
            ) from e

        for step in pending:
            try:
                model = step.fn(model)
            except (HashGenerationError, KeyError, TypeError, ValueError) as e:
                raise UpgradeError(
                    f"{self.kind}: upgrade from version {step.from_version} to {step.to_version} failed: {e}"
                ) from e

            if getattr(model, "result", None) != result_before:
                raise UpgradeError(
                    f"{self.kind}: upgrade from version {step.from_version} to {step.to_version} "
                    "altered the generated result"
                )
            logger.info(
                "%s: upgraded state from schema version %d to %d",
                self.kind,
                step.from_version,
                step.to_version,
            )

        return model.to_dict()
