"""Pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from randkeep import lifecycle
from randkeep.generate.source import SeededRandomSource
from randkeep.state.store import PersistedState


class ShortReadSource:
    """A source that always returns one byte fewer than requested."""

    def randbelow(self, n: int) -> int:
        return 0

    def token_bytes(self, n: int) -> bytes:
        return b"\x00" * max(n - 1, 0)


@pytest.fixture
def source() -> SeededRandomSource:
    """Deterministic source so failures can be reproduced."""
    return SeededRandomSource("randkeep-tests")


@pytest.fixture
def short_source() -> ShortReadSource:
    return ShortReadSource()


@pytest.fixture
def created():
    """Plan and apply a new resource, returning its persisted state."""

    def _created(kind: str, config: dict, source=None) -> PersistedState:
        result = lifecycle.plan(kind, config, None)
        assert result.ok, [str(d) for d in result.diagnostics]
        record = lifecycle.apply(result, source)
        assert record is not None
        return record

    return _created

