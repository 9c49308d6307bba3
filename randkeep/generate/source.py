"""
Randomness sources.

Generators never touch process-wide random state: a source is passed in.
``SystemRandomSource`` is the default and is backed by ``secrets``.
``SeededRandomSource`` exists only for inputs that document a seed.
"""

from __future__ import annotations

import random
import secrets
from typing import Protocol, Sequence, TypeVar, runtime_checkable

from ..errors import RandomSourceError

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """Protocol for the randomness handed to generators."""

    def randbelow(self, n: int) -> int:
        """Uniform integer in ``[0, n)``."""
        ...

    def token_bytes(self, n: int) -> bytes:
        """``n`` random bytes."""
        ...


class SystemRandomSource:
    """Cryptographically secure source backed by the platform CSPRNG."""

    def randbelow(self, n: int) -> int:
        return secrets.randbelow(n)

    def token_bytes(self, n: int) -> bytes:
        return secrets.token_bytes(n)


class SeededRandomSource:
    """
    Deterministic source for a documented ``seed`` input.

    Each instance owns its own ``random.Random``; identical seeds yield
    identical sequences within one Python version.
    """

    def __init__(self, seed: str):
        self.seed = seed
        self._rng = random.Random(seed)

    def randbelow(self, n: int) -> int:
        return self._rng.randrange(n)

    def token_bytes(self, n: int) -> bytes:
        return self._rng.randbytes(n)


def source_for_seed(seed: str | None, fallback: RandomSource | None = None) -> RandomSource:
    """Seeded source when a non-empty seed is configured, ``fallback`` (or the secure source) otherwise."""
    if seed:
        return SeededRandomSource(seed)
    return fallback or SystemRandomSource()


def read_bytes(source: RandomSource, n: int) -> bytes:
    """Read exactly ``n`` bytes or raise ``RandomSourceError``."""
    data = source.token_bytes(n)
    if len(data) != n:
        raise RandomSourceError(
            f"random source returned {len(data)} bytes, {n} requested"
        )
    return data


def draw(source: RandomSource, n: int) -> int:
    """Uniform index in ``[0, n)`` with a range check on the source's answer."""
    if n <= 0:
        raise ValueError(f"cannot draw from an empty range (n={n})")
    idx = source.randbelow(n)
    if not 0 <= idx < n:
        raise RandomSourceError(f"random source returned {idx}, expected [0, {n})")
    return idx


def choice(source: RandomSource, items: Sequence[T]) -> T:
    return items[draw(source, len(items))]


def permutation(source: RandomSource, n: int) -> list[int]:
    """Uniform permutation of ``range(n)`` (Fisher-Yates)."""
    perm = list(range(n))
    for i in range(n - 1, 0, -1):
        j = draw(source, i + 1)
        perm[i], perm[j] = perm[j], perm[i]
    return perm
