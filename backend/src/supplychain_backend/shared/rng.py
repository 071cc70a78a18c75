"""Deterministic random helpers used across the game logic."""

from __future__ import annotations

import hashlib
from collections.abc import Sequence  # noqa: TC003
from random import Random
from typing import TypeVar

_T = TypeVar("_T")


def derive_seed(base_seed: int, *parts: object) -> int:
    """Combine *base_seed* with *parts* into a stable 64-bit seed."""
    material = ":".join(str(part) for part in (base_seed, *parts))
    digest = hashlib.sha256(material.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


class DeterministicRandomService:
    """Thin wrapper around :class:`random.Random` providing deterministic utilities."""

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._random = Random(seed)  # noqa: S311

    @property
    def seed(self) -> int | None:
        """Return the base seed for the service."""
        return self._seed

    @classmethod
    def for_draw(cls, base_seed: int, *parts: object) -> DeterministicRandomService:
        """Return a service seeded for a single named draw.

        The same ``(base_seed, *parts)`` always yields the same sequence, which
        keeps day processing a pure function of its inputs.
        """
        return cls(derive_seed(base_seed, *parts))

    def choice(self, population: Sequence[_T]) -> _T:
        """Return a deterministic choice from *population*."""
        if not population:
            msg = "Cannot choose from an empty population."
            raise ValueError(msg)
        return population[self._random.randrange(len(population))]


__all__ = ["DeterministicRandomService", "derive_seed"]
