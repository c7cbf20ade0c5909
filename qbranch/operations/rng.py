"""Per-operation uniform random sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import torch


class RandomSource(ABC):
    """A stream of uniform draws in [0, 1), owned by a single operation."""

    @abstractmethod
    def draw(self) -> float:
        """Return the next uniform draw in [0, 1)."""


class UniformRandom(RandomSource):
    """
    RandomSource backed by a private ``torch.Generator``.

    Parameters
    ----------
    seed:
        Seed for the generator. If None, the generator is seeded from a
        non-deterministic source, so two unseeded instances produce
        independent streams.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._generator = torch.Generator(device="cpu")
        if seed is None:
            self._seed = self._generator.seed()
        else:
            self._seed = int(seed)
            self._generator.manual_seed(self._seed)

    @property
    def seed(self) -> int:
        """The seed this stream was initialized with."""
        return self._seed

    def draw(self) -> float:
        return torch.rand(1, generator=self._generator, dtype=torch.float64).item()

    def __repr__(self) -> str:
        return f"UniformRandom(seed={self._seed})"
