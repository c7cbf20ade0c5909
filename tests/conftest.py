"""Pytest configuration and shared fixtures for qbranch tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- A scripted RandomSource so branch selection can be pinned to exact draws
- A recording operation for observing delegation and copies
- Capture of qbranch log output
"""

import logging
import os
from io import StringIO
from typing import Iterator, List, Sequence

import numpy as np
import pytest
import torch

import qbranch
from qbranch.logging import configure_logging
from qbranch.operations import QuantumOperation, RandomSource


class ScriptedRandom(RandomSource):
    """RandomSource that returns a fixed sequence of draws."""

    def __init__(self, draws: Sequence[float]) -> None:
        self._draws = list(draws)
        self.calls = 0

    def draw(self) -> float:
        if self.calls >= len(self._draws):
            raise AssertionError("ScriptedRandom ran out of draws")
        value = self._draws[self.calls]
        self.calls += 1
        return value


class RecordingOperation(QuantumOperation):
    """Appends its label to a shared journal on every apply."""

    def __init__(self, journal: List[str], label: str = "op") -> None:
        self.journal = journal
        self.label = label

    def apply(self, state) -> None:
        self.journal.append(self.label)

    def copy(self) -> "RecordingOperation":
        return RecordingOperation(self.journal, self.label)


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function")
def torch_rng() -> torch.Generator:
    """Provide a deterministic torch RNG for tests."""
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    device = qbranch.default_device().as_torch_device()
    generator = torch.Generator(device=device)
    generator.manual_seed(seed)
    return generator


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds(rng: np.random.Generator, torch_rng: torch.Generator) -> None:
    """Set global numpy and torch seeds for every test."""
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    np.random.seed(seed)
    torch.manual_seed(seed)


@pytest.fixture
def scripted_random():
    """Factory for ScriptedRandom: ``scripted_random([0.3, 0.9])``."""
    return ScriptedRandom


@pytest.fixture
def recording_operation():
    """Factory for RecordingOperation: ``recording_operation(journal, "a")``."""
    return RecordingOperation


@pytest.fixture
def log_stream() -> Iterator[StringIO]:
    """Route every qbranch logger to a StringIO for the duration of a test."""
    stream = StringIO()
    configure_logging(level=logging.WARNING, stream=stream)
    try:
        yield stream
    finally:
        configure_logging(level=logging.WARNING)
