"""Norm diagnostics for state vectors."""

from __future__ import annotations

import math

import torch


def squared_norm(state: torch.Tensor) -> torch.Tensor:
    """
    Compute <psi|psi> for a state tensor of shape (..., dim).

    This is the quantity the branching operations treat as the "norm" of a
    state: the total probability mass carried by its amplitudes.

    Raises
    ------
    ValueError
        If state has fewer than 1 dimension.
    """
    if state.dim() < 1:
        raise ValueError("squared_norm expects a tensor with at least 1 dimension.")

    return (state.conj() * state).sum(dim=-1).real


def assert_squared_norm(
    state: torch.Tensor,
    expected: float,
    atol: float = 1e-6,
) -> None:
    """
    Assert that a 1D statevector carries the expected probability mass.

    Used after a Kraus branch is committed: renormalization must restore the
    squared norm the state had before the channel was applied.

    Raises
    ------
    ValueError
        If the squared norm is non-finite or differs from ``expected`` by more
        than ``atol``.
    """
    value = float(squared_norm(state))
    if not math.isfinite(value):
        raise ValueError("State squared norm is non-finite.")
    if abs(value - expected) > atol:
        raise ValueError(
            f"State squared norm {value:.12g} differs from expected "
            f"{expected:.12g} by more than {atol}."
        )
