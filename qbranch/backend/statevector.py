"""Statevector backend: state construction and dense matrix application.

Convention: qubit 0 is the least significant bit of the computational basis
index. For a matrix acting on ``target_qubits = (t0, t1, ...)`` the matrix
index is ordered |t0 t1 ...>, i.e. t0 is the most significant bit.
"""

from __future__ import annotations

import math
from typing import Sequence

import torch

from ..core.device import Device, resolve_device
from ..diagnostics import is_debug_enabled, squared_norm


def _check_n_qubits(n_qubits: int) -> None:
    if n_qubits < 1:
        raise ValueError(f"n_qubits must be >= 1, got {n_qubits}")


def basis_state(
    n_qubits: int,
    index: int,
    device: Device | torch.device | str | None = None,
    dtype: torch.dtype | None = None,
) -> torch.Tensor:
    """
    Create the computational basis state |index> on n_qubits.

    Args:
        n_qubits: Number of qubits. Must be >= 1.
        index: Basis index in [0, 2**n_qubits).
        device: Device specification (Device, name, torch.device or None).
        dtype: Complex dtype. Defaults to the device's complex dtype.

    Raises:
        ValueError: If n_qubits < 1 or index is out of range.
    """
    _check_n_qubits(n_qubits)
    dim = 1 << n_qubits
    if index < 0 or index >= dim:
        raise ValueError(f"basis index {index} out of range [0, {dim})")

    qdevice = resolve_device(device)
    if dtype is None:
        dtype = qdevice.complex_dtype

    state = torch.zeros(dim, dtype=dtype, device=qdevice.as_torch_device())
    state[index] = 1.0 + 0.0j
    return state


def zero_state(
    n_qubits: int,
    device: Device | torch.device | str | None = None,
    dtype: torch.dtype | None = None,
) -> torch.Tensor:
    """Create |0...0> on n_qubits."""
    return basis_state(n_qubits, 0, device=device, dtype=dtype)


def _n_qubits_from_dim(dim: int) -> int:
    n_qubits = int(math.log2(dim)) if dim > 0 else 0
    if n_qubits < 1 or (1 << n_qubits) != dim:
        raise ValueError(f"state dimension {dim} is not a power of 2 (>= 2).")
    return n_qubits


def apply_matrix(
    state: torch.Tensor,
    matrix: torch.Tensor,
    target_qubits: Sequence[int],
    unitary: bool = False,
) -> torch.Tensor:
    """
    Apply a dense 2**k x 2**k matrix to k target qubits of a 1D statevector.

    The matrix need not be unitary: Kraus operators and projectors are
    applied through the same path and shrink the squared norm of the result.

    Args:
        state: Complex statevector of shape (2**n,).
        matrix: Complex matrix of shape (2**k, 2**k).
        target_qubits: k distinct qubit indices in [0, n).
        unitary: Hint that ``matrix`` is unitary. In debug mode the squared
            norm is then checked to be preserved.

    Returns:
        A new statevector tensor.

    Raises:
        ValueError: On shape, dtype or target mismatches.
    """
    if state.dim() != 1:
        raise ValueError(f"state must be 1D, got {state.dim()} dimensions")
    if not torch.is_complex(state):
        raise ValueError(f"state must be complex dtype, got {state.dtype}")

    n_qubits = _n_qubits_from_dim(state.shape[0])
    targets = [int(q) for q in target_qubits]
    k = len(targets)

    if k == 0:
        raise ValueError("target_qubits must not be empty")
    if len(set(targets)) != k:
        raise ValueError(f"target_qubits must be distinct, got {targets}")
    for q in targets:
        if q < 0 or q >= n_qubits:
            raise ValueError(f"qubit index {q} out of range [0, {n_qubits})")
    if matrix.shape != (1 << k, 1 << k):
        raise ValueError(
            f"matrix must have shape ({1 << k}, {1 << k}) for {k} target "
            f"qubit(s), got {tuple(matrix.shape)}"
        )

    matrix = matrix.to(dtype=state.dtype, device=state.device)

    # Axis j of the reshaped state holds qubit n-1-j.
    state_axes = [n_qubits - 1 - q for q in targets]
    psi = state.reshape((2,) * n_qubits)
    gate = matrix.reshape((2,) * (2 * k))

    out = torch.tensordot(gate, psi, dims=(list(range(k, 2 * k)), state_axes))
    out = torch.movedim(out, list(range(k)), state_axes)
    new_state = out.reshape(-1).contiguous()

    if unitary and is_debug_enabled():
        before = float(squared_norm(state))
        after = float(squared_norm(new_state))
        if abs(before - after) > 1e-6:
            raise ValueError(
                f"unitary application changed the squared norm from "
                f"{before:.12g} to {after:.12g}"
            )

    return new_state


__all__ = [
    "basis_state",
    "zero_state",
    "apply_matrix",
]
