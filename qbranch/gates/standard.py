"""Elementary gate and projector matrices.

All factories return dense complex tensors. Single-qubit matrices are (2, 2);
CNOT is (4, 4) indexed as |q_first q_second>, first qubit most significant.
"""

from __future__ import annotations

import cmath
import math
from typing import Sequence

import torch

_DEFAULT_DTYPE = torch.complex128


def _build(
    rows: Sequence[Sequence[complex]],
    dtype: torch.dtype | None,
    device: torch.device | None,
) -> torch.Tensor:
    if dtype is None:
        dtype = _DEFAULT_DTYPE
    if device is None:
        device = torch.device("cpu")
    return torch.tensor(rows, dtype=dtype, device=device)


def I(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Identity gate."""
    return _build([[1.0, 0.0], [0.0, 1.0]], dtype, device)


def X(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Pauli-X (bit flip)."""
    return _build([[0.0, 1.0], [1.0, 0.0]], dtype, device)


def Y(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Pauli-Y."""
    return _build([[0.0, -1.0j], [1.0j, 0.0]], dtype, device)


def Z(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Pauli-Z (phase flip)."""
    return _build([[1.0, 0.0], [0.0, -1.0]], dtype, device)


def H(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Hadamard gate."""
    s = 1.0 / math.sqrt(2.0)
    return _build([[s, s], [s, -s]], dtype, device)


def S(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Phase gate, sqrt(Z)."""
    return _build([[1.0, 0.0], [0.0, 1.0j]], dtype, device)


def T(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """pi/8 gate, sqrt(S)."""
    return _build([[1.0, 0.0], [0.0, cmath.exp(1.0j * math.pi / 4.0)]], dtype, device)


def P0(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """
    Projector |0><0|.

    Not unitary: applied as a Kraus branch it keeps only the |0> component,
    so the squared norm of the result is the probability of outcome 0.
    """
    return _build([[1.0, 0.0], [0.0, 0.0]], dtype, device)


def P1(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Projector |1><1|."""
    return _build([[0.0, 0.0], [0.0, 1.0]], dtype, device)


def CNOT(
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Controlled-NOT with the first qubit as control and the second as target.

    |00> -> |00>, |01> -> |01>, |10> -> |11>, |11> -> |10>
    """
    return _build(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
            [0.0, 0.0, 1.0, 0.0],
        ],
        dtype,
        device,
    )


def RX(
    theta: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Rotation about X: RX(theta) = exp(-i theta X / 2).

        [[cos(theta/2), -i sin(theta/2)],
         [-i sin(theta/2), cos(theta/2)]]
    """
    c = math.cos(float(theta) / 2.0)
    s = math.sin(float(theta) / 2.0)
    return _build([[c, -1.0j * s], [-1.0j * s, c]], dtype, device)


def RY(
    theta: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Rotation about Y: RY(theta) = exp(-i theta Y / 2).

        [[cos(theta/2), -sin(theta/2)],
         [sin(theta/2), cos(theta/2)]]
    """
    c = math.cos(float(theta) / 2.0)
    s = math.sin(float(theta) / 2.0)
    return _build([[c, -s], [s, c]], dtype, device)


def RZ(
    theta: float,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Rotation about Z: RZ(theta) = exp(-i theta Z / 2).

        [[exp(-i theta/2), 0],
         [0, exp(i theta/2)]]
    """
    half = float(theta) / 2.0
    return _build([[cmath.exp(-1.0j * half), 0.0], [0.0, cmath.exp(1.0j * half)]], dtype, device)


def is_unitary(matrix: torch.Tensor, atol: float = 1e-6) -> bool:
    """
    Check whether a matrix (or batch of matrices) satisfies U^dagger U = I.
    """
    if matrix.dim() < 2 or matrix.shape[-1] != matrix.shape[-2]:
        return False

    product = torch.matmul(matrix.conj().transpose(-1, -2), matrix)
    identity = torch.eye(matrix.shape[-1], dtype=matrix.dtype, device=matrix.device)
    if product.ndim > 2:
        identity = identity.expand(product.shape)

    return bool(torch.all(torch.abs(product - identity) < atol).item())
