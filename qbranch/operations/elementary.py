"""Elementary operations: a dense matrix acting on a fixed set of qubits."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence, Tuple

import torch

from ..backend.statevector import apply_matrix
from ..diagnostics import is_debug_enabled
from ..gates import standard as stdgates
from .base import QuantumOperation

if TYPE_CHECKING:
    from ..state import QuantumState


class MatrixGate(QuantumOperation):
    """
    Apply a dense ``2**k x 2**k`` matrix to ``k`` target qubits.

    The matrix may be non-unitary, which is how Kraus operators and
    projectors are expressed as sub-operations of a ChannelMap or
    MeasurementInstrument.

    Parameters
    ----------
    matrix:
        Square complex matrix. Stored as a complex128 copy.
    target_qubits:
        Distinct target qubit indices. ``target_qubits[0]`` is the most
        significant bit of the matrix index.
    name:
        Label used in ``repr`` and by :meth:`QuantumCircuit.gate_counts`.
    """

    has_matrix = True

    def __init__(
        self,
        matrix: torch.Tensor,
        target_qubits: Sequence[int],
        name: str = "DenseMatrix",
    ) -> None:
        targets = tuple(int(q) for q in target_qubits)
        if not targets:
            raise ValueError("MatrixGate must act on at least one qubit.")
        if len(set(targets)) != len(targets):
            raise ValueError(f"target_qubits must be distinct, got {targets}")
        if any(q < 0 for q in targets):
            raise ValueError(f"target_qubits must be non-negative, got {targets}")

        matrix = torch.as_tensor(matrix)
        dim = 1 << len(targets)
        if matrix.shape != (dim, dim):
            raise ValueError(
                f"matrix must have shape ({dim}, {dim}) for {len(targets)} "
                f"target qubit(s), got {tuple(matrix.shape)}"
            )

        self._matrix = matrix.to(dtype=torch.complex128).clone()
        self._targets = targets
        self.name = name

    @property
    def matrix(self) -> torch.Tensor:
        """
        The gate matrix. This is the live tensor owned by the gate: in-place
        edits change how the gate acts. Use :meth:`get_matrix` for a copy.
        """
        return self._matrix

    @property
    def target_qubits(self) -> Tuple[int, ...]:
        return self._targets

    @property
    def is_unitary(self) -> bool:
        """Whether the current matrix satisfies U^dagger U = I."""
        return stdgates.is_unitary(self._matrix)

    def apply(self, state: "QuantumState") -> None:
        for q in self._targets:
            if q >= state.n_qubits:
                raise ValueError(
                    f"{self.name} targets qubit {q} but the state has "
                    f"{state.n_qubits} qubit(s)"
                )
        # The unitarity hint only drives the debug-mode norm check.
        unitary = is_debug_enabled() and self.is_unitary
        state.update_vector(
            apply_matrix(state.vector, self._matrix, self._targets, unitary=unitary)
        )

    def copy(self) -> "MatrixGate":
        return MatrixGate(self._matrix, self._targets, name=self.name)

    def get_matrix(self) -> torch.Tensor:
        return self._matrix.clone()

    def __repr__(self) -> str:
        return f"MatrixGate(name={self.name!r}, target_qubits={self._targets})"


def DenseMatrix(target_qubits: Sequence[int] | int, matrix: torch.Tensor) -> MatrixGate:
    """Gate from an explicit matrix on one or more target qubits."""
    if isinstance(target_qubits, int):
        target_qubits = [target_qubits]
    return MatrixGate(matrix, target_qubits)


def Identity(target: int) -> MatrixGate:
    return MatrixGate(stdgates.I(), [target], name="I")


def X(target: int) -> MatrixGate:
    return MatrixGate(stdgates.X(), [target], name="X")


def Y(target: int) -> MatrixGate:
    return MatrixGate(stdgates.Y(), [target], name="Y")


def Z(target: int) -> MatrixGate:
    return MatrixGate(stdgates.Z(), [target], name="Z")


def H(target: int) -> MatrixGate:
    return MatrixGate(stdgates.H(), [target], name="H")


def S(target: int) -> MatrixGate:
    return MatrixGate(stdgates.S(), [target], name="S")


def T(target: int) -> MatrixGate:
    return MatrixGate(stdgates.T(), [target], name="T")


def RX(target: int, theta: float) -> MatrixGate:
    return MatrixGate(stdgates.RX(theta), [target], name="RX")


def RY(target: int, theta: float) -> MatrixGate:
    return MatrixGate(stdgates.RY(theta), [target], name="RY")


def RZ(target: int, theta: float) -> MatrixGate:
    return MatrixGate(stdgates.RZ(theta), [target], name="RZ")


def CNOT(control: int, target: int) -> MatrixGate:
    """Controlled-NOT; flips ``target`` when ``control`` is |1>."""
    return MatrixGate(stdgates.CNOT(), [control, target], name="CNOT")


def P0(target: int) -> MatrixGate:
    """Projector onto |0> of ``target`` (non-unitary)."""
    return MatrixGate(stdgates.P0(), [target], name="P0")


def P1(target: int) -> MatrixGate:
    """Projector onto |1> of ``target`` (non-unitary)."""
    return MatrixGate(stdgates.P1(), [target], name="P1")
