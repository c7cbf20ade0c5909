"""Sequential circuit of quantum operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Tuple

from ..operations.base import QuantumOperation

if TYPE_CHECKING:
    from ..state import QuantumState


class QuantumCircuit:
    """
    An ordered list of operations applied one after another to a single
    QuantumState.

    Operations may be elementary gates or any of the stochastic and
    conditional composites; measurement outcomes written by earlier
    operations are visible to later conditional ones.
    """

    def __init__(self, n_qubits: int) -> None:
        if n_qubits <= 0:
            raise ValueError("QuantumCircuit requires n_qubits >= 1.")

        self._n_qubits = int(n_qubits)
        self._ops: List[QuantumOperation] = []

    @property
    def n_qubits(self) -> int:
        return self._n_qubits

    @property
    def operations(self) -> Tuple[QuantumOperation, ...]:
        """Read-only tuple of the operations, in application order."""
        return tuple(self._ops)

    def add_gate(self, operation: QuantumOperation) -> None:
        """Append ``operation``; the circuit takes ownership of the instance."""
        if not isinstance(operation, QuantumOperation):
            raise TypeError(
                f"operation must be a QuantumOperation, got {type(operation)}"
            )
        self._ops.append(operation)

    def add_gate_copy(self, operation: QuantumOperation) -> None:
        """Append a deep copy of ``operation``."""
        self.add_gate(operation.copy())

    def apply(self, state: "QuantumState") -> None:
        """Apply every operation to ``state`` in order."""
        if state.n_qubits != self._n_qubits:
            raise ValueError(
                f"circuit acts on {self._n_qubits} qubit(s) but the state has "
                f"{state.n_qubits}"
            )
        for op in self._ops:
            op.apply(state)

    def copy(self) -> "QuantumCircuit":
        """Return a deep copy of this circuit."""
        new = QuantumCircuit(self._n_qubits)
        new._ops.extend(op.copy() for op in self._ops)
        return new

    def __len__(self) -> int:
        return len(self._ops)

    def gate_counts(self) -> Dict[str, int]:
        """Count operations by name (gate name for MatrixGate, class name otherwise)."""
        counts: Dict[str, int] = {}
        for op in self._ops:
            key = getattr(op, "name", type(op).__name__)
            counts[key] = counts.get(key, 0) + 1
        return counts
