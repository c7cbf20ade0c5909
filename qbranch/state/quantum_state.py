"""Statevector container with an attached classical register."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple, Union

import torch

from ..backend.statevector import basis_state
from ..core.device import Device, resolve_device
from ..diagnostics import squared_norm


class QuantumState:
    """
    A pure (possibly unnormalized) statevector on ``n_qubits`` qubits together
    with a classical register of integers.

    Operations mutate a state in place. The branching operations rely on four
    primitives: :meth:`squared_norm`, :meth:`copy`, :meth:`load` and
    :meth:`normalize`. Measurement instruments write outcomes with
    :meth:`set_classical_value`; conditional operations read
    :attr:`classical_register`.

    Parameters
    ----------
    n_qubits:
        Number of qubits (>= 1). The state starts in |0...0>.
    device:
        Device specification (Device, name, torch.device or None).
    dtype:
        Complex dtype. Defaults to the device's complex dtype (complex128).
    """

    def __init__(
        self,
        n_qubits: int,
        device: Device | torch.device | str | None = None,
        dtype: Optional[torch.dtype] = None,
    ) -> None:
        qdevice = resolve_device(device)
        if dtype is None:
            dtype = qdevice.complex_dtype
        if not dtype.is_complex:
            raise ValueError(f"dtype must be complex, got {dtype}")

        self._vector = basis_state(n_qubits, 0, device=qdevice, dtype=dtype)
        self._n_qubits = int(n_qubits)
        self._classical_register: List[int] = []

    @classmethod
    def from_vector(
        cls,
        amplitudes: Union[torch.Tensor, Sequence[complex]],
        device: Device | torch.device | str | None = None,
        dtype: Optional[torch.dtype] = None,
    ) -> "QuantumState":
        """Build a state holding the given amplitudes (not renormalized)."""
        tensor = torch.as_tensor(amplitudes)
        if tensor.dim() != 1:
            raise ValueError(f"amplitudes must be 1D, got {tensor.dim()} dimensions")
        dim = tensor.shape[0]
        n_qubits = int(math.log2(dim)) if dim > 0 else 0
        if n_qubits < 1 or (1 << n_qubits) != dim:
            raise ValueError(f"amplitude count {dim} is not a power of 2 (>= 2).")

        state = cls(n_qubits, device=device, dtype=dtype)
        state.load(tensor)
        return state

    @property
    def n_qubits(self) -> int:
        return self._n_qubits

    @property
    def dim(self) -> int:
        return 1 << self._n_qubits

    @property
    def dtype(self) -> torch.dtype:
        return self._vector.dtype

    @property
    def device(self) -> torch.device:
        return self._vector.device

    @property
    def vector(self) -> torch.Tensor:
        """A copy of the amplitudes."""
        return self._vector.clone()

    @property
    def classical_register(self) -> Tuple[int, ...]:
        """Read-only snapshot of the classical register."""
        return tuple(self._classical_register)

    def squared_norm(self) -> float:
        """Total probability mass sum_i |a_i|^2."""
        return float(squared_norm(self._vector))

    def probabilities(self) -> torch.Tensor:
        """Unnormalized Born-rule weights |a_i|^2 per basis state."""
        return self._vector.abs() ** 2

    def set_zero_state(self) -> None:
        """Reset the amplitudes to |0...0> (the classical register is kept)."""
        self.set_computational_basis(0)

    def set_computational_basis(self, index: int) -> None:
        """Reset the amplitudes to the basis state |index>."""
        self._vector = basis_state(
            self._n_qubits, index, device=self._vector.device, dtype=self._vector.dtype
        )

    def load(self, source: Union["QuantumState", torch.Tensor, Sequence[complex]]) -> None:
        """
        Overwrite this state's contents.

        Loading another QuantumState copies both its amplitudes and its
        classical register. Loading a tensor or sequence replaces only the
        amplitudes.

        Raises
        ------
        ValueError
            If the qubit count or amplitude count does not match.
        """
        if isinstance(source, QuantumState):
            if source.n_qubits != self._n_qubits:
                raise ValueError(
                    f"cannot load a {source.n_qubits}-qubit state into a "
                    f"{self._n_qubits}-qubit state"
                )
            self._vector = source._vector.to(
                dtype=self._vector.dtype, device=self._vector.device
            ).clone()
            self._classical_register = list(source._classical_register)
            return

        tensor = torch.as_tensor(source)
        if tensor.shape != (self.dim,):
            raise ValueError(
                f"expected {self.dim} amplitudes, got shape {tuple(tensor.shape)}"
            )
        self._vector = tensor.to(dtype=self._vector.dtype, device=self._vector.device).clone()

    def normalize(self, squared_norm: float) -> None:
        """Divide every amplitude by sqrt(squared_norm)."""
        if not squared_norm > 0.0 or not math.isfinite(squared_norm):
            raise ValueError(
                f"squared_norm must be positive and finite, got {squared_norm}"
            )
        self._vector = self._vector / math.sqrt(squared_norm)

    def copy(self) -> "QuantumState":
        """Deep copy of amplitudes and classical register."""
        new = QuantumState.__new__(QuantumState)
        new._vector = self._vector.clone()
        new._n_qubits = self._n_qubits
        new._classical_register = list(self._classical_register)
        return new

    def get_classical_value(self, address: int) -> int:
        """Read one register entry; unwritten addresses read as 0."""
        if address < 0:
            raise ValueError(f"classical register address must be >= 0, got {address}")
        if address >= len(self._classical_register):
            return 0
        return self._classical_register[address]

    def set_classical_value(self, address: int, value: int) -> None:
        """Write one register entry, zero-filling the register up to ``address``."""
        if address < 0:
            raise ValueError(f"classical register address must be >= 0, got {address}")
        if address >= len(self._classical_register):
            self._classical_register.extend(
                [0] * (address + 1 - len(self._classical_register))
            )
        self._classical_register[address] = int(value)

    def update_vector(self, vector: torch.Tensor) -> None:
        """Replace the amplitudes with an already-validated tensor.

        Used by gates that computed the new vector from :attr:`vector`.
        """
        if vector.shape != (self.dim,):
            raise ValueError(
                f"expected {self.dim} amplitudes, got shape {tuple(vector.shape)}"
            )
        self._vector = vector

    def __repr__(self) -> str:
        return (
            f"QuantumState(n_qubits={self._n_qubits}, "
            f"squared_norm={self.squared_norm():.6g}, "
            f"classical_register={self._classical_register})"
        )
