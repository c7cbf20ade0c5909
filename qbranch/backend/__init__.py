"""Statevector backend."""

from .statevector import apply_matrix, basis_state, zero_state

__all__ = ["zero_state", "basis_state", "apply_matrix"]
