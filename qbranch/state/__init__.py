"""Quantum state container."""

from .quantum_state import QuantumState

__all__ = ["QuantumState"]
