"""Circuit driver."""

from .core import QuantumCircuit

__all__ = ["QuantumCircuit"]
