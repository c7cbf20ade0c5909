"""Elementary gate matrices."""

from .standard import (
    CNOT,
    P0,
    P1,
    RX,
    RY,
    RZ,
    H,
    I,
    S,
    T,
    X,
    Y,
    Z,
    is_unitary,
)

__all__ = [
    "I",
    "X",
    "Y",
    "Z",
    "H",
    "S",
    "T",
    "P0",
    "P1",
    "CNOT",
    "RX",
    "RY",
    "RZ",
    "is_unitary",
]
