"""Quantum operations: elementary gates and stochastic composites."""

from .base import QuantumOperation, matrix_placeholder
from .elementary import (
    CNOT,
    P0,
    P1,
    RX,
    RY,
    RZ,
    DenseMatrix,
    H,
    Identity,
    MatrixGate,
    S,
    T,
    X,
    Y,
    Z,
)
from .general import (
    ChannelMap,
    ConditionalOperation,
    MeasurementInstrument,
    ProbabilisticMixture,
    TracePreservationError,
)
from .noise import (
    AmplitudeDampingNoise,
    BitFlipNoise,
    DephasingNoise,
    DepolarizingNoise,
    IndependentXZNoise,
    Measurement,
    TwoQubitDepolarizingNoise,
)
from .rng import RandomSource, UniformRandom

__all__ = [
    "QuantumOperation",
    "matrix_placeholder",
    "RandomSource",
    "UniformRandom",
    "MatrixGate",
    "DenseMatrix",
    "Identity",
    "X",
    "Y",
    "Z",
    "H",
    "S",
    "T",
    "RX",
    "RY",
    "RZ",
    "CNOT",
    "P0",
    "P1",
    "ProbabilisticMixture",
    "ChannelMap",
    "MeasurementInstrument",
    "ConditionalOperation",
    "TracePreservationError",
    "BitFlipNoise",
    "DephasingNoise",
    "IndependentXZNoise",
    "DepolarizingNoise",
    "TwoQubitDepolarizingNoise",
    "AmplitudeDampingNoise",
    "Measurement",
]
