"""qbranch - stochastic quantum channels on PyTorch statevectors.

Probabilistic mixtures, Kraus-operator channel maps, measurement instruments
and classically-conditioned operations that act on a QuantumState in place.
"""

__version__ = "0.1.0"

from .backend import apply_matrix, basis_state, zero_state
from .circuit import QuantumCircuit
from .core import Device, default_device, device
from .diagnostics import (
    assert_squared_norm,
    debug_context,
    is_debug_enabled,
    is_strict_trace_enabled,
    set_debug_enabled,
    set_strict_trace_enabled,
    squared_norm,
    strict_trace_context,
)
from .logging import configure_logging, get_logger, set_log_level
from .operations import (
    CNOT,
    P0,
    P1,
    RX,
    RY,
    RZ,
    AmplitudeDampingNoise,
    BitFlipNoise,
    ChannelMap,
    ConditionalOperation,
    DenseMatrix,
    DephasingNoise,
    DepolarizingNoise,
    H,
    Identity,
    IndependentXZNoise,
    MatrixGate,
    Measurement,
    MeasurementInstrument,
    ProbabilisticMixture,
    QuantumOperation,
    RandomSource,
    S,
    T,
    TracePreservationError,
    TwoQubitDepolarizingNoise,
    UniformRandom,
    X,
    Y,
    Z,
)
from .state import QuantumState

__all__ = [
    "__version__",
    # State and backend
    "QuantumState",
    "zero_state",
    "basis_state",
    "apply_matrix",
    "Device",
    "device",
    "default_device",
    # Operations
    "QuantumOperation",
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
    "RandomSource",
    "UniformRandom",
    # Noise and measurement
    "BitFlipNoise",
    "DephasingNoise",
    "IndependentXZNoise",
    "DepolarizingNoise",
    "TwoQubitDepolarizingNoise",
    "AmplitudeDampingNoise",
    "Measurement",
    # Circuit
    "QuantumCircuit",
    # Diagnostics and modes
    "squared_norm",
    "assert_squared_norm",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    "is_strict_trace_enabled",
    "set_strict_trace_enabled",
    "strict_trace_context",
    # Logging
    "get_logger",
    "set_log_level",
    "configure_logging",
]
