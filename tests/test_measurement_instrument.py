"""Tests for MeasurementInstrument."""

from __future__ import annotations

import math

import numpy as np
import pytest
import torch

from qbranch import (
    CNOT,
    H,
    MatrixGate,
    Measurement,
    MeasurementInstrument,
    P0,
    P1,
    QuantumCircuit,
    QuantumState,
    TracePreservationError,
    UniformRandom,
)


def _third_identity() -> MatrixGate:
    return MatrixGate(math.sqrt(1.0 / 3.0) * torch.eye(2), [0], name="sqrtI")


def test_records_committed_branch_index(scripted_random) -> None:
    """Three equal branches with draw 0.5 commit branch 1."""
    instrument = MeasurementInstrument(
        [_third_identity(), _third_identity(), _third_identity()],
        classical_register_address=3,
        random_source=scripted_random([0.5]),
    )
    state = QuantumState(1)

    instrument.apply(state)

    assert state.get_classical_value(3) == 1
    assert state.classical_register == (0, 0, 0, 1)
    assert torch.allclose(
        state.vector, torch.tensor([1.0, 0.0], dtype=torch.complex128), atol=1e-12
    )


@pytest.mark.parametrize("draw, outcome", [(0.1, 0), (0.9, 1)])
def test_measurement_of_plus_state(scripted_random, draw, outcome) -> None:
    """The recorded outcome matches the collapsed basis state."""
    instrument = MeasurementInstrument(
        [P0(0), P1(0)], 0, random_source=scripted_random([draw])
    )
    state = QuantumState.from_vector([1.0 / math.sqrt(2.0)] * 2)

    instrument.apply(state)

    assert state.get_classical_value(0) == outcome
    assert state.probabilities()[outcome].item() == pytest.approx(1.0)


def test_overwrites_previous_value(scripted_random) -> None:
    """A later measurement overwrites the same register slot."""
    instrument = MeasurementInstrument(
        [P0(0), P1(0)], 0, random_source=scripted_random([0.0])
    )
    state = QuantumState(1)
    state.set_classical_value(0, 5)

    instrument.apply(state)

    assert state.classical_register == (0,)


def test_failure_leaves_register_unchanged(log_stream, scripted_random) -> None:
    """When no branch commits, neither state nor register changes."""
    instrument = MeasurementInstrument(
        [MatrixGate(math.sqrt(0.5) * torch.eye(2), [0])],
        classical_register_address=1,
        random_source=scripted_random([0.75]),
        strict=False,
    )
    state = QuantumState(1)
    state.set_classical_value(0, 4)
    before = state.vector

    instrument.apply(state)

    assert torch.equal(state.vector, before)
    assert state.classical_register == (4,)
    assert "Instrument-map was not trace preserving" in log_stream.getvalue()


def test_strict_failure_raises_and_keeps_register(scripted_random) -> None:
    """Strict mode raises before anything is recorded."""
    instrument = MeasurementInstrument(
        [MatrixGate(math.sqrt(0.5) * torch.eye(2), [0])],
        classical_register_address=0,
        random_source=scripted_random([0.75]),
        strict=True,
    )
    state = QuantumState(1)

    with pytest.raises(TracePreservationError, match="Instrument-map"):
        instrument.apply(state)

    assert state.classical_register == ()


def test_negative_address_rejected() -> None:
    """Register addresses must be non-negative."""
    with pytest.raises(ValueError, match="classical_register_address"):
        MeasurementInstrument([P0(0), P1(0)], -1)


@pytest.mark.parametrize("address", [1.7, 2.0, "2", None])
def test_non_integer_address_rejected(address) -> None:
    """Addresses are not truncated or parsed into integers."""
    with pytest.raises(TypeError, match="must be an integer"):
        MeasurementInstrument([P0(0), P1(0)], address)


def test_integer_like_address_accepted() -> None:
    """numpy integers index the register like plain ints."""
    instrument = MeasurementInstrument([P0(0), P1(0)], np.int64(2))
    assert instrument.classical_register_address == 2
    assert type(instrument.classical_register_address) is int


def test_zero_norm_state_leaves_register_unchanged(log_stream, scripted_random) -> None:
    """Lenient handling of a massless state records no outcome."""
    state = QuantumState.from_vector([0.0, 0.0])
    state.set_classical_value(0, 5)
    instrument = MeasurementInstrument(
        [P0(0), P1(0)], 0, random_source=scripted_random([0.5]), strict=False
    )

    instrument.apply(state)

    assert state.get_classical_value(0) == 5
    assert "Instrument-map cannot branch a state" in log_stream.getvalue()

    strict = MeasurementInstrument(
        [P0(0), P1(0)], 0, random_source=scripted_random([0.5]), strict=True
    )
    with pytest.raises(TracePreservationError, match="squared norm"):
        strict.apply(state)
    assert state.get_classical_value(0) == 5


def test_copy_keeps_address_and_operations() -> None:
    """copy() keeps the address and deep-copies the Kraus operators."""
    original = MeasurementInstrument([P0(0), P1(0)], 2, strict=False)
    duplicate = original.copy()

    assert isinstance(duplicate, MeasurementInstrument)
    assert duplicate.classical_register_address == 2
    assert duplicate.strict is False
    assert duplicate.operations[0] is not original.operations[0]
    assert torch.equal(duplicate.operations[1].matrix, original.operations[1].matrix)


def test_get_matrix_is_placeholder(log_stream) -> None:
    """An instrument reports that it has no single matrix."""
    instrument = Measurement(0, 0)
    assert instrument.has_matrix is False
    assert instrument.get_matrix().shape == (1, 1)
    assert "Gate-matrix of Instrument cannot be obtained" in log_stream.getvalue()


def test_bell_pair_measurements_agree() -> None:
    """Measuring both halves of a Bell pair records equal outcomes."""
    for seed in range(20):
        circuit = QuantumCircuit(2)
        circuit.add_gate(H(0))
        circuit.add_gate(CNOT(0, 1))
        circuit.add_gate(Measurement(0, 0, random_source=UniformRandom(seed)))
        circuit.add_gate(Measurement(1, 1, random_source=UniformRandom(seed + 100)))

        state = QuantumState(2)
        circuit.apply(state)

        first, second = state.classical_register
        assert first == second
        assert state.squared_norm() == pytest.approx(1.0)
