"""Tests for the noise and measurement factories."""

from __future__ import annotations

import math

import pytest
import torch

from qbranch import (
    AmplitudeDampingNoise,
    BitFlipNoise,
    ChannelMap,
    DephasingNoise,
    DepolarizingNoise,
    IndependentXZNoise,
    Measurement,
    MeasurementInstrument,
    ProbabilisticMixture,
    QuantumState,
    TracePreservationError,
    TwoQubitDepolarizingNoise,
    strict_trace_context,
)


def test_bit_flip_weights_and_effect(scripted_random) -> None:
    """BitFlipNoise mixes I and X with weights 1-p and p."""
    noise = BitFlipNoise(0, 0.2, random_source=scripted_random([0.85]))
    assert isinstance(noise, ProbabilisticMixture)
    assert noise.weights == pytest.approx((0.8, 0.2))

    state = QuantumState(1)
    noise.apply(state)
    assert torch.allclose(state.vector, torch.tensor([0.0, 1.0], dtype=torch.complex128))


def test_dephasing_flips_relative_phase(scripted_random) -> None:
    """DephasingNoise applies Z when the draw falls in the p interval."""
    noise = DephasingNoise(0, 0.5, random_source=scripted_random([0.75]))
    s = 1.0 / math.sqrt(2.0)
    state = QuantumState.from_vector([s, s])

    noise.apply(state)

    assert torch.allclose(state.vector, torch.tensor([s, -s], dtype=torch.complex128))


def test_independent_xz_weights() -> None:
    """Independent X and Z flips give (1-p)^2, p(1-p), p(1-p), p^2."""
    noise = IndependentXZNoise(0, 0.1)
    assert noise.weights == pytest.approx((0.81, 0.09, 0.09, 0.01))
    assert [op.name for op in noise.operations] == ["I", "X", "Z", "Y"]


def test_depolarizing_weights() -> None:
    """Depolarizing noise splits p evenly over X, Y and Z."""
    noise = DepolarizingNoise(0, 0.3)
    assert noise.weights == pytest.approx((0.7, 0.1, 0.1, 0.1))
    assert noise.cumulative_distribution[-1] == pytest.approx(1.0)


def test_two_qubit_depolarizing_structure() -> None:
    """Sixteen Pauli products, identity first, p/15 on the rest."""
    noise = TwoQubitDepolarizingNoise(0, 1, 0.15)
    names = [op.name for op in noise.operations]

    assert len(names) == 16
    assert names[0] == "II"
    assert set(names) == {a + b for a in "IXYZ" for b in "IXYZ"}
    assert noise.weights[0] == pytest.approx(0.85)
    assert all(w == pytest.approx(0.01) for w in noise.weights[1:])
    assert all(op.target_qubits == (0, 1) for op in noise.operations)


def test_two_qubit_depolarizing_applies_product(scripted_random) -> None:
    """The "XI" branch flips the first target qubit only."""
    noise = TwoQubitDepolarizingNoise(1, 0, 0.15)
    index = [op.name for op in noise.operations].index("XI")
    draw = noise.cumulative_distribution[index] + 1e-6

    noise = TwoQubitDepolarizingNoise(1, 0, 0.15, random_source=scripted_random([draw]))
    state = QuantumState(2)
    noise.apply(state)

    # X on qubit 1 maps |00> to basis index 2.
    assert state.probabilities()[2].item() == pytest.approx(1.0)


def test_two_qubit_depolarizing_rejects_equal_targets() -> None:
    """Both targets must differ."""
    with pytest.raises(ValueError, match="distinct"):
        TwoQubitDepolarizingNoise(0, 0, 0.1)


@pytest.mark.parametrize("factory", [BitFlipNoise, DephasingNoise, DepolarizingNoise])
@pytest.mark.parametrize("p", [-0.1, 1.5])
def test_probability_range_checked(factory, p) -> None:
    """Error probabilities outside [0, 1] are rejected."""
    with pytest.raises(ValueError, match=r"\[0, 1\]"):
        factory(0, p)


def test_amplitude_damping_is_trace_preserving_channel() -> None:
    """K0^dag K0 + K1^dag K1 = I."""
    gamma = 0.37
    noise = AmplitudeDampingNoise(0, gamma)
    assert isinstance(noise, ChannelMap)

    k0, k1 = (op.matrix for op in noise.operations)
    total = k0.conj().T @ k0 + k1.conj().T @ k1
    assert torch.allclose(total, torch.eye(2, dtype=torch.complex128), atol=1e-12)


def test_amplitude_damping_decay_branch(scripted_random) -> None:
    """From |1>, the decay branch takes the state to |0>."""
    gamma = 0.4
    # K0 carries 1 - gamma = 0.6 of |1>; a draw of 0.8 selects K1.
    noise = AmplitudeDampingNoise(0, gamma, random_source=scripted_random([0.8]))
    state = QuantumState(1)
    state.set_computational_basis(1)

    noise.apply(state)

    assert torch.allclose(
        state.vector, torch.tensor([1.0, 0.0], dtype=torch.complex128), atol=1e-12
    )


def test_measurement_of_one_records_one(scripted_random) -> None:
    """Measuring |1> with draw 0.0 records outcome 1."""
    measurement = Measurement(0, 0, random_source=scripted_random([0.0]))
    assert isinstance(measurement, MeasurementInstrument)

    state = QuantumState(1)
    state.set_computational_basis(1)
    measurement.apply(state)

    assert state.get_classical_value(0) == 1
    assert torch.allclose(state.vector, torch.tensor([0.0, 1.0], dtype=torch.complex128))


def test_measurement_on_second_qubit(scripted_random) -> None:
    """The target qubit selects which bit of the basis index is read."""
    measurement = Measurement(1, 2, random_source=scripted_random([0.0]))
    state = QuantumState(2)
    state.set_computational_basis(2)

    measurement.apply(state)

    assert state.classical_register == (0, 0, 1)


def test_factories_forward_strict_flag(scripted_random) -> None:
    """Channel factories accept the same strict argument as ChannelMap."""
    assert AmplitudeDampingNoise(0, 0.3).strict is None
    assert AmplitudeDampingNoise(0, 0.3, strict=True).strict is True
    assert Measurement(0, 0).strict is None
    assert Measurement(0, 0, strict=False).strict is False

    strict_noise = AmplitudeDampingNoise(
        0, 0.3, random_source=scripted_random([0.5]), strict=True
    )
    with pytest.raises(TracePreservationError):
        strict_noise.apply(QuantumState.from_vector([0.0, 0.0]))


def test_lenient_measurement_ignores_global_strict(log_stream, scripted_random) -> None:
    """strict=False on Measurement wins over a strict global setting."""
    measurement = Measurement(0, 0, random_source=scripted_random([0.5]), strict=False)
    state = QuantumState.from_vector([0.0, 0.0])

    with strict_trace_context(True):
        measurement.apply(state)

    assert state.classical_register == ()
    assert "Identity-map is applied" in log_stream.getvalue()
