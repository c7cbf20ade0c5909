"""Textbook noise channels and measurement built from the composite operations.

Pauli noise is a mixed-unitary channel and is sampled with a
ProbabilisticMixture. Amplitude damping needs genuine Kraus operators and is
sampled with a ChannelMap. A computational-basis measurement is a
MeasurementInstrument over the projectors |0><0| and |1><1|.
"""

from __future__ import annotations

import itertools
import math
from typing import Optional

import torch

from ..gates import standard as stdgates
from .elementary import P0, P1, Identity, MatrixGate, X, Y, Z
from .general import ChannelMap, MeasurementInstrument, ProbabilisticMixture
from .rng import RandomSource


def _check_probability(value: float, label: str) -> None:
    if value < 0.0 or value > 1.0:
        raise ValueError(f"{label} must be in [0, 1], got {value}")


def BitFlipNoise(
    target: int, p: float, random_source: Optional[RandomSource] = None
) -> ProbabilisticMixture:
    """Apply X to ``target`` with probability p."""
    _check_probability(p, "Bit-flip probability p")
    return ProbabilisticMixture(
        [1.0 - p, p], [Identity(target), X(target)], random_source=random_source
    )


def DephasingNoise(
    target: int, p: float, random_source: Optional[RandomSource] = None
) -> ProbabilisticMixture:
    """Apply Z to ``target`` with probability p."""
    _check_probability(p, "Dephasing probability p")
    return ProbabilisticMixture(
        [1.0 - p, p], [Identity(target), Z(target)], random_source=random_source
    )


def IndependentXZNoise(
    target: int, p: float, random_source: Optional[RandomSource] = None
) -> ProbabilisticMixture:
    """
    Independent bit flip and phase flip, each with probability p.

    Outcomes I, X, Z and Y (= both flips, up to phase) occur with
    probabilities (1-p)^2, p(1-p), p(1-p) and p^2.
    """
    _check_probability(p, "Flip probability p")
    q = 1.0 - p
    return ProbabilisticMixture(
        [q * q, p * q, p * q, p * p],
        [Identity(target), X(target), Z(target), Y(target)],
        random_source=random_source,
    )


def DepolarizingNoise(
    target: int, p: float, random_source: Optional[RandomSource] = None
) -> ProbabilisticMixture:
    """
    Single-qubit depolarizing noise: I with probability 1-p, otherwise one of
    X, Y, Z with probability p/3 each.
    """
    _check_probability(p, "Depolarizing probability p")
    return ProbabilisticMixture(
        [1.0 - p, p / 3.0, p / 3.0, p / 3.0],
        [Identity(target), X(target), Y(target), Z(target)],
        random_source=random_source,
    )


def TwoQubitDepolarizingNoise(
    target1: int,
    target2: int,
    p: float,
    random_source: Optional[RandomSource] = None,
) -> ProbabilisticMixture:
    """
    Two-qubit depolarizing noise: I⊗I with probability 1-p, otherwise one of
    the 15 non-trivial Pauli products with probability p/15 each.
    """
    _check_probability(p, "Depolarizing probability p")
    if target1 == target2:
        raise ValueError(f"target qubits must be distinct, got {target1} and {target2}")

    paulis = [stdgates.I(), stdgates.X(), stdgates.Y(), stdgates.Z()]
    labels = "IXYZ"
    weights = []
    operations = []
    for (a, pa), (b, pb) in itertools.product(enumerate(paulis), repeat=2):
        weights.append(1.0 - p if a == 0 and b == 0 else p / 15.0)
        operations.append(
            MatrixGate(torch.kron(pa, pb), [target1, target2], name=labels[a] + labels[b])
        )
    return ProbabilisticMixture(weights, operations, random_source=random_source)


def AmplitudeDampingNoise(
    target: int,
    gamma: float,
    random_source: Optional[RandomSource] = None,
    strict: Optional[bool] = None,
) -> ChannelMap:
    """
    Amplitude damping (|1> decays to |0> with probability gamma).

    Kraus operators:
        K_0 = [[1, 0], [0, sqrt(1 - gamma)]]
        K_1 = [[0, sqrt(gamma)], [0, 0]]

    ``strict`` is passed to the ChannelMap (see :class:`ChannelMap`).
    """
    _check_probability(gamma, "Amplitude damping parameter gamma")

    k0 = torch.zeros((2, 2), dtype=torch.complex128)
    k0[0, 0] = 1.0
    k0[1, 1] = math.sqrt(1.0 - gamma)

    k1 = torch.zeros((2, 2), dtype=torch.complex128)
    k1[0, 1] = math.sqrt(gamma)

    return ChannelMap(
        [MatrixGate(k0, [target], name="K0"), MatrixGate(k1, [target], name="K1")],
        random_source=random_source,
        strict=strict,
    )


def Measurement(
    target: int,
    classical_register_address: int,
    random_source: Optional[RandomSource] = None,
    strict: Optional[bool] = None,
) -> MeasurementInstrument:
    """
    Projective Z-basis measurement of ``target``; the outcome (0 or 1) is
    written to ``classical_register_address``.
    """
    return MeasurementInstrument(
        [P0(target), P1(target)],
        classical_register_address,
        random_source=random_source,
        strict=strict,
    )
