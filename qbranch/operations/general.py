"""Stochastic and classically-controlled composite operations.

Four composites are provided:

- :class:`ProbabilisticMixture` applies exactly one sub-operation, picked from
  a weighted list (mixed-unitary channels, Pauli noise).
- :class:`ChannelMap` applies a channel given by Kraus-operator
  sub-operations, picking a branch with probability equal to the squared norm
  it leaves behind.
- :class:`MeasurementInstrument` is a ChannelMap that also records the index
  of the chosen branch in the state's classical register.
- :class:`ConditionalOperation` applies a wrapped operation only when a
  predicate over the classical register holds.

None of them has a single matrix representation; :meth:`get_matrix` logs a
warning and returns a 1x1 placeholder.
"""

from __future__ import annotations

import math
import operator
from typing import (
    TYPE_CHECKING,
    Callable,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
)

import numpy as np
import torch

from ..diagnostics import assert_squared_norm, is_debug_enabled, is_strict_trace_enabled
from ..logging import get_logger
from .base import QuantumOperation, matrix_placeholder
from .rng import RandomSource, UniformRandom

if TYPE_CHECKING:
    from ..state import QuantumState

logger = get_logger(__name__)

_WEIGHT_SUM_TOLERANCE = 1e-9

RegisterCondition = Callable[[Tuple[int, ...]], bool]


class TracePreservationError(RuntimeError):
    """No Kraus branch could be committed: the branch probabilities summed to
    less than the random draw, or the state or a branch had no finite mass."""


def _owned(operations: Iterable[QuantumOperation], kind: str) -> List[QuantumOperation]:
    owned = []
    for i, op in enumerate(operations):
        if not isinstance(op, QuantumOperation):
            raise TypeError(
                f"{kind} operation {i} must be a QuantumOperation, got {type(op)}"
            )
        owned.append(op)
    if not owned:
        raise ValueError(f"{kind} requires at least one operation")
    return owned


class _StochasticOperation(QuantumOperation):
    """Owns one private random stream."""

    def __init__(self, random_source: Optional[RandomSource]) -> None:
        if random_source is None:
            random_source = UniformRandom()
        elif not isinstance(random_source, RandomSource):
            raise TypeError(
                f"random_source must be a RandomSource, got {type(random_source)}"
            )
        self._random = random_source

    @property
    def random_source(self) -> RandomSource:
        return self._random

    def set_seed(self, seed: int) -> None:
        """Replace this operation's stream with a freshly seeded UniformRandom."""
        self._random = UniformRandom(seed)


class ProbabilisticMixture(_StochasticOperation):
    """
    Apply one sub-operation chosen at random according to ``weights``.

    The cumulative distribution ``[0, w0, w0+w1, ...]`` is computed once at
    construction. Each call draws ``r`` in [0, 1) and applies the operation
    whose interval ``[cumulative[i], cumulative[i+1])`` contains ``r``. If the
    weights sum below 1 and ``r`` lands past the last interval, nothing is
    applied.

    Parameters
    ----------
    weights:
        Non-negative, finite weights; at least one must be positive.
    operations:
        Sub-operations, one per weight. The mixture takes ownership of them;
        :meth:`copy` deep-copies them.
    random_source:
        Source of uniform draws. Defaults to an unseeded UniformRandom.

    Raises
    ------
    ValueError
        If the lists are empty or differ in length, or a weight is negative,
        non-finite, or all weights are zero.
    """

    def __init__(
        self,
        weights: Sequence[float],
        operations: Sequence[QuantumOperation],
        random_source: Optional[RandomSource] = None,
    ) -> None:
        super().__init__(random_source)

        weight_array = np.asarray(weights, dtype=np.float64)
        if weight_array.ndim != 1 or weight_array.size == 0:
            raise ValueError("weights must be a non-empty 1D sequence")
        if weight_array.size != len(operations):
            raise ValueError(
                f"got {weight_array.size} weights for {len(operations)} operations"
            )
        if not np.all(np.isfinite(weight_array)):
            raise ValueError("weights must be finite")
        if np.any(weight_array < 0.0):
            raise ValueError(f"weights must be non-negative, got {weight_array.tolist()}")

        cumulative = np.concatenate(([0.0], np.cumsum(weight_array)))
        total = float(cumulative[-1])
        if total <= 0.0:
            raise ValueError("at least one weight must be positive")
        if total > 1.0 + _WEIGHT_SUM_TOLERANCE:
            logger.warning(
                "Probabilistic gate weights sum to %.12g > 1; operations past "
                "cumulative weight 1 are never selected.",
                total,
            )

        cumulative.setflags(write=False)
        self._weights = tuple(float(w) for w in weight_array)
        self._cumulative = cumulative
        self._operations = _owned(operations, "ProbabilisticMixture")

    @property
    def weights(self) -> Tuple[float, ...]:
        return self._weights

    @property
    def cumulative_distribution(self) -> Tuple[float, ...]:
        """Cumulative weights, length ``len(operations) + 1``, starting at 0."""
        return tuple(float(c) for c in self._cumulative)

    @property
    def operations(self) -> Tuple[QuantumOperation, ...]:
        return tuple(self._operations)

    def select_index(self, r: float) -> Optional[int]:
        """
        Index of the operation selected by draw ``r``, or None for the
        remainder (identity) mass.
        """
        index = int(np.searchsorted(self._cumulative, r, side="right")) - 1
        if 0 <= index < len(self._operations):
            return index
        return None

    def apply(self, state: "QuantumState") -> None:
        index = self.select_index(self._random.draw())
        if index is not None:
            self._operations[index].apply(state)

    def copy(self) -> "ProbabilisticMixture":
        return ProbabilisticMixture(self._weights, [op.copy() for op in self._operations])

    def get_matrix(self) -> torch.Tensor:
        return matrix_placeholder("probabilistic gate")

    def __repr__(self) -> str:
        return (
            f"ProbabilisticMixture(weights={list(self._weights)}, "
            f"operations={self._operations})"
        )


class ChannelMap(_StochasticOperation):
    """
    Apply a quantum channel given as Kraus-operator sub-operations.

    For a draw ``r``, branches are tried in list order on a scratch copy of
    the state. Branch ``k`` occurs with probability
    ``|K_k psi|^2 / |psi|^2``; the first branch whose running probability sum
    exceeds ``r`` is committed and the state is rescaled so its squared norm
    is unchanged. Branch order therefore matters for a fixed draw.

    If no branch commits (the operators are not trace preserving, rounding
    left a gap, the incoming state has zero or non-finite squared norm, or a
    branch probability is non-finite) the state is left untouched. In lenient mode a warning is
    logged; in strict mode :class:`TracePreservationError` is raised.

    Parameters
    ----------
    kraus_operations:
        One sub-operation per Kraus operator. The map takes ownership of them.
    random_source:
        Source of uniform draws. Defaults to an unseeded UniformRandom.
    strict:
        True/False to force strict/lenient handling of uncommitted
        branches, None to follow :func:`is_strict_trace_enabled`.
    """

    _diagnostic_name = "CPTP-map"

    def __init__(
        self,
        kraus_operations: Sequence[QuantumOperation],
        random_source: Optional[RandomSource] = None,
        strict: Optional[bool] = None,
    ) -> None:
        super().__init__(random_source)
        self._operations = _owned(kraus_operations, type(self).__name__)
        self._strict = strict

    @property
    def operations(self) -> Tuple[QuantumOperation, ...]:
        return tuple(self._operations)

    @property
    def strict(self) -> Optional[bool]:
        return self._strict

    def _is_strict(self) -> bool:
        if self._strict is None:
            return is_strict_trace_enabled()
        return self._strict

    def _apply_branches(
        self,
        state: "QuantumState",
        on_commit: Optional[Callable[["QuantumState", int], None]] = None,
    ) -> Optional[int]:
        """
        Try each Kraus branch on a scratch copy and commit the one selected
        by a fresh draw. Returns the committed branch index, or None.
        """
        r = self._random.draw()
        origin_norm = state.squared_norm()
        if not math.isfinite(origin_norm) or origin_norm <= 0.0:
            self._report_failure(f"cannot branch a state with squared norm {origin_norm}")
            return None

        probe = state.copy()
        running_sum = 0.0
        committed = False
        index = 0

        for index, operation in enumerate(self._operations):
            operation.apply(probe)
            branch_probability = probe.squared_norm() / origin_norm
            if not math.isfinite(branch_probability):
                self._report_failure(f"branch {index} produced a non-finite probability")
                return None
            running_sum += min(max(branch_probability, 0.0), 1.0)

            if r < running_sum:
                state.load(probe)
                state.normalize(branch_probability)
                committed = True
                break

            probe.load(state)

        if not committed:
            self._report_failure(
                f"was not trace preserving: branch probabilities sum to "
                f"{running_sum:.12g}, draw was {r:.12g}"
            )
            return None

        if is_debug_enabled():
            assert_squared_norm(
                state.vector, origin_norm, atol=1e-6 * max(1.0, origin_norm)
            )
        if on_commit is not None:
            on_commit(state, index)
        return index

    def _report_failure(self, reason: str) -> None:
        """Raise in strict mode; otherwise log and leave the state as it was."""
        if self._is_strict():
            raise TracePreservationError(f"{self._diagnostic_name} {reason}.")
        logger.warning(
            "%s %s. Identity-map is applied.", self._diagnostic_name, reason
        )

    def apply(self, state: "QuantumState") -> None:
        self._apply_branches(state)

    def copy(self) -> "ChannelMap":
        return ChannelMap([op.copy() for op in self._operations], strict=self._strict)

    def get_matrix(self) -> torch.Tensor:
        return matrix_placeholder(self._diagnostic_name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(operations={self._operations})"


class MeasurementInstrument(ChannelMap):
    """
    A ChannelMap that also records which branch occurred.

    On commit, the zero-based index of the committed Kraus branch is written
    to ``classical_register_address`` of the state. If no branch commits the
    register is left unchanged.
    """

    _diagnostic_name = "Instrument-map"

    def __init__(
        self,
        kraus_operations: Sequence[QuantumOperation],
        classical_register_address: int,
        random_source: Optional[RandomSource] = None,
        strict: Optional[bool] = None,
    ) -> None:
        try:
            address = operator.index(classical_register_address)
        except TypeError:
            raise TypeError(
                "classical_register_address must be an integer, "
                f"got {classical_register_address!r}"
            ) from None
        if address < 0:
            raise ValueError(f"classical_register_address must be >= 0, got {address}")
        super().__init__(kraus_operations, random_source=random_source, strict=strict)
        self._address = address

    @property
    def classical_register_address(self) -> int:
        return self._address

    def _record_outcome(self, state: "QuantumState", index: int) -> None:
        state.set_classical_value(self._address, index)

    def apply(self, state: "QuantumState") -> None:
        self._apply_branches(state, on_commit=self._record_outcome)

    def copy(self) -> "MeasurementInstrument":
        return MeasurementInstrument(
            [op.copy() for op in self._operations], self._address, strict=self._strict
        )

    def get_matrix(self) -> torch.Tensor:
        return matrix_placeholder("Instrument")

    def __repr__(self) -> str:
        return (
            f"MeasurementInstrument(operations={self._operations}, "
            f"classical_register_address={self._address})"
        )


class ConditionalOperation(QuantumOperation):
    """
    Apply ``operation`` only if ``condition(classical_register)`` is true.

    The condition receives the state's classical register as a tuple of ints
    and must be side-effect free. It is shared, not copied, by :meth:`copy`;
    the wrapped operation is deep-copied.
    """

    def __init__(self, operation: QuantumOperation, condition: RegisterCondition) -> None:
        if not isinstance(operation, QuantumOperation):
            raise TypeError(f"operation must be a QuantumOperation, got {type(operation)}")
        if not callable(condition):
            raise TypeError("condition must be callable")
        self._operation = operation
        self._condition = condition

    @property
    def operation(self) -> QuantumOperation:
        return self._operation

    @property
    def condition(self) -> RegisterCondition:
        return self._condition

    def apply(self, state: "QuantumState") -> None:
        if self._condition(state.classical_register):
            self._operation.apply(state)

    def copy(self) -> "ConditionalOperation":
        return ConditionalOperation(self._operation.copy(), self._condition)

    def get_matrix(self) -> torch.Tensor:
        return matrix_placeholder("Adaptive-gate")

    def __repr__(self) -> str:
        return f"ConditionalOperation(operation={self._operation!r})"
