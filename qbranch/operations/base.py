"""Base class for everything that can be applied to a QuantumState."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

import torch

from ..logging import get_logger

if TYPE_CHECKING:
    from ..state import QuantumState

logger = get_logger(__name__)


def matrix_placeholder(kind: str) -> torch.Tensor:
    """
    Report that ``kind`` has no single matrix and return a 1x1 placeholder.

    The returned ``[[1]]`` is not an identity on the state space; callers
    must check :attr:`QuantumOperation.has_matrix` before trusting a matrix.
    """
    logger.warning(
        "Gate-matrix of %s cannot be obtained. Identity matrix is returned.", kind
    )
    return torch.ones((1, 1), dtype=torch.complex128)


class QuantumOperation(ABC):
    """
    Unit of composition for circuits: something that mutates a QuantumState
    in place.

    Subclasses implement :meth:`apply` and :meth:`copy`. Operations that have
    a fixed matrix representation set ``has_matrix = True`` and override
    :meth:`get_matrix`.
    """

    has_matrix: bool = False

    @abstractmethod
    def apply(self, state: "QuantumState") -> None:
        """Apply this operation to ``state`` in place."""

    @abstractmethod
    def copy(self) -> "QuantumOperation":
        """Return an independent deep copy of this operation."""

    def get_matrix(self) -> torch.Tensor:
        """Return the operation's matrix, or a 1x1 placeholder if it has none."""
        return matrix_placeholder(type(self).__name__)

    def __call__(self, state: "QuantumState") -> None:
        self.apply(state)

    def __deepcopy__(self, memo: Optional[Dict[int, Any]] = None) -> "QuantumOperation":
        return self.copy()
