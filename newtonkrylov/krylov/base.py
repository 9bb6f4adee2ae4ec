"""Common interface of Krylov linear solvers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import NamedTuple

from ..config import KrylovConfig
from ..core import sqrt_epsilon
from ..linalg.operator import LinearOperator
from ..linalg.vector import Vector


class KrylovFlag(IntEnum):
    """Termination reason of a Krylov solve."""

    CONVERGED = 0
    ITERATION_LIMIT = 1
    NEGATIVE_CURVATURE = 2
    BREAKDOWN = 3


class KrylovResult(NamedTuple):
    """Outcome of one call to :meth:`Krylov.run`.

    ``direction`` is normally the vector passed to ``run``, overwritten in
    place. A solver may instead return a new vector; callers copy it back.
    """

    direction: Vector
    iterations: int
    flag: KrylovFlag


class Krylov(ABC):
    """
    Iterative solver for ``A x = b`` with a preconditioner ``M``.

    ``b`` is a dual vector (typically a gradient) and ``x`` a primal one.
    Solvers stop once the residual norm falls below
    ``min(absolute_tolerance, relative_tolerance * |b|)`` or after
    ``iteration_limit`` iterations. The preconditioner's ``apply_inverse`` is
    called on every residual.

    Args:
        config: Stopping parameters. Defaults to :class:`KrylovConfig`.
    """

    name = "Krylov"

    def __init__(self, config: KrylovConfig | None = None) -> None:
        self.config = config if config is not None else KrylovConfig()
        self.residual_norm = 0.0

    @property
    def iteration_limit(self) -> int:
        return int(self.config.iteration_limit)

    def stopping_tolerance(self, bnorm: float) -> float:
        return min(self.config.absolute_tolerance, self.config.relative_tolerance * bnorm)

    @staticmethod
    def operator_tolerance(x: Vector) -> float:
        return sqrt_epsilon(x.epsilon)

    @abstractmethod
    def run(
        self, x: Vector, A: LinearOperator, b: Vector, M: LinearOperator
    ) -> KrylovResult:
        """Approximately solve ``A x = b``, writing the solution into ``x``.

        The direction returned with ``NEGATIVE_CURVATURE`` or ``BREAKDOWN``
        may be degenerate (zero or partial) and should be checked by callers.
        """


__all__ = ["Krylov", "KrylovFlag", "KrylovResult"]
