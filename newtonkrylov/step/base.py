"""Step interface and the state records shared with the algorithm driver."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..bounds import BoundConstraint
from ..core import INITIAL_STEP_NORM, sqrt_epsilon
from ..linalg.vector import Vector
from ..objective import Objective


@dataclass
class AlgorithmState:
    """
    Mutable record describing the progress of one optimization run.

    Attributes:
        iter: Number of steps taken.
        value: Objective value at ``iterate_vec``.
        gnorm: Norm of the gradient at ``iterate_vec``.
        snorm: Norm of the most recent step.
        nfval: Number of objective evaluations counted so far.
        ngrad: Number of gradient evaluations counted so far.
        iterate_vec: Current iterate, owned by the state.
        flag: True once a status test has stopped the run.
        message: Reason the run stopped, if it has.
    """

    iter: int = 0
    value: float = 0.0
    gnorm: float = 0.0
    snorm: float = 0.0
    nfval: int = 0
    ngrad: int = 0
    iterate_vec: Optional[Vector] = None
    flag: bool = False
    message: str = ""


@dataclass
class StepState:
    """Per-step workspace: current gradient and most recent step."""

    gradient_vec: Optional[Vector] = None
    descent_vec: Optional[Vector] = None


class Step(ABC):
    """Base class of optimization steps.

    A driver calls :meth:`initialize` once, then alternates :meth:`compute`
    and :meth:`update` once per outer iteration. Steps are stateful and must
    not be shared between concurrent runs.
    """

    def __init__(self) -> None:
        self._state = StepState()

    def get_state(self) -> StepState:
        return self._state

    def initialize(
        self,
        x: Vector,
        s: Vector,
        g: Vector,
        objective: Objective,
        bounds: BoundConstraint,
        state: AlgorithmState,
    ) -> None:
        """Allocate workspace and evaluate the objective at the starting point."""
        tol = sqrt_epsilon(x.epsilon)
        self._state.descent_vec = s.clone()
        self._state.gradient_vec = g.clone()

        if bounds.is_activated():
            bounds.project(x)
        objective.update(x, True, state.iter)
        state.value = objective.value(x, tol)
        state.nfval += 1
        objective.gradient(self._state.gradient_vec, x, tol)
        state.ngrad += 1

        state.gnorm = self._state.gradient_vec.norm()
        state.snorm = INITIAL_STEP_NORM
        if state.iterate_vec is None:
            state.iterate_vec = x.clone()
        state.iterate_vec.set(x)

    @abstractmethod
    def compute(
        self,
        s: Vector,
        x: Vector,
        objective: Objective,
        bounds: BoundConstraint,
        state: AlgorithmState,
    ) -> None:
        """Write the step from ``x`` into ``s``."""

    @abstractmethod
    def update(
        self,
        x: Vector,
        s: Vector,
        objective: Objective,
        bounds: BoundConstraint,
        state: AlgorithmState,
    ) -> None:
        """Apply ``s`` to ``x`` and refresh ``state``."""

    def print_header(self) -> str:
        return ""

    def print_name(self) -> str:
        return ""

    def print(self, state: AlgorithmState, print_header: bool = False) -> str:
        return ""


__all__ = ["AlgorithmState", "StepState", "Step"]
