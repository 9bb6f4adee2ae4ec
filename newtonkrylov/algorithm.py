"""Driver loop and stopping tests for step-based optimization."""

from __future__ import annotations

import math
from typing import Optional, TextIO

import numpy as np

from .bounds import BoundConstraint
from .config import NewtonKrylovConfig
from .core import OptimizeResult, Problem, check_convergence
from .krylov import Krylov
from .linalg.vector import NumpyVector, Vector
from .logging import get_logger
from .objective import Objective, ProblemObjective
from .secant import Secant
from .step import AlgorithmState, NewtonKrylovStep, Step

logger = get_logger(__name__)


class StatusTest:
    """Stop on a small gradient, a small step, or the iteration limit."""

    def __init__(
        self,
        gradient_tolerance: float = 1e-6,
        step_tolerance: float = 1e-12,
        iteration_limit: int = 100,
    ) -> None:
        if gradient_tolerance <= 0.0 or step_tolerance <= 0.0:
            raise ValueError("Status test tolerances must be positive.")
        if iteration_limit < 0:
            raise ValueError("Iteration limit must be non-negative.")
        self.gradient_tolerance = gradient_tolerance
        self.step_tolerance = step_tolerance
        self.iteration_limit = iteration_limit

    def check(self, state: AlgorithmState) -> bool:
        """Return True while the run should continue.

        On stopping, sets ``state.flag`` and records the reason in
        ``state.message``.
        """
        if (
            state.gnorm > self.gradient_tolerance
            and state.snorm > self.step_tolerance
            and state.iter < self.iteration_limit
        ):
            return True
        state.flag = True
        if not (math.isfinite(state.gnorm) and math.isfinite(state.snorm)):
            state.message = "Non-finite gradient or step norm."
        elif check_convergence(state.gnorm, self.gradient_tolerance):
            state.message = "Gradient tolerance satisfied."
        elif state.snorm <= self.step_tolerance:
            state.message = "Step tolerance satisfied."
        else:
            state.message = "Maximum iterations reached."
        return False


class Algorithm:
    """
    Repeatedly compute and apply steps until the status test stops the run.

    Args:
        step: Step to drive.
        status_test: Stopping criteria. Defaults to :class:`StatusTest`.
        print_header: Repeat the column header on every status line.
        stream: Optional text stream receiving the status lines.
    """

    def __init__(
        self,
        step: Step,
        status_test: Optional[StatusTest] = None,
        print_header: bool = False,
        stream: Optional[TextIO] = None,
    ) -> None:
        self.step = step
        self.status_test = status_test if status_test is not None else StatusTest()
        self.print_header = print_header
        self.stream = stream
        self.state = AlgorithmState()
        self.krylov_iterations = 0

    def _emit(self, output: list[str], line: str) -> None:
        output.append(line)
        logger.debug(line.rstrip("\n"))
        if self.stream is not None:
            self.stream.write(line)

    def run(
        self,
        x: Vector,
        objective: Objective,
        bounds: Optional[BoundConstraint] = None,
    ) -> list[str]:
        """Optimize in place starting from ``x``; return the status lines."""
        if bounds is None:
            bounds = BoundConstraint()
        self.state = AlgorithmState()
        self.krylov_iterations = 0
        state = self.state

        g = x.dual()
        s = x.clone()
        self.step.initialize(x, s, g, objective, bounds, state)

        output: list[str] = []
        self._emit(output, self.step.print(state, True))
        while self.status_test.check(state):
            self.step.compute(s, x, objective, bounds, state)
            self.step.update(x, s, objective, bounds, state)
            self.krylov_iterations += getattr(self.step, "iter_krylov", 0)
            self._emit(output, self.step.print(state, self.print_header))
        logger.debug("Optimization stopped: %s", state.message)
        return output


def newton_krylov(
    problem: Problem,
    x0: np.ndarray,
    config: Optional[NewtonKrylovConfig] = None,
    krylov: Optional[Krylov] = None,
    secant: Optional[Secant] = None,
    maxiter: int = 100,
    tol: float = 1e-6,
    step_tol: float = 1e-12,
    stream: Optional[TextIO] = None,
) -> OptimizeResult:
    """Minimize ``problem`` with unit-length inexact Newton-Krylov steps."""
    x = NumpyVector(np.asarray(x0, dtype=float))
    if problem.dim is not None and x.dimension() != problem.dim:
        raise ValueError(
            f"Initial point has dimension {x.dimension()}, problem expects {problem.dim}"
        )
    objective = ProblemObjective(problem)
    step = NewtonKrylovStep(config, krylov=krylov, secant=secant)
    algo = Algorithm(step, StatusTest(tol, step_tol, maxiter), stream=stream)
    lines = algo.run(x, objective)
    state = algo.state
    return OptimizeResult(
        x=x.data.copy(),
        fun=float(state.value),
        nit=state.iter,
        success=check_convergence(state.gnorm, tol),
        message=state.message,
        grad_norm=float(state.gnorm),
        nfev=state.nfval,
        njev=state.ngrad,
        krylov_iterations=algo.krylov_iterations,
        history=lines,
    )


__all__ = ["StatusTest", "Algorithm", "newton_krylov"]
