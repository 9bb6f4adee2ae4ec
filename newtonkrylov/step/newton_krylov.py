"""Inexact Newton step computed with a preconditioned Krylov solver.

Each outer iteration approximately solves the Newton system ``H d = g`` with
a Krylov method, preconditioned either by the objective's own
preconditioner or by a secant approximation, and takes the unit step
``s = -d``. No globalization is performed here: line searches or trust
regions wrap this step from the outside.
"""

from __future__ import annotations

from typing import Optional

from ..bounds import BoundConstraint
from ..config import KrylovType, NewtonKrylovConfig, SecantType
from ..core import sqrt_epsilon
from ..krylov import Krylov, KrylovFlag, krylov_factory
from ..linalg.operator import LinearOperator
from ..linalg.vector import Vector
from ..logging import get_logger
from ..objective import Objective
from ..secant import Secant, secant_factory
from .base import AlgorithmState, Step

logger = get_logger(__name__)

DESCENT_NAME = "Newton-Krylov"


class HessianOperator(LinearOperator):
    """Hessian of ``objective`` at the point ``x``.

    Holds a reference to ``x``, so it is only valid for the iteration it was
    built in.
    """

    def __init__(self, objective: Objective, x: Vector) -> None:
        self.objective = objective
        self.x = x

    def apply(self, hv: Vector, v: Vector, tol: float) -> float:
        self.objective.hess_vec(hv, v, self.x, tol)
        return tol


class RieszPreconditioner(LinearOperator):
    """Preconditioner supplied by ``objective.precond`` at the point ``x``.

    The forward action is the Riesz map, which makes the objective's default
    preconditioner amount to no preconditioning at all.
    """

    def __init__(self, objective: Objective, x: Vector) -> None:
        self.objective = objective
        self.x = x

    def apply(self, hv: Vector, v: Vector, tol: float) -> float:
        hv.set(v.dual())
        return tol

    def apply_inverse(self, hv: Vector, v: Vector, tol: float) -> float:
        self.objective.precond(hv, v, self.x, tol)
        return tol


class NewtonKrylovStep(Step):
    """
    Inexact Newton step with an optional secant preconditioner.

    Args:
        config: Step options. Defaults to :class:`NewtonKrylovConfig`.
        krylov: Krylov solver to use instead of building one from
            ``config.krylov_type``.
        secant: Secant approximation to use as preconditioner instead of
            building one from ``config.secant_type``. Only consulted when
            ``config.use_secant_preconditioner`` is set.

    Raises:
        InvalidConfigurationError: If a solver or secant has to be built from
            a type that cannot be constructed.

    Example:
        >>> import numpy as np
        >>> from newtonkrylov import NumpyVector, Problem, ProblemObjective
        >>> from newtonkrylov import AlgorithmState, BoundConstraint, NewtonKrylovStep
        >>> obj = ProblemObjective(Problem(fun=lambda x: 0.5 * x @ x, grad=lambda x: x))
        >>> x = NumpyVector(np.array([2.0, 0.0]))
        >>> s, g, state = x.clone(), x.dual(), AlgorithmState()
        >>> step = NewtonKrylovStep()
        >>> step.initialize(x, s, g, obj, BoundConstraint(), state)
        >>> step.compute(s, x, obj, BoundConstraint(), state)
        >>> s.data
        array([-2., -0.])
    """

    def __init__(
        self,
        config: Optional[NewtonKrylovConfig] = None,
        krylov: Optional[Krylov] = None,
        secant: Optional[Secant] = None,
    ) -> None:
        super().__init__()
        self.config = config if config is not None else NewtonKrylovConfig()
        self.use_secant_preconditioner = self.config.use_secant_preconditioner
        self.verbosity = self.config.print_verbosity

        self.secant = secant
        if secant is not None:
            self.secant_type = SecantType.USER_DEFINED
        else:
            self.secant_type = self.config.secant_type
            if self.use_secant_preconditioner:
                self.secant = secant_factory(self.secant_type, self.config.secant)

        if krylov is not None:
            self.krylov_type = KrylovType.USER_DEFINED
            self.krylov = krylov
        else:
            self.krylov_type = self.config.krylov_type
            self.krylov = krylov_factory(self.krylov_type, self.config.krylov)

        self.iter_krylov = 0
        self.flag_krylov = KrylovFlag.CONVERGED
        self._gp: Optional[Vector] = None

    def initialize(
        self,
        x: Vector,
        s: Vector,
        g: Vector,
        objective: Objective,
        bounds: BoundConstraint,
        state: AlgorithmState,
    ) -> None:
        super().initialize(x, s, g, objective, bounds, state)
        if self.use_secant_preconditioner:
            self._gp = g.clone()

    def compute(
        self,
        s: Vector,
        x: Vector,
        objective: Objective,
        bounds: BoundConstraint,
        state: AlgorithmState,
    ) -> None:
        step_state = self.get_state()
        point = state.iterate_vec if state.iterate_vec is not None else x

        hessian = HessianOperator(objective, point)
        if self.use_secant_preconditioner:
            precond: LinearOperator = self.secant
        else:
            precond = RieszPreconditioner(objective, point)

        self.flag_krylov = KrylovFlag.CONVERGED
        direction, self.iter_krylov, self.flag_krylov = self.krylov.run(
            s, hessian, step_state.gradient_vec, precond
        )
        if direction is not s:
            s.set(direction)
        logger.debug(
            "Krylov solve: %d iterations, flag %d", self.iter_krylov, int(self.flag_krylov)
        )

        # Curvature on the very first inner iteration: no usable Krylov
        # direction, fall back to steepest descent.
        if self.flag_krylov == KrylovFlag.NEGATIVE_CURVATURE and self.iter_krylov <= 1:
            logger.debug("Negative curvature on first Krylov iteration; using gradient")
            s.set(step_state.gradient_vec.dual())
        s.scale(-1.0)

    def update(
        self,
        x: Vector,
        s: Vector,
        objective: Objective,
        bounds: BoundConstraint,
        state: AlgorithmState,
    ) -> None:
        tol = sqrt_epsilon(x.epsilon)
        step_state = self.get_state()

        state.iter += 1
        x.axpy(1.0, s)
        step_state.descent_vec.set(s)
        state.snorm = s.norm()

        if self.use_secant_preconditioner:
            self._gp.set(step_state.gradient_vec)
        objective.update(x, True, state.iter)
        state.value = objective.value(x, tol)
        objective.gradient(step_state.gradient_vec, x, tol)
        state.ngrad += 1

        if self.use_secant_preconditioner:
            self.secant.update_storage(
                x, step_state.gradient_vec, self._gp, s, state.snorm, state.iter + 1
            )

        if state.iterate_vec is None:
            state.iterate_vec = x.clone()
        state.iterate_vec.set(x)
        state.gnorm = step_state.gradient_vec.norm()

    def print_header(self) -> str:
        lines = []
        if self.verbosity > 0:
            lines.append("-" * 109)
            lines.append(f"{DESCENT_NAME} status output definitions")
            lines.append("")
            lines.append("  iter     - Number of iterates (steps taken)")
            lines.append("  value    - Objective function value")
            lines.append("  gnorm    - Norm of the gradient")
            lines.append("  snorm    - Norm of the step (update to optimization vector)")
            lines.append("  #fval    - Cumulative number of times the objective function was evaluated")
            lines.append("  #grad    - Number of times the gradient was computed")
            lines.append("  iterCG   - Number of Krylov iterations used to compute search direction")
            lines.append("  flagCG   - Krylov solver flag")
            lines.append("-" * 109)
        lines.append(
            "  "
            f"{'iter':<6}{'value':<15}{'gnorm':<15}{'snorm':<15}"
            f"{'#fval':<10}{'#grad':<10}{'iterCG':<10}{'flagCG':<10}"
        )
        return "\n".join(lines) + "\n"

    def print_name(self) -> str:
        name = f"\n{DESCENT_NAME} using {self.krylov_type}"
        if self.use_secant_preconditioner:
            name += f" with {self.secant_type} preconditioning"
        return name + "\n"

    def print(self, state: AlgorithmState, print_header: bool = False) -> str:
        out = ""
        if state.iter == 0:
            out += self.print_name()
        if print_header:
            out += self.print_header()
        if state.iter == 0:
            out += f"  {state.iter:<6}{state.value:<15.6e}{state.gnorm:<15.6e}\n"
        else:
            out += (
                f"  {state.iter:<6}{state.value:<15.6e}{state.gnorm:<15.6e}"
                f"{state.snorm:<15.6e}{state.nfval:<10}{state.ngrad:<10}"
                f"{self.iter_krylov:<10}{int(self.flag_krylov):<10}\n"
            )
        return out


__all__ = ["NewtonKrylovStep", "HessianOperator", "RieszPreconditioner"]
