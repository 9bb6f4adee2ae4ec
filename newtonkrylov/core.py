"""Core containers and tolerances shared across the package."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

Array = np.ndarray
ObjectiveFn = Callable[[Array], float]
GradientFn = Callable[[Array], Array]
HessianFn = Callable[[Array], Array]
HessVecFn = Callable[[Array, Array], Array]
PrecondFn = Callable[[Array, Array], Array]

ATOL = 1e-10

# Sentinel step norm reported before the first step is taken.
INITIAL_STEP_NORM = 1e10


def check_convergence(grad_norm: float, tol: float) -> bool:
    """Return True if gradient norm satisfies tolerance."""
    return grad_norm <= max(tol, ATOL)


def sqrt_epsilon(eps: float) -> float:
    """Default oracle tolerance for a numeric type with machine epsilon ``eps``."""
    return math.sqrt(eps)


@dataclass(frozen=True)
class Problem:
    """Container describing an unconstrained problem through NumPy callables.

    ``hess`` returns a dense Hessian matrix, ``hess_vec(x, v)`` its action on a
    vector and ``precond(x, v)`` the action of an approximate inverse Hessian.
    Missing derivatives are approximated by finite differences.
    """

    fun: ObjectiveFn
    grad: Optional[GradientFn] = None
    hess: Optional[HessianFn] = None
    hess_vec: Optional[HessVecFn] = None
    precond: Optional[PrecondFn] = None
    dim: Optional[int] = None


@dataclass
class OptimizeResult:
    """Result object returned by :func:`newtonkrylov.newton_krylov`."""

    x: Array
    fun: float
    nit: int
    success: bool
    message: str
    grad_norm: float
    nfev: int
    njev: int
    krylov_iterations: int = 0
    history: List[str] = field(default_factory=list)


__all__ = [
    "Array",
    "ObjectiveFn",
    "GradientFn",
    "HessianFn",
    "HessVecFn",
    "PrecondFn",
    "Problem",
    "OptimizeResult",
    "check_convergence",
    "sqrt_epsilon",
    "INITIAL_STEP_NORM",
    "ATOL",
]
