"""Finite-difference helpers for derivative oracles.

These utilities avoid any dependency on SciPy and provide deterministic,
pure NumPy implementations suitable for small to medium scale problems.
"""

from __future__ import annotations

import numpy as np

from .core import Array, GradientFn, ObjectiveFn


def approx_grad(fun: ObjectiveFn, x: Array, eps: float = 1e-6) -> Array:
    """Compute a central-difference gradient approximation.

    Parameters
    ----------
    fun:
        Objective function returning a scalar given x.
    x:
        Point where the gradient is approximated.
    eps:
        Perturbation size for finite differences.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    x = np.asarray(x, dtype=float).copy()
    grad = np.zeros_like(x, dtype=float)
    for i in range(x.size):
        ei = np.zeros_like(x)
        ei[i] = eps
        fx_plus = fun(x + ei)
        fx_minus = fun(x - ei)
        grad[i] = (fx_plus - fx_minus) / (2.0 * eps)
    return grad


def approx_hess_vec(
    grad: GradientFn, x: Array, v: Array, eps: float = 1e-6
) -> Array:
    """Forward-difference approximation of the Hessian action ``H(x) v``.

    The step is scaled by the size of ``x`` and ``v`` so that the perturbation
    stays meaningful for both tiny and large iterates. A zero direction gives
    a zero product without evaluating the gradient.
    """
    if eps <= 0:
        raise ValueError("eps must be positive")
    x = np.asarray(x, dtype=float)
    v = np.asarray(v, dtype=float)
    vnorm = float(np.linalg.norm(v))
    if vnorm == 0.0:
        return np.zeros_like(x)
    h = eps * max(1.0, float(np.linalg.norm(x))) / vnorm
    g0 = np.asarray(grad(x), dtype=float)
    g1 = np.asarray(grad(x + h * v), dtype=float)
    return (g1 - g0) / h


__all__ = ["approx_grad", "approx_hess_vec"]
