"""Objective functions and their derivative oracles.

An :class:`Objective` evaluates a scalar function of a :class:`Vector` and
supplies the derivative information a Newton-Krylov step needs. Only
``value`` is mandatory; gradients and Hessian-vector products fall back to
finite differences and the preconditioner falls back to the Riesz map.

Every oracle receives ``tol``, the accuracy requested by the caller. Exact
oracles ignore it.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Callable

import numpy as np
import torch

from .core import Problem
from .linalg.torch_vector import TorchVector
from .linalg.vector import Vector
from .utils import approx_grad, approx_hess_vec


class Objective(ABC):
    """Base class for objective functions."""

    def update(self, x: Vector, flag: bool = True, iter: int = -1) -> None:
        """Hook called whenever the optimization variable changes.

        ``flag`` is True when ``x`` is an accepted iterate and ``iter`` is the
        outer iteration number (-1 when unknown).
        """

    @abstractmethod
    def value(self, x: Vector, tol: float) -> float:
        """Return the objective value at ``x``."""

    def gradient(self, g: Vector, x: Vector, tol: float) -> None:
        """Write the gradient at ``x`` into the dual vector ``g``.

        The default uses central differences of :meth:`value` along each
        coordinate direction.
        """
        h = math.sqrt(x.epsilon) * max(1.0, x.norm())
        xh = x.clone()
        g.zero()
        for i in range(x.dimension()):
            e = x.basis(i)
            xh.set(x)
            xh.axpy(h, e)
            f_plus = self.value(xh, tol)
            xh.set(x)
            xh.axpy(-h, e)
            f_minus = self.value(xh, tol)
            g.axpy((f_plus - f_minus) / (2.0 * h), g.basis(i))

    def hess_vec(self, hv: Vector, v: Vector, x: Vector, tol: float) -> None:
        """Write the Hessian action ``H(x) v`` into ``hv``.

        The default is a forward difference of :meth:`gradient` along ``v``.
        """
        vnorm = v.norm()
        if vnorm == 0.0:
            hv.zero()
            return
        h = math.sqrt(x.epsilon) * max(1.0, x.norm()) / vnorm
        g0 = hv.clone()
        self.gradient(g0, x, tol)
        xh = x.clone()
        xh.set(x)
        xh.axpy(h, v)
        self.update(xh, False)
        self.gradient(hv, xh, tol)
        self.update(x, False)
        hv.axpy(-1.0, g0)
        hv.scale(1.0 / h)

    def precond(self, pv: Vector, v: Vector, x: Vector, tol: float) -> None:
        """Apply an approximate inverse Hessian to the dual vector ``v``.

        Defaults to the Riesz map, i.e. no preconditioning.
        """
        pv.set(v.dual())


class ProblemObjective(Objective):
    """Adapt a :class:`~newtonkrylov.core.Problem` to :class:`NumpyVector` inputs.

    Gradients and Hessian actions are computed in Euclidean coordinates, so
    the returned dual vectors hold the plain partial derivatives regardless
    of the inner product weights.
    """

    def __init__(self, problem: Problem) -> None:
        self.problem = problem

    def value(self, x: Vector, tol: float) -> float:
        return float(self.problem.fun(x.data))

    def gradient(self, g: Vector, x: Vector, tol: float) -> None:
        if self.problem.grad is not None:
            grad = np.asarray(self.problem.grad(x.data), dtype=float)
        else:
            grad = approx_grad(self.problem.fun, x.data)
        np.copyto(g.data, grad)

    def hess_vec(self, hv: Vector, v: Vector, x: Vector, tol: float) -> None:
        if self.problem.hess_vec is not None:
            out = self.problem.hess_vec(x.data, v.data)
        elif self.problem.hess is not None:
            out = np.asarray(self.problem.hess(x.data), dtype=float) @ v.data
        elif self.problem.grad is not None:
            out = approx_hess_vec(self.problem.grad, x.data, v.data)
        else:
            super().hess_vec(hv, v, x, tol)
            return
        np.copyto(hv.data, np.asarray(out, dtype=float))

    def precond(self, pv: Vector, v: Vector, x: Vector, tol: float) -> None:
        if self.problem.precond is None:
            super().precond(pv, v, x, tol)
            return
        np.copyto(pv.data, np.asarray(self.problem.precond(x.data, v.data), dtype=float))


class TorchObjective(Objective):
    """
    Objective defined by a differentiable PyTorch function.

    Gradients come from a single backward pass and Hessian-vector products
    from a double backward pass, so both are exact up to floating point.

    Args:
        fun: Callable taking a 1D tensor and returning a scalar (0D) tensor.
    """

    def __init__(self, fun: Callable[[torch.Tensor], torch.Tensor]) -> None:
        self.fun = fun

    def _evaluate(self, x: TorchVector) -> tuple[torch.Tensor, torch.Tensor]:
        params = x.tensor.clone().detach().requires_grad_(True)
        value = self.fun(params)
        if value.ndim != 0:
            raise ValueError(
                f"objective must return a scalar tensor (0D), got shape {tuple(value.shape)}"
            )
        return params, value

    def value(self, x: Vector, tol: float) -> float:
        with torch.no_grad():
            return float(self.fun(x.tensor).item())

    def gradient(self, g: Vector, x: Vector, tol: float) -> None:
        params, value = self._evaluate(x)
        if not value.requires_grad:
            g.zero()
            return
        (grad,) = torch.autograd.grad(value, params, allow_unused=True)
        with torch.no_grad():
            if grad is None:
                g.tensor.zero_()
            else:
                g.tensor.copy_(grad)

    def hess_vec(self, hv: Vector, v: Vector, x: Vector, tol: float) -> None:
        params, value = self._evaluate(x)
        if not value.requires_grad:
            hv.zero()
            return
        (grad,) = torch.autograd.grad(value, params, create_graph=True, allow_unused=True)
        if grad is None or not grad.requires_grad:
            # Gradient is constant in x, so the Hessian vanishes.
            hv.zero()
            return
        (hvp,) = torch.autograd.grad(
            grad, params, grad_outputs=v.tensor, allow_unused=True
        )
        with torch.no_grad():
            if hvp is None:
                hv.tensor.zero_()
            else:
                hv.tensor.copy_(hvp)


__all__ = ["Objective", "ProblemObjective", "TorchObjective"]
