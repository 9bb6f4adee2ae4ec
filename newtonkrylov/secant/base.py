"""Limited-memory secant approximations used as linear operators.

A secant keeps the most recent curvature pairs ``(s, y, s·y)`` where ``s`` is
a step and ``y`` the matching gradient difference. ``apply`` approximates the
Hessian action ``B v`` and ``apply_inverse`` the inverse action ``H v``, which
lets a secant stand in for a preconditioner.
"""

from __future__ import annotations

import math
from abc import abstractmethod
from collections import deque
from typing import Callable, Deque, Optional, Sequence

from ..config import SecantConfig
from ..linalg.operator import LinearOperator
from ..linalg.vector import Vector
from ..logging import get_logger

logger = get_logger(__name__)

InitialOperator = Callable[[Vector, Vector], None]


def pairing(u: Vector, w: Vector) -> float:
    """Duality pairing of a vector with one from the opposite space."""
    return u.dot(w.dual())


class Secant(LinearOperator):
    """
    Base class holding the curvature history.

    Args:
        config: History size and initial scaling. Defaults to
            :class:`SecantConfig`.
    """

    name = "Secant"

    def __init__(self, config: Optional[SecantConfig] = None) -> None:
        self.config = config if config is not None else SecantConfig()
        storage = self.storage
        self.iter_diff: Deque[Vector] = deque(maxlen=storage)
        self.grad_diff: Deque[Vector] = deque(maxlen=storage)
        self.product: Deque[float] = deque(maxlen=storage)
        self.iterate: Optional[Vector] = None
        self.iter = 0

    @property
    def storage(self) -> int:
        return int(self.config.maximum_storage)

    def __len__(self) -> int:
        return len(self.product)

    def pairs(self) -> list[tuple[Vector, Vector, float]]:
        """Stored pairs, oldest first."""
        return list(zip(self.iter_diff, self.grad_diff, self.product))

    def reset(self) -> None:
        self.iter_diff.clear()
        self.grad_diff.clear()
        self.product.clear()
        self.iterate = None
        self.iter = 0

    def update_storage(
        self,
        x: Vector,
        grad: Vector,
        gp: Vector,
        s: Vector,
        snorm: float,
        iter: int,
    ) -> bool:
        """Append the pair ``(s, grad - gp)`` when it has positive curvature.

        Pairs with ``s·y <= eps * snorm**2`` (including NaN) are skipped and
        leave the history unchanged. Returns whether the pair was stored.
        """
        if self.iterate is None:
            self.iterate = x.clone()
        self.iterate.set(x)
        self.iter = iter

        y = grad.clone()
        y.set(grad)
        y.axpy(-1.0, gp)
        sy = pairing(s, y)
        if not sy > x.epsilon * snorm * snorm:
            logger.debug("Skipping curvature pair at iteration %d: s.y = %g", iter, sy)
            return False

        step = s.clone()
        step.set(s)
        # deques evict the oldest pair once full
        self.iter_diff.append(step)
        self.grad_diff.append(y)
        self.product.append(sy)
        return True

    def apply_h0(self, hv: Vector, v: Vector) -> None:
        """Initial inverse Hessian approximation applied to a dual vector."""
        hv.set(v.dual())
        if self.config.use_default_scaling:
            if self.product:
                y = self.grad_diff[-1]
                hv.scale(self.product[-1] / y.dot(y))
        else:
            hv.scale(1.0 / self.config.initial_hessian_scale)

    def apply_b0(self, bv: Vector, v: Vector) -> None:
        """Initial Hessian approximation applied to a primal vector."""
        bv.set(v.dual())
        if self.config.use_default_scaling:
            if self.product:
                y = self.grad_diff[-1]
                bv.scale(y.dot(y) / self.product[-1])
        else:
            bv.scale(self.config.initial_hessian_scale)

    @abstractmethod
    def apply_h(self, hv: Vector, v: Vector) -> None:
        """Inverse Hessian approximation: ``hv <- H v``."""

    @abstractmethod
    def apply_b(self, bv: Vector, v: Vector) -> None:
        """Hessian approximation: ``bv <- B v``."""

    def apply(self, hv: Vector, v: Vector, tol: float) -> float:
        self.apply_b(hv, v)
        return tol

    def apply_inverse(self, hv: Vector, v: Vector, tol: float) -> float:
        self.apply_h(hv, v)
        return tol


def two_loop_product(
    out: Vector,
    v: Vector,
    firsts: Sequence[Vector],
    seconds: Sequence[Vector],
    products: Sequence[float],
    initial: InitialOperator,
) -> None:
    """Two-loop recursion of limited-memory BFGS.

    With ``firsts = s`` and ``seconds = y`` this applies the inverse BFGS
    matrix; swapping the roles applies the forward DFP matrix.
    """
    q = v.clone()
    q.set(v)
    alphas = []
    for u, w, rho in reversed(list(zip(firsts, seconds, products))):
        alpha = pairing(u, q) / rho
        q.axpy(-alpha, w)
        alphas.append(alpha)
    initial(out, q)
    for (u, w, rho), alpha in zip(zip(firsts, seconds, products), reversed(alphas)):
        beta = pairing(out, w) / rho
        out.axpy(alpha - beta, u)


def compact_product(
    out: Vector,
    v: Vector,
    firsts: Sequence[Vector],
    seconds: Sequence[Vector],
    products: Sequence[float],
    initial: InitialOperator,
) -> None:
    """Unrolled rank-two recursion ``B_{i+1} = B_i + b b' - a a'``.

    With ``firsts = s`` and ``seconds = y`` this applies the forward BFGS
    matrix; swapping the roles applies the inverse DFP matrix.
    """
    initial(out, v)
    a_vecs: list[Vector] = []
    b_vecs: list[Vector] = []
    for u, w, rho in zip(firsts, seconds, products):
        b = w.clone()
        b.set(w)
        b.scale(1.0 / math.sqrt(rho))
        a = out.clone()
        initial(a, u)
        for aj, bj in zip(a_vecs, b_vecs):
            a.axpy(pairing(u, bj), bj)
            a.axpy(-pairing(u, aj), aj)
        a.scale(1.0 / math.sqrt(pairing(u, a)))
        out.axpy(pairing(v, b), b)
        out.axpy(-pairing(v, a), a)
        a_vecs.append(a)
        b_vecs.append(b)


__all__ = ["Secant", "pairing", "two_loop_product", "compact_product"]
