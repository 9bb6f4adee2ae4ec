"""Preconditioned conjugate gradients."""

from __future__ import annotations

import math

from ..linalg.operator import LinearOperator
from ..linalg.vector import Vector
from .base import Krylov, KrylovFlag, KrylovResult


class ConjugateGradients(Krylov):
    """Preconditioned CG that stops on the first direction of nonpositive curvature."""

    name = "Conjugate Gradients"

    def run(
        self, x: Vector, A: LinearOperator, b: Vector, M: LinearOperator
    ) -> KrylovResult:
        x.zero()
        rnorm = b.norm()
        self.residual_norm = rnorm
        if rnorm == 0.0:
            return KrylovResult(x, 0, KrylovFlag.CONVERGED)
        rtol = self.stopping_tolerance(rnorm)
        itol = self.operator_tolerance(x)

        r = b.clone()
        r.set(b)
        v = x.clone()
        M.apply_inverse(v, r, itol)
        p = x.clone()
        p.set(v)
        Ap = b.clone()
        rv = v.dot(r.dual())

        flag = KrylovFlag.CONVERGED
        maxit = self.iteration_limit
        it = 0
        while it < maxit:
            A.apply(Ap, p, itol)
            kappa = p.dot(Ap.dual())
            if kappa <= 0.0:
                flag = KrylovFlag.NEGATIVE_CURVATURE
                break
            alpha = rv / kappa
            x.axpy(alpha, p)
            r.axpy(-alpha, Ap)
            rnorm = r.norm()
            if rnorm < rtol:
                break
            M.apply_inverse(v, r, itol)
            rv_old = rv
            rv = v.dot(r.dual())
            if rv == 0.0 or not math.isfinite(rv):
                flag = KrylovFlag.BREAKDOWN
                break
            p.scale(rv / rv_old)
            p.plus(v)
            it += 1

        if it == maxit:
            flag = KrylovFlag.ITERATION_LIMIT
        else:
            it += 1
        self.residual_norm = rnorm
        return KrylovResult(x, it, flag)


__all__ = ["ConjugateGradients"]
