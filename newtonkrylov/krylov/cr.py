"""Preconditioned conjugate residuals."""

from __future__ import annotations

import math

from ..linalg.operator import LinearOperator
from ..linalg.vector import Vector
from .base import Krylov, KrylovFlag, KrylovResult


class ConjugateResiduals(Krylov):
    """Preconditioned CR for symmetric operators.

    Minimises the preconditioned residual norm over the Krylov subspace.
    Curvature is measured on the preconditioned residual ``z``; ``z·Az <= 0``
    ends the solve with ``NEGATIVE_CURVATURE``.
    """

    name = "Conjugate Residuals"

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
        z = x.clone()
        M.apply_inverse(z, r, itol)
        Az = b.clone()
        A.apply(Az, z, itol)
        p = x.clone()
        p.set(z)
        Ap = b.clone()
        Ap.set(Az)
        MAp = x.clone()
        zAz = z.dot(Az.dual())

        flag = KrylovFlag.CONVERGED
        maxit = self.iteration_limit
        it = 0
        while it < maxit:
            if zAz <= 0.0:
                flag = KrylovFlag.NEGATIVE_CURVATURE
                break
            M.apply_inverse(MAp, Ap, itol)
            denom = MAp.dot(Ap.dual())
            if denom <= 0.0 or not math.isfinite(denom):
                flag = KrylovFlag.BREAKDOWN
                break
            alpha = zAz / denom
            x.axpy(alpha, p)
            r.axpy(-alpha, Ap)
            z.axpy(-alpha, MAp)
            rnorm = r.norm()
            if rnorm < rtol:
                break
            A.apply(Az, z, itol)
            zAz_new = z.dot(Az.dual())
            beta = zAz_new / zAz
            zAz = zAz_new
            p.scale(beta)
            p.plus(z)
            Ap.scale(beta)
            Ap.plus(Az)
            it += 1

        if it == maxit:
            flag = KrylovFlag.ITERATION_LIMIT
        else:
            it += 1
        self.residual_norm = rnorm
        return KrylovResult(x, it, flag)


__all__ = ["ConjugateResiduals"]
