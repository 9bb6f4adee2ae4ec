"""Limited-memory symmetric rank-one update."""

from __future__ import annotations

from typing import Sequence

from ..linalg.vector import Vector
from .base import InitialOperator, Secant, pairing

# Relative size below which a rank-one denominator is treated as zero.
SR1_SKIP_TOLERANCE = 1e-8


def _rank_one_product(
    out: Vector,
    v: Vector,
    targets: Sequence[Vector],
    sources: Sequence[Vector],
    initial: InitialOperator,
) -> None:
    """Apply ``M_k`` where ``M_{i+1} = M_i + u u' / (u·w)`` and ``u = t - M_i w``."""
    corrections: list[tuple[Vector, float]] = []

    def product(res: Vector, vec: Vector) -> None:
        initial(res, vec)
        for u, denom in corrections:
            res.axpy(pairing(u, vec) / denom, u)

    for t, w in zip(targets, sources):
        u = t.clone()
        product(u, w)
        u.scale(-1.0)
        u.plus(t)
        denom = pairing(u, w)
        if abs(denom) <= SR1_SKIP_TOLERANCE * u.norm() * w.norm():
            continue
        corrections.append((u, denom))
    product(out, v)


class LSR1(Secant):
    """Limited-memory SR1 approximation.

    SR1 can produce indefinite approximations; pairs whose rank-one
    denominator is negligible are left out of the product.
    """

    name = "Limited-Memory SR1"

    def apply_h(self, hv: Vector, v: Vector) -> None:
        _rank_one_product(hv, v, self.iter_diff, self.grad_diff, self.apply_h0)

    def apply_b(self, bv: Vector, v: Vector) -> None:
        _rank_one_product(bv, v, self.grad_diff, self.iter_diff, self.apply_b0)


__all__ = ["LSR1", "SR1_SKIP_TOLERANCE"]
