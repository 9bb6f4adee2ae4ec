"""Limited-memory BFGS."""

from __future__ import annotations

from ..linalg.vector import Vector
from .base import Secant, compact_product, two_loop_product


class LBFGS(Secant):
    """Limited-memory BFGS approximation.

    The inverse action uses the two-loop recursion; the forward action
    unrolls the rank-two updates so that ``B`` and ``H`` stay exact inverses
    of each other for the same history.
    """

    name = "Limited-Memory BFGS"

    def apply_h(self, hv: Vector, v: Vector) -> None:
        two_loop_product(
            hv, v, self.iter_diff, self.grad_diff, self.product, self.apply_h0
        )

    def apply_b(self, bv: Vector, v: Vector) -> None:
        compact_product(
            bv, v, self.iter_diff, self.grad_diff, self.product, self.apply_b0
        )


__all__ = ["LBFGS"]
