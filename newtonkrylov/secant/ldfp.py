"""Limited-memory DFP."""

from __future__ import annotations

from ..linalg.vector import Vector
from .base import Secant, compact_product, two_loop_product


class LDFP(Secant):
    """Limited-memory DFP approximation, the dual of BFGS with ``s`` and ``y`` swapped."""

    name = "Limited-Memory DFP"

    def apply_h(self, hv: Vector, v: Vector) -> None:
        compact_product(
            hv, v, self.grad_diff, self.iter_diff, self.product, self.apply_h0
        )

    def apply_b(self, bv: Vector, v: Vector) -> None:
        two_loop_product(
            bv, v, self.grad_diff, self.iter_diff, self.product, self.apply_b0
        )


__all__ = ["LDFP"]
