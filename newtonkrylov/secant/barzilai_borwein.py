"""Barzilai-Borwein scalar secant approximation."""

from __future__ import annotations

from ..linalg.vector import Vector
from .base import Secant, pairing


class BarzilaiBorwein(Secant):
    """Scalar multiple of the Riesz map fitted to the newest curvature pair.

    Type 1 uses ``H = (s·y / y·y) I`` and type 2 ``H = (s·s / s·y) I``. Only
    one pair is ever stored.
    """

    name = "Barzilai-Borwein"

    @property
    def storage(self) -> int:
        return 1

    def _inverse_scale(self) -> float:
        s, y, sy = self.iter_diff[-1], self.grad_diff[-1], self.product[-1]
        if self.config.barzilai_borwein_type == 1:
            return sy / y.dot(y)
        return s.dot(s) / sy

    def apply_h(self, hv: Vector, v: Vector) -> None:
        hv.set(v.dual())
        if self.product:
            hv.scale(self._inverse_scale())

    def apply_b(self, bv: Vector, v: Vector) -> None:
        bv.set(v.dual())
        if self.product:
            bv.scale(1.0 / self._inverse_scale())


__all__ = ["BarzilaiBorwein"]
