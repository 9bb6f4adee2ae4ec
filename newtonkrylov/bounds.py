"""Bound constraints accepted by optimization steps."""

from __future__ import annotations

from typing import Optional

from .linalg.vector import Vector


class BoundConstraint:
    """Inactive bound constraint.

    Steps take a bound constraint for interface uniformity with constrained
    variants. This base class imposes nothing: it is never activated and its
    projection leaves the vector unchanged.
    """

    def is_activated(self) -> bool:
        return False

    def project(self, x: Vector) -> None:
        """Project ``x`` onto the feasible set in place."""

    def is_feasible(self, x: Vector) -> bool:
        return True


class BoxConstraint(BoundConstraint):
    """Element-wise bounds ``lower <= x <= upper``.

    Either bound may be ``None`` for a one-sided box.
    """

    def __init__(
        self, lower: Optional[Vector] = None, upper: Optional[Vector] = None
    ) -> None:
        if lower is None and upper is None:
            raise ValueError("BoxConstraint requires at least one bound.")
        if lower is not None and upper is not None:
            gap = upper.clone()
            gap.set(upper)
            gap.axpy(-1.0, lower)
            # min(upper - lower, 0) is nonzero wherever lower > upper
            violation = gap.clone()
            violation.set(gap)
            upper_limit = gap.clone()
            upper_limit.zero()
            violation.clamp(None, upper_limit)
            if violation.norm() > 0.0:
                raise ValueError("Lower bound exceeds upper bound.")
        self.lower = lower
        self.upper = upper
        self._activated = True

    def is_activated(self) -> bool:
        return self._activated

    def activate(self) -> None:
        self._activated = True

    def deactivate(self) -> None:
        self._activated = False

    def project(self, x: Vector) -> None:
        if self._activated:
            x.clamp(self.lower, self.upper)

    def is_feasible(self, x: Vector) -> bool:
        projected = x.clone()
        projected.set(x)
        projected.clamp(self.lower, self.upper)
        projected.axpy(-1.0, x)
        return projected.norm() == 0.0


__all__ = ["BoundConstraint", "BoxConstraint"]
