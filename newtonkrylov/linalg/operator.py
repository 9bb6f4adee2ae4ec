"""Linear operator interface shared by Hessians, preconditioners and secants."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .vector import Vector


class LinearOperator(ABC):
    """Action of a linear map on vectors.

    ``tol`` is the accuracy requested from the operator. Both methods return
    the tolerance actually achieved, which inexact oracles may report as
    larger than the request. Exact operators return ``tol`` unchanged.
    """

    @abstractmethod
    def apply(self, hv: Vector, v: Vector, tol: float) -> float:
        """Compute ``hv <- A v``."""

    def apply_inverse(self, hv: Vector, v: Vector, tol: float) -> float:
        """Compute ``hv <- A^{-1} v``; only required of preconditioners."""
        raise NotImplementedError(
            f"{type(self).__name__} does not implement apply_inverse"
        )


__all__ = ["LinearOperator"]
