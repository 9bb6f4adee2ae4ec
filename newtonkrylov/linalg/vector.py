"""Abstract vector interface and a NumPy-backed implementation.

Vectors live in a primal space paired with a dual space. Gradients and
operator outputs are dual vectors; iterates and steps are primal. The
:meth:`Vector.dual` map converts between the two representations (the Riesz
map of the underlying inner product).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np


class Vector(ABC):
    """Element of a Hilbert space with a well-defined dual counterpart.

    All arithmetic is in place and never changes the space the vector belongs
    to. ``clone`` returns a new, independently owned vector of the same space
    whose contents are unspecified until ``set`` or ``zero`` is called.
    """

    @abstractmethod
    def clone(self) -> "Vector":
        """Return a new vector in the same space."""

    @abstractmethod
    def set(self, other: "Vector") -> None:
        """Copy the contents of ``other`` into this vector."""

    @abstractmethod
    def plus(self, other: "Vector") -> None:
        """Compute ``self <- self + other``."""

    @abstractmethod
    def axpy(self, alpha: float, other: "Vector") -> None:
        """Compute ``self <- self + alpha * other``."""

    @abstractmethod
    def scale(self, alpha: float) -> None:
        """Compute ``self <- alpha * self``."""

    @abstractmethod
    def zero(self) -> None:
        """Set every entry to zero."""

    @abstractmethod
    def dot(self, other: "Vector") -> float:
        """Inner product of two vectors of the same space."""

    @abstractmethod
    def dual(self) -> "Vector":
        """Return the Riesz representation of this vector in the dual space."""

    @abstractmethod
    def dimension(self) -> int:
        """Number of degrees of freedom."""

    @abstractmethod
    def basis(self, i: int) -> "Vector":
        """Return the ``i``-th canonical basis vector of this space."""

    @abstractmethod
    def clamp(self, lower: Optional["Vector"], upper: Optional["Vector"]) -> None:
        """Project entries onto the box ``[lower, upper]`` element-wise."""

    @property
    def epsilon(self) -> float:
        """Machine epsilon of the working numeric type."""
        return float(np.finfo(float).eps)

    def norm(self) -> float:
        return float(np.sqrt(max(self.dot(self), 0.0)))


class NumpyVector(Vector):
    """Vector backed by a 1-D NumPy array with a diagonal inner product.

    The inner product is ``<u, v> = sum(w * u * v)`` for positive weights
    ``w``. The dual of a vector ``x`` has data ``w * x`` and weights ``1 / w``,
    so ``x.dual().dual()`` recovers ``x``. Without weights the space is
    Euclidean and ``dual`` simply returns a copy.

    Parameters
    ----------
    data:
        Entries of the vector. The array is copied.
    weights:
        Optional positive weights defining the inner product.
    """

    def __init__(self, data, weights: Optional[np.ndarray] = None) -> None:
        arr = np.array(data, dtype=float, copy=True)
        if arr.ndim != 1:
            raise ValueError(f"NumpyVector expects 1-D data, got ndim={arr.ndim}")
        self.data = arr
        if weights is not None:
            weights = np.asarray(weights, dtype=self.data.dtype)
            if weights.shape != self.data.shape:
                raise ValueError(
                    f"Weight shape {weights.shape} does not match data shape "
                    f"{self.data.shape}"
                )
            if np.any(weights <= 0):
                raise ValueError("Inner product weights must be positive.")
        self.weights = weights

    def _check(self, other: Vector) -> "NumpyVector":
        if not isinstance(other, NumpyVector):
            raise TypeError(
                f"Expected NumpyVector, got {type(other).__name__}"
            )
        if other.data.shape != self.data.shape:
            raise ValueError(
                f"Dimension mismatch: {self.data.shape[0]} != {other.data.shape[0]}"
            )
        return other

    def clone(self) -> "NumpyVector":
        return NumpyVector(np.zeros_like(self.data), self.weights)

    def set(self, other: Vector) -> None:
        np.copyto(self.data, self._check(other).data)

    def plus(self, other: Vector) -> None:
        self.data += self._check(other).data

    def axpy(self, alpha: float, other: Vector) -> None:
        self.data += alpha * self._check(other).data

    def scale(self, alpha: float) -> None:
        self.data *= alpha

    def zero(self) -> None:
        self.data.fill(0.0)

    def dot(self, other: Vector) -> float:
        other = self._check(other)
        if self.weights is None:
            return float(np.dot(self.data, other.data))
        return float(np.sum(self.weights * self.data * other.data))

    def dual(self) -> "NumpyVector":
        if self.weights is None:
            return NumpyVector(self.data)
        return NumpyVector(self.weights * self.data, 1.0 / self.weights)

    def dimension(self) -> int:
        return int(self.data.shape[0])

    def basis(self, i: int) -> "NumpyVector":
        e = self.clone()
        e.data[i] = 1.0
        return e

    def clamp(self, lower: Optional[Vector], upper: Optional[Vector]) -> None:
        lo = None if lower is None else self._check(lower).data
        hi = None if upper is None else self._check(upper).data
        if lo is None and hi is None:
            return
        np.clip(self.data, lo, hi, out=self.data)

    @property
    def epsilon(self) -> float:
        return float(np.finfo(self.data.dtype).eps)

    def __repr__(self) -> str:
        return f"NumpyVector({self.data!r})"


__all__ = ["Vector", "NumpyVector"]
