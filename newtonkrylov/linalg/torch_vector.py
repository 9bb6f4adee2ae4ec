"""Vector implementation backed by a 1-D PyTorch tensor."""

from __future__ import annotations

from typing import Optional

import torch

from .vector import Vector


class TorchVector(Vector):
    """
    Euclidean vector stored in a 1-D ``torch.Tensor``.

    The tensor keeps its device and dtype; clones are allocated alongside the
    original. All arithmetic runs under ``torch.no_grad()`` so that vectors
    never join an autograd graph, even when built from a leaf tensor that
    requires gradients.

    Args:
        tensor: 1-D tensor holding the entries. It is detached and cloned.

    Raises:
        ValueError: If the tensor is not 1-D or is complex.
    """

    def __init__(self, tensor: torch.Tensor) -> None:
        if tensor.ndim != 1:
            raise ValueError(
                f"TorchVector expects a 1D tensor, got shape {tuple(tensor.shape)}"
            )
        if tensor.is_complex():
            raise ValueError("TorchVector only supports real dtypes.")
        self.tensor = tensor.detach().clone()

    def _check(self, other: Vector) -> "TorchVector":
        if not isinstance(other, TorchVector):
            raise TypeError(f"Expected TorchVector, got {type(other).__name__}")
        if other.tensor.shape != self.tensor.shape:
            raise ValueError(
                f"Dimension mismatch: {self.tensor.shape[0]} != {other.tensor.shape[0]}"
            )
        return other

    def clone(self) -> "TorchVector":
        return TorchVector(torch.zeros_like(self.tensor))

    @torch.no_grad()
    def set(self, other: Vector) -> None:
        self.tensor.copy_(self._check(other).tensor)

    @torch.no_grad()
    def plus(self, other: Vector) -> None:
        self.tensor.add_(self._check(other).tensor)

    @torch.no_grad()
    def axpy(self, alpha: float, other: Vector) -> None:
        self.tensor.add_(self._check(other).tensor, alpha=float(alpha))

    @torch.no_grad()
    def scale(self, alpha: float) -> None:
        self.tensor.mul_(float(alpha))

    @torch.no_grad()
    def zero(self) -> None:
        self.tensor.zero_()

    @torch.no_grad()
    def dot(self, other: Vector) -> float:
        return float(torch.dot(self.tensor, self._check(other).tensor).item())

    def dual(self) -> "TorchVector":
        return TorchVector(self.tensor)

    def dimension(self) -> int:
        return int(self.tensor.shape[0])

    def basis(self, i: int) -> "TorchVector":
        e = self.clone()
        e.tensor[i] = 1.0
        return e

    @torch.no_grad()
    def clamp(self, lower: Optional[Vector], upper: Optional[Vector]) -> None:
        lo = None if lower is None else self._check(lower).tensor
        hi = None if upper is None else self._check(upper).tensor
        if lo is None and hi is None:
            return
        self.tensor.clamp_(min=lo, max=hi)

    @property
    def epsilon(self) -> float:
        return float(torch.finfo(self.tensor.dtype).eps)

    def norm(self) -> float:
        return float(torch.linalg.vector_norm(self.tensor).item())

    def __repr__(self) -> str:
        return f"TorchVector({self.tensor!r})"


__all__ = ["TorchVector"]
