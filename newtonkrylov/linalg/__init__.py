"""Vector spaces and linear operators."""

from .operator import LinearOperator
from .torch_vector import TorchVector
from .vector import NumpyVector, Vector

__all__ = ["Vector", "NumpyVector", "TorchVector", "LinearOperator"]
