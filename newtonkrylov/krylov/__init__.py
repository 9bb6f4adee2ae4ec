"""Krylov subspace solvers for the Newton system."""

from .base import Krylov, KrylovFlag, KrylovResult
from .cg import ConjugateGradients
from .cr import ConjugateResiduals
from .factory import krylov_factory

__all__ = [
    "Krylov",
    "KrylovFlag",
    "KrylovResult",
    "ConjugateGradients",
    "ConjugateResiduals",
    "krylov_factory",
]
