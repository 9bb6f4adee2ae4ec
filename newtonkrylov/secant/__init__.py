"""Quasi-Newton (secant) Hessian approximations."""

from .barzilai_borwein import BarzilaiBorwein
from .base import Secant
from .factory import secant_factory
from .lbfgs import LBFGS
from .ldfp import LDFP
from .lsr1 import LSR1

__all__ = [
    "Secant",
    "LBFGS",
    "LDFP",
    "LSR1",
    "BarzilaiBorwein",
    "secant_factory",
]
