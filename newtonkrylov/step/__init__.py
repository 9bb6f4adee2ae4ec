"""Optimization steps and the state they share with the driver."""

from .base import AlgorithmState, Step, StepState
from .newton_krylov import HessianOperator, NewtonKrylovStep, RieszPreconditioner

__all__ = [
    "AlgorithmState",
    "StepState",
    "Step",
    "NewtonKrylovStep",
    "HessianOperator",
    "RieszPreconditioner",
]
