"""Newton-Krylov - inexact Newton steps with Krylov solvers and secant preconditioning."""

__version__ = "0.1.0"

# Driver
from .algorithm import Algorithm, StatusTest, newton_krylov

# Bounds
from .bounds import BoundConstraint, BoxConstraint

# Configuration
from .config import (
    InvalidConfigurationError,
    KrylovConfig,
    KrylovType,
    NewtonKrylovConfig,
    SecantConfig,
    SecantType,
)

# Core containers
from .core import OptimizeResult, Problem

# Krylov solvers
from .krylov import (
    ConjugateGradients,
    ConjugateResiduals,
    Krylov,
    KrylovFlag,
    KrylovResult,
    krylov_factory,
)

# Vectors and operators
from .linalg import LinearOperator, NumpyVector, TorchVector, Vector

# Objectives
from .objective import Objective, ProblemObjective, TorchObjective

# Secants
from .secant import LBFGS, LDFP, LSR1, BarzilaiBorwein, Secant, secant_factory

# Steps
from .step import AlgorithmState, NewtonKrylovStep, Step, StepState

__all__ = [
    # Version
    "__version__",
    # Vectors and operators
    "Vector",
    "NumpyVector",
    "TorchVector",
    "LinearOperator",
    # Objectives
    "Objective",
    "ProblemObjective",
    "TorchObjective",
    "Problem",
    "OptimizeResult",
    # Bounds
    "BoundConstraint",
    "BoxConstraint",
    # Configuration
    "InvalidConfigurationError",
    "KrylovType",
    "SecantType",
    "KrylovConfig",
    "SecantConfig",
    "NewtonKrylovConfig",
    # Krylov solvers
    "Krylov",
    "KrylovFlag",
    "KrylovResult",
    "ConjugateGradients",
    "ConjugateResiduals",
    "krylov_factory",
    # Secants
    "Secant",
    "LBFGS",
    "LDFP",
    "LSR1",
    "BarzilaiBorwein",
    "secant_factory",
    # Steps
    "AlgorithmState",
    "StepState",
    "Step",
    "NewtonKrylovStep",
    # Driver
    "StatusTest",
    "Algorithm",
    "newton_krylov",
]
