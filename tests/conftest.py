"""Pytest configuration and shared fixtures for Newton-Krylov tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- Small objectives with known derivatives
"""

import os

import numpy as np
import pytest
import torch

from newtonkrylov import Problem


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Auto-use fixture to set global random seeds for reproducibility."""
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    np.random.seed(seed)
    torch.manual_seed(seed)


@pytest.fixture
def spd_matrix(rng: np.random.Generator) -> np.ndarray:
    """Well-conditioned 6x6 symmetric positive definite matrix."""
    q, _ = np.linalg.qr(rng.standard_normal((6, 6)))
    return q @ np.diag([1.0, 2.0, 3.0, 5.0, 8.0, 13.0]) @ q.T


@pytest.fixture
def half_norm_problem() -> Problem:
    """f(x) = 0.5 |x|^2 with identity Hessian."""
    return Problem(
        fun=lambda x: float(0.5 * x @ x),
        grad=lambda x: np.array(x, dtype=float),
        hess=lambda x: np.eye(x.size),
    )


def rosenbrock(x: np.ndarray) -> float:
    return float((1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2)


def rosenbrock_grad(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )


def rosenbrock_hess(x: np.ndarray) -> np.ndarray:
    return np.array(
        [
            [1200 * x[0] ** 2 - 400 * x[1] + 2, -400 * x[0]],
            [-400 * x[0], 200.0],
        ]
    )


@pytest.fixture
def rosenbrock_problem() -> Problem:
    return Problem(fun=rosenbrock, grad=rosenbrock_grad, hess=rosenbrock_hess, dim=2)
