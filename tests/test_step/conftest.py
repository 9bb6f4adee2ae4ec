"""Scripted collaborators for driving a Newton-Krylov step by hand."""

import numpy as np
import pytest

from newtonkrylov import LBFGS, AlgorithmState, BoundConstraint, Krylov, NumpyVector
from newtonkrylov.krylov import KrylovFlag, KrylovResult


class ScriptedKrylov(Krylov):
    """Krylov solver that fills the direction with a fixed value."""

    def __init__(self, iterations, flag, fill=123.0):
        super().__init__()
        self.iterations = iterations
        self.flag = KrylovFlag(flag)
        self.fill = fill
        self.calls = []

    def run(self, x, A, b, M):
        self.calls.append((A, b, M))
        x.data[:] = self.fill
        return KrylovResult(x, self.iterations, self.flag)


class RecordingKrylov(Krylov):
    """Wrap a real solver and keep a copy of every raw direction."""

    def __init__(self, inner):
        super().__init__(inner.config)
        self.inner = inner
        self.directions = []
        self.operators = []

    def run(self, x, A, b, M):
        result = self.inner.run(x, A, b, M)
        self.directions.append(x.data.copy())
        self.operators.append((A, M))
        return result


class CountingSecant(LBFGS):
    def __init__(self, config=None):
        super().__init__(config)
        self.updates = []
        self.applications = 0

    def update_storage(self, x, grad, gp, s, snorm, iter):
        self.updates.append(iter)
        return super().update_storage(x, grad, gp, s, snorm, iter)

    def apply_h(self, hv, v):
        self.applications += 1
        super().apply_h(hv, v)


@pytest.fixture
def start():
    """Initialize ``step`` at ``x0`` and return ``(x, s, state)``."""

    def init(step, objective, x0, weights=None):
        x = NumpyVector(np.asarray(x0, dtype=float), weights=weights)
        s = x.clone()
        state = AlgorithmState()
        step.initialize(x, s, x.dual(), objective, BoundConstraint(), state)
        return x, s, state

    return init


@pytest.fixture
def scripted_krylov():
    return ScriptedKrylov


@pytest.fixture
def recording_krylov():
    return RecordingKrylov


@pytest.fixture
def counting_secant():
    return CountingSecant
