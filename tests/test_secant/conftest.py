"""Curvature histories generated from a fixed SPD quadratic."""

import numpy as np
import pytest

from newtonkrylov import NumpyVector


@pytest.fixture
def feed_pairs(spd_matrix, rng):
    """Return a helper storing ``count`` exact pairs ``(s, A s)`` in a secant."""

    def feed(secant, count):
        x = NumpyVector(np.zeros(6))
        gp = x.dual()
        steps = []
        for k in range(count):
            s = NumpyVector(rng.standard_normal(6))
            grad = NumpyVector(spd_matrix @ s.data)
            assert secant.update_storage(x, grad, gp, s, s.norm(), k + 1)
            steps.append(s)
        return steps

    return feed
