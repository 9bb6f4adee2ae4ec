"""Dense operators for exercising Krylov solvers."""

import numpy as np
import pytest

from newtonkrylov import LinearOperator


class MatrixOperator(LinearOperator):
    """Dense matrix acting on the data of NumPy vectors."""

    def __init__(self, matrix):
        self.matrix = np.asarray(matrix, dtype=float)
        self.calls = 0

    def apply(self, hv, v, tol):
        self.calls += 1
        np.copyto(hv.data, self.matrix @ v.data)
        return tol

    def apply_inverse(self, hv, v, tol):
        np.copyto(hv.data, np.linalg.solve(self.matrix, v.data))
        return tol


class RieszMap(LinearOperator):
    """Unpreconditioned solve: the inverse action is the Riesz map."""

    def apply(self, hv, v, tol):
        hv.set(v.dual())
        return tol

    def apply_inverse(self, hv, v, tol):
        hv.set(v.dual())
        return tol


@pytest.fixture
def matrix_operator():
    return MatrixOperator


@pytest.fixture
def riesz():
    return RieszMap()
