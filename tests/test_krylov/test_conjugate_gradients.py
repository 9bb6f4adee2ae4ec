import numpy as np
import pytest

from newtonkrylov import ConjugateGradients, KrylovConfig, NumpyVector
from newtonkrylov.krylov import KrylovFlag

TIGHT = KrylovConfig(absolute_tolerance=1e-10, relative_tolerance=1e-10, iteration_limit=50)


def test_solves_spd_system(spd_matrix, matrix_operator, riesz, rng):
    b = NumpyVector(rng.standard_normal(6))
    x = NumpyVector(np.zeros(6))
    solver = ConjugateGradients(TIGHT)
    direction, iters, flag = solver.run(x, matrix_operator(spd_matrix), b, riesz)
    assert direction is x
    assert flag == KrylovFlag.CONVERGED
    assert 1 <= iters <= 12
    assert np.allclose(spd_matrix @ x.data, b.data, atol=1e-8)
    assert solver.residual_norm < 1e-10


def test_identity_operator_converges_in_one_iteration(matrix_operator, riesz):
    b = NumpyVector(np.array([3.0, -4.0]))
    x = NumpyVector(np.zeros(2))
    _, iters, flag = ConjugateGradients().run(x, matrix_operator(np.eye(2)), b, riesz)
    assert (iters, flag) == (1, KrylovFlag.CONVERGED)
    assert np.allclose(x.data, b.data)


def test_exact_preconditioner_converges_in_one_iteration(spd_matrix, matrix_operator, rng):
    A = matrix_operator(spd_matrix)
    b = NumpyVector(rng.standard_normal(6))
    x = NumpyVector(np.zeros(6))
    _, iters, flag = ConjugateGradients(TIGHT).run(x, A, b, A)
    assert (iters, flag) == (1, KrylovFlag.CONVERGED)
    assert np.allclose(x.data, np.linalg.solve(spd_matrix, b.data))


def test_zero_rhs_returns_zero_without_iterating(matrix_operator, riesz):
    x = NumpyVector(np.array([5.0, 5.0]))
    A = matrix_operator(np.eye(2))
    _, iters, flag = ConjugateGradients().run(x, A, NumpyVector(np.zeros(2)), riesz)
    assert (iters, flag) == (0, KrylovFlag.CONVERGED)
    assert np.all(x.data == 0.0)
    assert A.calls == 0


def test_negative_curvature_on_first_iteration(matrix_operator, riesz):
    x = NumpyVector(np.ones(3))
    b = NumpyVector(np.array([1.0, 2.0, 3.0]))
    _, iters, flag = ConjugateGradients().run(x, matrix_operator(-np.eye(3)), b, riesz)
    assert (iters, flag) == (1, KrylovFlag.NEGATIVE_CURVATURE)
    assert np.all(x.data == 0.0)


def test_negative_curvature_after_first_iteration(matrix_operator, riesz):
    # inertia (1, 1): the second conjugate direction has negative curvature
    A = np.diag([2.0, -1.0])
    b = NumpyVector(np.array([1.0, 0.1]))
    x = NumpyVector(np.zeros(2))
    _, iters, flag = ConjugateGradients(TIGHT).run(x, matrix_operator(A), b, riesz)
    assert (iters, flag) == (2, KrylovFlag.NEGATIVE_CURVATURE)
    assert x.norm() > 0.0


def test_iteration_limit(spd_matrix, matrix_operator, riesz, rng):
    config = KrylovConfig(absolute_tolerance=1e-12, relative_tolerance=1e-12, iteration_limit=2)
    b = NumpyVector(rng.standard_normal(6))
    x = NumpyVector(np.zeros(6))
    _, iters, flag = ConjugateGradients(config).run(x, matrix_operator(spd_matrix), b, riesz)
    assert (iters, flag) == (2, KrylovFlag.ITERATION_LIMIT)


@pytest.mark.parametrize("limit", [1, 3])
def test_operator_applied_once_per_iteration(spd_matrix, matrix_operator, riesz, rng, limit):
    config = KrylovConfig(absolute_tolerance=1e-12, relative_tolerance=1e-12, iteration_limit=limit)
    A = matrix_operator(spd_matrix)
    b = NumpyVector(rng.standard_normal(6))
    _, iters, _ = ConjugateGradients(config).run(NumpyVector(np.zeros(6)), A, b, riesz)
    assert A.calls == iters == limit


def test_weighted_inner_product(spd_matrix, matrix_operator, riesz, rng):
    weights = np.array([1.0, 2.0, 0.5, 4.0, 1.0, 3.0])
    x = NumpyVector(np.zeros(6), weights=weights)
    b = x.dual()
    b.data[:] = rng.standard_normal(6)
    _, _, flag = ConjugateGradients(TIGHT).run(x, matrix_operator(spd_matrix), b, riesz)
    assert flag == KrylovFlag.CONVERGED
    assert np.allclose(x.data, np.linalg.solve(spd_matrix, b.data), atol=1e-8)
