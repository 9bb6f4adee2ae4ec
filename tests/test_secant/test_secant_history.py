import numpy as np
import pytest

from newtonkrylov import (
    LSR1,
    BarzilaiBorwein,
    InvalidConfigurationError,
    LBFGS,
    LDFP,
    NumpyVector,
    SecantConfig,
    SecantType,
    secant_factory,
)


def _pair(s, y):
    return NumpyVector(np.array(s, dtype=float)), NumpyVector(np.array(y, dtype=float))


def test_pair_with_nonpositive_curvature_is_skipped():
    secant = LBFGS()
    x = NumpyVector(np.ones(2))
    s, grad = _pair([1.0, 0.0], [-1.0, 0.0])
    stored = secant.update_storage(x, grad, x.dual().clone(), s, s.norm(), 3)
    assert stored is False
    assert len(secant) == 0
    assert secant.iter == 3
    assert np.array_equal(secant.iterate.data, x.data)


def test_nan_curvature_is_skipped():
    secant = LBFGS()
    x = NumpyVector(np.zeros(2))
    s, grad = _pair([1.0, 0.0], [np.nan, 0.0])
    assert not secant.update_storage(x, grad, x.dual(), s, 1.0, 1)
    assert len(secant) == 0


def test_history_evicts_oldest_pair():
    secant = LBFGS(SecantConfig(maximum_storage=2))
    x = NumpyVector(np.zeros(2))
    gp = x.dual()
    for k in range(1, 4):
        s, grad = _pair([float(k), 0.0], [float(k), 0.0])
        assert secant.update_storage(x, grad, gp, s, s.norm(), k)
    assert len(secant) == 2
    assert [pair[0].data[0] for pair in secant.pairs()] == [2.0, 3.0]
    assert list(secant.product) == [4.0, 9.0]


def test_stored_vectors_are_copies():
    secant = LBFGS()
    x = NumpyVector(np.zeros(2))
    gp = x.dual()
    s, grad = _pair([1.0, 2.0], [3.0, 1.0])
    secant.update_storage(x, grad, gp, s, s.norm(), 1)
    s.data[:] = 0.0
    grad.data[:] = 0.0
    stored_s, stored_y, sy = secant.pairs()[0]
    assert np.array_equal(stored_s.data, [1.0, 2.0])
    assert np.array_equal(stored_y.data, [3.0, 1.0])
    assert sy == pytest.approx(5.0)


def test_reset_clears_history():
    secant = LBFGS()
    x = NumpyVector(np.zeros(2))
    s, grad = _pair([1.0, 0.0], [2.0, 0.0])
    secant.update_storage(x, grad, x.dual(), s, 1.0, 1)
    secant.reset()
    assert len(secant) == 0
    assert secant.iterate is None


def test_sr1_satisfies_every_stored_secant_equation(feed_pairs, spd_matrix):
    secant = LSR1()
    steps = feed_pairs(secant, 3)
    for s in steps:
        y = NumpyVector(spd_matrix @ s.data)
        hy = s.clone()
        secant.apply_h(hy, y)
        assert np.allclose(hy.data, s.data)
        bs = y.clone()
        secant.apply_b(bs, s)
        assert np.allclose(bs.data, y.data)


@pytest.mark.parametrize("bb_type, expected", [(1, 0.8), (2, 1.25)])
def test_barzilai_borwein_scalars(bb_type, expected):
    secant = BarzilaiBorwein(SecantConfig(barzilai_borwein_type=bb_type))
    x = NumpyVector(np.zeros(2))
    # s = (1, 2), y = (2, 1): s.y = 4, y.y = 5, s.s = 5
    s, grad = _pair([1.0, 2.0], [2.0, 1.0])
    secant.update_storage(x, grad, x.dual(), s, s.norm(), 1)
    v = NumpyVector(np.array([2.0, -4.0]))
    out = v.clone()
    secant.apply_h(out, v)
    assert np.allclose(out.data, expected * v.data)
    secant.apply_b(out, v)
    assert np.allclose(out.data, v.data / expected)


def test_barzilai_borwein_keeps_one_pair():
    secant = BarzilaiBorwein(SecantConfig(maximum_storage=10))
    x = NumpyVector(np.zeros(2))
    for k in range(1, 4):
        s, grad = _pair([1.0, float(k)], [1.0, float(k)])
        secant.update_storage(x, grad, x.dual(), s, s.norm(), k)
    assert secant.storage == 1
    assert len(secant) == 1


@pytest.mark.parametrize(
    "kind, cls",
    [
        (SecantType.LBFGS, LBFGS),
        ("Limited-Memory DFP", LDFP),
        ("limited-memory sr1", LSR1),
        (SecantType.BARZILAI_BORWEIN, BarzilaiBorwein),
    ],
)
def test_factory_builds_requested_secant(kind, cls):
    config = SecantConfig(maximum_storage=4)
    secant = secant_factory(kind, config)
    assert type(secant) is cls
    assert secant.config is config
    assert len(secant) == 0


def test_factory_rejects_user_defined_and_unknown():
    with pytest.raises(InvalidConfigurationError):
        secant_factory(SecantType.USER_DEFINED)
    with pytest.raises(InvalidConfigurationError, match="Supported names"):
        secant_factory("Broyden")
