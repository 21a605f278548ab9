import pytest
from sage.all import EllipticCurve, QQ, NumberField, PolynomialRing

from arithverify.padic import (
    kernel_of_reduction_multiple, formal_parameter, padic_elliptic_log,
    newton_polygon, strassmann_bound, strassmann_bound_disc,
    implicit_root_series, series_radius_estimate
)
from arithverify.verify_config import SeriesPrecisionError

R = PolynomialRing(QQ, 'x')
X = R.gen()


def test_kernel_of_reduction_multiple_37a1():
    E = EllipticCurve('37a1')
    P = E(0, 0)
    assert kernel_of_reduction_multiple(E, P, 3) == 7
    assert kernel_of_reduction_multiple(E, E(0), 3) == 1
    Q = 7 * P
    assert formal_parameter(Q).valuation(3) >= 1
    with pytest.raises(ValueError):
        kernel_of_reduction_multiple(E, P, 37)


def test_padic_log_is_additive():
    E = EllipticCurve('37a1')
    Q = 7 * E(0, 0)
    l1 = padic_elliptic_log(E, Q, 3)
    l2 = padic_elliptic_log(E, 2 * Q, 3)
    assert (l2 - 2 * l1).valuation() >= 10


def test_padic_log_needs_kernel_of_reduction():
    E = EllipticCurve('37a1')
    with pytest.raises(ValueError):
        padic_elliptic_log(E, E(2, 2), 3)


def test_newton_polygon():
    hull, slopes = newton_polygon(X**3 + 2 * X + 2, 2)
    assert hull == [(0, 1), (3, 0)]
    assert slopes == [(QQ(-1) / 3, 3)]
    hull, slopes = newton_polygon([4, 0, 1, 1], 2)
    assert [s for s, _ in slopes] == [-1, 0]


def test_strassmann():
    assert strassmann_bound([3, 1, 9], 3) == 1
    assert strassmann_bound([1, 3, 1], 3) == 2
    with pytest.raises(ValueError):
        strassmann_bound([0, 0], 3)
    E = EllipticCurve('37a1')
    assert strassmann_bound_disc(E.formal_group().log(20).list(), 3) == 1


def test_implicit_root_series_sqrt2():
    K = NumberField(X**2 - 2, 'a')
    a = K.gen()
    S = implicit_root_series(X**2 - 2, R(1), a, prec=30)
    assert S[0] == a
    assert S[1] == -a / 4
    # f(S) + t g(S) vanishes to the working precision
    residual = S**2 - 2 + S.parent().gen()
    assert residual.valuation() >= 30
    assert abs(series_radius_estimate(S) - 2) < 0.3


def test_implicit_root_series_errors():
    K = NumberField(X**2 - 2, 'a')
    with pytest.raises(ValueError):
        implicit_root_series(X**2 - 2, R(1), K(1))
    with pytest.raises(SeriesPrecisionError):
        implicit_root_series(X**2, R(1), QQ(0))
