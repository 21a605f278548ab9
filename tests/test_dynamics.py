import pytest
from sage.all import QQ, ZZ, PolynomialRing

from arithverify.dynamics import (
    iterate, orbit, dynatomic_degree, dynatomic_polynomial, dynatomic_curve_genus,
    rational_periodic_points, search_rational_cycles,
    hyperelliptic_genus, hyperelliptic_points_mod_p, coleman_bound, hyperelliptic_point_search
)

x = PolynomialRing(ZZ, 'x').gen()


def test_iterate_and_orbit():
    c = QQ(-29) / 16
    assert iterate(c, QQ(-7) / 4, 3) == QQ(-7) / 4
    assert orbit(c, QQ(-7) / 4) == [QQ(-7) / 4, QQ(5) / 4, QQ(-1) / 4]
    assert orbit(QQ(-2), QQ(2)) == [2]


def test_dynatomic_polynomials():
    X, C = dynatomic_polynomial(1).parent().gens()
    assert dynatomic_polynomial(1) == X**2 - X + C
    assert dynatomic_polynomial(2) == X**2 + X + C + 1
    assert [dynatomic_degree(n) for n in range(1, 7)] == [2, 2, 6, 12, 30, 54]
    assert dynatomic_polynomial(3).degree(X) == 6


def test_dynatomic_genus_small_periods():
    assert [dynatomic_curve_genus(n) for n in (1, 2, 3)] == [0, 0, 0]


def test_rational_periodic_points():
    assert rational_periodic_points(QQ(-29) / 16) == {3: [QQ(-7) / 4, QQ(-1) / 4, QQ(5) / 4]}
    assert rational_periodic_points(-1) == {2: [-1, 0]}
    assert rational_periodic_points(0) == {1: [0, 1]}
    # c > 1/4 or a non-square denominator: nothing
    assert rational_periodic_points(1) == {}
    assert rational_periodic_points(QQ(1) / 2) == {}
    assert rational_periodic_points(QQ(-29) / 16, max_period=2) == {}


def test_search_rational_cycles():
    threes = search_rational_cycles(3, height=30, denom=4)
    assert any(c == QQ(-29) / 16 for c, _ in threes)
    for c, cyc in threes:
        assert len(cyc) == 3
        assert iterate(c, cyc[0], 3) == cyc[0]
    assert search_rational_cycles(4, height=20, denom=4) == []


def test_hyperelliptic_point_counts():
    f = x**5 + 1
    assert hyperelliptic_genus(f) == 2
    assert hyperelliptic_points_mod_p(f, 7) == 8
    assert coleman_bound(f, 7) == 10
    with pytest.raises(ValueError):
        coleman_bound(f, 3)
    with pytest.raises(ValueError):
        coleman_bound(f, 5)
    with pytest.raises(ValueError):
        coleman_bound(x**3 + 1, 7)


def test_hyperelliptic_point_search():
    pts = hyperelliptic_point_search(x**5 + 1, height=10)
    assert sorted(pts['affine']) == [(-1, 0), (0, -1), (0, 1)]
    assert pts['infinity'] == 1
    pts = hyperelliptic_point_search(x**6 + 1, height=5)
    assert pts['infinity'] == 2
    assert (QQ(0), QQ(1)) in pts['affine']
