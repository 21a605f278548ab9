"""
p-adic and formal power series tools.

  - elliptic logarithm on the kernel of reduction through the formal group
  - Newton polygons and Strassmann's bound for zeros of p-adic series
  - Newton iteration for the root x(t) of f(x) + t g(x) = 0 in K[[t]]
  - a ratio-test estimate for the radius of convergence of such a series
"""

import numpy as np

from sage.all import QQ, ZZ, CC, Qp, PowerSeriesRing, is_prime

from .verify_config import (
    DEFAULT_PADIC_PREC, DEFAULT_SERIES_PREC, FORMAL_LOG_EXTRA_TERMS,
    SeriesPrecisionError
)
from .trace import debug


# ---------------------------
# Formal group / elliptic log
# ---------------------------

def kernel_of_reduction_multiple(E, P, p):
    """Smallest m >= 1 with mP reducing to the identity mod p (p of good reduction)."""
    p = ZZ(p)
    if not E.has_good_reduction(p):
        raise ValueError(f"E has bad reduction at p={p}")
    if P.is_zero():
        return ZZ(1)
    x, y = P.xy()
    if QQ(x).valuation(p) < 0:
        return ZZ(1)
    Ep = E.reduction(p)
    return ZZ(Ep([x, y]).order())


def formal_parameter(P):
    x, y = P.xy()
    return -QQ(x) / QQ(y)


def padic_elliptic_log(E, P, p, prec=DEFAULT_PADIC_PREC):
    """
    log_E(P) in Q_p for P in E_1(Q_p), evaluating the formal logarithm
    of E at the parameter t = -x/y.
    """
    p = ZZ(p)
    if not is_prime(p):
        raise ValueError(f"p={p} is not prime")
    t = formal_parameter(P)
    vt = t.valuation(p)
    if vt < 1:
        raise ValueError(f"P is not in the kernel of reduction at p={p} (v(t)={vt})")
    nterms = prec + FORMAL_LOG_EXTRA_TERMS
    L = E.formal_group().log(nterms)
    K = Qp(p, prec)
    tK = K(t)
    debug(f"padic_elliptic_log: v(t)={vt}, {nterms} terms")
    return sum((K(c) * tK**n for n, c in enumerate(L.list()) if c != 0), K(0))


# ---------------------------
# Newton polygons / Strassmann
# ---------------------------

def _cross(o, a, b):
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def newton_polygon(coeffs, p):
    """
    Lower convex hull of {(i, v_p(a_i)) : a_i != 0}.

    `coeffs` is a polynomial or a list a_0, a_1, ... Returns (vertices, slopes)
    with slopes a list of (slope, horizontal length) from left to right.
    """
    if hasattr(coeffs, 'list'):
        coeffs = coeffs.list()
    pts = [(i, QQ(c).valuation(p)) for i, c in enumerate(coeffs) if c != 0]
    hull = []
    for pt in pts:
        while len(hull) >= 2 and _cross(hull[-2], hull[-1], pt) <= 0:
            hull.pop()
        hull.append(pt)
    slopes = [(QQ(b[1] - a[1]) / (b[0] - a[0]), b[0] - a[0]) for a, b in zip(hull, hull[1:])]
    return hull, slopes


def _valuation(c, p):
    P = getattr(c, 'parent', None)
    if P is not None and hasattr(P(), 'prime'):
        return c.valuation()
    return QQ(c).valuation(p)


def strassmann_bound(coeffs, p):
    """
    Number of zeros in Z_p of sum a_n T^n (a_n -> 0) is at most the largest
    N with v(a_N) = min_n v(a_n).
    """
    vals = [(n, _valuation(c, p)) for n, c in enumerate(coeffs) if c != 0]
    if not vals:
        raise ValueError("zero series has infinitely many zeros")
    vmin = min(v for _, v in vals)
    return max(n for n, v in vals if v == vmin)


def strassmann_bound_disc(coeffs, p):
    """The same bound for zeros in the disc p Z_p (substitute T = p s)."""
    return strassmann_bound([c * ZZ(p)**n for n, c in enumerate(coeffs)], p)


# ---------------------------
# Implicit functions
# ---------------------------

def implicit_root_series(f, g, alpha, prec=DEFAULT_SERIES_PREC):
    """
    The power series x(t) in K[[t]] with f(x(t)) + t g(x(t)) = 0 and
    x(0) = alpha, where alpha in K is a simple root of f. Newton iteration,
    doubling the number of correct terms each round.
    """
    K = alpha.parent()
    fK = f.change_ring(K)
    gK = f.parent()(g).change_ring(K)
    fp, gp = fK.derivative(), gK.derivative()
    if fK(alpha) != 0:
        raise ValueError(f"{alpha} is not a root of {f}")
    if fp(alpha) == 0:
        raise SeriesPrecisionError(f"{alpha} is a multiple root of {f}; Newton iteration does not converge")

    R = PowerSeriesRing(K, 't', default_prec=prec)
    t = R.gen()
    X = R(alpha).add_bigoh(prec)
    correct = 1
    while correct < prec:
        X = X - (fK(X) + t * gK(X)) / (fp(X) + t * gp(X))
        correct *= 2
    return X.add_bigoh(prec)


def series_radius_estimate(series, embedding=None, tail=5):
    """
    Ratio test |c_{n-1} / c_n| averaged over the last `tail` pairs of
    nonzero coefficients, under a complex embedding of the coefficient field.
    """
    K = series.base_ring()
    if embedding is None:
        embedding = CC if K is QQ else K.complex_embeddings()[0]
    mags = [(n, abs(CC(embedding(c)))) for n, c in enumerate(series.list()) if c != 0]
    ratios = [m0 / m1 for (n0, m0), (n1, m1) in zip(mags, mags[1:]) if n1 == n0 + 1]
    if not ratios:
        raise SeriesPrecisionError("not enough consecutive nonzero coefficients for a ratio test")
    return float(np.mean([float(r) for r in ratios[-tail:]]))
