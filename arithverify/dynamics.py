"""
Quadratic dynamics f_c(x) = x^2 + c over QQ, and the Chabauty-Coleman
bound used to finish off dynatomic and auxiliary curves of genus >= 2.

Rational periodic points (Walde-Russo): if f_c has a rational periodic
point then c = r/s^2 in lowest terms and every periodic point has
denominator exactly s; periodic points lie in |x| <= 1/2 + sqrt(1/4 + |c|).
So with x = u/s the map on numerators is u -> (u^2 + r)/s, and cycles of
f_c are cycles of this partial map on a finite set of integers.
"""

from sage.all import QQ, ZZ, GF, PolynomialRing, Curve, moebius, gcd
from tqdm import tqdm

from .verify_config import (
    ArithVerifyError, CYCLE_SEARCH_HEIGHT, CYCLE_SEARCH_DENOM, POINT_SEARCH_HEIGHT
)
from .trace import debug

_Rxc = PolynomialRing(QQ, ['x', 'c'])
_Zx = PolynomialRing(ZZ, 'x')


def iterate(c, x, n):
    for _ in range(n):
        x = x * x + c
    return x


def orbit(c, x, limit=50):
    """Forward orbit of x under x^2 + c, stopping at the first repeat."""
    seen = [x]
    for _ in range(limit):
        x = x * x + c
        if x in seen:
            break
        seen.append(x)
    return seen


# ---------------------------
# Dynatomic polynomials
# ---------------------------

def dynatomic_degree(n):
    """Degree in x of Phi_n: sum over d | n of mu(n/d) 2^d."""
    n = ZZ(n)
    return sum(moebius(n // d) * 2**d for d in n.divisors())


def dynatomic_polynomial(n):
    """Phi_n(x, c) = prod_{d | n} (f_c^d(x) - x)^mu(n/d) in QQ[x, c]."""
    n = ZZ(n)
    x, c = _Rxc.gens()
    num, den = _Rxc(1), _Rxc(1)
    for d in n.divisors():
        mu = moebius(n // d)
        if mu == 0:
            continue
        term = iterate(c, x, d) - x
        if mu == 1:
            num *= term
        else:
            den *= term
    q, r = num.quo_rem(den)
    if r != 0:
        raise ArithVerifyError(f"Phi_{n} is not a polynomial: nonzero remainder")
    return q


def dynatomic_curve_genus(n):
    """Geometric genus of the affine plane curve Phi_n(x, c) = 0."""
    return ZZ(Curve(dynatomic_polynomial(n)).geometric_genus())


# ---------------------------
# Rational periodic points
# ---------------------------

def _numerator_cycles(r, s):
    """Cycles of u -> (u^2 + r)/s on |u| <= s + sqrt|r| + 1, as lists of numerators."""
    U = s + abs(r).isqrt() + 1
    succ = {}
    for u in range(-U, U + 1):
        w = u * u + r
        if w % s == 0 and abs(w // s) <= U:
            succ[u] = w // s
    cycles, state = [], {}
    for start in succ:
        path, u = [], start
        while u in succ and u not in state:
            state[u] = start
            path.append(u)
            u = succ[u]
        if u in succ and state.get(u) == start:
            cycles.append(path[path.index(u):])
    return cycles


def rational_periodic_points(c, max_period=None):
    """
    All rational periodic points of x^2 + c, as a dict period -> sorted list.
    """
    c = QQ(c)
    den = c.denominator()
    if not den.is_square() or c > QQ(1) / 4:
        return {}
    s, r = den.isqrt(), c.numerator()
    out = {}
    for cyc in _numerator_cycles(r, s):
        n = len(cyc)
        if max_period is not None and n > max_period:
            continue
        out.setdefault(n, []).extend(QQ(u) / s for u in cyc)
    for n in out:
        out[n].sort()
    debug(f"rational_periodic_points(c={c}): periods {sorted(out)}")
    return out


def search_rational_cycles(period, height=CYCLE_SEARCH_HEIGHT, denom=CYCLE_SEARCH_DENOM, verbose=False):
    """
    Search c = r/s^2 with |r| <= height, 1 <= s <= denom, gcd(r, s) = 1 and
    c <= 1/4 for rational cycles of exact period `period`.
    Returns a list of (c, cycle) with cycle in orbit order.
    """
    found = []
    for s in tqdm(range(1, denom + 1), desc=f"period-{period} search", disable=not verbose):
        for r in range(-height, height + 1):
            if gcd(r, s) != 1 or 4 * r > s * s:
                continue
            for cyc in _numerator_cycles(ZZ(r), ZZ(s)):
                if len(cyc) == period:
                    found.append((QQ(r) / s**2, [QQ(u) / s for u in cyc]))
    return found


# ---------------------------
# Hyperelliptic curves, Chabauty-Coleman
# ---------------------------

def hyperelliptic_genus(f):
    return (ZZ(f.degree()) - 1) // 2


def _check_good_reduction(f, p):
    p = ZZ(p)
    if p == 2:
        raise ValueError("y^2 = f(x) always has bad reduction at 2 in this model")
    if f.leading_coefficient() % p == 0 or f.discriminant() % p == 0:
        raise ValueError(f"y^2 = {f} has bad reduction at p={p}")


def hyperelliptic_points_mod_p(f, p):
    """#C(F_p) for the smooth model of y^2 = f(x), f in ZZ[x] squarefree mod p."""
    f = _Zx(f)
    p = ZZ(p)
    _check_good_reduction(f, p)
    k = GF(p)
    fp = f.change_ring(k)
    count = 0
    for a in k:
        v = fp(a)
        count += 1 if v == 0 else (2 if v.is_square() else 0)
    if f.degree() % 2:
        count += 1
    else:
        count += 2 if k(f.leading_coefficient()).is_square() else 0
    return count


def coleman_bound(f, p):
    """
    #C(Q) <= #C(F_p) + 2g - 2 for p > 2g of good reduction, valid when
    rank J(Q) < g.
    """
    f = _Zx(f)
    p = ZZ(p)
    g = hyperelliptic_genus(f)
    if g < 2:
        raise ValueError(f"Coleman's bound needs genus >= 2, got {g}")
    if p <= 2 * g:
        raise ValueError(f"Coleman's bound needs p > 2g = {2 * g}, got p={p}")
    return hyperelliptic_points_mod_p(f, p) + 2 * g - 2


def hyperelliptic_point_search(f, height=POINT_SEARCH_HEIGHT):
    """
    Rational points with x = a/b, |a|, b <= height on y^2 = f(x).
    Returns {'affine': [(x, y), ...], 'infinity': number of points at infinity}.
    """
    f = _Zx(f)
    d = f.degree()
    g = hyperelliptic_genus(f)
    w = 2 * g + 2
    coeffs = f.list()
    affine = []
    for b in range(1, height + 1):
        for a in range(-height, height + 1):
            if gcd(a, b) != 1:
                continue
            F = sum(ZZ(cf) * a**i * b**(w - i) for i, cf in enumerate(coeffs))
            if F < 0 or not ZZ(F).is_square():
                continue
            y = QQ(ZZ(F).isqrt()) / QQ(b)**(g + 1)
            x = QQ(a) / b
            affine.append((x, y))
            if y != 0:
                affine.append((x, -y))
    if d % 2:
        at_infinity = 1
    else:
        at_infinity = 2 if ZZ(f.leading_coefficient()).is_square() else 0
    return {'affine': affine, 'infinity': at_infinity}
