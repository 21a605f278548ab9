"""
Rational cycles of x^2 + c, dynatomic curves, and the p-adic tools
(Coleman's bound, elliptic logarithms, Strassmann) used to rule out
further rational points on the curves that parametrize them.
"""

from sage.all import EllipticCurve, QQ, ZZ, PolynomialRing

from ..dynamics import (
    dynatomic_polynomial, dynatomic_degree, dynatomic_curve_genus,
    rational_periodic_points, search_rational_cycles, orbit,
    coleman_bound, hyperelliptic_points_mod_p, hyperelliptic_point_search
)
from ..padic import kernel_of_reduction_multiple, padic_elliptic_log, strassmann_bound_disc
from ..trace import step, info, claim, claim_equal

TITLE = "Quadratic dynamics and Chabauty-Coleman bounds"


def section_dynatomic(ledger, verbose=True):
    R = dynatomic_polynomial(1).parent()
    x, c = R.gens()
    claim_equal(dynatomic_polynomial(1), x**2 - x + c, "Phi_1(x, c)", ledger, verbose)
    claim_equal(dynatomic_polynomial(2), x**2 + x + c + 1, "Phi_2(x, c)", ledger, verbose)
    claim_equal([dynatomic_degree(n) for n in range(1, 6)], [2, 2, 6, 12, 30],
                "deg_x Phi_n for n = 1..5", ledger, verbose)
    for n in range(1, 5):
        claim_equal(dynatomic_polynomial(n).degree(x), dynatomic_degree(n),
                    f"Phi_{n} has the expected degree in x", ledger, verbose=False)
    step("dynatomic polynomials agree with the Moebius degree formula", verbose=verbose)


def section_genus(ledger, verbose=True):
    genera = [dynatomic_curve_genus(n) for n in range(1, 5)]
    claim_equal(genera, [0, 0, 0, 2], "genus of Phi_n(x, c) = 0 for n = 1..4", ledger, verbose)


def section_cycles(ledger, verbose=True):
    c = QQ(-29) / 16
    claim_equal(rational_periodic_points(c), {3: [QQ(-7) / 4, QQ(-1) / 4, QQ(5) / 4]},
                "rational periodic points of x^2 - 29/16", ledger, verbose)
    claim_equal(orbit(c, QQ(-7) / 4), [QQ(-7) / 4, QQ(5) / 4, QQ(-1) / 4],
                "orbit of -7/4 under x^2 - 29/16", ledger, verbose)
    claim_equal(rational_periodic_points(-1), {2: [QQ(-1), QQ(0)]}, "periodic points of x^2 - 1", ledger, verbose)
    claim_equal(rational_periodic_points(0), {1: [QQ(0), QQ(1)]}, "periodic points of x^2", ledger, verbose)

    threes = search_rational_cycles(3, verbose=verbose)
    claim(any(cc == c for cc, _ in threes), "the search recovers c = -29/16 with a 3-cycle", ledger, verbose,
          found=len(threes))
    info(f"{len(threes)} parameters with a rational 3-cycle", verbose=verbose)
    for n in (4, 5):
        found = search_rational_cycles(n, verbose=verbose)
        claim_equal(found, [], f"no rational {n}-cycles in the search box", ledger, verbose)


def section_coleman(ledger, verbose=True):
    x = PolynomialRing(ZZ, 'x').gen()
    f = x**5 + 1
    claim_equal(hyperelliptic_points_mod_p(f, 7), 8, "#C(F_7) for y^2 = x^5 + 1", ledger, verbose)
    bound = coleman_bound(f, 7)
    claim_equal(bound, 10, "Coleman bound for y^2 = x^5 + 1 at p = 7", ledger, verbose)
    pts = hyperelliptic_point_search(f)
    claim_equal(sorted(pts['affine']), [(QQ(-1), QQ(0)), (QQ(0), QQ(-1)), (QQ(0), QQ(1))],
                "small rational points on y^2 = x^5 + 1", ledger, verbose)
    total = len(pts['affine']) + pts['infinity']
    claim(total <= bound, "known points respect the Coleman bound", ledger, verbose, known=total, bound=bound)


def section_elliptic_log(ledger, verbose=True):
    E = EllipticCurve('37a1')
    P = E(0, 0)
    p = 3
    m = kernel_of_reduction_multiple(E, P, p)
    claim_equal(m, 7, "order of (0, 0) on 37a1 mod 3", ledger, verbose)
    Q = m * P
    lQ = padic_elliptic_log(E, Q, p)
    l2Q = padic_elliptic_log(E, 2 * Q, p)
    v = (l2Q - 2 * lQ).valuation()
    claim(v >= 10, "log(2Q) = 2 log(Q) in Q_3", ledger, verbose, valuation=v)
    info(f"log_3(7P) has valuation {lQ.valuation()}", verbose=verbose)

    coeffs = E.formal_group().log(20).list()
    claim_equal(strassmann_bound_disc(coeffs, p), 1, "zeros of the formal logarithm in 3Z_3", ledger, verbose)


SECTIONS = [
    ("Dynatomic polynomials", section_dynatomic),
    ("Genus of the dynatomic curves", section_genus),
    ("Rational cycles", section_cycles),
    ("Coleman's bound for y^2 = x^5 + 1", section_coleman),
    ("p-adic elliptic logarithm on 37a1", section_elliptic_log),
]
