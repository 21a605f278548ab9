"""
Irreducibility of gap polynomials F_N = f(x) + x^N g(x), and the small
roots of F_N followed through the implicit root series of f + t g.
"""

from sage.all import ZZ, QQ, NumberField, PolynomialRing

from ..irreducibility import (
    gap_polynomial, certify_irreducible, scan_gap_family, factor_degree_set,
    padic_recombination, dumas_certificate, unit_disc_root_count, complex_roots,
    gap_root_from_series
)
from ..padic import implicit_root_series, series_radius_estimate
from ..trace import step, info, claim, claim_equal

TITLE = "Irreducibility of gap polynomials f + x^N g"

_Zx = PolynomialRing(ZZ, 'x')
_x = _Zx.gen()


def section_selmer_trinomials(ledger, verbose=True):
    """x^N - x - 1 is irreducible for every N (Selmer)."""
    certs = scan_gap_family(-_x - 1, 1, range(2, 16), verbose=verbose)
    for N, cert in certs.items():
        claim(cert is not None, f"x^{N} - x - 1 is irreducible", ledger, verbose=False, certificate=cert)
        claim(gap_polynomial(-_x - 1, 1, N).is_irreducible(), f"PARI agrees for x^{N} - x - 1",
              ledger, verbose=False)
    step(f"certificates: {dict(certs)}", verbose=verbose)
    degrees, patterns = factor_degree_set(_x**5 - _x - 1, [5])
    claim_equal(degrees, set(), "degree set of x^5 - x - 1 mod 5", ledger, verbose, patterns=patterns)


def section_plus_trinomials(ledger, verbose=True):
    """x^N + x + 1 has the factor x^2 + x + 1 exactly when N = 2 mod 3."""
    certs = scan_gap_family(_x + 1, 1, range(3, 15), verbose=verbose)
    for N, cert in certs.items():
        F = gap_polynomial(_x + 1, 1, N)
        reducible = N % 3 == 2
        claim((cert is None) == reducible, f"x^{N} + x + 1 reducible iff N = 2 mod 3", ledger, verbose=False,
              certificate=cert)
        claim((F % (_x**2 + _x + 1) == 0) == reducible, f"x^2 + x + 1 divides x^{N} + x + 1 iff N = 2 mod 3",
              ledger, verbose=False)
    reducible_ns = [N for N, c in certs.items() if c is None]
    step(f"x^N + x + 1: reducible exactly for N in {reducible_ns}", verbose=verbose)
    factors = padic_recombination(_x**5 + _x + 1)
    claim_equal(sorted(factors, key=lambda h: h.degree()), [_x**2 + _x + 1, _x**3 - _x**2 + 1],
                "factors of x^5 + x + 1", ledger, verbose)


def section_recombination(ledger, verbose=True):
    factors = padic_recombination(_x**4 + 4, p=5)
    claim_equal(sorted(factors), sorted([_x**2 + 2 * _x + 2, _x**2 - 2 * _x + 2]),
                "5-adic recombination of x^4 + 4", ledger, verbose)
    F = _x**4 - 10 * _x**2 + 1
    claim_equal(len(padic_recombination(F)), 1, "x^4 - 10x^2 + 1 has no rational factor", ledger, verbose)
    claim_equal(certify_irreducible(F), 'recombination', "certificate for x^4 - 10x^2 + 1", ledger, verbose)


def section_dumas(ledger, verbose=True):
    claim(dumas_certificate(_x**3 + 2 * _x + 2, 2), "x^3 + 2x + 2 is 2-Eisenstein", ledger, verbose)
    for N in range(2, 12):
        claim_equal(certify_irreducible(gap_polynomial(2, 1, N)), 'dumas', f"certificate for x^{N} + 2",
                    ledger, verbose=False)
    step("x^N + 2 certified by its 2-adic Newton polygon for N < 12", verbose=verbose)


def section_small_roots(ledger, verbose=True):
    """
    f = 3x^2 - 1 has the roots +-1/sqrt(3) inside the unit disc; for N >= 3
    F_N = x^N + 3x^2 - 1 keeps exactly two roots there (Rouche) and the
    series x(t) with 3x^2 - 1 + t = 0 locates them.
    """
    R = PolynomialRing(QQ, 'x')
    X = R.gen()
    K = NumberField(X**2 - 2, 'a')
    a = K.gen()
    S = implicit_root_series(X**2 - 2, R(1), a, prec=40)
    claim_equal(S[1], -a / 4, "linear term of the root series of x^2 - 2 + t", ledger, verbose)
    r = series_radius_estimate(S)
    claim(abs(r - 2) < 0.25, "radius of the root series of x^2 - 2 + t is 2", ledger, verbose, radius=r)

    K = NumberField(X**2 - 3, 'b')
    b = K.gen()
    S = implicit_root_series(3 * X**2 - 1, R(1), b / 3, prec=40)
    r = series_radius_estimate(S)
    claim(abs(r - 1) < 0.2, "radius of the root series of 3x^2 - 1 + t is 1", ledger, verbose, radius=r)
    for N in range(4, 13):
        F = gap_polynomial(3 * _x**2 - 1, 1, N)
        claim_equal(unit_disc_root_count(F), 2, f"roots of x^{N} + 3x^2 - 1 in the unit disc",
                    ledger, verbose=False)
        z = gap_root_from_series(S, N)
        dist = min(abs(z - w) for w in complex_roots(F))
        claim(dist < 1e-8, f"series root of x^{N} + 3x^2 - 1 is a root", ledger, verbose=False, distance=dist)
    info("series roots agree with numpy for N = 4..12", verbose=verbose)


SECTIONS = [
    ("Selmer's trinomials x^N - x - 1", section_selmer_trinomials),
    ("Trinomials x^N + x + 1", section_plus_trinomials),
    ("p-adic recombination", section_recombination),
    ("Eisenstein-Dumas certificates", section_dumas),
    ("Small roots through implicit series", section_small_roots),
]
