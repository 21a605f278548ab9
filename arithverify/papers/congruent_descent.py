"""
Selmer groups of congruent number curves y^2 = x^3 - n^2 x via 2-isogeny.

n = 1: both phi-Selmer groups are generated by torsion images, so the rank
is 0 (Fermat's right triangle theorem). n = 5: the descent is sharp and
the rank is exactly 1.
"""

from sage.all import EllipticCurve

from ..descent import TwoIsogenyDescent, quartic_locally_soluble, quartic_real_soluble, two_selmer_rank
from ..trace import step, info, claim, claim_equal

TITLE = "2-isogeny descent on congruent number curves"


def _descent(n, verbose):
    return TwoIsogenyDescent(0, -n * n, verbose=verbose).run()


def section_n1(ledger, verbose=True):
    res = _descent(1, verbose)
    claim_equal(sorted(res['phi']['selmer']), [-1, 1], "S^(phi) for n = 1", ledger, verbose)
    claim_equal(sorted(res['phi_dual']['selmer']), [1, 2], "S^(phi') for n = 1", ledger, verbose)
    claim_equal(res['rank_upper'], 0, "rank bound for y^2 = x^3 - x", ledger, verbose)
    claim(res['rank_determined'], "descent for n = 1 is sharp", ledger, verbose)


def section_n5(ledger, verbose=True):
    res = _descent(5, verbose)
    claim_equal(res['phi']['selmer_dim'], 2, "dim S^(phi) for n = 5", ledger, verbose)
    claim_equal(res['phi_dual']['selmer_dim'], 1, "dim S^(phi') for n = 5", ledger, verbose)
    claim(2 not in res['phi_dual']['selmer'], "d = 2 is locally obstructed on E' for n = 5", ledger, verbose,
          obstruction=res['phi_dual']['obstructions'].get(2))
    claim_equal((res['rank_lower'], res['rank_upper']), (1, 1), "rank of y^2 = x^3 - 25x", ledger, verbose)
    for d, (M, e, N) in res['phi']['witnesses'].items():
        info(f"d={d}: {N}^2 = {d}*{M}^4 + {-25 // d}*{e}^4", verbose=verbose)


def section_local_quartics(ledger, verbose=True):
    # N^2 = 2 M^4 + 50 e^4 has no 5-adic points: 2 is a non-residue mod 5
    f = [50, 0, 0, 0, 2]
    claim(not quartic_locally_soluble(f, 5), "y^2 = 2x^4 + 50 has no Q_5-points", ledger, verbose)
    claim(quartic_locally_soluble(f, 3), "y^2 = 2x^4 + 50 has Q_3-points", ledger, verbose)
    claim(not quartic_real_soluble([-4, 0, 0, 0, -1]), "y^2 = -x^4 - 4 has no real points", ledger, verbose)
    claim(quartic_real_soluble([25, 0, 0, 0, -1]), "y^2 = 25 - x^4 has real points", ledger, verbose)


def section_cross_check(ledger, verbose=True):
    for n, r in ((1, 0), (5, 1)):
        E = EllipticCurve([0, 0, 0, -n * n, 0])
        claim_equal(E.rank(), r, f"mwrank: rank of y^2 = x^3 - {n * n}x", ledger, verbose)
        claim_equal(E.torsion_order(), 4, f"torsion order of y^2 = x^3 - {n * n}x", ledger, verbose)
        step(f"n={n}: mwrank 2-Selmer rank {two_selmer_rank(E)}", verbose=verbose)


SECTIONS = [
    ("Descent for n = 1", section_n1),
    ("Descent for n = 5", section_n5),
    ("Local solubility of the quartics", section_local_quartics),
    ("Cross-check with mwrank", section_cross_check),
]
