"""
Frey curves, level lowering and the elimination of newforms.

Checks the invariants of the Frey-Hellegouarch curve used in the modular
approach to x^p + y^p + z^p = 0, the Serre level N_p = 2 of a putative
solution, the absence of newforms at that level, and the newform sieve
and inertia computations quoted alongside.
"""

from sage.all import EllipticCurve, primes

from ..curves import (
    frey_curve, frey_invariants_predicted, curve_summary, print_curve_summary,
    serre_level, serre_level_from_valuations, semistability_defect, reducible_primes
)
from ..newforms import newforms_at_level, eliminate_newforms, level_lowering_contradiction
from ..trace import step, info, claim, claim_equal

TITLE = "Frey curves and level lowering for x^p + y^p + z^p = 0"

# (A, B, C) with A + B = C, gcd = 1, A = -1 mod 4, 16 | B
FREY_TRIPLES = [(-1, 16, 15), (-1, 32, 31), (3, 64, 67), (-5, 48, 43), (7, 128, 135)]


def section_frey_invariants(ledger, verbose=True):
    for A, B, C in FREY_TRIPLES:
        E = frey_curve(A, B, C)
        s = print_curve_summary(E, label=f"{A} + {B} = {C}") if verbose else curve_summary(E)
        pred = frey_invariants_predicted(A, B, C)
        claim_equal(s['minimal_discriminant'], pred['minimal_discriminant'],
                    f"Delta_min of the Frey curve for ({A}, {B}, {C})", ledger, verbose)
        claim_equal(s['conductor'], pred['conductor'],
                    f"conductor of the Frey curve for ({A}, {B}, {C})", ledger, verbose)
        claim(all(d['conductor_exponent'] == 1 for d in s['bad_primes'].values()),
              f"Frey curve for ({A}, {B}, {C}) is semistable", ledger, verbose,
              bad_primes=s['bad_primes'])
        claim(s['torsion'] and s['torsion'][0] == 2 and len(s['torsion']) == 2,
              f"Frey curve for ({A}, {B}, {C}) has full rational 2-torsion", ledger, verbose,
              torsion=s['torsion'])


def section_serre_level(ledger, verbose=True):
    """
    For a^p + b^p + c^p = 0 with b even the Frey curve has f_q = 1 at every
    q | abc, v_q(Delta_min) = 2p v_q(abc) for odd q and
    v_2(Delta_min) = 2p v_2(b) - 8.
    """
    odd_part = {3: 1, 5: 2, 7: 1, 11: 3}
    for p in primes(5, 60):
        for k in (1, 2, 3):
            exps = {q: 1 for q in odd_part}
            exps[2] = 1
            vals = {q: 2 * p * v for q, v in odd_part.items()}
            vals[2] = 2 * p * k - 8
            N = serre_level_from_valuations(exps, vals, p)
            claim(N == 2, f"N_{p} = 2 when v_2(b) = {k}", ledger, verbose=False, N=N)
    step("N_p = 2 for every p in [5, 60) and v_2(b) in {1, 2, 3}", verbose=verbose)

    E = frey_curve(-1, 32, 31)
    claim_equal(serre_level(E, 2), 1, "Serre level of the (-1, 32, 31) Frey curve at p = 2", ledger, verbose)
    claim_equal(serre_level(E, 3), 62, "Serre level of the (-1, 32, 31) Frey curve at p = 3", ledger, verbose)
    E = frey_curve(7, 128, 135)
    claim_equal(serre_level(E, 3), 35, "Serre level of the (7, 128, 135) Frey curve at p = 3", ledger, verbose)
    E11 = EllipticCurve('11a1')
    claim_equal(serre_level(E11, 5), 1, "Serre level of 11a1 at p = 5", ledger, verbose)
    claim_equal(serre_level(E11, 3), 11, "Serre level of 11a1 at p = 3", ledger, verbose)


def section_no_newforms(ledger, verbose=True):
    forms = newforms_at_level(2)
    claim_equal(len(forms), 0, "number of weight 2 newforms of level 2", ledger, verbose)
    for p in primes(5, 30):
        claim(level_lowering_contradiction(2, p, verbose=False),
              f"no newform of level 2 for p = {p}: contradiction", ledger, verbose=False)
    step("level lowering contradiction for every p in [5, 30)", verbose=verbose)


def section_newform_sieve(ledger, verbose=True):
    E11 = EllipticCurve('11a1')
    claim_equal(reducible_primes(E11), [5], "reducible primes of 11a1", ledger, verbose)

    report = eliminate_newforms(11, 7, ells=[3], verbose=verbose)
    claim(report['forms'][0]['eliminated_by'] == 3, "11a eliminated at p = 7 by ell = 3", ledger, verbose,
          bounds=report['forms'][0]['bounds'])
    claim_equal(report['forms'][0]['bounds'][3], 45, "B_3(f) for the newform 11a", ledger, verbose)

    report = eliminate_newforms(11, 5, ells=[3, 7], verbose=verbose)
    claim_equal(report['survivors'], [0], "11a survives the sieve at p = 5", ledger, verbose)
    info(f"B_ell(11a) = {report['forms'][0]['bounds']}", verbose=verbose)


def section_inertia(ledger, verbose=True):
    E = EllipticCurve([0, 0, 0, 0, 5])
    claim_equal(semistability_defect(E, 5), 6, "semistability defect of y^2 = x^3 + 5 at 5", ledger, verbose)
    claim_equal(semistability_defect(E, 7), 1, "semistability defect of y^2 = x^3 + 5 at 7", ledger, verbose)
    E11 = EllipticCurve('11a1')
    claim_equal(semistability_defect(E11, 11), 1, "semistability defect of 11a1 at 11", ledger, verbose)
    claim_equal(semistability_defect(E11.quadratic_twist(-11), 11), 2,
                "semistability defect of the -11 twist of 11a1 at 11", ledger, verbose)
    for A, B, C in FREY_TRIPLES:
        E = frey_curve(A, B, C)
        claim(all(semistability_defect(E, q) == 1 for q in primes(5, 200)),
              f"Frey curve for ({A}, {B}, {C}) has trivial inertial field at every 5 <= p < 200",
              ledger, verbose=False)
    step("Frey curves: inertial degree 1 at all 5 <= p < 200", verbose=verbose)


SECTIONS = [
    ("Frey curve invariants", section_frey_invariants),
    ("Serre level of a putative solution", section_serre_level),
    ("Newforms of level 2", section_no_newforms),
    ("Newform sieve at level 11", section_newform_sieve),
    ("Inertial fields", section_inertia),
]
