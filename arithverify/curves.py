"""
Elliptic curve invariants, Frey curves and local Galois data.

Thin layer over Sage's EllipticCurve: collects the invariants the papers
quote (c4, c6, discriminants, conductor, Kodaira symbols, torsion) and
the level-lowering quantities attached to Frey curves.
"""

from sage.all import QQ, ZZ, EllipticCurve, gcd, is_prime, prod

from .trace import step, info, debug


def _reduction_type(ld):
    if ld.has_good_reduction():
        return 'good'
    if ld.has_split_multiplicative_reduction():
        return 'split multiplicative'
    if ld.has_nonsplit_multiplicative_reduction():
        return 'nonsplit multiplicative'
    return 'additive'


def minimal_discriminant(E):
    return ZZ(E.minimal_model().discriminant())


def curve_summary(E):
    """
    Collect the standard invariants of an elliptic curve over QQ.

    Returns a dict with keys 'ainvs', 'c4', 'c6', 'discriminant',
    'minimal_discriminant', 'conductor', 'j', 'torsion' (invariants of the
    torsion subgroup) and 'bad_primes' mapping p to a dict with
    'kodaira', 'tamagawa', 'reduction' and 'conductor_exponent'.
    """
    N = ZZ(E.conductor())
    bad = {}
    for p in N.prime_factors():
        ld = E.local_data(p)
        bad[p] = {
            'kodaira': str(ld.kodaira_symbol()),
            'tamagawa': ZZ(ld.tamagawa_number()),
            'reduction': _reduction_type(ld),
            'conductor_exponent': N.valuation(p),
        }
    return {
        'ainvs': tuple(QQ(a) for a in E.a_invariants()),
        'c4': QQ(E.c4()),
        'c6': QQ(E.c6()),
        'discriminant': QQ(E.discriminant()),
        'minimal_discriminant': minimal_discriminant(E),
        'conductor': N,
        'j': QQ(E.j_invariant()),
        'torsion': tuple(E.torsion_subgroup().invariants()),
        'bad_primes': bad,
    }


def print_curve_summary(E, label=None):
    s = curve_summary(E)
    step(f"E{'' if label is None else ' (' + label + ')'}: {list(s['ainvs'])}")
    info(f"c4 = {s['c4']}, c6 = {s['c6']}")
    info(f"Delta = {s['discriminant']}, Delta_min = {s['minimal_discriminant'].factor()}")
    info(f"N = {s['conductor'].factor()}, j = {s['j']}")
    info(f"torsion invariants = {list(s['torsion'])}")
    for p, d in s['bad_primes'].items():
        info(f"p={p}: {d['kodaira']} ({d['reduction']}), c_p={d['tamagawa']}, f_p={d['conductor_exponent']}")
    return s


# ---------------------------
# Frey curves
# ---------------------------

def frey_curve(A, B, C):
    """Frey-Hellegouarch curve y^2 = x(x - A)(x + B) attached to A + B = C."""
    A, B, C = ZZ(A), ZZ(B), ZZ(C)
    if A + B != C:
        raise ValueError(f"not a solution: {A} + {B} != {C}")
    if A * B * C == 0:
        raise ValueError("Frey curve needs ABC != 0")
    # x(x - A)(x + B) = x^3 + (B - A) x^2 - AB x
    return EllipticCurve(QQ, [0, B - A, 0, -A * B, 0])


def frey_invariants_predicted(A, B, C):
    """
    Closed forms for the Frey curve of a coprime triple with A = -1 mod 4 and 16 | B:
    Delta_min = 2^-8 (ABC)^2 and N = rad(ABC) with the prime 2 only when
    Delta_min is even.
    """
    A, B, C = ZZ(A), ZZ(B), ZZ(C)
    if gcd(A, B) != 1:
        raise ValueError("triple must be coprime")
    if A % 4 != 3 or B % 16 != 0:
        raise ValueError("normalisation needs A = -1 mod 4 and 16 | B")
    abc = abs(A * B * C)
    disc_min = abc**2 / ZZ(256)
    N = prod((q for q in abc.prime_factors() if q != 2), ZZ(1))
    if ZZ(disc_min).valuation(2) > 0:
        N *= 2
    return {'minimal_discriminant': ZZ(disc_min), 'conductor': N}


def serre_level_from_valuations(conductor_exponents, disc_valuations, p):
    """
    Level after Ribet's level lowering: drop every q with f_q = 1 and
    p | v_q(Delta_min). Inputs are dicts q -> exponent.
    """
    N = ZZ(1)
    for q, f in conductor_exponents.items():
        if f == 1 and disc_valuations.get(q, 0) % p == 0:
            debug(f"serre_level: dropping q={q} (v_q(Delta)={disc_valuations.get(q)}, p={p})")
            continue
        N *= ZZ(q)**f
    return N


def serre_level(E, p):
    if not is_prime(p):
        raise ValueError(f"p={p} is not prime")
    N = ZZ(E.conductor())
    D = minimal_discriminant(E)
    exps = {q: N.valuation(q) for q in N.prime_factors()}
    vals = {q: D.valuation(q) for q in N.prime_factors()}
    return serre_level_from_valuations(exps, vals, p)


# ---------------------------
# Inertia
# ---------------------------

def semistability_defect(E, p):
    """
    Degree of the inertial field Q_p^ur(E[m]) / Q_p^ur (m >= 3 prime to p).

    Only p >= 5, where it is read off from v_p(j) and v_p(Delta_min):
    potentially multiplicative gives 1 or 2, potentially good gives
    12 / gcd(12, v_p(Delta_min)).
    """
    p = ZZ(p)
    if not p.is_prime():
        raise ValueError(f"p={p} is not prime")
    if p < 5:
        raise ValueError("inertial degree via Kraus' formula needs p >= 5")
    ld = E.local_data(p)
    if ld.has_good_reduction():
        return 1
    j = QQ(E.j_invariant())
    if j != 0 and j.valuation(p) < 0:
        return 1 if ld.has_multiplicative_reduction() else 2
    v = minimal_discriminant(E).valuation(p)
    return 12 // gcd(12, v)


def reducible_primes(E):
    """Primes p for which the mod-p Galois representation of E is reducible."""
    return sorted(ZZ(p) for p in E.galois_representation().reducible_primes())
