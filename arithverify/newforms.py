"""
Newform elimination after level lowering.

If the Frey curve E of a putative solution has mod-p representation arising
from a newform f of level N, then for every prime ell not dividing N p:

    ell not | abc  ->  a_ell(f) = a_ell(E) (mod P), a_ell(E) in the Hasse interval
                       with torsion_divisor | ell + 1 - a_ell(E)
    ell | abc      ->  a_ell(f) = +-(ell + 1) (mod P)

so p must divide B_ell(f) = ell * Norm(a_ell(f)^2 - (ell+1)^2) * prod_a Norm(a_ell(f) - a).
A newform for which some B_ell(f) is nonzero and prime to p is eliminated.
"""

from sage.all import QQ, ZZ, Newforms, prod, is_prime

from .verify_config import ELIMINATION_PRIMES
from .trace import step, info


def newforms_at_level(N):
    """Weight 2 newforms on Gamma0(N) (Galois orbit representatives)."""
    return list(Newforms(ZZ(N), 2, names='a'))


def field_norm(x):
    K = x.parent()
    if K is QQ or K is ZZ:
        return QQ(x)
    return QQ(x.absolute_norm())


def frey_trace_candidates(ell, torsion_divisor=4):
    """Integers a with a^2 <= 4 ell and torsion_divisor | ell + 1 - a."""
    ell = ZZ(ell)
    bound = (4 * ell).isqrt()
    return [a for a in range(-bound, bound + 1)
            if a * a <= 4 * ell and (ell + 1 - a) % torsion_divisor == 0]


def elimination_bound(f, ell, torsion_divisor=4):
    ell = ZZ(ell)
    c = f.coefficient(ell)
    B = ell * field_norm(c**2 - (ell + 1)**2)
    B *= prod((field_norm(c - a) for a in frey_trace_candidates(ell, torsion_divisor)), QQ(1))
    return ZZ(abs(B))


def eliminate_newforms(N, p, ells=None, torsion_divisor=4, verbose=True):
    """
    Try to eliminate every newform at level N for exponent p.

    Returns a dict with 'level', 'p', 'forms' (one entry per newform:
    'index', 'degree', 'bounds' {ell: B_ell}, 'eliminated_by') and
    'survivors' (indices of forms no ell could eliminate).
    """
    N, p = ZZ(N), ZZ(p)
    if not is_prime(p):
        raise ValueError(f"p={p} is not prime")
    if ells is None:
        ells = ELIMINATION_PRIMES
    forms = newforms_at_level(N)
    if verbose:
        step(f"level {N}: {len(forms)} newform orbit(s), p = {p}")

    report = {'level': N, 'p': p, 'forms': [], 'survivors': []}
    for i, f in enumerate(forms):
        entry = {'index': i, 'degree': f.hecke_eigenvalue_field().degree(),
                 'bounds': {}, 'eliminated_by': None}
        for ell in ells:
            ell = ZZ(ell)
            if ell == p or N % ell == 0:
                continue
            B = elimination_bound(f, ell, torsion_divisor)
            entry['bounds'][ell] = B
            if B != 0 and B % p != 0:
                entry['eliminated_by'] = ell
                break
        if entry['eliminated_by'] is None:
            report['survivors'].append(i)
            if verbose:
                info(f"f_{i} (degree {entry['degree']}) survives: B = {entry['bounds']}")
        elif verbose:
            ell = entry['eliminated_by']
            info(f"f_{i} (degree {entry['degree']}) eliminated by ell={ell}: B = {entry['bounds'][ell].factor()}")
        report['forms'].append(entry)
    return report


def level_lowering_contradiction(N, p, ells=None, torsion_divisor=4, verbose=True):
    """True iff every newform at level N is eliminated (or there are none)."""
    report = eliminate_newforms(N, p, ells=ells, torsion_divisor=torsion_divisor, verbose=verbose)
    return not report['survivors']
