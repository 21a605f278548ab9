"""
Irreducibility of polynomials with a large gap, F_N(x) = f(x) + x^N g(x).

Certificates, cheapest first:
  dumas          one-segment Newton polygon at some p with gcd(height, n) = 1
  degree-set     the possible degrees of a rational factor, intersected over
                 factorization patterns mod p, contain no proper degree
  recombination  best-first search over subsets of p-adic factors finds no
                 proper rational factor

The small roots of F_N sit near the roots alpha of f with |alpha| < 1 and are
followed through the implicit series x(t) with f(x) + t g(x) = 0, x(0) = alpha,
evaluated at t = x^N.
"""

import heapq

import numpy as np
from sage.all import ZZ, QQ, CC, GF, Zp, PolynomialRing, binomial, gcd
from tqdm import tqdm

from .verify_config import (
    ArithVerifyError, DEGREE_SET_PRIMES, DUMAS_PRIMES, MAX_RECOMBINATION_NODES,
    RECOMBINATION_PREC
)
from .padic import newton_polygon
from .trace import debug

_Zx = PolynomialRing(ZZ, 'x')


def gap_polynomial(f, g, N):
    x = _Zx.gen()
    return _Zx(f) + x**N * _Zx(g)


def _usable_prime(F, p):
    return F.leading_coefficient() % p != 0 and F.discriminant() % p != 0


# ---------------------------
# Newton polygon (Eisenstein-Dumas)
# ---------------------------

def dumas_certificate(F, p):
    """True if the p-adic Newton polygon of F is one segment with no interior lattice points."""
    F = _Zx(F)
    n = F.degree()
    if n < 1 or F[0] == 0:
        return False
    hull, slopes = newton_polygon(F, p)
    if len(slopes) != 1:
        return False
    (i0, v0), (i1, v1) = hull[0], hull[-1]
    return i0 == 0 and i1 == n and gcd(v0 - v1, n) == 1


# ---------------------------
# Degree sets
# ---------------------------

def _subset_sums(degrees):
    sums = {0}
    for d in degrees:
        sums |= {s + d for s in sums}
    return sums


def factor_degree_set(F, primes=None):
    """
    Proper degrees 0 < d < n that a rational factor of F could still have,
    given the factorization patterns of F mod each usable prime.
    Returns (degrees, patterns) with patterns {p: sorted factor degrees}.
    """
    F = _Zx(F)
    n = F.degree()
    if primes is None:
        primes = DEGREE_SET_PRIMES
    possible = set(range(1, n))
    patterns = {}
    for p in primes:
        if not _usable_prime(F, p):
            continue
        degs = sorted(h.degree() for h, _ in F.change_ring(GF(p)).factor())
        patterns[p] = degs
        possible &= _subset_sums(degs)
        if not possible:
            break
    return possible, patterns


# ---------------------------
# p-adic factor recombination
# ---------------------------

def _monic_transform(F):
    """G(x) = lc^(n-1) F(x / lc), monic with integer coefficients."""
    n, lc = F.degree(), F.leading_coefficient()
    return _Zx([F[i] * lc**(n - 1 - i) for i in range(n)] + [1])


def _centered_lift(h, modulus):
    coeffs = []
    for c in h.list():
        a = ZZ(c.lift()) % modulus
        if a > modulus // 2:
            a -= modulus
        coeffs.append(a)
    return _Zx(coeffs)


def _mignotte_bound(G, k):
    """Every coefficient of a degree k factor of G is at most this in absolute value."""
    norm = ZZ(sum(ZZ(c)**2 for c in G.list())).isqrt() + 1
    return max(binomial(k, j) for j in range(k + 1)) * norm


def padic_recombination(F, p=None, prec=RECOMBINATION_PREC, max_nodes=MAX_RECOMBINATION_NODES):
    """
    Factor a squarefree F in ZZ[x] by recombining its p-adic factors.

    Subsets of local factors are explored smallest degree first (only up to
    n/2, the complement covers the rest); a subset is discarded when its
    centred lift breaks the Mignotte bound or its constant term does not
    divide G(0). Returns the list of primitive irreducible factors of F.
    """
    F = _Zx(F)
    F = F // F.content()
    n = F.degree()
    if n <= 1:
        return [F]
    if p is None:
        p = next((q for q in DEGREE_SET_PRIMES if _usable_prime(F, q)), None)
        if p is None:
            raise ArithVerifyError(f"no usable prime for {F}")
    elif not _usable_prime(F, p):
        raise ValueError(f"p={p} divides the leading coefficient or the discriminant")

    lc = F.leading_coefficient()
    G = _monic_transform(F)
    bound = _mignotte_bound(G, n // 2 if n > 1 else 1)
    while ZZ(p)**prec <= 2 * bound:
        prec += 1
    modulus = ZZ(p)**prec

    R = PolynomialRing(Zp(p, prec), 'x')
    local = [h * h.leading_coefficient().inverse_of_unit() for h, e in R(G).factor()]
    debug(f"padic_recombination: {len(local)} local factors at p={p}, prec={prec}")

    found, consumed = [], set()
    heap = [(local[i].degree(), (i,)) for i in range(len(local))]
    heapq.heapify(heap)
    nodes = 0
    remaining = G
    while heap:
        deg, subset = heapq.heappop(heap)
        if consumed.intersection(subset) or deg > remaining.degree() // 2:
            continue
        nodes += 1
        if nodes > max_nodes:
            raise ArithVerifyError(f"recombination exceeded {max_nodes} nodes for {F}")
        prod_h = R(1)
        for i in subset:
            prod_h *= local[i]
        h = _centered_lift(prod_h, modulus)
        admissible = max(abs(c) for c in h.list()) <= _mignotte_bound(G, deg) \
            and (h[0] == 0 or remaining[0] % h[0] == 0)
        if admissible and remaining % h == 0:
            found.append(h)
            consumed.update(subset)
            remaining = remaining // h
            continue
        for j in range(subset[-1] + 1, len(local)):
            if j not in consumed:
                heapq.heappush(heap, (deg + local[j].degree(), subset + (j,)))
    if remaining.degree() > 0:
        found.append(remaining)

    x = _Zx.gen()
    factors = []
    for h in found:
        hF = h(lc * x)
        factors.append(hF // hF.content())
    return factors


# ---------------------------
# Certificates
# ---------------------------

def certify_irreducible(F, primes=None):
    """
    Name of the first certificate proving F irreducible over QQ, or None if F
    is reducible.
    """
    F = _Zx(F)
    if F.degree() < 1:
        raise ValueError("constant polynomial")
    F = F // F.content()
    if F.degree() == 1:
        return 'linear'
    if F.gcd(F.derivative()).degree() > 0:
        return None
    if any(dumas_certificate(F, p) for p in DUMAS_PRIMES):
        return 'dumas'
    degrees, _ = factor_degree_set(F, primes)
    if not degrees:
        return 'degree-set'
    if len(padic_recombination(F)) == 1:
        return 'recombination'
    return None


def scan_gap_family(f, g, Ns, verbose=False):
    """Certificate (or None) for every F_N = f + x^N g, N in Ns."""
    out = {}
    for N in tqdm(list(Ns), desc="gap family", disable=not verbose):
        out[N] = certify_irreducible(gap_polynomial(f, g, N))
        debug(f"N={N}: {out[N]}")
    return out


# ---------------------------
# Small roots
# ---------------------------

def complex_roots(F):
    coeffs = [float(c) for c in reversed(_Zx(F).list())]
    return np.roots(coeffs)


def unit_disc_root_count(F):
    return int(np.sum(np.abs(complex_roots(F)) < 1))


def _eval_series(coeffs, t0):
    total = 0
    for c in reversed(coeffs):
        total = total * t0 + c
    return total


def gap_root_from_series(series, N, embedding=None, iterations=30):
    """
    Root of f + x^N g near alpha = series(0): iterate x -> X(x^N), X the
    implicit root series, under a complex embedding.
    """
    K = series.base_ring()
    if embedding is None:
        embedding = CC if K is QQ else K.complex_embeddings()[0]
    coeffs = [complex(CC(embedding(c))) for c in series.list()]
    z = coeffs[0]
    for _ in range(iterations):
        z = _eval_series(coeffs, z**N)
    return z
