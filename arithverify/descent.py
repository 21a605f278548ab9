"""
Descent via 2-isogeny for elliptic curves with a rational 2-torsion point.

    E  : y^2 = x^3 + a x^2 + b x
    E' : y^2 = x^3 - 2a x^2 + (a^2 - 4b) x,      phi : E -> E'

The phi-Selmer group of E is the set of squarefree d | b (up to squares)
for which the quartic  N^2 = d M^4 + a M^2 e^2 + (b/d) e^4  has points over
R and over Q_p for every p | 2 b (a^2 - 4b). Selmer groups are kept both as
lists of squarefree integers and as F_2-vector spaces over the basis
{-1} + primes(b).
"""

import itertools

from sage.all import (
    QQ, ZZ, GF, RR, PolynomialRing, EllipticCurve, matrix, kronecker, gcd, prod
)
from tqdm import tqdm

from .verify_config import (
    ArithVerifyError, LocalSolubilityError, MAX_LOCAL_SOLUBILITY_DEPTH,
    POINT_SEARCH_HEIGHT
)
from .trace import banner, step, info, debug

_Zx = PolynomialRing(ZZ, 'x')


# ---------------------------
# Local solubility
# ---------------------------

def is_square_in_Qp(n, p):
    n = QQ(n)
    if n == 0:
        return True
    v = n.valuation(p)
    if v % 2:
        return False
    u = n / QQ(p)**v
    # u = r/s is a square iff r*s is
    w = u.numerator() * u.denominator()
    if p == 2:
        return w % 8 == 1
    return kronecker(w, p) == 1


def _class_soluble(f, p, x0, k, depth=0):
    """
    Is f(x) a square in Q_p for some x in x0 + p^k Z_p ?
    f must be squarefree so that the recursion terminates.
    """
    if depth > MAX_LOCAL_SOLUBILITY_DEPTH:
        raise LocalSolubilityError(f"no decision for {f} at p={p} after {depth} levels (x0={x0}, k={k})")
    c = f(_Zx.gen() + x0).list()    # Taylor coefficients at x0
    fx0 = c[0]
    if is_square_in_Qp(fx0, p):
        return True
    v0 = fx0.valuation(p)
    # Hensel: v(f(x0)) > 2 v(f'(x0)) gives a root, hence the point (root, 0)
    if len(c) > 1 and c[1] != 0 and v0 > 2 * c[1].valuation(p):
        return True
    m = min(cj.valuation(p) + j * k for j, cj in enumerate(c) if j > 0 and cj != 0)
    if m - v0 >= (3 if p == 2 else 1):
        # every f(x) in the class lies in the (non-square) class of f(x0)
        return False
    step_size = ZZ(p)**k
    return any(_class_soluble(f, p, x0 + r * step_size, k + 1, depth + 1) for r in range(p))


def quartic_locally_soluble(f, p):
    """
    Does y^2 = F(x, z) have a Q_p-point, where F is the degree 4 homogenisation of f?
    Points with z a unit come from f on Z_p, the rest from the reversed quartic on p Z_p.
    """
    f = _Zx(f)
    p = ZZ(p)
    if f.degree() != 4:
        raise ValueError(f"expected a quartic, got degree {f.degree()}")
    if _class_soluble(f, p, ZZ(0), 0):
        return True
    return _class_soluble(f.reverse(4), p, ZZ(0), 1)


def quartic_real_soluble(f):
    f = _Zx(f)
    if f.leading_coefficient() > 0 or f(0) > 0:
        return True
    return len(f.roots(RR, multiplicities=False)) > 0


# ---------------------------
# Selmer groups as F_2-spaces
# ---------------------------

def _f2_vector(d, basis):
    d = ZZ(d)
    return [1 if d < 0 else 0] + [d.valuation(q) % 2 for q in basis]


def selmer_f2_dimension(elements, basis=None):
    """F_2-dimension of the subgroup of Q*/Q*^2 spanned by the given integers."""
    elements = [ZZ(d) for d in elements]
    if not elements:
        return 0
    if basis is None:
        basis = sorted(set(q for d in elements for q in d.prime_factors()))
    rows = [_f2_vector(d, basis) for d in elements]
    return matrix(GF(2), rows).rank()


def two_selmer_rank(E):
    """2-Selmer rank as reported by mwrank (cross-check only)."""
    return ZZ(E.selmer_rank())


# ---------------------------
# Descent
# ---------------------------

class TwoIsogenyDescent:
    """
    Full 2-isogeny descent pipeline: phi-Selmer and phi'-Selmer groups,
    the images of the connecting maps found by a small point search, and
    the resulting bounds on rank E(Q).
    """

    def __init__(self, a, b, search_height=POINT_SEARCH_HEIGHT, verbose=True):
        """
        Args:
            a, b: coefficients of E: y^2 = x^3 + a x^2 + b x
            search_height: bound on |M|, |e| for the point search on each quartic
            verbose: print the narrative trace
        """
        self.a = ZZ(a)
        self.b = ZZ(b)
        if self.b == 0 or self.a**2 - 4 * self.b == 0:
            raise ValueError(f"singular curve: a={a}, b={b}")
        self.a_dual = -2 * self.a
        self.b_dual = self.a**2 - 4 * self.b
        self.E = EllipticCurve(QQ, [0, self.a, 0, self.b, 0])
        self.E_dual = EllipticCurve(QQ, [0, self.a_dual, 0, self.b_dual, 0])
        self.search_height = search_height
        self.verbose = verbose

        # Results container
        self.results = {}

    def run(self):
        """Execute the descent on both sides of the isogeny."""
        if self.verbose:
            banner(f"2-ISOGENY DESCENT: y^2 = x^3 + ({self.a})x^2 + ({self.b})x")

        self.results['phi'] = self._selmer_side(self.a, self.b, "phi")
        self.results['phi_dual'] = self._selmer_side(self.a_dual, self.b_dual, "phi'")
        self._rank_bounds()

        if self.verbose:
            self._print_summary()
        return self.results

    @staticmethod
    def quartic(a, b, d):
        x = _Zx.gen()
        return d * x**4 + a * x**2 + ZZ(b // d)

    def _candidates(self, b):
        primes_b = abs(b).prime_factors()
        out = []
        for sign in (1, -1):
            for r in range(len(primes_b) + 1):
                for sub in itertools.combinations(primes_b, r):
                    out.append(sign * prod(sub) if sub else ZZ(sign))
        return out

    def _search_image(self, a, b, d):
        """Small point on N^2 = d M^4 + a M^2 e^2 + (b/d) e^4, or None."""
        H = self.search_height
        bd = b // d
        for e in range(0, H + 1):
            for M in range(0, H + 1):
                if (M == 0 and e == 0) or gcd(M, e) != 1:
                    continue
                val = d * M**4 + a * M**2 * e**2 + bd * e**4
                if val >= 0 and ZZ(val).is_square():
                    return (M, e, ZZ(val).isqrt())
        return None

    def _selmer_side(self, a, b, label):
        bad_primes = sorted(set(ZZ(2 * b * (a**2 - 4 * b)).prime_factors()))
        candidates = self._candidates(b)
        selmer, image, witnesses, obstructions = [], [], {}, {}

        for d in tqdm(candidates, desc=f"{label}-Selmer", disable=not self.verbose):
            f = self.quartic(a, b, d)
            pt = self._search_image(a, b, d)
            if pt is not None:
                image.append(d)
                witnesses[d] = pt
            if not quartic_real_soluble(f):
                obstructions[d] = 'oo'
                continue
            bad = next((p for p in bad_primes if not quartic_locally_soluble(f, p)), None)
            if bad is not None:
                obstructions[d] = bad
                continue
            selmer.append(d)
            debug(f"{label}: d={d} locally soluble, witness={pt}")

        for d in image:
            if d not in selmer:
                raise ArithVerifyError(f"{label}: global point for d={d} but d not in Selmer group")

        basis = abs(b).prime_factors()
        return {
            'bad_primes': bad_primes,
            'selmer': selmer,
            'image': image,
            'witnesses': witnesses,
            'obstructions': obstructions,
            'selmer_dim': selmer_f2_dimension(selmer, basis),
            'image_dim': selmer_f2_dimension(image, basis),
        }

    def _rank_bounds(self):
        s, sd = self.results['phi'], self.results['phi_dual']
        upper = s['selmer_dim'] + sd['selmer_dim'] - 2
        lower = max(0, s['image_dim'] + sd['image_dim'] - 2)
        self.results['rank_upper'] = upper
        self.results['rank_lower'] = lower
        self.results['rank_determined'] = (upper == lower)

    def _print_summary(self):
        for key, label in (('phi', 'phi'), ('phi_dual', "phi'")):
            r = self.results[key]
            step(f"S^({label}): {r['selmer']}  (dim {r['selmer_dim']}); found image dim {r['image_dim']}")
            for d, where in r['obstructions'].items():
                info(f"d={d}: no points over {'R' if where == 'oo' else 'Q_' + str(where)}")
        step(f"{self.results['rank_lower']} <= rank E(Q) <= {self.results['rank_upper']}")
