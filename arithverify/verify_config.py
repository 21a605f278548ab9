"""
verify_config.py: Central config for the arithverify package.

Run constants (precisions, prime pools, search heights) and the exception
classes shared by every verification module.
"""

from sage.all import primes


###### STATIC CONFIG
DEBUG = False
VERBOSE = True

# p-adic / power series precision
DEFAULT_PADIC_PREC = 30
DEFAULT_SERIES_PREC = 20
FORMAL_LOG_EXTRA_TERMS = 10   # terms added on top of prec when truncating the formal log

# prime pools
DEGREE_SET_PRIMES = list(primes(3, 60))   # mod-p factorization patterns for degree-set pruning
DUMAS_PRIMES = list(primes(30))
ELIMINATION_PRIMES = list(primes(3, 40))  # the ell used to kill newforms

# search heights
CYCLE_SEARCH_HEIGHT = 40      # |r| bound for c = r/s^2
CYCLE_SEARCH_DENOM = 8        # s bound for c = r/s^2
POINT_SEARCH_HEIGHT = 30      # naive point search on quartics / hyperelliptic curves

# recursion limits
MAX_LOCAL_SOLUBILITY_DEPTH = 60
MAX_RECOMBINATION_NODES = 20000
RECOMBINATION_PREC = 40
###### END STATIC CONFIG


class ArithVerifyError(Exception):
    """Base exception for errors in the verification scripts."""
    pass


class ClaimFailure(ArithVerifyError, AssertionError):
    """Raised when a claimed mathematical fact does not hold."""

    def __init__(self, message, context=None):
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})

    def __str__(self):
        if not self.context:
            return self.message
        ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
        return f"{self.message} [{ctx}]"


class LocalSolubilityError(ArithVerifyError):
    """Raised when the p-adic residue class search does not terminate."""
    pass


class SeriesPrecisionError(ArithVerifyError):
    """Raised when a power series computation cannot reach the requested precision."""
    pass
