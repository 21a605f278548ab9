"""
__init__.py: Exposes key functions from the submodules.
"""
# Expose core configuration and exceptions
from .verify_config import (
    DEFAULT_PADIC_PREC, DEFAULT_SERIES_PREC,
    ArithVerifyError, ClaimFailure, LocalSolubilityError, SeriesPrecisionError
)
from .trace import claim, claim_equal, VerificationLedger

# Expose the verification toolkit
from .curves import (
    curve_summary, frey_curve, frey_invariants_predicted, serre_level,
    semistability_defect, reducible_primes
)
from .newforms import newforms_at_level, eliminate_newforms, level_lowering_contradiction
from .descent import TwoIsogenyDescent, quartic_locally_soluble, two_selmer_rank
from .padic import padic_elliptic_log, newton_polygon, strassmann_bound, implicit_root_series
from .dynamics import (
    dynatomic_polynomial, rational_periodic_points, search_rational_cycles, coleman_bound
)
from .irreducibility import certify_irreducible, padic_recombination, factor_degree_set

# Expose the driver
from .driver import run_paper, run_all, main
