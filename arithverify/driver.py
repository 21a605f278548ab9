"""
driver.py: run the verification scripts in sequence.

    python -m arithverify                      # every paper
    python -m arithverify --paper frey_fermat  # one paper
    python -m arithverify --list
"""

import argparse
import importlib
import sys

from colorama import Fore, Style

from . import verify_config
from .verify_config import ArithVerifyError, ClaimFailure
from .trace import banner, section, VerificationLedger

PAPERS = {
    'frey_fermat': 'arithverify.papers.frey_fermat',
    'congruent_descent': 'arithverify.papers.congruent_descent',
    'dynamics_chabauty': 'arithverify.papers.dynamics_chabauty',
    'gap_irreducibility': 'arithverify.papers.gap_irreducibility',
}


def load_paper(name):
    if name not in PAPERS:
        raise ArithVerifyError(f"unknown paper {name!r}; choose from {', '.join(PAPERS)}")
    return importlib.import_module(PAPERS[name])


def run_paper(name, verbose=True, ledger=None):
    """Run every section of one paper. Raises ClaimFailure on the first false claim."""
    module = load_paper(name)
    if ledger is None:
        ledger = VerificationLedger(name)
    if verbose:
        banner(module.TITLE)
    for title, fn in module.SECTIONS:
        phase = f"{name}: {title}"
        if verbose:
            section(title)
        ledger.start_phase(phase)
        try:
            fn(ledger, verbose=verbose)
        finally:
            ledger.end_phase(phase)
        ledger.incr('sections')
    ledger.incr('papers')
    return ledger


def run_all(names=None, verbose=True, ledger=None):
    if ledger is None:
        ledger = VerificationLedger("arithverify")
    for name in names or list(PAPERS):
        run_paper(name, verbose=verbose, ledger=ledger)
    return ledger


def _parse_args(argv):
    parser = argparse.ArgumentParser(prog="arithverify",
                                     description="Re-check the computational claims of arithmetic papers.")
    parser.add_argument('--paper', action='append', choices=sorted(PAPERS),
                        help="paper to verify (repeatable); default is all")
    parser.add_argument('--list', action='store_true', help="list the available papers and exit")
    parser.add_argument('--quiet', action='store_true', help="only print failures and the summary")
    parser.add_argument('--debug', action='store_true', help="print extra diagnostics")
    parser.add_argument('--json', metavar='PATH', help="write the run summary as JSON")
    return parser.parse_args(argv)


def main(argv=None):
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    if args.list:
        for name in PAPERS:
            print(f"{name:<22} {load_paper(name).TITLE}")
        return 0
    if args.debug:
        verify_config.DEBUG = True
    verbose = verify_config.VERBOSE and not args.quiet

    ledger = VerificationLedger("arithverify")
    status = 0
    try:
        run_all(args.paper, verbose=verbose, ledger=ledger)
    except ClaimFailure as e:
        print(f"\n{Fore.RED}Claim failed: {e}{Style.RESET_ALL}")
        status = 1
    print("\n" + ledger.summary_string())
    if args.json:
        ledger.to_json(args.json)
        print(f"Summary written to {args.json}")
    if status == 0:
        print(f"{Fore.GREEN}All claims verified.{Style.RESET_ALL}")
    return status
