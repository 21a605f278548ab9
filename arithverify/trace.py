"""
trace.py: narrative output and the run ledger.

Every verification prints what it is doing as it goes; a claim is a
checked statement that raises ClaimFailure (an AssertionError) when false.
"""

import json
import time
from collections import Counter, defaultdict

from colorama import Fore, Style

from . import verify_config
from .verify_config import ClaimFailure


def banner(title, width=70):
    print("\n" + "=" * width)
    print(f"{Fore.CYAN}{title}{Style.RESET_ALL}")
    print("=" * width)


def section(title):
    print(f"\n{Fore.CYAN}--- {title} ---{Style.RESET_ALL}")


def step(msg, verbose=True):
    if not verbose:
        return
    print(f"  {msg}")


def info(msg, verbose=True):
    if not verbose:
        return
    print(f"    {Style.DIM}{msg}{Style.RESET_ALL}")


def warn(msg):
    print(f"{Fore.YELLOW}WARNING: {msg}{Style.RESET_ALL}")


def debug(msg):
    if verify_config.DEBUG:
        print(f"[debug] {msg}")


def claim(condition, message, ledger=None, verbose=True, **context):
    """
    Check a claimed fact. Prints a pass line, or raises ClaimFailure.
    Extra keyword arguments are attached to the failure for diagnosis.
    """
    ok = bool(condition)
    if ledger is not None:
        ledger.record_claim(message, ok)
    if ok:
        if verbose:
            print(f"  {Fore.GREEN}[ok]{Style.RESET_ALL} {message}")
        return True
    print(f"  {Fore.RED}[FAILED]{Style.RESET_ALL} {message}")
    for k, v in context.items():
        print(f"      {k} = {v}")
    raise ClaimFailure(message, context)


def claim_equal(actual, expected, message, ledger=None, verbose=True, **context):
    context.update(actual=actual, expected=expected)
    return claim(actual == expected, f"{message}: {expected}", ledger=ledger,
                 verbose=verbose, **context)


class VerificationLedger:
    def __init__(self, name="verification"):
        self.name = name
        self.start_time = time.time()
        self.phase_times = defaultdict(float)
        self._phase_start = {}
        self.counters = Counter()
        self.passed = []
        self.failed = []

    def start_phase(self, name):
        self._phase_start[name] = time.time()

    def end_phase(self, name):
        t0 = self._phase_start.pop(name, None)
        if t0 is not None:
            self.phase_times[name] += time.time() - t0

    def incr(self, key, n=1):
        self.counters[key] += n

    def record_claim(self, message, ok):
        if ok:
            self.passed.append(message)
            self.counters['claims_passed'] += 1
        else:
            self.failed.append(message)
            self.counters['claims_failed'] += 1

    def summary(self):
        return {
            'name': self.name,
            'elapsed': time.time() - self.start_time,
            'phase_times': dict(self.phase_times),
            'counters': dict(self.counters),
            'passed': list(self.passed),
            'failed': list(self.failed),
        }

    def summary_string(self):
        s = self.summary()
        lines = [f"{s['name']}: total time {s['elapsed']:.2f}s",
                 "\nSections (s):"]
        if not s['phase_times']:
            lines.append("  (No sections recorded)")
        else:
            for phase, t in s['phase_times'].items():
                lines.append(f"  {phase:<45}: {t:.2f}s")
        lines.append("\nCounters:")
        if not s['counters']:
            lines.append("  (No counters recorded)")
        else:
            for counter, n in sorted(s['counters'].items()):
                lines.append(f"  {counter:<30}: {n}")
        lines.append(f"\nClaims passed: {len(s['passed'])}, failed: {len(s['failed'])}")
        lines.append("-" * 32)
        return "\n".join(lines)

    def to_json(self, path):
        def serializer(o):
            if isinstance(o, set):
                return list(o)
            return str(o)
        with open(path, 'w') as fh:
            json.dump(self.summary(), fh, indent=2, default=serializer)
