import json

import pytest

from arithverify.trace import claim, claim_equal, step, info, VerificationLedger
from arithverify.verify_config import ClaimFailure, ArithVerifyError


def test_claim_passes_and_records():
    ledger = VerificationLedger("t")
    assert claim(1 + 1 == 2, "arithmetic", ledger)
    assert claim_equal(6 * 7, 42, "product", ledger, verbose=False)
    assert ledger.passed == ["arithmetic", "product: 42"]
    assert ledger.counters['claims_passed'] == 2


def test_claim_failure_carries_context(capsys):
    ledger = VerificationLedger("t")
    with pytest.raises(ClaimFailure) as exc:
        claim_equal(5, 6, "five is six", ledger)
    err = exc.value
    assert isinstance(err, AssertionError)
    assert isinstance(err, ArithVerifyError)
    assert err.context == {'actual': 5, 'expected': 6}
    assert "actual=5" in str(err)
    assert ledger.failed == ["five is six: 6"]
    assert "[FAILED]" in capsys.readouterr().out


def test_claim_equal_accepts_extra_context(capsys):
    assert claim_equal(set(), set(), "empty degree set", verbose=False, patterns={5: [5]})
    with pytest.raises(ClaimFailure) as exc:
        claim_equal({2}, set(), "empty degree set", verbose=False, patterns={5: [1, 4]})
    assert exc.value.context == {'patterns': {5: [1, 4]}, 'actual': {2}, 'expected': set()}
    assert "patterns = {5: [1, 4]}" in capsys.readouterr().out


def test_narrative_respects_verbose(capsys):
    step("hidden step", verbose=False)
    info("hidden info", verbose=False)
    assert capsys.readouterr().out == ""
    step("shown step")
    info("shown info")
    out = capsys.readouterr().out
    assert "shown step" in out and "shown info" in out


def test_ledger_phases_and_json(tmp_path):
    ledger = VerificationLedger("a")
    ledger.start_phase("one")
    ledger.end_phase("one")
    ledger.incr('sections')
    ledger.incr('sections', 2)
    ledger.record_claim("x", True)
    assert ledger.counters['sections'] == 3
    assert ledger.passed == ["x"]
    assert "one" in ledger.summary()['phase_times']
    assert "Claims passed: 1, failed: 0" in ledger.summary_string()

    path = tmp_path / "ledger.json"
    ledger.to_json(str(path))
    data = json.loads(path.read_text())
    assert data['name'] == "a"
    assert data['counters']['sections'] == 3


def test_end_phase_without_start_is_ignored():
    ledger = VerificationLedger()
    ledger.end_phase("never started")
    assert ledger.summary()['phase_times'] == {}
