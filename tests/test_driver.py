import json
from types import SimpleNamespace

import pytest

from arithverify import driver, verify_config
from arithverify.trace import claim, debug, step
from arithverify.verify_config import ArithVerifyError


def _fake_paper(ok):
    def good(ledger, verbose=True):
        claim(True, "holds", ledger, verbose)

    def bad(ledger, verbose=True):
        claim(ok, "may fail", ledger, verbose)

    return SimpleNamespace(TITLE="fake", SECTIONS=[("good", good), ("bad", bad)])


def test_every_paper_module_loads():
    for name in driver.PAPERS:
        module = driver.load_paper(name)
        assert module.TITLE
        assert all(callable(fn) for _, fn in module.SECTIONS)


def test_unknown_paper():
    with pytest.raises(ArithVerifyError):
        driver.load_paper("no_such_paper")


def test_run_paper_records_sections(monkeypatch):
    monkeypatch.setattr(driver, 'load_paper', lambda name: _fake_paper(True))
    ledger = driver.run_paper('frey_fermat', verbose=False)
    assert ledger.counters['sections'] == 2
    assert ledger.counters['claims_passed'] == 2
    assert set(ledger.phase_times) == {"frey_fermat: good", "frey_fermat: bad"}


def test_main_exit_status(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(driver, 'load_paper', lambda name: _fake_paper(True))
    path = tmp_path / "run.json"
    assert driver.main(['--paper', 'frey_fermat', '--quiet', '--json', str(path)]) == 0
    assert json.loads(path.read_text())['counters']['papers'] == 1

    monkeypatch.setattr(driver, 'load_paper', lambda name: _fake_paper(False))
    assert driver.main(['--paper', 'frey_fermat', '--quiet']) == 1
    assert "Claim failed: may fail" in capsys.readouterr().out


def test_main_list(capsys):
    assert driver.main(['--list']) == 0
    out = capsys.readouterr().out
    for name in driver.PAPERS:
        assert name in out


def test_quiet_run_prints_only_the_summary(monkeypatch, capsys):
    def chatty(ledger, verbose=True):
        step("narrative line", verbose=verbose)
        claim(True, "holds", ledger, verbose)

    paper = SimpleNamespace(TITLE="chatty", SECTIONS=[("chatty", chatty)])
    monkeypatch.setattr(driver, 'load_paper', lambda name: paper)
    assert driver.main(['--paper', 'frey_fermat', '--quiet']) == 0
    out = capsys.readouterr().out
    assert "narrative line" not in out
    assert "[ok]" not in out
    assert "Claims passed: 1, failed: 0" in out


def test_debug_flag_enables_debug_output(monkeypatch, capsys):
    monkeypatch.setattr(verify_config, 'DEBUG', False)

    def noisy(ledger, verbose=True):
        debug("diagnostic line")

    paper = SimpleNamespace(TITLE="noisy", SECTIONS=[("noisy", noisy)])
    monkeypatch.setattr(driver, 'load_paper', lambda name: paper)
    driver.main(['--paper', 'frey_fermat', '--quiet'])
    assert "[debug] diagnostic line" not in capsys.readouterr().out
    driver.main(['--paper', 'frey_fermat', '--quiet', '--debug'])
    assert verify_config.DEBUG
    assert "[debug] diagnostic line" in capsys.readouterr().out


@pytest.mark.slow
@pytest.mark.parametrize("name", sorted(driver.PAPERS))
def test_paper_verifies_every_claim(name, capsys):
    ledger = driver.run_paper(name, verbose=False)
    assert not ledger.failed
    assert ledger.counters['claims_passed'] > 0
    assert ledger.counters['sections'] == len(driver.load_paper(name).SECTIONS)
    out = capsys.readouterr().out
    assert "[ok]" not in out
    assert not any(line.startswith("  ") for line in out.splitlines())
