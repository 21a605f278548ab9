from arithverify.newforms import (
    newforms_at_level, frey_trace_candidates, elimination_bound,
    eliminate_newforms, level_lowering_contradiction
)


def test_newform_counts():
    assert newforms_at_level(2) == []
    assert len(newforms_at_level(11)) == 1
    assert len(newforms_at_level(23)) == 1


def test_frey_trace_candidates():
    assert frey_trace_candidates(3) == [0]
    assert frey_trace_candidates(7) == [-4, 0, 4]
    assert frey_trace_candidates(7, torsion_divisor=1) == list(range(-5, 6))


def test_elimination_bound_11a():
    f = newforms_at_level(11)[0]
    assert elimination_bound(f, 3) == 45
    assert elimination_bound(f, 7) == 10080


def test_eliminate_newforms_reports():
    report = eliminate_newforms(11, 7, ells=[3], verbose=False)
    assert report['level'] == 11 and report['p'] == 7
    assert report['forms'][0]['eliminated_by'] == 3
    assert report['survivors'] == []

    report = eliminate_newforms(11, 5, ells=[3, 7], verbose=False)
    assert report['survivors'] == [0]
    assert set(report['forms'][0]['bounds']) == {3, 7}


def test_elimination_skips_p_and_primes_of_the_level():
    report = eliminate_newforms(11, 3, ells=[3, 11, 7], verbose=False)
    assert 3 not in report['forms'][0]['bounds']
    assert 11 not in report['forms'][0]['bounds']


def test_level_lowering_contradiction_level_two():
    for p in (5, 7, 11, 13):
        assert level_lowering_contradiction(2, p, verbose=False)
    assert not level_lowering_contradiction(11, 5, ells=[3, 7], verbose=False)
