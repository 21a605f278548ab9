import pytest
from sage.all import EllipticCurve

from arithverify import descent
from arithverify.descent import (
    is_square_in_Qp, quartic_locally_soluble, quartic_real_soluble,
    selmer_f2_dimension, TwoIsogenyDescent
)
from arithverify.verify_config import LocalSolubilityError


def test_is_square_in_Qp():
    assert is_square_in_Qp(17, 2)
    assert not is_square_in_Qp(5, 2)
    assert is_square_in_Qp(4 * 17, 2)
    assert not is_square_in_Qp(2, 5)
    assert is_square_in_Qp(-1, 5)
    assert not is_square_in_Qp(-1, 3)
    assert not is_square_in_Qp(3, 3)
    assert is_square_in_Qp(0, 7)


def test_quartic_local_solubility():
    # y^2 = 2x^4 + 50: 2 * unit^4 is a non-residue mod 5
    assert not quartic_locally_soluble([50, 0, 0, 0, 2], 5)
    assert quartic_locally_soluble([50, 0, 0, 0, 2], 3)
    # y^2 = x^4 - 1 has the point (1, 0)
    assert quartic_locally_soluble([-1, 0, 0, 0, 1], 2)


def test_quartic_degree_check():
    with pytest.raises(ValueError):
        quartic_locally_soluble([1, 0, 1], 3)


def test_quartic_real_solubility():
    assert quartic_real_soluble([-4, 0, 0, 0, 1])
    assert quartic_real_soluble([25, 0, 0, 0, -1])
    assert not quartic_real_soluble([-4, 0, 0, 0, -1])


def test_selmer_f2_dimension():
    assert selmer_f2_dimension([1, -1, 5, -5]) == 2
    assert selmer_f2_dimension([1, 2]) == 1
    assert selmer_f2_dimension([]) == 0
    assert selmer_f2_dimension([2, 3, 6]) == 2


def test_descent_y2_x3_minus_x():
    res = TwoIsogenyDescent(0, -1, verbose=False).run()
    assert sorted(res['phi']['selmer']) == [-1, 1]
    assert sorted(res['phi_dual']['selmer']) == [1, 2]
    assert res['rank_upper'] == 0
    assert res['rank_lower'] == 0
    assert res['rank_determined']


def test_descent_congruent_number_five():
    res = TwoIsogenyDescent(0, -25, verbose=False).run()
    assert sorted(res['phi']['selmer']) == [-5, -1, 1, 5]
    assert res['phi']['image_dim'] == 2
    assert sorted(res['phi_dual']['selmer']) == [1, 5]
    assert 2 in res['phi_dual']['obstructions']
    assert res['phi_dual']['obstructions'][-1] == 'oo'
    assert (res['rank_lower'], res['rank_upper']) == (1, 1)
    assert EllipticCurve([0, 0, 0, -25, 0]).rank() == 1


def test_descent_witnesses_lie_on_their_quartics():
    desc = TwoIsogenyDescent(0, -25, verbose=False)
    res = desc.run()
    for d, (M, e, N) in res['phi']['witnesses'].items():
        assert N**2 == d * M**4 + (-25 // d) * e**4


def test_descent_rejects_singular_curves():
    with pytest.raises(ValueError):
        TwoIsogenyDescent(2, 1)
    with pytest.raises(ValueError):
        TwoIsogenyDescent(1, 0)


def test_local_solubility_depth_limit(monkeypatch):
    # y^2 = 2x^4 + 50 over Q_3 needs one level of residue classes
    monkeypatch.setattr(descent, 'MAX_LOCAL_SOLUBILITY_DEPTH', 0)
    with pytest.raises(LocalSolubilityError):
        quartic_locally_soluble([50, 0, 0, 0, 2], 3)
    monkeypatch.setattr(descent, 'MAX_LOCAL_SOLUBILITY_DEPTH', 1)
    assert quartic_locally_soluble([50, 0, 0, 0, 2], 3)
