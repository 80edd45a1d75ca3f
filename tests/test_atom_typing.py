import numpy as np

from mcdock.data.atom import (
    AD_TYPE_INDEX,
    NUM_TYPE_PAIRS,
    XS_TYPE_INDEX,
    Atom,
    ad_to_xs,
    classify_bonded,
    parse_ad_type,
    xs_hbond,
)


def test_ad_to_xs_mapping():
    assert ad_to_xs(AD_TYPE_INDEX["A"]) == XS_TYPE_INDEX["C_H"]
    assert ad_to_xs(AD_TYPE_INDEX["NA"]) == XS_TYPE_INDEX["N_A"]
    assert ad_to_xs(AD_TYPE_INDEX["Zn"]) == XS_TYPE_INDEX["Met_D"]
    assert ad_to_xs(AD_TYPE_INDEX["HD"]) is None
    assert parse_ad_type("Xx") is None
    assert NUM_TYPE_PAIRS == 120


def test_hbond_pairs():
    assert xs_hbond(XS_TYPE_INDEX["N_D"], XS_TYPE_INDEX["O_A"])
    assert xs_hbond(XS_TYPE_INDEX["O_A"], XS_TYPE_INDEX["Met_D"])
    assert not xs_hbond(XS_TYPE_INDEX["O_A"], XS_TYPE_INDEX["O_A"])


def test_classify_bonded_donorizes_and_dehydrophobicizes():
    nitrogen = Atom(1, "N", np.zeros(3), AD_TYPE_INDEX["N"])
    carbon = Atom(2, "CA", np.array([0.0, 1.45, 0.0]), AD_TYPE_INDEX["C"])
    hydrogen = Atom(3, "H", np.array([-0.9, -0.4, 0.0]), AD_TYPE_INDEX["HD"])
    atoms = []
    for atom in (nitrogen, carbon, hydrogen):
        classify_bonded(atoms, atom, 0)
        atoms.append(atom)
    assert nitrogen.xs == XS_TYPE_INDEX["N_D"]
    assert carbon.xs == XS_TYPE_INDEX["C_P"]


def test_classify_bonded_respects_window_start():
    oxygen = Atom(1, "O", np.zeros(3), AD_TYPE_INDEX["OA"])
    carbon = Atom(2, "C", np.array([1.2, 0.0, 0.0]), AD_TYPE_INDEX["C"])
    atoms = [oxygen]
    classify_bonded(atoms, carbon, 1)
    assert carbon.xs == XS_TYPE_INDEX["C_H"]
