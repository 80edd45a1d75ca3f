"""Atom typing: AutoDock types, XScore types and their chemical classes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from mcdock.utils.triangular import permissive_index

# AutoDock4 atom types, in the order their codes appear in PDBQT files.
AD_TYPES = [
    "H", "HD", "C", "A", "N", "NA", "OA", "S", "SA", "Se", "P", "F", "Cl", "Br", "I",
    "Zn", "Fe", "Mg", "Ca", "Mn", "Cu", "Na", "K", "Hg", "Ni", "Co", "Cd", "As", "Sr",
]
AD_TYPE_INDEX = {name: idx for idx, name in enumerate(AD_TYPES)}
AD_TYPE_H = AD_TYPE_INDEX["H"]
AD_TYPE_HD = AD_TYPE_INDEX["HD"]
AD_TYPE_N = AD_TYPE_INDEX["N"]

# Covalent radii scaled by 1.1, used for bond detection.
AD_COVALENT_RADII = [
    0.407, 0.407, 0.847, 0.847, 0.825, 0.825, 0.803, 1.122, 1.122, 1.276, 1.166, 0.781,
    1.089, 1.254, 1.463, 1.441, 1.375, 1.430, 1.914, 1.529, 1.518, 1.683, 2.227, 1.628,
    1.331, 1.386, 1.606, 1.309, 2.112,
]

XS_TYPES = [
    "C_H", "C_P", "N_P", "N_D", "N_A", "N_DA", "O_A", "O_DA",
    "S_P", "P_P", "F_H", "Cl_H", "Br_H", "I_H", "Met_D",
]
XS_TYPE_INDEX = {name: idx for idx, name in enumerate(XS_TYPES)}
XS_TYPE_SIZE = len(XS_TYPES)
NUM_TYPE_PAIRS = XS_TYPE_SIZE * (XS_TYPE_SIZE + 1) // 2

XS_VDW_RADII = [1.9, 1.9, 1.8, 1.8, 1.8, 1.8, 1.7, 1.7, 2.0, 2.1, 1.5, 1.8, 2.0, 2.2, 1.2]

_XS_HYDROPHOBIC = {"C_H", "F_H", "Cl_H", "Br_H", "I_H"}
_XS_DONOR = {"N_D", "N_DA", "O_DA", "Met_D"}
_XS_ACCEPTOR = {"N_A", "N_DA", "O_A", "O_DA"}

_AD_TO_XS = {
    "C": "C_H",
    "A": "C_H",
    "N": "N_P",
    "NA": "N_A",
    "OA": "O_A",
    "S": "S_P",
    "SA": "S_P",
    "Se": "S_P",
    "P": "P_P",
    "F": "F_H",
    "Cl": "Cl_H",
    "Br": "Br_H",
    "I": "I_H",
}

_DONORIZED = {"N_P": "N_D", "N_A": "N_DA", "O_A": "O_DA"}


def parse_ad_type(code: str) -> Optional[int]:
    """Return the AutoDock type index for ``code`` or None if unrecognized."""

    return AD_TYPE_INDEX.get(code.strip())


def ad_to_xs(ad: int) -> Optional[int]:
    """Map an AutoDock type to its XScore type; hydrogens have none."""

    if ad <= AD_TYPE_HD:
        return None
    name = _AD_TO_XS.get(AD_TYPES[ad], "Met_D")
    return XS_TYPE_INDEX[name]


def xs_vdw_radius(xs: int) -> float:
    return XS_VDW_RADII[xs]


def xs_is_hydrophobic(xs: int) -> bool:
    return XS_TYPES[xs] in _XS_HYDROPHOBIC


def xs_is_donor(xs: int) -> bool:
    return XS_TYPES[xs] in _XS_DONOR


def xs_is_acceptor(xs: int) -> bool:
    return XS_TYPES[xs] in _XS_ACCEPTOR


def xs_hbond(t1: int, t2: int) -> bool:
    """True when one type can donate and the other accept a hydrogen bond."""

    return (xs_is_donor(t1) and xs_is_acceptor(t2)) or (xs_is_donor(t2) and xs_is_acceptor(t1))


def type_pair_index(t1: int, t2: int) -> int:
    """Canonical index of an unordered XS type pair."""

    return permissive_index(t1, t2)


@dataclass
class Atom:
    """A typed atom parsed from a PDBQT record."""

    serial: int
    name: str
    coordinate: np.ndarray
    ad: int
    xs: Optional[int] = None

    def __post_init__(self) -> None:
        self.coordinate = np.asarray(self.coordinate, dtype=float)
        if self.xs is None:
            self.xs = ad_to_xs(self.ad)

    def is_hydrogen(self) -> bool:
        return self.ad <= AD_TYPE_HD

    def is_hetero(self) -> bool:
        return self.ad >= AD_TYPE_N

    def covalent_radius(self) -> float:
        return AD_COVALENT_RADII[self.ad]

    def is_neighbor(self, other: "Atom") -> bool:
        """True when the two atoms are within bonding distance."""

        dist_sqr = float(np.sum((self.coordinate - other.coordinate) ** 2))
        return dist_sqr < (self.covalent_radius() + other.covalent_radius()) ** 2

    def donorize(self) -> None:
        if self.xs is None:
            return
        name = _DONORIZED.get(XS_TYPES[self.xs])
        if name is not None:
            self.xs = XS_TYPE_INDEX[name]

    def dehydrophobicize(self) -> None:
        if self.xs == XS_TYPE_INDEX["C_H"]:
            self.xs = XS_TYPE_INDEX["C_P"]


def classify_bonded(atoms: List[Atom], atom: Atom, start: int) -> None:
    """Reclassify ``atom`` and the already parsed ``atoms[start:]`` it bonds to.

    A polar hydrogen promotes the nearest bonded hetero atom to a donor, a
    hetero atom turns every bonded carbon polar, and a carbon bonded to a
    hetero atom is itself polar.
    """

    if atom.ad == AD_TYPE_HD:
        for other in reversed(atoms[start:]):
            if other.is_hetero() and other.is_neighbor(atom):
                other.donorize()
                break
    elif atom.is_hetero():
        for other in reversed(atoms[start:]):
            if not other.is_hetero() and other.is_neighbor(atom):
                other.dehydrophobicize()
    else:
        for other in reversed(atoms[start:]):
            if other.is_hetero() and other.is_neighbor(atom):
                atom.dehydrophobicize()
                break
