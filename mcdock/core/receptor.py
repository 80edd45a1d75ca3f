"""Receptor model shared read-only by every search task."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np

from mcdock.core.partition import Partition
from mcdock.data.atom import Atom, XS_TYPE_SIZE
from mcdock.data.box import Box


@dataclass
class Receptor:
    """Typed receptor atoms, the search box and their spatial partition."""

    atoms: List[Atom]
    box: Box
    partition: Partition = field(init=False)
    coords: np.ndarray = field(init=False)
    xs: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        if self.atoms:
            self.coords = np.array([atom.coordinate for atom in self.atoms], dtype=float)
        else:
            self.coords = np.zeros((0, 3), dtype=float)
        # Hydrogens carry no XS type; XS_TYPE_SIZE marks them.
        self.xs = np.array(
            [XS_TYPE_SIZE if atom.xs is None else atom.xs for atom in self.atoms], dtype=int
        )
        self.partition = Partition.build(self.atoms, self.box)
        self.coords.setflags(write=False)
        self.xs.setflags(write=False)

    @property
    def center(self) -> np.ndarray:
        return self.box.center

    @property
    def span(self) -> np.ndarray:
        return self.box.span

    def xs_types(self) -> set[int]:
        return {int(t) for t in self.xs if t < XS_TYPE_SIZE}
