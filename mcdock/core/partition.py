"""Spatial partition of receptor atoms over the search box."""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from mcdock.data.atom import Atom
from mcdock.data.box import Box
from mcdock.scoring.grid import CUTOFF_SQR
from mcdock.utils.geometry import project_distance_sqr


class Partition:
    """Regular grid of cells, each holding indices of nearby receptor heavy atoms.

    An atom is listed in every cell whose box lies within ``CUTOFF`` of it,
    so a query only scans the few atoms that can interact with a point in
    that cell.
    """

    def __init__(self, box: Box, cells: List[np.ndarray]) -> None:
        self.box = box
        self._cells = cells

    @classmethod
    def build(cls, atoms: Sequence[Atom], box: Box) -> "Partition":
        heavy = [idx for idx, atom in enumerate(atoms) if not atom.is_hydrogen()]
        if heavy:
            coords = np.array([atoms[idx].coordinate for idx in heavy], dtype=float)
            near_box = box.project_distance_sqr(coords) < CUTOFF_SQR
            candidates = np.asarray(heavy, dtype=int)[near_box]
            candidate_coords = coords[near_box]
        else:
            candidates = np.zeros(0, dtype=int)
            candidate_coords = np.zeros((0, 3), dtype=float)

        nx, ny, nz = box.num_partitions
        cells: List[np.ndarray] = []
        for x in range(nx):
            for y in range(ny):
                for z in range(nz):
                    corner1 = box.partition_corner1((x, y, z))
                    corner2 = box.partition_corner1((x + 1, y + 1, z + 1))
                    dist_sqr = project_distance_sqr(corner1, corner2, candidate_coords)
                    cells.append(candidates[dist_sqr < CUTOFF_SQR])
        return cls(box, cells)

    def _flat(self, x: int, y: int, z: int) -> int:
        _, ny, nz = self.box.num_partitions
        return (x * ny + y) * nz + z

    def cell(self, x: int, y: int, z: int) -> np.ndarray:
        return self._cells[self._flat(x, y, z)]

    def query(self, coord: np.ndarray) -> np.ndarray:
        """Indices of receptor atoms that may lie within cutoff of ``coord``."""

        return self.cell(*self.box.partition_index(coord))

    @property
    def num_cells(self) -> int:
        return len(self._cells)
