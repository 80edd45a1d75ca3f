"""Rigid ligand model evaluated against the scoring grid."""

from __future__ import annotations

from typing import List

import numpy as np

from mcdock.core.receptor import Receptor
from mcdock.data.atom import Atom
from mcdock.data.structs import Conformation, Evaluation, Result, zero_change
from mcdock.scoring.grid import CUTOFF_SQR, ScoringFunction
from mcdock.utils.geometry import check_normalized, quaternion_to_matrix

OUT_OF_BOX_PENALTY = 10.0
FLEXIBILITY_PENALTY = 0.05846


class RigidLigand:
    """Ligand treated as one rigid body with no active torsions.

    Heavy atom and hydrogen coordinates are kept in the body frame, centered
    on the heavy atom centroid; a conformation places that frame in the box.
    """

    def __init__(self, atoms: List[Atom]) -> None:
        heavy = [atom for atom in atoms if not atom.is_hydrogen()]
        if not heavy:
            raise ValueError("Ligand has no heavy atoms.")
        hydrogens = [atom for atom in atoms if atom.is_hydrogen()]
        heavy_coords = np.array([atom.coordinate for atom in heavy], dtype=float)
        self.origin = heavy_coords.mean(axis=0)
        self.heavy_local = heavy_coords - self.origin
        if hydrogens:
            self.hydrogen_local = np.array([atom.coordinate for atom in hydrogens]) - self.origin
        else:
            self.hydrogen_local = np.zeros((0, 3), dtype=float)
        self.xs = np.array([atom.xs for atom in heavy], dtype=int)
        self.num_heavy_atoms = len(heavy)
        self.num_active_torsions = 0
        self.flexibility_penalty_factor = 1.0 / (1.0 + FLEXIBILITY_PENALTY * self.num_active_torsions)

    def xs_types(self) -> set[int]:
        return {int(t) for t in self.xs}

    def heavy_coordinates(self, conf: Conformation) -> np.ndarray:
        rot = quaternion_to_matrix(check_normalized(conf.orientation))
        return self.heavy_local @ rot.T + conf.position

    def evaluate(
        self, conf: Conformation, sf: ScoringFunction, receptor: Receptor, e_upper_bound: float
    ) -> Evaluation:
        coords = self.heavy_coordinates(conf)
        box = receptor.box
        e = 0.0
        derivatives = np.zeros_like(coords)
        for idx, coord in enumerate(coords):
            if not box.within(coord):
                e += OUT_OF_BOX_PENALTY
                continue
            neighbors = receptor.partition.query(coord)
            if neighbors.size == 0:
                continue
            deltas = coord - receptor.coords[neighbors]
            r2 = np.sum(deltas**2, axis=1)
            mask = r2 < CUTOFF_SQR
            if not np.any(mask):
                continue
            rec_xs = receptor.xs[neighbors[mask]]
            lo = np.minimum(self.xs[idx], rec_xs)
            hi = np.maximum(self.xs[idx], rec_xs)
            type_pairs = lo + hi * (hi + 1) // 2
            energies, dors = sf.evaluate_many(type_pairs, r2[mask])
            e += float(np.sum(energies))
            derivatives[idx] = np.sum(dors[:, None] * deltas[mask], axis=0)

        # Rigid body: all energy is inter-molecular.
        f = e
        if e >= e_upper_bound:
            return Evaluation(e=e, f=f)

        g = zero_change(self.num_active_torsions)
        g[0:3] = derivatives.sum(axis=0)
        g[3:6] = np.cross(coords - conf.position, derivatives).sum(axis=0)
        return Evaluation(e=e, f=f, g=g)

    def compose_result(self, e: float, f: float, conf: Conformation) -> Result:
        rot = quaternion_to_matrix(check_normalized(conf.orientation))
        return Result(
            e=float(e),
            f=float(f),
            heavy_atoms=self.heavy_local @ rot.T + conf.position,
            hydrogens=self.hydrogen_local @ rot.T + conf.position,
        )

    def normalized_energy(self, e: float) -> float:
        return float(e) * self.flexibility_penalty_factor

