"""Precomputed pairwise scoring grid."""

from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np

from mcdock.data.atom import (
    NUM_TYPE_PAIRS,
    XS_TYPE_SIZE,
    type_pair_index,
    xs_hbond,
    xs_is_hydrophobic,
    xs_vdw_radius,
)
from mcdock.scoring.weights import DEFAULT_TERM_WEIGHTS, TermWeights

CUTOFF = 8.0
CUTOFF_SQR = CUTOFF * CUTOFF
FACTOR = 256.0
FACTOR_INVERSE = 1.0 / FACTOR
NUM_SAMPLES = int(FACTOR * CUTOFF_SQR) + 1


def sample_radii() -> np.ndarray:
    """Distances at which the grid is sampled: ``sqrt(i / FACTOR)``."""

    return np.sqrt(np.arange(NUM_SAMPLES, dtype=float) * FACTOR_INVERSE)


def score(t1: int, t2: int, r: np.ndarray, weights: TermWeights = DEFAULT_TERM_WEIGHTS) -> np.ndarray:
    """Empirical pair energy at center-to-center distance(s) ``r``."""

    d = np.asarray(r, dtype=float) - (xs_vdw_radius(t1) + xs_vdw_radius(t2))
    energy = (
        weights.gauss1 * np.exp(-((d * 2.0) ** 2))
        + weights.gauss2 * np.exp(-(((d - 3.0) * 0.5) ** 2))
        + weights.repulsion * np.where(d > 0.0, 0.0, d * d)
    )
    if xs_is_hydrophobic(t1) and xs_is_hydrophobic(t2):
        energy = energy + weights.hydrophobic * np.clip(1.5 - d, 0.0, 1.0)
    if xs_hbond(t1, t2):
        ramp = np.where(d >= 0.0, 0.0, np.where(d <= -0.7, 1.0, d * (-1.428571)))
        energy = energy + weights.hbond * ramp
    return energy


class ScoringFunction:
    """Per type pair tables of energy ``e`` and derivative over radius ``dor``.

    Rows are addressed by the canonical type pair index, columns by
    ``int(FACTOR * r2)``. Populate every pair the search needs with
    :meth:`precalculate` before evaluating; the tables are read-only after.
    """

    def __init__(self, weights: TermWeights = DEFAULT_TERM_WEIGHTS) -> None:
        self.weights = weights
        self.e = np.zeros((NUM_TYPE_PAIRS, NUM_SAMPLES), dtype=float)
        self.dor = np.zeros((NUM_TYPE_PAIRS, NUM_SAMPLES), dtype=float)
        self.populated = np.zeros(NUM_TYPE_PAIRS, dtype=bool)

    def precalculate(self, t1: int, t2: int, rs: np.ndarray) -> None:
        """Fill the table of the (t1, t2) pair from the sample radii ``rs``."""

        rs = np.asarray(rs, dtype=float)
        assert rs.shape == (NUM_SAMPLES,)
        tp = type_pair_index(t1, t2)
        e = score(t1, t2, rs, self.weights)
        dor = np.zeros(NUM_SAMPLES, dtype=float)
        dor[1:-1] = (e[2:] - e[1:-1]) / ((rs[2:] - rs[1:-1]) * rs[1:-1])
        self.e[tp] = e
        self.dor[tp] = dor
        self.populated[tp] = True

    def precalculate_pairs(self, pairs: Iterable[Tuple[int, int]]) -> None:
        rs = sample_radii()
        for t1, t2 in pairs:
            if not self.populated[type_pair_index(t1, t2)]:
                self.precalculate(t1, t2, rs)

    def precalculate_for(self, xs_types: Iterable[int]) -> None:
        """Populate every pair between ``xs_types`` and all XS types."""

        self.precalculate_pairs((t1, t2) for t1 in sorted(set(xs_types)) for t2 in range(XS_TYPE_SIZE))

    def evaluate(self, type_pair: int, r2: float) -> Tuple[float, float]:
        """Return ``(e, dor)`` of the sample at or below ``r2``."""

        assert r2 <= CUTOFF_SQR
        idx = int(FACTOR * r2)
        return float(self.e[type_pair, idx]), float(self.dor[type_pair, idx])

    def evaluate_many(self, type_pairs: np.ndarray, r2: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorized :meth:`evaluate` over matching arrays."""

        r2 = np.asarray(r2, dtype=float)
        assert np.all(r2 <= CUTOFF_SQR)
        idx = (FACTOR * r2).astype(int)
        return self.e[type_pairs, idx], self.dor[type_pairs, idx]
