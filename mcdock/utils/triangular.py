"""Symmetric matrix stored as its upper triangle."""

from __future__ import annotations

import numpy as np


def restrictive_index(i: int, j: int) -> int:
    """Index of (i, j) in the packed upper triangle; requires ``i <= j``."""

    assert i <= j
    return i + j * (j + 1) // 2


def permissive_index(i: int, j: int) -> int:
    """Index of (i, j) or (j, i), whichever lies in the upper triangle."""

    return restrictive_index(i, j) if i <= j else restrictive_index(j, i)


def packed_size(n: int) -> int:
    return n * (n + 1) // 2


class TriangularMatrix:
    """Symmetric ``n x n`` matrix backed by a packed buffer of ``n(n+1)/2`` values.

    Reads accept any (i, j); writes go through the canonical ``i <= j`` slot.
    """

    def __init__(self, n: int, fill: float = 0.0) -> None:
        self.n = int(n)
        self.data = np.full(packed_size(self.n), fill, dtype=float)
        rows, cols = np.meshgrid(np.arange(self.n), np.arange(self.n), indexing="ij")
        lo = np.minimum(rows, cols)
        hi = np.maximum(rows, cols)
        # Gather map used to expand the packed buffer for dense products.
        self._dense_index = lo + hi * (hi + 1) // 2

    @classmethod
    def identity(cls, n: int) -> "TriangularMatrix":
        matrix = cls(n)
        matrix.set_identity()
        return matrix

    def set_identity(self) -> None:
        self.data.fill(0.0)
        for i in range(self.n):
            self.data[restrictive_index(i, i)] = 1.0

    def __getitem__(self, key: tuple[int, int]) -> float:
        i, j = key
        return float(self.data[permissive_index(i, j)])

    def __setitem__(self, key: tuple[int, int], value: float) -> None:
        i, j = key
        self.data[restrictive_index(i, j)] = value

    def to_dense(self) -> np.ndarray:
        return self.data[self._dense_index]

    def dot(self, vec: np.ndarray) -> np.ndarray:
        """Matrix-vector product ``H @ vec``."""

        return self.to_dense() @ np.asarray(vec, dtype=float)

    def add_upper(self, update: np.ndarray) -> None:
        """Add the upper triangle of a dense symmetric ``update`` in place."""

        rows, cols = np.triu_indices(self.n)
        self.data[cols * (cols + 1) // 2 + rows] += update[rows, cols]
