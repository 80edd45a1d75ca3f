"""Search box definition."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from mcdock.utils.geometry import project_distance_sqr

DEFAULT_PARTITION_GRANULARITY = 3.0


@dataclass
class Box:
    """Axis-aligned search box split into a regular grid of partitions."""

    center: np.ndarray
    size: np.ndarray
    granularity: float = DEFAULT_PARTITION_GRANULARITY
    corner1: np.ndarray = field(init=False)
    corner2: np.ndarray = field(init=False)
    num_partitions: tuple[int, int, int] = field(init=False)
    partition_size: np.ndarray = field(init=False)

    def __post_init__(self) -> None:
        self.center = np.asarray(self.center, dtype=float).reshape(3)
        self.size = np.asarray(self.size, dtype=float).reshape(3)
        if np.any(self.size <= 0):
            raise ValueError(f"Box size must be positive, got {self.size.tolist()}.")
        if self.granularity <= 0:
            raise ValueError("Partition granularity must be positive.")
        self.corner1 = self.center - 0.5 * self.size
        self.corner2 = self.center + 0.5 * self.size
        counts = np.maximum(1, (self.size / self.granularity).astype(int))
        self.num_partitions = (int(counts[0]), int(counts[1]), int(counts[2]))
        self.partition_size = self.size / counts

    @classmethod
    def from_config(cls, center: Sequence[float], size: Sequence[float], granularity: float) -> "Box":
        return cls(center=np.asarray(center), size=np.asarray(size), granularity=granularity)

    @property
    def span(self) -> np.ndarray:
        return self.size

    def within(self, coord: np.ndarray) -> bool:
        coord = np.asarray(coord, dtype=float)
        return bool(np.all(coord >= self.corner1) and np.all(coord < self.corner2))

    def project_distance_sqr(self, coords: np.ndarray) -> np.ndarray:
        """Squared distance from point(s) to the whole box."""

        return project_distance_sqr(self.corner1, self.corner2, coords)

    def partition_corner1(self, index: Sequence[int]) -> np.ndarray:
        return self.corner1 + self.partition_size * np.asarray(index, dtype=float)

    def partition_index(self, coord: np.ndarray) -> tuple[int, int, int]:
        """Cell containing ``coord``, clamped to the grid bounds."""

        raw = np.floor((np.asarray(coord, dtype=float) - self.corner1) / self.partition_size)
        upper = np.asarray(self.num_partitions) - 1
        idx = np.clip(raw, 0, upper).astype(int)
        return int(idx[0]), int(idx[1]), int(idx[2])
