"""Bounded, RMSD-clustered container of docking results."""

from __future__ import annotations

from typing import Iterator, List

from mcdock.data.structs import Result
from mcdock.utils.geometry import mean_square_deviation


class ResultSet:
    """At most ``capacity`` results, one per cluster, sorted by ascending energy.

    Two results fall in the same cluster when the mean squared deviation of
    their heavy atoms is below ``required_square_error``.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("Result set capacity must be positive.")
        self.capacity = int(capacity)
        self._results: List[Result] = []

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[Result]:
        return iter(self._results)

    def __getitem__(self, idx: int) -> Result:
        return self._results[idx]

    @property
    def results(self) -> List[Result]:
        return list(self._results)

    def insert(self, r: Result, required_square_error: float) -> bool:
        """Cluster ``r`` into the set; return True when the set changed."""

        if not self._results:
            self._results.append(r)
            return True

        errors = [mean_square_deviation(r.heavy_atoms, other.heavy_atoms) for other in self._results]
        index = min(range(len(errors)), key=errors.__getitem__)

        if errors[index] < required_square_error:
            if r.e >= self._results[index].e:
                return False
            self._results[index] = r
        elif len(self._results) < self.capacity:
            self._results.append(r)
        elif r.e < self._results[-1].e:
            self._results[-1] = r
        else:
            return False

        self._results.sort(key=lambda item: item.e)
        return True

    def merge(self, other: "ResultSet", required_square_error: float) -> None:
        for r in other:
            self.insert(r, required_square_error)
