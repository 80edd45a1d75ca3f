"""Core data structures for mcdock."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from mcdock.utils.geometry import IDENTITY_QUATERNION, check_normalized, rotate_by_vector


@dataclass
class Conformation:
    """Ligand pose: origin position, orientation quaternion (w, x, y, z) and torsions."""

    position: np.ndarray
    orientation: np.ndarray
    torsions: np.ndarray

    @classmethod
    def initial(cls, num_active_torsions: int) -> "Conformation":
        return cls(
            position=np.zeros(3, dtype=float),
            orientation=IDENTITY_QUATERNION.copy(),
            torsions=np.zeros(num_active_torsions, dtype=float),
        )

    def copy(self) -> "Conformation":
        return Conformation(
            position=np.array(self.position, dtype=float),
            orientation=np.array(self.orientation, dtype=float),
            torsions=np.array(self.torsions, dtype=float),
        )

    def apply(self, change: np.ndarray, alpha: float) -> "Conformation":
        """Return the conformation reached by stepping ``alpha * change``.

        Translation and torsions add directly; the rotational part is mapped
        to a quaternion and left-multiplied onto the current orientation.
        """

        check_normalized(self.orientation)
        step = alpha * np.asarray(change, dtype=float)
        return Conformation(
            position=self.position + step[0:3],
            orientation=rotate_by_vector(self.orientation, step[3:6]),
            torsions=self.torsions + step[6:],
        )


def zero_change(num_active_torsions: int) -> np.ndarray:
    """Zero vector over the 6 + torsions degrees of freedom."""

    return np.zeros(6 + num_active_torsions, dtype=float)


@dataclass
class Evaluation:
    """Outcome of scoring a conformation.

    ``g`` is None when the energy was not below the caller's bound; the
    gradient is then never computed.
    """

    e: float
    f: float
    g: Optional[np.ndarray] = None

    @property
    def feasible(self) -> bool:
        return self.g is not None


@dataclass
class Result:
    """A scored pose expanded to absolute coordinates."""

    e: float
    f: float
    heavy_atoms: np.ndarray
    hydrogens: np.ndarray
    e_nd: Optional[float] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "e": float(self.e),
            "f": float(self.f),
            "e_nd": None if self.e_nd is None else float(self.e_nd),
            "heavy_atoms": np.asarray(self.heavy_atoms, dtype=float).tolist(),
            "hydrogens": np.asarray(self.hydrogens, dtype=float).tolist(),
            **self.meta,
        }


@dataclass
class RunResult:
    """Outcome of a docking run."""

    results: List[Result]
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def best(self) -> Optional[Result]:
        return self.results[0] if self.results else None
