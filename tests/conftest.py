"""Shared fixtures: synthetic evaluators and PDBQT writers."""

from __future__ import annotations

from typing import List

import numpy as np
import pytest

from mcdock.data.structs import Conformation, Evaluation, Result


def pdbqt_line(
    serial: int,
    name: str,
    x: float,
    y: float,
    z: float,
    ad: str,
    resseq: int = 1,
    resname: str = "ALA",
    record: str = "ATOM",
) -> str:
    """Format a fixed-column PDBQT atom record."""

    return (
        f"{record:<6}{serial:>5} {name:<4} {resname:>3} A{resseq:>4}    "
        f"{x:>8.3f}{y:>8.3f}{z:>8.3f}{1.0:>6.2f}{0.0:>6.2f}    {0.0:>6.3f} {ad:<2}"
    )


class BowlLigand:
    """Quadratic bowl over position and torsions; orientation has no effect."""

    num_active_torsions = 1
    num_heavy_atoms = 2

    def __init__(self, minimum: np.ndarray, torsion: float, e_min: float) -> None:
        self.minimum = np.asarray(minimum, dtype=float)
        self.torsion = float(torsion)
        self.e_min = float(e_min)
        self.orientation_norms: List[float] = []
        self.calls = 0

    def evaluate(self, conf: Conformation, sf, receptor, e_upper_bound: float) -> Evaluation:
        self.calls += 1
        self.orientation_norms.append(float(np.linalg.norm(conf.orientation)))
        dx = conf.position - self.minimum
        dt = conf.torsions - self.torsion
        e = float(np.dot(dx, dx) + np.dot(dt, dt)) + self.e_min
        if e >= e_upper_bound:
            return Evaluation(e=e, f=e)
        g = np.zeros(7, dtype=float)
        g[0:3] = 2.0 * dx
        g[6:] = 2.0 * dt
        return Evaluation(e=e, f=e, g=g)

    def compose_result(self, e: float, f: float, conf: Conformation) -> Result:
        tip = conf.position + np.array([np.cos(conf.torsions[0]), np.sin(conf.torsions[0]), 0.0])
        return Result(
            e=e,
            f=f,
            heavy_atoms=np.vstack([conf.position, tip]),
            hydrogens=np.zeros((0, 3), dtype=float),
        )


class InfeasibleLigand:
    """Reports every conformation as infeasible."""

    num_active_torsions = 1
    num_heavy_atoms = 2

    def __init__(self) -> None:
        self.calls = 0

    def evaluate(self, conf: Conformation, sf, receptor, e_upper_bound: float) -> Evaluation:
        self.calls += 1
        return Evaluation(e=1.0e9, f=1.0e9)

    def compose_result(self, e: float, f: float, conf: Conformation) -> Result:
        return Result(e=e, f=f, heavy_atoms=np.vstack([conf.position]), hydrogens=np.zeros((0, 3)))


@pytest.fixture
def bowl_ligand() -> BowlLigand:
    return BowlLigand(minimum=np.array([1.0, -0.5, 0.5]), torsion=0.3, e_min=-2.0)


@pytest.fixture
def infeasible_ligand() -> InfeasibleLigand:
    return InfeasibleLigand()


@pytest.fixture
def receptor_pdbqt(tmp_path):
    lines = [
        "REMARK  test receptor",
        pdbqt_line(1, "N", -3.0, 0.0, 0.0, "N", resseq=1),
        pdbqt_line(2, "CA", -3.0, 1.45, 0.0, "C", resseq=1),
        pdbqt_line(3, "H", -3.9, -0.4, 0.0, "HD", resseq=1),
        pdbqt_line(4, "CB", 3.5, 0.0, 0.0, "C", resseq=2),
        pdbqt_line(5, "CG", 3.5, 1.5, 0.2, "C", resseq=2),
        pdbqt_line(6, "OD1", 0.0, 3.5, 0.0, "OA", resseq=3),
        pdbqt_line(7, "CZ", 0.0, -3.5, 1.0, "A", resseq=4),
        "TER",
    ]
    path = tmp_path / "receptor.pdbqt"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def ligand_pdbqt(tmp_path):
    lines = [
        "ROOT",
        pdbqt_line(1, "C1", 0.0, 0.0, 0.0, "C", resname="LIG", record="HETATM"),
        pdbqt_line(2, "C2", 1.5, 0.0, 0.0, "C", resname="LIG", record="HETATM"),
        pdbqt_line(3, "O3", 2.2, 1.2, 0.0, "OA", resname="LIG", record="HETATM"),
        pdbqt_line(4, "H3", 3.1, 1.2, 0.0, "HD", resname="LIG", record="HETATM"),
        "ENDROOT",
        "TORSDOF 0",
    ]
    path = tmp_path / "ligand.pdbqt"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
