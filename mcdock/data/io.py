"""I/O helpers for mcdock."""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np
import yaml

from mcdock.core.receptor import Receptor
from mcdock.data.atom import AD_TYPE_H, Atom, classify_bonded, parse_ad_type
from mcdock.data.box import Box
from mcdock.data.structs import Result
from mcdock.scoring.ligand import RigidLigand


def load_config(path: str) -> Dict[str, Any]:
    """Load a YAML configuration file."""

    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _parse_atom_line(line: str, line_no: int, path: str) -> Optional[Atom]:
    """Parse an ATOM/HETATM record; None for unknown types and non-polar hydrogens."""

    ad = parse_ad_type(line[77:79])
    if ad is None or ad == AD_TYPE_H:
        return None
    try:
        serial = int(line[6:11])
        coordinate = np.array(
            [float(line[30:38]), float(line[38:46]), float(line[46:54])], dtype=float
        )
    except ValueError as exc:
        raise ValueError(f"{path}:{line_no}: malformed atom record: {line.rstrip()!r}") from exc
    return Atom(serial=serial, name=line[12:16].strip(), coordinate=coordinate, ad=ad)


def _iter_records(path: str) -> Iterator[Tuple[int, str]]:
    with open(path, "r", encoding="utf-8") as handle:
        for line_no, line in enumerate(handle, start=1):
            yield line_no, line.rstrip("\r\n")


def parse_receptor_atoms(path: str) -> List[Atom]:
    """Read typed receptor atoms from a PDBQT file.

    Bond-based reclassification only looks back within the current residue
    (columns 23-26); a TER record closes the residue.
    """

    atoms: List[Atom] = []
    residue: Optional[str] = None
    residue_start = 0
    for line_no, line in _iter_records(path):
        record = line[:6]
        if record in ("ATOM  ", "HETATM"):
            if line[22:26] != residue:
                residue = line[22:26]
                residue_start = len(atoms)
            atom = _parse_atom_line(line, line_no, path)
            if atom is None:
                continue
            classify_bonded(atoms, atom, residue_start)
            atoms.append(atom)
        elif record.startswith("TER"):
            residue = None
    return atoms


def load_receptor(path: str, box: Box) -> Receptor:
    """Load a receptor and partition it over ``box``."""

    return Receptor(atoms=parse_receptor_atoms(path), box=box)


def parse_ligand_atoms(path: str) -> List[Atom]:
    """Read typed ligand atoms; every atom may bond to any earlier one."""

    atoms: List[Atom] = []
    for line_no, line in _iter_records(path):
        if line[:6] not in ("ATOM  ", "HETATM"):
            continue
        atom = _parse_atom_line(line, line_no, path)
        if atom is None:
            continue
        classify_bonded(atoms, atom, 0)
        atoms.append(atom)
    return atoms


def load_ligand(path: str) -> RigidLigand:
    """Load a ligand PDBQT as a rigid body evaluator."""

    return RigidLigand(parse_ligand_atoms(path))


def write_results(path: str, results: List[Result], extra: Optional[Dict[str, Any]] = None) -> None:
    """Write ranked results as JSON."""

    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    payload: Dict[str, Any] = dict(extra or {})
    payload["results"] = [
        {"rank": rank + 1, **result.to_dict()} for rank, result in enumerate(results)
    ]
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(json.dumps(payload, indent=2))
