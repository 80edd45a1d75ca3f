"""Evaluator interface consumed by the search."""

from __future__ import annotations

from typing import Any, Protocol

from mcdock.data.structs import Conformation, Evaluation, Result


class Ligand(Protocol):
    """Protocol for the ligand model the search optimizes.

    ``evaluate`` must be deterministic. It reports infeasibility by returning
    an :class:`Evaluation` without gradient when the energy is not below
    ``e_upper_bound``.
    """

    num_active_torsions: int
    num_heavy_atoms: int

    def evaluate(
        self, conf: Conformation, sf: Any, receptor: Any, e_upper_bound: float
    ) -> Evaluation:
        """Score ``conf`` and, when feasible, return its gradient."""

        ...

    def compose_result(self, e: float, f: float, conf: Conformation) -> Result:
        """Expand ``conf`` to absolute heavy atom and hydrogen coordinates."""

        ...
