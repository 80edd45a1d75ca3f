"""BFGS quasi-Newton local optimization with a Wolfe line search.

The optimizer keeps an inverse Hessian approximation in packed symmetric
storage, reset to identity at every call. Each iteration steps along
``p = -H g``; the line search tries ``alpha = 1, 0.1, ..., 1e-4`` and accepts
the first candidate that satisfies both Wolfe conditions. Sufficient
decrease is delegated to the evaluator through its energy bound, so an
infeasible evaluation is simply a rejected trial. The run ends when no
trial is accepted, returning the last accepted point.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from mcdock.data.structs import Conformation, Evaluation
from mcdock.search.engine import Ligand
from mcdock.utils.triangular import TriangularMatrix

NUM_ALPHAS = 5
ALPHA_SHRINK = 0.1
ARMIJO_C1 = 0.0001
CURVATURE_C2 = 0.9


@dataclass
class LocalMinimum:
    """Last accepted point of a BFGS run."""

    conf: Conformation
    e: float
    f: float
    g: np.ndarray
    num_iterations: int
    num_trials: int
    num_skipped_updates: int = 0


class BFGSOptimizer:
    """Local optimizer bound to one ligand, scoring function and receptor.

    Instances hold scratch state and must not be shared between tasks.
    """

    def __init__(
        self,
        ligand: Ligand,
        sf: Any,
        receptor: Any,
        max_iterations: Optional[int] = None,
        debug_logger: Any = None,
    ) -> None:
        self.ligand = ligand
        self.sf = sf
        self.receptor = receptor
        self.max_iterations = max_iterations
        self.debug_logger = debug_logger
        self.num_variables = 6 + ligand.num_active_torsions
        self.hessian = TriangularMatrix.identity(self.num_variables)

    def line_search(
        self, c1: Conformation, e1: float, p: np.ndarray, pg1: float
    ) -> tuple[Optional[tuple[float, Conformation, Evaluation]], int]:
        """Return ``((alpha, c2, evaluation), trials)``; the first item is None on failure."""

        alpha = 1.0
        for trial in range(NUM_ALPHAS):
            c2 = c1.apply(p, alpha)
            evaluation = self.ligand.evaluate(
                c2, self.sf, self.receptor, e1 + ARMIJO_C1 * alpha * pg1
            )
            if evaluation.feasible:
                pg2 = float(np.dot(p, evaluation.g))
                if pg2 >= CURVATURE_C2 * pg1:
                    return (alpha, c2, evaluation), trial + 1
            alpha *= ALPHA_SHRINK
        return None, NUM_ALPHAS

    def update_hessian(self, p: np.ndarray, y: np.ndarray, alpha: float) -> bool:
        """Apply the BFGS rank-2 update; False when skipped for ``y.p <= 0``."""

        yp = float(np.dot(y, p))
        if not yp > 0.0:
            return False
        mhy = -self.hessian.dot(y)
        yhy = -float(np.dot(y, mhy))
        ryp = 1.0 / yp
        pco = ryp * (ryp * yhy + alpha)
        update = ryp * (np.outer(mhy, p) + np.outer(p, mhy)) + pco * np.outer(p, p)
        self.hessian.add_upper(update)
        return True

    def minimize(self, c1: Conformation, e1: float, f1: float, g1: np.ndarray) -> LocalMinimum:
        """Descend from ``c1`` (with energy ``e1`` and gradient ``g1``)."""

        self.hessian.set_identity()
        g1 = np.asarray(g1, dtype=float)
        iterations = 0
        trials = 0
        skipped = 0
        while self.max_iterations is None or iterations < self.max_iterations:
            p = -self.hessian.dot(g1)
            pg1 = float(np.dot(p, g1))
            accepted, used = self.line_search(c1, e1, p, pg1)
            trials += used
            if accepted is None:
                break
            alpha, c2, evaluation = accepted
            if not self.update_hessian(p, evaluation.g - g1, alpha):
                skipped += 1
            c1, e1, f1, g1 = c2, evaluation.e, evaluation.f, evaluation.g
            iterations += 1

        if self.debug_logger is not None:
            self.debug_logger.log(
                {
                    "type": "bfgs_end",
                    "iterations": int(iterations),
                    "trials": int(trials),
                    "skipped_updates": int(skipped),
                    "e": float(e1),
                },
                level="DEBUG",
            )
        return LocalMinimum(
            conf=c1,
            e=float(e1),
            f=float(f1),
            g=g1,
            num_iterations=iterations,
            num_trials=trials,
            num_skipped_updates=skipped,
        )
