"""Monte Carlo search refined by BFGS local optimization.

Each task starts from a random conformation inside the box, then for a
fixed number of steps perturbs the incumbent's position, descends with
BFGS and keeps the refined pose only if its energy is strictly lower.
Every accepted pose is clustered into the task's result set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

import numpy as np

from mcdock.data.structs import Conformation
from mcdock.search.bfgs import BFGSOptimizer
from mcdock.search.engine import Ligand
from mcdock.search.results import ResultSet
from mcdock.utils.geometry import random_quaternion

NUM_MC_ITERATIONS = 50
ENERGY_BOUND_PER_HEAVY_ATOM = 40.0


@dataclass
class MonteCarloRun:
    """Outcome of one Monte Carlo task."""

    results: ResultSet
    best_conf: Conformation
    best_e: float
    best_f: float
    energy_trace: List[float] = field(default_factory=list)
    accepted_steps: List[int] = field(default_factory=list)


class MonteCarloSearch:
    """Greedy Monte Carlo driver with reproducible stochastic sampling."""

    def __init__(self, cfg: Any) -> None:
        self.cfg = cfg

    def _random_conformation(
        self, rng: np.random.Generator, receptor: Any, num_active_torsions: int
    ) -> Conformation:
        position = receptor.center + rng.uniform(-0.5, 0.5, size=3) * receptor.span
        orientation = random_quaternion(rng)
        torsions = rng.uniform(-1.0, 1.0, size=num_active_torsions)
        return Conformation(position=position, orientation=orientation, torsions=torsions)

    def run(
        self,
        ligand: Ligand,
        sf: Any,
        receptor: Any,
        seed: Any,
        logger: Any = None,
        task: int = 0,
    ) -> MonteCarloRun:
        """Run one task; ``seed`` is anything ``numpy.random.default_rng`` accepts."""

        cfg = self.cfg
        num_iterations = int(getattr(cfg, "num_mc_iterations", NUM_MC_ITERATIONS) or NUM_MC_ITERATIONS)
        capacity = int(getattr(cfg, "capacity", 9) or 9)
        required_square_error = float(getattr(cfg, "required_square_error", 4.0))
        debug_logger = getattr(cfg, "debug_logger", None)
        e_upper_bound = ENERGY_BOUND_PER_HEAVY_ATOM * ligand.num_heavy_atoms

        rng = np.random.default_rng(seed)
        optimizer = BFGSOptimizer(
            ligand,
            sf,
            receptor,
            max_iterations=getattr(cfg, "max_bfgs_iterations", None),
            debug_logger=debug_logger,
        )
        results = ResultSet(capacity)

        c0 = self._random_conformation(rng, receptor, ligand.num_active_torsions)
        start = ligand.evaluate(c0, sf, receptor, e_upper_bound)
        e0, f0 = start.e, start.f
        results.insert(ligand.compose_result(e0, f0, c0), required_square_error)

        if debug_logger is not None:
            debug_logger.log(
                {
                    "type": "mc_task_start",
                    "task": int(task),
                    "num_iterations": int(num_iterations),
                    "e_upper_bound": float(e_upper_bound),
                    "e0": float(e0),
                }
            )

        run = MonteCarloRun(results=results, best_conf=c0, best_e=e0, best_f=f0)
        for step in range(num_iterations):
            c1 = c0.copy()
            c1.position = c1.position + rng.uniform(-1.0, 1.0, size=3)
            evaluation = ligand.evaluate(c1, sf, receptor, e_upper_bound)
            candidate_e = float(evaluation.e)
            bfgs_iterations = 0
            # An infeasible start has no gradient to descend along.
            if evaluation.feasible:
                minimum = optimizer.minimize(c1, evaluation.e, evaluation.f, evaluation.g)
                candidate_e = minimum.e
                bfgs_iterations = minimum.num_iterations
                if minimum.e < e0:
                    c0, e0, f0 = minimum.conf, minimum.e, minimum.f
                    results.insert(ligand.compose_result(e0, f0, c0), required_square_error)
                    run.accepted_steps.append(step)

            run.energy_trace.append(float(e0))
            if logger is not None:
                # "step" is global across tasks; "iteration" is local to this task.
                global_step = task * num_iterations + step
                extra = {"task": task, "iteration": step, "total_iterations": num_iterations}
                logger.log_metric("incumbent_energy", float(e0), step=global_step, extra=extra)
                logger.log_metric("candidate_energy", candidate_e, step=global_step, extra=extra)
                logger.log_metric("bfgs_iterations", float(bfgs_iterations), step=global_step, extra=extra)

        run.best_conf, run.best_e, run.best_f = c0, float(e0), float(f0)
        if debug_logger is not None:
            debug_logger.log(
                {
                    "type": "mc_task_end",
                    "task": int(task),
                    "best_e": float(e0),
                    "n_accepted": int(len(run.accepted_steps)),
                    "n_results": int(len(results)),
                }
            )
        return run
