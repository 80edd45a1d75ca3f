"""Pipeline entrypoints."""

from __future__ import annotations

import logging
import os
from typing import Any, List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from mcdock.data.box import DEFAULT_PARTITION_GRANULARITY, Box
from mcdock.data.io import load_ligand, load_receptor, write_results
from mcdock.data.structs import RunResult
from mcdock.pipeline.logging import RunLogger
from mcdock.scoring.grid import ScoringFunction
from mcdock.search.monte_carlo import NUM_MC_ITERATIONS, MonteCarloSearch
from mcdock.search.results import ResultSet
from mcdock.utils.debug_logger import DebugLogger

log = logging.getLogger(__name__)


class Config(BaseModel):
    """Configuration model for mcdock."""

    model_config = ConfigDict(extra="allow")

    seed: int = 7
    num_tasks: int = 8
    center: List[float] = Field(default_factory=lambda: [0.0, 0.0, 0.0])
    size: List[float] = Field(default_factory=lambda: [20.0, 20.0, 20.0])
    granularity: float = DEFAULT_PARTITION_GRANULARITY
    num_mc_iterations: int = NUM_MC_ITERATIONS
    capacity: int = 9
    required_square_error: float = 4.0
    max_bfgs_iterations: Optional[int] = None
    debug: bool = False
    debug_path: Optional[str] = None
    debug_level: str = "INFO"
    debug_logger: Any = Field(default=None, exclude=True)


def dock(cfg: Config, receptor: Any, ligand: Any, sf: ScoringFunction, logger: RunLogger) -> ResultSet:
    """Run ``cfg.num_tasks`` independent Monte Carlo tasks and merge their results.

    Tasks share only the read-only receptor, ligand and scoring function;
    their result sets are merged after every task has finished.
    """

    child_seqs = np.random.SeedSequence(cfg.seed).spawn(max(1, cfg.num_tasks))
    search = MonteCarloSearch(cfg)
    runs = []
    for task, seq in enumerate(child_seqs):
        run = search.run(ligand, sf, receptor, seed=seq, logger=logger, task=task)
        log.info("Task %d finished with best energy %.4f", task, run.best_e)
        runs.append(run)

    merged = ResultSet(cfg.capacity)
    for run in runs:
        merged.merge(run.results, cfg.required_square_error)
    return merged


def run_docking(cfg: Config, receptor_path: str, ligand_path: str, out_dir: str) -> RunResult:
    """Dock a ligand into a receptor and write ``result.json`` plus metrics."""

    os.makedirs(out_dir, exist_ok=True)
    debug_logger: DebugLogger | None = None
    if cfg.debug:
        debug_path = cfg.debug_path or os.path.join(out_dir, "debug.jsonl")
        debug_logger = DebugLogger(enabled=True, path=debug_path, level=cfg.debug_level)
        cfg.debug_logger = debug_logger

    try:
        box = Box.from_config(cfg.center, cfg.size, cfg.granularity)
        receptor = load_receptor(receptor_path, box)
        ligand = load_ligand(ligand_path)
        log.info(
            "Loaded %d receptor atoms and %d ligand heavy atoms; %d partitions",
            len(receptor.atoms),
            ligand.num_heavy_atoms,
            receptor.partition.num_cells,
        )

        sf = ScoringFunction()
        sf.precalculate_for(ligand.xs_types())

        logger = RunLogger(out_dir=out_dir, live_write=True)
        merged = dock(cfg, receptor, ligand, sf, logger)
        for result in merged:
            result.e_nd = ligand.normalized_energy(result.e)

        best = merged[0].e if len(merged) else None
        logger.log_run_summary(cfg.num_tasks, len(merged), best)
        write_results(
            os.path.join(out_dir, "result.json"),
            merged.results,
            extra={
                "config": cfg.model_dump(
                    include={"seed", "num_tasks", "center", "size", "num_mc_iterations", "capacity"}
                )
            },
        )
        logger.flush(out_dir)
        logger.flush_timeseries(out_dir)
    finally:
        if debug_logger is not None:
            debug_logger.close()
            cfg.debug_logger = None

    return RunResult(
        results=merged.results,
        metrics={"n_results": len(merged), "best_energy": best},
    )
