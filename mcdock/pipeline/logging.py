"""Metric logging utilities for mcdock."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class RunLogger:
    """In-memory metric logger with optional incremental JSONL writes.

    PT-BR: com live_write=True cada métrica é anexada ao metrics.jsonl no
    momento em que é registrada, para acompanhar tarefas longas em tempo real.
    """

    records: List[Dict[str, Any]] = field(default_factory=list)
    out_dir: str | None = None
    live_write: bool = False

    def log_metric(self, name: str, value: float, step: int, extra: Optional[Dict[str, Any]] = None) -> None:
        """Record a metric and, when enabled, append it to ``metrics.jsonl``.

        ``step`` is the global index (task * iterations + iteration) used for
        time series; per-task progress goes in ``extra["iteration"]``.
        """

        payload = {"name": name, "value": value, "step": step}
        if extra:
            payload.update(extra)
        self.records.append(payload)
        self._append_record(payload)

    def _append_record(self, payload: Dict[str, Any]) -> None:
        if not self.live_write or not self.out_dir:
            return
        path = os.path.join(self.out_dir, "metrics.jsonl")
        with open(path, "a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload) + "\n")

    def log_run_summary(self, num_tasks: int, num_results: int, best_e: float | None) -> None:
        """Store run-level metrics after all tasks are merged."""

        self.log_metric("n_tasks", float(num_tasks), step=0)
        self.log_metric("n_results", float(num_results), step=0)
        if best_e is not None:
            self.log_metric("best_energy", float(best_e), step=0)

    def values(self, name: str) -> List[float]:
        return [record["value"] for record in self.records if record.get("name") == name]

    def flush(self, out_dir: str) -> None:
        """Write metrics to disk."""

        path = os.path.join(out_dir, "metrics.jsonl")
        with open(path, "w", encoding="utf-8") as handle:
            for record in self.records:
                handle.write(json.dumps(record) + "\n")

    def flush_timeseries(self, out_dir: str) -> None:
        """Write per-step metrics to disk, one JSON object per step."""

        steps: Dict[int, Dict[str, Any]] = {}
        for record in self.records:
            step = record.get("step")
            name = record.get("name")
            value = record.get("value")
            if step is None or name is None:
                continue
            entry = steps.setdefault(int(step), {"step": int(step)})
            entry[name] = value
            if "task" in record:
                entry["task"] = record["task"]

        path = os.path.join(out_dir, "metrics.timeseries.jsonl")
        with open(path, "w", encoding="utf-8") as handle:
            for step in sorted(steps):
                handle.write(json.dumps(steps[step]) + "\n")
