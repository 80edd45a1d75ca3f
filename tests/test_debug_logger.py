"""Tests for the JSONL debug logger."""

from __future__ import annotations

import json

from mcdock.utils.debug_logger import DebugLogger


def test_debug_logger_write(tmp_path):
    path = tmp_path / "debug.jsonl"
    logger = DebugLogger(enabled=True, path=str(path))
    logger.log({"type": "event_a"})
    logger.log({"type": "event_b", "run_id": "run-123"})
    logger.log({"type": "event_c"}, level="DEBUG")
    logger.close()

    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    payloads = [json.loads(line) for line in lines]
    assert payloads[0]["type"] == "event_a"
    assert payloads[1]["run_id"] == "run-123"
    assert "ts_utc" in payloads[0]
    assert "pid" in payloads[0]
    assert "thread" in payloads[0]


def test_debug_logger_noop(tmp_path):
    path = tmp_path / "debug.jsonl"
    logger = DebugLogger(enabled=False, path=str(path))
    logger.log({"type": "noop"})
    logger.close()
    assert not path.exists()
