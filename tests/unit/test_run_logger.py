"""Tests for RunLogger — verifies file creation and content structure."""

from __future__ import annotations

import json
import math
from pathlib import Path

import pytest

from scoring.runner.run_logger import RunLogger


@pytest.fixture
def run_dir(tmp_path: Path) -> Path:
    return tmp_path / "runs"


def _read_jsonl(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


class TestRunLoggerWritesFiles:
    """RunLogger creates the expected artifact files."""

    def test_creates_run_dir(self, run_dir: Path):
        logger = RunLogger(run_dir, "run_000")
        assert logger.run_dir == run_dir / "run_000"
        assert logger.run_dir.is_dir()

    def test_write_config(self, run_dir: Path):
        logger = RunLogger(run_dir, "run_001")
        logger.write_config({"schedule": {"type": "fixed"}})

        data = json.loads((logger.run_dir / "config.json").read_text(encoding="utf-8"))
        assert "written_at" in data
        assert data["schedule"]["type"] == "fixed"

    def test_log_rewards_appends(self, run_dir: Path):
        logger = RunLogger(run_dir, "run_002")
        logger.log_rewards([
            {"step": 0, "agent_id": "a0", "reward": 0.1},
            {"step": 0, "agent_id": "a1", "reward": 0.2},
        ])
        logger.log_rewards([{"step": 1, "agent_id": "a0", "reward": 0.15}])

        lines = _read_jsonl(logger.run_dir / "rewards.jsonl")
        assert len(lines) == 3
        assert lines[2]["step"] == 1

    def test_log_events_appends(self, run_dir: Path):
        logger = RunLogger(run_dir, "run_003")
        logger.log_events([{"event": "reward_switched", "step": 10}])
        logger.log_events([{"event": "non_finite_reward", "step": 11}])

        lines = _read_jsonl(logger.run_dir / "events.jsonl")
        assert [e["event"] for e in lines] == ["reward_switched", "non_finite_reward"]

    def test_write_summary(self, run_dir: Path):
        logger = RunLogger(run_dir, "run_004")
        logger.write_summary({"num_steps": 10, "total_reward_per_agent": {"a0": 2.0}})

        data = json.loads((logger.run_dir / "summary.json").read_text(encoding="utf-8"))
        assert data["num_steps"] == 10
        assert "written_at" in data


class TestRunLoggerSkipsEmpty:
    def test_empty_records_create_no_file(self, run_dir: Path):
        logger = RunLogger(run_dir, "run_005")
        logger.log_rewards([])
        logger.log_events([])
        logger.write_summary({})
        assert not (logger.run_dir / "rewards.jsonl").exists()
        assert not (logger.run_dir / "events.jsonl").exists()
        assert not (logger.run_dir / "summary.json").exists()


class TestRunLoggerNonFinite:
    def test_nan_reward_round_trips(self, run_dir: Path):
        logger = RunLogger(run_dir, "run_006")
        logger.log_rewards([{"step": 0, "reward": math.nan}, {"step": 1, "reward": -math.inf}])

        lines = _read_jsonl(logger.run_dir / "rewards.jsonl")
        assert math.isnan(lines[0]["reward"])
        assert lines[1]["reward"] == -math.inf
