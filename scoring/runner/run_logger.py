"""Run artifact logger — writes reward telemetry into {base_dir}/{run_id}/.

Produces:
  - config.json    Scoring config snapshot
  - rewards.jsonl  Per-step reward records (append)
  - events.jsonl   Semantic event records (append)
  - summary.json   Run-level summary (written once at end)

Uses only stdlib (json, pathlib, datetime).  Non-finite rewards are
written as the JSON tokens NaN / Infinity, which json.loads reads back.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable


def _timestamped(payload: dict[str, Any]) -> dict[str, Any]:
    return {"written_at": datetime.now(timezone.utc).isoformat(), **payload}


class RunLogger:
    """Writes reward scoring artifacts to a run directory."""

    CONFIG_FILE = "config.json"
    REWARDS_FILE = "rewards.jsonl"
    EVENTS_FILE = "events.jsonl"
    SUMMARY_FILE = "summary.json"

    def __init__(self, base_dir: str | Path, run_id: str) -> None:
        self._run_dir = Path(base_dir) / run_id
        self._run_dir.mkdir(parents=True, exist_ok=True)

    @property
    def run_dir(self) -> Path:
        return self._run_dir

    def _write_json(self, name: str, payload: dict[str, Any]) -> None:
        (self._run_dir / name).write_text(
            json.dumps(_timestamped(payload), indent=2, default=str),
            encoding="utf-8",
        )

    def _append_lines(self, name: str, records: Iterable[dict[str, Any]]) -> None:
        records = list(records)
        if not records:
            return
        with (self._run_dir / name).open("a", encoding="utf-8") as f:
            for rec in records:
                f.write(json.dumps(rec, default=str) + "\n")

    # ------------------------------------------------------------------
    # Config snapshot
    # ------------------------------------------------------------------

    def write_config(self, config_dict: dict[str, Any]) -> None:
        """Write the scoring config as config.json."""
        self._write_json(self.CONFIG_FILE, config_dict)

    # ------------------------------------------------------------------
    # Reward records and events (append)
    # ------------------------------------------------------------------

    def log_rewards(self, records: list[dict[str, Any]]) -> None:
        """Append step reward records to rewards.jsonl."""
        self._append_lines(self.REWARDS_FILE, records)

    def log_events(self, events: list[dict[str, Any]]) -> None:
        """Append semantic events to events.jsonl."""
        self._append_lines(self.EVENTS_FILE, events)

    # ------------------------------------------------------------------
    # Summary (write once)
    # ------------------------------------------------------------------

    def write_summary(self, summary: dict[str, Any]) -> None:
        """Write the run summary as summary.json.  Empty summaries are skipped."""
        if not summary:
            return
        self._write_json(self.SUMMARY_FILE, summary)
