"""Reward scorer — the engine-facing entry point of the reward core.

Each simulation step the engine hands over the step index and the
agent's transition; the scorer asks the schedule for the active reward,
evaluates it and returns the scalar.  Telemetry goes to a
RewardMetricsCollector and, when given, a RunLogger.

Evaluation itself is pure.  The scorer's telemetry is per-run state and
is not shared between threads; use one scorer per evaluation context.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from scoring.config.builder import build_schedule
from scoring.config.schema import InstrumentationConfig, ScoringConfig
from scoring.core.types import AgentTransition, validate_step
from scoring.metrics.collector import RewardMetricsCollector
from scoring.rewards.expressions import Reward
from scoring.rewards.schedules import RewardSchedule
from scoring.runner.run_logger import RunLogger

DEFAULT_AGENT_ID = "agent_0"


class RewardScorer:
    """Scores agent transitions under a reward schedule."""

    def __init__(
        self,
        schedule: RewardSchedule,
        instrumentation: InstrumentationConfig | None = None,
        logger: RunLogger | None = None,
    ) -> None:
        self._schedule = schedule
        self._collector = RewardMetricsCollector(
            instrumentation or InstrumentationConfig()
        )
        self._logger = logger
        self._events_logged = 0
        self._num_steps = 0
        self._last_step: int | None = None

    @classmethod
    def from_config(
        cls,
        config: ScoringConfig,
        storage_base: str | Path | None = None,
        run_id: str | None = None,
    ) -> RewardScorer:
        """Build a scorer from config, logging to storage_base/run_id if given.

        The config snapshot is written immediately.
        """
        logger = None
        if storage_base is not None:
            if run_id is None:
                raise ValueError("run_id is required when storage_base is given")
            logger = RunLogger(storage_base, run_id)
            logger.write_config(config.model_dump())
        return cls(
            build_schedule(config.schedule),
            instrumentation=config.instrumentation,
            logger=logger,
        )

    @property
    def schedule(self) -> RewardSchedule:
        return self._schedule

    @property
    def collector(self) -> RewardMetricsCollector:
        return self._collector

    def active_reward(self, step: int) -> Reward:
        return self._schedule.reward_for_step(step)

    def describe_step(self, step: int) -> str:
        """Description of the reward active at *step*, for logging."""
        return self.active_reward(step).describe()

    def score(
        self,
        step: int,
        transition: AgentTransition,
        agent_id: str = DEFAULT_AGENT_ID,
    ) -> float:
        """Return the reward for *transition*, produced by the step *step*."""
        step = validate_step(step)
        reward = self._schedule.reward_for_step(step)
        value = reward.evaluate(transition)

        if step != self._last_step:
            self._num_steps += 1
            self._last_step = step

        records = self._collector.collect_step(
            step=step,
            agent_id=agent_id,
            reward=reward,
            value=value,
            transition=transition,
        )

        # Collect new events since last call
        all_events = self._collector.events
        new_events = all_events[self._events_logged:]
        self._events_logged = len(all_events)

        if self._logger is not None:
            self._logger.log_rewards(records)
            self._logger.log_events(new_events)
        return value

    def summary(self) -> dict[str, Any]:
        return self._collector.episode_summary(num_steps=self._num_steps)

    def close(self) -> dict[str, Any]:
        """Build the run summary and persist it if logging is enabled."""
        summary = self.summary()
        if self._logger is not None:
            self._logger.write_summary(summary)
        return summary
