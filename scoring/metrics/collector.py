"""Metrics collector for reward scoring.

Ingests each scored transition to produce:
  - structured step metric dicts
  - accumulated per-agent totals
  - semantic event records

Respects InstrumentationConfig flags and step_log_frequency.  Numeric
anomalies are recorded as events, never raised.
"""

from __future__ import annotations

import math
from typing import Any

from scoring.config.schema import InstrumentationConfig
from scoring.core.types import AgentTransition
from scoring.metrics.definitions import EventType
from scoring.rewards.expressions import Reward, breakdown


class RewardMetricsCollector:
    """Collects and structures reward metrics for a single run."""

    def __init__(self, config: InstrumentationConfig) -> None:
        self._config = config
        self._total_rewards: dict[str, float] = {}
        self._step_counts: dict[str, int] = {}
        self._last_reward: dict[str, Reward] = {}
        self._num_switches = 0
        self._events: list[dict[str, Any]] = []

    # ------------------------------------------------------------------
    # Step metrics
    # ------------------------------------------------------------------

    def collect_step(
        self,
        step: int,
        agent_id: str,
        reward: Reward,
        value: float,
        transition: AgentTransition,
    ) -> list[dict[str, Any]]:
        """Record one scored transition.

        Returns a list holding the step record, or an empty list if step
        metrics are disabled or this step is skipped by step_log_frequency.
        """
        # Accumulate totals regardless of logging flags
        self._total_rewards[agent_id] = self._total_rewards.get(agent_id, 0.0) + value
        self._step_counts[agent_id] = self._step_counts.get(agent_id, 0) + 1

        previous = self._last_reward.get(agent_id)
        if previous is not None and previous is not reward and previous != reward:
            self._num_switches += 1
            self._log_event(
                EventType.REWARD_SWITCHED,
                step=step,
                agent_id=agent_id,
                previous_reward=previous.describe(),
                active_reward=reward.describe(),
            )
        self._last_reward[agent_id] = reward

        if not math.isfinite(value):
            self._log_event(
                EventType.NON_FINITE_REWARD,
                step=step,
                agent_id=agent_id,
                reward=value,
            )

        if not self._config.enable_step_metrics:
            return []
        if step % self._config.step_log_frequency != 0:
            return []

        record: dict[str, Any] = {
            "step": step,
            "agent_id": agent_id,
            "reward": value,
            "active_reward": reward.describe(),
            "item_deltas": {
                str(item): delta for item, delta in transition.changed_items().items()
            },
        }
        if self._config.enable_breakdown:
            record["breakdown"] = breakdown(reward, transition)
        return [record]

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _log_event(self, event: EventType, **fields: Any) -> None:
        if not self._config.enable_event_log:
            return
        self._events.append({"event": event.value, **fields})

    @property
    def events(self) -> list[dict[str, Any]]:
        """All semantic events collected so far."""
        return list(self._events)

    @property
    def total_rewards(self) -> dict[str, float]:
        return dict(self._total_rewards)

    # ------------------------------------------------------------------
    # Episode summary
    # ------------------------------------------------------------------

    def episode_summary(self, num_steps: int) -> dict[str, Any]:
        """Build run-level summary metrics.

        Returns an empty dict if episode metrics are disabled.
        """
        if not self._config.enable_episode_metrics:
            return {}
        return {
            "num_steps": num_steps,
            "steps_per_agent": dict(self._step_counts),
            "total_reward_per_agent": dict(self._total_rewards),
            "mean_reward_per_agent": {
                aid: self._total_rewards[aid] / n
                for aid, n in self._step_counts.items()
            },
            "num_reward_switches": self._num_switches,
        }
