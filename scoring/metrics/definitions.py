"""Metric names and minimal schemas for reward telemetry.

Defines three categories:
  - Step metrics: per-agent, per-step reward records
  - Episode metrics: summary of a whole scoring run
  - Event types: semantic events (reward switch, non-finite reward)

All schemas are plain dicts describing expected keys and types,
used for documentation and optional runtime validation.
"""

from __future__ import annotations

from enum import Enum


# ---------------------------------------------------------------------------
# Step metric keys (one record per agent per scored step)
# ---------------------------------------------------------------------------

STEP_METRIC_KEYS: list[str] = [
    "step",
    "agent_id",
    "reward",
    "active_reward",
    "item_deltas",
]

STEP_METRIC_SCHEMA: dict[str, str] = {
    "step": "int",
    "agent_id": "str",
    "reward": "float",
    "active_reward": "str",
    "item_deltas": "dict[str, int]",
    # Only present when InstrumentationConfig.enable_breakdown is set
    "breakdown": "dict[str, float]",
}


# ---------------------------------------------------------------------------
# Episode metric keys (one record per run)
# ---------------------------------------------------------------------------

EPISODE_METRIC_KEYS: list[str] = [
    "num_steps",
    "steps_per_agent",
    "total_reward_per_agent",
    "mean_reward_per_agent",
    "num_reward_switches",
]

EPISODE_METRIC_SCHEMA: dict[str, str] = {
    "num_steps": "int",
    "steps_per_agent": "dict[str, int]",
    "total_reward_per_agent": "dict[str, float]",
    "mean_reward_per_agent": "dict[str, float]",
    "num_reward_switches": "int",
}


# ---------------------------------------------------------------------------
# Semantic event types
# ---------------------------------------------------------------------------

class EventType(Enum):
    """Semantic events emitted while scoring."""

    REWARD_SWITCHED = "reward_switched"
    NON_FINITE_REWARD = "non_finite_reward"


EVENT_SCHEMAS: dict[str, dict[str, str]] = {
    EventType.REWARD_SWITCHED.value: {
        "event": "str",
        "step": "int",
        "agent_id": "str",
        "previous_reward": "str",
        "active_reward": "str",
    },
    EventType.NON_FINITE_REWARD.value: {
        "event": "str",
        "step": "int",
        "agent_id": "str",
        "reward": "float",
    },
}
