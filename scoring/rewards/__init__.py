"""Reward expressions and step-indexed reward schedules."""

from __future__ import annotations

from scoring.rewards.expressions import (
    ActionReward,
    CollectReward,
    CombinedReward,
    Reward,
    action,
    breakdown,
    collect,
    combine,
    describe,
    evaluate,
    items,
    leaves,
    scaled,
)
from scoring.rewards.schedules import (
    CyclicSchedule,
    FixedSchedule,
    InterpolatedSchedule,
    PiecewiseSchedule,
    RandomSwitchSchedule,
    RewardSchedule,
)

__all__ = [
    "Reward",
    "ActionReward",
    "CollectReward",
    "CombinedReward",
    "action",
    "collect",
    "combine",
    "evaluate",
    "describe",
    "scaled",
    "leaves",
    "items",
    "breakdown",
    "RewardSchedule",
    "FixedSchedule",
    "PiecewiseSchedule",
    "CyclicSchedule",
    "InterpolatedSchedule",
    "RandomSwitchSchedule",
]
