"""Build live rewards and schedules from validated configuration."""

from __future__ import annotations

from functools import reduce
from pathlib import Path

from scoring.config.schema import (
    ActionRewardConfig,
    CollectRewardConfig,
    CombinedRewardConfig,
    CyclicScheduleConfig,
    FixedScheduleConfig,
    InterpolatedScheduleConfig,
    PiecewiseScheduleConfig,
    RandomScheduleConfig,
    RewardConfig,
    ScheduleConfig,
    ScoringConfig,
)
from scoring.core.types import Item
from scoring.rewards.expressions import Reward, action, collect, combine
from scoring.rewards.schedules import (
    CyclicSchedule,
    FixedSchedule,
    InterpolatedSchedule,
    PiecewiseSchedule,
    RandomSwitchSchedule,
    RewardSchedule,
)


def load_config(path: str | Path) -> ScoringConfig:
    """Read and validate a JSON scoring config from disk."""
    text = Path(path).read_text(encoding="utf-8")
    return ScoringConfig.model_validate_json(text)


def build_reward(config: RewardConfig) -> Reward:
    """Turn a reward config into a Reward.

    Combined terms fold from the left, matching ``combine(a, b, *more)``.

    Raises ValueError for objects that are not reward configs.
    """
    if isinstance(config, ActionRewardConfig):
        return action(config.value)
    if isinstance(config, CollectRewardConfig):
        return collect(Item(config.item), config.value)
    if isinstance(config, CombinedRewardConfig):
        return reduce(combine, (build_reward(term) for term in config.terms))
    raise ValueError(
        f"Unknown reward config: {type(config).__name__}. "
        f"Available kinds: action, collect, combined"
    )


def build_schedule(config: ScheduleConfig) -> RewardSchedule:
    """Turn a schedule config into a RewardSchedule.

    Raises ValueError for objects that are not schedule configs.
    """
    if isinstance(config, FixedScheduleConfig):
        return FixedSchedule(build_reward(config.reward))
    if isinstance(config, PiecewiseScheduleConfig):
        return PiecewiseSchedule(
            [(seg.start_step, build_reward(seg.reward)) for seg in config.segments]
        )
    if isinstance(config, CyclicScheduleConfig):
        return CyclicSchedule(
            [build_reward(r) for r in config.rewards], period=config.period
        )
    if isinstance(config, InterpolatedScheduleConfig):
        return InterpolatedSchedule(
            build_reward(config.start),
            build_reward(config.end),
            start_step=config.start_step,
            end_step=config.end_step,
        )
    if isinstance(config, RandomScheduleConfig):
        return RandomSwitchSchedule(
            [build_reward(r) for r in config.rewards],
            period=config.period,
            seed=config.seed,
            weights=config.weights,
        )
    raise ValueError(
        f"Unknown schedule config: {type(config).__name__}. "
        f"Available types: fixed, piecewise, cyclic, interpolated, random"
    )
