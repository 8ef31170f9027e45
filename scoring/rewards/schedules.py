"""Reward schedules — which reward expression is active at each step.

A schedule is a pure function of the step index.  Non-stationary
("never-ending") settings swap, rotate, blend or randomise the reward
over time; the fixed schedule is the stationary default.

All randomness flows through generators seeded from (seed, block index),
so the same schedule answers the same step identically regardless of
call order or thread.
"""

from __future__ import annotations

import bisect
import operator
from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from scoring.core.seeding import derive_seed, make_rng
from scoring.core.types import validate_step
from scoring.rewards.expressions import Reward, combine


class RewardSchedule(ABC):
    """Step-indexed selector of the active reward."""

    @abstractmethod
    def reward_for_step(self, step: int) -> Reward:
        """Return the reward to use at *step* (any unsigned 64-bit index)."""


def _require_rewards(rewards: Sequence[Reward]) -> tuple[Reward, ...]:
    rewards = tuple(rewards)
    if not rewards:
        raise ValueError("schedule needs at least one reward")
    for reward in rewards:
        if not isinstance(reward, Reward):
            raise TypeError(f"expected Reward, got {type(reward).__name__}")
    return rewards


def _require_period(period: int) -> int:
    if isinstance(period, bool):
        raise TypeError("period must be an integer, got bool")
    try:
        period = operator.index(period)
    except TypeError:
        raise TypeError(
            f"period must be an integer, got {type(period).__name__}"
        ) from None
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")
    return period


class FixedSchedule(RewardSchedule):
    """Uses the same reward for every step."""

    def __init__(self, reward: Reward) -> None:
        if not isinstance(reward, Reward):
            raise TypeError(f"expected Reward, got {type(reward).__name__}")
        self._reward = reward

    @property
    def reward(self) -> Reward:
        return self._reward

    def reward_for_step(self, step: int) -> Reward:
        validate_step(step)
        return self._reward

    def __repr__(self) -> str:
        return f"FixedSchedule({self._reward!r})"


class PiecewiseSchedule(RewardSchedule):
    """Switches reward at fixed step boundaries.

    Parameters
    ----------
    segments : sequence of (start_step, reward)
        The first segment must start at step 0 and starts must be
        strictly increasing.  Each reward stays active until the next
        segment's start.
    """

    def __init__(self, segments: Sequence[tuple[int, Reward]]) -> None:
        segments = list(segments)
        if not segments:
            raise ValueError("schedule needs at least one segment")
        starts = [validate_step(start) for start, _ in segments]
        if starts[0] != 0:
            raise ValueError(f"first segment must start at step 0, got {starts[0]}")
        for prev, cur in zip(starts, starts[1:]):
            if cur <= prev:
                raise ValueError(
                    f"segment starts must be strictly increasing ({prev} >= {cur})"
                )
        self._starts = starts
        self._rewards = _require_rewards([reward for _, reward in segments])

    @property
    def segments(self) -> list[tuple[int, Reward]]:
        return list(zip(self._starts, self._rewards))

    def reward_for_step(self, step: int) -> Reward:
        step = validate_step(step)
        index = bisect.bisect_right(self._starts, step) - 1
        return self._rewards[index]


class CyclicSchedule(RewardSchedule):
    """Rotates through rewards, each active for *period* consecutive steps."""

    def __init__(self, rewards: Sequence[Reward], period: int = 1) -> None:
        self._rewards = _require_rewards(rewards)
        self._period = _require_period(period)

    def reward_for_step(self, step: int) -> Reward:
        step = validate_step(step)
        return self._rewards[(step // self._period) % len(self._rewards)]


class InterpolatedSchedule(RewardSchedule):
    """Linearly blends from *start* to *end* between two steps.

    Before ``start_step`` the start reward is used as-is and from
    ``end_step`` on the end reward.  In between, the active reward is
    ``start * (1 - t) + end * t`` built with ``combine`` and ``scaled``.
    """

    def __init__(
        self,
        start: Reward,
        end: Reward,
        start_step: int,
        end_step: int,
    ) -> None:
        self._start, self._end = _require_rewards([start, end])
        self._start_step = validate_step(start_step)
        self._end_step = validate_step(end_step)
        if self._end_step <= self._start_step:
            raise ValueError(
                f"end_step must be greater than start_step "
                f"({self._end_step} <= {self._start_step})"
            )

    def progress(self, step: int) -> float:
        """Blend weight of the end reward at *step*, in [0, 1]."""
        step = validate_step(step)
        if step <= self._start_step:
            return 0.0
        if step >= self._end_step:
            return 1.0
        return (step - self._start_step) / (self._end_step - self._start_step)

    def reward_for_step(self, step: int) -> Reward:
        t = self.progress(step)
        if t == 0.0:
            return self._start
        if t == 1.0:
            return self._end
        return combine(self._start.scaled(1.0 - t), self._end.scaled(t))


class RandomSwitchSchedule(RewardSchedule):
    """Draws a reward at random for each block of *period* steps.

    The draw for a block depends only on ``seed`` and ``step // period``.
    """

    def __init__(
        self,
        rewards: Sequence[Reward],
        period: int,
        seed: int,
        weights: Sequence[float] | None = None,
    ) -> None:
        self._rewards = _require_rewards(rewards)
        self._period = _require_period(period)
        if seed < 0:
            raise ValueError(f"seed must be >= 0, got {seed}")
        self._seed = int(seed)
        self._probs: np.ndarray | None = None
        if weights is not None:
            w = np.asarray(weights, dtype=float)
            if w.shape != (len(self._rewards),):
                raise ValueError(
                    f"expected {len(self._rewards)} weights, got {len(w)}"
                )
            if not np.all(np.isfinite(w)) or not np.isfinite(w.sum()):
                raise ValueError("weights must be finite")
            if np.any(w < 0) or w.sum() <= 0:
                raise ValueError("weights must be >= 0 with a positive sum")
            self._probs = w / w.sum()

    def block_index(self, step: int) -> int:
        return validate_step(step) // self._period

    def reward_for_step(self, step: int) -> Reward:
        rng = make_rng(derive_seed(self._seed, self.block_index(step)))
        index = int(rng.choice(len(self._rewards), p=self._probs))
        return self._rewards[index]
