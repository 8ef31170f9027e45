"""Configuration schema for reward setups — single source of truth.

Declarative descriptions of reward expressions and schedules as Pydantic
models.  ``scoring.config.builder`` turns a validated config into live
``Reward`` / ``RewardSchedule`` objects; nothing else parses config.

Reward configs are tagged by ``kind``, schedule configs by ``type``.
"""

from __future__ import annotations

import math
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator

from scoring.core.types import MAX_STEP

StepIndex = Annotated[int, Field(ge=0, le=MAX_STEP)]


# ---------------------------------------------------------------------------
# Section 1: Reward expressions
# ---------------------------------------------------------------------------

class ActionRewardConfig(BaseModel):
    """Fixed contribution every step.  Negative values are penalties."""

    kind: Literal["action"] = "action"
    value: float = Field(description="Reward granted every step.")


class CollectRewardConfig(BaseModel):
    """Per-unit reward for the change in held count of one item."""

    kind: Literal["collect"] = "collect"
    item: str = Field(min_length=1, description="Item name.")
    value: float = Field(description="Reward per unit gained (negated when lost).")


class CombinedRewardConfig(BaseModel):
    """Sum of two or more rewards.

    Terms are folded from the left: ``[a, b, c]`` builds
    ``combine(combine(a, b), c)``.
    """

    kind: Literal["combined"] = "combined"
    terms: list[RewardConfig] = Field(min_length=2)


RewardConfig = Annotated[
    Union[ActionRewardConfig, CollectRewardConfig, CombinedRewardConfig],
    Field(discriminator="kind"),
]

CombinedRewardConfig.model_rebuild()


# ---------------------------------------------------------------------------
# Section 2: Schedules
# ---------------------------------------------------------------------------

class FixedScheduleConfig(BaseModel):
    """Same reward for every step."""

    type: Literal["fixed"] = "fixed"
    reward: RewardConfig


class ScheduleSegment(BaseModel):
    start_step: StepIndex
    reward: RewardConfig


class PiecewiseScheduleConfig(BaseModel):
    """Switch reward at fixed step boundaries."""

    type: Literal["piecewise"] = "piecewise"
    segments: list[ScheduleSegment] = Field(min_length=1)

    @model_validator(mode="after")
    def segments_ordered_from_zero(self) -> PiecewiseScheduleConfig:
        starts = [seg.start_step for seg in self.segments]
        if starts[0] != 0:
            raise ValueError(f"First segment must start at step 0 (got {starts[0]}).")
        for prev, cur in zip(starts, starts[1:]):
            if cur <= prev:
                raise ValueError(
                    f"Segment start steps must be strictly increasing ({prev} >= {cur})."
                )
        return self


class CyclicScheduleConfig(BaseModel):
    """Rotate through rewards, each held for ``period`` steps."""

    type: Literal["cyclic"] = "cyclic"
    rewards: list[RewardConfig] = Field(min_length=1)
    period: int = Field(default=1, ge=1)


class InterpolatedScheduleConfig(BaseModel):
    """Blend linearly from one reward to another over a step window."""

    type: Literal["interpolated"] = "interpolated"
    start: RewardConfig
    end: RewardConfig
    start_step: StepIndex
    end_step: StepIndex

    @model_validator(mode="after")
    def window_not_empty(self) -> InterpolatedScheduleConfig:
        if self.end_step <= self.start_step:
            raise ValueError(
                "end_step must be greater than start_step "
                f"(got {self.end_step} <= {self.start_step})."
            )
        return self


class RandomScheduleConfig(BaseModel):
    """Draw a reward at random for each block of ``period`` steps."""

    type: Literal["random"] = "random"
    rewards: list[RewardConfig] = Field(min_length=1)
    period: int = Field(ge=1)
    seed: int = Field(ge=0, description="Root seed; draws are reproducible from it.")
    weights: list[float] | None = Field(
        default=None,
        description="Relative selection weights, one per reward. Uniform if omitted.",
    )

    @model_validator(mode="after")
    def weights_match_rewards(self) -> RandomScheduleConfig:
        if self.weights is None:
            return self
        if len(self.weights) != len(self.rewards):
            raise ValueError(
                f"Expected {len(self.rewards)} weights, got {len(self.weights)}."
            )
        finite = all(math.isfinite(w) for w in self.weights)
        if not finite or not math.isfinite(sum(self.weights)):
            raise ValueError("Weights must be finite.")
        if any(w < 0 for w in self.weights) or sum(self.weights) <= 0:
            raise ValueError("Weights must be >= 0 with a positive sum.")
        return self


ScheduleConfig = Annotated[
    Union[
        FixedScheduleConfig,
        PiecewiseScheduleConfig,
        CyclicScheduleConfig,
        InterpolatedScheduleConfig,
        RandomScheduleConfig,
    ],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Section 3: Instrumentation
# ---------------------------------------------------------------------------

class InstrumentationConfig(BaseModel):
    """What reward telemetry to collect and how often."""

    enable_step_metrics: bool = Field(
        default=True,
        description="Emit per-step reward records.",
    )
    enable_episode_metrics: bool = Field(
        default=True,
        description="Build the end-of-run summary.",
    )
    enable_event_log: bool = Field(
        default=True,
        description="Log semantic events (reward switches, non-finite values).",
    )
    enable_breakdown: bool = Field(
        default=False,
        description="Attach per-leaf contributions to step records.",
    )
    step_log_frequency: int = Field(
        default=1, ge=1,
        description="Log step metrics every N steps. 1 = every step.",
    )


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------

class ScoringConfig(BaseModel):
    """Complete reward setup for one run: what to score and what to record."""

    schedule: ScheduleConfig
    instrumentation: InstrumentationConfig = InstrumentationConfig()
