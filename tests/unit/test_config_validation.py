"""Tests for the scoring configuration schema.

Covers:
  - valid config construction, including nested rewards
  - discriminated unions for rewards and schedules
  - cross-field validators (segment order, interpolation window, weights)
  - default config validity
"""

import math

import pytest
from pydantic import ValidationError

from scoring.config.defaults import default_config
from scoring.config.schema import (
    ActionRewardConfig,
    CollectRewardConfig,
    CombinedRewardConfig,
    FixedScheduleConfig,
    InterpolatedScheduleConfig,
    PiecewiseScheduleConfig,
    RandomScheduleConfig,
    ScoringConfig,
)
from scoring.core.types import MAX_STEP


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _action(value: float = 1.0) -> dict:
    return {"kind": "action", "value": value}


def _collect(item: str = "gold", value: float = 1.5) -> dict:
    return {"kind": "collect", "item": item, "value": value}


def _fixed(reward: dict) -> dict:
    return {"schedule": {"type": "fixed", "reward": reward}}


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------

class TestValidConfig:
    def test_default_config_is_valid(self):
        cfg = default_config()
        assert isinstance(cfg.schedule, FixedScheduleConfig)
        assert cfg.schedule.reward.item == "jellybean"

    def test_instrumentation_defaults(self):
        cfg = ScoringConfig.model_validate(_fixed(_action()))
        assert cfg.instrumentation.enable_step_metrics is True
        assert cfg.instrumentation.enable_breakdown is False
        assert cfg.instrumentation.step_log_frequency == 1

    def test_nested_combined_reward(self):
        cfg = ScoringConfig.model_validate(_fixed({
            "kind": "combined",
            "terms": [
                _action(-0.1),
                {"kind": "combined", "terms": [_collect("gold"), _collect("gem", 10.0)]},
            ],
        }))
        reward = cfg.schedule.reward
        assert isinstance(reward, CombinedRewardConfig)
        assert isinstance(reward.terms[0], ActionRewardConfig)
        assert isinstance(reward.terms[1], CombinedRewardConfig)
        assert isinstance(reward.terms[1].terms[1], CollectRewardConfig)

    def test_json_roundtrip(self):
        cfg = ScoringConfig.model_validate(_fixed(_collect()))
        again = ScoringConfig.model_validate_json(cfg.model_dump_json())
        assert again == cfg

    def test_max_step_boundary_allowed(self):
        cfg = PiecewiseScheduleConfig(segments=[
            {"start_step": 0, "reward": _action()},
            {"start_step": MAX_STEP, "reward": _action(2.0)},
        ])
        assert cfg.segments[-1].start_step == MAX_STEP


# ---------------------------------------------------------------------------
# Rewards
# ---------------------------------------------------------------------------

class TestRewardConfig:
    def test_unknown_kind(self):
        with pytest.raises(ValidationError):
            ScoringConfig.model_validate(_fixed({"kind": "bonus", "value": 1.0}))

    def test_collect_needs_item(self):
        with pytest.raises(ValidationError):
            CollectRewardConfig(item="", value=1.0)

    def test_combined_needs_two_terms(self):
        with pytest.raises(ValidationError):
            ScoringConfig.model_validate(_fixed({"kind": "combined", "terms": [_action()]}))

    def test_negative_values_allowed(self):
        cfg = ScoringConfig.model_validate(_fixed(_action(-5.0)))
        assert cfg.schedule.reward.value == -5.0


# ---------------------------------------------------------------------------
# Schedules
# ---------------------------------------------------------------------------

class TestScheduleConfig:
    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            ScoringConfig.model_validate({"schedule": {"type": "annealed", "reward": _action()}})

    def test_piecewise_must_start_at_zero(self):
        with pytest.raises(ValidationError, match="step 0"):
            PiecewiseScheduleConfig(segments=[{"start_step": 3, "reward": _action()}])

    def test_piecewise_must_increase(self):
        with pytest.raises(ValidationError, match="strictly increasing"):
            PiecewiseScheduleConfig(segments=[
                {"start_step": 0, "reward": _action()},
                {"start_step": 0, "reward": _action(2.0)},
            ])

    def test_step_out_of_range(self):
        with pytest.raises(ValidationError):
            PiecewiseScheduleConfig(segments=[
                {"start_step": 0, "reward": _action()},
                {"start_step": MAX_STEP + 1, "reward": _action(2.0)},
            ])

    def test_cyclic_period_positive(self):
        with pytest.raises(ValidationError):
            ScoringConfig.model_validate({
                "schedule": {"type": "cyclic", "rewards": [_action()], "period": 0},
            })

    def test_interpolated_window(self):
        with pytest.raises(ValidationError, match="end_step"):
            InterpolatedScheduleConfig(
                start=_action(), end=_action(2.0), start_step=10, end_step=10,
            )

    def test_random_weights_length(self):
        with pytest.raises(ValidationError, match="weights"):
            RandomScheduleConfig(
                rewards=[_action(), _action(2.0)], period=5, seed=1, weights=[1.0],
            )

    def test_random_weights_positive_sum(self):
        with pytest.raises(ValidationError):
            RandomScheduleConfig(
                rewards=[_action(), _action(2.0)], period=5, seed=1, weights=[0.0, 0.0],
            )

    @pytest.mark.parametrize(
        "num_rewards, weights",
        [(2, [math.nan, 1.0]), (2, [1.0, math.inf]), (1, [math.inf])],
    )
    def test_random_weights_finite(self, num_rewards, weights):
        with pytest.raises(ValidationError, match="finite"):
            RandomScheduleConfig(
                rewards=[_action(float(i)) for i in range(num_rewards)],
                period=5, seed=1, weights=weights,
            )

    def test_random_rejects_negative_seed(self):
        with pytest.raises(ValidationError):
            RandomScheduleConfig(rewards=[_action()], period=5, seed=-1)


class TestInstrumentation:
    def test_rejects_zero_frequency(self):
        with pytest.raises(ValidationError):
            ScoringConfig.model_validate({
                **_fixed(_action()),
                "instrumentation": {"step_log_frequency": 0},
            })
