"""Default reward setup.

One point per jellybean collected, the same at every step.
"""

from scoring.config.schema import (
    CollectRewardConfig,
    FixedScheduleConfig,
    InstrumentationConfig,
    ScoringConfig,
)

DEFAULT_ITEM = "jellybean"


def default_config() -> ScoringConfig:
    """Return a complete, valid default scoring config."""
    return ScoringConfig(
        schedule=FixedScheduleConfig(
            reward=CollectRewardConfig(item=DEFAULT_ITEM, value=1.0),
        ),
        instrumentation=InstrumentationConfig(),
    )
