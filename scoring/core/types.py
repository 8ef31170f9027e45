"""Framework-level types shared by the reward core and the engine.

These are the values the simulation engine hands to the scoring layer
once per step.  The engine owns their lifetime; the scoring layer only
reads them.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


# ---------------------------------------------------------------------------
# Item identity
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True, order=True)
class Item:
    """Opaque identity of a collectible item category."""

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Item name must be a non-empty string.")

    def __str__(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Agent snapshots
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AgentState:
    """Snapshot of one agent at one instant.

    Parameters
    ----------
    items : Mapping[Item, int]
        Items held, keyed by item.  Copied on construction and exposed
        read-only.  Absent keys count as zero.
    """

    items: Mapping[Item, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        held: dict[Item, int] = {}
        for item, count in dict(self.items).items():
            if isinstance(count, bool):
                raise TypeError(f"count for {item} must be an integer, got bool")
            try:
                count = operator.index(count)
            except TypeError:
                raise TypeError(
                    f"count for {item} must be an integer, got {type(count).__name__}"
                ) from None
            if count < 0:
                raise ValueError(f"count for {item} must be >= 0, got {count}")
            held[item] = count
        object.__setattr__(self, "items", MappingProxyType(held))

    @classmethod
    def empty(cls) -> AgentState:
        return cls(items={})

    def count(self, item: Item) -> int:
        """Number of *item* held; zero when the item was never collected."""
        return self.items.get(item, 0)


@dataclass(frozen=True, slots=True)
class AgentTransition:
    """Before/after snapshots of the same agent across one simulation step."""

    previous_state: AgentState
    current_state: AgentState

    def item_delta(self, item: Item) -> int:
        """Signed change in the held count of *item* over this step."""
        return self.current_state.count(item) - self.previous_state.count(item)

    def changed_items(self) -> dict[Item, int]:
        """All items whose count changed, with their signed deltas."""
        keys = set(self.previous_state.items) | set(self.current_state.items)
        deltas = {item: self.item_delta(item) for item in sorted(keys)}
        return {item: d for item, d in deltas.items() if d != 0}


# ---------------------------------------------------------------------------
# Step index
# ---------------------------------------------------------------------------

MIN_STEP = 0
MAX_STEP = 2**64 - 1


def validate_step(step: int) -> int:
    """Return *step* as a plain int, checking it is a valid unsigned 64-bit index.

    Accepts NumPy integer scalars.  Raises TypeError for non-integral values
    and ValueError for indices outside [MIN_STEP, MAX_STEP].
    """
    if isinstance(step, bool):
        raise TypeError("step must be an integer, got bool")
    try:
        step = operator.index(step)
    except TypeError:
        raise TypeError(
            f"step must be an integer, got {type(step).__name__}"
        ) from None
    if not MIN_STEP <= step <= MAX_STEP:
        raise ValueError(f"step must be in [{MIN_STEP}, {MAX_STEP}], got {step}")
    return step
