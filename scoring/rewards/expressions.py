"""Reward expressions — composable scoring of agent transitions.

A reward is an immutable tree with three node shapes:

  - ActionReward(value):         fixed contribution, independent of state
  - CollectReward(item, value):  value * signed change in held count of item
  - CombinedReward(left, right): sum of both subtrees on the same transition

Trees are built only from existing values (``combine`` / ``+``), so they
are acyclic and evaluation always terminates.  Tree walks use an explicit
stack, so deeply nested compositions never hit the recursion limit.

Numeric edge cases are passed through untouched: NaN and infinite scalar
values yield NaN or infinite rewards.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterator, TypeVar

from scoring.core.types import AgentTransition, Item

T = TypeVar("T")

CONJUNCTION = " ∧ "


class Reward(ABC):
    """Base of all reward expressions."""

    __slots__ = ()

    def __add__(self, other: Reward) -> Reward:
        if not isinstance(other, Reward):
            return NotImplemented
        return CombinedReward(self, other)

    def evaluate(self, transition: AgentTransition) -> float:
        """Score *transition* under this reward."""
        return _fold(
            self,
            leaf=lambda node: node._leaf_value(transition),
            join=lambda left, right: left + right,
        )

    def describe(self) -> str:
        """Human-readable rendering that preserves the tree shape.

        Combined children of a combined node are parenthesised, so
        ``combine(combine(a, b), c)`` renders as ``(A ∧ B) ∧ C`` and two
        trees with different shapes never share a description.
        """
        text, _ = _fold(self, leaf=_leaf_text, join=_join_text)
        return text

    def scaled(self, factor: float) -> Reward:
        """Same tree shape with every leaf value multiplied by *factor*."""
        return _fold(
            self,
            leaf=lambda node: node._with_value(node.value * factor),
            join=CombinedReward,
        )

    def __str__(self) -> str:
        return self.describe()

    # Leaf hooks; CombinedReward never reaches them.

    def _leaf_value(self, transition: AgentTransition) -> float:
        raise TypeError(f"{type(self).__name__} is not a leaf reward")

    def _leaf_text(self) -> str:
        raise TypeError(f"{type(self).__name__} is not a leaf reward")

    @abstractmethod
    def _with_value(self, value: float) -> Reward:
        ...


@dataclass(frozen=True, slots=True)
class ActionReward(Reward):
    """Fixed per-step contribution; negative values act as penalties."""

    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    def _leaf_value(self, transition: AgentTransition) -> float:
        return self.value

    def _leaf_text(self) -> str:
        return f"Action[{self.value:.2f}]"

    def _with_value(self, value: float) -> Reward:
        return ActionReward(value)


@dataclass(frozen=True, slots=True)
class CollectReward(Reward):
    """Per-unit value times the signed change in the count of *item*."""

    item: Item
    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    def _leaf_value(self, transition: AgentTransition) -> float:
        return self.value * transition.item_delta(self.item)

    def _leaf_text(self) -> str:
        return f"Collect[{self.item}, {self.value:.2f}]"

    def _with_value(self, value: float) -> Reward:
        return CollectReward(self.item, value)


@dataclass(frozen=True, slots=True, eq=False)
class CombinedReward(Reward):
    """Sum of two reward expressions evaluated on the same transition.

    Equality and hashing are shape-based like the leaves, but walk the
    tree with an explicit stack instead of the generated recursive methods.
    """

    left: Reward
    right: Reward

    def __post_init__(self) -> None:
        for operand in (self.left, self.right):
            if not isinstance(operand, Reward):
                raise TypeError(
                    f"can only combine Reward values, got {type(operand).__name__}"
                )

    def _with_value(self, value: float) -> Reward:
        raise TypeError("CombinedReward has no scalar value")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Reward):
            return NotImplemented
        return _same_shape(self, other)

    def __hash__(self) -> int:
        return _fold(self, leaf=hash, join=lambda left, right: hash((left, right)))


# ---------------------------------------------------------------------------
# Tree traversal
# ---------------------------------------------------------------------------

def _fold(
    reward: Reward,
    leaf: Callable[[Reward], T],
    join: Callable[[T, T], T],
) -> T:
    """Post-order reduction of a reward tree without recursion.

    Equivalent to ``join(fold(left), fold(right))`` at every combined node,
    with the left subtree always reduced first.
    """
    results: list[T] = []
    # (node, expanded): combined nodes are pushed twice, the second
    # time to join the two results their children left on the stack.
    stack: list[tuple[Reward, bool]] = [(reward, False)]
    while stack:
        node, expanded = stack.pop()
        if isinstance(node, CombinedReward):
            if expanded:
                right = results.pop()
                left = results.pop()
                results.append(join(left, right))
            else:
                stack.append((node, True))
                stack.append((node.right, False))
                stack.append((node.left, False))
        else:
            results.append(leaf(node))
    return results[0]


def _same_shape(first: Reward, second: Reward) -> bool:
    """Structural equality of two trees, walked in step."""
    stack = [(first, second)]
    while stack:
        a, b = stack.pop()
        if a is b:
            continue
        if isinstance(a, CombinedReward) and isinstance(b, CombinedReward):
            stack.append((a.right, b.right))
            stack.append((a.left, b.left))
        elif isinstance(a, CombinedReward) or isinstance(b, CombinedReward):
            return False
        elif a != b:
            return False
    return True


def _iter_leaves(reward: Reward) -> Iterator[Reward]:
    stack = [reward]
    while stack:
        node = stack.pop()
        if isinstance(node, CombinedReward):
            stack.append(node.right)
            stack.append(node.left)
        else:
            yield node


def _leaf_text(node: Reward) -> tuple[str, bool]:
    return node._leaf_text(), False


def _join_text(left: tuple[str, bool], right: tuple[str, bool]) -> tuple[str, bool]:
    # The flag marks text produced by a combined node.
    parts = [f"({text})" if nested else text for text, nested in (left, right)]
    return CONJUNCTION.join(parts), True


# ---------------------------------------------------------------------------
# Public constructors and operations
# ---------------------------------------------------------------------------

def action(value: float) -> ActionReward:
    """Reward of *value* for every step, whatever happened."""
    return ActionReward(value)


def collect(item: Item, value: float) -> CollectReward:
    """Reward of *value* per unit of *item* gained (negative when lost)."""
    return CollectReward(item, value)


def combine(first: Reward, second: Reward, *more: Reward) -> Reward:
    """Additively compose rewards.  Extra operands fold from the left."""
    result: Reward = CombinedReward(first, second)
    for reward in more:
        result = CombinedReward(result, reward)
    return result


def evaluate(reward: Reward, transition: AgentTransition) -> float:
    return reward.evaluate(transition)


def describe(reward: Reward) -> str:
    return reward.describe()


def scaled(reward: Reward, factor: float) -> Reward:
    return reward.scaled(factor)


def leaves(reward: Reward) -> list[Reward]:
    """Leaf rewards in left-to-right order."""
    return list(_iter_leaves(reward))


def items(reward: Reward) -> set[Item]:
    """Items referenced anywhere in *reward*."""
    return {
        node.item for node in _iter_leaves(reward) if isinstance(node, CollectReward)
    }


def breakdown(reward: Reward, transition: AgentTransition) -> dict[str, float]:
    """Per-leaf contributions keyed by leaf description.

    Identical leaves are summed, so the values always add up to
    ``evaluate(reward, transition)`` (up to float summation order).
    """
    parts: dict[str, float] = {}
    for node in _iter_leaves(reward):
        key = node._leaf_text()
        parts[key] = parts.get(key, 0.0) + node._leaf_value(transition)
    return parts
