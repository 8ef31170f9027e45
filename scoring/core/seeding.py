"""Deterministic seeding utilities.

Randomised schedules must be pure functions of their seed and the step
index, so every random draw flows through a generator seeded from
those two values, never from global state.
"""

from __future__ import annotations

import numpy as np


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Create a NumPy Generator from an explicit seed.

    If seed is None a fresh (non-reproducible) generator is returned.
    """
    return np.random.default_rng(seed)


def derive_seed(parent_seed: int, *path: int) -> int:
    """Derive a child seed deterministically from a root seed and an index path.

    Unlike ``SeedSequence.spawn`` this does not materialise the preceding
    children, so indices as large as a 64-bit step counter are cheap.
    """
    ss = np.random.SeedSequence([parent_seed, *path])
    return int(ss.generate_state(1, dtype=np.uint64)[0])
