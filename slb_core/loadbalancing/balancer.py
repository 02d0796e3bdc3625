"""Load Balancer - Randomized origin ordering.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Every request independently shuffles the origin pool and walks the
result front to back. There is no shared rotation index, no health
memory and no weighting: origin selection is a pure function of the
pool and the random source passed in.
"""

from __future__ import annotations

import random
from typing import Callable, List, Optional, Sequence


def shuffle_origins(
    origins: Sequence[str],
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Return a uniformly shuffled copy of the origin pool.

    Args:
        origins: Origin base URLs
        rng: Random source (a fresh generator if omitted)

    Returns:
        New list; the input is not modified
    """
    shuffled = list(origins)
    (rng or random.Random()).shuffle(shuffled)
    return shuffled


def max_attempts(retries: int, pool_size: int) -> int:
    """Attempts allowed for one request, capped at the pool size."""
    return max(0, min(retries + 1, pool_size))


def attempt_plan(
    origins: Sequence[str],
    retries: int,
    rng: Optional[random.Random] = None,
    order: Optional[Callable[[Sequence[str]], List[str]]] = None,
) -> List[str]:
    """Origins to try, in order, for one request.

    ``order`` replaces the random shuffle when given. No origin appears
    twice.
    """
    ordered = list(order(origins)) if order else shuffle_origins(origins, rng)
    return ordered[: max_attempts(retries, len(ordered))]


__all__ = [
    "shuffle_origins",
    "max_attempts",
    "attempt_plan",
]
