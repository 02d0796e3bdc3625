"""Load balancing module - Randomized origin ordering."""

from slb_core.loadbalancing.balancer import (
    shuffle_origins,
    max_attempts,
    attempt_plan,
)

__all__ = [
    "shuffle_origins",
    "max_attempts",
    "attempt_plan",
]
