"""Failover Dispatcher - Sequential attempts across shuffled origins.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional, Sequence

import httpx

from slb_core.gateway.request import Request, Response
from slb_core.loadbalancing.balancer import attempt_plan
from slb_core.proxy.forwarder import AttemptOutcome, FailureReason, Proxy
from slb_core.utils.config import LoadBalancerConfig
from slb_core.utils.helpers import utc_timestamp

logger = logging.getLogger(__name__)

ORIGIN_HEADER = "X-LB-Origin"
ATTEMPT_HEADER = "X-LB-Attempt"

Shuffler = Callable[[Sequence[str]], List[str]]


def exhausted_response(attempts: int) -> Response:
    """502 envelope returned when every attempt failed."""
    return Response.json(
        {
            "error": "All origins failed",
            "attempts": attempts,
            "timestamp": utc_timestamp(),
        },
        status=502,
    )


class FailoverDispatcher:
    """Dispatches a request to the origin pool with bounded failover.

    Flow:
    ┌────────────────────────────────────────────────────────────┐
    │  shuffle(origins) ──▶ attempt 1 ──fail──▶ attempt 2 ──▶ …  │
    │                          │                   │              │
    │                       success             success           │
    │                          ▼                   ▼              │
    │                 response + X-LB-Origin / X-LB-Attempt       │
    │                                                             │
    │  all min(retries + 1, len(origins)) attempts fail ──▶ 502   │
    └────────────────────────────────────────────────────────────┘

    Attempts run back to back, one at a time, each bounded by its own
    timeout. No origin is tried twice for the same request and nothing
    is remembered between requests.
    """

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        rng: Optional[random.Random] = None,
        shuffler: Optional[Shuffler] = None,
    ):
        self._transport = transport
        self._rng = rng
        self._shuffler = shuffler

    async def dispatch(
        self,
        config: LoadBalancerConfig,
        request: Request,
    ) -> Response:
        """Proxy request to the first origin that accepts it.

        Args:
            config: Resolved configuration
            request: Inbound request

        Returns:
            Origin response tagged with X-LB-Origin and X-LB-Attempt,
            or the 502 envelope if every attempt failed
        """
        plan = attempt_plan(
            config.origins, config.retries, rng=self._rng, order=self._shuffler
        )
        attempts = len(plan)

        async with httpx.AsyncClient(
            transport=self._transport,
            follow_redirects=False,
            timeout=None,
        ) as client:
            proxy = Proxy(client)

            for index, origin in enumerate(plan):
                outcome = await proxy.forward(
                    origin,
                    request,
                    timeout=config.origin_timeout,
                    fail_statuses=config.fail_statuses,
                )

                if outcome.success:
                    logger.debug(
                        f"Origin {origin} answered {outcome.status_code} "
                        f"on attempt {index + 1} ({outcome.latency_ms:.2f}ms)"
                    )
                    return outcome.response.with_headers({
                        ORIGIN_HEADER: origin,
                        ATTEMPT_HEADER: str(index + 1),
                    })

                self._log_failure(outcome, index + 1, attempts)

        logger.error(
            f"All origins failed for {request.method} {request.path} "
            f"after {attempts} attempt(s)"
        )
        return exhausted_response(attempts)

    def _log_failure(
        self,
        outcome: AttemptOutcome,
        attempt: int,
        attempts: int,
    ) -> None:
        if outcome.reason is FailureReason.FAIL_STATUS:
            logger.warning(
                f"Origin {outcome.origin} returned fail status: "
                f"{outcome.status_code} (attempt {attempt}/{attempts})"
            )
        else:
            logger.warning(
                f"Origin {outcome.origin} failed: {outcome.reason.value} "
                f"{outcome.error} (attempt {attempt}/{attempts})"
            )


__all__ = [
    "FailoverDispatcher",
    "exhausted_response",
    "ORIGIN_HEADER",
    "ATTEMPT_HEADER",
]
