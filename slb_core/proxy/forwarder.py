"""Proxy Forwarder - Single attempt against one origin.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Dict, Iterable, List, Optional, Tuple

import httpx

from slb_core.gateway.request import Request, Response
from slb_core.utils.helpers import build_target_url, without_headers

logger = logging.getLogger(__name__)


class FailureReason(Enum):
    """Why an attempt did not produce a usable response."""

    NETWORK_ERROR = "network-error"
    TIMEOUT = "timeout"
    FAIL_STATUS = "fail-status"


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one proxied attempt."""

    origin: str
    response: Optional[Response] = None
    reason: Optional[FailureReason] = None
    status_code: int = 0
    error: Optional[str] = None
    latency_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.response is not None

    @classmethod
    def failure(
        cls,
        origin: str,
        reason: FailureReason,
        status_code: int = 0,
        error: Optional[str] = None,
        latency_ms: float = 0.0,
    ) -> "AttemptOutcome":
        return cls(
            origin=origin,
            reason=reason,
            status_code=status_code,
            error=error,
            latency_ms=latency_ms,
        )


# Headers that should not be forwarded
HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
}

# httpx sets these itself for the outbound call
REQUEST_SKIP_HEADERS = HOP_BY_HOP_HEADERS | {"host", "content-length"}

# The body is handed back decoded, so the origin's framing no longer applies
RESPONSE_SKIP_HEADERS = HOP_BY_HOP_HEADERS | {"content-length", "content-encoding"}


class Proxy:
    """Forwards one request to one origin with a hard deadline.

    The whole exchange (connect, send, status line, body) runs under
    ``asyncio.wait_for``; when the deadline fires the in-flight call is
    cancelled and the attempt is classified as a timeout. Responses whose
    status is a configured fail status are closed unread.
    """

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def forward(
        self,
        origin: str,
        request: Request,
        timeout: float,
        fail_statuses: AbstractSet[int],
    ) -> AttemptOutcome:
        """Forward request to origin.

        Args:
            origin: Origin base URL
            request: Inbound request
            timeout: Attempt deadline in seconds
            fail_statuses: Statuses treated as failures

        Returns:
            AttemptOutcome; never raises for transport problems
        """
        url = build_target_url(origin, request.path, request.query)
        start_time = time.perf_counter()

        def elapsed() -> float:
            return (time.perf_counter() - start_time) * 1000

        try:
            response = await asyncio.wait_for(
                self._exchange(url, request, fail_statuses),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            return AttemptOutcome.failure(
                origin,
                FailureReason.TIMEOUT,
                error=str(e) or f"no response within {timeout:.3f}s",
                latency_ms=elapsed(),
            )
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
            return AttemptOutcome.failure(
                origin,
                FailureReason.NETWORK_ERROR,
                error=f"{type(e).__name__}: {e}",
                latency_ms=elapsed(),
            )
        except Exception as e:
            # Anything else raised while talking to this origin is still
            # a failed attempt, never an error for the caller.
            logger.exception(f"Unexpected error forwarding to {origin}")
            return AttemptOutcome.failure(
                origin,
                FailureReason.NETWORK_ERROR,
                error=f"{type(e).__name__}: {e}",
                latency_ms=elapsed(),
            )

        if response.status in fail_statuses:
            return AttemptOutcome.failure(
                origin,
                FailureReason.FAIL_STATUS,
                status_code=response.status,
                latency_ms=elapsed(),
            )

        return AttemptOutcome(
            origin=origin,
            response=response,
            status_code=response.status,
            latency_ms=elapsed(),
        )

    async def _exchange(
        self,
        url: str,
        request: Request,
        fail_statuses: AbstractSet[int],
    ) -> Response:
        """Execute the actual forward request."""
        upstream_request = self._client.build_request(
            request.method,
            url,
            headers=self._prepare_headers(request.headers),
            content=request.body or None,
        )
        upstream = await self._client.send(upstream_request, stream=True)
        try:
            if upstream.status_code in fail_statuses:
                return Response(status=upstream.status_code)
            body = await upstream.aread()
        finally:
            await upstream.aclose()

        headers, set_cookies = split_response_headers(upstream.headers.raw)
        return Response(
            status=upstream.status_code,
            body=body,
            headers=headers,
            set_cookies=set_cookies,
        )

    def _prepare_headers(self, headers: Dict[str, str]) -> Dict[bytes, bytes]:
        """Prepare headers for forwarding.

        Inbound header text was decoded as latin-1, so it is encoded back
        the same way and reaches the origin byte for byte.
        """
        return {
            key.encode("latin-1"): value.encode("latin-1")
            for key, value in without_headers(headers, REQUEST_SKIP_HEADERS).items()
        }


def split_response_headers(
    raw: Iterable[Tuple[bytes, bytes]],
) -> Tuple[Dict[str, str], Tuple[str, ...]]:
    """Turn raw origin headers into a header dict plus Set-Cookie values.

    Repeated headers are joined with ", " except Set-Cookie, whose values
    may contain commas and are kept one per entry.
    """
    headers: Dict[str, str] = {}
    set_cookies: List[str] = []

    for raw_key, raw_value in raw:
        key = raw_key.decode("latin-1")
        value = raw_value.decode("latin-1")
        lowered = key.lower()
        if lowered in RESPONSE_SKIP_HEADERS:
            continue
        if lowered == "set-cookie":
            set_cookies.append(value)
            continue
        existing = next((k for k in headers if k.lower() == lowered), None)
        if existing is None:
            headers[key] = value
        else:
            headers[existing] = f"{headers[existing]}, {value}"

    return headers, tuple(set_cookies)


__all__ = [
    "Proxy",
    "AttemptOutcome",
    "FailureReason",
    "HOP_BY_HOP_HEADERS",
    "split_response_headers",
]
