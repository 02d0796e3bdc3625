"""CORS Policy - Cross-Origin Resource Sharing.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from slb_core.gateway.request import Request, Response
from slb_core.utils.config import CORSSettings, LoadBalancerConfig

logger = logging.getLogger(__name__)

ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"
MAX_AGE = "Access-Control-Max-Age"
REQUEST_METHOD = "Access-Control-Request-Method"
REQUEST_HEADERS = "Access-Control-Request-Headers"


def is_preflight(request: Request) -> bool:
    """Check if request is a CORS preflight."""
    return (
        request.method.upper() == "OPTIONS"
        and bool(request.origin)
        and request.has_header(REQUEST_METHOD)
    )


class CORSPolicy:
    """CORS decision engine.

    Decision matrix for an allowed origin:
    ┌──────────────────────┬──────────────┬──────────────────────────┐
    │  allow-list          │  credentials │  Allow-Origin            │
    ├──────────────────────┼──────────────┼──────────────────────────┤
    │  "*"                 │  false       │  *                       │
    │  "*"                 │  true        │  <request origin>        │
    │  exact list          │  any         │  <request origin>        │
    └──────────────────────┴──────────────┴──────────────────────────┘

    Browsers reject "Allow-Origin: *" together with
    "Allow-Credentials: true", so the wildcard echoes the concrete
    origin whenever credentials are allowed.
    """

    def __init__(self, settings: CORSSettings):
        self.settings = settings

    @classmethod
    def for_config(cls, config: LoadBalancerConfig) -> "CORSPolicy":
        """Create policy from resolved configuration."""
        return cls(config.cors)

    def is_origin_allowed(self, origin: Optional[str]) -> bool:
        """Check if origin is allowed (exact, case-sensitive match).

        An empty or missing origin is never allowed.
        """
        if not self.settings.enabled or not origin:
            return False
        if self.settings.allow_all_origins:
            return True
        return origin in self.settings.allow_origins

    def resolve_allow_origin(self, origin: Optional[str]) -> Optional[str]:
        """Value for Access-Control-Allow-Origin, or None to omit it."""
        if not self.is_origin_allowed(origin):
            return None
        if self.settings.allow_all_origins and not self.settings.allow_credentials:
            return "*"
        return origin

    def build_preflight_response(self, request: Request) -> Response:
        """Generate preflight response."""
        origin = request.origin
        allow_origin = self.resolve_allow_origin(origin)

        if allow_origin is None:
            logger.info(f"CORS preflight denied for origin {origin!r}")
            return Response.json({"error": "cors_denied"}, status=403)

        requested_headers = request.get_header(REQUEST_HEADERS)

        headers = {
            ALLOW_ORIGIN: allow_origin,
            ALLOW_METHODS: ", ".join(self.settings.allow_methods),
            ALLOW_HEADERS: requested_headers
            or ", ".join(self.settings.allow_headers),
            MAX_AGE: str(self.settings.max_age_sec),
        }
        if self.settings.allow_credentials:
            headers[ALLOW_CREDENTIALS] = "true"

        return Response(status=204, headers=headers)

    def response_headers(self, origin: Optional[str]) -> Dict[str, str]:
        """CORS headers for an actual (non-preflight) response."""
        if not origin:
            return {}

        allow_origin = self.resolve_allow_origin(origin)
        if allow_origin is None:
            return {}

        headers = {ALLOW_ORIGIN: allow_origin}
        if self.settings.allow_credentials:
            headers[ALLOW_CREDENTIALS] = "true"
        if self.settings.expose_headers:
            headers[EXPOSE_HEADERS] = ", ".join(self.settings.expose_headers)
        return headers

    def apply_to_response(
        self,
        response: Response,
        origin: Optional[str],
    ) -> Response:
        """Return response with CORS headers added (unchanged if denied)."""
        return response.with_headers(self.response_headers(origin))


__all__ = [
    "CORSPolicy",
    "is_preflight",
    "ALLOW_ORIGIN",
    "ALLOW_CREDENTIALS",
    "ALLOW_HEADERS",
    "ALLOW_METHODS",
    "EXPOSE_HEADERS",
    "MAX_AGE",
]
