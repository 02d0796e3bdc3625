"""Logging Middleware - Request/response logging.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from slb_core.gateway.request import Request, Response
from slb_core.middleware.base import Middleware

logger = logging.getLogger(__name__)


@dataclass
class LoggingConfig:
    """Logging middleware configuration."""

    log_headers: bool = False
    log_query: bool = True
    skip_paths: List[str] = field(default_factory=list)


class LoggingMiddleware(Middleware):
    """Logging middleware for requests and responses."""

    def __init__(self, config: Optional[LoggingConfig] = None):
        self.config = config or LoggingConfig()

    def pre_request(self, request: Request) -> Optional[Request]:
        """Tag request with an id and log it."""
        request = request.with_request_id(str(uuid.uuid4())[:8])

        if request.path in self.config.skip_paths:
            return request

        log_parts = [f"[{request.request_id}] --> {request.method} {request.path}"]

        if self.config.log_query and request.query:
            log_parts.append(f"query={request.query}")

        if self.config.log_headers:
            log_parts.append(f"headers={request.headers}")

        logger.info(" ".join(log_parts))
        return request

    def post_request(
        self,
        request: Request,
        response: Response,
    ) -> Optional[Response]:
        """Log outgoing response."""
        if request.path in self.config.skip_paths:
            return None

        duration_ms = (time.time() - request.timestamp) * 1000
        attempt = response.get_header("X-LB-Attempt")
        suffix = f" attempt={attempt}" if attempt else ""

        logger.info(
            f"[{request.request_id or '?'}] <-- {response.status} "
            f"({duration_ms:.2f}ms){suffix}"
        )
        return None


__all__ = [
    "LoggingMiddleware",
    "LoggingConfig",
]
