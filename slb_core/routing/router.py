"""Request Router - Entry point for each inbound request.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

import httpx

from slb_core.gateway.request import Request, Response
from slb_core.health.diagnostics import diagnostics_response
from slb_core.middleware.cors import CORSPolicy, is_preflight
from slb_core.proxy.failover import FailoverDispatcher, Shuffler
from slb_core.utils.config import LoadBalancerConfig

logger = logging.getLogger(__name__)


class Router:
    """Routes a request to diagnostics, CORS preflight, or the origins.

    Routing order:
    1. path == diag path   -> diagnostics (+ CORS headers if Origin sent)
    2. CORS preflight      -> 204 / 403 from the CORS policy
    3. anything else       -> failover dispatch (+ CORS headers)
    """

    def __init__(
        self,
        dispatcher: Optional[FailoverDispatcher] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        rng: Optional[random.Random] = None,
        shuffler: Optional[Shuffler] = None,
    ):
        self.dispatcher = dispatcher or FailoverDispatcher(
            transport=transport,
            rng=rng,
            shuffler=shuffler,
        )

    async def handle(
        self,
        config: LoadBalancerConfig,
        request: Request,
    ) -> Response:
        """Handle one inbound request.

        Args:
            config: Configuration resolved for this request
            request: Inbound request

        Returns:
            Exactly one response
        """
        cors = CORSPolicy.for_config(config)
        origin = request.origin

        if request.path == config.diag_path:
            return cors.apply_to_response(diagnostics_response(config), origin)

        if config.cors.enabled and is_preflight(request):
            return cors.build_preflight_response(request)

        response = await self.dispatcher.dispatch(config, request)
        return cors.apply_to_response(response, origin)


__all__ = [
    "Router",
]
