"""Gateway Server - Request boundary and HTTP listener.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import random
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Mapping, Optional

import httpx

from slb_core.gateway.request import Request, Response
from slb_core.middleware.base import Middleware
from slb_core.middleware.logging import LoggingMiddleware
from slb_core.routing.router import Router
from slb_core.utils.config import ConfigurationError, LoadBalancerConfig
from slb_core.utils.helpers import parse_int, utc_timestamp

logger = logging.getLogger(__name__)


@dataclass
class GatewayConfig:
    """Listener configuration."""

    host: str = "0.0.0.0"
    port: int = 8080
    backlog: int = 1024
    read_timeout: float = 30.0
    max_request_size: int = 10 * 1024 * 1024  # 10MB


def configuration_error_response(error: ConfigurationError) -> Response:
    """500 envelope for configuration failures."""
    return Response.json(
        {
            "error": "Load balancer configuration error",
            "message": str(error),
            "timestamp": utc_timestamp(),
        },
        status=500,
    )


class Gateway:
    """Load balancer gateway.

    Resolves configuration from the raw environment on every request,
    runs middleware around the router, and turns configuration failures
    into a 500 response. Nothing else is caught here: per-origin failures
    never leave the dispatcher.

    Usage:
        gateway = Gateway(env={"ORIGINS": "http://a:9001,http://b:9002"})
        response = await gateway.handle_request(request)

        gateway.run(port=8080)
    """

    def __init__(
        self,
        env: Optional[Mapping[str, str]] = None,
        config: Optional[GatewayConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        rng: Optional[random.Random] = None,
        middleware: Optional[List[Middleware]] = None,
        router: Optional[Router] = None,
    ):
        self.env = env
        self.config = config or GatewayConfig()
        self.router = router or Router(transport=transport, rng=rng)
        self._middleware: List[Middleware] = (
            [LoggingMiddleware()] if middleware is None else list(middleware)
        )
        self._server: Optional[asyncio.AbstractServer] = None

    def use(self, middleware: Middleware) -> "Gateway":
        """Add middleware to the pipeline."""
        self._middleware.append(middleware)
        return self

    async def handle_request(self, request: Request) -> Response:
        """Handle incoming request through middleware and routing.

        Args:
            request: Incoming request

        Returns:
            Response from an origin, the gateway, or middleware
        """
        try:
            lb_config = LoadBalancerConfig.from_env(self.env)
        except ConfigurationError as e:
            logger.error(f"Load balancer configuration error: {e}")
            return configuration_error_response(e)

        # Run pre-request middleware
        for mw in self._middleware:
            result = await self._call_middleware(mw.pre_request, request)
            if isinstance(result, Response):
                return result
            if result is not None:
                request = result

        response = await self.router.handle(lb_config, request)

        # Run post-request middleware
        for mw in reversed(self._middleware):
            result = await self._call_middleware(mw.post_request, request, response)
            if result is not None:
                response = result

        return response

    async def _call_middleware(
        self,
        method: Callable,
        *args,
    ) -> Any:
        """Call middleware method (sync or async)."""
        result = method(*args)
        if inspect.isawaitable(result):
            return await result
        return result

    async def _handle_connection(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Serve a single request on one connection."""
        peer = writer.get_extra_info("peername")
        remote_addr = peer[0] if peer else ""

        try:
            response = await self._read_and_handle(reader, remote_addr)
            writer.write(response.to_bytes())
            await writer.drain()
        except (
            ConnectionError,
            asyncio.IncompleteReadError,
            asyncio.TimeoutError,
        ) as e:
            logger.debug(f"Client {remote_addr} went away: {e}")
        finally:
            writer.close()

    async def _read_and_handle(
        self,
        reader: asyncio.StreamReader,
        remote_addr: str,
    ) -> Response:
        try:
            head = await asyncio.wait_for(
                reader.readuntil(b"\r\n\r\n"),
                timeout=self.config.read_timeout,
            )
        except asyncio.LimitOverrunError:
            return Response.error(400, "Request header too large")
        except asyncio.TimeoutError:
            return Response.error(408)

        try:
            request = Request.from_raw(head, remote_addr=remote_addr)
        except ValueError as e:
            logger.debug(f"Rejecting malformed request from {remote_addr}: {e}")
            return Response.error(400)

        transfer_encoding = request.get_header("Transfer-Encoding").strip().lower()
        if transfer_encoding:
            # Only plain chunked framing is decoded; the origin gets the
            # payload with a Content-Length instead.
            if transfer_encoding != "chunked":
                return Response.error(
                    501, f"Unsupported Transfer-Encoding: {transfer_encoding}"
                )
            try:
                body = await asyncio.wait_for(
                    self._read_chunked(reader),
                    timeout=self.config.read_timeout,
                )
            except (ValueError, asyncio.LimitOverrunError) as e:
                logger.debug(f"Rejecting chunked body from {remote_addr}: {e}")
                return Response.error(400, str(e) or None)
            return await self.handle_request(replace(request, body=body))

        length = parse_int(request.get_header("Content-Length"), 0)
        if length > self.config.max_request_size:
            return Response.error(400, "Request body too large")
        if length > 0:
            body = await asyncio.wait_for(
                reader.readexactly(length),
                timeout=self.config.read_timeout,
            )
            request = replace(request, body=body)

        return await self.handle_request(request)

    async def _read_chunked(self, reader: asyncio.StreamReader) -> bytes:
        """Decode a chunked request body, discarding any trailers.

        Raises:
            ValueError: on malformed framing or an oversized body
        """
        chunks = []
        total = 0

        while True:
            size_line = await reader.readuntil(b"\r\n")
            size_text = size_line.split(b";", 1)[0].strip()
            try:
                size = int(size_text, 16)
            except ValueError:
                raise ValueError(f"Malformed chunk size: {size_text!r}") from None
            if size < 0:
                raise ValueError(f"Malformed chunk size: {size_text!r}")
            if size == 0:
                break

            total += size
            if total > self.config.max_request_size:
                raise ValueError("Request body too large")

            chunks.append(await reader.readexactly(size))
            if await reader.readexactly(2) != b"\r\n":
                raise ValueError("Malformed chunk terminator")

        # Trailer section ends with an empty line
        while await reader.readuntil(b"\r\n") != b"\r\n":
            pass

        return b"".join(chunks)

    async def serve(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
    ) -> None:
        """Listen for HTTP requests until cancelled."""
        host = host or self.config.host
        port = port or self.config.port

        self._server = await asyncio.start_server(
            self._handle_connection,
            host,
            port,
            backlog=self.config.backlog,
        )
        logger.info(f"Starting load balancer on {host}:{port}")

        async with self._server:
            await self._server.serve_forever()

    def run(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        log_level: str = "INFO",
    ) -> None:
        """Start the gateway server (blocking).

        Args:
            host: Override host
            port: Override port
            log_level: Root logging level
        """
        logging.basicConfig(
            level=log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        try:
            asyncio.run(self.serve(host, port))
        except KeyboardInterrupt:
            logger.info("Load balancer stopped")

    def stop(self) -> None:
        """Stop accepting connections."""
        if self._server:
            self._server.close()


__all__ = [
    "Gateway",
    "GatewayConfig",
    "configuration_error_response",
]
