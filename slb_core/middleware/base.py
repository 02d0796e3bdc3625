"""Middleware Base - Base classes for middleware.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Union

from slb_core.gateway.request import Request, Response


class Middleware(ABC):
    """Abstract middleware base class.

    Middleware wraps the router: ``pre_request`` sees the request before
    routing and ``post_request`` sees the response before it is sent.

    Pipeline:
    ┌────────────────────────────────────────────────────────────┐
    │                  Middleware Pipeline                        │
    │                                                             │
    │  Request ──▶ MW1 ──▶ MW2 ──▶ ... ──▶ Router                │
    │                                          │                  │
    │  Response ◀── MW1 ◀── MW2 ◀── ... ◀──────┘                 │
    └────────────────────────────────────────────────────────────┘
    """

    @abstractmethod
    def pre_request(
        self,
        request: Request,
    ) -> Optional[Union[Request, Response]]:
        """Process request before routing.

        Args:
            request: Request object

        Returns:
            Replacement request, Response to short-circuit, or None
        """
        pass

    @abstractmethod
    def post_request(
        self,
        request: Request,
        response: Response,
    ) -> Optional[Response]:
        """Process response before sending.

        Args:
            request: Request as seen by the router
            response: Response from the router

        Returns:
            Replacement response or None
        """
        pass


__all__ = [
    "Middleware",
]
