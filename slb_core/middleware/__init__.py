"""Middleware module - CORS policy and request/response middleware."""

from slb_core.middleware.base import Middleware
from slb_core.middleware.logging import LoggingMiddleware, LoggingConfig
from slb_core.middleware.cors import CORSPolicy, is_preflight

__all__ = [
    "Middleware",
    "LoggingMiddleware",
    "LoggingConfig",
    "CORSPolicy",
    "is_preflight",
]
