"""Configuration utilities.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

The load balancer is configured entirely through string key/value input
(environment variables on the edge host). Every request rebuilds its
configuration from that input; nothing is cached between requests.

Only ORIGINS is required. Every other key has a default and is clamped
rather than rejected:

    ORIGINS                 comma-separated origin base URLs (required)
    ORIGIN_TIMEOUT_MS       per-attempt timeout, [1000, 90000], default 8000
    RETRIES                 extra attempts, [0, 5], default 1
    FAIL_STATUSES           statuses treated as failures
    LB_DIAG_PATH            diagnostics path, default /__lb/health
    CORS_ENABLED            "true" to enable CORS handling
    CORS_ALLOW_ORIGINS      exact origins, or "*" for all
    CORS_ALLOW_METHODS      default GET,POST,PUT,PATCH,DELETE,OPTIONS
    CORS_ALLOW_HEADERS      default Content-Type,Authorization
    CORS_EXPOSE_HEADERS     optional
    CORS_ALLOW_CREDENTIALS  "true" to allow credentials
    CORS_MAX_AGE_SEC        preflight cache lifetime, default 600
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Mapping, Optional, Tuple

from slb_core.utils.helpers import clamp, parse_bool, parse_int, split_list

logger = logging.getLogger(__name__)

DEFAULT_ORIGIN_TIMEOUT_MS = 8000
MIN_ORIGIN_TIMEOUT_MS = 1000
MAX_ORIGIN_TIMEOUT_MS = 90000
DEFAULT_RETRIES = 1
MAX_RETRIES = 5
DEFAULT_FAIL_STATUSES: FrozenSet[int] = frozenset({500, 504, 521, 522, 523})
DEFAULT_DIAG_PATH = "/__lb/health"
DEFAULT_ALLOW_METHODS: Tuple[str, ...] = (
    "GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS",
)
DEFAULT_ALLOW_HEADERS: Tuple[str, ...] = ("Content-Type", "Authorization")
DEFAULT_MAX_AGE_SEC = 600

WILDCARD = "*"


class ConfigurationError(ValueError):
    """Raised when required configuration is missing or invalid."""

    def __init__(self, field_name: str, message: str):
        super().__init__(message)
        self.field_name = field_name


@dataclass(frozen=True)
class CORSSettings:
    """CORS policy settings."""

    enabled: bool = False
    allow_origins: Tuple[str, ...] = ()
    allow_all_origins: bool = False
    allow_methods: Tuple[str, ...] = DEFAULT_ALLOW_METHODS
    allow_headers: Tuple[str, ...] = DEFAULT_ALLOW_HEADERS
    expose_headers: Tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age_sec: int = DEFAULT_MAX_AGE_SEC

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "CORSSettings":
        """Resolve CORS settings from raw key/value input."""
        raw_origins = (env.get("CORS_ALLOW_ORIGINS") or "").strip()
        allow_all = raw_origins == WILDCARD

        return cls(
            enabled=parse_bool(env.get("CORS_ENABLED")),
            allow_origins=() if allow_all else tuple(split_list(raw_origins)),
            allow_all_origins=allow_all,
            allow_methods=tuple(split_list(env.get("CORS_ALLOW_METHODS")))
            or DEFAULT_ALLOW_METHODS,
            allow_headers=tuple(split_list(env.get("CORS_ALLOW_HEADERS")))
            or DEFAULT_ALLOW_HEADERS,
            expose_headers=tuple(split_list(env.get("CORS_EXPOSE_HEADERS"))),
            allow_credentials=parse_bool(env.get("CORS_ALLOW_CREDENTIALS")),
            max_age_sec=max(
                0, parse_int(env.get("CORS_MAX_AGE_SEC"), DEFAULT_MAX_AGE_SEC)
            ),
        )


@dataclass(frozen=True)
class LoadBalancerConfig:
    """Resolved load balancer configuration.

    Immutable; built once per inbound request and discarded afterwards.
    """

    origins: Tuple[str, ...]
    origin_timeout_ms: int = DEFAULT_ORIGIN_TIMEOUT_MS
    retries: int = DEFAULT_RETRIES
    fail_statuses: FrozenSet[int] = DEFAULT_FAIL_STATUSES
    diag_path: str = DEFAULT_DIAG_PATH
    cors: CORSSettings = field(default_factory=CORSSettings)

    @property
    def origin_timeout(self) -> float:
        """Per-attempt timeout in seconds."""
        return self.origin_timeout_ms / 1000.0

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
    ) -> "LoadBalancerConfig":
        """Resolve configuration from raw key/value input.

        Args:
            env: Raw string input (defaults to os.environ)

        Raises:
            ConfigurationError: if ORIGINS is absent or empty
        """
        if env is None:
            env = os.environ

        origins = tuple(split_list(env.get("ORIGINS")))
        if not origins:
            raise ConfigurationError(
                "ORIGINS",
                "ORIGINS environment variable is required and must contain "
                "at least one origin",
            )

        return cls(
            origins=origins,
            origin_timeout_ms=clamp(
                parse_int(env.get("ORIGIN_TIMEOUT_MS"), DEFAULT_ORIGIN_TIMEOUT_MS),
                MIN_ORIGIN_TIMEOUT_MS,
                MAX_ORIGIN_TIMEOUT_MS,
            ),
            retries=clamp(
                parse_int(env.get("RETRIES"), DEFAULT_RETRIES), 0, MAX_RETRIES
            ),
            fail_statuses=_parse_fail_statuses(env.get("FAIL_STATUSES")),
            diag_path=env.get("LB_DIAG_PATH") or DEFAULT_DIAG_PATH,
            cors=CORSSettings.from_env(env),
        )


def _parse_fail_statuses(value: Optional[str]) -> FrozenSet[int]:
    statuses = set()
    for token in split_list(value):
        status = parse_int(token, -1)
        if status >= 0:
            statuses.add(status)
        else:
            logger.debug(f"Ignoring non-numeric fail status: {token!r}")
    return frozenset(statuses) or DEFAULT_FAIL_STATUSES


__all__ = [
    "LoadBalancerConfig",
    "CORSSettings",
    "ConfigurationError",
    "DEFAULT_FAIL_STATUSES",
    "DEFAULT_DIAG_PATH",
    "WILDCARD",
]
