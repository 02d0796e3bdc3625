"""Diagnostics - Health endpoint for the load balancer.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Any, Dict

from slb_core import __version__
from slb_core.gateway.request import Response
from slb_core.utils.config import LoadBalancerConfig
from slb_core.utils.helpers import utc_timestamp

SERVICE_NAME = "Simple Load Balancer (SLB)"


def config_snapshot(config: LoadBalancerConfig) -> Dict[str, Any]:
    """Sanitized view of the configuration.

    Origin URLs and the CORS allow-origin list are reduced to counts and
    flags; they never appear in the output.
    """
    cors = config.cors
    snapshot: Dict[str, Any] = {
        "originCount": len(config.origins),
        "originTimeoutMs": config.origin_timeout_ms,
        "retries": config.retries,
        "failStatuses": sorted(config.fail_statuses),
        "diagPath": config.diag_path,
        "corsEnabled": cors.enabled,
        "corsAllowMethods": list(cors.allow_methods),
        "corsAllowHeaders": list(cors.allow_headers),
        "corsAllowCredentials": cors.allow_credentials,
        "corsMaxAgeSec": cors.max_age_sec,
    }
    if cors.expose_headers:
        snapshot["corsExposeHeaders"] = list(cors.expose_headers)
    return snapshot


def build_diagnostics(config: LoadBalancerConfig) -> Dict[str, Any]:
    """Diagnostics document for the health endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": __version__,
        "timestamp": utc_timestamp(),
        "config": config_snapshot(config),
    }


def diagnostics_response(config: LoadBalancerConfig) -> Response:
    """200 JSON response with the diagnostics document."""
    return Response.json(build_diagnostics(config), indent=2)


__all__ = [
    "SERVICE_NAME",
    "config_snapshot",
    "build_diagnostics",
    "diagnostics_response",
]
