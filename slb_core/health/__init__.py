"""Health module - Diagnostics endpoint."""

from slb_core.health.diagnostics import (
    SERVICE_NAME,
    build_diagnostics,
    diagnostics_response,
)

__all__ = [
    "SERVICE_NAME",
    "build_diagnostics",
    "diagnostics_response",
]
