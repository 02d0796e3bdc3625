"""Routing module - Diagnostics, preflight and proxy routing."""

from slb_core.routing.router import Router

__all__ = [
    "Router",
]
