"""SLB - Simple Load Balancer.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

SLB is a stateless, request-scoped reverse proxy with:
- Randomized origin ordering per request
- Bounded sequential failover with per-attempt timeouts
- Failure classification (network error, timeout, fail status)
- CORS policy for preflight and actual requests
- Sanitized diagnostics endpoint

Architecture Overview:
┌─────────────────────────────────────────────────────────────────────────────┐
│                                  SLB                                         │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                              │
│  ┌───────────────────────────────────────────────────────────────────────┐  │
│  │                        Request Pipeline                                │  │
│  │  Client ──▶ Gateway ──▶ Middleware ──▶ Router ──▶ Origins ──▶ Client  │  │
│  └───────────────────────────────────────────────────────────────────────┘  │
│                                                                              │
│  ┌─────────────────┐  ┌─────────────────┐  ┌─────────────────────────────┐ │
│  │    Gateway      │  │   Middleware    │  │        Routing              │ │
│  │                 │  │                 │  │                             │ │
│  │ - Config per    │  │ - Logging       │  │ - Diagnostics path          │ │
│  │   request       │  │ - CORS policy   │  │ - CORS preflight            │ │
│  │ - 500 boundary  │  │                 │  │ - Proxy                     │ │
│  │ - Listener      │  │                 │  │                             │ │
│  └─────────────────┘  └─────────────────┘  └─────────────────────────────┘ │
│                                                                              │
│  ┌─────────────────┐  ┌─────────────────┐  ┌─────────────────────────────┐ │
│  │  Load Balancing │  │     Proxy       │  │        Health               │ │
│  │                 │  │                 │  │                             │ │
│  │ - Shuffle       │  │ - Forwarding    │  │ - Diagnostics               │ │
│  │ - Attempt cap   │  │ - Timeouts      │  │ - Sanitized config          │ │
│  │                 │  │ - Failover      │  │                             │ │
│  └─────────────────┘  └─────────────────┘  └─────────────────────────────┘ │
│                                                                              │
└─────────────────────────────────────────────────────────────────────────────┘

Request Flow:
1. Gateway resolves configuration from the environment
2. Middleware logs the request
3. Router serves diagnostics or a CORS preflight, or
4. Dispatcher shuffles origins and tries them one by one
5. First accepted response gets X-LB-Origin / X-LB-Attempt, else 502
6. CORS headers are added and the response is sent

Usage:
    from slb_core import Gateway

    gateway = Gateway(env={
        "ORIGINS": "https://origin-a.example.com,https://origin-b.example.com",
        "RETRIES": "1",
        "CORS_ENABLED": "true",
        "CORS_ALLOW_ORIGINS": "https://app.example.com",
    })
    gateway.run(host="0.0.0.0", port=8080)
"""

__version__ = "1.0.0"
__author__ = "BlackRoad OS, Inc."

# Gateway core
from slb_core.gateway.server import Gateway, GatewayConfig
from slb_core.gateway.request import Request, Response

# Routing
from slb_core.routing.router import Router

# Middleware
from slb_core.middleware.base import Middleware
from slb_core.middleware.logging import LoggingMiddleware
from slb_core.middleware.cors import CORSPolicy, is_preflight

# Load balancing
from slb_core.loadbalancing.balancer import shuffle_origins, max_attempts

# Proxy
from slb_core.proxy.forwarder import Proxy, AttemptOutcome, FailureReason
from slb_core.proxy.failover import FailoverDispatcher

# Health
from slb_core.health.diagnostics import build_diagnostics

# Utils
from slb_core.utils.config import (
    LoadBalancerConfig,
    CORSSettings,
    ConfigurationError,
)

__all__ = [
    # Version
    "__version__",
    # Gateway
    "Gateway",
    "GatewayConfig",
    "Request",
    "Response",
    # Routing
    "Router",
    # Middleware
    "Middleware",
    "LoggingMiddleware",
    "CORSPolicy",
    "is_preflight",
    # Load balancing
    "shuffle_origins",
    "max_attempts",
    # Proxy
    "Proxy",
    "AttemptOutcome",
    "FailureReason",
    "FailoverDispatcher",
    # Health
    "build_diagnostics",
    # Utils
    "LoadBalancerConfig",
    "CORSSettings",
    "ConfigurationError",
]
