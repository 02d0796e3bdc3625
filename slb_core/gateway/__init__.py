"""Gateway module - Request boundary and HTTP listener."""

from slb_core.gateway.server import Gateway, GatewayConfig
from slb_core.gateway.request import Request, Response

__all__ = [
    "Gateway",
    "GatewayConfig",
    "Request",
    "Response",
]
