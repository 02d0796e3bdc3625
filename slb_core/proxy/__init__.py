"""Proxy module - Origin forwarding and failover."""

from slb_core.proxy.forwarder import (
    Proxy,
    AttemptOutcome,
    FailureReason,
)
from slb_core.proxy.failover import (
    FailoverDispatcher,
    exhausted_response,
)

__all__ = [
    "Proxy",
    "AttemptOutcome",
    "FailureReason",
    "FailoverDispatcher",
    "exhausted_response",
]
