"""Utils module - Configuration and helper functions."""

from slb_core.utils.config import (
    LoadBalancerConfig,
    CORSSettings,
    ConfigurationError,
)
from slb_core.utils.helpers import (
    build_target_url,
    merge_headers,
    utc_timestamp,
)

__all__ = [
    "LoadBalancerConfig",
    "CORSSettings",
    "ConfigurationError",
    "build_target_url",
    "merge_headers",
    "utc_timestamp",
]
