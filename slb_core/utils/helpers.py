"""Helper utilities.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Optional[str], default: int) -> int:
    """Parse the leading base-10 integer of a string.

    Trailing characters are ignored ("12ms" -> 12). Anything without a
    leading integer falls back to ``default``.
    """
    if value is None:
        return default
    match = _LEADING_INT.match(value)
    if not match:
        return default
    return int(match.group(1))


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))


def split_list(value: Optional[str]) -> List[str]:
    """Split a comma-separated value, trimming and dropping empty tokens."""
    if not value:
        return []
    return [token.strip() for token in value.split(",") if token.strip()]


def parse_bool(value: Optional[str]) -> bool:
    """True iff the lowercased value is exactly "true"."""
    return (value or "").lower() == "true"


def build_target_url(origin: str, path: str, query: str = "") -> str:
    """Join an origin base URL with an inbound path and raw query string."""
    if query:
        return f"{origin}{path}?{query}"
    return f"{origin}{path}"


def merge_headers(*headers_list: Mapping[str, str]) -> Dict[str, str]:
    """Merge header mappings into a new dict.

    Later mappings win; keys compare case-insensitively and the casing of
    the last writer is kept.
    """
    result: Dict[str, str] = {}

    for headers in headers_list:
        for key, value in headers.items():
            existing_key = None
            for k in result:
                if k.lower() == key.lower():
                    existing_key = k
                    break

            if existing_key:
                del result[existing_key]

            result[key] = value

    return result


def without_headers(headers: Mapping[str, str], names) -> Dict[str, str]:
    """Copy headers, dropping any whose lowercased name is in ``names``."""
    return {k: v for k, v in headers.items() if k.lower() not in names}


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = [
    "parse_int",
    "clamp",
    "split_list",
    "parse_bool",
    "build_target_url",
    "merge_headers",
    "without_headers",
    "utc_timestamp",
]
