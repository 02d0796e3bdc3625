"""Request/Response - HTTP request and response objects.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Both objects are frozen. Code that needs extra headers on a response
builds a new one with ``with_headers`` instead of amending it in place.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from slb_core.utils.helpers import merge_headers


@dataclass(frozen=True)
class Request:
    """HTTP Request object.

    Represents an incoming HTTP request. ``query`` is the raw query string
    (without the leading "?") and is forwarded to origins unchanged.
    """

    method: str
    path: str
    query: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    remote_addr: str = ""
    protocol: str = "HTTP/1.1"
    timestamp: float = field(default_factory=time.time)
    request_id: str = ""

    @property
    def origin(self) -> str:
        """Get the CORS Origin header."""
        return self.get_header("Origin")

    def get_header(self, name: str, default: str = "") -> str:
        """Get header value (case-insensitive)."""
        for key, value in self.headers.items():
            if key.lower() == name.lower():
                return value
        return default

    def has_header(self, name: str) -> bool:
        """Check whether a header is present (case-insensitive)."""
        return any(key.lower() == name.lower() for key in self.headers)

    def with_request_id(self, request_id: str) -> "Request":
        """Copy of this request tagged with a request id."""
        return replace(self, request_id=request_id)

    @classmethod
    def from_raw(cls, data: bytes, remote_addr: str = "") -> "Request":
        """Parse request from raw HTTP data.

        Raises:
            ValueError: if the request line is malformed
        """
        head, _, body = data.partition(b"\r\n\r\n")
        lines = head.split(b"\r\n")

        # Parse request line
        parts = lines[0].decode("latin-1").split(" ")
        if len(parts) < 2 or not parts[0]:
            raise ValueError(f"Malformed request line: {lines[0]!r}")
        method = parts[0].upper()
        target = parts[1]
        protocol = parts[2] if len(parts) > 2 else "HTTP/1.1"

        path, _, query = target.partition("?")

        # Parse headers
        headers = {}
        for line in lines[1:]:
            if b":" in line:
                key, value = line.decode("latin-1").split(":", 1)
                headers[key.strip()] = value.strip()

        return cls(
            method=method,
            path=path or "/",
            query=query,
            headers=headers,
            body=body,
            remote_addr=remote_addr,
            protocol=protocol,
        )


@dataclass(frozen=True)
class Response:
    """HTTP Response object.

    Represents an outgoing HTTP response. Set-Cookie values live in
    ``set_cookies``, one entry per header line, because they cannot be
    folded into a single comma-separated value.
    """

    status: int = 200
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)
    set_cookies: Tuple[str, ...] = ()

    # Common status messages
    STATUS_MESSAGES = {
        200: "OK",
        201: "Created",
        204: "No Content",
        301: "Moved Permanently",
        302: "Found",
        304: "Not Modified",
        400: "Bad Request",
        401: "Unauthorized",
        403: "Forbidden",
        404: "Not Found",
        405: "Method Not Allowed",
        408: "Request Timeout",
        411: "Length Required",
        429: "Too Many Requests",
        500: "Internal Server Error",
        501: "Not Implemented",
        502: "Bad Gateway",
        503: "Service Unavailable",
        504: "Gateway Timeout",
    }

    @property
    def status_message(self) -> str:
        """Get status message."""
        return self.STATUS_MESSAGES.get(self.status, "Unknown")

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get header value (case-insensitive)."""
        for key, value in self.headers.items():
            if key.lower() == name.lower():
                return value
        if name.lower() == "set-cookie" and self.set_cookies:
            return self.set_cookies[0]
        return default

    def with_headers(self, headers: Mapping[str, str]) -> "Response":
        """Copy of this response with extra headers merged in."""
        if not headers:
            return self
        return replace(self, headers=merge_headers(self.headers, headers))

    def json_body(self) -> Any:
        """Parse body as JSON."""
        return json.loads(self.body.decode())

    def to_bytes(self) -> bytes:
        """Convert to raw HTTP response."""
        headers = merge_headers(
            self.headers,
            {"Content-Length": str(len(self.body)), "Connection": "close"},
        )
        lines = [f"HTTP/1.1 {self.status} {self.status_message}"]
        for key, value in headers.items():
            lines.append(f"{key}: {value}")
        for cookie in self.set_cookies:
            lines.append(f"Set-Cookie: {cookie}")

        lines.append("")
        header_bytes = "\r\n".join(lines).encode("latin-1")

        return header_bytes + b"\r\n" + self.body

    @classmethod
    def json(
        cls,
        data: Any,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
        indent: Optional[int] = None,
    ) -> "Response":
        """Create JSON response."""
        body = json.dumps(data, indent=indent).encode()
        resp_headers = merge_headers(
            headers or {}, {"Content-Type": "application/json"}
        )
        return cls(status=status, body=body, headers=resp_headers)

    @classmethod
    def error(
        cls,
        status: int,
        message: Optional[str] = None,
    ) -> "Response":
        """Create error response."""
        msg = message or cls.STATUS_MESSAGES.get(status, "Error")
        return cls.json({"error": msg}, status=status)


__all__ = [
    "Request",
    "Response",
]
