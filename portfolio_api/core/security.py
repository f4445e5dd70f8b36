"""Request security helpers: caller identity, security headers, input sanitizing."""

from __future__ import annotations

import hashlib
import re

from fastapi import Request

UNKNOWN_CLIENT = "unknown"

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}

_ANGLE_BRACKETS = re.compile(r"[<>]")
_JS_PROTOCOL = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on\w+=", re.IGNORECASE)


def get_client_ip(request: Request) -> str:
    """Resolve the caller's IP, honouring common proxy headers.

    Checks ``X-Forwarded-For`` (first hop), ``X-Real-IP`` and
    ``CF-Connecting-IP`` in that order, then the socket peer.

    Returns:
        The client IP, or ``"unknown"`` when nothing identifies the caller.
    """

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    for header in ("x-real-ip", "cf-connecting-ip"):
        value = request.headers.get(header)
        if value:
            return value.strip()

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def hash_identifier(value: str) -> str:
    """Hash a caller identifier for logging without exposing it."""
    return hashlib.sha256(value.encode()).hexdigest()[:16]


def get_security_headers() -> dict[str, str]:
    return dict(SECURITY_HEADERS)


def sanitize_input(value: str) -> str:
    """Strip markup-ish fragments from free text submitted by visitors."""

    value = value.strip()
    value = _ANGLE_BRACKETS.sub("", value)
    value = _JS_PROTOCOL.sub("", value)
    return _EVENT_HANDLER.sub("", value)
