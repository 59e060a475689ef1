"""Outbound URL safety checks.

Workflow authors control the URLs that webhook, http and social nodes
call. Requests to loopback, link-local, private ranges and the hosting
platform's internal hostnames are refused before any connection is
opened. Hostnames are not resolved. Numeric hosts are read the way the
C resolver reads them, so shorthand, hex, octal and single-integer IPv4
forms are checked as the address they connect to.
"""

from __future__ import annotations

import ipaddress
import re
import socket
from dataclasses import dataclass
from urllib.parse import urlsplit

ALLOWED_SCHEMES = frozenset({"http", "https"})

BLOCKED_HOST_PATTERNS = (
    re.compile(r"^.*\.internal$"),
    re.compile(r"^.*\.local$"),
    re.compile(r"^supabase\."),
    re.compile(r"^.*\.supabase\.co$"),
    re.compile(r"^.*\.supabase\.in$"),
)


@dataclass(frozen=True)
class UrlCheck:
    """Outcome of a URL safety check.

    Attributes:
        safe: Whether the request may be sent.
        reason: Why the URL was refused, None when safe.
    """

    safe: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.safe


class BlockedUrlError(Exception):
    """Raised from the client's request hook when a redirect target is refused."""

    def __init__(self, url: str, reason: str | None) -> None:
        super().__init__(f"URL not allowed: {reason}")
        self.url = url
        self.reason = reason


def check_url(url: str) -> UrlCheck:
    """Decide whether an outbound request to ``url`` is allowed.

    Args:
        url: Absolute URL configured on a node.

    Returns:
        UrlCheck with ``safe`` False and a reason when the URL is refused.
    """
    try:
        parts = urlsplit(url)
        hostname = (parts.hostname or "").lower().rstrip(".")
    except ValueError as e:
        return UrlCheck(False, f"Invalid URL format: {e}")

    if parts.scheme not in ALLOWED_SCHEMES:
        return UrlCheck(
            False,
            f"Invalid protocol: {parts.scheme}:. Only http and https are allowed.",
        )
    if not hostname:
        return UrlCheck(False, "Invalid URL format: missing hostname")

    if hostname == "localhost":
        return UrlCheck(False, "Requests to localhost are not allowed.")

    address = parse_ip_host(hostname)
    if address is not None:
        reason = _check_address(address)
        if reason:
            return UrlCheck(False, reason)

    for pattern in BLOCKED_HOST_PATTERNS:
        if pattern.match(hostname):
            return UrlCheck(False, "Requests to internal service hostnames are not allowed.")

    return UrlCheck(True)


def parse_ip_host(hostname: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    """Return the address a numeric host connects to, None for names.

    ``ipaddress`` only accepts canonical dotted quads, while resolvers also
    accept ``127.1``, ``2130706433``, ``0x7f000001`` and ``0177.0.0.1``.
    ``inet_aton`` reads those forms the same way the resolver does.
    """
    try:
        return ipaddress.ip_address(hostname)
    except ValueError:
        pass
    try:
        return ipaddress.IPv4Address(socket.inet_aton(hostname))
    except OSError:
        return None


def _check_address(address: ipaddress.IPv4Address | ipaddress.IPv6Address) -> str | None:
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        address = address.ipv4_mapped
    if address.is_loopback:
        return "Requests to localhost are not allowed."
    if address.is_link_local:
        return "Requests to link-local addresses are not allowed."
    if isinstance(address, ipaddress.IPv4Address) and address in _ZERO_NETWORK:
        return "Requests to 0.0.0.0 are not allowed."
    if address.is_private:
        return "Requests to private IP ranges are not allowed."
    return None


_ZERO_NETWORK = ipaddress.ip_network("0.0.0.0/8")


__all__ = ["BlockedUrlError", "UrlCheck", "check_url", "parse_ip_host"]
