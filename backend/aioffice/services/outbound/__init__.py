"""Outbound HTTP access for workflow nodes."""

from aioffice.services.outbound.http_client import HttpCallResult, OutboundHttpClient
from aioffice.services.outbound.url_guard import UrlCheck, check_url

__all__ = [
    "HttpCallResult",
    "OutboundHttpClient",
    "UrlCheck",
    "check_url",
]
