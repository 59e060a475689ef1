"""Outbound HTTP client used by workflow nodes.

Wraps a lazily created ``httpx.AsyncClient``. Calls never raise: every
outcome, including refused URLs, timeouts, oversized responses and
transport errors, is returned as an ``HttpCallResult``.
"""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from aioffice.core.config import settings
from aioffice.core.logging import get_logger
from aioffice.services.outbound.url_guard import BlockedUrlError, check_url

logger = get_logger(__name__)


@dataclass
class HttpCallResult:
    """Result of one outbound request.

    Attributes:
        success: True when a 2xx response was received.
        status: HTTP status code, None when no response was received.
        status_text: HTTP reason phrase.
        data: Response body, JSON-decoded when possible, otherwise text.
        error: Failure description when no usable response was received.
        elapsed_ms: Wall time spent on the call.
    """

    success: bool
    status: int | None = None
    status_text: str | None = None
    data: Any = None
    error: str | None = None
    elapsed_ms: float = 0.0
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def responded(self) -> bool:
        """True when the remote end produced a response."""
        return self.status is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the result shape stored for webhook nodes."""
        if not self.responded:
            return {"success": False, "error": self.error}
        return {"success": self.success, "status": self.status, "data": self.data}


class OutboundHttpClient:
    """HTTP client with timeout, size limit and URL guard."""

    def __init__(
        self,
        timeout: float | None = None,
        max_response_size: int | None = None,
        guard_enabled: bool | None = None,
    ) -> None:
        self.timeout = timeout if timeout is not None else settings.EXTERNAL_REQUEST_TIMEOUT
        self.max_response_size = (
            max_response_size if max_response_size is not None else settings.MAX_RESPONSE_SIZE
        )
        self.guard_enabled = (
            guard_enabled if guard_enabled is not None else settings.OUTBOUND_URL_GUARD_ENABLED
        )
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the underlying HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
                event_hooks={"request": [self._check_hop]},
            )
        return self._client

    async def _check_hop(self, request: httpx.Request) -> None:
        """Apply the URL guard to every request the client sends, redirects included."""
        if not self.guard_enabled:
            return
        url = str(request.url)
        verdict = check_url(url)
        if not verdict.safe:
            raise BlockedUrlError(url, verdict.reason)

    async def request(
        self,
        method: str,
        url: str,
        *,
        json_body: Any = None,
        content: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> HttpCallResult:
        """Send a request and capture the outcome.

        Args:
            method: HTTP method.
            url: Target URL; checked by the URL guard first.
            json_body: Body serialized as JSON.
            content: Raw body, used when json_body is None.
            headers: Request headers.

        Returns:
            HttpCallResult describing the response or the failure.
        """
        if self.guard_enabled:
            verdict = check_url(url)
            if not verdict.safe:
                logger.warning(
                    f"Outbound URL blocked: {url}",
                    extra={"context": {"url": url, "reason": verdict.reason}},
                )
                return HttpCallResult(success=False, error=f"URL not allowed: {verdict.reason}")

        start_time = time.time()
        request_kwargs: dict[str, Any] = {
            "method": method.upper(),
            "url": url,
            "headers": {"Content-Type": "application/json", **(headers or {})},
        }
        if json_body is not None:
            request_kwargs["content"] = json.dumps(json_body, default=str).encode("utf-8")
        elif content is not None:
            request_kwargs["content"] = content.encode("utf-8")

        try:
            client = await self._get_client()
            # Per-phase httpx timeouts do not bound a slowly trickling body
            async with asyncio.timeout(self.timeout):
                response = await client.request(**request_kwargs)
        except BlockedUrlError as e:
            logger.warning(
                f"Outbound redirect blocked: {e.url}",
                extra={"context": {"url": url, "redirect": e.url, "reason": e.reason}},
            )
            return HttpCallResult(
                success=False,
                error=str(e),
                elapsed_ms=(time.time() - start_time) * 1000,
            )
        except (httpx.TimeoutException, TimeoutError):
            return HttpCallResult(
                success=False,
                error=f"Request timeout after {self.timeout:g} seconds",
                elapsed_ms=(time.time() - start_time) * 1000,
            )
        except Exception as e:
            logger.warning(
                f"Outbound request failed: {type(e).__name__}: {e}",
                extra={"context": {"url": url, "method": method}},
            )
            return HttpCallResult(
                success=False,
                error=str(e) or type(e).__name__,
                elapsed_ms=(time.time() - start_time) * 1000,
            )

        elapsed_ms = (time.time() - start_time) * 1000

        too_large = self._check_size(response)
        if too_large:
            return HttpCallResult(success=False, error=too_large, elapsed_ms=elapsed_ms)

        return HttpCallResult(
            success=response.is_success,
            status=response.status_code,
            status_text=response.reason_phrase,
            data=self._decode(response.text),
            elapsed_ms=elapsed_ms,
            headers=dict(response.headers),
        )

    async def post_json(self, url: str, payload: Any) -> HttpCallResult:
        """POST a JSON payload."""
        return await self.request("POST", url, json_body=payload)

    def _check_size(self, response: httpx.Response) -> str | None:
        """Return an error message when the response exceeds the size limit."""
        content_length = response.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_response_size:
            return (
                f"Response too large: {content_length} bytes exceeds maximum of "
                f"{self.max_response_size} bytes"
            )
        text_length = len(response.text)
        if text_length > self.max_response_size:
            return (
                f"Response too large: {text_length} bytes exceeds maximum of "
                f"{self.max_response_size} bytes"
            )
        return None

    @staticmethod
    def _decode(text: str) -> Any:
        try:
            return json.loads(text)
        except ValueError:
            return text

    async def aclose(self) -> None:
        """Close the underlying client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> OutboundHttpClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()


__all__ = ["HttpCallResult", "OutboundHttpClient"]
