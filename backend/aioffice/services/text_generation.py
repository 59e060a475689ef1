"""Text generation collaborator used by task nodes.

Task nodes describe work in natural language; the engine asks a
chat-completions gateway to perform it. Any failure is raised as
``TextGenerationError`` and handled by the task executor, which falls
back to a completion stub.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import httpx

from aioffice.core.config import settings
from aioffice.core.logging import get_logger

logger = get_logger(__name__)


class TextGenerationError(Exception):
    """Raised when the gateway cannot produce text.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status returned by the gateway, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@runtime_checkable
class TextGenerator(Protocol):
    """Anything that can turn a system and user prompt into text."""

    async def generate(self, system_prompt: str, user_prompt: str) -> str: ...


class ChatCompletionsTextGenerator:
    """TextGenerator backed by an OpenAI-compatible chat completions API.

    Attributes:
        url: Chat completions endpoint.
        api_key: Bearer token for the gateway.
        model: Model identifier sent with every request.
        max_tokens: Completion length limit.
    """

    def __init__(
        self,
        api_key: str,
        url: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        timeout: float | None = None,
    ) -> None:
        self.api_key = api_key
        self.url = url or settings.AI_GATEWAY_URL
        self.model = model or settings.AI_MODEL
        self.max_tokens = max_tokens or settings.AI_MAX_TOKENS
        self.timeout = timeout or settings.EXTERNAL_REQUEST_TIMEOUT
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        """Request a completion.

        Args:
            system_prompt: Instructions for the model.
            user_prompt: The task to perform.

        Returns:
            Generated text; empty string when the gateway returned no content.

        Raises:
            TextGenerationError: On rate limiting (429), exhausted credits
                (402), any other non-2xx status, transport errors or a
                malformed response body.
        """
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": self.max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            client = await self._get_client()
            response = await client.post(self.url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise TextGenerationError(f"Gateway request failed: {e}") from e

        if response.status_code == 429:
            raise TextGenerationError("Rate limit exceeded", status_code=429)
        if response.status_code == 402:
            raise TextGenerationError("Payment required", status_code=402)
        if not response.is_success:
            raise TextGenerationError(
                f"Gateway returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"].get("content")
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise TextGenerationError(f"Malformed gateway response: {e}") from e

        return content or ""

    async def aclose(self) -> None:
        """Close the underlying client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def get_text_generator() -> TextGenerator | None:
    """Build the configured generator.

    Returns:
        A generator, or None when no gateway key is configured.
    """
    if not settings.AI_GATEWAY_API_KEY:
        logger.info(
            "Text generation disabled: AI_GATEWAY_API_KEY not set",
            extra={"context": {"action": "text_generation_disabled"}},
        )
        return None
    return ChatCompletionsTextGenerator(api_key=settings.AI_GATEWAY_API_KEY)


__all__ = [
    "ChatCompletionsTextGenerator",
    "TextGenerationError",
    "TextGenerator",
    "get_text_generator",
]
