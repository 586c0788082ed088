"""Client for the Anthropic messages API."""

from typing import Any

import httpx
from pydantic import ValidationError

from depwise.backends.claude.schemas import MessageResponse
from depwise.errors import ResponseParseError
from depwise.utils.http import AsyncHttpClient

SERVICE_NAME = "Claude"
ANTHROPIC_VERSION = "2023-06-01"


class ClaudeClient:
    """Thin wrapper over ``POST /v1/messages``."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = AsyncHttpClient(
            service=SERVICE_NAME,
            base_url=base_url,
            timeout=timeout,
            headers={
                "x-api-key": api_key,
                "anthropic-version": ANTHROPIC_VERSION,
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    async def create_message(
        self,
        prompt: str,
        model: str,
        max_tokens: int,
        temperature: float,
        system: str | None = None,
    ) -> MessageResponse:
        """Send a single-turn message.

        Args:
            prompt: User message content.
            model: Model identifier.
            max_tokens: Maximum output tokens.
            temperature: Sampling temperature.
            system: Optional system prompt.

        Returns:
            Decoded message response.
        """
        body: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            body["system"] = system

        data = await self._http.post_json("/v1/messages", json=body)
        try:
            return MessageResponse.model_validate(data)
        except ValidationError as e:
            raise ResponseParseError(SERVICE_NAME, "unexpected message body") from e

    async def aclose(self) -> None:
        await self._http.aclose()
