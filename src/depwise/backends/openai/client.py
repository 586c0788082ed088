"""Client for OpenAI-compatible chat completions APIs."""

from typing import Any

import httpx
from pydantic import ValidationError

from depwise.backends.openai.schemas import ChatCompletionResponse, ModelList
from depwise.errors import ResponseParseError
from depwise.utils.http import AsyncHttpClient

SERVICE_NAME = "OpenAI"


class OpenAIClient:
    """Thin wrapper over the chat completions and models endpoints."""

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
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    async def create_chat_completion(
        self,
        messages: list[dict[str, str]],
        model: str,
        temperature: float,
        top_p: float,
        max_tokens: int,
        json_mode: bool = True,
    ) -> ChatCompletionResponse:
        """Request one chat completion.

        Args:
            messages: Chat messages in role/content form.
            model: Model identifier.
            temperature: Sampling temperature.
            top_p: Nucleus sampling cutoff.
            max_tokens: Maximum output tokens.
            json_mode: Ask the API to constrain output to a JSON object.

        Returns:
            Decoded completion.
        """
        body: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "top_p": top_p,
            "max_tokens": max_tokens,
        }
        if json_mode:
            body["response_format"] = {"type": "json_object"}

        data = await self._http.post_json("/chat/completions", json=body)
        try:
            return ChatCompletionResponse.model_validate(data)
        except ValidationError as e:
            raise ResponseParseError(SERVICE_NAME, "unexpected chat completion body") from e

    async def list_models(self) -> list[str]:
        """List model identifiers the key can use."""
        data = await self._http.get_json("/models")
        try:
            return [entry.id for entry in ModelList.model_validate(data).data]
        except ValidationError as e:
            raise ResponseParseError(SERVICE_NAME, "unexpected model list body") from e

    async def aclose(self) -> None:
        await self._http.aclose()
