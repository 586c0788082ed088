"""Client for a local Ollama server."""

from typing import Any

import httpx
from pydantic import ValidationError

from depwise.backends.ollama.schemas import ChatResponse, ModelsResponse
from depwise.errors import ResponseParseError
from depwise.utils.http import AsyncHttpClient

SERVICE_NAME = "Ollama"


class OllamaClient:
    """Wrapper over ``/api/chat`` and ``/api/tags``."""

    def __init__(
        self,
        base_url: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = AsyncHttpClient(
            service=SERVICE_NAME,
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def chat(
        self,
        model: str,
        messages: list[dict[str, str]],
        options: dict[str, Any] | None = None,
    ) -> ChatResponse:
        """Run one non-streaming chat completion.

        Args:
            model: Installed model name.
            messages: Chat messages in role/content form.
            options: Generation options (temperature, top_p, top_k, num_predict).

        Returns:
            Decoded chat response.
        """
        body: dict[str, Any] = {"model": model, "messages": messages, "stream": False}
        if options:
            body["options"] = options

        data = await self._http.post_json("/api/chat", json=body)
        try:
            return ChatResponse.model_validate(data)
        except ValidationError as e:
            raise ResponseParseError(SERVICE_NAME, "unexpected chat body") from e

    async def list_models(self) -> list[str]:
        """Names of the models installed on the server."""
        data = await self._http.get_json("/api/tags")
        try:
            return [model.name for model in ModelsResponse.model_validate(data).models]
        except ValidationError as e:
            raise ResponseParseError(SERVICE_NAME, "unexpected model list body") from e

    async def aclose(self) -> None:
        await self._http.aclose()
