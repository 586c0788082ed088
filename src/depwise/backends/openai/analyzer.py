"""Analyzer backed by an OpenAI-compatible chat completions API."""

import httpx

from depwise.backends.base import BackendAnalyzer, Prompt
from depwise.backends.openai import prompts
from depwise.backends.openai.client import SERVICE_NAME, OpenAIClient
from depwise.config import OpenAIConfig
from depwise.core.models import (
    ChangelogAnalysisRequest,
    CompatibilityPredictionRequest,
    UpdateClassificationRequest,
    VersionDiffAnalysisRequest,
)
from depwise.errors import DepwiseError, MissingCredentialError, ResponseParseError
from depwise.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


class OpenAIAnalyzer(BackendAnalyzer):
    """Analyzer using OpenAI chat completions in JSON mode."""

    display_name = SERVICE_NAME

    def __init__(
        self,
        config: OpenAIConfig,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the analyzer.

        Args:
            config: Backend configuration.
            timeout: Fallback request timeout when the config sets none.
            transport: Optional httpx transport (tests inject a MockTransport).

        Raises:
            MissingCredentialError: If no API key is configured.
        """
        if not config.api_key:
            raise MissingCredentialError("OpenAI", env_var="OPENAI_API_KEY")

        self.config = config
        self.timeout = config.timeout or timeout or DEFAULT_TIMEOUT
        self.client = OpenAIClient(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=self.timeout,
            transport=transport,
        )

    @property
    def name(self) -> str:
        return "openai"

    async def is_available(self) -> bool:
        """Probe the models endpoint."""
        try:
            await self.client.list_models()
        except DepwiseError as e:
            logger.debug("OpenAI availability check failed: %s", e.message)
            return False
        return True

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        completion = await self.client.create_chat_completion(
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            model=self.config.model,
            temperature=self.config.temperature,
            top_p=self.config.top_p,
            max_tokens=self.config.max_tokens,
        )
        if not completion.choices or not completion.choices[0].message.content:
            raise ResponseParseError(SERVICE_NAME, "no response from OpenAI")
        return completion.choices[0].message.content

    def build_changelog_prompt(self, request: ChangelogAnalysisRequest) -> Prompt:
        return prompts.build_changelog_prompt(request)

    def build_version_diff_prompt(self, request: VersionDiffAnalysisRequest) -> Prompt:
        return prompts.build_version_diff_prompt(request)

    def build_compatibility_prompt(self, request: CompatibilityPredictionRequest) -> Prompt:
        return prompts.build_compatibility_prompt(request)

    def build_classification_prompt(self, request: UpdateClassificationRequest) -> Prompt:
        return prompts.build_classification_prompt(request)

    async def aclose(self) -> None:
        await self.client.aclose()
