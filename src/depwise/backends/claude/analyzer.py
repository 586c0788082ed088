"""Analyzer backed by Anthropic's Claude models."""

import httpx

from depwise.backends.base import BackendAnalyzer, Prompt
from depwise.backends.claude import prompts
from depwise.backends.claude.client import SERVICE_NAME, ClaudeClient
from depwise.config import ClaudeConfig
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


class ClaudeAnalyzer(BackendAnalyzer):
    """Analyzer using the Anthropic messages API."""

    display_name = SERVICE_NAME

    def __init__(
        self,
        config: ClaudeConfig,
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
            raise MissingCredentialError("Claude", env_var="CLAUDE_API_KEY")

        self.config = config
        self.timeout = config.timeout or timeout or DEFAULT_TIMEOUT
        self.client = ClaudeClient(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=self.timeout,
            transport=transport,
        )

    @property
    def name(self) -> str:
        return "claude"

    async def is_available(self) -> bool:
        """Probe with a minimal one-token message."""
        try:
            await self.client.create_message(
                "Hello",
                model=self.config.model,
                max_tokens=1,
                temperature=self.config.temperature,
            )
        except DepwiseError as e:
            logger.debug("Claude availability check failed: %s", e.message)
            return False
        return True

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        message = await self.client.create_message(
            user_prompt,
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            system=system_prompt,
        )
        text = message.text
        if not text:
            raise ResponseParseError(SERVICE_NAME, "no response from Claude")
        return text

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
