"""Analyzer backed by a locally hosted Ollama server.

Besides the analysis operations this analyzer can list the installed models
and switch the active one at runtime. Switching replaces the settings object
in a single assignment, and every call snapshots the settings it starts with,
so an in-flight call never mixes the old model with the new parameters.
"""

import httpx

from depwise.backends.base import BackendAnalyzer, Prompt
from depwise.backends.ollama import prompts
from depwise.backends.ollama.client import SERVICE_NAME, OllamaClient
from depwise.backends.ollama.schemas import OllamaClassificationResult, OllamaModelSettings
from depwise.config import OllamaConfig
from depwise.core.models import (
    ChangelogAnalysisRequest,
    CompatibilityPredictionRequest,
    UpdateClassificationRequest,
    VersionDiffAnalysisRequest,
)
from depwise.errors import ConfigurationError, DepwiseError, ResponseParseError
from depwise.utils.logging import get_logger

logger = get_logger(__name__)

LATEST_TAG = ":latest"

# Generation parameters tuned per popular model
POPULAR_MODEL_PRESETS: dict[str, OllamaModelSettings] = {
    "llama2": OllamaModelSettings(
        model="llama2", temperature=0.7, top_p=0.9, top_k=40, num_predict=2048
    ),
    "codellama": OllamaModelSettings(
        model="codellama", temperature=0.3, top_p=0.8, top_k=30, num_predict=2048
    ),
    "mistral": OllamaModelSettings(
        model="mistral", temperature=0.5, top_p=0.9, top_k=40, num_predict=2048
    ),
    "phi": OllamaModelSettings(
        model="phi", temperature=0.6, top_p=0.85, top_k=35, num_predict=1024
    ),
    "llama2:13b": OllamaModelSettings(
        model="llama2:13b", temperature=0.7, top_p=0.9, top_k=40, num_predict=4096
    ),
    "codellama:13b": OllamaModelSettings(
        model="codellama:13b", temperature=0.3, top_p=0.8, top_k=30, num_predict=4096
    ),
}


def preset_for(model: str) -> OllamaModelSettings:
    """Tuned settings for a model, or generic defaults when none exist.

    A `:latest` tag shares the preset of the bare name but keeps the tagged
    name as the model id.
    """
    preset = POPULAR_MODEL_PRESETS.get(model.removesuffix(LATEST_TAG))
    if preset is None:
        return OllamaModelSettings(model=model)
    return preset.model_copy(update={"model": model})


def installed_name(model: str, installed: list[str]) -> str | None:
    """The installed name matching a model, allowing for the `:latest` tag."""
    if model in installed:
        return model
    if f"{model}{LATEST_TAG}" in installed:
        return f"{model}{LATEST_TAG}"
    return None


def settings_from_config(config: OllamaConfig) -> OllamaModelSettings:
    """Build settings from config, filling unset parameters from the preset."""
    preset = preset_for(config.model)
    return OllamaModelSettings(
        model=config.model,
        temperature=preset.temperature if config.temperature is None else config.temperature,
        top_p=preset.top_p if config.top_p is None else config.top_p,
        top_k=preset.top_k if config.top_k is None else config.top_k,
        num_predict=preset.num_predict if config.num_predict is None else config.num_predict,
    )


class OllamaAnalyzer(BackendAnalyzer):
    """Analyzer using a local Ollama chat endpoint."""

    display_name = SERVICE_NAME

    # local prompts ask for risk scores between 0 and 1
    risk_score_scale = 10.0

    classification_schema = OllamaClassificationResult

    def __init__(
        self,
        config: OllamaConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.client = OllamaClient(
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )
        self._settings = settings_from_config(config)

    @property
    def name(self) -> str:
        return "ollama"

    @property
    def settings(self) -> OllamaModelSettings:
        """Active model settings."""
        return self._settings

    @property
    def model(self) -> str:
        return self._settings.model

    async def list_models(self) -> list[str]:
        """Names of the models installed on the server.

        Raises:
            TransportError: If the server cannot be reached.
        """
        return await self.client.list_models()

    async def available_model_settings(self) -> dict[str, OllamaModelSettings]:
        """Installed models mapped to the settings a switch would apply."""
        return {name: preset_for(name) for name in await self.list_models()}

    async def switch_model(self, model: str) -> OllamaModelSettings:
        """Make another installed model the active one.

        Args:
            model: Model name as listed by the server, with or without the
                `:latest` tag.

        Returns:
            The new active settings.

        Raises:
            ConfigurationError: If the model is not installed.
            TransportError: If the server cannot be reached.
        """
        name = installed_name(model, await self.list_models())
        if name is None:
            raise ConfigurationError(
                f"Ollama model {model} is not available",
                hint=f"Run `ollama pull {model}` first.",
            )

        previous = self._settings.model
        self._settings = preset_for(name)
        logger.info("Switched Ollama model from %s to %s", previous, name)
        return self._settings

    async def is_available(self) -> bool:
        """Whether the server is up and the active model is installed."""
        try:
            installed = await self.list_models()
        except DepwiseError as e:
            logger.debug("Ollama availability check failed: %s", e.message)
            return False

        return installed_name(self._settings.model, installed) is not None

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        settings = self._settings

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})

        response = await self.client.chat(settings.model, messages, settings.options())
        if not response.message.content:
            raise ResponseParseError(SERVICE_NAME, "empty response from Ollama")
        return response.message.content

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
