"""Configuration management for depwise."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from depwise.errors import ConfigurationError
from depwise.utils.logging import get_logger, redact

logger = get_logger(__name__)

HEURISTIC = "heuristic"
OPENAI = "openai"
CLAUDE = "claude"
OLLAMA = "ollama"

ANALYZER_NAMES = (HEURISTIC, OPENAI, CLAUDE, OLLAMA)

CONFIG_FILE_NAMES = (".depwise.yml", ".depwise.yaml")


def _validate_analyzer_name(value: str) -> str:
    name = value.strip().lower()
    if name not in ANALYZER_NAMES:
        raise ValueError(f"analyzer must be one of: {', '.join(ANALYZER_NAMES)} (got {value!r})")
    return name


class OpenAIConfig(BaseModel):
    """Configuration for the OpenAI-compatible chat completions backend."""

    api_key: str | None = Field(
        default=None,
        repr=False,
        description="API key (prefer the OPENAI_API_KEY env var)",
    )
    model: str = Field(default="gpt-4", description="Model identifier")
    max_tokens: int = Field(default=4096, ge=1, description="Maximum output tokens")
    temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    top_p: float = Field(default=1.0, gt=0.0, le=1.0)
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Request timeout in seconds (defaults to request_timeout)",
    )
    base_url: str = Field(default="https://api.openai.com/v1", description="API base URL")


class ClaudeConfig(BaseModel):
    """Configuration for the Anthropic messages backend."""

    api_key: str | None = Field(
        default=None,
        repr=False,
        description="API key (prefer the CLAUDE_API_KEY or ANTHROPIC_API_KEY env var)",
    )
    model: str = Field(default="claude-3-5-sonnet-20241022", description="Model identifier")
    max_tokens: int = Field(default=4096, ge=1, description="Maximum output tokens")
    temperature: float = Field(default=0.1, ge=0.0, le=1.0)
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Request timeout in seconds (defaults to request_timeout)",
    )
    base_url: str = Field(default="https://api.anthropic.com", description="API base URL")


class OllamaConfig(BaseModel):
    """Configuration for a locally hosted Ollama server.

    Generation parameters left unset are filled from the model's tuned
    preset, or generic defaults for models without one.
    """

    enabled: bool = Field(default=False, description="Use the local Ollama server")
    base_url: str = Field(default="http://localhost:11434", description="Ollama server URL")
    model: str = Field(default="llama2", description="Model name as shown by `ollama list`")
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    top_p: float | None = Field(default=None, gt=0.0, le=1.0)
    top_k: int | None = Field(default=None, ge=1)
    num_predict: int | None = Field(default=None, ge=1)
    timeout: float = Field(
        default=120.0,
        gt=0,
        description="Request timeout in seconds; local models can be slow",
    )


class DepwiseConfig(BaseModel):
    """Complete depwise configuration."""

    version: int = Field(default=1, description="Configuration file version")
    default_analyzer: str = Field(
        default=HEURISTIC,
        description="Analyzer tried first (heuristic, openai, claude, ollama)",
    )
    fallback_analyzers: list[str] = Field(
        default_factory=lambda: [HEURISTIC],
        description="Analyzers tried in order after the default fails",
    )
    enable_heuristic_fallback: bool = Field(
        default=True,
        description="Always end the fallback order with the heuristic analyzer",
    )
    max_retries: int = Field(default=3, ge=0, description="Extra attempts per analyzer")
    retry_delay: float = Field(default=2.0, ge=0, description="Seconds between attempts")
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Default backend request timeout in seconds",
    )
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    claude: ClaudeConfig = Field(default_factory=ClaudeConfig)
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)

    @field_validator("default_analyzer")
    @classmethod
    def validate_default_analyzer(cls, v: str) -> str:
        """Validate the default analyzer name."""
        return _validate_analyzer_name(v)

    @field_validator("fallback_analyzers")
    @classmethod
    def validate_fallback_analyzers(cls, v: list[str]) -> list[str]:
        """Validate fallback analyzer names."""
        return [_validate_analyzer_name(name) for name in v]

    def is_configured(self, name: str) -> bool:
        """Whether an analyzer has what it needs to be constructed."""
        if name == HEURISTIC:
            return True
        if name == OPENAI:
            return bool(self.openai.api_key)
        if name == CLAUDE:
            return bool(self.claude.api_key)
        if name == OLLAMA:
            return self.ollama.enabled
        return False

    def effective_fallbacks(self) -> list[str]:
        """Fallback order with the heuristic fallback flag applied.

        When the flag is set the heuristic analyzer is guaranteed to be last;
        when cleared it is dropped unless it is the default analyzer.
        """
        fallbacks = [
            name
            for name in self.fallback_analyzers
            if name != HEURISTIC or self.enable_heuristic_fallback
        ]
        if self.enable_heuristic_fallback:
            fallbacks = [name for name in fallbacks if name != HEURISTIC] + [HEURISTIC]
        return fallbacks

    def analyzer_priority(self) -> list[str]:
        """Effective order: default analyzer then fallbacks, de-duplicated."""
        order: list[str] = []
        for name in [self.default_analyzer, *self.effective_fallbacks()]:
            if name not in order:
                order.append(name)
        return order

    def auto_configure_fallbacks(self) -> None:
        """Derive the fallback order from the available credentials.

        Backends with credentials come first (openai, claude, then ollama when
        enabled), followed by the heuristic analyzer when the fallback flag is
        set. A heuristic default is promoted to the first such backend.
        """
        analyzers = [name for name in (OPENAI, CLAUDE, OLLAMA) if self.is_configured(name)]
        if self.enable_heuristic_fallback:
            analyzers.append(HEURISTIC)
        self.fallback_analyzers = analyzers

        if self.default_analyzer == HEURISTIC and analyzers and analyzers[0] != HEURISTIC:
            self.default_analyzer = analyzers[0]
            logger.info("Default analyzer set to %s (credentials available)", self.default_analyzer)

    def log_configuration(self) -> None:
        """Log the effective configuration without secrets."""
        logger.info("Default analyzer: %s", self.default_analyzer)
        logger.info("Analyzer order: %s", ", ".join(self.analyzer_priority()))
        logger.info(
            "Retries: %d (delay %.1fs), request timeout %.1fs",
            self.max_retries,
            self.retry_delay,
            self.request_timeout,
        )
        logger.info(
            "OpenAI: model=%s, api key %s",
            self.openai.model,
            redact(self.openai.api_key),
        )
        logger.info(
            "Claude: model=%s, api key %s",
            self.claude.model,
            redact(self.claude.api_key),
        )
        logger.info(
            "Ollama: %s, model=%s at %s",
            "enabled" if self.ollama.enabled else "disabled",
            self.ollama.model,
            self.ollama.base_url,
        )


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find the nearest .depwise.yml configuration file.

    Searches from start_path up to the root directory.

    Args:
        start_path: Starting directory for search (defaults to cwd).

    Returns:
        Path to config file if found, None otherwise.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while current != current.parent:
        for name in CONFIG_FILE_NAMES:
            config_path = current / name
            if config_path.exists():
                return config_path
        current = current.parent

    return None


def _section(config_data: dict[str, Any], name: str) -> dict[str, Any]:
    section = config_data.get(name)
    if not isinstance(section, dict):
        section = {}
        config_data[name] = section
    return section


def _apply_environment(config_data: dict[str, Any], env_prefix: str) -> None:
    openai_settings = {
        "api_key": os.environ.get("OPENAI_API_KEY"),
        "model": os.environ.get("OPENAI_MODEL"),
        "base_url": os.environ.get("OPENAI_BASE_URL"),
    }
    for key, value in openai_settings.items():
        if value:
            _section(config_data, OPENAI)[key] = value
    if openai_settings["api_key"]:
        logger.debug("OpenAI API key loaded from environment")

    claude_settings = {
        "api_key": os.environ.get("CLAUDE_API_KEY") or os.environ.get("ANTHROPIC_API_KEY"),
        "model": os.environ.get("CLAUDE_MODEL"),
        "base_url": os.environ.get("CLAUDE_BASE_URL"),
    }
    for key, value in claude_settings.items():
        if value:
            _section(config_data, CLAUDE)[key] = value
    if claude_settings["api_key"]:
        logger.debug("Claude API key loaded from environment")

    ollama_settings = {
        "base_url": os.environ.get("OLLAMA_BASE_URL"),
        "model": os.environ.get("OLLAMA_MODEL"),
    }
    for key, value in ollama_settings.items():
        if value:
            section = _section(config_data, OLLAMA)
            section[key] = value
            section["enabled"] = True
    if ollama_settings["model"]:
        logger.debug("Ollama model loaded from environment: %s", ollama_settings["model"])

    default_analyzer = os.environ.get(f"{env_prefix}DEFAULT_ANALYZER")
    if default_analyzer:
        config_data["default_analyzer"] = default_analyzer


def load_config(
    config_path: Path | None = None,
    env_prefix: str = "DEPWISE_",
) -> DepwiseConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file
    3. Defaults

    When the file sets no ``fallback_analyzers`` the order is derived from the
    available credentials.

    Args:
        config_path: Path to config file (searches if not provided).
        env_prefix: Prefix for depwise-specific environment variables.

    Returns:
        Loaded configuration.

    Raises:
        ConfigurationError: If the file cannot be parsed or a value is invalid.
    """
    config_data: dict[str, Any] = {}

    if config_path is None:
        config_path = find_config_file()

    if config_path and config_path.exists():
        try:
            with open(config_path) as f:
                file_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {config_path}: {e}",
                hint="Check the file against `generate_example_config()`.",
            ) from e
        if file_data:
            if not isinstance(file_data, dict):
                raise ConfigurationError(f"{config_path} must contain a mapping")
            config_data = file_data

    explicit_fallbacks = "fallback_analyzers" in config_data

    _apply_environment(config_data, env_prefix)

    try:
        config = DepwiseConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            hint="Analyzer names must be one of: " + ", ".join(ANALYZER_NAMES),
        ) from e

    if not explicit_fallbacks:
        config.auto_configure_fallbacks()

    return config


def validate_config(config: DepwiseConfig) -> None:
    """Check that a configuration can serve requests.

    Backends without credentials are not fatal; they are skipped when the
    orchestrator is built. A configuration is fatal only when no analyzer
    in its order could ever be constructed.

    Args:
        config: Configuration to validate.

    Raises:
        ConfigurationError: If no usable analyzer remains.
    """
    order = config.analyzer_priority()
    usable = [name for name in order if config.is_configured(name)]

    if not usable:
        raise ConfigurationError(
            f"No usable analyzer configured (order: {', '.join(order)})",
            hint=(
                "Enable the heuristic fallback, set OPENAI_API_KEY or CLAUDE_API_KEY, "
                "or enable ollama."
            ),
        )

    for name in order:
        if name not in usable:
            logger.warning("Analyzer %s is in the analyzer order but not configured", name)


def generate_example_config() -> str:
    """Generate an example configuration file.

    Returns:
        YAML string of example configuration.
    """
    example = """# depwise configuration

version: 1

# Analyzer tried first: heuristic, openai, claude or ollama
default_analyzer: openai

# Analyzers tried in order when the default fails.
# Omit to derive the order from the available API keys.
fallback_analyzers:
  - claude
  - ollama
  - heuristic

# Always finish with the offline heuristic analyzer
enable_heuristic_fallback: true

# Extra attempts per analyzer and the delay between them (seconds)
max_retries: 3
retry_delay: 2.0

# Default backend request timeout (seconds)
request_timeout: 30.0

# OpenAI-compatible backend (API key via OPENAI_API_KEY env var)
openai:
  model: gpt-4
  max_tokens: 4096
  temperature: 0.1
  top_p: 1.0
  base_url: https://api.openai.com/v1

# Anthropic backend (API key via CLAUDE_API_KEY or ANTHROPIC_API_KEY env var)
claude:
  model: claude-3-5-sonnet-20241022
  max_tokens: 4096
  temperature: 0.1
  base_url: https://api.anthropic.com

# Local Ollama server; generation parameters default to the model's preset
ollama:
  enabled: false
  base_url: http://localhost:11434
  model: llama2
  timeout: 120
"""
    return example
