"""Tests for configuration module."""

import logging
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from depwise.config import (
    ClaudeConfig,
    DepwiseConfig,
    OllamaConfig,
    OpenAIConfig,
    find_config_file,
    generate_example_config,
    load_config,
    validate_config,
)
from depwise.errors import ConfigurationError


def write_config(directory: Path, content: str, name: str = ".depwise.yml") -> Path:
    path = directory / name
    path.write_text(content)
    return path


class TestBackendConfig:
    """Tests for the per-backend configuration sections."""

    def test_default_values(self) -> None:
        """Test default backend values."""
        assert OpenAIConfig().model == "gpt-4"
        assert OpenAIConfig().base_url == "https://api.openai.com/v1"
        assert ClaudeConfig().model == "claude-3-5-sonnet-20241022"
        assert OllamaConfig().enabled is False
        assert OllamaConfig().model == "llama2"
        assert OllamaConfig().temperature is None

    def test_api_key_hidden_from_repr(self) -> None:
        """Test that keys do not leak through repr."""
        assert "sk-secret" not in repr(OpenAIConfig(api_key="sk-secret"))
        assert "sk-ant-secret" not in repr(ClaudeConfig(api_key="sk-ant-secret"))

    def test_invalid_temperature(self) -> None:
        """Test that out-of-range sampling parameters are rejected."""
        with pytest.raises(ValidationError):
            ClaudeConfig(temperature=1.5)
        with pytest.raises(ValidationError):
            OllamaConfig(top_k=0)


class TestDepwiseConfig:
    """Tests for DepwiseConfig."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = DepwiseConfig()
        assert config.default_analyzer == "heuristic"
        assert config.fallback_analyzers == ["heuristic"]
        assert config.enable_heuristic_fallback is True
        assert config.max_retries == 3
        assert config.retry_delay == 2.0
        assert config.request_timeout == 30.0

    def test_analyzer_names_normalized(self) -> None:
        """Test that analyzer names are case and whitespace insensitive."""
        config = DepwiseConfig(default_analyzer=" OpenAI ", fallback_analyzers=["Claude"])
        assert config.default_analyzer == "openai"
        assert config.fallback_analyzers == ["claude"]

    def test_invalid_analyzer_name(self) -> None:
        """Test that unknown analyzer names are rejected."""
        with pytest.raises(ValidationError):
            DepwiseConfig(default_analyzer="gemini")
        with pytest.raises(ValidationError):
            DepwiseConfig(fallback_analyzers=["heuristic", "gemini"])

    def test_negative_retries_rejected(self) -> None:
        """Test retry validation."""
        with pytest.raises(ValidationError):
            DepwiseConfig(max_retries=-1)

    def test_heuristic_fallback_moves_last(self) -> None:
        """Test that the heuristic analyzer ends the fallback order."""
        config = DepwiseConfig(fallback_analyzers=["heuristic", "claude"])
        assert config.effective_fallbacks() == ["claude", "heuristic"]

    def test_heuristic_fallback_disabled(self) -> None:
        """Test that clearing the flag drops the heuristic fallback."""
        config = DepwiseConfig(
            default_analyzer="openai",
            fallback_analyzers=["claude", "heuristic"],
            enable_heuristic_fallback=False,
        )
        assert config.effective_fallbacks() == ["claude"]
        assert config.analyzer_priority() == ["openai", "claude"]

    def test_priority_deduplicated(self) -> None:
        """Test that the default analyzer is not repeated in the order."""
        config = DepwiseConfig(
            default_analyzer="claude", fallback_analyzers=["claude", "openai"]
        )
        assert config.analyzer_priority() == ["claude", "openai", "heuristic"]

    def test_is_configured(self) -> None:
        """Test which analyzers count as constructible."""
        config = DepwiseConfig(
            openai=OpenAIConfig(api_key="sk-test"), ollama=OllamaConfig(enabled=True)
        )
        assert config.is_configured("heuristic")
        assert config.is_configured("openai")
        assert not config.is_configured("claude")
        assert config.is_configured("ollama")

    def test_auto_configure_fallbacks(self) -> None:
        """Test fallback derivation from available credentials."""
        config = DepwiseConfig(
            openai=OpenAIConfig(api_key="sk-test"), ollama=OllamaConfig(enabled=True)
        )
        config.auto_configure_fallbacks()
        assert config.fallback_analyzers == ["openai", "ollama", "heuristic"]
        assert config.default_analyzer == "openai"

    def test_auto_configure_without_credentials(self) -> None:
        """Test that nothing but the heuristic analyzer is derived without keys."""
        config = DepwiseConfig()
        config.auto_configure_fallbacks()
        assert config.fallback_analyzers == ["heuristic"]
        assert config.default_analyzer == "heuristic"

    def test_auto_configure_keeps_explicit_default(self) -> None:
        """Test that a non-heuristic default is not replaced."""
        config = DepwiseConfig(
            default_analyzer="claude", openai=OpenAIConfig(api_key="sk-test")
        )
        config.auto_configure_fallbacks()
        assert config.default_analyzer == "claude"
        assert config.analyzer_priority() == ["claude", "openai", "heuristic"]

    def test_log_configuration_redacts_keys(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that logged configuration never includes full keys."""
        config = DepwiseConfig(openai=OpenAIConfig(api_key="sk-secret-123456"))

        with caplog.at_level(logging.INFO, logger="depwise"):
            config.log_configuration()

        assert "sk-secret" not in caplog.text
        assert "****3456" in caplog.text
        assert "Claude: model=claude-3-5-sonnet-20241022, api key not set" in caplog.text


class TestFindConfigFile:
    """Tests for config file discovery."""

    def test_finds_file_in_parent(self, temp_dir: Path) -> None:
        """Test searching upwards from a nested directory."""
        path = write_config(temp_dir, "version: 1\n")
        nested = temp_dir / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == path.resolve()

    def test_yaml_extension(self, temp_dir: Path) -> None:
        """Test the alternative file extension."""
        path = write_config(temp_dir, "version: 1\n", name=".depwise.yaml")
        assert find_config_file(temp_dir) == path.resolve()


class TestLoadConfig:
    """Tests for loading configuration from file and environment."""

    def test_missing_file_gives_defaults(
        self, temp_dir: Path, clean_env: pytest.MonkeyPatch
    ) -> None:
        """Test loading when the file does not exist."""
        config = load_config(temp_dir / "missing.yml")
        assert config.default_analyzer == "heuristic"
        assert config.fallback_analyzers == ["heuristic"]

    def test_file_values(self, temp_dir: Path, clean_env: pytest.MonkeyPatch) -> None:
        """Test values read from the file."""
        path = write_config(
            temp_dir,
            "default_analyzer: claude\n"
            "fallback_analyzers: [openai, heuristic]\n"
            "max_retries: 1\n"
            "claude:\n"
            "  api_key: sk-ant-file\n"
            "  model: claude-3-haiku-20240307\n",
        )

        config = load_config(path)

        assert config.default_analyzer == "claude"
        assert config.fallback_analyzers == ["openai", "heuristic"]
        assert config.max_retries == 1
        assert config.claude.api_key == "sk-ant-file"
        assert config.claude.model == "claude-3-haiku-20240307"

    def test_environment_overrides_file(
        self, temp_dir: Path, clean_env: pytest.MonkeyPatch
    ) -> None:
        """Test that environment variables win over file values."""
        path = write_config(temp_dir, "openai:\n  api_key: sk-file\n  model: gpt-4o\n")
        clean_env.setenv("OPENAI_API_KEY", "sk-env")

        config = load_config(path)

        assert config.openai.api_key == "sk-env"
        assert config.openai.model == "gpt-4o"
        assert config.default_analyzer == "openai"
        assert config.fallback_analyzers == ["openai", "heuristic"]

    def test_anthropic_key_alias(self, temp_dir: Path, clean_env: pytest.MonkeyPatch) -> None:
        """Test that ANTHROPIC_API_KEY is accepted for Claude."""
        clean_env.setenv("ANTHROPIC_API_KEY", "sk-ant-env")

        config = load_config(temp_dir / "missing.yml")

        assert config.claude.api_key == "sk-ant-env"
        assert config.default_analyzer == "claude"

    def test_ollama_model_enables_ollama(
        self, temp_dir: Path, clean_env: pytest.MonkeyPatch
    ) -> None:
        """Test that setting OLLAMA_MODEL turns the backend on."""
        clean_env.setenv("OLLAMA_MODEL", "mistral")

        config = load_config(temp_dir / "missing.yml")

        assert config.ollama.enabled is True
        assert config.ollama.model == "mistral"
        assert config.analyzer_priority() == ["ollama", "heuristic"]

    def test_default_analyzer_from_environment(
        self, temp_dir: Path, clean_env: pytest.MonkeyPatch
    ) -> None:
        """Test the DEPWISE_DEFAULT_ANALYZER override."""
        path = write_config(temp_dir, "default_analyzer: openai\nfallback_analyzers: []\n")
        clean_env.setenv("DEPWISE_DEFAULT_ANALYZER", "claude")

        config = load_config(path)

        assert config.default_analyzer == "claude"

    def test_invalid_yaml(self, temp_dir: Path, clean_env: pytest.MonkeyPatch) -> None:
        """Test that malformed YAML raises a configuration error."""
        path = write_config(temp_dir, "default_analyzer: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_non_mapping_file(self, temp_dir: Path, clean_env: pytest.MonkeyPatch) -> None:
        """Test that a list at the top level is rejected."""
        path = write_config(temp_dir, "- openai\n- claude\n")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_value(self, temp_dir: Path, clean_env: pytest.MonkeyPatch) -> None:
        """Test that invalid values become configuration errors."""
        path = write_config(temp_dir, "default_analyzer: gemini\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)
        assert "heuristic" in exc_info.value.hint

    def test_example_config_loads(self, temp_dir: Path, clean_env: pytest.MonkeyPatch) -> None:
        """Test that the generated example is a valid configuration."""
        example = generate_example_config()
        assert isinstance(yaml.safe_load(example), dict)

        config = load_config(write_config(temp_dir, example))

        assert config.default_analyzer == "openai"
        assert config.analyzer_priority() == ["openai", "claude", "ollama", "heuristic"]


class TestValidateConfig:
    """Tests for validate_config."""

    def test_defaults_are_valid(self) -> None:
        """Test that the heuristic-only default is usable."""
        validate_config(DepwiseConfig())

    def test_no_usable_analyzer(self) -> None:
        """Test the fatal case of an order with nothing constructible."""
        config = DepwiseConfig(
            default_analyzer="openai",
            fallback_analyzers=["claude"],
            enable_heuristic_fallback=False,
        )
        with pytest.raises(ConfigurationError):
            validate_config(config)

    def test_unconfigured_backend_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a missing key is a warning, not an error."""
        config = DepwiseConfig(default_analyzer="claude")

        with caplog.at_level(logging.WARNING, logger="depwise"):
            validate_config(config)

        assert "Analyzer claude is in the analyzer order but not configured" in caplog.text
