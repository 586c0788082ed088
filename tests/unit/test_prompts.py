"""Tests for prompt rendering."""

from types import ModuleType

import pytest

from depwise.backends import prompts
from depwise.backends.claude import prompts as claude_prompts
from depwise.backends.ollama import prompts as ollama_prompts
from depwise.backends.openai import prompts as openai_prompts
from depwise.core.models import (
    ChangelogAnalysisRequest,
    CompatibilityPredictionRequest,
    FileChange,
    ProjectContext,
    UpdateClassificationRequest,
    VersionDiffAnalysisRequest,
)

BACKEND_PROMPTS = [openai_prompts, claude_prompts, ollama_prompts]


class TestPromptFragments:
    """Tests for the shared prompt fragments."""

    def test_package_lines(self, changelog_request: ChangelogAnalysisRequest) -> None:
        """Test the package description block."""
        assert prompts.package_lines(changelog_request) == [
            "- Package: requests",
            "- Current Version: 1.2.3",
            "- Target Version: 2.0.0",
            "- Package Manager: pip",
            "- Language: python",
        ]

    def test_file_change_lines(self) -> None:
        """Test per-file change rendering."""
        lines = prompts.file_change_lines(
            (FileChange(path="lib/fp.js", change_type="deleted", lines_removed=120),)
        )
        assert lines == ["- lib/fp.js (deleted): +0 lines added, -120 lines removed"]

    def test_project_context_lines(self) -> None:
        """Test project context rendering with coverage and dependencies."""
        lines = prompts.project_context_lines(
            ProjectContext(language="python", dependencies=("celery",), test_coverage=0.3)
        )
        assert "- Framework: none" in lines
        assert "- Test Coverage: 30%" in lines
        assert lines[-1] == "  - celery"

    def test_text_placeholder(self) -> None:
        """Test the placeholder for missing text."""
        assert prompts.text_or_placeholder("  ") == "(not provided)"


class TestBackendPrompts:
    """Tests for the per-backend prompt builders."""

    @pytest.mark.parametrize("module", BACKEND_PROMPTS)
    def test_changelog_prompt(
        self, module: ModuleType, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test that the changelog and package identity reach the prompt."""
        _, user_prompt = module.build_changelog_prompt(changelog_request)
        assert "requests" in user_prompt
        assert "CVE-2024-1234" in user_prompt
        assert "risk_level" in user_prompt

    @pytest.mark.parametrize("module", BACKEND_PROMPTS)
    def test_version_diff_prompt(
        self, module: ModuleType, version_diff_request: VersionDiffAnalysisRequest
    ) -> None:
        """Test that file changes reach the prompt."""
        _, user_prompt = module.build_version_diff_prompt(version_diff_request)
        assert "lib/fp.js" in user_prompt
        assert "4.17.0" in user_prompt

    @pytest.mark.parametrize("module", BACKEND_PROMPTS)
    def test_compatibility_prompt(
        self, module: ModuleType, compatibility_request: CompatibilityPredictionRequest
    ) -> None:
        """Test that the project context reaches the prompt."""
        _, user_prompt = module.build_compatibility_prompt(compatibility_request)
        assert "django" in user_prompt
        assert "psycopg2" in user_prompt

    @pytest.mark.parametrize("module", BACKEND_PROMPTS)
    def test_classification_prompt(
        self, module: ModuleType, classification_request: UpdateClassificationRequest
    ) -> None:
        """Test that the changelog reaches the classification prompt."""
        _, user_prompt = module.build_classification_prompt(classification_request)
        assert "express" in user_prompt
        assert "query parsing" in user_prompt

    def test_hosted_backends_use_system_prompts(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test that OpenAI and Claude send a system prompt and Ollama does not."""
        assert openai_prompts.build_changelog_prompt(changelog_request)[0]
        assert claude_prompts.build_changelog_prompt(changelog_request)[0]
        assert ollama_prompts.build_changelog_prompt(changelog_request)[0] == ""

    def test_ollama_asks_for_unit_risk_scores(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test that local models are asked for 0-1 risk scores."""
        _, user_prompt = ollama_prompts.build_changelog_prompt(changelog_request)
        assert "Respond ONLY with valid JSON" in user_prompt
        assert "0.0-10.0" not in user_prompt
