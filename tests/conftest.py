"""Pytest configuration and fixtures for depwise tests."""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from depwise.core.models import (
    ChangelogAnalysisRequest,
    CompatibilityPredictionRequest,
    DependencyNode,
    FileChange,
    ProjectContext,
    UpdateClassificationRequest,
    VersionDiffAnalysisRequest,
)

ENVIRONMENT_VARIABLES = (
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "CLAUDE_API_KEY",
    "ANTHROPIC_API_KEY",
    "CLAUDE_MODEL",
    "CLAUDE_BASE_URL",
    "OLLAMA_BASE_URL",
    "OLLAMA_MODEL",
    "DEPWISE_DEFAULT_ANALYZER",
)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every environment variable the config loader reads."""
    for name in ENVIRONMENT_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def changelog_request() -> ChangelogAnalysisRequest:
    """A major update whose changelog mentions a breaking change and a CVE."""
    return ChangelogAnalysisRequest(
        package_name="requests",
        from_version="1.2.3",
        to_version="2.0.0",
        package_manager="pip",
        language="python",
        changelog=(
            "BREAKING CHANGE: the session API was redesigned.\n"
            "Fixes CVE-2024-1234 (CVSS 8.1) in header parsing.\n"
        ),
    )


@pytest.fixture
def version_diff_request() -> VersionDiffAnalysisRequest:
    """A minor update with one removed file."""
    return VersionDiffAnalysisRequest(
        package_name="lodash",
        from_version="4.16.0",
        to_version="4.17.0",
        package_manager="npm",
        language="javascript",
        file_changes=(
            FileChange(path="lib/fp.js", change_type="deleted", lines_removed=120),
            FileChange(path="lib/core.js", lines_added=10, lines_removed=4),
        ),
    )


@pytest.fixture
def compatibility_request() -> CompatibilityPredictionRequest:
    """A major update for a poorly tested project."""
    return CompatibilityPredictionRequest(
        package_name="django",
        from_version="3.2.0",
        to_version="4.0.0",
        package_manager="pip",
        project_context=ProjectContext(
            language="python",
            framework="django",
            dependencies=("celery", "psycopg2"),
            test_coverage=0.3,
        ),
        dependency_graph=(DependencyNode(name="django", version="3.2.0"),),
    )


@pytest.fixture
def classification_request() -> UpdateClassificationRequest:
    """A patch update that fixes a vulnerability."""
    return UpdateClassificationRequest(
        package_name="express",
        from_version="4.18.1",
        to_version="4.18.2",
        package_manager="npm",
        changelog="Security fix for a vulnerability in query parsing.",
    )
