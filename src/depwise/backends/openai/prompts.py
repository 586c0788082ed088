"""Prompts for the OpenAI chat completions backend."""

from depwise.backends.prompts import (
    CHANGELOG_SCHEMA,
    CLASSIFICATION_SCHEMA,
    COMPATIBILITY_SCHEMA,
    JSON_ONLY_REMINDER,
    VERSION_DIFF_SCHEMA,
    dependency_graph_lines,
    file_change_lines,
    package_lines,
    project_context_lines,
    text_or_placeholder,
)
from depwise.core.models import (
    ChangelogAnalysisRequest,
    CompatibilityPredictionRequest,
    UpdateClassificationRequest,
    VersionDiffAnalysisRequest,
)

CHANGELOG_SYSTEM_PROMPT = """You are an expert software dependency analyst with deep knowledge of package management, semantic versioning, and software engineering best practices. Your task is to analyze changelog text and provide detailed insights about dependency updates.

Focus on:
1. Breaking changes that could affect existing code
2. Security fixes and vulnerabilities
3. New features and their potential impact
4. Bug fixes and their significance
5. Deprecations and migration requirements

Always respond with valid JSON only. Be precise and conservative in your assessments; never invent CVE identifiers."""

VERSION_DIFF_SYSTEM_PROMPT = """You are a senior software engineer analyzing the differences between two releases of a package. Assess semantic versioning compliance, API surface changes and behavioral changes, and estimate the migration effort for consumers.

Always respond with valid JSON only."""

COMPATIBILITY_SYSTEM_PROMPT = """You are a software compatibility expert. Given a package update and the consuming project's context, predict concrete compatibility issues, how likely each is, and how to mitigate them.

Always respond with valid JSON only."""

CLASSIFICATION_SYSTEM_PROMPT = """You are a release management specialist. Classify dependency updates by type, priority, urgency and category, and assess their risk.

Always respond with valid JSON only."""


def _join(sections: list[str]) -> str:
    return "\n".join(sections)


def build_changelog_prompt(request: ChangelogAnalysisRequest) -> tuple[str, str]:
    prompt = _join(
        [
            f'Analyze the following changelog for package "{request.package_name}" '
            f"updating from version {request.from_version} to {request.to_version}.",
            "",
            "Package Information:",
            *package_lines(request),
            "",
            "Changelog Text:",
            text_or_placeholder(request.changelog),
            "",
            "Release Notes:",
            text_or_placeholder(request.release_notes),
            "",
            "Provide a comprehensive analysis in the following JSON format:",
            "",
            CHANGELOG_SCHEMA,
            "",
            JSON_ONLY_REMINDER,
        ]
    )
    return CHANGELOG_SYSTEM_PROMPT, prompt


def build_version_diff_prompt(request: VersionDiffAnalysisRequest) -> tuple[str, str]:
    prompt = _join(
        [
            f'Analyze the version difference for package "{request.package_name}" '
            f"from {request.from_version} to {request.to_version}.",
            "",
            "Package Information:",
            *package_lines(request),
            "",
            "Diff:",
            text_or_placeholder(request.diff_text),
            "",
            "File Changes:",
            *(file_change_lines(request.file_changes) or ["(none listed)"]),
            "",
            "Provide your analysis in the following JSON format:",
            "",
            VERSION_DIFF_SCHEMA,
            "",
            JSON_ONLY_REMINDER,
        ]
    )
    return VERSION_DIFF_SYSTEM_PROMPT, prompt


def build_compatibility_prompt(request: CompatibilityPredictionRequest) -> tuple[str, str]:
    prompt = _join(
        [
            f'Predict compatibility issues for updating package "{request.package_name}" '
            f"from {request.from_version} to {request.to_version}.",
            "",
            "Package Information:",
            *package_lines(request),
            "",
            "Project Context:",
            *project_context_lines(request.project_context),
            "",
            "Dependency Graph:",
            *(dependency_graph_lines(request.dependency_graph) or ["(not provided)"]),
            "",
            "Provide your prediction in the following JSON format:",
            "",
            COMPATIBILITY_SCHEMA,
            "",
            JSON_ONLY_REMINDER,
        ]
    )
    return COMPATIBILITY_SYSTEM_PROMPT, prompt


def build_classification_prompt(request: UpdateClassificationRequest) -> tuple[str, str]:
    prompt = _join(
        [
            f'Classify the update for package "{request.package_name}" '
            f"from {request.from_version} to {request.to_version}.",
            "",
            "Package Information:",
            *package_lines(request),
            "",
            "Changelog Text:",
            text_or_placeholder(request.changelog),
            "",
            "Release Notes:",
            text_or_placeholder(request.release_notes),
            "",
            "Project Context:",
            *project_context_lines(request.project_context),
            "",
            "Category weights are independent relevance scores and need not sum to 1.0.",
            "Provide your classification in the following JSON format:",
            "",
            CLASSIFICATION_SCHEMA,
            "",
            JSON_ONLY_REMINDER,
        ]
    )
    return CLASSIFICATION_SYSTEM_PROMPT, prompt
