"""Prompts for the Claude backend.

System prompts set the analyst role; user prompts carry the request and the
exact JSON shape to return.
"""

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

CHANGELOG_SYSTEM_PROMPT = """You are an expert software dependency analyst with deep expertise in package management, semantic versioning, and software engineering best practices. Your role is to analyze changelog text and provide detailed, actionable insights about dependency updates.

Pay special attention to:
- Breaking changes that require code modifications
- Security vulnerabilities and their severity
- Deprecations and their removal timelines
- Migration complexity

Only report CVE identifiers that appear in the text. Your response must contain only valid JSON."""

VERSION_DIFF_SYSTEM_PROMPT = """You are a senior software engineer specializing in dependency management and version analysis. Your expertise covers semantic versioning, API design, and software architecture across multiple programming languages and ecosystems.

Analyze version differences with precision, focusing on API surface changes, behavioral modifications and backward compatibility. Your response must contain only valid JSON."""

COMPATIBILITY_SYSTEM_PROMPT = """You are a software compatibility expert with extensive knowledge of dependency management, software ecosystems, and integration challenges. Your role is to predict potential compatibility issues and provide actionable migration guidance.

Your response must contain only valid JSON."""

CLASSIFICATION_SYSTEM_PROMPT = """You are a software update classification specialist with expertise in release management and risk assessment. Your role is to classify updates based on their content, impact, and urgency.

Your response must contain only valid JSON."""

PRIORITY_GUIDELINES = """**Priority Guidelines:**
- **Critical**: Security vulnerabilities, critical bug fixes, or breaking changes affecting core functionality
- **High**: Important features, significant bug fixes, or performance improvements
- **Medium**: Minor features, non-critical bug fixes, or maintenance updates
- **Low**: Documentation updates, minor improvements, or optional enhancements"""


def _join(sections: list[str]) -> str:
    return "\n".join(sections)


def build_changelog_prompt(request: ChangelogAnalysisRequest) -> tuple[str, str]:
    prompt = _join(
        [
            "I need you to analyze the following changelog for a software dependency update. "
            "Focus on breaking changes, security implications, and migration guidance.",
            "",
            "**Package Information:**",
            *package_lines(request),
            "",
            "**Changelog Content:**",
            text_or_placeholder(request.changelog),
            "",
            "**Release Notes:**",
            text_or_placeholder(request.release_notes),
            "",
            "Provide your response in the following JSON format:",
            "",
            CHANGELOG_SCHEMA,
            "",
            "Base confidence scores on the quality and completeness of the changelog.",
            JSON_ONLY_REMINDER,
        ]
    )
    return CHANGELOG_SYSTEM_PROMPT, prompt


def build_version_diff_prompt(request: VersionDiffAnalysisRequest) -> tuple[str, str]:
    prompt = _join(
        [
            "I need you to analyze version differences between two releases of a software "
            "package. Focus on semantic versioning compliance, API changes, and behavioral "
            "modifications.",
            "",
            "**Package Information:**",
            *package_lines(request),
            "",
            "**Version Diff Content:**",
            text_or_placeholder(request.diff_text),
            "",
            "**File Changes Summary:**",
            *(file_change_lines(request.file_changes) or ["(none listed)"]),
            "",
            "Provide your response in the following JSON format:",
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
            "I need you to predict potential compatibility issues when updating a software "
            "dependency. Consider the project context and dependency relationships.",
            "",
            "**Package Information:**",
            *package_lines(request),
            "",
            "**Project Context:**",
            *project_context_lines(request.project_context),
            "",
            "**Current Dependency Graph:**",
            *(dependency_graph_lines(request.dependency_graph) or ["(not provided)"]),
            "",
            "Provide your response in the following JSON format:",
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
            "I need you to classify a software dependency update based on its content and "
            "impact. Focus on categorization, priority assessment, and urgency.",
            "",
            "**Package Information:**",
            *package_lines(request),
            "",
            "**Changelog Content:**",
            text_or_placeholder(request.changelog),
            "",
            "**Release Notes:**",
            text_or_placeholder(request.release_notes),
            "",
            "**Project Context:**",
            *project_context_lines(request.project_context),
            "",
            "Provide your response in the following JSON format:",
            "",
            CLASSIFICATION_SCHEMA,
            "",
            PRIORITY_GUIDELINES,
            "",
            "Category weights are independent relevance scores and need not sum to 1.0.",
            JSON_ONLY_REMINDER,
        ]
    )
    return CLASSIFICATION_SYSTEM_PROMPT, prompt
