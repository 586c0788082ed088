"""Prompts for local models.

Local models follow short, flat schemas more reliably, so these shapes are
simpler than the hosted ones and ask for risk scores between 0 and 1.
"""

from depwise.backends.prompts import (
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

ANALYST_ROLE = "You are an expert software dependency analyst."
JSON_ONLY = "- Respond ONLY with valid JSON, no additional text"

CHANGELOG_SHAPE = """{
  "risk_level": "low|medium|high|critical",
  "risk_score": 0.0-1.0,
  "confidence": 0.0-1.0,
  "summary": "Brief summary of changes",
  "recommendations": ["recommendation1", "recommendation2"],
  "has_breaking_change": true|false,
  "breaking_changes": [
    {"type": "api|behavior|dependency", "description": "...", "impact": "...", "confidence": 0.0-1.0, "mitigation": "..."}
  ],
  "new_features": [
    {"name": "...", "description": "...", "type": "api|ui|performance|security", "impact": "...", "confidence": 0.0-1.0}
  ],
  "bug_fixes": [
    {"description": "...", "impact": "...", "severity": "low|medium|high|critical", "confidence": 0.0-1.0}
  ],
  "security_fixes": [
    {"cve": "CVE identifier if stated", "severity": "low|medium|high|critical", "description": "...", "impact": "...", "confidence": 0.0-1.0}
  ],
  "deprecations": [
    {"api": "...", "replacement": "...", "timeline": "..."}
  ]
}"""

VERSION_DIFF_SHAPE = """{
  "update_type": "major|minor|patch",
  "semantic_impact": "Description of semantic versioning impact",
  "risk_level": "low|medium|high|critical",
  "risk_score": 0.0-1.0,
  "confidence": 0.0-1.0,
  "summary": "Brief summary of version differences",
  "recommendations": ["recommendation1", "recommendation2"],
  "api_changes": [
    {"type": "added|modified|removed", "api": "...", "description": "...", "impact": "..."}
  ],
  "behavior_changes": [
    {"component": "...", "description": "...", "impact": "..."}
  ]
}"""

COMPATIBILITY_SHAPE = """{
  "compatibility_score": 0.0-1.0,
  "risk_level": "low|medium|high|critical",
  "risk_score": 0.0-1.0,
  "confidence": 0.0-1.0,
  "summary": "Compatibility assessment summary",
  "recommendations": ["recommendation1", "recommendation2"],
  "potential_issues": [
    {"type": "breaking_change|dependency_conflict|api_deprecation", "description": "...", "severity": "low|medium|high|critical", "likelihood": 0.0-1.0, "mitigation": "..."}
  ]
}"""

CLASSIFICATION_SHAPE = """{
  "update_type": "major|minor|patch",
  "priority": "low|medium|high|critical",
  "urgency": "low|medium|high|immediate",
  "risk_level": "low|medium|high|critical",
  "risk_score": 0.0-1.0,
  "confidence": 0.0-1.0,
  "summary": "Classification summary",
  "recommendations": ["recommendation1", "recommendation2"],
  "categories": {"security": 0.0-1.0, "feature": 0.0-1.0, "bugfix": 0.0-1.0, "maintenance": 0.0-1.0, "performance": 0.0-1.0}
}"""


def _render(task: str, body: list[str], shape: str, guidelines: list[str]) -> str:
    return "\n".join(
        [
            f"{ANALYST_ROLE} {task}",
            "",
            *body,
            "",
            "Respond with a JSON object with the following structure:",
            "",
            shape,
            "",
            "**Important Guidelines:**",
            *guidelines,
            JSON_ONLY,
        ]
    )


def build_changelog_prompt(request: ChangelogAnalysisRequest) -> tuple[str, str]:
    body = [
        "**Package Information:**",
        *package_lines(request),
        "",
        "**Changelog Content:**",
        text_or_placeholder(request.changelog),
    ]
    if request.release_notes:
        body += ["", "**Release Notes:**", request.release_notes]

    prompt = _render(
        "Analyze the following package changelog.",
        body,
        CHANGELOG_SHAPE,
        [
            "- Focus on breaking changes, security fixes, and significant new features",
            "- Provide realistic confidence scores based on changelog clarity",
            "- Only include items that are clearly mentioned in the changelog",
        ],
    )
    return "", prompt


def build_version_diff_prompt(request: VersionDiffAnalysisRequest) -> tuple[str, str]:
    body = [
        "**Package Information:**",
        *package_lines(request),
        "",
        "**Version Diff Content:**",
        text_or_placeholder(request.diff_text),
    ]
    changes = file_change_lines(request.file_changes)
    if changes:
        body += ["", "**File Changes:**", *changes]

    prompt = _render(
        "Analyze the following version differences.",
        body,
        VERSION_DIFF_SHAPE,
        [
            "- Classify update type based on semantic versioning principles",
            "- Assess risk based on potential breaking changes",
        ],
    )
    return "", prompt


def build_compatibility_prompt(request: CompatibilityPredictionRequest) -> tuple[str, str]:
    body = [
        "**Package Information:**",
        *package_lines(request),
        "",
        "**Project Context:**",
        *project_context_lines(request.project_context),
    ]
    graph = dependency_graph_lines(request.dependency_graph)
    if graph:
        body += ["", "**Dependency Graph:**", *graph]

    prompt = _render(
        "Predict compatibility for the following package update.",
        body,
        COMPATIBILITY_SHAPE,
        [
            "- Consider project context and existing dependencies",
            "- Higher compatibility scores indicate fewer expected issues",
        ],
    )
    return "", prompt


def build_classification_prompt(request: UpdateClassificationRequest) -> tuple[str, str]:
    body = ["**Package Information:**", *package_lines(request)]
    if request.changelog:
        body += ["", "**Changelog:**", request.changelog]
    if request.release_notes:
        body += ["", "**Release Notes:**", request.release_notes]
    body += ["", "**Project Context:**", *project_context_lines(request.project_context)]

    prompt = _render(
        "Classify the following package update.",
        body,
        CLASSIFICATION_SHAPE,
        [
            "- Urgency reflects time sensitivity (security fixes are typically urgent)",
            "- Only list categories that apply",
        ],
    )
    return "", prompt
