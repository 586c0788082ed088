"""Prompt fragments shared by the hosted backends."""

from depwise.core.models import (
    AnalysisRequest,
    DependencyNode,
    FileChange,
    ProjectContext,
)

JSON_ONLY_REMINDER = (
    "Respond ONLY with valid JSON following the exact schema above, with no additional text."
)

CHANGELOG_SCHEMA = """{
  "has_breaking_change": boolean,
  "breaking_changes": [
    {
      "type": "api_removal|signature_change|behavior_change|deprecation|removal",
      "description": "detailed description of the breaking change",
      "impact": "specific impact on existing code",
      "severity": "low|medium|high|critical",
      "confidence": 0.0-1.0,
      "mitigation": "steps to address this breaking change",
      "affected_apis": ["affected", "APIs"]
    }
  ],
  "new_features": [
    {
      "name": "feature name",
      "description": "detailed description",
      "type": "api|functionality|performance|security",
      "impact": "impact and benefits",
      "confidence": 0.0-1.0
    }
  ],
  "bug_fixes": [
    {
      "description": "the bug that was fixed",
      "impact": "impact of this fix on existing functionality",
      "severity": "low|medium|high|critical",
      "confidence": 0.0-1.0
    }
  ],
  "security_fixes": [
    {
      "description": "the security issue that was fixed",
      "severity": "low|medium|high|critical",
      "cve": "CVE identifier if stated, otherwise empty",
      "cvss": 0.0-10.0 or null,
      "impact": "security impact",
      "confidence": 0.0-1.0
    }
  ],
  "deprecations": [
    {
      "api": "deprecated API or feature",
      "replacement": "recommended replacement",
      "timeline": "deprecation and removal timeline"
    }
  ],
  "risk_level": "low|medium|high|critical",
  "risk_score": 0.0-10.0,
  "confidence": 0.0-1.0,
  "summary": "concise summary of all changes and their implications",
  "recommendations": ["actionable", "recommendations"]
}"""

VERSION_DIFF_SCHEMA = """{
  "update_type": "major|minor|patch|prerelease",
  "semantic_impact": "analysis of semantic versioning implications",
  "api_changes": [
    {
      "type": "addition|modification|removal|deprecation",
      "api": "API name or signature",
      "description": "description of the change",
      "impact": "impact on code using this API",
      "confidence": 0.0-1.0
    }
  ],
  "behavior_changes": [
    {
      "component": "affected component or module",
      "description": "description of the behavioral change",
      "impact": "impact on existing functionality",
      "likelihood": 0.0-1.0
    }
  ],
  "risk_level": "low|medium|high|critical",
  "risk_score": 0.0-10.0,
  "confidence": 0.0-1.0,
  "summary": "summary of the version differences",
  "recommendations": ["actionable", "recommendations"],
  "migration_effort": "low|medium|high|very_high",
  "backward_compatibility": boolean
}"""

COMPATIBILITY_SCHEMA = """{
  "compatibility_score": 0.0-1.0,
  "risk_level": "low|medium|high|critical",
  "risk_score": 0.0-10.0,
  "confidence": 0.0-1.0,
  "potential_issues": [
    {
      "type": "breaking_change|dependency_conflict|version_mismatch|api_incompatibility",
      "description": "description of the potential issue",
      "severity": "low|medium|high|critical",
      "likelihood": 0.0-1.0,
      "mitigation": "mitigation strategy"
    }
  ],
  "migration_steps": [
    {
      "step": "step name",
      "description": "what to do in this step"
    }
  ],
  "testing_recommendations": [
    {
      "type": "unit|integration|e2e|performance|security",
      "description": "specific testing recommendation"
    }
  ],
  "summary": "compatibility assessment summary",
  "recommendations": ["actionable", "recommendations"]
}"""

CLASSIFICATION_SCHEMA = """{
  "update_type": "major|minor|patch|prerelease",
  "priority": "low|medium|high|critical",
  "urgency": "low|medium|high|immediate",
  "categories": [
    {
      "name": "security|feature|bugfix|maintenance|performance",
      "weight": 0.0-1.0,
      "description": "why this category applies"
    }
  ],
  "risk_assessment": {
    "level": "low|medium|high|critical",
    "score": 0.0-10.0,
    "factors": ["risk", "factors"],
    "mitigation": ["mitigation", "strategies"]
  },
  "confidence": 0.0-1.0,
  "summary": "classification summary",
  "recommendations": ["actionable", "recommendations"]
}"""


def package_lines(request: AnalysisRequest) -> list[str]:
    """Bullet lines describing the package under analysis."""
    lines = [
        f"- Package: {request.package_name}",
        f"- Current Version: {request.from_version}",
        f"- Target Version: {request.to_version}",
    ]
    if request.package_manager:
        lines.append(f"- Package Manager: {request.package_manager}")
    if request.language:
        lines.append(f"- Language: {request.language}")
    return lines


def file_change_lines(changes: tuple[FileChange, ...]) -> list[str]:
    return [
        f"- {change.path} ({change.change_type}): "
        f"+{change.lines_added} lines added, -{change.lines_removed} lines removed"
        for change in changes
    ]


def project_context_lines(context: ProjectContext) -> list[str]:
    lines = [
        f"- Language: {context.language or 'unknown'}",
        f"- Framework: {context.framework or 'none'}",
    ]
    if context.test_coverage is not None:
        lines.append(f"- Test Coverage: {context.test_coverage:.0%}")
    if context.dependencies:
        lines.append("- Dependencies:")
        lines.extend(f"  - {dependency}" for dependency in context.dependencies)
    return lines


def dependency_graph_lines(graph: tuple[DependencyNode, ...]) -> list[str]:
    return [f"- {node.name}@{node.version} (type: {node.type})" for node in graph]


def text_or_placeholder(text: str) -> str:
    return text.strip() or "(not provided)"
