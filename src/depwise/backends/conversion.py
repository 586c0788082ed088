"""Map decoded model output onto the canonical response models.

Unrecognized enum strings degrade to a safe middle value instead of failing
the analysis. Package identity always comes from the request.
"""

from depwise.analysis.heuristic_analyzer import (
    COMPATIBILITY_SCORES,
    DEFAULT_COMPATIBILITY_SCORE,
    determine_update_type,
    risk_score_for,
)
from depwise.backends.schemas import (
    ChangelogResult,
    ClassificationResult,
    CompatibilityResult,
    VersionDiffResult,
)
from depwise.core.models import (
    AnalysisRequest,
    APIChange,
    BehaviorChange,
    BreakingChange,
    BugFix,
    ChangelogAnalysisRequest,
    ChangelogAnalysisResponse,
    CompatibilityIssue,
    CompatibilityPredictionRequest,
    CompatibilityPredictionResponse,
    Deprecation,
    Feature,
    MigrationEffort,
    Priority,
    RiskAssessment,
    RiskLevel,
    SecurityFix,
    Severity,
    UpdateCategory,
    UpdateCategoryName,
    UpdateClassificationRequest,
    UpdateClassificationResponse,
    UpdateType,
    Urgency,
    VersionDiffAnalysisRequest,
    VersionDiffAnalysisResponse,
)

DEFAULT_CONFIDENCE = 0.5

CATEGORY_ALIASES = {
    "bug_fix": UpdateCategoryName.BUGFIX,
    "bug": UpdateCategoryName.BUGFIX,
    "bugfixes": UpdateCategoryName.BUGFIX,
    "features": UpdateCategoryName.FEATURE,
    "documentation": UpdateCategoryName.MAINTENANCE,
    "docs": UpdateCategoryName.MAINTENANCE,
    "unknown": UpdateCategoryName.MAINTENANCE,
}


def _normalize(value: str) -> str:
    return value.strip().lower().replace(" ", "_").replace("-", "_")


def parse_risk_level(value: str) -> RiskLevel:
    try:
        return RiskLevel(_normalize(value))
    except ValueError:
        return RiskLevel.MEDIUM


def parse_priority(value: str) -> Priority:
    try:
        return Priority(_normalize(value))
    except ValueError:
        return Priority.MEDIUM


def parse_urgency(value: str) -> Urgency:
    normalized = _normalize(value)
    if normalized == "critical":
        return Urgency.IMMEDIATE
    try:
        return Urgency(normalized)
    except ValueError:
        return Urgency.MEDIUM


def parse_severity(value: str) -> Severity:
    try:
        return Severity(_normalize(value))
    except ValueError:
        return Severity.MEDIUM


def parse_migration_effort(value: str) -> MigrationEffort:
    try:
        return MigrationEffort(_normalize(value))
    except ValueError:
        return MigrationEffort.MEDIUM


def parse_update_type(value: str, request: AnalysisRequest) -> UpdateType:
    """Parse an update type, falling back to semantic-version classification."""
    try:
        update_type = UpdateType(_normalize(value))
    except ValueError:
        update_type = UpdateType.UNKNOWN
    if update_type == UpdateType.UNKNOWN:
        return determine_update_type(request.from_version, request.to_version)
    return update_type


def parse_category(value: str) -> UpdateCategoryName:
    normalized = _normalize(value)
    if normalized in CATEGORY_ALIASES:
        return CATEGORY_ALIASES[normalized]
    try:
        return UpdateCategoryName(normalized)
    except ValueError:
        return UpdateCategoryName.MAINTENANCE


def clamp(value: float | None, low: float, high: float, default: float) -> float:
    """Clamp a possibly missing number into [low, high]."""
    if value is None:
        return default
    return min(high, max(low, value))


def clamp_unit(value: float | None, default: float = DEFAULT_CONFIDENCE) -> float:
    return clamp(value, 0.0, 1.0, default)


def risk_score(value: float | None, level: RiskLevel, scale: float = 1.0) -> float:
    """Risk score on the 0-10 scale; missing scores derive from the level."""
    if value is None:
        return risk_score_for(level)
    return clamp(value * scale, 0.0, 10.0, risk_score_for(level))


def summary_or_default(summary: str, request: AnalysisRequest, label: str, service: str) -> str:
    summary = summary.strip()
    if summary:
        return summary
    return (
        f"{label} for {request.package_name} "
        f"{request.from_version} -> {request.to_version} ({service})"
    )


def _recommendations(items: list[str]) -> list[str]:
    return [item.strip() for item in items if item.strip()]


def to_changelog_response(
    request: ChangelogAnalysisRequest,
    result: ChangelogResult,
    analyzer: str,
    risk_score_scale: float = 1.0,
) -> ChangelogAnalysisResponse:
    level = parse_risk_level(result.risk_level)

    breaking_changes = [
        BreakingChange(
            change_type=item.type or "unspecified",
            description=item.description,
            impact=item.impact or item.severity or "medium",
            confidence=clamp_unit(item.confidence),
            mitigation=item.mitigation,
        )
        for item in result.breaking_changes
    ]
    # listed breaking changes imply the flag even when the model says otherwise
    has_breaking_change = bool(result.has_breaking_change) or bool(breaking_changes)

    return ChangelogAnalysisResponse(
        package_name=request.package_name,
        from_version=request.from_version,
        to_version=request.to_version,
        has_breaking_change=has_breaking_change,
        breaking_changes=breaking_changes,
        new_features=[
            Feature(
                name=item.name or item.description[:60] or "unnamed feature",
                description=item.description,
                feature_type=item.type or "feature",
                impact=item.impact,
                confidence=clamp_unit(item.confidence),
            )
            for item in result.new_features
        ],
        bug_fixes=[
            BugFix(
                description=item.description,
                impact=item.impact,
                severity=parse_severity(item.severity),
                confidence=clamp_unit(item.confidence),
            )
            for item in result.bug_fixes
        ],
        security_fixes=[
            SecurityFix(
                description=item.description,
                severity=parse_severity(item.severity),
                cve_id=item.cve.strip().upper() or None,
                cvss_score=None if item.cvss is None else clamp(item.cvss, 0.0, 10.0, 0.0),
                impact=item.impact,
                confidence=clamp_unit(item.confidence),
            )
            for item in result.security_fixes
        ],
        deprecations=[
            Deprecation(
                item=item.api or "unspecified",
                replacement=item.replacement,
                timeline=item.timeline or "unknown",
                confidence=clamp_unit(item.confidence, default=1.0),
            )
            for item in result.deprecations
        ],
        risk_level=level,
        risk_score=risk_score(result.risk_score, level, risk_score_scale),
        confidence=clamp_unit(result.confidence),
        summary=summary_or_default(result.summary, request, "Changelog analysis", analyzer),
        recommendations=_recommendations(result.recommendations),
        analyzer=analyzer,
    )


def to_version_diff_response(
    request: VersionDiffAnalysisRequest,
    result: VersionDiffResult,
    analyzer: str,
    risk_score_scale: float = 1.0,
) -> VersionDiffAnalysisResponse:
    level = parse_risk_level(result.risk_level)
    update_type = parse_update_type(result.update_type, request)

    backward_compatible = result.backward_compatibility
    if backward_compatible is None:
        backward_compatible = update_type in (UpdateType.MINOR, UpdateType.PATCH)

    return VersionDiffAnalysisResponse(
        package_name=request.package_name,
        from_version=request.from_version,
        to_version=request.to_version,
        update_type=update_type,
        semantic_impact=result.semantic_impact,
        api_changes=[
            APIChange(
                change_type=item.type or "modified",
                api=item.api or "unspecified",
                description=item.description,
                impact=item.impact or "medium",
                confidence=clamp_unit(item.confidence),
            )
            for item in result.api_changes
        ],
        behavior_changes=[
            BehaviorChange(
                component=item.component or "unspecified",
                description=item.description,
                impact=item.impact or "medium",
                likelihood=clamp_unit(item.likelihood),
            )
            for item in result.behavior_changes
        ],
        backward_compatible=backward_compatible,
        migration_effort=parse_migration_effort(result.migration_effort),
        risk_level=level,
        risk_score=risk_score(result.risk_score, level, risk_score_scale),
        confidence=clamp_unit(result.confidence),
        summary=summary_or_default(result.summary, request, "Version diff analysis", analyzer),
        recommendations=_recommendations(result.recommendations),
        analyzer=analyzer,
    )


def to_compatibility_response(
    request: CompatibilityPredictionRequest,
    result: CompatibilityResult,
    analyzer: str,
    risk_score_scale: float = 1.0,
) -> CompatibilityPredictionResponse:
    level = parse_risk_level(result.risk_level)
    update_type = determine_update_type(request.from_version, request.to_version)
    default_score = COMPATIBILITY_SCORES.get(update_type, DEFAULT_COMPATIBILITY_SCORE)

    migration_steps = []
    for step in result.migration_steps:
        if step.step and step.description:
            migration_steps.append(f"{step.step}: {step.description}")
        elif step.step or step.description:
            migration_steps.append(step.step or step.description)

    testing = [item.description or item.type for item in result.testing_recommendations]

    return CompatibilityPredictionResponse(
        package_name=request.package_name,
        from_version=request.from_version,
        to_version=request.to_version,
        compatibility_score=clamp_unit(result.compatibility_score, default=default_score),
        potential_issues=[
            CompatibilityIssue(
                issue_type=item.type or "unspecified",
                description=item.description,
                severity=parse_severity(item.severity),
                likelihood=clamp_unit(item.likelihood),
                mitigation=item.mitigation,
                confidence=clamp_unit(item.confidence, default=clamp_unit(result.confidence)),
            )
            for item in result.potential_issues
        ],
        migration_steps=migration_steps,
        testing_recommendations=[item for item in testing if item],
        risk_level=level,
        risk_score=risk_score(result.risk_score, level, risk_score_scale),
        confidence=clamp_unit(result.confidence),
        summary=summary_or_default(result.summary, request, "Compatibility prediction", analyzer),
        recommendations=_recommendations(result.recommendations),
        analyzer=analyzer,
    )


def to_classification_response(
    request: UpdateClassificationRequest,
    result: ClassificationResult,
    analyzer: str,
    risk_score_scale: float = 1.0,
) -> UpdateClassificationResponse:
    assessment = result.risk_assessment
    level = parse_risk_level((assessment.level if assessment else "") or result.risk_level)
    raw_score = assessment.score if assessment and assessment.score is not None else result.risk_score
    score = risk_score(raw_score, level, risk_score_scale)

    categories = [
        UpdateCategory(
            name=parse_category(item.name),
            weight=max(0.0, item.weight) if item.weight is not None else 0.0,
            description=item.description,
        )
        for item in result.categories
    ]
    if not categories:
        categories.append(UpdateCategory(name=UpdateCategoryName.MAINTENANCE, weight=0.5))

    return UpdateClassificationResponse(
        package_name=request.package_name,
        from_version=request.from_version,
        to_version=request.to_version,
        update_type=parse_update_type(result.update_type, request),
        priority=parse_priority(result.priority),
        urgency=parse_urgency(result.urgency),
        categories=categories,
        risk_assessment=RiskAssessment(
            level=level,
            score=score,
            factors=list(assessment.factors) if assessment else [],
            mitigation=list(assessment.mitigation) if assessment else [],
        ),
        risk_level=level,
        risk_score=score,
        confidence=clamp_unit(result.confidence),
        summary=summary_or_default(result.summary, request, "Update classification", analyzer),
        recommendations=_recommendations(result.recommendations),
        analyzer=analyzer,
    )
