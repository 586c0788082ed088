"""Keyword and semantic-version based analyzer.

Runs offline with no external calls. Pattern matching is deliberately
over-inclusive: every table entry found in the text contributes one
finding, so results favour recall over precision.
"""

import re
from typing import NamedTuple

from depwise.analysis.base import BaseAnalyzer
from depwise.core.models import (
    APIChange,
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
from depwise.utils.logging import get_logger

logger = get_logger(__name__)

HEURISTIC_ANALYZER_NAME = "heuristic"


class KeywordPattern(NamedTuple):
    """A literal, lower-case substring and what a match means."""

    pattern: str
    category: str
    confidence: float


class SecurityPattern(NamedTuple):
    """A security keyword with the severity it implies."""

    pattern: str
    severity: Severity
    confidence: float


BREAKING_CHANGE_PATTERNS = [
    KeywordPattern("breaking change", "explicit_breaking_change", 0.95),
    KeywordPattern("breaking", "potential_breaking_change", 0.7),
    KeywordPattern("removed", "api_removal", 0.8),
    KeywordPattern("deprecated", "deprecation", 0.8),
    KeywordPattern("incompatible", "incompatibility", 0.8),
    KeywordPattern("major change", "major_change", 0.8),
    KeywordPattern("api change", "api_change", 0.8),
    KeywordPattern("signature change", "signature_change", 0.8),
    KeywordPattern("behavior change", "behavior_change", 0.8),
    KeywordPattern("no longer", "removal", 0.8),
    KeywordPattern("not supported", "support_removal", 0.8),
]

HIGH_IMPACT_PATTERNS = ("breaking change", "removed", "incompatible", "no longer")

BREAKING_CHANGE_MITIGATIONS = {
    "api_removal": "Update code to use alternative APIs",
    "signature_change": "Update function calls to match new signature",
    "behavior_change": "Review and test affected functionality",
    "deprecation": "Plan migration to recommended alternative",
    "removal": "Find alternative implementation",
}

DEFAULT_MITIGATION = "Review changelog and update code accordingly"

SECURITY_PATTERNS = [
    SecurityPattern("security", Severity.MEDIUM, 0.8),
    SecurityPattern("vulnerability", Severity.HIGH, 0.9),
    SecurityPattern("cve", Severity.HIGH, 0.9),
    SecurityPattern("security fix", Severity.MEDIUM, 0.8),
    SecurityPattern("security update", Severity.MEDIUM, 0.8),
    SecurityPattern("security patch", Severity.MEDIUM, 0.8),
    SecurityPattern("exploit", Severity.CRITICAL, 0.8),
    SecurityPattern("injection", Severity.HIGH, 0.8),
    SecurityPattern("xss", Severity.HIGH, 0.8),
    SecurityPattern("csrf", Severity.MEDIUM, 0.8),
]

FEATURE_PATTERNS = [
    KeywordPattern("new feature", "feature", 0.7),
    KeywordPattern("added", "feature", 0.7),
    KeywordPattern("introduce", "feature", 0.7),
    KeywordPattern("support for", "feature", 0.7),
    KeywordPattern("enhancement", "enhancement", 0.7),
    KeywordPattern("improvement", "enhancement", 0.7),
    KeywordPattern("new api", "new_api", 0.7),
    KeywordPattern("new method", "new_api", 0.7),
    KeywordPattern("new function", "new_api", 0.7),
]

BUG_FIX_PATTERNS = [
    KeywordPattern(pattern, "bugfix", 0.6)
    for pattern in (
        "fix", "fixed", "bug", "issue", "problem",
        "resolve", "resolved", "correct", "corrected", "patch",
    )
]

DEPRECATION_PATTERNS = [
    KeywordPattern(pattern, "deprecation", 0.8)
    for pattern in (
        "deprecated", "deprecation", "will be removed",
        "legacy", "obsolete", "no longer recommended",
    )
]

# (category, increment per keyword hit, keywords) in output order
CATEGORY_KEYWORDS: list[tuple[UpdateCategoryName, float, tuple[str, ...]]] = [
    (UpdateCategoryName.SECURITY, 0.3, ("security", "vulnerability", "cve", "exploit")),
    (UpdateCategoryName.FEATURE, 0.2, ("feature", "added", "new", "enhancement")),
    (UpdateCategoryName.BUGFIX, 0.2, ("fix", "bug", "issue", "resolve")),
    (UpdateCategoryName.MAINTENANCE, 0.1, ("refactor", "cleanup", "maintenance", "update")),
]

CVE_PATTERN = re.compile(r"\bCVE-\d{4}-\d{4,}\b", re.IGNORECASE)
CVSS_PATTERN = re.compile(
    r"cvss(?:\s*v\d(?:\.\d)?)?(?:\s*(?:base\s*)?score)?\s*[:=]?\s*(\d{1,2}(?:\.\d+)?)(?![\d./])",
    re.IGNORECASE,
)
VERSION_PATTERN = re.compile(r"(\d+)\.(\d+)\.(\d+)")

RISK_SCORES = {
    RiskLevel.LOW: 2.5,
    RiskLevel.MEDIUM: 5.0,
    RiskLevel.HIGH: 7.5,
    RiskLevel.CRITICAL: 9.5,
}

VERSION_RISK = {
    UpdateType.MAJOR: RiskLevel.HIGH,
    UpdateType.MINOR: RiskLevel.MEDIUM,
    UpdateType.PATCH: RiskLevel.LOW,
    UpdateType.PRERELEASE: RiskLevel.MEDIUM,
    UpdateType.UNKNOWN: RiskLevel.LOW,
}

SEMANTIC_IMPACT = {
    UpdateType.MAJOR: "Potentially breaking changes, new features, and bug fixes",
    UpdateType.MINOR: "New features and bug fixes, backward compatible",
    UpdateType.PATCH: "Bug fixes and security patches, backward compatible",
    UpdateType.PRERELEASE: "Experimental features, use with caution",
    UpdateType.UNKNOWN: "Unknown impact",
}

MIGRATION_EFFORT = {
    UpdateType.MAJOR: MigrationEffort.HIGH,
    UpdateType.MINOR: MigrationEffort.LOW,
    UpdateType.PATCH: MigrationEffort.LOW,
    UpdateType.PRERELEASE: MigrationEffort.MEDIUM,
    UpdateType.UNKNOWN: MigrationEffort.MEDIUM,
}

COMPATIBILITY_SCORES = {
    UpdateType.MAJOR: 0.3,
    UpdateType.MINOR: 0.8,
    UpdateType.PATCH: 0.95,
    UpdateType.PRERELEASE: 0.5,
}

DEFAULT_COMPATIBILITY_SCORE = 0.7

MIGRATION_STEPS = {
    UpdateType.MAJOR: [
        "Review breaking changes in changelog",
        "Update code to handle API changes",
        "Update tests for new behavior",
        "Test thoroughly before deployment",
    ],
    UpdateType.MINOR: [
        "Review new features",
        "Consider adopting new functionality",
        "Run existing tests",
    ],
    UpdateType.PATCH: [
        "Review bug fixes",
        "Run regression tests",
    ],
}

TESTING_RECOMMENDATIONS = {
    UpdateType.MAJOR: [
        "Run full test suite",
        "Perform integration testing",
        "Test in staging environment",
        "Consider canary deployment",
    ],
    UpdateType.MINOR: [
        "Run unit tests",
        "Test new features if adopted",
        "Perform smoke testing",
    ],
    UpdateType.PATCH: [
        "Run relevant unit tests",
        "Test affected functionality",
    ],
}

LOW_COVERAGE_THRESHOLD = 0.5
SHORT_TEXT_LENGTH = 100
REMOVED_FILE_TYPES = frozenset({"deleted", "removed"})


def parse_version(version: str) -> tuple[int, int, int] | None:
    """Extract the first major.minor.patch triple from a version string.

    Args:
        version: Version string, optionally prefixed with ``v``.

    Returns:
        Tuple of (major, minor, patch), or None if no triple is present.
    """
    match = VERSION_PATTERN.search(version.strip().removeprefix("v"))
    if not match:
        return None
    return int(match.group(1)), int(match.group(2)), int(match.group(3))


def determine_update_type(from_version: str, to_version: str) -> UpdateType:
    """Classify a version change by semantic-version arithmetic.

    A hyphenated suffix on the target version marks a prerelease and takes
    precedence over the numeric comparison. Unparseable versions classify as
    UNKNOWN rather than raising.

    Args:
        from_version: Current version.
        to_version: Target version.

    Returns:
        The update type.
    """
    from_parts = parse_version(from_version)
    to_parts = parse_version(to_version)

    if from_parts is None or to_parts is None:
        return UpdateType.UNKNOWN

    if "-" in to_version:
        return UpdateType.PRERELEASE

    if to_parts[0] > from_parts[0]:
        return UpdateType.MAJOR
    if to_parts[1] > from_parts[1]:
        return UpdateType.MINOR
    return UpdateType.PATCH


def version_risk_level(update_type: UpdateType) -> RiskLevel:
    """Risk implied by the update type alone."""
    return VERSION_RISK.get(update_type, RiskLevel.LOW)


def risk_score_for(level: RiskLevel) -> float:
    """Representative 0-10 risk score for a risk level."""
    return RISK_SCORES[level]


def _combined_text(changelog: str, release_notes: str) -> str:
    return f"{changelog} {release_notes}".lower()


def _title(update_type: UpdateType) -> str:
    return update_type.value.capitalize()


class HeuristicAnalyzer(BaseAnalyzer):
    """Deterministic analyzer that never fails and is always available."""

    def __init__(self, version: str = "1.0.0") -> None:
        self._version = version

    @property
    def name(self) -> str:
        return HEURISTIC_ANALYZER_NAME

    @property
    def version(self) -> str:
        return self._version

    async def is_available(self) -> bool:
        return True

    async def analyze_changelog(
        self, request: ChangelogAnalysisRequest
    ) -> ChangelogAnalysisResponse:
        """Analyze changelog text using keyword tables.

        Args:
            request: Changelog analysis request.

        Returns:
            Changelog analysis response.
        """
        logger.debug(
            "Analyzing changelog for %s: %s -> %s",
            request.package_name,
            request.from_version,
            request.to_version,
        )

        text = _combined_text(request.changelog, request.release_notes)
        original_text = f"{request.changelog}\n{request.release_notes}"

        breaking_changes = self.detect_breaking_changes(text)
        security_fixes = self.detect_security_fixes(text, original_text)
        new_features = self.detect_new_features(text)
        bug_fixes = self.detect_bug_fixes(text)
        deprecations = self.detect_deprecations(text)

        risk_level = self.calculate_risk_level(
            breaking_changes, security_fixes, deprecations
        )
        confidence = self.calculate_confidence(text)

        response = ChangelogAnalysisResponse(
            package_name=request.package_name,
            from_version=request.from_version,
            to_version=request.to_version,
            has_breaking_change=bool(breaking_changes),
            breaking_changes=breaking_changes,
            new_features=new_features,
            bug_fixes=bug_fixes,
            security_fixes=security_fixes,
            deprecations=deprecations,
            risk_level=risk_level,
            risk_score=risk_score_for(risk_level),
            confidence=confidence,
            summary=self._changelog_summary(
                breaking_changes, security_fixes, new_features, bug_fixes
            ),
            recommendations=self._changelog_recommendations(
                bool(breaking_changes), bool(security_fixes), risk_level
            ),
            analyzer=self.name,
        )

        logger.debug(
            "Changelog analysis complete for %s: risk=%s, confidence=%.2f",
            request.package_name,
            response.risk_level.value,
            response.confidence,
        )
        return response

    async def analyze_version_diff(
        self, request: VersionDiffAnalysisRequest
    ) -> VersionDiffAnalysisResponse:
        """Analyze a version change by semantic-version rules.

        Deleted files in the diff are reported as API removals and raise the
        risk to at least medium.
        """
        logger.debug(
            "Analyzing version diff for %s: %s -> %s",
            request.package_name,
            request.from_version,
            request.to_version,
        )

        update_type = determine_update_type(request.from_version, request.to_version)
        risk_level = version_risk_level(update_type)

        api_changes = [
            APIChange(
                change_type="removal",
                api=change.path,
                description=f"{change.path} was removed",
                impact="high",
                confidence=0.6,
            )
            for change in request.file_changes
            if change.change_type.lower() in REMOVED_FILE_TYPES
        ]
        if api_changes:
            risk_level = RiskLevel.max_risk(risk_level, RiskLevel.MEDIUM)

        recommendations: list[str] = []
        if update_type == UpdateType.MAJOR:
            recommendations.append("Review breaking changes carefully before updating")
            recommendations.append("Test thoroughly in a development environment")
        elif update_type == UpdateType.PRERELEASE:
            recommendations.append("Avoid deploying prerelease versions to production")
        if api_changes:
            recommendations.append("Check the codebase for usages of removed files")

        return VersionDiffAnalysisResponse(
            package_name=request.package_name,
            from_version=request.from_version,
            to_version=request.to_version,
            update_type=update_type,
            semantic_impact=SEMANTIC_IMPACT[update_type],
            api_changes=api_changes,
            risk_level=risk_level,
            risk_score=risk_score_for(risk_level),
            confidence=0.8,
            backward_compatible=update_type in (UpdateType.MINOR, UpdateType.PATCH),
            migration_effort=MIGRATION_EFFORT[update_type],
            summary=f"{_title(update_type)} update from {request.from_version} to {request.to_version}",
            recommendations=recommendations,
            analyzer=self.name,
        )

    async def predict_compatibility(
        self, request: CompatibilityPredictionRequest
    ) -> CompatibilityPredictionResponse:
        """Predict compatibility from the update type."""
        logger.debug(
            "Predicting compatibility for %s: %s -> %s",
            request.package_name,
            request.from_version,
            request.to_version,
        )

        update_type = determine_update_type(request.from_version, request.to_version)
        score = COMPATIBILITY_SCORES.get(update_type, DEFAULT_COMPATIBILITY_SCORE)
        risk_level = version_risk_level(update_type)

        testing = list(TESTING_RECOMMENDATIONS.get(update_type, ["Run basic tests"]))
        coverage = request.project_context.test_coverage
        if (
            coverage is not None
            and coverage < LOW_COVERAGE_THRESHOLD
            and update_type in (UpdateType.MAJOR, UpdateType.PRERELEASE)
        ):
            testing.append(
                f"Increase test coverage (currently {coverage:.0%}) before applying this update"
            )

        return CompatibilityPredictionResponse(
            package_name=request.package_name,
            from_version=request.from_version,
            to_version=request.to_version,
            compatibility_score=score,
            risk_level=risk_level,
            risk_score=risk_score_for(risk_level),
            confidence=0.6,
            potential_issues=self._potential_issues(update_type),
            migration_steps=list(MIGRATION_STEPS.get(update_type, ["Review changelog and test"])),
            testing_recommendations=testing,
            summary=self._compatibility_summary(update_type, score),
            analyzer=self.name,
        )

    async def classify_update(
        self, request: UpdateClassificationRequest
    ) -> UpdateClassificationResponse:
        """Classify an update by type and weighted keyword categories."""
        logger.debug(
            "Classifying update for %s: %s -> %s",
            request.package_name,
            request.from_version,
            request.to_version,
        )

        update_type = determine_update_type(request.from_version, request.to_version)
        categories = self.classify_categories(request.changelog, request.release_notes)
        priority = self.determine_priority(update_type, categories)
        urgency = self.determine_urgency(categories)
        risk_level = version_risk_level(update_type)
        risk_score = risk_score_for(risk_level)

        factors = [f"{_title(update_type)} version update"]
        security_weight = _category_weight(categories, UpdateCategoryName.SECURITY)
        if security_weight > 0:
            factors.append("Security-related changes mentioned in changelog")
        if "breaking" in _combined_text(request.changelog, request.release_notes):
            factors.append("Breaking change keywords present")

        summary_parts = [
            f"{_title(update_type)} update",
            f"{priority.value} priority",
            f"{risk_level.value} risk",
            "categories: " + ", ".join(category.name.value for category in categories),
        ]

        return UpdateClassificationResponse(
            package_name=request.package_name,
            from_version=request.from_version,
            to_version=request.to_version,
            update_type=update_type,
            priority=priority,
            urgency=urgency,
            categories=categories,
            risk_level=risk_level,
            risk_score=risk_score,
            risk_assessment=RiskAssessment(
                level=risk_level,
                score=risk_score,
                factors=factors,
                mitigation=list(TESTING_RECOMMENDATIONS.get(update_type, ["Run basic tests"])),
            ),
            confidence=0.7,
            summary=", ".join(summary_parts),
            analyzer=self.name,
        )

    # Detection

    def detect_breaking_changes(self, text: str) -> list[BreakingChange]:
        """Detect breaking change keywords in lower-cased text."""
        return [
            BreakingChange(
                change_type=entry.category,
                description=f"Detected '{entry.pattern}' in changelog",
                impact="high" if entry.pattern in HIGH_IMPACT_PATTERNS else "medium",
                confidence=entry.confidence,
                mitigation=BREAKING_CHANGE_MITIGATIONS.get(entry.category, DEFAULT_MITIGATION),
            )
            for entry in BREAKING_CHANGE_PATTERNS
            if entry.pattern in text
        ]

    def detect_security_fixes(self, text: str, original_text: str = "") -> list[SecurityFix]:
        """Detect security keywords and explicitly stated CVE identifiers.

        Args:
            text: Lower-cased changelog text used for keyword matching.
            original_text: Unmodified text scanned for CVE ids and CVSS scores.

        Returns:
            Security findings. CVE and CVSS fields are only set when present
            in the source text.
        """
        fixes = [
            SecurityFix(
                description=f"Detected security-related keyword: '{entry.pattern}'",
                severity=entry.severity,
                impact=f"Potential {entry.severity.value} severity security issue",
                confidence=entry.confidence,
            )
            for entry in SECURITY_PATTERNS
            if entry.pattern in text
        ]

        seen: set[str] = set()
        for line in (original_text or text).splitlines():
            cvss_match = CVSS_PATTERN.search(line)
            cvss = float(cvss_match.group(1)) if cvss_match else None
            if cvss is not None and cvss > 10.0:
                cvss = None

            for match in CVE_PATTERN.finditer(line):
                cve_id = match.group(0).upper()
                if cve_id in seen:
                    continue
                seen.add(cve_id)
                fixes.append(
                    SecurityFix(
                        description=f"Fix for {cve_id}",
                        severity=Severity.HIGH,
                        cve_id=cve_id,
                        cvss_score=cvss,
                        impact=f"Addresses {cve_id}",
                        confidence=0.9,
                    )
                )

        return fixes

    def detect_new_features(self, text: str) -> list[Feature]:
        """Detect feature keywords in lower-cased text."""
        return [
            Feature(
                name=entry.pattern,
                description=f"Detected new feature: '{entry.pattern}'",
                feature_type=entry.category,
                confidence=entry.confidence,
            )
            for entry in FEATURE_PATTERNS
            if entry.pattern in text
        ]

    def detect_bug_fixes(self, text: str) -> list[BugFix]:
        """Detect bug fix keywords in lower-cased text."""
        return [
            BugFix(
                description=f"Detected bug fix: '{entry.pattern}'",
                impact="medium",
                confidence=entry.confidence,
            )
            for entry in BUG_FIX_PATTERNS
            if entry.pattern in text
        ]

    def detect_deprecations(self, text: str) -> list[Deprecation]:
        """Detect deprecation keywords in lower-cased text."""
        return [
            Deprecation(item=entry.pattern, timeline="unknown", confidence=entry.confidence)
            for entry in DEPRECATION_PATTERNS
            if entry.pattern in text
        ]

    # Scoring

    def calculate_risk_level(
        self,
        breaking_changes: list[BreakingChange],
        security_fixes: list[SecurityFix],
        deprecations: list[Deprecation],
    ) -> RiskLevel:
        """Aggregate findings into a single risk level."""
        if any(fix.severity == Severity.CRITICAL for fix in security_fixes):
            return RiskLevel.CRITICAL
        if security_fixes or breaking_changes:
            return RiskLevel.HIGH
        if deprecations:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def calculate_confidence(self, text: str) -> float:
        """Shape confidence from explicit markers and text length.

        Args:
            text: Combined lower-cased changelog and release notes.

        Returns:
            Confidence clamped to [0.1, 1.0].
        """
        confidence = 0.6
        if "breaking change" in text:
            confidence += 0.2
        if any(entry.pattern in text for entry in SECURITY_PATTERNS):
            confidence += 0.1
        if len(text) < SHORT_TEXT_LENGTH:
            confidence -= 0.2
        return round(min(1.0, max(0.1, confidence)), 2)

    def classify_categories(self, changelog: str, release_notes: str) -> list[UpdateCategory]:
        """Weight update categories by keyword hits.

        Returns:
            Categories with non-zero weight in fixed order, or a single
            maintenance category at 0.5 when nothing matched.
        """
        text = _combined_text(changelog, release_notes)
        categories: list[UpdateCategory] = []

        for name, increment, keywords in CATEGORY_KEYWORDS:
            hits = sum(1 for keyword in keywords if keyword in text)
            if hits:
                categories.append(UpdateCategory(name=name, weight=round(hits * increment, 2)))

        if not categories:
            categories.append(UpdateCategory(name=UpdateCategoryName.MAINTENANCE, weight=0.5))

        return categories

    def determine_priority(
        self, update_type: UpdateType, categories: list[UpdateCategory]
    ) -> Priority:
        if _category_weight(categories, UpdateCategoryName.SECURITY) > 0.2:
            return Priority.CRITICAL
        if update_type in (UpdateType.MAJOR, UpdateType.MINOR):
            return Priority.MEDIUM
        return Priority.LOW

    def determine_urgency(self, categories: list[UpdateCategory]) -> Urgency:
        security_weight = _category_weight(categories, UpdateCategoryName.SECURITY)
        if security_weight > 0.3:
            return Urgency.IMMEDIATE
        if security_weight > 0.1:
            return Urgency.HIGH
        return Urgency.LOW

    # Text generation

    def _changelog_summary(
        self,
        breaking_changes: list[BreakingChange],
        security_fixes: list[SecurityFix],
        new_features: list[Feature],
        bug_fixes: list[BugFix],
    ) -> str:
        parts = []
        if breaking_changes:
            parts.append(f"{len(breaking_changes)} breaking change(s)")
        if security_fixes:
            parts.append(f"{len(security_fixes)} security fix(es)")
        if new_features:
            parts.append(f"{len(new_features)} new feature(s)")
        if bug_fixes:
            parts.append(f"{len(bug_fixes)} bug fix(es)")

        if not parts:
            return "Standard update with no significant changes detected"
        return "Update contains: " + ", ".join(parts)

    def _changelog_recommendations(
        self, has_breaking_change: bool, has_security_fix: bool, risk_level: RiskLevel
    ) -> list[str]:
        recommendations = []
        if has_breaking_change:
            recommendations.append("Review breaking changes carefully before updating")
            recommendations.append("Test thoroughly in a development environment")
        if has_security_fix:
            recommendations.append("Apply security updates promptly")
        if risk_level.rank >= RiskLevel.HIGH.rank:
            recommendations.append("Consider updating during maintenance window")
            recommendations.append("Have rollback plan ready")
        return recommendations

    def _potential_issues(self, update_type: UpdateType) -> list[CompatibilityIssue]:
        if update_type == UpdateType.MAJOR:
            return [
                CompatibilityIssue(
                    issue_type="breaking_change",
                    description="Major version updates may contain breaking changes",
                    severity=Severity.HIGH,
                    likelihood=0.7,
                    mitigation="Review changelog and test thoroughly",
                    confidence=0.6,
                )
            ]
        if update_type == UpdateType.MINOR:
            return [
                CompatibilityIssue(
                    issue_type="behavior_change",
                    description="Minor updates may introduce subtle behavior changes",
                    severity=Severity.LOW,
                    likelihood=0.2,
                    mitigation="Run existing tests to verify behavior",
                    confidence=0.6,
                )
            ]
        return []

    def _compatibility_summary(self, update_type: UpdateType, score: float) -> str:
        if score >= 0.8:
            label = "high"
        elif score < 0.5:
            label = "low"
        else:
            label = "medium"
        return f"{_title(update_type)} update with {label} compatibility score ({score:g})"


def _category_weight(categories: list[UpdateCategory], name: UpdateCategoryName) -> float:
    return sum(category.weight for category in categories if category.name == name)
