"""Core data models for depwise.

Requests are immutable values constructed by the caller for a single
analysis. Responses are produced fresh by each analyzer.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RiskLevel(str, Enum):
    """Ordinal risk classification attached to every analysis response."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Ordinal position, low=0 through critical=3."""
        return _RISK_RANK[self]

    @classmethod
    def max_risk(cls, *levels: "RiskLevel") -> "RiskLevel":
        """Return the most severe of the given levels (LOW when none given)."""
        if not levels:
            return cls.LOW
        return max(levels, key=lambda level: level.rank)


_RISK_RANK = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.CRITICAL: 3,
}


class Priority(str, Enum):
    """How soon an update should be scheduled."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Urgency(str, Enum):
    """How quickly an update should be applied once scheduled."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    IMMEDIATE = "immediate"


class UpdateType(str, Enum):
    """Semantic-version classification of a version change."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PRERELEASE = "prerelease"
    UNKNOWN = "unknown"


class Severity(str, Enum):
    """Severity of a security fix, bug fix or compatibility issue."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class UpdateCategoryName(str, Enum):
    """Categories an update can be classified under."""

    SECURITY = "security"
    FEATURE = "feature"
    BUGFIX = "bugfix"
    MAINTENANCE = "maintenance"
    PERFORMANCE = "performance"


class MigrationEffort(str, Enum):
    """Estimated effort to migrate across a version change."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"


# Supporting types


class ProjectContext(BaseModel):
    """Description of the project consuming the dependency."""

    model_config = ConfigDict(frozen=True)

    language: str = Field(default="", description="Primary project language")
    framework: str = Field(default="", description="Application framework, if any")
    dependencies: tuple[str, ...] = Field(
        default=(), description="Declared direct dependencies"
    )
    test_coverage: float | None = Field(
        default=None, ge=0.0, le=1.0, description="Test coverage ratio, if known"
    )


class DependencyNode(BaseModel):
    """Single node of a project's dependency graph."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    type: str = Field(default="direct", description="direct, dev, transitive, ...")


class FileChange(BaseModel):
    """Per-file change record of a structural diff."""

    model_config = ConfigDict(frozen=True)

    path: str
    change_type: str = Field(default="modified", description="added, modified, deleted, renamed")
    lines_added: int = Field(default=0, ge=0)
    lines_removed: int = Field(default=0, ge=0)


class BreakingChange(BaseModel):
    """A change that may break consumers of the package."""

    change_type: str = Field(..., description="Kind of breaking change")
    description: str
    impact: str = "medium"
    confidence: float = Field(..., ge=0.0, le=1.0)
    mitigation: str = ""


class Feature(BaseModel):
    """A newly added capability."""

    name: str
    description: str = ""
    feature_type: str = "enhancement"
    impact: str = "low"
    confidence: float = Field(..., ge=0.0, le=1.0)


class BugFix(BaseModel):
    """A fixed defect."""

    description: str
    impact: str = "low"
    severity: Severity = Severity.LOW
    confidence: float = Field(..., ge=0.0, le=1.0)


class SecurityFix(BaseModel):
    """A fixed security issue, optionally identified by CVE."""

    description: str
    severity: Severity
    cve_id: str | None = Field(default=None, description="CVE identifier if stated in the source")
    cvss_score: float | None = Field(default=None, ge=0.0, le=10.0)
    impact: str = ""
    confidence: float = Field(..., ge=0.0, le=1.0)


class Deprecation(BaseModel):
    """A deprecated API or feature."""

    item: str
    replacement: str = ""
    timeline: str = "unknown"
    confidence: float = Field(..., ge=0.0, le=1.0)


class APIChange(BaseModel):
    """An API-level change between two versions."""

    change_type: str = Field(..., description="added, removed, modified, renamed")
    api: str
    description: str = ""
    impact: str = "medium"
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class BehaviorChange(BaseModel):
    """A runtime behavior change between two versions."""

    component: str
    description: str
    impact: str = "medium"
    likelihood: float = Field(default=0.5, ge=0.0, le=1.0)


class CompatibilityIssue(BaseModel):
    """A predicted compatibility problem for the consuming project."""

    issue_type: str
    description: str
    severity: Severity = Severity.MEDIUM
    likelihood: float = Field(..., ge=0.0, le=1.0)
    mitigation: str = ""
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class UpdateCategory(BaseModel):
    """A weighted category; weights are independent relevance scores."""

    name: UpdateCategoryName
    weight: float = Field(..., ge=0.0)
    description: str = ""


class RiskAssessment(BaseModel):
    """Risk level with the factors that produced it."""

    level: RiskLevel
    score: float = Field(..., ge=0.0, le=10.0)
    factors: list[str] = Field(default_factory=list)
    mitigation: list[str] = Field(default_factory=list)


# Requests


class AnalysisRequest(BaseModel):
    """Fields shared by every analysis request."""

    model_config = ConfigDict(frozen=True)

    package_name: str = Field(..., min_length=1, description="Package name")
    from_version: str = Field(..., description="Currently installed version")
    to_version: str = Field(..., description="Candidate version")
    package_manager: str = Field(default="", description="npm, pip, cargo, ...")
    language: str = Field(default="", description="Package language")


class ChangelogAnalysisRequest(AnalysisRequest):
    """Request to analyze changelog text between two versions."""

    changelog: str = Field(default="", description="Changelog text")
    release_notes: str = Field(default="", description="Release notes text")


class VersionDiffAnalysisRequest(AnalysisRequest):
    """Request to analyze a structural diff between two versions."""

    diff_text: str = Field(default="", description="Free text diff")
    file_changes: tuple[FileChange, ...] = Field(default=())


class CompatibilityPredictionRequest(AnalysisRequest):
    """Request to predict compatibility with a consuming project."""

    project_context: ProjectContext = Field(default_factory=ProjectContext)
    dependency_graph: tuple[DependencyNode, ...] = Field(default=())


class UpdateClassificationRequest(AnalysisRequest):
    """Request to classify an update by type, priority and category."""

    changelog: str = Field(default="", description="Changelog text")
    release_notes: str = Field(default="", description="Release notes text")
    project_context: ProjectContext = Field(default_factory=ProjectContext)


# Responses


class AnalysisResponse(BaseModel):
    """Fields shared by every analysis response."""

    package_name: str
    from_version: str
    to_version: str
    risk_level: RiskLevel
    risk_score: float = Field(..., ge=0.0, le=10.0, description="Risk on a 0-10 scale")
    confidence: float = Field(..., ge=0.0, le=1.0)
    summary: str = Field(..., min_length=1)
    recommendations: list[str] = Field(default_factory=list)
    analyzer: str = Field(default="", description="Name of the producing analyzer")
    analyzed_at: datetime = Field(default_factory=_utcnow)


class ChangelogAnalysisResponse(AnalysisResponse):
    """Result of changelog analysis."""

    has_breaking_change: bool = False
    breaking_changes: list[BreakingChange] = Field(default_factory=list)
    new_features: list[Feature] = Field(default_factory=list)
    bug_fixes: list[BugFix] = Field(default_factory=list)
    security_fixes: list[SecurityFix] = Field(default_factory=list)
    deprecations: list[Deprecation] = Field(default_factory=list)


class VersionDiffAnalysisResponse(AnalysisResponse):
    """Result of version diff analysis."""

    update_type: UpdateType
    semantic_impact: str = ""
    api_changes: list[APIChange] = Field(default_factory=list)
    behavior_changes: list[BehaviorChange] = Field(default_factory=list)
    backward_compatible: bool = True
    migration_effort: MigrationEffort = MigrationEffort.LOW


class CompatibilityPredictionResponse(AnalysisResponse):
    """Result of compatibility prediction."""

    compatibility_score: float = Field(..., ge=0.0, le=1.0)
    potential_issues: list[CompatibilityIssue] = Field(default_factory=list)
    migration_steps: list[str] = Field(default_factory=list)
    testing_recommendations: list[str] = Field(default_factory=list)


class UpdateClassificationResponse(AnalysisResponse):
    """Result of update classification."""

    update_type: UpdateType
    priority: Priority
    urgency: Urgency
    categories: list[UpdateCategory] = Field(default_factory=list)
    risk_assessment: RiskAssessment | None = None
