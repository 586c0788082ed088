"""Intermediate shapes decoded from model output.

These mirror the JSON the prompts ask for. They are deliberately lenient:
unknown keys are ignored, nulls become defaults and numbers that fail to
parse become None so the converters can substitute safe values.
"""

from collections.abc import Callable
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _lenient_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    return str(value)


def _lenient_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _lenient_bool(value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1"):
            return True
        if lowered in ("false", "no", "0"):
            return False
        return None
    return bool(value)


def _lenient_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _text_items(key: str) -> Callable[[Any], list[Any]]:
    """Validator wrapping bare strings in a list as ``{key: item}`` objects."""

    def validate(value: Any) -> list[Any]:
        return [{key: item} if isinstance(item, str) else item for item in _lenient_list(value)]

    return validate


_described_items = _text_items("description")
named_items = _text_items("name")


LenientStr = Annotated[str, BeforeValidator(_lenient_str)]
LenientFloat = Annotated[float | None, BeforeValidator(_lenient_float)]
LenientBool = Annotated[bool | None, BeforeValidator(_lenient_bool)]
StrList = Annotated[list[LenientStr], BeforeValidator(_lenient_list)]


class ResultModel(BaseModel):
    """Base for model-output shapes."""

    model_config = ConfigDict(extra="ignore")


class BreakingChangeResult(ResultModel):
    type: LenientStr = ""
    description: LenientStr = ""
    impact: LenientStr = ""
    severity: LenientStr = ""
    confidence: LenientFloat = None
    mitigation: LenientStr = ""
    affected_apis: StrList = Field(default_factory=list)


class FeatureResult(ResultModel):
    name: LenientStr = ""
    description: LenientStr = ""
    type: LenientStr = ""
    impact: LenientStr = ""
    confidence: LenientFloat = None


class BugFixResult(ResultModel):
    description: LenientStr = ""
    impact: LenientStr = ""
    severity: LenientStr = ""
    confidence: LenientFloat = None


class SecurityFixResult(ResultModel):
    description: LenientStr = ""
    severity: LenientStr = ""
    cve: LenientStr = ""
    cvss: LenientFloat = None
    impact: LenientStr = ""
    confidence: LenientFloat = None


class DeprecationResult(ResultModel):
    api: LenientStr = ""
    replacement: LenientStr = ""
    timeline: LenientStr = ""
    confidence: LenientFloat = None


class APIChangeResult(ResultModel):
    type: LenientStr = ""
    api: LenientStr = ""
    description: LenientStr = ""
    impact: LenientStr = ""
    confidence: LenientFloat = None


class BehaviorChangeResult(ResultModel):
    component: LenientStr = ""
    description: LenientStr = ""
    impact: LenientStr = ""
    likelihood: LenientFloat = None


class CompatibilityIssueResult(ResultModel):
    type: LenientStr = ""
    description: LenientStr = ""
    severity: LenientStr = ""
    likelihood: LenientFloat = None
    mitigation: LenientStr = ""
    confidence: LenientFloat = None


class MigrationStepResult(ResultModel):
    step: LenientStr = ""
    description: LenientStr = ""


class TestingRecommendationResult(ResultModel):
    type: LenientStr = ""
    description: LenientStr = ""


class CategoryResult(ResultModel):
    name: LenientStr = ""
    weight: LenientFloat = None
    description: LenientStr = ""


class RiskAssessmentResult(ResultModel):
    level: LenientStr = ""
    score: LenientFloat = None
    factors: StrList = Field(default_factory=list)
    mitigation: StrList = Field(default_factory=list)


class AnalysisResult(ResultModel):
    """Fields every result shape shares. Package identity is never read back."""

    risk_level: LenientStr = ""
    risk_score: LenientFloat = None
    confidence: LenientFloat = None
    summary: LenientStr = ""
    recommendations: StrList = Field(default_factory=list)


class ChangelogResult(AnalysisResult):
    has_breaking_change: LenientBool = None
    breaking_changes: Annotated[
        list[BreakingChangeResult], BeforeValidator(_described_items)
    ] = Field(default_factory=list)
    new_features: Annotated[list[FeatureResult], BeforeValidator(_described_items)] = Field(
        default_factory=list
    )
    bug_fixes: Annotated[list[BugFixResult], BeforeValidator(_described_items)] = Field(
        default_factory=list
    )
    security_fixes: Annotated[
        list[SecurityFixResult], BeforeValidator(_described_items)
    ] = Field(default_factory=list)
    deprecations: Annotated[list[DeprecationResult], BeforeValidator(_text_items("api"))] = Field(
        default_factory=list
    )


class VersionDiffResult(AnalysisResult):
    update_type: LenientStr = ""
    semantic_impact: LenientStr = ""
    api_changes: Annotated[list[APIChangeResult], BeforeValidator(_lenient_list)] = Field(
        default_factory=list
    )
    behavior_changes: Annotated[list[BehaviorChangeResult], BeforeValidator(_lenient_list)] = Field(
        default_factory=list
    )
    migration_effort: LenientStr = ""
    backward_compatibility: LenientBool = None


class CompatibilityResult(AnalysisResult):
    compatibility_score: LenientFloat = None
    potential_issues: Annotated[
        list[CompatibilityIssueResult], BeforeValidator(_lenient_list)
    ] = Field(default_factory=list)
    migration_steps: Annotated[
        list[MigrationStepResult], BeforeValidator(_described_items)
    ] = Field(default_factory=list)
    testing_recommendations: Annotated[
        list[TestingRecommendationResult], BeforeValidator(_described_items)
    ] = Field(default_factory=list)


class ClassificationResult(AnalysisResult):
    update_type: LenientStr = ""
    priority: LenientStr = ""
    urgency: LenientStr = ""
    categories: Annotated[list[CategoryResult], BeforeValidator(named_items)] = Field(
        default_factory=list
    )
    risk_assessment: RiskAssessmentResult | None = None
