"""Core module containing the canonical request and response models."""

from depwise.core.models import (
    AnalysisRequest,
    AnalysisResponse,
    ChangelogAnalysisRequest,
    ChangelogAnalysisResponse,
    CompatibilityPredictionRequest,
    CompatibilityPredictionResponse,
    DependencyNode,
    FileChange,
    ProjectContext,
    RiskLevel,
    UpdateClassificationRequest,
    UpdateClassificationResponse,
    UpdateType,
    VersionDiffAnalysisRequest,
    VersionDiffAnalysisResponse,
)

__all__ = [
    "AnalysisRequest",
    "AnalysisResponse",
    "ChangelogAnalysisRequest",
    "ChangelogAnalysisResponse",
    "CompatibilityPredictionRequest",
    "CompatibilityPredictionResponse",
    "DependencyNode",
    "FileChange",
    "ProjectContext",
    "RiskLevel",
    "UpdateClassificationRequest",
    "UpdateClassificationResponse",
    "UpdateType",
    "VersionDiffAnalysisRequest",
    "VersionDiffAnalysisResponse",
]
