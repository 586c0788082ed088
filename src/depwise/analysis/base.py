"""Analyzer capability contract shared by the heuristic engine and backends."""

from abc import ABC, abstractmethod
from typing import Any

from depwise.core.models import (
    ChangelogAnalysisRequest,
    ChangelogAnalysisResponse,
    CompatibilityPredictionRequest,
    CompatibilityPredictionResponse,
    UpdateClassificationRequest,
    UpdateClassificationResponse,
    VersionDiffAnalysisRequest,
    VersionDiffAnalysisResponse,
)


class BaseAnalyzer(ABC):
    """Base class for analyzers.

    An analyzer that cannot complete an analysis raises an exception from
    ``depwise.errors`` rather than returning a partially populated response.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name of the analyzer."""

    @property
    @abstractmethod
    def version(self) -> str:
        """Version of the analyzer implementation."""

    @abstractmethod
    async def is_available(self) -> bool:
        """Check if this analyzer can currently serve requests.

        Returns:
            True if available.
        """

    @abstractmethod
    async def analyze_changelog(
        self, request: ChangelogAnalysisRequest
    ) -> ChangelogAnalysisResponse:
        """Analyze changelog text for breaking changes, fixes and risk."""

    @abstractmethod
    async def analyze_version_diff(
        self, request: VersionDiffAnalysisRequest
    ) -> VersionDiffAnalysisResponse:
        """Analyze the structural diff between two versions."""

    @abstractmethod
    async def predict_compatibility(
        self, request: CompatibilityPredictionRequest
    ) -> CompatibilityPredictionResponse:
        """Predict how compatible an update is with the consuming project."""

    @abstractmethod
    async def classify_update(
        self, request: UpdateClassificationRequest
    ) -> UpdateClassificationResponse:
        """Classify an update by type, priority, urgency and category."""

    async def aclose(self) -> None:
        """Release any resources held by the analyzer."""
        return None

    async def __aenter__(self) -> "BaseAnalyzer":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} version={self.version!r}>"
