"""Shared pipeline for network-backed analyzers.

Each backend renders a prompt, makes one transport call, extracts the JSON
object from the reply, decodes it into an intermediate shape and converts
that into the canonical response. Failures are raised, never retried here.
"""

from abc import abstractmethod
from typing import TypeVar

from pydantic import ValidationError

from depwise.analysis.base import BaseAnalyzer
from depwise.backends.conversion import (
    to_changelog_response,
    to_classification_response,
    to_compatibility_response,
    to_version_diff_response,
)
from depwise.backends.json_extraction import extract_json_object
from depwise.backends.schemas import (
    ChangelogResult,
    ClassificationResult,
    CompatibilityResult,
    ResultModel,
    VersionDiffResult,
)
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
from depwise.errors import ResponseParseError
from depwise.utils.logging import get_logger

logger = get_logger(__name__)

ResultT = TypeVar("ResultT", bound=ResultModel)

Prompt = tuple[str, str]


def decode_result(text: str, schema: type[ResultT], service: str = "") -> ResultT:
    """Extract and decode the JSON object in a model reply.

    Args:
        text: Raw model reply.
        schema: Intermediate shape to decode into.
        service: Backend name used in error messages.

    Returns:
        The decoded intermediate result.

    Raises:
        ResponseParseError: If no object is found or it does not decode.
    """
    payload = extract_json_object(text, service)
    try:
        return schema.model_validate_json(payload)
    except ValidationError as e:
        raise ResponseParseError(
            service, f"reply does not match {schema.__name__}: {e.error_count()} error(s)"
        ) from e


class BackendAnalyzer(BaseAnalyzer):
    """Base class for analyzers that delegate to a language model backend.

    Subclasses supply the transport call (``_complete``) and the prompt
    builders; the template methods here do the rest.
    """

    display_name = "backend"

    # model risk scores are multiplied by this to land on the 0-10 scale
    risk_score_scale = 1.0

    changelog_schema: type[ChangelogResult] = ChangelogResult
    version_diff_schema: type[VersionDiffResult] = VersionDiffResult
    compatibility_schema: type[CompatibilityResult] = CompatibilityResult
    classification_schema: type[ClassificationResult] = ClassificationResult

    @property
    def version(self) -> str:
        return "1.0.0"

    @abstractmethod
    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send one prompt to the backend and return the reply text.

        Raises:
            TransportError: If the backend is unreachable or rejects the call.
            ResponseParseError: If the reply envelope holds no text.
        """

    @abstractmethod
    def build_changelog_prompt(self, request: ChangelogAnalysisRequest) -> Prompt:
        """Return (system prompt, user prompt) for changelog analysis."""

    @abstractmethod
    def build_version_diff_prompt(self, request: VersionDiffAnalysisRequest) -> Prompt:
        """Return (system prompt, user prompt) for version diff analysis."""

    @abstractmethod
    def build_compatibility_prompt(self, request: CompatibilityPredictionRequest) -> Prompt:
        """Return (system prompt, user prompt) for compatibility prediction."""

    @abstractmethod
    def build_classification_prompt(self, request: UpdateClassificationRequest) -> Prompt:
        """Return (system prompt, user prompt) for update classification."""

    async def _generate(self, prompt: Prompt, schema: type[ResultT]) -> ResultT:
        system_prompt, user_prompt = prompt
        reply = await self._complete(system_prompt, user_prompt)
        return decode_result(reply, schema, self.display_name)

    async def analyze_changelog(
        self, request: ChangelogAnalysisRequest
    ) -> ChangelogAnalysisResponse:
        logger.debug(
            "Analyzing changelog with %s for %s: %s -> %s",
            self.display_name,
            request.package_name,
            request.from_version,
            request.to_version,
        )
        result = await self._generate(self.build_changelog_prompt(request), self.changelog_schema)
        response = to_changelog_response(request, result, self.name, self.risk_score_scale)
        logger.debug(
            "%s changelog analysis complete for %s: risk=%s, confidence=%.2f",
            self.display_name,
            request.package_name,
            response.risk_level.value,
            response.confidence,
        )
        return response

    async def analyze_version_diff(
        self, request: VersionDiffAnalysisRequest
    ) -> VersionDiffAnalysisResponse:
        logger.debug(
            "Analyzing version diff with %s for %s: %s -> %s",
            self.display_name,
            request.package_name,
            request.from_version,
            request.to_version,
        )
        result = await self._generate(
            self.build_version_diff_prompt(request), self.version_diff_schema
        )
        return to_version_diff_response(request, result, self.name, self.risk_score_scale)

    async def predict_compatibility(
        self, request: CompatibilityPredictionRequest
    ) -> CompatibilityPredictionResponse:
        logger.debug(
            "Predicting compatibility with %s for %s: %s -> %s",
            self.display_name,
            request.package_name,
            request.from_version,
            request.to_version,
        )
        result = await self._generate(
            self.build_compatibility_prompt(request), self.compatibility_schema
        )
        return to_compatibility_response(request, result, self.name, self.risk_score_scale)

    async def classify_update(
        self, request: UpdateClassificationRequest
    ) -> UpdateClassificationResponse:
        logger.debug(
            "Classifying update with %s for %s: %s -> %s",
            self.display_name,
            request.package_name,
            request.from_version,
            request.to_version,
        )
        result = await self._generate(
            self.build_classification_prompt(request), self.classification_schema
        )
        return to_classification_response(request, result, self.name, self.risk_score_scale)
