"""Tests for the analysis orchestrator."""

import asyncio
import json
import logging
from typing import TypeVar

import httpx
import pytest

from depwise.analysis.base import BaseAnalyzer
from depwise.analysis.heuristic_analyzer import HeuristicAnalyzer
from depwise.config import ClaudeConfig, DepwiseConfig, OpenAIConfig
from depwise.core.models import (
    AnalysisResponse,
    ChangelogAnalysisRequest,
    ChangelogAnalysisResponse,
    CompatibilityPredictionRequest,
    CompatibilityPredictionResponse,
    UpdateClassificationRequest,
    UpdateClassificationResponse,
    VersionDiffAnalysisRequest,
    VersionDiffAnalysisResponse,
)
from depwise.core.orchestrator import AnalysisOrchestrator
from depwise.errors import (
    AllAnalyzersFailedError,
    BackendConnectionError,
    DeadlineExceededError,
    DepwiseError,
    NoAnalyzerAvailableError,
    ResponseParseError,
)

ResponseT = TypeVar("ResponseT", bound=AnalysisResponse)


class FakeAnalyzer(BaseAnalyzer):
    """Scriptable analyzer that answers with heuristic results under its own name."""

    def __init__(
        self,
        name: str,
        failures: int = 0,
        available: bool = True,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self.failures = failures
        self.available = available
        self.error = error
        self.delay = delay
        self.calls = 0
        self.probes = 0
        self.closed = False
        self.last_response: AnalysisResponse | None = None
        self._heuristic = HeuristicAnalyzer()

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> str:
        return "test"

    async def is_available(self) -> bool:
        self.probes += 1
        return self.available

    async def _attempt(self) -> None:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.calls <= self.failures:
            raise self.error or BackendConnectionError(self._name)

    def _answer(self, response: ResponseT) -> ResponseT:
        answer = response.model_copy(update={"analyzer": self._name})
        self.last_response = answer
        return answer

    async def analyze_changelog(
        self, request: ChangelogAnalysisRequest
    ) -> ChangelogAnalysisResponse:
        await self._attempt()
        return self._answer(await self._heuristic.analyze_changelog(request))

    async def analyze_version_diff(
        self, request: VersionDiffAnalysisRequest
    ) -> VersionDiffAnalysisResponse:
        await self._attempt()
        return self._answer(await self._heuristic.analyze_version_diff(request))

    async def predict_compatibility(
        self, request: CompatibilityPredictionRequest
    ) -> CompatibilityPredictionResponse:
        await self._attempt()
        return self._answer(await self._heuristic.predict_compatibility(request))

    async def classify_update(
        self, request: UpdateClassificationRequest
    ) -> UpdateClassificationResponse:
        await self._attempt()
        return self._answer(await self._heuristic.classify_update(request))

    async def aclose(self) -> None:
        self.closed = True


def orchestrator_with(
    *analyzers: BaseAnalyzer,
    default: str = "openai",
    fallbacks: tuple[str, ...] = ("heuristic",),
    max_retries: int = 3,
    retry_delay: float = 0.0,
) -> AnalysisOrchestrator:
    return AnalysisOrchestrator(
        analyzers,
        default_analyzer=default,
        fallback_analyzers=fallbacks,
        max_retries=max_retries,
        retry_delay=retry_delay,
    )


class TestOrchestratorSetup:
    """Tests for registry and order construction."""

    def test_heuristic_always_registered(self) -> None:
        """Test that a heuristic analyzer is added automatically."""
        orchestrator = AnalysisOrchestrator()
        assert orchestrator.available_analyzers() == ["heuristic"]
        assert orchestrator.analyzer_order == ("heuristic",)
        assert isinstance(orchestrator.get_analyzer("heuristic"), HeuristicAnalyzer)

    def test_order_is_deduplicated(self) -> None:
        """Test that repeated names keep their first position."""
        orchestrator = orchestrator_with(
            default="openai", fallbacks=("claude", "openai", "heuristic", "claude")
        )
        assert orchestrator.analyzer_order == ("openai", "claude", "heuristic")

    def test_unknown_name_lookup(self) -> None:
        """Test looking up an unregistered analyzer."""
        assert AnalysisOrchestrator().get_analyzer("claude") is None

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_retries": -1}, {"retry_delay": -0.5}],
    )
    def test_rejects_negative_retry_settings(self, kwargs: dict[str, float]) -> None:
        """Test validation of retry settings."""
        with pytest.raises(ValueError):
            AnalysisOrchestrator(**kwargs)


class TestFallback:
    """Tests for ordered fallback across analyzers."""

    @pytest.mark.asyncio
    async def test_default_analyzer_answers(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test that the default analyzer's response is returned unchanged."""
        openai = FakeAnalyzer("openai")
        orchestrator = orchestrator_with(openai)

        response = await orchestrator.analyze_changelog(changelog_request)

        assert response is openai.last_response
        assert response.analyzer == "openai"
        assert openai.calls == 1

    @pytest.mark.asyncio
    async def test_unregistered_analyzer_is_skipped(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test that names without an analyzer are passed over."""
        orchestrator = orchestrator_with(default="claude")

        response = await orchestrator.analyze_changelog(changelog_request)

        assert response.analyzer == "heuristic"

    @pytest.mark.asyncio
    async def test_unavailable_analyzer_is_skipped(
        self,
        changelog_request: ChangelogAnalysisRequest,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test that a failed probe skips the analyzer without calling it."""
        openai = FakeAnalyzer("openai", available=False)
        orchestrator = orchestrator_with(openai)

        with caplog.at_level(logging.WARNING, logger="depwise"):
            response = await orchestrator.analyze_changelog(changelog_request)

        assert response.analyzer == "heuristic"
        assert openai.probes == 1
        assert openai.calls == 0
        assert "Skipping openai: not available" in caplog.text

    @pytest.mark.asyncio
    async def test_fallback_in_configured_order(
        self, classification_request: UpdateClassificationRequest
    ) -> None:
        """Test that a failing default falls through to the next analyzer."""
        openai = FakeAnalyzer("openai", failures=100)
        claude = FakeAnalyzer("claude")
        orchestrator = orchestrator_with(
            openai, claude, fallbacks=("claude", "heuristic"), max_retries=1
        )

        response = await orchestrator.classify_update(classification_request)

        assert response is claude.last_response
        assert openai.calls == 2
        assert claude.calls == 1

    @pytest.mark.asyncio
    async def test_all_analyzers_failed(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test that the last error is wrapped when every analyzer fails."""
        claude_error = ResponseParseError("Claude", "no JSON object")
        openai = FakeAnalyzer("openai", failures=100)
        claude = FakeAnalyzer("claude", failures=100, error=claude_error)
        orchestrator = orchestrator_with(
            openai, claude, fallbacks=("claude",), max_retries=0
        )

        with pytest.raises(AllAnalyzersFailedError) as exc_info:
            await orchestrator.analyze_changelog(changelog_request)

        assert exc_info.value.last_error is claude_error
        assert exc_info.value.__cause__ is claude_error
        assert exc_info.value.attempted == ["openai", "claude"]

    @pytest.mark.asyncio
    async def test_no_analyzer_available(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test the error when nothing in the order could be attempted."""
        openai = FakeAnalyzer("openai", available=False)
        orchestrator = orchestrator_with(openai, fallbacks=("claude",))

        with pytest.raises(NoAnalyzerAvailableError) as exc_info:
            await orchestrator.analyze_changelog(changelog_request)

        assert exc_info.value.order == ["openai", "claude"]
        assert openai.calls == 0

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test that programming errors are neither retried nor masked."""
        openai = FakeAnalyzer("openai", failures=1, error=RuntimeError("bug"))
        orchestrator = orchestrator_with(openai)

        with pytest.raises(RuntimeError):
            await orchestrator.analyze_changelog(changelog_request)
        assert openai.calls == 1

    @pytest.mark.asyncio
    async def test_every_operation_routes(
        self,
        changelog_request: ChangelogAnalysisRequest,
        version_diff_request: VersionDiffAnalysisRequest,
        compatibility_request: CompatibilityPredictionRequest,
        classification_request: UpdateClassificationRequest,
    ) -> None:
        """Test that all four operations go through the same order."""
        openai = FakeAnalyzer("openai")
        orchestrator = orchestrator_with(openai)

        responses = [
            await orchestrator.analyze_changelog(changelog_request),
            await orchestrator.analyze_version_diff(version_diff_request),
            await orchestrator.predict_compatibility(compatibility_request),
            await orchestrator.classify_update(classification_request),
        ]

        assert [response.analyzer for response in responses] == ["openai"] * 4
        assert openai.calls == 4

    @pytest.mark.asyncio
    async def test_concurrent_calls(
        self, classification_request: UpdateClassificationRequest
    ) -> None:
        """Test that one orchestrator serves concurrent calls."""
        openai = FakeAnalyzer("openai", delay=0.01)
        orchestrator = orchestrator_with(openai)

        responses = await asyncio.gather(
            *(orchestrator.classify_update(classification_request) for _ in range(5))
        )

        assert all(response.analyzer == "openai" for response in responses)
        assert openai.calls == 5


class TestRetry:
    """Tests for per-analyzer retries."""

    @pytest.mark.asyncio
    async def test_transient_failures_are_retried(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test success after transient failures on the same analyzer."""
        openai = FakeAnalyzer("openai", failures=2)
        orchestrator = orchestrator_with(openai, max_retries=3)

        response = await orchestrator.analyze_changelog(changelog_request)

        assert response.analyzer == "openai"
        assert openai.calls == 3

    @pytest.mark.asyncio
    async def test_retries_are_bounded(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test that an analyzer gets exactly 1 + max_retries attempts."""
        openai = FakeAnalyzer("openai", failures=100)
        orchestrator = orchestrator_with(openai, max_retries=2)

        response = await orchestrator.analyze_changelog(changelog_request)

        assert response.analyzer == "heuristic"
        assert openai.calls == 3

    @pytest.mark.asyncio
    async def test_zero_retries(self, changelog_request: ChangelogAnalysisRequest) -> None:
        """Test a single attempt when retries are disabled."""
        openai = FakeAnalyzer("openai", failures=1)
        orchestrator = orchestrator_with(openai, max_retries=0)

        response = await orchestrator.analyze_changelog(changelog_request)

        assert response.analyzer == "heuristic"
        assert openai.calls == 1


class TestDeadline:
    """Tests for per-call deadlines and cancellation."""

    @pytest.mark.asyncio
    async def test_expired_deadline_attempts_nothing(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test that a zero timeout fails before any analyzer is touched."""
        openai = FakeAnalyzer("openai")
        orchestrator = orchestrator_with(openai)

        with pytest.raises(DeadlineExceededError) as exc_info:
            await orchestrator.analyze_changelog(changelog_request, timeout=0)

        assert exc_info.value.timeout == 0
        assert openai.probes == 0
        assert openai.calls == 0

    @pytest.mark.asyncio
    async def test_deadline_interrupts_retry_delay(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test that a long retry delay does not outlive the deadline."""
        openai = FakeAnalyzer("openai", failures=100)
        orchestrator = orchestrator_with(openai, retry_delay=30.0)
        loop = asyncio.get_running_loop()

        started = loop.time()
        with pytest.raises(DeadlineExceededError):
            await orchestrator.analyze_changelog(changelog_request, timeout=0.05)

        assert loop.time() - started < 5
        assert openai.calls == 1

    @pytest.mark.asyncio
    async def test_deadline_interrupts_slow_analyzer(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test that a hung analyzer is abandoned without falling back."""
        openai = FakeAnalyzer("openai", delay=30.0)
        orchestrator = orchestrator_with(openai)

        with pytest.raises(DeadlineExceededError) as exc_info:
            await orchestrator.analyze_changelog(changelog_request, timeout=0.05)

        assert isinstance(exc_info.value, DepwiseError)
        assert not isinstance(exc_info.value, AllAnalyzersFailedError)

    @pytest.mark.asyncio
    async def test_cancellation_propagates(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test that cancelling the caller's task cancels the analysis."""
        openai = FakeAnalyzer("openai", delay=30.0)
        orchestrator = orchestrator_with(openai)

        task = asyncio.create_task(orchestrator.analyze_changelog(changelog_request))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert openai.calls == 1

    @pytest.mark.asyncio
    async def test_no_timeout_means_no_deadline(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test that the default call is unbounded."""
        openai = FakeAnalyzer("openai", delay=0.01)
        orchestrator = orchestrator_with(openai)

        response = await orchestrator.analyze_changelog(changelog_request, timeout=None)

        assert response.analyzer == "openai"


class TestFromConfig:
    """Tests for building an orchestrator from configuration."""

    def test_missing_credentials_are_omitted(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a backend without a key is left out with a warning."""
        config = DepwiseConfig(
            default_analyzer="openai",
            fallback_analyzers=["claude", "heuristic"],
            openai=OpenAIConfig(api_key="sk-test"),
        )

        with caplog.at_level(logging.WARNING, logger="depwise"):
            orchestrator = AnalysisOrchestrator.from_config(config)

        assert sorted(orchestrator.available_analyzers()) == ["heuristic", "openai"]
        assert orchestrator.analyzer_order == ("openai", "claude", "heuristic")
        assert "Analyzer claude not registered" in caplog.text

    def test_settings_are_applied(self) -> None:
        """Test that retry settings come from the configuration."""
        config = DepwiseConfig(max_retries=1, retry_delay=0.5)
        orchestrator = AnalysisOrchestrator.from_config(config)

        assert orchestrator.max_retries == 1
        assert orchestrator.retry_delay == 0.5
        assert orchestrator.analyzer_order == ("heuristic",)

    @pytest.mark.asyncio
    async def test_unreachable_backends_fall_back_to_heuristic(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test fallback from a backend whose completions fail to connect."""
        chat_calls: list[str] = []

        def openai_handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/models"):
                return httpx.Response(200, json={"data": [{"id": "gpt-4"}]})
            chat_calls.append(request.url.path)
            raise httpx.ConnectError("connection refused", request=request)

        def claude_handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        config = DepwiseConfig(
            default_analyzer="openai",
            fallback_analyzers=["claude", "heuristic"],
            max_retries=1,
            retry_delay=0,
            openai=OpenAIConfig(api_key="sk-test"),
            claude=ClaudeConfig(api_key="sk-ant-test"),
        )

        async with AnalysisOrchestrator.from_config(
            config,
            transports={
                "openai": httpx.MockTransport(openai_handler),
                "claude": httpx.MockTransport(claude_handler),
            },
        ) as orchestrator:
            response = await orchestrator.analyze_changelog(changelog_request)

        assert response.analyzer == "heuristic"
        assert response.package_name == "requests"
        assert chat_calls == ["/v1/chat/completions"] * 2

    @pytest.mark.asyncio
    async def test_undecodable_body_falls_back_to_heuristic(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test fallback when a backend answers 200 with bytes that are not text."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/models"):
                return httpx.Response(200, json={"data": [{"id": "gpt-4"}]})
            return httpx.Response(
                200,
                content=b"\xff\xfe{\x80bad",
                headers={"content-type": "application/json"},
            )

        config = DepwiseConfig(
            default_analyzer="openai",
            fallback_analyzers=["heuristic"],
            max_retries=0,
            retry_delay=0,
            openai=OpenAIConfig(api_key="sk-test"),
        )

        async with AnalysisOrchestrator.from_config(
            config, transports={"openai": httpx.MockTransport(handler)}
        ) as orchestrator:
            response = await orchestrator.analyze_changelog(changelog_request)

        assert response.analyzer == "heuristic"

    @pytest.mark.asyncio
    async def test_backend_response_is_returned(
        self, changelog_request: ChangelogAnalysisRequest
    ) -> None:
        """Test a configured backend answering through the orchestrator."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/models"):
                return httpx.Response(200, json={"data": [{"id": "gpt-4"}]})
            content = json.dumps({"risk_level": "critical", "summary": "Rewrite"})
            return httpx.Response(
                200,
                json={"choices": [{"message": {"role": "assistant", "content": content}}]},
            )

        config = DepwiseConfig(
            default_analyzer="openai",
            openai=OpenAIConfig(api_key="sk-test"),
        )

        async with AnalysisOrchestrator.from_config(
            config, transports={"openai": httpx.MockTransport(handler)}
        ) as orchestrator:
            response = await orchestrator.analyze_changelog(changelog_request)

        assert response.analyzer == "openai"
        assert response.summary == "Rewrite"
        assert response.risk_score == pytest.approx(9.5)


class TestClose:
    """Tests for releasing analyzer resources."""

    @pytest.mark.asyncio
    async def test_aclose_closes_all(self) -> None:
        """Test that closing the orchestrator closes every analyzer."""
        openai = FakeAnalyzer("openai")
        claude = FakeAnalyzer("claude")

        async with orchestrator_with(openai, claude):
            pass

        assert openai.closed
        assert claude.closed
