"""Analysis orchestrator.

Routes each analysis call through the configured analyzer order:

1. Effective order = default analyzer + fallbacks, de-duplicated
2. Unregistered analyzers are skipped; backends are probed with is_available()
3. Each analyzer gets 1 + max_retries attempts with a fixed delay between them
4. The first success is returned; if every attempted analyzer fails, the
   last error is wrapped in AllAnalyzersFailedError

A per-call timeout bounds the whole call, probes and retry delays included.
Expiry raises DeadlineExceededError; task cancellation propagates unchanged.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import TypeVar

import httpx

from depwise.analysis.base import BaseAnalyzer
from depwise.analysis.heuristic_analyzer import HEURISTIC_ANALYZER_NAME, HeuristicAnalyzer
from depwise.backends.claude import ClaudeAnalyzer
from depwise.backends.ollama import OllamaAnalyzer
from depwise.backends.openai import OpenAIAnalyzer
from depwise.config import CLAUDE, OLLAMA, OPENAI, DepwiseConfig
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
from depwise.errors import (
    AllAnalyzersFailedError,
    AnalysisCancelledError,
    ConfigurationError,
    DeadlineExceededError,
    DepwiseError,
    NoAnalyzerAvailableError,
)
from depwise.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class AnalysisOrchestrator:
    """Runs analyses against an ordered set of analyzers with retry and fallback.

    The registry and order are fixed after construction, so one orchestrator
    can serve concurrent calls without locking.
    """

    def __init__(
        self,
        analyzers: Iterable[BaseAnalyzer] = (),
        default_analyzer: str = HEURISTIC_ANALYZER_NAME,
        fallback_analyzers: Iterable[str] = (HEURISTIC_ANALYZER_NAME,),
        max_retries: int = 3,
        retry_delay: float = 2.0,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            analyzers: Analyzer instances, registered by name. A heuristic
                analyzer is added when none is given.
            default_analyzer: Name of the analyzer tried first.
            fallback_analyzers: Names tried in order after the default.
            max_retries: Extra attempts per analyzer after the first.
            retry_delay: Seconds to wait between attempts.
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if retry_delay < 0:
            raise ValueError("retry_delay must be >= 0")

        self._analyzers: dict[str, BaseAnalyzer] = {}
        for analyzer in analyzers:
            self._analyzers[analyzer.name] = analyzer
        if HEURISTIC_ANALYZER_NAME not in self._analyzers:
            self._analyzers[HEURISTIC_ANALYZER_NAME] = HeuristicAnalyzer()

        self.default_analyzer = default_analyzer
        self.fallback_analyzers = tuple(fallback_analyzers)
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        order: list[str] = []
        for name in (default_analyzer, *self.fallback_analyzers):
            if name not in order:
                order.append(name)
        self._order = tuple(order)

    @classmethod
    def from_config(
        cls,
        config: DepwiseConfig,
        transports: Mapping[str, httpx.AsyncBaseTransport] | None = None,
    ) -> "AnalysisOrchestrator":
        """Build an orchestrator and its backend analyzers from configuration.

        A backend is constructed when it is configured or named in the
        analyzer order. Construction failures are logged and the backend is
        left out of the registry.

        Args:
            config: Loaded configuration.
            transports: Optional httpx transport per backend name.

        Returns:
            Configured orchestrator.
        """
        transports = transports or {}
        wanted = set(config.analyzer_priority())

        factories: dict[str, Callable[[], BaseAnalyzer]] = {
            OPENAI: lambda: OpenAIAnalyzer(
                config.openai,
                timeout=config.request_timeout,
                transport=transports.get(OPENAI),
            ),
            CLAUDE: lambda: ClaudeAnalyzer(
                config.claude,
                timeout=config.request_timeout,
                transport=transports.get(CLAUDE),
            ),
            OLLAMA: lambda: OllamaAnalyzer(config.ollama, transport=transports.get(OLLAMA)),
        }

        analyzers: list[BaseAnalyzer] = [HeuristicAnalyzer()]
        for name, factory in factories.items():
            if not (config.is_configured(name) or name in wanted):
                continue
            try:
                analyzer = factory()
            except ConfigurationError as e:
                logger.warning("Analyzer %s not registered: %s", name, e.message)
                continue
            analyzers.append(analyzer)
            logger.info("Registered analyzer %s (%s)", analyzer.name, analyzer.version)

        return cls(
            analyzers,
            default_analyzer=config.default_analyzer,
            fallback_analyzers=config.effective_fallbacks(),
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
        )

    @property
    def analyzer_order(self) -> tuple[str, ...]:
        """Effective analyzer order, default first."""
        return self._order

    def available_analyzers(self) -> list[str]:
        """Names of the registered analyzers."""
        return list(self._analyzers)

    def get_analyzer(self, name: str) -> BaseAnalyzer | None:
        return self._analyzers.get(name)

    async def analyze_changelog(
        self,
        request: ChangelogAnalysisRequest,
        *,
        timeout: float | None = None,
    ) -> ChangelogAnalysisResponse:
        """Analyze changelog text for an update.

        Args:
            request: Changelog analysis request.
            timeout: Seconds the whole call may take, or None for no limit.

        Returns:
            Response from the first analyzer that succeeded.

        Raises:
            DeadlineExceededError: If the timeout expired.
            NoAnalyzerAvailableError: If no analyzer could be attempted.
            AllAnalyzersFailedError: If every attempted analyzer failed.
        """
        return await self._execute_with_fallback(
            "analyze_changelog",
            lambda analyzer: analyzer.analyze_changelog(request),
            timeout,
        )

    async def analyze_version_diff(
        self,
        request: VersionDiffAnalysisRequest,
        *,
        timeout: float | None = None,
    ) -> VersionDiffAnalysisResponse:
        """Analyze the differences between two versions. See analyze_changelog."""
        return await self._execute_with_fallback(
            "analyze_version_diff",
            lambda analyzer: analyzer.analyze_version_diff(request),
            timeout,
        )

    async def predict_compatibility(
        self,
        request: CompatibilityPredictionRequest,
        *,
        timeout: float | None = None,
    ) -> CompatibilityPredictionResponse:
        """Predict compatibility issues for a project. See analyze_changelog."""
        return await self._execute_with_fallback(
            "predict_compatibility",
            lambda analyzer: analyzer.predict_compatibility(request),
            timeout,
        )

    async def classify_update(
        self,
        request: UpdateClassificationRequest,
        *,
        timeout: float | None = None,
    ) -> UpdateClassificationResponse:
        """Classify an update by type, priority and urgency. See analyze_changelog."""
        return await self._execute_with_fallback(
            "classify_update",
            lambda analyzer: analyzer.classify_update(request),
            timeout,
        )

    async def _execute_with_fallback(
        self,
        operation_name: str,
        operation: Callable[[BaseAnalyzer], Awaitable[T]],
        timeout: float | None,
    ) -> T:
        """Run an operation through the analyzer order under one deadline."""
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout

        scope = asyncio.timeout_at(deadline)
        try:
            async with scope:
                return await self._run_in_order(operation_name, operation, deadline, timeout)
        except TimeoutError as e:
            if not scope.expired():
                raise
            logger.warning("%s aborted: deadline of %gs exceeded", operation_name, timeout)
            raise DeadlineExceededError(timeout) from e

    async def _run_in_order(
        self,
        operation_name: str,
        operation: Callable[[BaseAnalyzer], Awaitable[T]],
        deadline: float | None,
        timeout: float | None,
    ) -> T:
        attempted: list[str] = []
        last_error: DepwiseError | None = None

        for name in self._order:
            self._check_deadline(deadline, timeout)

            analyzer = self._analyzers.get(name)
            if analyzer is None:
                logger.debug("Skipping %s: not registered", name)
                continue

            if analyzer.name != HEURISTIC_ANALYZER_NAME and not await analyzer.is_available():
                logger.warning("Skipping %s: not available", name)
                continue

            attempted.append(name)
            try:
                return await self._execute_with_retry(
                    operation_name, analyzer, operation, deadline, timeout
                )
            except AnalysisCancelledError:
                raise
            except DepwiseError as e:
                last_error = e
                logger.warning("Analyzer %s failed %s: %s", name, operation_name, e.message)

        if last_error is None:
            raise NoAnalyzerAvailableError(list(self._order))
        raise AllAnalyzersFailedError(last_error, attempted) from last_error

    async def _execute_with_retry(
        self,
        operation_name: str,
        analyzer: BaseAnalyzer,
        operation: Callable[[BaseAnalyzer], Awaitable[T]],
        deadline: float | None,
        timeout: float | None,
    ) -> T:
        attempts = self.max_retries + 1
        attempt = 1
        while True:
            self._check_deadline(deadline, timeout)
            logger.debug(
                "%s with %s (attempt %d/%d)", operation_name, analyzer.name, attempt, attempts
            )
            try:
                return await operation(analyzer)
            except AnalysisCancelledError:
                raise
            except DepwiseError as e:
                if attempt == attempts:
                    raise
                logger.debug(
                    "%s attempt %d failed: %s; retrying in %gs",
                    analyzer.name,
                    attempt,
                    e.message,
                    self.retry_delay,
                )
                await asyncio.sleep(self.retry_delay)
                attempt += 1

    @staticmethod
    def _check_deadline(deadline: float | None, timeout: float | None) -> None:
        if deadline is not None and asyncio.get_running_loop().time() >= deadline:
            raise DeadlineExceededError(timeout)

    async def aclose(self) -> None:
        """Close every registered analyzer."""
        for analyzer in self._analyzers.values():
            await analyzer.aclose()

    async def __aenter__(self) -> "AnalysisOrchestrator":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
