"""depwise: multi-backend dependency update analysis."""

from depwise.config import DepwiseConfig, load_config, validate_config
from depwise.core.orchestrator import AnalysisOrchestrator
from depwise.errors import (
    AllAnalyzersFailedError,
    DeadlineExceededError,
    DepwiseError,
    NoAnalyzerAvailableError,
)
from depwise.utils.logging import configure_logging

__version__ = "0.1.0"

__all__ = [
    "AllAnalyzersFailedError",
    "AnalysisOrchestrator",
    "DeadlineExceededError",
    "DepwiseConfig",
    "DepwiseError",
    "NoAnalyzerAvailableError",
    "__version__",
    "configure_logging",
    "load_config",
    "validate_config",
]
