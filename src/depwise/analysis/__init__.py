"""Analyzer contract and the offline heuristic analyzer."""

from depwise.analysis.base import BaseAnalyzer
from depwise.analysis.heuristic_analyzer import (
    HEURISTIC_ANALYZER_NAME,
    HeuristicAnalyzer,
    determine_update_type,
    parse_version,
)

__all__ = [
    "BaseAnalyzer",
    "HEURISTIC_ANALYZER_NAME",
    "HeuristicAnalyzer",
    "determine_update_type",
    "parse_version",
]
