"""Anthropic Claude backend."""

from depwise.backends.claude.analyzer import ClaudeAnalyzer
from depwise.backends.claude.client import ClaudeClient

__all__ = ["ClaudeAnalyzer", "ClaudeClient"]
