"""OpenAI-compatible chat completions backend."""

from depwise.backends.openai.analyzer import OpenAIAnalyzer
from depwise.backends.openai.client import OpenAIClient

__all__ = ["OpenAIAnalyzer", "OpenAIClient"]
