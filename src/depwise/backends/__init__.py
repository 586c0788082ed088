"""Language model backends."""

from depwise.backends.base import BackendAnalyzer, decode_result
from depwise.backends.claude import ClaudeAnalyzer
from depwise.backends.json_extraction import extract_json_object
from depwise.backends.ollama import OllamaAnalyzer
from depwise.backends.openai import OpenAIAnalyzer

__all__ = [
    "BackendAnalyzer",
    "ClaudeAnalyzer",
    "OllamaAnalyzer",
    "OpenAIAnalyzer",
    "decode_result",
    "extract_json_object",
]
