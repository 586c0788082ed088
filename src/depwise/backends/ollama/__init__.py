"""Local Ollama backend."""

from depwise.backends.ollama.analyzer import POPULAR_MODEL_PRESETS, OllamaAnalyzer
from depwise.backends.ollama.client import OllamaClient
from depwise.backends.ollama.schemas import OllamaModelSettings

__all__ = ["POPULAR_MODEL_PRESETS", "OllamaAnalyzer", "OllamaClient", "OllamaModelSettings"]
