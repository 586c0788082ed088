"""Ollama wire format and model settings."""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from depwise.backends.schemas import CategoryResult, ClassificationResult, named_items


class OllamaModelSettings(BaseModel):
    """Model identifier plus the generation options sent with each call."""

    model_config = ConfigDict(frozen=True)

    model: str
    temperature: float = 0.7
    top_p: float = 0.9
    top_k: int = 40
    num_predict: int = 2048

    def options(self) -> dict[str, Any]:
        return {
            "temperature": self.temperature,
            "top_p": self.top_p,
            "top_k": self.top_k,
            "num_predict": self.num_predict,
        }


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: str = "assistant"
    content: str = ""


class ChatResponse(BaseModel):
    """Response body of a non-streaming ``POST /api/chat``."""

    model_config = ConfigDict(extra="ignore")

    model: str = ""
    created_at: str = ""
    message: ChatMessage = Field(default_factory=ChatMessage)
    done: bool = True


class ModelInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    modified_at: str = ""
    size: int = 0
    digest: str = ""


class ModelsResponse(BaseModel):
    """Response body of ``GET /api/tags``."""

    model_config = ConfigDict(extra="ignore")

    models: list[ModelInfo] = Field(default_factory=list)


def _category_items(value: Any) -> Any:
    # small models often answer {"security": 0.6, "bugfix": 0.4}
    if isinstance(value, dict):
        return [{"name": name, "weight": weight} for name, weight in value.items()]
    return named_items(value)


class OllamaClassificationResult(ClassificationResult):
    """Classification shape accepting a category to weight mapping."""

    categories: Annotated[list[CategoryResult], BeforeValidator(_category_items)] = Field(
        default_factory=list
    )
