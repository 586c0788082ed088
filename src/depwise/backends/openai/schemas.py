"""Chat completions wire format."""

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: str
    content: str | None = None


class ChatChoice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    index: int = 0
    message: ChatMessage
    finish_reason: str | None = None


class Usage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletionResponse(BaseModel):
    """Response body of ``POST /chat/completions``."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    model: str = ""
    choices: list[ChatChoice] = Field(default_factory=list)
    usage: Usage | None = None


class ModelEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str


class ModelList(BaseModel):
    """Response body of ``GET /models``."""

    model_config = ConfigDict(extra="ignore")

    data: list[ModelEntry] = Field(default_factory=list)
