"""Anthropic messages wire format."""

from pydantic import BaseModel, ConfigDict, Field


class ContentBlock(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    text: str = ""


class Usage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    input_tokens: int = 0
    output_tokens: int = 0


class MessageResponse(BaseModel):
    """Response body of ``POST /v1/messages``."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    model: str = ""
    role: str = "assistant"
    content: list[ContentBlock] = Field(default_factory=list)
    stop_reason: str | None = None
    usage: Usage | None = None

    @property
    def text(self) -> str:
        """Concatenated text of all text blocks."""
        return "".join(block.text for block in self.content if block.type == "text")
