"""API request/response models."""

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Request model for chat endpoint."""

    message: str | None = Field(default=None, description="User message")


class ContentBlock(BaseModel):
    """Single block of reply text."""

    text: str


class Reply(BaseModel):
    """Normalized reply holding the first upstream content block."""

    content: list[ContentBlock]


class ChatResponse(BaseModel):
    """Response model for chat endpoint."""

    reply: Reply

    @classmethod
    def from_text(cls, text: str) -> "ChatResponse":
        return cls(reply=Reply(content=[ContentBlock(text=text)]))


class ErrorResponse(BaseModel):
    """Error payload returned on 4xx/5xx."""

    error: str
    details: str | None = None


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    version: str
