"""API module."""

from .routes import router
from .models import ChatRequest, ChatResponse, ErrorResponse, HealthResponse

__all__ = ["router", "ChatRequest", "ChatResponse", "ErrorResponse", "HealthResponse"]
