"""FastAPI routes for the chat API."""

from fastapi import APIRouter

from chat_relay import __version__
from chat_relay.api.dependencies import ChatRelayDep
from chat_relay.api.models import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
)
from chat_relay.utils.logging import get_logger


logger = get_logger(__name__)
router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns application status and version.
    """
    return HealthResponse(
        status="ok",
        version=__version__,
    )


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Message missing or empty"},
        500: {"model": ErrorResponse, "description": "Upstream failure or malformed reply"},
    },
)
async def chat(
    relay: ChatRelayDep,
    chat_request: ChatRequest | None = None,
) -> ChatResponse:
    """
    Relay a single message to the AI service.

    Errors raised by the relay are rendered by the ``ChatRelayError``
    exception handler registered in ``create_app``.
    """
    message = chat_request.message if chat_request else None
    logger.debug("Chat request received", message_length=len(message or ""))
    text = await relay.relay(message)
    return ChatResponse.from_text(text)
