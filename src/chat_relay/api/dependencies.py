"""FastAPI dependency injection."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from chat_relay.core.relay import ChatRelay


async def get_chat_relay(request: Request) -> ChatRelay:
    """Get the chat relay created during application startup."""
    relay = getattr(request.app.state, "chat_relay", None)
    if relay is None:
        raise HTTPException(status_code=503, detail="Chat relay is not initialized")
    return relay


# Type aliases for dependency injection
ChatRelayDep = Annotated[ChatRelay, Depends(get_chat_relay)]
