"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chat_relay import __version__
from chat_relay.api.routes import router
from chat_relay.config.settings import get_settings
from chat_relay.core.exceptions import ChatRelayError, MessageRequiredError
from chat_relay.core.relay import ChatRelay
from chat_relay.utils.logging import configure_logging, get_logger
from chat_relay.utils.providers import create_provider


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Creates the upstream provider and relay on startup and closes the
    provider's HTTP client on shutdown.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("Starting application...")
    provider = create_provider(settings)
    app.state.chat_relay = ChatRelay.from_settings(provider, settings)
    logger.info(
        "Chat relay initialized",
        provider=provider.provider_name,
        model=settings.relay_model,
        max_tokens=settings.relay_max_tokens,
        timeout_seconds=settings.relay_timeout_seconds,
        max_retries=settings.relay_max_retries,
    )

    yield

    logger.info("Shutdown initiated...")
    app.state.chat_relay = None
    await provider.close()
    logger.info("Shutdown complete")


async def chat_relay_error_handler(request: Request, exc: ChatRelayError) -> JSONResponse:
    """Render relay errors with their own status and payload."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Unparseable bodies and non-string messages count as a missing message."""
    logger.warning(
        "Rejected chat request with invalid body",
        path=request.url.path,
        errors=exc.errors(),
    )
    error = MessageRequiredError()
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Chat Relay API",
        description="Relays chat messages to the Anthropic Messages API",
        version=__version__,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ChatRelayError, chat_relay_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # Include routes
    app.include_router(router, prefix="/api")

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "name": "Chat Relay API",
            "version": __version__,
            "docs": "/docs",
        }

    return app


# Create application instance
app = create_app()


def main() -> None:
    """Entry point for running the application."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "chat_relay.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
