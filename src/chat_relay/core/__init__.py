"""Core domain modules."""

from chat_relay.core.exceptions import (
    ChatRelayError,
    MessageRequiredError,
    MalformedUpstreamResponseError,
    UpstreamError,
    UpstreamTimeoutError,
    UpstreamTransportError,
)

__all__ = [
    # Exceptions
    "ChatRelayError",
    "MessageRequiredError",
    "MalformedUpstreamResponseError",
    "UpstreamError",
    "UpstreamTimeoutError",
    "UpstreamTransportError",
]
