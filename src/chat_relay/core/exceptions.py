"""Domain exceptions for the chat relay.

Each error knows the HTTP status it is reported with and renders the JSON
payload returned to the caller.
"""

from typing import Any


class ChatRelayError(Exception):
    """Base exception for all chat relay errors."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, message: str | None = None, details: str | None = None):
        super().__init__(message or self.error)
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        """Render the error body sent back to the caller."""
        payload: dict[str, Any] = {"error": self.error}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class MessageRequiredError(ChatRelayError):
    """Inbound request carried no usable message."""

    status_code = 400
    error = "Message is required."


class MalformedUpstreamResponseError(ChatRelayError):
    """Upstream answered successfully but without the expected content blocks."""

    error = "Invalid response format from AI service"


class UpstreamError(ChatRelayError):
    """Failure talking to the upstream completion API."""

    error = "Failed to fetch response from Anthropic API"

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message, details=message if details is None else details)


class UpstreamTimeoutError(UpstreamError):
    """Upstream call exceeded its time budget or the connection was aborted."""

    error = "Request timed out"

    def __init__(self, message: str = "Upstream request timed out"):
        super().__init__(message, details="The AI service took too long to respond")


class UpstreamTransportError(UpstreamError):
    """Any other upstream communication failure, including error statuses."""

    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        upstream_body: Any = None,
    ):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body
