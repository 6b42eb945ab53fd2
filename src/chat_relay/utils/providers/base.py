"""Base interface for upstream completion providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class UpstreamMessage:
    """Single chat message sent upstream."""

    role: str
    content: str


@dataclass(frozen=True)
class UpstreamRequest:
    """Completion request built fresh for every relayed message."""

    model: str
    max_tokens: int
    messages: tuple[UpstreamMessage, ...] = field(default_factory=tuple)

    @classmethod
    def from_user_message(cls, text: str, model: str, max_tokens: int) -> "UpstreamRequest":
        """Build a request holding a single user-role message."""
        return cls(
            model=model,
            max_tokens=max_tokens,
            messages=(UpstreamMessage(role="user", content=text),),
        )

    def to_api_params(self) -> dict[str, Any]:
        """Render the JSON body expected by the Messages API."""
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [
                {"role": message.role, "content": message.content}
                for message in self.messages
            ],
        }


class BaseUpstreamProvider(ABC):
    """
    Abstract base class for upstream providers.

    ``create_message`` either returns the decoded JSON body of a successful
    response or raises one of:

    - ``UpstreamTimeoutError`` when the call ran out of time
    - ``UpstreamTransportError`` for any other communication failure
    - ``MalformedUpstreamResponseError`` when the body is not JSON

    Client-library specific exceptions never leak past a provider.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'anthropic')."""
        ...

    @abstractmethod
    async def create_message(self, request: UpstreamRequest) -> Any:
        """
        Send one completion request upstream.

        Args:
            request: Model, token budget and messages

        Returns:
            Decoded JSON response body, not yet validated
        """
        ...

    async def close(self) -> None:
        """Release network resources held by the provider."""
