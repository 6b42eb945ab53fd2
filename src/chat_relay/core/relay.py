"""Relay of a single user message to the upstream completion API.

Flow for each request:
1. Validate the inbound message
2. Build a fresh upstream request (configured model and token budget)
3. Call upstream with bounded retries and exponential backoff
4. Extract the first content block's text from the response
"""

import asyncio
from typing import Any

from chat_relay.config.settings import Settings
from chat_relay.core.exceptions import (
    MalformedUpstreamResponseError,
    MessageRequiredError,
    UpstreamError,
)
from chat_relay.core.resilience import RetryPolicy, Sleep, call_with_retry
from chat_relay.utils.logging import get_logger
from chat_relay.utils.providers.base import BaseUpstreamProvider, UpstreamRequest


logger = get_logger(__name__)

FALLBACK_REPLY_TEXT = "No response generated"


def extract_reply_text(body: Any) -> str:
    """
    Pull the reply text out of an upstream response body.

    Only the first content block is used. A block without text (or with an
    empty one) yields ``FALLBACK_REPLY_TEXT``.

    Raises:
        MalformedUpstreamResponseError: If the body has no usable content blocks
    """
    if not isinstance(body, dict):
        raise MalformedUpstreamResponseError("response body is not an object")

    content = body.get("content")
    if not isinstance(content, list) or not content:
        raise MalformedUpstreamResponseError("response has no content blocks")

    first_block = content[0]
    if not isinstance(first_block, dict):
        raise MalformedUpstreamResponseError("first content block is not an object")

    text = first_block.get("text")
    if text is not None and not isinstance(text, str):
        raise MalformedUpstreamResponseError("content block text is not a string")

    return text or FALLBACK_REPLY_TEXT


class ChatRelay:
    """
    Stateless relay between the chat endpoint and the upstream provider.

    A single instance is shared by all requests; nothing is stored between
    calls.
    """

    def __init__(
        self,
        provider: BaseUpstreamProvider,
        model: str,
        max_tokens: int,
        retry_policy: RetryPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize the relay.

        Args:
            provider: Upstream provider used for the outbound call
            model: Model identifier sent upstream
            max_tokens: Output token budget sent upstream
            retry_policy: Retry budget and backoff for transient failures
            sleep: Awaitable used for backoff delays
        """
        self._provider = provider
        self._model = model
        self._max_tokens = max_tokens
        self._retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        provider: BaseUpstreamProvider,
        settings: Settings,
        sleep: Sleep = asyncio.sleep,
    ) -> "ChatRelay":
        """Create a relay configured from application settings."""
        return cls(
            provider=provider,
            model=settings.relay_model,
            max_tokens=settings.relay_max_tokens,
            retry_policy=RetryPolicy(
                max_retries=settings.relay_max_retries,
                backoff_base=settings.relay_backoff_base,
            ),
            sleep=sleep,
        )

    @property
    def provider(self) -> BaseUpstreamProvider:
        return self._provider

    def build_request(self, message: str) -> UpstreamRequest:
        """Build the upstream request for one user message."""
        return UpstreamRequest.from_user_message(
            message,
            model=self._model,
            max_tokens=self._max_tokens,
        )

    async def fetch_completion(self, message: str) -> Any:
        """
        Call upstream for ``message``, retrying transient failures.

        Returns:
            Raw upstream response body

        Raises:
            UpstreamTimeoutError: Every attempt timed out (or the last one did)
            UpstreamTransportError: Every attempt failed to communicate
        """
        request = self.build_request(message)
        return await call_with_retry(
            lambda: self._provider.create_message(request),
            self._retry_policy,
            sleep=self._sleep,
        )

    async def relay(self, message: Any) -> str:
        """
        Relay one message and return the reply text.

        Args:
            message: Inbound message, validated here

        Returns:
            Text of the first upstream content block, or the fallback text

        Raises:
            ChatRelayError: Subclass describing the failure and its HTTP status
        """
        if not isinstance(message, str) or not message:
            logger.warning("Rejected chat request without message")
            raise MessageRequiredError()

        try:
            body = await self.fetch_completion(message)
        except UpstreamError as e:
            logger.error(
                "Error communicating with Anthropic API",
                error=str(e),
                upstream_status=getattr(e, "upstream_status", None),
                upstream_body=getattr(e, "upstream_body", None),
            )
            raise

        try:
            return extract_reply_text(body)
        except MalformedUpstreamResponseError as e:
            logger.error(
                "Invalid response format from AI service",
                reason=str(e),
            )
            raise
