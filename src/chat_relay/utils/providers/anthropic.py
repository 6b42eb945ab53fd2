"""Anthropic direct API provider.

Resilience patterns applied:
- Timeout to bound operation duration
- Anthropic SDK errors normalized to relay errors

Retries are owned by the relay, so the SDK's built-in retries are disabled.
"""

from typing import Any

import httpx
from anthropic import AsyncAnthropic

from chat_relay.core.exceptions import MalformedUpstreamResponseError
from chat_relay.core.resilience import operation_timeout, wrap_anthropic_errors
from chat_relay.utils.logging import get_logger
from chat_relay.utils.providers.base import BaseUpstreamProvider, UpstreamRequest


logger = get_logger(__name__)


class AnthropicProvider(BaseUpstreamProvider):
    """
    Direct Anthropic API provider.

    Uses the official Anthropic Python SDK in raw-response mode so the JSON
    body reaches the relay exactly as the API sent it.
    """

    def __init__(
        self,
        api_key: str,
        timeout_seconds: float = 25.0,
        base_url: str | None = None,
        anthropic_version: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key
            timeout_seconds: Time budget for a single call
            base_url: Override for the API host
            anthropic_version: Value of the ``anthropic-version`` header
            http_client: Preconfigured ``httpx.AsyncClient`` (anthropic 0.x SDK; tests plug a mock transport in here)
        """
        default_headers = {}
        if anthropic_version:
            default_headers["anthropic-version"] = anthropic_version

        self._timeout_seconds = timeout_seconds
        self._client = AsyncAnthropic(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
            default_headers=default_headers or None,
            http_client=http_client,
        )
        self._send = operation_timeout(timeout_seconds)(self._post_message)

    @property
    def provider_name(self) -> str:
        return "anthropic"

    async def create_message(self, request: UpstreamRequest) -> Any:
        logger.debug(
            "Calling Anthropic API",
            model=request.model,
            max_tokens=request.max_tokens,
            prompt_length=sum(len(m.content) for m in request.messages),
        )

        response = await self._send(request)

        try:
            body = response.json()
        except ValueError as e:
            logger.error(
                "Anthropic response is not valid JSON",
                status_code=response.status_code,
                error=str(e),
            )
            raise MalformedUpstreamResponseError(str(e)) from e

        logger.debug(
            "Anthropic response received",
            model=request.model,
            status_code=response.status_code,
            stop_reason=body.get("stop_reason") if isinstance(body, dict) else None,
        )
        return body

    @wrap_anthropic_errors
    async def _post_message(self, request: UpstreamRequest) -> httpx.Response:
        raw = await self._client.messages.with_raw_response.create(
            **request.to_api_params()
        )
        return raw.http_response

    async def close(self) -> None:
        await self._client.close()
