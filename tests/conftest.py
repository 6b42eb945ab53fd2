"""Pytest fixtures for testing."""

import json
from typing import Any, Callable

import httpx
import pytest

from chat_relay.config.settings import Settings
from chat_relay.core.relay import ChatRelay
from chat_relay.core.resilience import RetryPolicy
from chat_relay.utils.providers.anthropic import AnthropicProvider
from chat_relay.utils.providers.base import BaseUpstreamProvider, UpstreamRequest


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class ScriptedProvider(BaseUpstreamProvider):
    """Provider replaying a fixed list of outcomes (bodies or exceptions)."""

    def __init__(self, outcomes: list[Any]):
        self._outcomes = list(outcomes)
        self.requests: list[UpstreamRequest] = []

    @property
    def provider_name(self) -> str:
        return "scripted"

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def create_message(self, request: UpstreamRequest) -> Any:
        self.requests.append(request)
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class MockUpstream:
    """httpx transport handler standing in for the Messages API."""

    def __init__(self, responses: list[Any]):
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if callable(response):
            response = response(request)
        if isinstance(response, BaseException):
            raise response
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)

    def sent_json(self, index: int = 0) -> dict[str, Any]:
        return json.loads(self.requests[index].content)


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        anthropic_api_key="test-key",
        log_level="DEBUG",
    )


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_anthropic_provider(settings: Settings) -> Callable[[MockUpstream], AnthropicProvider]:
    """Build an AnthropicProvider whose HTTP traffic goes to a MockUpstream."""

    def factory(upstream: MockUpstream) -> AnthropicProvider:
        return AnthropicProvider(
            api_key=settings.anthropic_api_key,
            timeout_seconds=settings.relay_timeout_seconds,
            base_url=settings.anthropic_base_url,
            anthropic_version=settings.anthropic_version,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)),
        )

    return factory


@pytest.fixture
def make_relay(
    settings: Settings, recording_sleep: RecordingSleep
) -> Callable[[BaseUpstreamProvider], ChatRelay]:
    """Build a ChatRelay with test settings and recorded backoff."""

    def factory(provider: BaseUpstreamProvider) -> ChatRelay:
        return ChatRelay(
            provider=provider,
            model=settings.relay_model,
            max_tokens=settings.relay_max_tokens,
            retry_policy=RetryPolicy(
                max_retries=settings.relay_max_retries,
                backoff_base=settings.relay_backoff_base,
            ),
            sleep=recording_sleep,
        )

    return factory


@pytest.fixture
def scripted_provider() -> Callable[[list[Any]], ScriptedProvider]:
    """Factory for providers replaying scripted outcomes."""
    return ScriptedProvider


@pytest.fixture
def mock_upstream() -> Callable[[list[Any]], MockUpstream]:
    """Factory for mock Messages API handlers."""
    return MockUpstream
