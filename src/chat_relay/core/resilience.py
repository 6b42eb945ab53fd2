"""Resilience patterns for upstream calls.

This module provides the patterns the relay applies around the
completion API:
- Retry with exponential backoff for transient failures
- Timeouts to bound operation duration
- Provider-specific error classification

Usage:
    from chat_relay.core.resilience import (
        RetryPolicy,
        call_with_retry,
        operation_timeout,
        wrap_anthropic_errors,
    )

    @operation_timeout(25.0)
    @wrap_anthropic_errors
    async def call_llm_api(...):
        ...

    body = await call_with_retry(lambda: call_llm_api(...), RetryPolicy())
"""

import asyncio
from dataclasses import dataclass
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

import anthropic
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from chat_relay.core.exceptions import (
    UpstreamTimeoutError,
    UpstreamTransportError,
)
from chat_relay.utils.logging import get_logger


__all__ = [
    "RetryPolicy",
    "call_with_retry",
    "operation_timeout",
    "wrap_anthropic_errors",
]


logger = get_logger(__name__)

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])

Sleep = Callable[[float], Awaitable[Any]]


# =============================================================================
# RETRY
# =============================================================================


@dataclass(frozen=True)
class RetryPolicy:
    """Retry configuration for upstream calls.

    ``max_retries`` counts re-attempts, so a call that keeps failing is made
    ``max_retries + 1`` times. The wait before re-attempt ``n`` (0-based) is
    ``backoff_base ** n`` seconds.
    """

    max_retries: int = 2
    backoff_base: float = 2.0
    retry_on: tuple[type[BaseException], ...] = (
        UpstreamTimeoutError,
        UpstreamTransportError,
    )


def _log_retry(retry_state: RetryCallState) -> None:
    """Warn about a failed attempt before backing off."""
    logger.warning(
        "Upstream call failed, retrying",
        attempt=retry_state.attempt_number,
        max_attempts=retry_state.retry_object.stop.max_attempt_number,
        delay_seconds=retry_state.next_action.sleep if retry_state.next_action else None,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


async def call_with_retry(
    func: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """
    Await ``func()`` until it succeeds or the retry budget is spent.

    Only exceptions listed in ``policy.retry_on`` trigger a retry; anything
    else propagates immediately. The last failure is re-raised unchanged.

    Args:
        func: Zero-argument factory returning a fresh awaitable per attempt
        policy: Retry budget and backoff
        sleep: Awaitable delay function

    Returns:
        Result of the first successful attempt
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_retries + 1),
        wait=wait_exponential(multiplier=1, exp_base=policy.backoff_base),
        retry=retry_if_exception_type(policy.retry_on),
        sleep=sleep,
        before_sleep=_log_retry,
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            result = await func()
    return result


# =============================================================================
# TIMEOUT
# =============================================================================


def operation_timeout(max_seconds: float) -> Callable[[F], F]:
    """
    Create a timeout decorator with custom duration.

    The wrapped coroutine is cancelled when it runs past ``max_seconds`` and
    an ``UpstreamTimeoutError`` is raised in its place.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await asyncio.wait_for(
                    func(*args, **kwargs),
                    timeout=max_seconds,
                )
            except asyncio.TimeoutError:
                raise UpstreamTimeoutError(
                    f"Operation timed out after {max_seconds}s"
                )

        return wrapper  # type: ignore

    return decorator


# =============================================================================
# ERROR CLASSIFICATION
# =============================================================================


def wrap_anthropic_errors(func: F) -> F:
    """
    Decorator to convert Anthropic API exceptions to relay exceptions.

    Timeouts become ``UpstreamTimeoutError``; connection failures and error
    statuses become ``UpstreamTransportError``.
    """

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except anthropic.APITimeoutError as e:
            raise UpstreamTimeoutError(f"Anthropic request timed out: {e}") from e
        except anthropic.APIStatusError as e:
            raise UpstreamTransportError(
                str(e),
                upstream_status=e.status_code,
                upstream_body=e.body,
            ) from e
        except anthropic.APIConnectionError as e:
            raise UpstreamTransportError(str(e)) from e

    return wrapper  # type: ignore
