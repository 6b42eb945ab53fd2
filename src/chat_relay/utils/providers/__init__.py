"""Upstream provider implementations.

Usage:
    from chat_relay.utils.providers import create_provider

    # Create provider based on settings
    provider = create_provider()

    # Or explicitly create the Anthropic provider
    from chat_relay.utils.providers import AnthropicProvider

    anthropic = AnthropicProvider(api_key="...")
"""

from chat_relay.config.settings import Settings, get_settings
from chat_relay.utils.providers.base import (
    BaseUpstreamProvider,
    UpstreamMessage,
    UpstreamRequest,
)
from chat_relay.utils.providers.anthropic import AnthropicProvider


def create_provider(settings: Settings | None = None, **kwargs) -> BaseUpstreamProvider:
    """
    Factory function to create the upstream provider from configuration.

    Args:
        settings: Settings to read from. Uses cached settings if None.
        **kwargs: Overrides passed to ``AnthropicProvider``

    Returns:
        Configured provider instance

    Raises:
        ValueError: If no API key is configured
    """
    settings = settings or get_settings()

    api_key = kwargs.pop("api_key", None) or settings.anthropic_api_key
    if not api_key:
        raise ValueError(
            "Anthropic API key required. Set ANTHROPIC_API_KEY environment variable."
        )

    kwargs.setdefault("timeout_seconds", settings.relay_timeout_seconds)
    kwargs.setdefault("base_url", settings.anthropic_base_url)
    kwargs.setdefault("anthropic_version", settings.anthropic_version)
    return AnthropicProvider(api_key=api_key, **kwargs)


__all__ = [
    "BaseUpstreamProvider",
    "UpstreamMessage",
    "UpstreamRequest",
    "AnthropicProvider",
    "create_provider",
]
