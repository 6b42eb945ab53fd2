"""Chat relay: forwards a single user message to the Anthropic Messages API."""

__version__ = "0.1.0"
