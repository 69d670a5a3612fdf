"""LLM provider drivers for the review agent."""

from __future__ import annotations

from ..config import Config
from ..exceptions import LLMError
from .base import AssistantTurn, BaseDriver, ToolCall


def build_driver(config: Config) -> BaseDriver:
    """Return the driver matching ``config.provider``."""
    if config.provider == "anthropic":
        from .anthropic_driver import AnthropicDriver

        return AnthropicDriver(config)
    if config.provider == "openai":
        from .openai_driver import OpenAIDriver

        return OpenAIDriver(config)
    raise LLMError(f"Unsupported provider: {config.provider}")


__all__ = ["AssistantTurn", "BaseDriver", "ToolCall", "build_driver"]
