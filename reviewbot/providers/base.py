from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from ..config import Config
from ..exceptions import LLMError
from ..tools import Tool, ToolOutcome


@dataclass
class ToolCall:
    """A tool invocation requested by the model."""

    id: str
    name: str
    arguments: dict[str, Any]
    # Set when the provider sent arguments that could not be decoded.
    argument_error: Optional[str] = None


@dataclass
class AssistantTurn:
    """One model response: free text plus any tool calls."""

    text: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)
    raw: Any = None


class BaseDriver(ABC):
    """Abstract base for provider-specific chat calls.

    Each driver owns its provider's HTTP/client call patterns and message
    shapes. The review agent only ever sees :class:`AssistantTurn` values
    and the opaque message dicts the driver builds for it.
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        api_key = config.resolve_api_key()
        if not api_key:
            raise LLMError(
                f"Environment variable '{config.api_key_env}' is not set or empty."
            )
        self._api_key = api_key
        self._request_timeout = config.request_timeout

    def user_message(self, prompt: str) -> dict[str, Any]:
        return {"role": "user", "content": prompt}

    @abstractmethod
    def complete(
        self,
        system: str,
        messages: Sequence[dict[str, Any]],
        tools: Sequence[Tool],
    ) -> AssistantTurn:
        """Send the conversation and return the model's next turn."""
        raise NotImplementedError

    @abstractmethod
    def assistant_message(self, turn: AssistantTurn) -> dict[str, Any]:
        """Return the message recording ``turn`` in the conversation."""
        raise NotImplementedError

    @abstractmethod
    def tool_result_messages(
        self, calls: Sequence[ToolCall], outcomes: Sequence[ToolOutcome]
    ) -> list[dict[str, Any]]:
        """Return the messages that hand tool outcomes back to the model."""
        raise NotImplementedError
