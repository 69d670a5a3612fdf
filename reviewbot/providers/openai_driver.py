from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

import openai

from ..config import Config
from ..exceptions import LLMError
from ..tools import Tool, ToolOutcome
from .base import AssistantTurn, BaseDriver, ToolCall

logger = logging.getLogger(__name__)


class OpenAIDriver(BaseDriver):
    """Driver for OpenAI / OpenAI-compatible chat completions with tools."""

    def __init__(self, config: Config, client: Optional[Any] = None) -> None:
        super().__init__(config)
        self._client = client or openai.OpenAI(
            base_url=config.llm_endpoint,
            api_key=self._api_key,
            timeout=self._request_timeout,
        )

    def complete(
        self,
        system: str,
        messages: Sequence[dict[str, Any]],
        tools: Sequence[Tool],
    ) -> AssistantTurn:
        kwargs: dict[str, Any] = {
            "model": self.config.model,
            "messages": [{"role": "system", "content": system}, *messages],
            "tools": [
                {
                    "type": "function",
                    "function": {
                        "name": tool.name,
                        "description": tool.description,
                        "parameters": tool.schema(),
                    },
                }
                for tool in tools
            ],
        }
        logger.debug(
            "openai request model=%s messages=%d", self.config.model, len(messages)
        )
        try:
            resp = self._client.chat.completions.create(**kwargs)
        except openai.OpenAIError as e:
            raise LLMError(f"OpenAI client error: {e}") from e
        try:
            choice0 = resp.choices[0]
        except (AttributeError, IndexError):
            raise LLMError("Missing choices in OpenAI response") from None

        message = getattr(choice0, "message", None)
        content = getattr(message, "content", None) or ""
        calls: list[ToolCall] = []
        for raw_call in getattr(message, "tool_calls", None) or []:
            function = raw_call.function
            arguments: dict[str, Any] = {}
            error: Optional[str] = None
            try:
                decoded = json.loads(function.arguments or "{}")
            except json.JSONDecodeError as exc:
                error = f"Malformed JSON arguments: {exc}"
            else:
                if isinstance(decoded, dict):
                    arguments = decoded
                else:
                    error = "Tool arguments must be a JSON object"
            calls.append(
                ToolCall(
                    id=raw_call.id,
                    name=function.name,
                    arguments=arguments,
                    argument_error=error,
                )
            )
        logger.debug(
            "openai finish_reason=%s tool_calls=%d",
            getattr(choice0, "finish_reason", None),
            len(calls),
        )
        return AssistantTurn(text=content, tool_calls=calls, raw=message)

    def assistant_message(self, turn: AssistantTurn) -> dict[str, Any]:
        msg: dict[str, Any] = {"role": "assistant", "content": turn.text or None}
        if turn.tool_calls:
            msg["tool_calls"] = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {
                        "name": call.name,
                        "arguments": json.dumps(call.arguments),
                    },
                }
                for call in turn.tool_calls
            ]
        return msg

    def tool_result_messages(
        self, calls: Sequence[ToolCall], outcomes: Sequence[ToolOutcome]
    ) -> list[dict[str, Any]]:
        return [
            {
                "role": "tool",
                "tool_call_id": call.id,
                "content": outcome.to_json(),
            }
            for call, outcome in zip(calls, outcomes)
        ]
