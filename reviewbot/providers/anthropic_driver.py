from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import httpx

from ..exceptions import LLMError
from ..tools import Tool, ToolOutcome
from .base import AssistantTurn, BaseDriver, ToolCall

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"
MAX_OUTPUT_TOKENS = 4096


class AnthropicDriver(BaseDriver):
    """Driver handling Anthropic API calls (messages endpoint)."""

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

    def complete(
        self,
        system: str,
        messages: Sequence[dict[str, Any]],
        tools: Sequence[Tool],
    ) -> AssistantTurn:
        url = self.config.llm_endpoint.rstrip("/") + "/v1/messages"
        payload = {
            "model": self.config.model,
            "max_tokens": MAX_OUTPUT_TOKENS,
            "system": system,
            "messages": list(messages),
            "tools": [
                {
                    "name": tool.name,
                    "description": tool.description,
                    "input_schema": tool.schema(),
                }
                for tool in tools
            ],
        }
        logger.debug(
            "anthropic request model=%s messages=%d", self.config.model, len(messages)
        )
        try:
            response = httpx.post(
                url,
                headers=self._headers(),
                json=payload,
                timeout=self._request_timeout,
            )
        except httpx.HTTPError as e:
            raise LLMError(
                f"Anthropic network error during messages request: {e}"
            ) from e
        status = getattr(response, "status_code", 200)
        if status and int(status) >= 400:
            raise LLMError(
                "Anthropic error {}: {}".format(
                    status, getattr(response, "text", "<no body>")
                )
            )
        data = response.json()
        content = data.get("content") or []
        texts: list[str] = []
        calls: list[ToolCall] = []
        for chunk in content:
            kind = chunk.get("type")
            if kind == "text":
                texts.append(chunk.get("text", ""))
            elif kind == "tool_use":
                arguments = chunk.get("input")
                error: Optional[str] = None
                if not isinstance(arguments, dict):
                    arguments, error = {}, "Tool arguments must be a JSON object"
                calls.append(
                    ToolCall(
                        id=str(chunk.get("id", "")),
                        name=str(chunk.get("name", "")),
                        arguments=arguments,
                        argument_error=error,
                    )
                )
        logger.debug(
            "anthropic stop_reason=%s tool_calls=%d",
            data.get("stop_reason"),
            len(calls),
        )
        return AssistantTurn(
            text="".join(filter(None, texts)), tool_calls=calls, raw=content
        )

    def assistant_message(self, turn: AssistantTurn) -> dict[str, Any]:
        return {"role": "assistant", "content": turn.raw or turn.text}

    def tool_result_messages(
        self, calls: Sequence[ToolCall], outcomes: Sequence[ToolOutcome]
    ) -> list[dict[str, Any]]:
        blocks = [
            {
                "type": "tool_result",
                "tool_use_id": call.id,
                "content": outcome.to_json(),
                "is_error": outcome.is_error,
            }
            for call, outcome in zip(calls, outcomes)
        ]
        return [{"role": "user", "content": blocks}]
