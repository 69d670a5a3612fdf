"""Review agent: a bounded model loop over the reviewbot tools."""

from __future__ import annotations

import logging
import sys
from typing import Any, Mapping, Optional, TextIO

from .config import Config, get_active_config
from .providers import BaseDriver, ToolCall, build_driver
from .tools import TOOLS, Tool, ToolOutcome, dispatch

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are an expert code reviewer. Use the available tools to inspect the \
pending git changes before you comment. Review each changed file: point out \
bugs, risky patterns, missing tests and readability problems, and suggest \
concrete fixes. Be concise and specific. Only write files when the user asks \
for a Markdown summary, and never outside the given root directory."""

REVIEW_PROMPT = (
    "Review the code changes in '{root_dir}' directory. Provide file-by-file "
    "feedback and suggestions. If helpful, propose a Conventional Commit "
    "message and a short change summary as Markdown."
)


def default_prompt(root_dir: str) -> str:
    return REVIEW_PROMPT.format(root_dir=root_dir)


class ReviewAgent:
    """Drive a model through up to ``max_steps`` tool-calling turns."""

    def __init__(
        self,
        config: Optional[Config] = None,
        driver: Optional[BaseDriver] = None,
        tools: Optional[Mapping[str, Tool]] = None,
        system_prompt: str = SYSTEM_PROMPT,
    ) -> None:
        self._config = config or get_active_config()
        self.driver = driver or build_driver(self._config)
        self.tools = dict(TOOLS if tools is None else tools)
        self.system_prompt = system_prompt
        self.max_steps = self._config.max_steps

    def run(self, prompt: str, out: TextIO = sys.stdout) -> str:
        """Run the loop, echoing model text to ``out``.

        Returns all assistant text produced during the run.
        """
        messages: list[dict[str, Any]] = [self.driver.user_message(prompt)]
        transcript: list[str] = []
        for step in range(1, self.max_steps + 1):
            turn = self.driver.complete(
                self.system_prompt, messages, list(self.tools.values())
            )
            logger.debug(
                "step %d: %d chars, %d tool calls",
                step,
                len(turn.text),
                len(turn.tool_calls),
            )
            if turn.text:
                out.write(turn.text)
                out.flush()
                transcript.append(turn.text)
            if not turn.tool_calls:
                break
            messages.append(self.driver.assistant_message(turn))
            outcomes = [self._run_call(call) for call in turn.tool_calls]
            messages.extend(
                self.driver.tool_result_messages(turn.tool_calls, outcomes)
            )
        else:
            logger.info("stopped after reaching max_steps=%d", self.max_steps)
        if transcript:
            out.write("\n")
        return "".join(transcript)

    def _run_call(self, call: ToolCall) -> ToolOutcome:
        if call.argument_error:
            return ToolOutcome(call.name, {"error": call.argument_error}, True)
        return dispatch(call.name, call.arguments, registry=self.tools)
