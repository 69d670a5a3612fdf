"""Tool registry exposing the reviewbot operations to a language model."""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .commit import generate_commit_message
from .diffs import get_file_changes_in_directory
from .exceptions import ReviewBotError, ValidationError
from .markdown import generate_markdown_file
from .models import (
    CommitMessageRequest,
    FileChangesRequest,
    MarkdownDocumentRequest,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tool:
    """A named operation with a declared input shape."""

    name: str
    description: str
    input_model: Type[BaseModel]
    execute: Callable[[Any], Any]

    def schema(self) -> Dict[str, Any]:
        """JSON schema of the tool input, using the camelCase aliases."""
        return self.input_model.model_json_schema(by_alias=True)

    def parse(self, arguments: Mapping[str, Any]) -> BaseModel:
        try:
            return self.input_model.model_validate(dict(arguments))
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid arguments for {self.name}: {exc}"
            ) from exc

    def run(self, arguments: Mapping[str, Any]) -> Any:
        return self.execute(self.parse(arguments))


@dataclass
class ToolOutcome:
    """Serialisable result (or error) of one tool call."""

    name: str
    output: Any
    is_error: bool = False

    def to_json(self) -> str:
        return json.dumps(self.output, ensure_ascii=False)


def to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


TOOLS: Dict[str, Tool] = {
    tool.name: tool
    for tool in (
        Tool(
            name="getFileChangesInDirectoryTool",
            description="Gets the code changes made in given directory",
            input_model=FileChangesRequest,
            execute=lambda req: get_file_changes_in_directory(req.root_dir),
        ),
        Tool(
            name="generateCommitMessageTool",
            description=(
                "Generate a Conventional Commit message from current git changes."
            ),
            input_model=CommitMessageRequest,
            execute=generate_commit_message,
        ),
        Tool(
            name="generateMarkdownFileTool",
            description=(
                "Create a Markdown file with optional front matter, title, "
                "and sections."
            ),
            input_model=MarkdownDocumentRequest,
            execute=generate_markdown_file,
        ),
    )
}


def get_tool(name: str) -> Optional[Tool]:
    return TOOLS.get(name)


def dispatch(
    name: str,
    arguments: Mapping[str, Any],
    registry: Optional[Mapping[str, Tool]] = None,
) -> ToolOutcome:
    """Validate and run a model-issued tool call.

    Failures come back as error outcomes so the model can react to them.
    """
    tools = TOOLS if registry is None else registry
    tool = tools.get(name)
    if tool is None:
        logger.warning("model requested unknown tool %s", name)
        return ToolOutcome(name, {"error": f"Unknown tool: {name}"}, True)
    logger.debug("dispatching %s with %s", name, dict(arguments))
    try:
        output = tool.run(arguments)
    except ReviewBotError as exc:
        logger.info("tool %s failed: %s", name, exc)
        return ToolOutcome(name, {"error": str(exc)}, True)
    return ToolOutcome(name, to_jsonable(output))
