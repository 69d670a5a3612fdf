"""Request and result types shared by the reviewbot tools.

Requests are pydantic models: they double as the input schema advertised to
the language model, so field aliases follow the camelCase names the tools
have always used (``rootDir``, ``maxSubjectLength``...). Python callers may
use either the alias or the field name.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_MAX_SUBJECT_LENGTH = 72
MAX_SUBJECT_LENGTH_CAP = 100
BODY_FILE_LIMIT = 20


class CommitType(str, Enum):
    """Conventional Commit types."""

    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    CHORE = "chore"
    REVERT = "revert"


class _ToolInput(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class FileChangesRequest(_ToolInput):
    root_dir: str = Field(..., min_length=1, description="The root directory")


class CommitMessageRequest(_ToolInput):
    root_dir: str = Field(
        ..., min_length=1, description="The root git repository directory"
    )
    type: Optional[CommitType] = Field(
        default=None,
        description="Optional override for the Conventional Commit type",
    )
    scope: Optional[str] = Field(
        default=None, description="Optional scope, e.g. module or package name"
    )
    summary: Optional[str] = Field(
        default=None, description="Optional subject line override"
    )
    include_body: bool = True
    max_subject_length: int = Field(
        default=DEFAULT_MAX_SUBJECT_LENGTH, gt=0, le=MAX_SUBJECT_LENGTH_CAP
    )


class MarkdownSection(_ToolInput):
    heading: str
    body: Optional[str] = None


class MarkdownDocumentRequest(_ToolInput):
    root_dir: str = Field(
        ..., min_length=1, description="The root directory to write the file in"
    )
    relative_path: str = Field(
        ...,
        min_length=1,
        description=(
            "Relative path (from rootDir) for the markdown file, "
            "e.g. docs/notes.md"
        ),
    )
    title: Optional[str] = None
    content: Optional[str] = None
    sections: Optional[List[MarkdownSection]] = None
    front_matter: Optional[Dict[str, Any]] = None
    overwrite: bool = False


@dataclass
class DiffEntry:
    """A changed file and its zero-context unified diff."""

    file: str
    diff: str


@dataclass
class MarkdownWriteResult:
    """Outcome of a Markdown write."""

    path: str
    bytes_written: int
    created: bool
    overwritten: bool
