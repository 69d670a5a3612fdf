"""Markdown document rendering and safe writing."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

from .exceptions import FileAlreadyExistsError, ToolExecutionError
from .models import MarkdownDocumentRequest, MarkdownWriteResult
from .paths import FileSystem, LocalFileSystem, resolve_under_root

logger = logging.getLogger(__name__)


def _json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _scalar(value: Any) -> str:
    if isinstance(value, str):
        return value
    return _json(value)


def to_simple_yaml(data: Mapping[str, Any]) -> str:
    """Render a minimal YAML front matter block.

    Lists become dash items, nested mappings are flattened one level with
    JSON-encoded values, everything else is JSON-encoded.
    """
    lines = ["---"]
    for key, value in data.items():
        if isinstance(value, (list, tuple)):
            lines.append(f"{key}:")
            lines.extend(f"  - {_scalar(item)}" for item in value)
        elif isinstance(value, Mapping) and value:
            lines.append(f"{key}:")
            lines.extend(f"  {k}: {_json(v)}" for k, v in value.items())
        elif isinstance(value, Mapping):
            lines.append(f"{key}:")
        else:
            lines.append(f"{key}: {_json(value)}")
    lines.append("---")
    return "\n".join(lines)


def render_markdown(request: MarkdownDocumentRequest) -> str:
    """Compose the document text for ``request``."""
    parts: list[str] = []
    if request.front_matter:
        parts.append(to_simple_yaml(request.front_matter))
    if request.title:
        parts.append(f"# {request.title}")
    for section in request.sections or []:
        parts.append(f"\n## {section.heading}")
        if section.body:
            parts.append(section.body)
    if request.content:
        parts.append(request.content)
    return "\n\n".join(parts).strip() + "\n"


def generate_markdown_file(
    request: MarkdownDocumentRequest, fs: Optional[FileSystem] = None
) -> MarkdownWriteResult:
    """Create a Markdown file with optional front matter, title and sections.

    Raises:
        PathTraversalError: ``relative_path`` escapes ``root_dir``.
        FileAlreadyExistsError: The file exists and ``overwrite`` is false.
    """
    fs = fs or LocalFileSystem()
    full_path = resolve_under_root(request.root_dir, request.relative_path)
    try:
        fs.make_dirs(full_path.parent)
        exists = fs.exists(full_path)
    except OSError as err:
        raise ToolExecutionError(f"Failed to prepare {full_path}: {err}") from err

    if exists and not request.overwrite:
        raise FileAlreadyExistsError(
            f"File already exists at {request.relative_path}. "
            "Pass overwrite=true to replace."
        )

    content = render_markdown(request)
    try:
        fs.write_text(full_path, content)
    except OSError as err:
        raise ToolExecutionError(f"Failed to write {full_path}: {err}") from err
    logger.debug("wrote %s (overwrite=%s)", full_path, exists)

    return MarkdownWriteResult(
        path=str(full_path),
        bytes_written=len(content.encode("utf-8")),
        created=not exists,
        overwritten=exists and request.overwrite,
    )
