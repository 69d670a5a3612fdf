"""Path guarding and filesystem helpers for reviewbot.

Every write performed on behalf of the model goes through
:func:`resolve_under_root` so that relative paths such as ``../x.md`` or
absolute paths pointing elsewhere can never escape the configured root
directory.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol, Union

from .exceptions import PathTraversalError, ValidationError

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def _resolve_pair(root_dir: PathLike, target_path: PathLike) -> tuple[Path, Path]:
    try:
        root = Path(root_dir).expanduser().resolve(strict=False)
        resolved = (root / Path(target_path)).resolve(strict=False)
    except (OSError, ValueError) as err:
        # e.g. an embedded NUL byte
        raise ValidationError(f"Invalid path {target_path!r}: {err}") from err
    return root, resolved


def _is_inside(root: Path, resolved: Path) -> bool:
    root_str = str(root)
    prefix = root_str if root_str.endswith(os.sep) else root_str + os.sep
    resolved_str = str(resolved)
    return resolved_str == root_str or resolved_str.startswith(prefix)


def resolve_under_root(root_dir: PathLike, target_path: PathLike) -> Path:
    """Resolve ``target_path`` against ``root_dir`` and keep it inside.

    Raises:
        PathTraversalError: If the resolved path is neither the root itself
            nor one of its descendants.
        ValidationError: If either path cannot be resolved at all.
    """
    root, resolved = _resolve_pair(root_dir, target_path)
    if not _is_inside(root, resolved):
        logger.debug("rejected path %s outside root %s", resolved, root)
        raise PathTraversalError(
            f"Refusing to access path outside rootDir: {resolved}"
        )
    return resolved


def is_path_inside_root(root_dir: PathLike, target_path: PathLike) -> bool:
    """Return True if ``target_path`` stays inside ``root_dir`` (never raises)."""
    try:
        root, resolved = _resolve_pair(root_dir, target_path)
    except ValidationError:
        return False
    return _is_inside(root, resolved)


def ensure_dir(dir_path: PathLike) -> None:
    """Create ``dir_path`` and any missing parents (mkdir -p)."""
    Path(dir_path).mkdir(parents=True, exist_ok=True)


def write_file_under_root(
    root_dir: PathLike,
    relative_path: PathLike,
    data: Union[str, bytes],
    encoding: str = "utf-8",
) -> Path:
    """Write ``data`` to ``relative_path`` under ``root_dir``.

    Parent directories are created as needed. Returns the absolute path.
    """
    abs_path = resolve_under_root(root_dir, relative_path)
    ensure_dir(abs_path.parent)
    if isinstance(data, bytes):
        abs_path.write_bytes(data)
    else:
        abs_path.write_text(data, encoding=encoding)
    return abs_path


class FileSystem(Protocol):
    """Filesystem operations the Markdown writer depends on."""

    def make_dirs(self, path: Path) -> None: ...

    def exists(self, path: Path) -> bool: ...

    def write_text(self, path: Path, content: str) -> None: ...


class LocalFileSystem:
    """:class:`FileSystem` backed by the real disk."""

    def make_dirs(self, path: Path) -> None:
        ensure_dir(path)

    def exists(self, path: Path) -> bool:
        return path.exists()

    def write_text(self, path: Path, content: str) -> None:
        # newline="" keeps "\n" as written on every platform
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
