"""Per-file diff extraction for review."""

from __future__ import annotations

import logging
from typing import Callable

from .classify import is_excluded
from .exceptions import NotARepositoryError, ToolExecutionError
from .git import GitRepo, VersionControl
from .models import DiffEntry

logger = logging.getLogger(__name__)


def get_file_changes_in_directory(
    root_dir: str, repo_factory: Callable[[str], VersionControl] = GitRepo
) -> list[DiffEntry]:
    """Return zero-context diffs for every non-excluded changed file.

    Entries keep the order of the repository's diff summary.
    """
    try:
        repo = repo_factory(root_dir)
        if not repo.is_repo():
            raise NotARepositoryError(f"Not a git repository: {root_dir}")
        diffs: list[DiffEntry] = []
        for file_path in repo.diff_summary():
            if is_excluded(file_path):
                logger.debug("skipping excluded path %s", file_path)
                continue
            diffs.append(
                DiffEntry(file=file_path, diff=repo.diff_for_path(file_path, 0))
            )
        return diffs
    except Exception as err:  # noqa: BLE001
        raise ToolExecutionError(f"Failed to get file changes: {err}") from err
