"""Git operations for reviewbot."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Union

from .exceptions import GitError

logger = logging.getLogger(__name__)


@dataclass
class RepoStatus:
    """Working tree status grouped the way commit inference consumes it."""

    created: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    renamed: list[tuple[str, str]] = field(default_factory=list)
    not_added: list[str] = field(default_factory=list)

    def renamed_destinations(self) -> list[str]:
        return [dst for _src, dst in self.renamed if dst]


class VersionControl(Protocol):
    """Operations the commit and diff tools need from a repository."""

    def is_repo(self) -> bool: ...

    def status(self) -> RepoStatus: ...

    def diff_summary(self) -> list[str]: ...

    def diff_for_path(self, file_path: str, context: int = 0) -> str: ...


def parse_porcelain_z(output: str) -> RepoStatus:
    """Parse ``git status --porcelain=v1 -z`` output.

    Records are NUL separated. Renames and copies carry the original path in
    the record that follows the destination.
    """
    status = RepoStatus()
    records = output.split("\0")
    i = 0
    while i < len(records):
        record = records[i]
        i += 1
        if len(record) < 4:
            continue
        x, y, path = record[0], record[1], record[3:]
        if x in {"R", "C"}:
            source = records[i] if i < len(records) else ""
            i += 1
            if x == "R":
                status.renamed.append((source, path))
            else:
                status.created.append(path)
            continue
        if x == "?" and y == "?":
            status.not_added.append(path)
        elif x == "A":
            status.created.append(path)
        elif "D" in (x, y):
            status.deleted.append(path)
        elif "M" in (x, y):
            status.modified.append(path)
    return status


class GitRepo:
    """Handles Git repository operations rooted at ``repo_path``."""

    def __init__(self, repo_path: Union[str, Path] = ".") -> None:
        self.repo_path = Path(repo_path).expanduser()

    def _run_git_command(self, args: list[str], strip: bool = True) -> str:
        """Run a Git command and return its output."""
        logger.debug("git %s (cwd=%s)", " ".join(args), self.repo_path)
        try:
            result = subprocess.run(
                ["git"] + args,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True,
                encoding="utf-8",
                errors="replace",
            )
        except subprocess.CalledProcessError as e:
            cmd = " ".join(args)
            raise GitError(f"Git command failed: {cmd}\n{e.stderr}") from e
        except FileNotFoundError as exc:
            raise GitError("Git command not found. Please install Git.") from exc
        return result.stdout.strip() if strip else result.stdout

    def is_repo(self) -> bool:
        """Check if ``repo_path`` lives inside a Git repository."""
        if not self.repo_path.is_dir():
            return False
        try:
            self._run_git_command(["rev-parse", "--git-dir"])
            return True
        except GitError:
            return False

    def has_head(self) -> bool:
        """Return True once the repository has at least one commit."""
        try:
            self._run_git_command(["rev-parse", "--verify", "-q", "HEAD"])
            return True
        except GitError:
            return False

    def status(self) -> RepoStatus:
        output = self._run_git_command(
            ["status", "--porcelain=v1", "-z"], strip=False
        )
        return parse_porcelain_z(output)

    def diff_summary(self) -> list[str]:
        """List tracked files that differ from HEAD, staged or not.

        Before the first commit there is no HEAD to compare against, so the
        staged and unstaged name lists are merged instead.
        """
        if self.has_head():
            return self._name_only(["HEAD"])
        files = self._name_only(["--cached"])
        for name in self._name_only([]):
            if name not in files:
                files.append(name)
        return files

    def _name_only(self, extra: list[str]) -> list[str]:
        output = self._run_git_command(
            ["diff", "--name-only", "-z", *extra], strip=False
        )
        return [name for name in output.split("\0") if name]

    def diff_for_path(self, file_path: str, context: int = 0) -> str:
        """Return the unified diff for ``file_path`` with ``context`` lines."""
        if self.has_head():
            return self._run_git_command(
                ["diff", f"-U{context}", "HEAD", "--", file_path], strip=False
            )
        staged = self._run_git_command(
            ["diff", f"-U{context}", "--cached", "--", file_path], strip=False
        )
        unstaged = self._run_git_command(
            ["diff", f"-U{context}", "--", file_path], strip=False
        )
        return staged + unstaged
