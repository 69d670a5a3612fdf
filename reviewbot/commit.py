"""Rule-based Conventional Commit message synthesis for reviewbot."""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .classify import (
    classify,
    filter_excluded,
    is_config_file,
    is_doc_file,
    is_test_file,
    normalize_path,
    top_level_scope,
)
from .exceptions import NotARepositoryError, ToolExecutionError
from .git import GitRepo, RepoStatus, VersionControl
from .models import BODY_FILE_LIMIT, CommitMessageRequest, CommitType

logger = logging.getLogger(__name__)

ELLIPSIS = "…"

RepoFactory = Callable[[str], VersionControl]


@dataclass
class ChangeSnapshot:
    """Non-excluded changes gathered for one request.

    ``summary_files`` comes from the diff summary and drives type, scope and
    body. ``status_files`` comes from the status lists and drives the subject.
    """

    summary_files: list[str]
    status_files: list[str]
    created: list[str]
    modified: list[str]
    deleted: list[str]


def _all(predicate: Callable[[str], bool]) -> Callable[[ChangeSnapshot], bool]:
    def check(snapshot: ChangeSnapshot) -> bool:
        files = snapshot.summary_files
        return bool(files) and all(predicate(f) for f in files)

    return check


# Evaluated in order, first match wins; refactor when nothing matches.
TYPE_RULES: tuple[tuple[Callable[[ChangeSnapshot], bool], CommitType], ...] = (
    (_all(is_doc_file), CommitType.DOCS),
    (_all(is_test_file), CommitType.TEST),
    (_all(is_config_file), CommitType.CHORE),
    (lambda s: bool(s.created), CommitType.FEAT),
    (lambda s: bool(s.deleted), CommitType.CHORE),
)
DEFAULT_TYPE = CommitType.REFACTOR

# Verb for a single changed file. Anything else (e.g. a pure rename) updates.
VERB_RULES: tuple[tuple[Callable[[ChangeSnapshot, str], bool], str], ...] = (
    (lambda s, f: f in s.created, "add"),
    (lambda s, f: f in s.deleted, "remove"),
    (lambda s, f: f in s.modified, "update"),
)
DEFAULT_VERB = "update"


def snapshot_changes(status: RepoStatus, summary: Sequence[str]) -> ChangeSnapshot:
    """Filter excluded paths out of a status and diff summary."""
    changed = [
        *status.created,
        *status.modified,
        *status.deleted,
        *status.renamed_destinations(),
    ]
    return ChangeSnapshot(
        summary_files=filter_excluded(summary),
        status_files=filter_excluded(changed),
        created=filter_excluded(status.created),
        modified=filter_excluded(status.modified),
        deleted=filter_excluded(status.deleted),
    )


def infer_commit_type(snapshot: ChangeSnapshot) -> CommitType:
    for predicate, commit_type in TYPE_RULES:
        if predicate(snapshot):
            return commit_type
    return DEFAULT_TYPE


def build_subject(snapshot: ChangeSnapshot) -> str:
    files = snapshot.status_files
    if len(files) == 1:
        file_path = files[0]
        base = posixpath.basename(normalize_path(file_path))
        verb = next(
            (v for predicate, v in VERB_RULES if predicate(snapshot, file_path)),
            DEFAULT_VERB,
        )
        return f"{verb} {base}"
    if len(files) > 1:
        scope = top_level_scope(snapshot.summary_files)
        if scope:
            return f"update {scope} files"
        return f"update {len(files)} files"
    return "update project files"


def truncate(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters ending with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 1].rstrip() + ELLIPSIS


def format_header(
    commit_type: CommitType, scope: Optional[str], subject: str
) -> str:
    scope_part = f"({scope})" if scope else ""
    return f"{commit_type.value}{scope_part}: {subject}"


def build_body(files: Sequence[str], limit: int = BODY_FILE_LIMIT) -> list[str]:
    shown = files[:limit]
    lines = [f"- {classify(f).value}: {f}" for f in shown]
    if len(files) > len(shown):
        lines.append(f"- {ELLIPSIS}and {len(files) - len(shown)} more file(s)")
    return lines


def compose_commit_message(
    request: CommitMessageRequest, snapshot: ChangeSnapshot
) -> str:
    """Turn a filtered snapshot into the final message text."""
    commit_type = request.type or infer_commit_type(snapshot)
    scope = request.scope or top_level_scope(snapshot.summary_files)
    subject = request.summary or build_subject(snapshot)
    header = format_header(
        commit_type, scope, truncate(subject, request.max_subject_length)
    )
    if not request.include_body:
        return header
    return "\n".join([header, "", *build_body(snapshot.summary_files)])


def generate_commit_message(
    request: CommitMessageRequest, repo_factory: RepoFactory = GitRepo
) -> str:
    """Generate a Conventional Commit message from current git changes.

    Raises:
        ToolExecutionError: Wrapping any repository failure, including a
            root that is not a git repository.
    """
    try:
        repo = repo_factory(request.root_dir)
        if not repo.is_repo():
            raise NotARepositoryError(f"Not a git repository: {request.root_dir}")
        status = repo.status()
        summary = repo.diff_summary()
        snapshot = snapshot_changes(status, summary)
        logger.debug(
            "commit snapshot: %d summary files, %d status files",
            len(snapshot.summary_files),
            len(snapshot.status_files),
        )
        return compose_commit_message(request, snapshot)
    except Exception as err:  # noqa: BLE001 - every failure is reported as one
        raise ToolExecutionError(
            f"Failed to generate commit message: {err}"
        ) from err
