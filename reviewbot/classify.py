"""File classification helpers used for commit message inference."""

from __future__ import annotations

import posixpath
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

EXCLUDED_NAMES: tuple[str, ...] = (
    "dist",
    "bun.lock",
    ".git",
    "node_modules",
    "build",
    "coverage",
    ".next",
    ".turbo",
    "out",
)

DOC_EXTENSIONS: tuple[str, ...] = (".md", ".mdx")
DOC_DIR_MARKER = "docs/"
README_NAME = "readme.md"

TEST_DIR_MARKER = "/__tests__/"
TEST_SUFFIXES: tuple[str, ...] = (
    ".test.ts",
    ".test.tsx",
    ".spec.ts",
    ".spec.tsx",
    ".test.js",
    ".spec.js",
)

CONFIG_NAMES = frozenset(
    {
        "package.json",
        "tsconfig.json",
        "bun.lock",
        "pnpm-lock.yaml",
        "yarn.lock",
        ".eslintrc.json",
        ".eslintrc.js",
        ".prettierrc",
        ".prettierrc.json",
        ".npmrc",
        ".nvmrc",
        ".editorconfig",
        "dockerfile",
    }
)
CI_WORKFLOW_MARKER = ".github/workflows/"
CONFIG_SUFFIXES: tuple[str, ...] = (".config.js", ".config.ts", "rc")


class FileKind(str, Enum):
    """Closed set of kinds a changed file can be tagged with."""

    DOCS = "docs"
    TEST = "test"
    CONFIG = "config"
    CODE = "code"


def normalize_path(file_path: str) -> str:
    """Unify path separators to forward slashes."""
    return file_path.replace("\\", "/")


def is_excluded(file_path: str) -> bool:
    """Return True for build output, dependency and VCS paths."""
    p = normalize_path(file_path)
    return any(p == name or p.startswith(name + "/") for name in EXCLUDED_NAMES)


def is_doc_file(file_path: str) -> bool:
    p = normalize_path(file_path).lower()
    return (
        p.endswith(DOC_EXTENSIONS)
        or DOC_DIR_MARKER in p
        or posixpath.basename(p) == README_NAME
    )


def is_test_file(file_path: str) -> bool:
    p = normalize_path(file_path).lower()
    return TEST_DIR_MARKER in p or p.endswith(TEST_SUFFIXES)


def is_config_file(file_path: str) -> bool:
    p = normalize_path(file_path)
    base = posixpath.basename(p).lower()
    return (
        base in CONFIG_NAMES
        or CI_WORKFLOW_MARKER in p
        or base.endswith(CONFIG_SUFFIXES)
    )


# Evaluated in order, first match wins.
KIND_RULES: tuple[tuple[Callable[[str], bool], FileKind], ...] = (
    (is_doc_file, FileKind.DOCS),
    (is_test_file, FileKind.TEST),
    (is_config_file, FileKind.CONFIG),
)


def classify(file_path: str) -> FileKind:
    """Return the display kind of ``file_path``."""
    for predicate, kind in KIND_RULES:
        if predicate(file_path):
            return kind
    return FileKind.CODE


def filter_excluded(paths: Iterable[str]) -> list[str]:
    """Drop empty and excluded paths, keeping the original order."""
    return [p for p in paths if p and not is_excluded(p)]


def _segments(file_path: str) -> list[str]:
    return [part for part in normalize_path(file_path).split("/") if part]


def top_level_scope(files: Sequence[str]) -> Optional[str]:
    """Derive a commit scope from the first path living below the root.

    Returns the first segment of the first path with more than one segment.
    A single root-level path (or an empty list) yields ``None``.
    """
    for f in files:
        parts = _segments(f)
        if len(parts) > 1:
            return parts[0]
    if len(files) == 1:
        f = files[0]
        if not f:
            return None
        parts = _segments(f)
        return parts[0] if len(parts) > 1 else None
    return None
