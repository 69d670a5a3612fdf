"""reviewbot - LLM code review agent with rule-based commit messages."""

from importlib import import_module
from typing import TYPE_CHECKING

__version__ = "0.1.0"

# Public API (lazy-exported to avoid import-time side effects)
__all__ = [
    # Config
    "Config", "load_config",
    # Core operations
    "resolve_under_root", "is_path_inside_root",
    "generate_commit_message", "get_file_changes_in_directory",
    "generate_markdown_file",
    # Models
    "CommitType", "CommitMessageRequest", "MarkdownDocumentRequest",
    "MarkdownWriteResult", "DiffEntry",
    # Agent
    "ReviewAgent", "dispatch",
    # Exceptions
    "ReviewBotError", "GitError", "NotARepositoryError", "ValidationError",
    "PathTraversalError", "FileAlreadyExistsError", "ToolExecutionError",
    "ConfigError", "LLMError",
]


def __getattr__(name: str):
    """Lazy attribute loader so ``import reviewbot`` stays cheap.

    Provider SDKs are only imported when the agent is actually used.
    """
    mapping = {
        "Config": ("reviewbot.config", "Config"),
        "load_config": ("reviewbot.config", "load_config"),
        "resolve_under_root": ("reviewbot.paths", "resolve_under_root"),
        "is_path_inside_root": ("reviewbot.paths", "is_path_inside_root"),
        "generate_commit_message": ("reviewbot.commit", "generate_commit_message"),
        "get_file_changes_in_directory": (
            "reviewbot.diffs",
            "get_file_changes_in_directory",
        ),
        "generate_markdown_file": ("reviewbot.markdown", "generate_markdown_file"),
        "CommitType": ("reviewbot.models", "CommitType"),
        "CommitMessageRequest": ("reviewbot.models", "CommitMessageRequest"),
        "MarkdownDocumentRequest": ("reviewbot.models", "MarkdownDocumentRequest"),
        "MarkdownWriteResult": ("reviewbot.models", "MarkdownWriteResult"),
        "DiffEntry": ("reviewbot.models", "DiffEntry"),
        "ReviewAgent": ("reviewbot.agent", "ReviewAgent"),
        "dispatch": ("reviewbot.tools", "dispatch"),
        "ReviewBotError": ("reviewbot.exceptions", "ReviewBotError"),
        "GitError": ("reviewbot.exceptions", "GitError"),
        "NotARepositoryError": ("reviewbot.exceptions", "NotARepositoryError"),
        "ValidationError": ("reviewbot.exceptions", "ValidationError"),
        "PathTraversalError": ("reviewbot.exceptions", "PathTraversalError"),
        "FileAlreadyExistsError": ("reviewbot.exceptions", "FileAlreadyExistsError"),
        "ToolExecutionError": ("reviewbot.exceptions", "ToolExecutionError"),
        "ConfigError": ("reviewbot.exceptions", "ConfigError"),
        "LLMError": ("reviewbot.exceptions", "LLMError"),
    }
    if name in mapping:
        mod_name, attr = mapping[name]
        mod = import_module(mod_name)
        value = getattr(mod, attr)
        globals()[name] = value  # cache for future access
        return value
    raise AttributeError(f"module 'reviewbot' has no attribute {name!r}")


if TYPE_CHECKING:
    from .agent import ReviewAgent
    from .commit import generate_commit_message
    from .config import Config, load_config
    from .diffs import get_file_changes_in_directory
    from .exceptions import (
        ConfigError,
        FileAlreadyExistsError,
        GitError,
        LLMError,
        NotARepositoryError,
        PathTraversalError,
        ReviewBotError,
        ToolExecutionError,
        ValidationError,
    )
    from .markdown import generate_markdown_file
    from .models import (
        CommitMessageRequest,
        CommitType,
        DiffEntry,
        MarkdownDocumentRequest,
        MarkdownWriteResult,
    )
    from .paths import is_path_inside_root, resolve_under_root
    from .tools import dispatch
