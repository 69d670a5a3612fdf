"""Custom exceptions for reviewbot."""


class ReviewBotError(Exception):
    """Base exception for reviewbot."""


class GitError(ReviewBotError):
    """Exception raised for Git-related errors."""


class NotARepositoryError(GitError):
    """Raised when a root directory is not a Git repository."""


class ValidationError(ReviewBotError):
    """Exception raised for validation errors."""


class PathTraversalError(ValidationError):
    """Raised when a path resolves outside of its root directory."""


class FileAlreadyExistsError(ReviewBotError, FileExistsError):
    """Raised when a write target exists and overwrite was not requested."""


class ToolExecutionError(ReviewBotError):
    """Wraps a lower-level failure raised while a tool was executing."""


class ConfigError(ReviewBotError):
    """Exception raised for configuration errors."""


class LLMError(ReviewBotError):
    """Exception raised for LLM-related errors."""
