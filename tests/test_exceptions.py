from reviewbot.exceptions import (
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


def test_exceptions_hierarchy_and_str():
    # Given exception instances
    errors = [
        GitError("git"),
        NotARepositoryError("repo"),
        ValidationError("val"),
        PathTraversalError("path"),
        FileAlreadyExistsError("exists"),
        ToolExecutionError("tool"),
        ConfigError("cfg"),
        LLMError("llm"),
    ]

    # Then all derive from the base and keep their message
    for err in errors:
        assert isinstance(err, ReviewBotError)
        assert str(err) in {"git", "repo", "val", "path", "exists", "tool", "cfg", "llm"}


def test_specialised_errors_keep_their_family():
    assert isinstance(NotARepositoryError("x"), GitError)
    assert isinstance(PathTraversalError("x"), ValidationError)
    # Callers catching the builtin still see existing-file refusals
    assert isinstance(FileAlreadyExistsError("x"), FileExistsError)
