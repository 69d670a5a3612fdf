import shutil
import subprocess
from collections.abc import Generator
from pathlib import Path
from typing import Callable, Optional

import pytest

from reviewbot.git import RepoStatus

_ENV_VARS = (
    "ANTHROPIC_API_KEY",
    "REVIEWBOT_PROVIDER",
    "REVIEWBOT_LLM_MODEL",
    "REVIEWBOT_LLM_ENDPOINT",
    "REVIEWBOT_MAX_STEPS",
    "REVIEWBOT_LLM_REQUEST_TIMEOUT",
    "REVIEWBOT_DEBUG",
    "ROOT_DIR",
)


@pytest.fixture(autouse=True)
def reset_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    from reviewbot.config import clear_active_config

    clear_active_config()
    yield
    clear_active_config()


class FakeRepo:
    """In-memory stand-in for :class:`reviewbot.git.GitRepo`."""

    def __init__(
        self,
        status: Optional[RepoStatus] = None,
        summary: Optional[list[str]] = None,
        diffs: Optional[dict[str, str]] = None,
        is_repo: bool = True,
        error: Optional[Exception] = None,
    ) -> None:
        self._status = status or RepoStatus()
        self._summary = list(summary or [])
        self._diffs = diffs or {}
        self._is_repo = is_repo
        self._error = error
        self.diff_calls: list[tuple[str, int]] = []

    def is_repo(self) -> bool:
        return self._is_repo

    def status(self) -> RepoStatus:
        if self._error:
            raise self._error
        return self._status

    def diff_summary(self) -> list[str]:
        if self._error:
            raise self._error
        return list(self._summary)

    def diff_for_path(self, file_path: str, context: int = 0) -> str:
        self.diff_calls.append((file_path, context))
        if self._error:
            raise self._error
        return self._diffs.get(file_path, "")


@pytest.fixture
def fake_repo() -> Callable[..., Callable[[str], FakeRepo]]:
    """Return a builder producing a ``repo_factory`` bound to a FakeRepo."""

    def build(**kwargs) -> Callable[[str], FakeRepo]:
        repo = FakeRepo(**kwargs)

        def factory(root_dir: str) -> FakeRepo:
            repo.root_dir = root_dir
            return repo

        factory.repo = repo
        return factory

    return build


def _git(args: list[str], cwd: Path) -> str:
    result = subprocess.run(
        ["git", "-c", "commit.gpgsign=false"] + args,
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def git_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Initialise an empty repository in ``tmp_path`` and return a helper."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()
    _git(["init", "-q"], repo_dir)
    _git(["config", "user.name", "Tester"], repo_dir)
    _git(["config", "user.email", "tester@example.com"], repo_dir)

    class _Helper:
        path = repo_dir

        def write(self, rel: str, text: str) -> Path:
            target = repo_dir / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text)
            return target

        def git(self, *args: str) -> str:
            return _git(list(args), repo_dir)

        def commit_all(self, message: str = "chore: init") -> None:
            self.git("add", "-A")
            self.git("commit", "-q", "-m", message)

    return _Helper()
