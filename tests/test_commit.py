import pytest
from pydantic import ValidationError as PydanticValidationError

from reviewbot.commit import (
    ChangeSnapshot,
    build_body,
    build_subject,
    generate_commit_message,
    infer_commit_type,
    truncate,
)
from reviewbot.exceptions import GitError, NotARepositoryError, ToolExecutionError
from reviewbot.git import RepoStatus
from reviewbot.models import CommitMessageRequest, CommitType


def _request(**kwargs) -> CommitMessageRequest:
    kwargs.setdefault("root_dir", "/repo")
    return CommitMessageRequest(**kwargs)


def _snapshot(summary=(), created=(), modified=(), deleted=(), status=None):
    status_files = list(status) if status is not None else [
        *created,
        *modified,
        *deleted,
    ]
    return ChangeSnapshot(
        summary_files=list(summary),
        status_files=status_files,
        created=list(created),
        modified=list(modified),
        deleted=list(deleted),
    )


def test_single_created_file_gets_feat_with_scope(fake_repo):
    # Given one created file below src/
    factory = fake_repo(
        status=RepoStatus(created=["src/a.ts"]), summary=["src/a.ts"]
    )

    # When
    msg = generate_commit_message(_request(include_body=False), factory)

    # Then
    assert msg == "feat(src): add a.ts"
    assert factory.repo.root_dir == "/repo"


def test_two_modified_docs_files(fake_repo):
    files = ["docs/readme.md", "docs/guide.md"]
    factory = fake_repo(status=RepoStatus(modified=files), summary=files)

    msg = generate_commit_message(_request(include_body=False), factory)

    assert msg == "docs(docs): update docs files"


def test_only_tests_infers_test_type(fake_repo):
    files = ["src/__tests__/a.ts", "lib/b.spec.ts"]
    factory = fake_repo(status=RepoStatus(modified=files), summary=files)

    msg = generate_commit_message(_request(include_body=False), factory)

    assert msg == "test(src): update src files"


def test_only_config_infers_chore_without_scope(fake_repo):
    files = ["package.json", "tsconfig.json"]
    factory = fake_repo(status=RepoStatus(modified=files), summary=files)

    msg = generate_commit_message(_request(include_body=False), factory)

    assert msg == "chore: update 2 files"


def test_deleted_code_file_is_chore(fake_repo):
    factory = fake_repo(
        status=RepoStatus(deleted=["src/old.py"]), summary=["src/old.py"]
    )

    msg = generate_commit_message(_request(include_body=False), factory)

    assert msg == "chore(src): remove old.py"


def test_modified_code_defaults_to_refactor(fake_repo):
    files = ["lib/x.py", "lib/y.py"]
    factory = fake_repo(status=RepoStatus(modified=files), summary=files)

    msg = generate_commit_message(_request(include_body=False), factory)

    assert msg == "refactor(lib): update lib files"


def test_pure_rename_uses_update_verb(fake_repo):
    # Given a rename that appears in no other status list
    factory = fake_repo(
        status=RepoStatus(renamed=[("old.py", "lib/new.py")]),
        summary=["lib/new.py"],
    )

    msg = generate_commit_message(_request(include_body=False), factory)

    assert msg == "refactor(lib): update new.py"


def test_no_changes(fake_repo):
    msg = generate_commit_message(_request(include_body=False), fake_repo())
    assert msg == "refactor: update project files"


def test_excluded_paths_are_ignored(fake_repo):
    files = ["dist/bundle.js", "node_modules/x/index.js", "README.md"]
    factory = fake_repo(status=RepoStatus(modified=files), summary=files)

    msg = generate_commit_message(_request(), factory)

    assert msg == "docs: update README.md\n\n- docs: README.md"


def test_overrides_win(fake_repo):
    files = ["lib/x.py"]
    factory = fake_repo(status=RepoStatus(created=files), summary=files)

    msg = generate_commit_message(
        _request(
            type=CommitType.FIX,
            scope="core",
            summary="handle empty input",
            include_body=False,
        ),
        factory,
    )

    assert msg == "fix(core): handle empty input"


def test_subject_is_truncated_with_ellipsis(fake_repo):
    msg = generate_commit_message(
        _request(summary="abcdefghijklmnop", max_subject_length=10, include_body=False),
        fake_repo(),
    )

    subject = msg.split(": ", 1)[1]
    assert subject == "abcdefghi…"
    assert len(subject) == 10


def test_body_lists_kinds_and_caps_at_twenty(fake_repo):
    files = ["docs/a.md", "src/__tests__/b.ts", "package.json"] + [
        f"src/f{i}.py" for i in range(22)
    ]
    factory = fake_repo(status=RepoStatus(modified=files), summary=files)

    msg = generate_commit_message(_request(), factory)
    header, blank, *body = msg.split("\n")

    assert header == "refactor(docs): update docs files"
    assert blank == ""
    assert body[:4] == [
        "- docs: docs/a.md",
        "- test: src/__tests__/b.ts",
        "- config: package.json",
        "- code: src/f0.py",
    ]
    assert len(body) == 21
    assert body[-1] == "- …and 5 more file(s)"


def test_not_a_repository_is_wrapped(fake_repo):
    with pytest.raises(ToolExecutionError) as ei:
        generate_commit_message(_request(), fake_repo(is_repo=False))

    assert "Failed to generate commit message" in str(ei.value)
    assert "Not a git repository: /repo" in str(ei.value)
    assert isinstance(ei.value.__cause__, NotARepositoryError)


def test_collaborator_failure_is_wrapped(fake_repo):
    with pytest.raises(ToolExecutionError) as ei:
        generate_commit_message(
            _request(), fake_repo(error=GitError("Git command failed: status"))
        )

    assert "Git command failed: status" in str(ei.value)


@pytest.mark.parametrize(
    "snapshot, expected",
    [
        (_snapshot(summary=["a.md"], created=["a.md"]), CommitType.DOCS),
        (_snapshot(summary=["a.test.ts"], deleted=["a.test.ts"]), CommitType.TEST),
        (_snapshot(summary=["package.json"], created=["x.py"]), CommitType.CHORE),
        (_snapshot(summary=["a.py", "a.md"], created=["a.py"]), CommitType.FEAT),
        (_snapshot(summary=["a.py"], deleted=["a.py"]), CommitType.CHORE),
        (_snapshot(summary=["a.py"], modified=["a.py"]), CommitType.REFACTOR),
        (_snapshot(summary=[], created=["new.py"]), CommitType.FEAT),
        (_snapshot(), CommitType.REFACTOR),
    ],
)
def test_type_rules_in_priority_order(snapshot, expected):
    assert infer_commit_type(snapshot) is expected


def test_subject_counts_files_without_scope():
    snapshot = _snapshot(summary=["a.py", "b.py", "c.py"], modified=["a.py", "b.py", "c.py"])
    assert build_subject(snapshot) == "update 3 files"


def test_subject_uses_basename_for_windows_paths():
    snapshot = _snapshot(summary=[], created=["src\\pkg\\mod.py"])
    assert build_subject(snapshot) == "add mod.py"


def test_truncate_edge_cases():
    assert truncate("short", 10) == "short"
    assert truncate("exactly10!", 10) == "exactly10!"
    assert truncate("abc", 1) == "…"
    # Trailing whitespace before the cut is dropped
    assert truncate("abcd    efgh", 8) == "abcd…"


def test_build_body_without_overflow():
    assert build_body(["a.py", "README.md"]) == ["- code: a.py", "- docs: README.md"]


def test_request_accepts_aliases_and_bounds_subject_length():
    req = CommitMessageRequest.model_validate(
        {"rootDir": ".", "type": "docs", "includeBody": False, "maxSubjectLength": 50}
    )
    assert req.type is CommitType.DOCS
    assert req.include_body is False
    assert req.max_subject_length == 50

    default = CommitMessageRequest(root_dir=".")
    assert default.include_body is True
    assert default.max_subject_length == 72

    for bad in (0, 101):
        with pytest.raises(PydanticValidationError):
            CommitMessageRequest(root_dir=".", max_subject_length=bad)
    with pytest.raises(PydanticValidationError):
        CommitMessageRequest(root_dir="")
    with pytest.raises(PydanticValidationError):
        CommitMessageRequest(root_dir=".", type="wip")
