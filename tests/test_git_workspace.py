from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from reviewsync.tools.commands import SubprocessRunner
from reviewsync.tools.vcs import GitError, GitWorkspace, change_refspec


def _git(cwd: Path, *args: str) -> str:
    process = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return process.stdout


def _configure_identity(cwd: Path) -> None:
    _git(cwd, "config", "user.email", "sync@example.com")
    _git(cwd, "config", "user.name", "Review Sync")


@pytest.fixture()
def origin(tmp_path: Path) -> tuple[Path, str]:
    """A repository exposing one patchset under ``refs/changes``."""

    root = tmp_path / "origin"
    root.mkdir()
    _git(root, "init", "--quiet")
    _configure_identity(root)
    (root / "README").write_text("demo\n", encoding="utf-8")
    _git(root, "add", "README")
    _git(root, "commit", "--quiet", "-m", "Fix bug\n\nTICKET-1\n")
    revision = _git(root, "rev-parse", "HEAD").strip()
    _git(root, "update-ref", "refs/changes/23/123/1", revision)
    return root, revision


def test_clone_fetch_checkout_amend_push(tmp_path: Path, origin: tuple[Path, str]) -> None:
    origin_root, revision = origin
    runner = SubprocessRunner()
    workdir = tmp_path / "reviewsync-1" / "work"
    workdir.parent.mkdir()

    workspace = GitWorkspace.clone(origin_root.as_posix(), workdir, runner)
    _configure_identity(workdir)
    workspace.fetch("origin", "refs/changes/23/123/1")
    workspace.checkout(revision)

    message = "Fix bug\n\nTICKET-1\nReviewed by: A <a@x>\n"
    workspace.amend(message, "1600000000 +0000")
    new_head = workspace.head()

    assert new_head != revision
    assert _git(workdir, "log", "-1", "--format=%B").rstrip("\n") == message.rstrip("\n")
    assert _git(workdir, "log", "-1", "--format=%at").strip() == "1600000000"

    workspace.push("origin", change_refspec(123))

    assert _git(origin_root, "rev-parse", "refs/changes/123").strip() == new_head


def test_amend_keeps_hash_lines(tmp_path: Path, origin: tuple[Path, str]) -> None:
    origin_root, revision = origin
    workdir = tmp_path / "work"
    workspace = GitWorkspace.clone(origin_root.as_posix(), workdir, SubprocessRunner())
    _configure_identity(workdir)

    workspace.amend("Fix #12\n\n#include cleanup\n", "1600000000 +0000")

    assert "#include cleanup" in _git(workdir, "log", "-1", "--format=%B")


def test_amend_commits_message_verbatim(tmp_path: Path, origin: tuple[Path, str]) -> None:
    origin_root, _ = origin
    workdir = tmp_path / "work"
    workspace = GitWorkspace.clone(origin_root.as_posix(), workdir, SubprocessRunner())
    _configure_identity(workdir)

    message = "Fix bug  \n\n\nTICKET-1\nReviewed by: A <a@x>\n"
    workspace.amend(message, "1600000000 +0000")

    raw_commit = _git(workdir, "cat-file", "commit", "HEAD")
    assert raw_commit.split("\n\n", 1)[1] == message


def test_fetch_of_unknown_ref_reports_step(tmp_path: Path, origin: tuple[Path, str]) -> None:
    origin_root, _ = origin
    workdir = tmp_path / "work"
    workspace = GitWorkspace.clone(origin_root.as_posix(), workdir, SubprocessRunner())

    with pytest.raises(GitError) as excinfo:
        workspace.fetch("origin", "refs/changes/99/999/1")

    assert excinfo.value.step == "fetch"
    assert excinfo.value.command[:2] == ["git", "fetch"]


def test_clone_failure_is_a_git_error(tmp_path: Path) -> None:
    with pytest.raises(GitError) as excinfo:
        GitWorkspace.clone((tmp_path / "missing").as_posix(), tmp_path / "work", SubprocessRunner())

    assert excinfo.value.step == "clone"


def test_change_refspec() -> None:
    assert change_refspec(123) == "HEAD:refs/changes/123"
