"""Minimal git helpers
The helpers below provide just enough structure to clone a project, check out
a patchset, amend its commit message and push the result as a new patchset.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from ..errors import ExternalCommandError
from .commands import CommandResult, CommandRunner


class GitError(ExternalCommandError):
    """Raised when a git command fails."""


def _run(
    runner: CommandRunner,
    step: str,
    args: Sequence[str],
    *,
    cwd: Path,
    input_text: str | None = None,
) -> CommandResult:
    command = ["git", *args]
    result = runner.run(command, cwd=cwd, input_text=input_text)
    if not result.ok:
        raise GitError(step, command, result.diagnostic(), returncode=result.returncode)
    return result


class GitWorkspace:
    """Lightweight wrapper around ``git`` commands in one working copy."""

    def __init__(self, root: Path | str, runner: CommandRunner) -> None:
        self.root = Path(root)
        self._runner = runner

    @classmethod
    def clone(cls, url: str, root: Path | str, runner: CommandRunner) -> "GitWorkspace":
        """Clone ``url`` into ``root`` and return the new working copy."""

        target = Path(root)
        _run(runner, "clone", ["clone", url, target.as_posix()], cwd=target.parent)
        return cls(target, runner)

    # ------------------------------------------------------------------ git IO
    def git(self, *args: str, step: str | None = None, input_text: str | None = None) -> CommandResult:
        """Execute ``git`` with ``args`` inside the working copy."""

        return _run(self._runner, step or f"git {args[0]}", list(args), cwd=self.root, input_text=input_text)

    def fetch(self, remote: str, ref: str) -> None:
        self.git("fetch", remote, ref, step="fetch")

    def checkout(self, revision: str) -> None:
        self.git("checkout", "--detach", revision, step="checkout")

    def amend(self, message: str, date: str) -> None:
        """Replace the message and date of ``HEAD``.

        The message is passed on stdin and committed verbatim, so blank lines,
        trailing whitespace and lines starting with ``#`` survive.
        """

        self.git(
            "commit",
            "--amend",
            "--cleanup=verbatim",
            f"--date={date}",
            "--file=-",
            step="amend",
            input_text=message,
        )

    def push(self, remote: str, refspec: str) -> None:
        self.git("push", remote, refspec, step="push")

    def head(self) -> str:
        return self.git("rev-parse", "HEAD", step="rev-parse").stdout.strip()


def change_refspec(number: int) -> str:
    """Return the refspec that publishes ``HEAD`` as a new patchset of ``number``."""

    return f"HEAD:refs/changes/{number}"


__all__ = ["GitError", "GitWorkspace", "change_refspec"]
