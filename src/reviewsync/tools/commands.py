"""Narrow interface for running external commands.

Everything that talks to another process (the Gerrit query over ssh and the
git mutations) goes through a :class:`CommandRunner`, so the pipeline can be
exercised in tests with a scripted runner instead of real processes.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol, Sequence


@dataclass(slots=True)
class CommandResult:
    """Captured outcome of one external command."""

    args: List[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def diagnostic(self) -> str:
        """Return the most useful captured output for error messages."""

        return self.stderr.strip() or self.stdout.strip()


class CommandRunner(Protocol):
    """Anything that can execute an argument list and capture its output."""

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        input_text: str | None = None,
    ) -> CommandResult:
        ...


class SubprocessRunner:
    """Run commands with :func:`subprocess.run`, blocking until they exit."""

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        input_text: str | None = None,
    ) -> CommandResult:
        process = subprocess.run(  # noqa: S603  # argument lists are built internally
            list(args),
            cwd=cwd,
            input=input_text.encode("utf-8") if input_text is not None else None,
            capture_output=True,
            text=False,
            check=False,
        )
        stdout = process.stdout.decode("utf-8", errors="replace") if process.stdout else ""
        stderr = process.stderr.decode("utf-8", errors="replace") if process.stderr else ""
        return CommandResult(list(args), process.returncode, stdout, stderr)


__all__ = ["CommandResult", "CommandRunner", "SubprocessRunner"]
