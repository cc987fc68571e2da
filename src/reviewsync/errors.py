"""Exception hierarchy shared by the synchronization pipeline."""

from __future__ import annotations

from typing import Sequence


class SyncError(RuntimeError):
    """Base class for every failure raised by a pipeline stage."""


class SchemaError(SyncError):
    """Raised when the remote change record is missing or mistyped fields."""


class ChangeLookupError(SyncError, LookupError):
    """Raised when a query matches zero or several changes."""


class ApprovalParseError(SyncError):
    """Raised when an approval entry cannot be interpreted."""

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(f"Approval #{index}: {reason}")
        self.index = index
        self.reason = reason


class ChangeNotOpenError(SyncError):
    """Raised when the target change no longer accepts new patchsets."""


class ExternalCommandError(SyncError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(
        self,
        step: str,
        command: Sequence[str],
        output: str,
        *,
        returncode: int | None = None,
    ) -> None:
        detail = output.strip() or "no diagnostic output"
        super().__init__(f"{step} failed: {detail}")
        self.step = step
        self.command = list(command)
        self.output = output
        self.returncode = returncode


class CleanupError(SyncError):
    """Raised when the working directory cannot be removed safely."""


class SyncStopped(SyncError):
    """Clean stop: the run ends without mutation and without a failure."""


class NoChangeNeeded(SyncStopped):
    """The commit message already reflects the current approvals."""


class OperatorAbort(SyncStopped):
    """The operator declined the confirmation prompt."""


class DryRunStop(SyncStopped):
    """Dry run requested; stop before the confirmation gate."""


__all__ = [
    "ApprovalParseError",
    "ChangeLookupError",
    "ChangeNotOpenError",
    "CleanupError",
    "DryRunStop",
    "ExternalCommandError",
    "NoChangeNeeded",
    "OperatorAbort",
    "SchemaError",
    "SyncError",
    "SyncStopped",
]
