"""Naming and removal of the per-run working directory."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

from ..errors import CleanupError

WORKSPACE_PREFIX = "reviewsync"


def workspace_path(base: Path | str | None = None, *, pid: int | None = None) -> Path:
    """Return the working directory for the current process under ``base``."""

    root = Path(base) if base is not None else Path(tempfile.gettempdir())
    return root.resolve() / f"{WORKSPACE_PREFIX}-{pid if pid is not None else os.getpid()}"


def run_workspace(pid: int | None = None) -> Path:
    """Return the only directory cleanup may delete for this process.

    Always under the system temporary directory, whatever the configuration says.
    """

    return workspace_path(tempfile.gettempdir(), pid=pid)


def is_run_workspace(path: Path | str, expected: Path | str) -> bool:
    """Return ``True`` when ``path`` is ``expected`` or lies inside it."""

    candidate = Path(path).resolve()
    anchor = Path(expected).resolve()
    return candidate == anchor or anchor in candidate.parents


def remove_workspace(path: Path | str, *, expected: Path | str) -> bool:
    """Delete ``path`` after checking it against the run-specific prefix.

    Returns ``False`` when there was nothing to delete.
    """

    target = Path(path)
    if not is_run_workspace(target, expected):
        raise CleanupError(f"Refusing to delete {target}: not under {Path(expected)}")
    if target.is_symlink():
        raise CleanupError(f"Refusing to delete {target}: path is a symlink")
    if not target.exists():
        return False
    try:
        shutil.rmtree(target)
    except OSError as error:
        raise CleanupError(f"Failed to remove {target}: {error}") from error
    return True


__all__ = [
    "WORKSPACE_PREFIX",
    "is_run_workspace",
    "remove_workspace",
    "run_workspace",
    "workspace_path",
]
