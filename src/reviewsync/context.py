"""Run configuration and the mutable context shared by all stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .schema import ApprovalRecord, ChangeRecord


@dataclass(slots=True)
class SyncSettings:
    """Inputs of one synchronization run."""

    host: str
    change_id: str
    workdir: Path
    user: str | None = None
    port: int = 29418
    remote: str = "origin"
    dry_run: bool = False


@dataclass(slots=True)
class PipelineContext:
    """State threaded through the pipeline for a single run.

    Derived fields start as ``None`` and are filled by successive stages.
    """

    settings: SyncSettings
    change: Optional[ChangeRecord] = None
    ticket_lines: Optional[List[str]] = None
    approvals: Optional[List[ApprovalRecord]] = None
    approval_block: Optional[str] = None
    new_message: Optional[str] = None
    commit_date: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    def require_change(self) -> ChangeRecord:
        if self.change is None:
            raise RuntimeError("Change record has not been fetched yet.")
        return self.change

    def require_message(self) -> str:
        if self.new_message is None:
            raise RuntimeError("Candidate commit message has not been built yet.")
        return self.new_message


__all__ = ["PipelineContext", "SyncSettings"]
