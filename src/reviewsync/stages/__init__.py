"""Stage names, execution order and the pipeline factory."""

from __future__ import annotations

from enum import Enum
from functools import partial
from pathlib import Path

from ..interaction import Prompter, Reporter
from ..pipeline import PipelineRunner, Stage
from ..tools.commands import CommandRunner
from ..tools.gerrit import GerritClient
from .cleanup import remove_workdir
from .repository import (
    amend_commit,
    checkout_revision,
    clone_project,
    ensure_open,
    fetch_revision,
    push_revision,
)
from .review import (
    confirm_push,
    fetch_change,
    preview_message,
    reconcile_approvals,
    split_commit_message,
)


class StageName(str, Enum):
    """Enumeration of the synchronization stages."""

    FETCH_CHANGE = "fetch_change"
    SPLIT_MESSAGE = "split_message"
    RECONCILE = "reconcile"
    PREVIEW = "preview"
    CONFIRM = "confirm"
    ENSURE_OPEN = "ensure_open"
    CLONE = "clone"
    FETCH_REVISION = "fetch_revision"
    CHECKOUT = "checkout"
    AMEND = "amend"
    PUSH = "push"
    CLEANUP = "cleanup"


STAGE_SEQUENCE = [
    StageName.FETCH_CHANGE,
    StageName.SPLIT_MESSAGE,
    StageName.RECONCILE,
    StageName.PREVIEW,
    StageName.CONFIRM,
    StageName.ENSURE_OPEN,
    StageName.CLONE,
    StageName.FETCH_REVISION,
    StageName.CHECKOUT,
    StageName.AMEND,
    StageName.PUSH,
]


def build_pipeline(
    *,
    gerrit: GerritClient,
    runner: CommandRunner,
    reporter: Reporter,
    prompter: Prompter,
    expected_workdir: Path,
) -> PipelineRunner:
    """Wire every stage to its collaborators in :data:`STAGE_SEQUENCE` order."""

    actions = {
        StageName.FETCH_CHANGE: partial(fetch_change, gerrit=gerrit, reporter=reporter),
        StageName.SPLIT_MESSAGE: split_commit_message,
        StageName.RECONCILE: partial(reconcile_approvals, reporter=reporter),
        StageName.PREVIEW: partial(preview_message, reporter=reporter),
        StageName.CONFIRM: partial(confirm_push, prompter=prompter),
        StageName.ENSURE_OPEN: partial(ensure_open, gerrit=gerrit),
        StageName.CLONE: partial(clone_project, gerrit=gerrit, runner=runner, reporter=reporter),
        StageName.FETCH_REVISION: partial(fetch_revision, runner=runner),
        StageName.CHECKOUT: partial(checkout_revision, runner=runner),
        StageName.AMEND: partial(amend_commit, runner=runner),
        StageName.PUSH: partial(push_revision, runner=runner, reporter=reporter),
    }
    stages = [Stage(name.value, actions[name]) for name in STAGE_SEQUENCE]
    cleanup = Stage(StageName.CLEANUP.value, partial(remove_workdir, expected=expected_workdir))
    return PipelineRunner(stages, cleanup)


__all__ = ["STAGE_SEQUENCE", "StageName", "build_pipeline"]
