"""Mutating stages: republish the change with the rebuilt commit message.

Each stage builds a :class:`GitWorkspace` on the run's working directory, so a
stage can be exercised on its own as long as the directory exists.
"""

from __future__ import annotations

from ..context import PipelineContext
from ..errors import ChangeNotOpenError
from ..interaction import Reporter
from ..tools.commands import CommandRunner
from ..tools.gerrit import GerritClient
from ..tools.vcs import GitWorkspace, change_refspec


def ensure_open(context: PipelineContext, *, gerrit: GerritClient) -> None:
    """Re-query the change and refuse to continue once it is closed."""

    change = context.require_change()
    current = gerrit.query_change(context.settings.change_id)
    if not current.open:
        status = current.status or "closed"
        raise ChangeNotOpenError(f"Change {change.number} is {status.lower()}; it no longer accepts patchsets.")


def clone_project(
    context: PipelineContext,
    *,
    gerrit: GerritClient,
    runner: CommandRunner,
    reporter: Reporter,
) -> None:
    change = context.require_change()
    url = gerrit.clone_url(change.project)
    reporter.info(f"Cloning {url} into {context.settings.workdir}")
    GitWorkspace.clone(url, context.settings.workdir, runner)


def fetch_revision(context: PipelineContext, *, runner: CommandRunner) -> None:
    change = context.require_change()
    GitWorkspace(context.settings.workdir, runner).fetch(context.settings.remote, change.ref)


def checkout_revision(context: PipelineContext, *, runner: CommandRunner) -> None:
    change = context.require_change()
    GitWorkspace(context.settings.workdir, runner).checkout(change.revision)


def amend_commit(context: PipelineContext, *, runner: CommandRunner) -> None:
    if context.commit_date is None:
        raise RuntimeError("Commit date has not been computed yet.")
    GitWorkspace(context.settings.workdir, runner).amend(context.require_message(), context.commit_date)


def push_revision(context: PipelineContext, *, runner: CommandRunner, reporter: Reporter) -> None:
    change = context.require_change()
    workspace = GitWorkspace(context.settings.workdir, runner)
    refspec = change_refspec(change.number)
    head = workspace.head()
    workspace.push(context.settings.remote, refspec)
    reporter.info(f"Pushed {head[:12]} to {context.settings.remote} {refspec}")


__all__ = [
    "amend_commit",
    "checkout_revision",
    "clone_project",
    "ensure_open",
    "fetch_revision",
    "push_revision",
]
