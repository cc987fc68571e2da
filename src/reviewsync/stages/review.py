"""Read-only stages: fetch the change, rebuild its message and ask for approval."""

from __future__ import annotations

import difflib
import logging
from datetime import datetime, timezone

from ..approvals import build_candidate, select_approvals
from ..context import PipelineContext
from ..errors import DryRunStop, OperatorAbort
from ..interaction import Prompter, Reporter
from ..message import ticket_lines
from ..tools.gerrit import GerritClient

LOGGER = logging.getLogger(__name__)


def format_commit_date(timestamp: int) -> str:
    """Return ``timestamp`` in git's internal ``<epoch> <offset>`` format."""

    return f"{timestamp} +0000"


def describe_commit_date(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def fetch_change(context: PipelineContext, *, gerrit: GerritClient, reporter: Reporter) -> None:
    change = gerrit.query_change(context.settings.change_id)
    context.change = change
    reporter.info(
        f"Change {change.number} in {change.project} ({change.branch}), "
        f"patchset {change.current_patch_set.number} at {change.revision[:12]}"
    )


def split_commit_message(context: PipelineContext) -> None:
    context.ticket_lines = ticket_lines(context.require_change().commit_message)


def reconcile_approvals(context: PipelineContext, *, reporter: Reporter) -> None:
    """Select the current approvals and build the candidate message."""

    change = context.require_change()
    approvals, warnings = select_approvals(change.approvals)
    for warning in warnings:
        reporter.warning(warning)
    context.warnings.extend(warnings)

    if approvals:
        reporter.info("Accepted approvals:")
        for record in approvals:
            reporter.info(f"  {record.type.value}: {record.name} <{record.email}>")
    else:
        reporter.info("No approvals to record.")

    candidate = build_candidate(approvals, context.ticket_lines or [], change.commit_message)
    context.approvals = candidate.approvals
    context.approval_block = candidate.block
    context.new_message = candidate.message
    context.commit_date = format_commit_date(change.created_on)


def preview_message(context: PipelineContext, *, reporter: Reporter) -> None:
    """Show the old and new message with a diff; stop here on a dry run."""

    change = context.require_change()
    new_message = context.require_message()
    reporter.block("Current commit message", change.commit_message)
    reporter.block("New commit message", new_message)
    diff = difflib.unified_diff(
        change.commit_message.splitlines(),
        new_message.splitlines(),
        fromfile="current",
        tofile="new",
        lineterm="",
    )
    reporter.block("Diff", "\n".join(diff))
    reporter.info(f"Commit date: {describe_commit_date(change.created_on)}")
    if context.settings.dry_run:
        raise DryRunStop("Dry run: no changes pushed.")


def confirm_push(context: PipelineContext, *, prompter: Prompter) -> None:
    change = context.require_change()
    question = f"Push the new message as a new patchset of change {change.number}?"
    if not prompter.confirm(question):
        LOGGER.debug("operator declined change %s", change.number)
        raise OperatorAbort("Aborted by operator.")


__all__ = [
    "confirm_push",
    "describe_commit_date",
    "fetch_change",
    "format_commit_date",
    "preview_message",
    "reconcile_approvals",
    "split_commit_message",
]
