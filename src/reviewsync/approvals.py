"""Turn raw Gerrit approvals into the canonical approval block."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Sequence

from pydantic import ValidationError

from .errors import ApprovalParseError, NoChangeNeeded
from .message import compose_message
from .schema import EXCLUDED_TYPES, TYPE_ORDER, ApprovalRecord, RawApproval

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class Reconciliation:
    """Outcome of reconciling one change's approvals with its message."""

    approvals: List[ApprovalRecord]
    block: str
    message: str
    warnings: List[str] = field(default_factory=list)


def _describe_validation_error(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "entry"
    return f"{location}: {first.get('msg', 'invalid value')}"


def parse_approvals(raw_approvals: Sequence[Any]) -> List[RawApproval]:
    """Validate every raw entry, failing on the first malformed one."""

    parsed: List[RawApproval] = []
    for index, entry in enumerate(raw_approvals):
        try:
            parsed.append(RawApproval.model_validate(entry))
        except ValidationError as error:
            raise ApprovalParseError(index, _describe_validation_error(error)) from error
    return parsed


def select_approvals(raw_approvals: Sequence[Any]) -> tuple[List[ApprovalRecord], List[str]]:
    """Filter and sort approvals, returning the accepted ones and warnings."""

    accepted: List[ApprovalRecord] = []
    warnings: List[str] = []
    for index, raw in enumerate(parse_approvals(raw_approvals)):
        if raw.type in EXCLUDED_TYPES:
            continue
        if not raw.by.email:
            raise ApprovalParseError(index, f"reviewer {raw.by.name!r} has no email address")
        record = ApprovalRecord(
            type=raw.type,
            name=raw.by.name,
            email=raw.by.email,
            value="" if raw.value is None else str(raw.value),
            granted_on=raw.granted_on,
        )
        if not record.is_plus_one:
            message = (
                f"Ignoring {record.type.value} {record.value or '(none)'} "
                f"from {record.name} <{record.email}>"
            )
            LOGGER.debug("%s", message)
            warnings.append(message)
            continue
        accepted.append(record)

    # sorted() is stable, equal keys keep their input order
    accepted = sorted(accepted, key=lambda item: (TYPE_ORDER[item.type], item.granted_on))
    return accepted, warnings


def render_block(approvals: Sequence[ApprovalRecord]) -> str:
    """Render one line per approval with no blank separators."""

    return "".join(f"{record.render()}\n" for record in approvals)


def build_candidate(
    approvals: Sequence[ApprovalRecord],
    ticket: Sequence[str],
    original_message: str,
    *,
    warnings: Sequence[str] = (),
) -> Reconciliation:
    """Render ``approvals`` after ``ticket`` and compare with the original.

    Raises :class:`NoChangeNeeded` when the candidate is byte-identical to
    ``original_message``.
    """

    block = render_block(approvals)
    message = compose_message(list(ticket), block)
    if message == original_message:
        raise NoChangeNeeded("Commit message already lists the current approvals.")
    return Reconciliation(
        approvals=list(approvals),
        block=block,
        message=message,
        warnings=list(warnings),
    )


def reconcile(
    raw_approvals: Sequence[Any],
    ticket: Sequence[str],
    original_message: str,
) -> Reconciliation:
    """Build the candidate commit message for ``raw_approvals``."""

    approvals, warnings = select_approvals(raw_approvals)
    return build_candidate(approvals, ticket, original_message, warnings=warnings)


__all__ = [
    "Reconciliation",
    "build_candidate",
    "parse_approvals",
    "reconcile",
    "render_block",
    "select_approvals",
]
