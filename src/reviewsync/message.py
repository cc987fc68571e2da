"""Split commit messages into a stable ticket prefix and an approval section."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

APPROVAL_MARKERS = ("Reviewed by:", "Approved by:")


@dataclass(slots=True)
class MessageSections:
    """Commit message partitioned at the start of its approval section."""

    ticket_lines: List[str]
    approval_lines: List[str]


def is_approval_line(line: str) -> bool:
    """Return ``True`` when ``line`` belongs to a rendered approval block."""

    return line.startswith(APPROVAL_MARKERS)


def split_message(message: str) -> MessageSections:
    """Partition ``message`` into ticket lines and the regenerable remainder.

    The approval section starts at the first marker line, or at the first
    empty line after which only empty and marker lines follow. Blank lines
    between paragraphs of the ticket text therefore stay in the prefix.
    """

    lines = message.split("\n")
    cut = len(lines)
    for index, line in enumerate(lines):
        if is_approval_line(line):
            cut = index
            break
        if line == "" and all(rest == "" or is_approval_line(rest) for rest in lines[index + 1 :]):
            cut = index
            break
    return MessageSections(ticket_lines=lines[:cut], approval_lines=lines[cut:])


def ticket_lines(message: str) -> List[str]:
    """Return only the ticket prefix of ``message``."""

    return split_message(message).ticket_lines


def compose_message(ticket: List[str], approval_block: str) -> str:
    """Join the ticket prefix and a rendered approval block."""

    return "\n".join(ticket) + "\n" + approval_block


__all__ = [
    "APPROVAL_MARKERS",
    "MessageSections",
    "compose_message",
    "is_approval_line",
    "split_message",
    "ticket_lines",
]
