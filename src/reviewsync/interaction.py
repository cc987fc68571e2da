"""Terminal-facing capabilities used by the pipeline stages."""

from __future__ import annotations

import logging
from typing import Protocol

import typer

LOGGER = logging.getLogger(__name__)


class Prompter(Protocol):
    """Ask the operator a yes/no question."""

    def confirm(self, question: str) -> bool:
        ...


class Reporter(Protocol):
    """Emit progress, warnings and multi-line blocks to the operator."""

    def info(self, message: str) -> None:
        ...

    def warning(self, message: str) -> None:
        ...

    def block(self, title: str, body: str) -> None:
        ...


class TyperPrompter:
    """Prompt on the controlling terminal, defaulting to "no".

    End of input and Ctrl-C count as "no".
    """

    def confirm(self, question: str) -> bool:
        try:
            return bool(typer.confirm(question, default=False))
        except (typer.Abort, EOFError):
            typer.echo("")
            return False


class TyperReporter:
    """Write progress to stdout and warnings to stderr."""

    def info(self, message: str) -> None:
        typer.echo(message)

    def warning(self, message: str) -> None:
        LOGGER.debug("operator warning: %s", message)
        typer.secho(f"Warning: {message}", err=True, fg=typer.colors.YELLOW)

    def block(self, title: str, body: str) -> None:
        typer.secho(f"{title}:", bold=True)
        typer.echo(body.rstrip("\n"))
        typer.echo("")


__all__ = ["Prompter", "Reporter", "TyperPrompter", "TyperReporter"]
