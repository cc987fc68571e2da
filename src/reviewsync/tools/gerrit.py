"""Query a Gerrit server over ssh for a single change."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from pydantic import ValidationError

from ..errors import ChangeLookupError, ExternalCommandError, SchemaError
from ..schema import ChangeRecord
from .commands import CommandRunner

DEFAULT_PORT = 29418


def parse_query_rows(payload: str) -> List[Dict[str, Any]]:
    """Decode ``gerrit query --format=JSON`` output into change rows.

    The trailing statistics row is dropped; an error row raises
    :class:`ChangeLookupError`.
    """

    rows: List[Dict[str, Any]] = []
    for number, line in enumerate(payload.splitlines(), start=1):
        text = line.strip()
        if not text:
            continue
        try:
            row = json.loads(text)
        except json.JSONDecodeError as error:
            raise SchemaError(f"Line {number} of the query output is not JSON: {error}") from error
        if not isinstance(row, dict):
            raise SchemaError(f"Line {number} of the query output is not an object.")
        kind = row.get("type")
        if kind == "stats":
            continue
        if kind == "error":
            raise ChangeLookupError(f"Gerrit query failed: {row.get('message', 'unknown error')}")
        rows.append(row)
    return rows


def parse_change(row: Dict[str, Any]) -> ChangeRecord:
    """Validate one change row, rejecting it wholesale on any schema problem."""

    try:
        return ChangeRecord.model_validate(row)
    except ValidationError as error:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in item.get('loc', ()))}: {item.get('msg')}"
            for item in error.errors()
        )
        raise SchemaError(f"Unexpected change record: {problems}") from error


class GerritClient:
    """Minimal ssh front-end for the Gerrit command line interface."""

    def __init__(
        self,
        host: str,
        *,
        runner: CommandRunner,
        port: int = DEFAULT_PORT,
        user: str | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self._runner = runner

    @property
    def destination(self) -> str:
        return f"{self.user}@{self.host}" if self.user else self.host

    def ssh_command(self, *args: str) -> List[str]:
        return ["ssh", "-p", str(self.port), self.destination, "gerrit", *args]

    def clone_url(self, project: str) -> str:
        """Return the ssh URL used to clone ``project``."""

        return f"ssh://{self.destination}:{self.port}/{project}"

    def query_change(self, change_id: str) -> ChangeRecord:
        """Return the single change matching ``change_id``."""

        command = self.ssh_command("query", "--format=JSON", "--current-patch-set", change_id)
        result = self._runner.run(command)
        if not result.ok:
            raise ExternalCommandError(
                "gerrit query",
                command,
                result.diagnostic(),
                returncode=result.returncode,
            )

        rows = parse_query_rows(result.stdout)
        if not rows:
            raise ChangeLookupError(f"No change matches {change_id!r}.")
        if len(rows) > 1:
            raise ChangeLookupError(f"{len(rows)} changes match {change_id!r}; expected exactly one.")
        return parse_change(rows[0])


__all__ = ["DEFAULT_PORT", "GerritClient", "parse_change", "parse_query_rows"]
