from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from reviewsync.tools.commands import CommandResult  # noqa: E402


def approval(
    kind: str,
    name: str,
    email: str | None,
    granted: int,
    value: str = "1",
) -> Dict[str, Any]:
    """Build an approval entry shaped like ``gerrit query`` output."""

    by: Dict[str, Any] = {"name": name, "username": name.lower()}
    if email is not None:
        by["email"] = email
    return {
        "type": kind,
        "description": kind,
        "value": value,
        "grantedOn": granted,
        "by": by,
    }


def change_payload(
    message: str = "Fix bug\n\nTICKET-1\n",
    approvals: Sequence[Dict[str, Any]] = (),
    *,
    number: int = 123,
    is_open: bool = True,
    status: str = "NEW",
) -> Dict[str, Any]:
    """Build one change row as emitted by ``gerrit query --format=JSON``."""

    return {
        "project": "tools/demo",
        "branch": "main",
        "id": "I0123456789abcdef0123456789abcdef01234567",
        "number": number,
        "subject": message.split("\n", 1)[0],
        "commitMessage": message,
        "createdOn": 1700000000,
        "lastUpdated": 1700000500,
        "open": is_open,
        "status": status,
        "currentPatchSet": {
            "number": 2,
            "revision": "a1b2c3d4e5f6a1b2c3d4e5f6a1b2c3d4e5f6a1b2",
            "ref": f"refs/changes/{number % 100:02d}/{number}/2",
            "approvals": list(approvals),
        },
    }


def query_output(*rows: Dict[str, Any]) -> str:
    """Serialize change rows followed by Gerrit's statistics row."""

    lines = [json.dumps(row) for row in rows]
    lines.append(json.dumps({"type": "stats", "rowCount": len(rows), "runTimeMilliseconds": 3}))
    return "\n".join(lines) + "\n"


@dataclass
class Call:
    args: List[str]
    cwd: Path | None
    input_text: str | None


class FakeRunner:
    """Scripted stand-in for :class:`reviewsync.tools.commands.SubprocessRunner`.

    Responses are queued per command key (``query`` for the ssh call, the git
    sub-command otherwise). Unscripted commands succeed with empty output.
    """

    def __init__(self) -> None:
        self.calls: List[Call] = []
        self._responses: Dict[str, List[CommandResult]] = {}

    @staticmethod
    def key(args: Sequence[str]) -> str:
        if args[0] == "ssh":
            return "query"
        return args[1]

    def respond(self, key: str, stdout: str = "", stderr: str = "", returncode: int = 0) -> None:
        self._responses.setdefault(key, []).append(CommandResult([key], returncode, stdout, stderr))

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        input_text: str | None = None,
    ) -> CommandResult:
        self.calls.append(Call(list(args), cwd, input_text))
        key = self.key(args)
        queue = self._responses.get(key) or []
        if queue:
            scripted = queue.pop(0)
            result = CommandResult(list(args), scripted.returncode, scripted.stdout, scripted.stderr)
        else:
            result = CommandResult(list(args), 0, "", "")
        if key == "clone" and result.ok:
            Path(args[-1]).mkdir(parents=True, exist_ok=True)
        return result

    def keys(self) -> List[str]:
        return [self.key(call.args) for call in self.calls]


@dataclass
class RecordingReporter:
    infos: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    blocks: Dict[str, str] = field(default_factory=dict)

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def block(self, title: str, body: str) -> None:
        self.blocks[title] = body


@dataclass
class ScriptedPrompter:
    answer: bool = True
    questions: List[str] = field(default_factory=list)

    def confirm(self, question: str) -> bool:
        self.questions.append(question)
        return self.answer


@pytest.fixture()
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture()
def reporter() -> RecordingReporter:
    return RecordingReporter()
