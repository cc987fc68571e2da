from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from reviewsync.context import PipelineContext, SyncSettings
from reviewsync.errors import CleanupError, NoChangeNeeded, SchemaError
from reviewsync.pipeline import PipelineRunner, Stage


def _context() -> PipelineContext:
    return PipelineContext(settings=SyncSettings(host="review.example.org", change_id="1", workdir=Path("/unused")))


def _recorder(log: List[str], name: str, error: Exception | None = None) -> Stage:
    def action(context: PipelineContext) -> None:
        log.append(name)
        context.warnings.append(name)
        if error is not None:
            raise error

    return Stage(name, action)


def test_runs_every_stage_in_order_then_cleanup() -> None:
    log: List[str] = []
    runner = PipelineRunner(
        [_recorder(log, "one"), _recorder(log, "two")],
        _recorder(log, "cleanup"),
    )
    context = _context()

    result = runner.run(context)

    assert result.ok
    assert log == ["one", "two", "cleanup"]
    assert result.completed == ["one", "two", "cleanup"]
    assert context.warnings == ["one", "two", "cleanup"]


def test_first_failure_stops_remaining_stages_but_not_cleanup() -> None:
    log: List[str] = []
    failure = SchemaError("bad record")
    runner = PipelineRunner(
        [_recorder(log, "one"), _recorder(log, "two", failure), _recorder(log, "three")],
        _recorder(log, "cleanup"),
    )

    result = runner.run(_context())

    assert not result.ok
    assert result.error is failure
    assert result.failed_stage == "two"
    assert log == ["one", "two", "cleanup"]
    assert result.completed == ["one", "cleanup"]


def test_clean_stop_is_reported_as_stopped() -> None:
    log: List[str] = []
    runner = PipelineRunner([_recorder(log, "one", NoChangeNeeded("same"))], _recorder(log, "cleanup"))

    result = runner.run(_context())

    assert result.stopped
    assert log == ["one", "cleanup"]


def test_cleanup_failure_does_not_replace_first_error() -> None:
    log: List[str] = []
    first = SchemaError("first")
    runner = PipelineRunner(
        [_recorder(log, "one", first)],
        _recorder(log, "cleanup", CleanupError("refused")),
    )

    result = runner.run(_context())

    assert result.error is first
    assert isinstance(result.cleanup_error, CleanupError)


def test_cleanup_failure_is_the_result_when_stages_succeeded() -> None:
    log: List[str] = []
    runner = PipelineRunner([_recorder(log, "one")], _recorder(log, "cleanup", CleanupError("refused")))

    result = runner.run(_context())

    assert isinstance(result.error, CleanupError)
    assert result.failed_stage == "cleanup"


def test_unexpected_exception_propagates_after_cleanup() -> None:
    log: List[str] = []
    runner = PipelineRunner(
        [_recorder(log, "one", ValueError("boom")), _recorder(log, "two")],
        _recorder(log, "cleanup"),
    )

    with pytest.raises(ValueError):
        runner.run(_context())

    assert log == ["one", "cleanup"]


def test_stage_names_end_with_cleanup() -> None:
    log: List[str] = []
    runner = PipelineRunner([_recorder(log, "a"), _recorder(log, "b")], _recorder(log, "z"))

    assert runner.stage_names == ["a", "b", "z"]
