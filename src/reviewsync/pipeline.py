"""Sequential stage runner with fail-fast semantics and guaranteed cleanup."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Sequence

from .context import PipelineContext
from .errors import SyncError, SyncStopped

LOGGER = logging.getLogger(__name__)

StageAction = Callable[[PipelineContext], None]


@dataclass(slots=True)
class Stage:
    """Named step of the pipeline; ``action`` mutates the shared context."""

    name: str
    action: StageAction

    def __call__(self, context: PipelineContext) -> None:
        self.action(context)


@dataclass(slots=True)
class PipelineResult:
    """Outcome of one pipeline run."""

    error: SyncError | None = None
    failed_stage: str | None = None
    completed: List[str] = field(default_factory=list)
    cleanup_error: SyncError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def stopped(self) -> bool:
        """``True`` when the run ended on a clean stop rather than a failure."""

        return isinstance(self.error, SyncStopped)


class PipelineRunner:
    """Run ``stages`` in order against one context, then always run ``cleanup``."""

    def __init__(self, stages: Sequence[Stage], cleanup: Stage) -> None:
        self._stages = list(stages)
        self._cleanup = cleanup

    @property
    def stage_names(self) -> List[str]:
        return [stage.name for stage in self._stages] + [self._cleanup.name]

    def run(self, context: PipelineContext) -> PipelineResult:
        result = PipelineResult()
        try:
            for stage in self._stages:
                LOGGER.debug("stage %s: start", stage.name)
                try:
                    stage(context)
                except SyncError as error:
                    LOGGER.debug("stage %s: %s", stage.name, error)
                    result.error = error
                    result.failed_stage = stage.name
                    break
                result.completed.append(stage.name)
                LOGGER.debug("stage %s: done", stage.name)
        finally:
            self._run_cleanup(context, result)
        return result

    def _run_cleanup(self, context: PipelineContext, result: PipelineResult) -> None:
        name = self._cleanup.name
        LOGGER.debug("stage %s: start", name)
        try:
            self._cleanup(context)
        except SyncError as error:
            result.cleanup_error = error
            if result.error is None:
                result.error = error
                result.failed_stage = name
            else:
                LOGGER.warning("Cleanup failed after earlier error: %s", error)
            return
        result.completed.append(name)
        LOGGER.debug("stage %s: done", name)


__all__ = ["PipelineResult", "PipelineRunner", "Stage", "StageAction"]
