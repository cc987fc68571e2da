"""Final stage: remove the run's working directory."""

from __future__ import annotations

import logging
from pathlib import Path

from ..context import PipelineContext
from ..tools.workspace import remove_workspace

LOGGER = logging.getLogger(__name__)


def remove_workdir(context: PipelineContext, *, expected: Path) -> None:
    workdir = context.settings.workdir
    if remove_workspace(workdir, expected=expected):
        LOGGER.debug("removed working directory %s", workdir)
    else:
        LOGGER.debug("no working directory to remove at %s", workdir)


__all__ = ["remove_workdir"]
