"""External collaborators: command execution, Gerrit queries, git and workspaces."""

from .commands import CommandResult, CommandRunner, SubprocessRunner
from .gerrit import GerritClient, parse_change, parse_query_rows
from .vcs import GitError, GitWorkspace, change_refspec
from .workspace import (
    WORKSPACE_PREFIX,
    is_run_workspace,
    remove_workspace,
    run_workspace,
    workspace_path,
)

__all__ = [
    "CommandResult",
    "CommandRunner",
    "GerritClient",
    "GitError",
    "GitWorkspace",
    "SubprocessRunner",
    "WORKSPACE_PREFIX",
    "change_refspec",
    "is_run_workspace",
    "parse_change",
    "parse_query_rows",
    "remove_workspace",
    "run_workspace",
    "workspace_path",
]
