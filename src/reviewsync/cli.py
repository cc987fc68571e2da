"""CLI entry point: rewrite a change's approval lines and push a new patchset."""

from __future__ import annotations

import copy
import getpass
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
import yaml

from .context import PipelineContext, SyncSettings
from .errors import ExternalCommandError, OperatorAbort, SyncStopped
from .interaction import Prompter, TyperPrompter, TyperReporter
from .pipeline import PipelineResult
from .stages import build_pipeline
from .tools.commands import CommandRunner, SubprocessRunner
from .tools.gerrit import DEFAULT_PORT, GerritClient
from .tools.workspace import run_workspace, workspace_path

APP_HELP = "Synchronize a Gerrit change's commit message with its approvals."
DEFAULT_CONFIG_NAME = "reviewsync.yaml"

DEFAULT_CONFIG_TEMPLATE: Dict[str, Any] = {
    "gerrit": {
        "host": "",
        "port": DEFAULT_PORT,
        "user": "",
        "remote": "origin",
    },
    "workspace": {
        "base": "",
    },
}

LOGGER = logging.getLogger(__name__)

app = typer.Typer(help=APP_HELP)


def _copy_config_template() -> Dict[str, Any]:
    """Return a deep copy of the default configuration template."""
    return copy.deepcopy(DEFAULT_CONFIG_TEMPLATE)


def load_config(config_path: Path, *, required: bool = True) -> Dict[str, Any]:
    """Load YAML configuration and merge it over the default template."""
    config = _copy_config_template()
    if not config_path.exists():
        if required:
            raise typer.BadParameter(f"Config file not found: {config_path}")
        return config

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        typer.echo(f"Failed to parse config: {error}", err=True)
        raise typer.Exit(code=1) from error

    if not isinstance(data, dict):
        typer.echo("Configuration must be a mapping at the top level.", err=True)
        raise typer.Exit(code=1)

    for section, values in data.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    return config


def _default_user() -> Optional[str]:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return None


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def resolve_settings(
    config: Dict[str, Any],
    *,
    change_id: str,
    host: Optional[str] = None,
    port: Optional[int] = None,
    user: Optional[str] = None,
    dry_run: bool = False,
) -> SyncSettings:
    """Combine configuration values and CLI overrides into run settings."""
    gerrit_cfg = config.get("gerrit") or {}
    workspace_cfg = config.get("workspace") or {}

    host_value = _text(host) or _text(gerrit_cfg.get("host"))
    if not host_value:
        raise typer.BadParameter(
            "A Gerrit host is required. Provide --host or set gerrit.host in the config.",
            param_hint="--host",
        )

    port_value = port if port is not None else gerrit_cfg.get("port", DEFAULT_PORT)
    try:
        port_number = int(port_value)
    except (TypeError, ValueError) as error:
        raise typer.BadParameter(f"Invalid port: {port_value!r}", param_hint="--port") from error

    user_value = _text(user) or _text(gerrit_cfg.get("user")) or _default_user()
    base_value = _text(workspace_cfg.get("base")) or None
    workdir = workspace_path(base_value)

    settings = SyncSettings(
        host=host_value,
        change_id=change_id,
        workdir=workdir,
        user=user_value,
        port=port_number,
        remote=_text(gerrit_cfg.get("remote")) or "origin",
        dry_run=dry_run,
    )
    return settings


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_runner() -> CommandRunner:
    return SubprocessRunner()


def _build_prompter() -> Prompter:
    return TyperPrompter()


def _render_result(result: PipelineResult, context: PipelineContext) -> None:
    """Translate the pipeline outcome into output and an exit code."""
    if result.cleanup_error is not None and result.error is not result.cleanup_error:
        typer.echo(f"Warning: cleanup failed: {result.cleanup_error}", err=True)

    error = result.error
    if error is None:
        number = context.change.number if context.change else context.settings.change_id
        typer.echo(f"Change {number} updated with {len(context.approvals or [])} approval(s).")
        return

    if isinstance(error, OperatorAbort):
        typer.echo(str(error), err=True)
        raise typer.Exit(code=1)
    if isinstance(error, SyncStopped):
        typer.echo(str(error))
        return
    if isinstance(error, ExternalCommandError):
        typer.echo(f"Error in stage {result.failed_stage}: {error}", err=True)
        if error.command:
            typer.echo(f"Command: {' '.join(error.command)}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Error in stage {result.failed_stage}: {error}", err=True)
    raise typer.Exit(code=1)


@app.command()
def sync(
    change: str = typer.Argument(..., help="Change number or Change-Id to synchronize."),
    user: Optional[str] = typer.Option(
        None,
        "--user",
        "-u",
        help="Gerrit account to connect as (defaults to the config or the login name).",
    ),
    host: Optional[str] = typer.Option(
        None,
        "--host",
        help="Gerrit ssh host (overrides gerrit.host).",
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port",
        "-p",
        help="Gerrit ssh port (overrides gerrit.port).",
    ),
    config: str = typer.Option(
        DEFAULT_CONFIG_NAME,
        "--config",
        "-c",
        help="Path to the configuration file.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show the new commit message without pushing anything.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging.",
    ),
) -> None:
    """Rewrite the approval lines of CHANGE and push it as a new patchset."""
    _configure_logging(verbose)
    config_path = Path(config)
    config_data = load_config(config_path, required=config != DEFAULT_CONFIG_NAME)

    settings = resolve_settings(
        config_data,
        change_id=change,
        host=host,
        port=port,
        user=user,
        dry_run=dry_run,
    )
    LOGGER.debug("working directory %s", settings.workdir)

    runner = _build_runner()
    gerrit = GerritClient(settings.host, runner=runner, port=settings.port, user=settings.user)
    pipeline = build_pipeline(
        gerrit=gerrit,
        runner=runner,
        reporter=TyperReporter(),
        prompter=_build_prompter(),
        expected_workdir=run_workspace(),
    )
    context = PipelineContext(settings=settings)
    result = pipeline.run(context)
    _render_result(result, context)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
