"""CLI commands for inspecting the effective configuration."""

import typer
import yaml

from gitscribe.config import ConfigError, get_global_config_path, get_local_config_path, load_config
from gitscribe.git import GitError, get_repo_root
from gitscribe.validation import validate_config

# Subcommand group for configuration inspection
config_app = typer.Typer(
    name="config",
    help="Inspect the merged gitscribe configuration",
    add_completion=False,
)


def _repo_root_or_none():
    try:
        return get_repo_root()
    except GitError:
        return None


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration (global merged with repository)."""
    repo_root = _repo_root_or_none()
    try:
        config = load_config(repo_root)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"# global: {get_global_config_path()}")
    if repo_root is not None:
        typer.echo(f"# local:  {get_local_config_path(repo_root)}")
    typer.echo(
        yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False, allow_unicode=True),
        nl=False,
    )


@config_app.command("validate")
def config_validate() -> None:
    """Check that the effective configuration is usable by the hook."""
    try:
        settings = validate_config(load_config(_repo_root_or_none()))
    except ConfigError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("Configuration OK")
    typer.echo(f"  Backend: {' '.join(settings.backend_command)} (timeout {settings.backend_timeout}s)")
    if settings.file_ignore_patterns:
        typer.echo(f"  Ignored files: {', '.join(settings.file_ignore_patterns)}")
    if not settings.enabled:
        typer.echo("  Hook is disabled (enabled: false)")
