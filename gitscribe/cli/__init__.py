"""CLI entry point for gitscribe.

The `hook` command git runs from prepare-commit-msg, and the `config`
group for inspecting the effective configuration.
"""

from typing import Optional

import typer

from gitscribe import __version__
from gitscribe.cli.config import config_app
from gitscribe.cli.hook import hook_command

# Main application
app = typer.Typer(
    name="gitscribe",
    help="gitscribe: AI-generated commit messages from a git hook",
    add_completion=False,
    no_args_is_help=True,
)

app.add_typer(config_app, name="config")
app.command("hook")(hook_command)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gitscribe {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """gitscribe: AI-generated commit messages from a git hook."""


__all__ = ["app", "config_app", "hook_command", "main"]
