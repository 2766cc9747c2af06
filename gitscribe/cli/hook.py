"""CLI command run by git as the prepare-commit-msg hook."""

from pathlib import Path
from typing import Optional

import typer

from gitscribe.hook import run_hook


def hook_command(
    message_file: Path = typer.Argument(
        ...,
        help="Commit message file passed in by git",
    ),
    source: Optional[str] = typer.Argument(
        None,
        help="Source of the commit message (message, template, merge, squash, commit)",
    ),
    commit_sha: Optional[str] = typer.Argument(
        None,
        help="Commit SHA (only for amend and -c/-C); ignored",
    ),
) -> None:
    """Generate a commit message from the staged diff (prepare-commit-msg)."""
    exit_code = run_hook(message_file, source)
    raise typer.Exit(exit_code)
