"""Diagnostic output for the hook.

Everything goes to stderr: git shows it to the user while the commit runs, and
stdout stays clean for commands that print data (``gitscribe config show``).
"""

import typer

PREFIX = "gitscribe:"


def info(message: str) -> None:
    """Print an informational line."""
    typer.echo(f"{PREFIX} {message}", err=True)


def warn(message: str) -> None:
    """Print a warning line."""
    typer.secho(f"{PREFIX} warning: {message}", err=True, fg=typer.colors.YELLOW)


def error(message: str) -> None:
    """Print an error line."""
    typer.secho(f"{PREFIX} error: {message}", err=True, fg=typer.colors.RED)


def detail(text: str, indent: str = "  ") -> None:
    """Print a block of raw text (e.g. backend output), indented."""
    for line in text.splitlines():
        typer.echo(f"{indent}{line}", err=True)
