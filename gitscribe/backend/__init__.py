"""Text-generation backends for gitscribe.

The hook talks to a backend through the narrow ``TextGenerationBackend``
interface; the default implementation runs a command configured under
``backend.command`` with the prompt on stdin.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from gitscribe.backend.base import BackendResult, TextGenerationBackend
from gitscribe.backend.command import CommandBackend
from gitscribe.backend.exceptions import (
    BackendError,
    BackendInvocationFailure,
    BackendTimeout,
    BackendUnavailable,
    NoCommitBlockFound,
)
from gitscribe.backend.parsing import head_lines, parse_commit_message
from gitscribe.validation import HookSettings


def get_backend(settings: HookSettings, repo_root: Optional[Path] = None) -> TextGenerationBackend:
    """Build the backend described by the settings.

    Variables from a repository-level .env file are loaded into the
    environment first so the backend process inherits API keys. Variables
    already set are not overridden.

    Args:
        settings: The validated hook settings.
        repo_root: The repository root (optional).

    Returns:
        A command backend.
    """
    if repo_root is not None:
        env_file = Path(repo_root) / ".env"
        if env_file.is_file():
            load_dotenv(env_file)

    return CommandBackend(settings.backend_command, timeout=settings.backend_timeout)


def generate_commit_message(backend: TextGenerationBackend, prompt: str) -> str:
    """Run the backend on a prompt and extract the commit message.

    Args:
        backend: The backend to call.
        prompt: The rendered prompt.

    Returns:
        The commit message.

    Raises:
        BackendUnavailable: If the backend cannot be started.
        BackendTimeout: If the backend does not answer in time.
        BackendInvocationFailure: If it exits non-zero or prints nothing.
        NoCommitBlockFound: If its output holds no usable fenced block.
    """
    result = backend.invoke(prompt)

    if not result.succeeded:
        if result.exit_code != 0:
            reason = f"Backend exited with code {result.exit_code}"
        else:
            reason = "Backend produced no output"
        raise BackendInvocationFailure(reason, output=result.output, exit_code=result.exit_code)

    return parse_commit_message(result.output)


__all__ = [
    "BackendResult",
    "TextGenerationBackend",
    "CommandBackend",
    "BackendError",
    "BackendInvocationFailure",
    "BackendTimeout",
    "BackendUnavailable",
    "NoCommitBlockFound",
    "head_lines",
    "parse_commit_message",
    "get_backend",
    "generate_commit_message",
]
