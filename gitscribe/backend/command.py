"""Backend that runs an external command with the prompt on stdin."""

import shutil
import subprocess
from typing import Sequence

from gitscribe.backend.base import BackendResult, TextGenerationBackend
from gitscribe.backend.exceptions import BackendTimeout, BackendUnavailable


class CommandBackend(TextGenerationBackend):
    """Pipe the prompt into a command and capture stdout and stderr together."""

    def __init__(self, command: Sequence[str], timeout: float | None = None):
        if not command:
            raise ValueError("command cannot be empty")
        self.command = list(command)
        self.timeout = timeout

    @property
    def executable(self) -> str:
        return self.command[0]

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def invoke(self, prompt: str) -> BackendResult:
        try:
            result = subprocess.run(
                self.command,
                input=prompt,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise BackendUnavailable(f"Backend command not found: {self.executable}")
        except subprocess.TimeoutExpired as e:
            partial = e.output or ""
            if isinstance(partial, bytes):
                partial = partial.decode("utf-8", errors="replace")
            raise BackendTimeout(
                f"Backend did not finish within {self.timeout}s: {' '.join(self.command)}",
                output=partial,
            )

        return BackendResult(output=result.stdout or "", exit_code=result.returncode)

    def __repr__(self) -> str:
        return f"CommandBackend(command={self.command!r}, timeout={self.timeout!r})"
