"""Base classes for text-generation backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class BackendResult:
    """Raw result of one backend call."""

    output: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        """Exit code 0 with non-blank output is the success contract."""
        return self.exit_code == 0 and bool(self.output.strip())


class TextGenerationBackend(ABC):
    """Abstract base class for text-generation backends."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the backend can be invoked at all."""
        pass

    @abstractmethod
    def invoke(self, prompt: str) -> BackendResult:
        """Send a prompt to the backend.

        Args:
            prompt: The rendered prompt.

        Returns:
            The backend's output and exit code, whatever the exit code is.

        Raises:
            BackendUnavailable: If the backend cannot be started.
            BackendTimeout: If the backend does not answer in time.
        """
        pass
