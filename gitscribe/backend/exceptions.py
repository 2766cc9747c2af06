"""Backend-related exception classes.

Contains all exception classes for text-generation backends:
- BackendError: Base exception for backend-related errors
- BackendUnavailable: The backend executable cannot be found
- BackendInvocationFailure: The backend ran but did not succeed
- BackendTimeout: The backend did not finish in time
- NoCommitBlockFound: The backend output holds no fenced commit message
"""


class BackendError(Exception):
    """Base exception for backend-related errors."""

    pass


class BackendUnavailable(BackendError):
    """Raised when the backend executable cannot be located."""

    pass


class BackendInvocationFailure(BackendError):
    """Raised when the backend exits non-zero or produces no output."""

    def __init__(self, message: str, output: str = "", exit_code: int | None = None):
        super().__init__(message)
        self.output = output
        self.exit_code = exit_code


class BackendTimeout(BackendInvocationFailure):
    """Raised when the backend exceeds its timeout."""

    pass


class NoCommitBlockFound(BackendError):
    """Raised when the backend output contains no usable fenced block."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw
