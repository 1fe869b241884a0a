"""Exception types raised by backup operations."""

import subprocess
from collections.abc import Iterable


class BackupError(Exception):
    """
    Base class for all errors raised by n8n-git-backup operations.

    Args:
        message: Human readable description of the failure.
        hints: Remediation steps shown to the operator, one per line.
    """

    def __init__(self, message: str, hints: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.hints = tuple(hints)


class PrerequisiteMissing(BackupError):
    """A required external command is not available in PATH."""


class InvalidInvocation(BackupError):
    """Options were missing or combined in an unsupported way."""


class PreconditionFailed(BackupError):
    """A directory, repository or file required by the operation is missing."""


class CommandFailed(BackupError):
    """
    An external command exited with a non-zero status.

    Args:
        message: Description of the step that failed.
        error: The underlying CalledProcessError, if any.
        hints: Remediation steps shown to the operator.
    """

    def __init__(
        self,
        message: str,
        error: subprocess.CalledProcessError | None = None,
        hints: Iterable[str] = (),
    ) -> None:
        super().__init__(message, hints)
        self.error = error
        self.returncode = error.returncode if error is not None else None


class OperationCancelled(BackupError):
    """The operator declined a confirmation prompt. Not a failure."""
