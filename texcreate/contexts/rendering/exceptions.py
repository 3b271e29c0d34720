"""Custom exceptions for the rendering context."""

from pathlib import Path
from typing import List, Optional, Sequence


class TexCreateError(Exception):
    """Base class for every error raised while configuring or compiling a project."""


class ConfigFileError(TexCreateError):
    """
    Exception raised when the configuration file cannot be read or written.

    Attributes:
        message: Error description
        path: Path of the configuration file
        original_error: The underlying OSError
    """

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        original_error: Optional[OSError] = None,
    ):
        self.message = message
        self.path = path
        self.original_error = original_error

        parts = [message]
        if path is not None:
            parts.append(f"Path: {path}")
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class ConfigParseError(TexCreateError, ValueError):
    """
    Exception raised when configuration text does not match the expected schema.

    Covers malformed TOML, missing or unknown fields, mistyped values and an
    unrecognized ``mode``.

    Attributes:
        message: Error description
        path: Path of the offending file, if it came from disk
        field: Name of the offending field, if the error is field-specific
    """

    def __init__(self, message: str, path: Optional[Path] = None, field: Optional[str] = None):
        self.message = message
        self.path = path
        self.field = field

        parts = [message]
        if field:
            parts.append(f"Field: {field}")
        if path is not None:
            parts.append(f"Path: {path}")

        super().__init__("\n".join(parts))


class CompilerStartError(TexCreateError):
    """
    Exception raised when the compiler process cannot be started.

    Attributes:
        command: The command line that was attempted
        original_error: The underlying OSError (usually FileNotFoundError)
    """

    def __init__(self, command: Sequence[str], original_error: Optional[OSError] = None):
        self.command = list(command)
        self.original_error = original_error

        message = f"Could not start LaTeX compiler '{self.command[0]}'"
        if original_error:
            message += f": {original_error}"
        super().__init__(message)


class CompilerExecutionError(TexCreateError):
    """
    Exception raised when the compiler process exits with a non-zero status.

    Attributes:
        command: The command line that was run
        returncode: Exit status of the compiler (None if it was killed)
        stdout: Captured standard output (Output mode only)
        stderr: Captured standard error (Output mode only)
    """

    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int],
        stdout: Optional[str] = None,
        stderr: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.command = list(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

        if message is None:
            message = f"LaTeX compiler '{self.command[0]}' exited with status {returncode}"
        super().__init__(message)


class CompilerTimeoutError(CompilerExecutionError):
    """Exception raised when the compiler is killed after exceeding its timeout."""

    def __init__(
        self,
        command: Sequence[str],
        timeout: float,
        stdout: Optional[str] = None,
        stderr: Optional[str] = None,
    ):
        self.timeout = timeout
        super().__init__(
            command,
            returncode=None,
            stdout=stdout,
            stderr=stderr,
            message=f"LaTeX compiler '{command[0]}' did not finish within {timeout}s",
        )


class CleanupError(TexCreateError):
    """
    Exception raised when auxiliary compiler output cannot be removed.

    Attributes:
        message: Error description
        paths: Artifacts that were missing or could not be deleted
        original_error: The underlying OSError, if deletion itself failed
    """

    def __init__(
        self,
        message: str,
        paths: Optional[List[Path]] = None,
        original_error: Optional[OSError] = None,
    ):
        self.message = message
        self.paths = paths or []
        self.original_error = original_error

        parts = [message]
        for path in self.paths:
            parts.append(f"  - {path}")
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))
