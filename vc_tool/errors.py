"""Error types raised by the vc dispatcher.

Every failure surfaces as a ``VcError`` subclass so the CLI can render it
once and exit with the matching status code.
"""

from __future__ import annotations

from typing import Optional

EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_VALIDATION = 2
EXIT_SYSTEM = 3
EXIT_EXECUTION = 4


class VcError(Exception):
    """Base error with a user-facing message and optional details."""

    exit_code = EXIT_USAGE

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class UsageError(VcError):
    """Wrong argument count or unsupported action."""

    exit_code = EXIT_USAGE


class ValidationError(VcError):
    """Parameter is malformed or semantically invalid."""

    exit_code = EXIT_VALIDATION


class BoundsError(ValidationError):
    """Crop rectangle does not fit inside the probed video frame."""

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        *,
        max_width: Optional[int] = None,
        max_height: Optional[int] = None,
    ):
        super().__init__(message, details)
        self.max_width = max_width
        self.max_height = max_height


class ToolUnavailableError(VcError):
    """ffmpeg or ffprobe is not installed or not reachable."""

    exit_code = EXIT_SYSTEM


class ProbeError(VcError):
    """ffprobe ran but did not report usable stream metadata."""

    exit_code = EXIT_SYSTEM


class ProbeUnavailableError(ProbeError, ToolUnavailableError):
    """ffprobe itself could not be started."""


class ExternalFailure(VcError):
    """ffmpeg exited with a non-zero status."""

    exit_code = EXIT_EXECUTION

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        *,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ):
        super().__init__(message, details)
        self.returncode = returncode
        self.stderr = stderr
