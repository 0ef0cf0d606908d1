"""
Error variants raised by tapecut.

Every error carries an ErrorKind tag plus the payload needed to diagnose it.
"""

import enum
from pathlib import Path
from typing import Optional


class ErrorKind(enum.Enum):
    FILE_EXISTS = "file_exists"
    EMPTY_FRAGMENT = "empty_fragment"
    OUT_OF_DURATION = "out_of_duration"
    COMMAND_FAILED = "command_failed"
    UNKNOWN_FORMAT = "unknown_format"
    MISSING_DEPENDENCY = "missing_dependency"
    CANCELLED = "cancelled"


class TapecutError(Exception):
    """Base error for tapecut."""

    kind: ErrorKind


class FileExists(TapecutError):
    """Raised when the render destination exists and overwrite was not requested."""

    kind = ErrorKind.FILE_EXISTS

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(f"Destination already exists: {self.path}")


class EmptyFragment(TapecutError):
    """Raised when an operation needs at least one fragment."""

    kind = ErrorKind.EMPTY_FRAGMENT

    def __init__(self, message: str = "Timeline has no fragments"):
        super().__init__(message)


class OutOfDuration(TapecutError):
    """Raised when a requested range exceeds the timeline."""

    kind = ErrorKind.OUT_OF_DURATION

    def __init__(self, requested: float, available: float):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Requested range ends at {requested}s but timeline is {available}s long"
        )


class CommandFailed(TapecutError):
    """Raised when an external command exits non-zero."""

    kind = ErrorKind.COMMAND_FAILED

    def __init__(self, command: str, returncode: Optional[int] = None, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(command)


class UnknownFormat(TapecutError):
    """Raised when a sound file has an unsupported extension."""

    kind = ErrorKind.UNKNOWN_FORMAT

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(f"Unsupported audio format: {self.path}")


class MissingDependency(TapecutError):
    """Raised when a required external tool is not on PATH."""

    kind = ErrorKind.MISSING_DEPENDENCY

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"Required tool not found on PATH: {tool}")


class RenderCancelled(TapecutError):
    """Raised when a render is cancelled while a command is running."""

    kind = ErrorKind.CANCELLED

    def __init__(self, command: Optional[str] = None):
        self.command = command
        super().__init__(f"Render cancelled during: {command}" if command else "Render cancelled")
