"""Shared error codes and exceptions for the counting engine and CLI."""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Sequence


class ErrorCode(str, Enum):
    USAGE_ERROR = "USAGE_ERROR"
    PATH_ERROR = "PATH_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"
    IO_ERROR = "IO_ERROR"
    STATE_ERROR = "STATE_ERROR"


class LineCountError(RuntimeError):
    """Exception carrying a structured error code for the CLI."""

    def __init__(self, code: ErrorCode, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        base = super().__str__()
        return f"[{self.code.value}] {base}" if base else self.code.value


class UsageError(LineCountError):
    """Raised when the command line does not name a directory to count."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.USAGE_ERROR, message)


class PathError(LineCountError):
    """Raised when the target path is missing or is not a directory."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(ErrorCode.PATH_ERROR, message, context={"path": str(path)})
        self.path = path


class FileCountError(LineCountError):
    """A single file could not be opened or read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(
            ErrorCode.IO_ERROR,
            f"Cannot count lines in {path}: {reason}",
            context={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class CountAbortedError(LineCountError):
    """Raised after the fan-in barrier when fail-fast runs saw failed files."""

    def __init__(self, failures: Sequence[FileCountError]) -> None:
        paths = [str(failure.path) for failure in failures]
        first = failures[0] if failures else None
        detail = f"{first.path}: {first.reason}" if first else "unknown file"
        more = f" (+{len(failures) - 1} more)" if len(failures) > 1 else ""
        super().__init__(
            ErrorCode.IO_ERROR,
            f"Counting aborted, unreadable file {detail}{more}",
            context={"failures": paths},
        )
        self.failures = list(failures)
