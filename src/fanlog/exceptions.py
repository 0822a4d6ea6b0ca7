"""
Exception hierarchy for logger construction.

Only setup is allowed to fail loudly. Steady-state sink failures are never
raised to the call site; see ``Logger.on_sink_error``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class FanlogError(Exception):
    """Root of all fanlog errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class SetupError(FanlogError):
    """A Logger could not be constructed."""

    pass


class RemoteSinkSetupFailed(SetupError):
    """The syslog transport could not be connected."""

    def __init__(self, *, app_name: str, reason: str) -> None:
        super().__init__(
            f"syslog setup for app={app_name} failed: {reason}",
            code="REMOTE_SINK_SETUP_FAILED",
            details={"app_name": app_name, "reason": reason},
        )


class InvalidLogDirectory(SetupError):
    """The log file's parent directory is missing or is not a directory."""

    def __init__(self, *, directory: str, reason: str) -> None:
        if reason == "not_a_directory":
            message = f"the path={directory} exists but is not directory"
        else:
            message = f"log file dir={directory} does not exist"
        super().__init__(
            message,
            code="INVALID_LOG_DIRECTORY",
            details={"directory": directory, "reason": reason},
        )


class DirectoryStatFailed(SetupError):
    def __init__(self, *, directory: str, reason: str) -> None:
        super().__init__(
            f"log file dir={directory} stat error: {reason}",
            code="DIRECTORY_STAT_FAILED",
            details={"directory": directory, "reason": reason},
        )


class LogFileOpenFailed(SetupError):
    def __init__(self, *, path: str, reason: str) -> None:
        super().__init__(
            f"log file={path} open error: {reason}",
            code="LOG_FILE_OPEN_FAILED",
            details={"path": path, "reason": reason},
        )
