"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import os
import stat
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Protocol, TextIO

from .exceptions import DirectoryStatFailed, InvalidLogDirectory, LogFileOpenFailed
from .severity import Severity

LOG_FILE_MODE = 0o644


class RemoteTransport(Protocol):
    """What the remote sink needs from a syslog-like transport."""

    def debug(self, msg: str) -> Any: ...
    def info(self, msg: str) -> Any: ...
    def notice(self, msg: str) -> Any: ...
    def warning(self, msg: str) -> Any: ...
    def err(self, msg: str) -> Any: ...
    def crit(self, msg: str) -> Any: ...
    def alert(self, msg: str) -> Any: ...
    def emerg(self, msg: str) -> Any: ...
    def close(self) -> None: ...


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    name: str = "sink"

    @abstractmethod
    def emit(self, severity: int, line: str) -> None:
        """Write one rendered line to the sink."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...


def check_file_dir(path: str | Path) -> None:
    """Ensure the parent directory of ``path`` exists and is a directory."""
    parent = Path(path).parent
    try:
        info = os.stat(parent)
    except FileNotFoundError as exc:
        raise InvalidLogDirectory(directory=str(parent), reason="missing") from exc
    except OSError as exc:
        raise DirectoryStatFailed(directory=str(parent), reason=str(exc)) from exc

    if not stat.S_ISDIR(info.st_mode):
        raise InvalidLogDirectory(directory=str(parent), reason="not_a_directory")


def _open_with_mode(path: str, flags: int) -> int:
    return os.open(path, flags, LOG_FILE_MODE)


class FileSink(BaseSink):
    """Durable append-only log file.

    The parent directory is never created; it must already exist.
    """

    name = "file"

    def __init__(self, path: str | Path):
        self._path = Path(path)
        check_file_dir(self._path)
        try:
            self._file: TextIO | None = open(self._path, "a", encoding="utf-8", opener=_open_with_mode)
        except OSError as exc:
            raise LogFileOpenFailed(path=str(path), reason=str(exc)) from exc

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._file is None

    def emit(self, severity: int, line: str) -> None:
        if self._file is None:
            return
        self._file.write(line + "\n")
        self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


_STDERR_SEVERITIES = frozenset(
    {Severity.ERROR, Severity.CRITICAL, Severity.ALERT, Severity.EMERGENCY}
)


class StreamSink(BaseSink):
    """Standard output/error sink.

    Error and above go to stderr, everything else to stdout. Streams left as
    ``None`` are looked up on ``sys`` at write time.
    """

    name = "stream"

    def __init__(self, stdout: TextIO | None = None, stderr: TextIO | None = None):
        self._stdout = stdout
        self._stderr = stderr

    def stream_for(self, severity: int) -> TextIO:
        if severity in _STDERR_SEVERITIES:
            return self._stderr or sys.stderr
        return self._stdout or sys.stdout

    def emit(self, severity: int, line: str) -> None:
        stream = self.stream_for(severity)
        stream.write(line + "\n")
        stream.flush()

    def close(self) -> None:
        pass


_REMOTE_METHODS: dict[Severity, str] = {
    Severity.DEBUG: "debug",
    Severity.INFO: "info",
    Severity.WARNING: "warning",
    Severity.NOTICE: "notice",
    Severity.ERROR: "err",
    Severity.CRITICAL: "crit",
    Severity.EMERGENCY: "emerg",
    Severity.ALERT: "alert",
}


class RemoteSink(BaseSink):
    """Routes lines to the transport method matching their severity.

    Unrecognized severities use the transport's ``info`` method. Filtering by
    priority mask is the transport's business, not this sink's.
    """

    name = "syslog"

    def __init__(self, transport: RemoteTransport):
        self._transport: RemoteTransport | None = transport
        self._writers: dict[int, Callable[[str], Any]] = {
            severity: getattr(transport, method) for severity, method in _REMOTE_METHODS.items()
        }
        self._fallback: Callable[[str], Any] = transport.info

    @property
    def transport(self) -> RemoteTransport | None:
        return self._transport

    def emit(self, severity: int, line: str) -> None:
        if self._transport is None:
            return
        self._writers.get(severity, self._fallback)(line)

    def close(self) -> None:
        if self._transport is not None:
            self._transport.close()
            self._transport = None
