"""
Process-wide default Logger and the free functions that forward to it.

Lifecycle: uninitialized -> installed. Until a Logger is installed, the free
functions write through a stream-only fallback (no file, no syslog).
"""

from __future__ import annotations

import copy
import threading
from typing import Any

from .core import Logger, exit_with_error, new_logger
from .exceptions import FanlogError


class DefaultLoggerProvider:
    """Holds the default Logger behind a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._logger: Logger | None = None
        self._owned = False
        self._fallback: Logger | None = None

    @property
    def installed(self) -> bool:
        return self._logger is not None

    def install(self, logger: Logger, *, owned: bool = False) -> Logger | None:
        """Install a copy of ``logger``; its sinks are shared, not duplicated.

        Returns the default being replaced when the provider owned it, so the
        caller can close it. A default installed with ``owned=False`` belongs
        to whoever built it and is never handed back for closing.
        """
        with self._lock:
            previous = self._logger if self._owned else None
            self._logger = copy.copy(logger)
            self._owned = owned
        return previous

    def get(self) -> Logger:
        with self._lock:
            if self._logger is not None:
                return self._logger
            if self._fallback is None:
                self._fallback = Logger()
            return self._fallback

    def reset(self) -> None:
        """Return to the uninitialized state without closing anything."""
        with self._lock:
            self._logger = None
            self._owned = False
            self._fallback = None


_provider = DefaultLoggerProvider()


def get_provider() -> DefaultLoggerProvider:
    return _provider


def install_default(logger: Logger) -> None:
    previous = _provider.install(logger)
    if previous is not None:
        previous.close()


def get_default() -> Logger:
    return _provider.get()


def new_global_logger(
    app_name: str,
    file_path: str = "",
    enable_syslog: bool = False,
    syslog_mask: int = 0,
    **kwargs: Any,
) -> None:
    """Build a Logger with ``new_logger`` and install it as the default.

    A default previously built by this function is closed once replaced.
    """
    logger = new_logger(app_name, file_path, enable_syslog, syslog_mask, **kwargs)
    previous = _provider.install(logger, owned=True)
    if previous is not None:
        previous.close()


def new_global_logger_or_fatal(
    app_name: str,
    file_path: str = "",
    enable_syslog: bool = False,
    syslog_mask: int = 0,
    **kwargs: Any,
) -> None:
    try:
        new_global_logger(app_name, file_path, enable_syslog, syslog_mask, **kwargs)
    except FanlogError as exc:
        exit_with_error(exc)


# =============================================================================
# Forwarding functions
# =============================================================================


def println(*values: Any) -> None:
    _provider.get().println(*values)


def printf(template: str, *args: Any) -> None:
    _provider.get().printf(template, *args)


def log(severity: int, *values: Any) -> None:
    _provider.get().log(severity, *values)


def logf(severity: int, template: str, *args: Any) -> None:
    _provider.get().logf(severity, template, *args)


def debug(*values: Any) -> None:
    _provider.get().debug(*values)


def debugf(template: str, *args: Any) -> None:
    _provider.get().debugf(template, *args)


def info(*values: Any) -> None:
    _provider.get().info(*values)


def infof(template: str, *args: Any) -> None:
    _provider.get().infof(template, *args)


def notice(*values: Any) -> None:
    _provider.get().notice(*values)


def noticef(template: str, *args: Any) -> None:
    _provider.get().noticef(template, *args)


def warn(*values: Any) -> None:
    _provider.get().warn(*values)


def warnf(template: str, *args: Any) -> None:
    _provider.get().warnf(template, *args)


def error(*values: Any) -> None:
    _provider.get().error(*values)


def errorf(template: str, *args: Any) -> None:
    _provider.get().errorf(template, *args)


def critical(*values: Any) -> None:
    _provider.get().critical(*values)


def criticalf(template: str, *args: Any) -> None:
    _provider.get().criticalf(template, *args)


def alert(*values: Any) -> None:
    _provider.get().alert(*values)


def alertf(template: str, *args: Any) -> None:
    _provider.get().alertf(template, *args)


def emergency(*values: Any) -> None:
    _provider.get().emergency(*values)


def emergencyf(template: str, *args: Any) -> None:
    _provider.get().emergencyf(template, *args)
