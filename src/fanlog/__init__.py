"""
fanlog: leveled logging fanned out to multiple sinks.

One call such as ``logger.warn("disk low")`` is rendered once and written to:
- file: an append-only local log file (optional)
- stream: stdout for DEBUG..WARNING, stderr for ERROR..EMERGENCY
- syslog: the system log, at the matching severity (optional)

Design Pattern: Strategy Pattern for sink abstraction.
Library: structlog for fanlog's own diagnostics, pydantic-settings for config.
"""

from .core import Logger, get_logger, new_logger, new_logger_from_settings, new_logger_or_fatal
from .default import (
    DefaultLoggerProvider,
    alert,
    alertf,
    critical,
    criticalf,
    debug,
    debugf,
    emergency,
    emergencyf,
    error,
    errorf,
    get_default,
    get_provider,
    info,
    infof,
    install_default,
    log,
    logf,
    new_global_logger,
    new_global_logger_or_fatal,
    notice,
    noticef,
    printf,
    println,
    warn,
    warnf,
)
from .exceptions import (
    DirectoryStatFailed,
    FanlogError,
    InvalidLogDirectory,
    LogFileOpenFailed,
    RemoteSinkSetupFailed,
    SetupError,
)
from .formatters import LineFormatter, format_log
from .severity import DEFAULT_SYSLOG_MASK, Facility, Severity, label_of

__all__ = [
    "Logger",
    "get_logger",
    "new_logger",
    "new_logger_or_fatal",
    "new_logger_from_settings",
    "DefaultLoggerProvider",
    "get_default",
    "get_provider",
    "install_default",
    "new_global_logger",
    "new_global_logger_or_fatal",
    "println",
    "printf",
    "log",
    "logf",
    "debug",
    "debugf",
    "info",
    "infof",
    "notice",
    "noticef",
    "warn",
    "warnf",
    "error",
    "errorf",
    "critical",
    "criticalf",
    "alert",
    "alertf",
    "emergency",
    "emergencyf",
    "FanlogError",
    "SetupError",
    "RemoteSinkSetupFailed",
    "InvalidLogDirectory",
    "DirectoryStatFailed",
    "LogFileOpenFailed",
    "LineFormatter",
    "format_log",
    "Severity",
    "Facility",
    "DEFAULT_SYSLOG_MASK",
    "label_of",
]
