"""
Logger instances and the multi-sink dispatch engine.
"""

from __future__ import annotations

import sys
import threading
from typing import Any, Callable, NoReturn

import structlog

from .config import LoggerSettings
from .exceptions import FanlogError, RemoteSinkSetupFailed, SetupError
from .formatters import Formatter, LineFormatter, format_log, interpolate, render_values
from .remote import SyslogTransport
from .severity import Severity, label_of
from .sinks import BaseSink, FileSink, RemoteSink, StreamSink

SinkErrorObserver = Callable[[str, int, Exception], None]

_reporting = threading.local()


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get the structured logger fanlog uses for its own diagnostics."""
    return structlog.get_logger(logger=name or "fanlog")


def log_sink_failure(sink_name: str, severity: int, exc: Exception) -> None:
    get_logger("fanlog.core").warning(
        "sink_write_failed",
        sink=sink_name,
        severity=label_of(severity),
        error=str(exc),
    )


class Logger:
    """Fans each log call out to a file, stdout/stderr and syslog.

    Sinks are written in a fixed order: file, then the standard stream, then
    syslog. Each write is isolated; a failing sink is reported to
    ``on_sink_error`` once the fan-out is done, and the remaining sinks still
    receive the line. Lines the observer logs itself are not reported again.
    Calls on one instance are serialized, so lines never interleave.
    """

    def __init__(
        self,
        *,
        file_sink: BaseSink | None = None,
        remote_sink: BaseSink | None = None,
        stream_sink: BaseSink | None = None,
        formatter: Formatter = format_log,
        std_output: bool = True,
        on_sink_error: SinkErrorObserver | None = None,
    ):
        self._file_sink = file_sink
        self._remote_sink = remote_sink
        self._stream_sink = stream_sink or StreamSink()
        self.formatter = formatter
        self.std_output = std_output
        self.on_sink_error = on_sink_error or log_sink_failure
        self._lock = threading.Lock()

    @property
    def has_durable_sink(self) -> bool:
        return self._file_sink is not None

    @property
    def has_remote_sink(self) -> bool:
        return self._remote_sink is not None

    def _sinks(self) -> list[BaseSink]:
        sinks: list[BaseSink] = []
        if self._file_sink is not None:
            sinks.append(self._file_sink)
        if self.std_output:
            sinks.append(self._stream_sink)
        if self._remote_sink is not None:
            sinks.append(self._remote_sink)
        return sinks

    def _report(self, failures: list[tuple[BaseSink, Exception]], severity: int) -> None:
        # an observer that logs through a sink which is still failing must not recurse
        if getattr(_reporting, "active", False):
            return
        _reporting.active = True
        try:
            for sink, exc in failures:
                try:
                    self.on_sink_error(sink.name, severity, exc)
                except Exception:
                    pass  # an observer must not break the call site
        finally:
            _reporting.active = False

    def _write(self, severity: int, line: str) -> None:
        failures: list[tuple[BaseSink, Exception]] = []
        with self._lock:
            for sink in self._sinks():
                try:
                    sink.emit(severity, line)
                except Exception as exc:
                    failures.append((sink, exc))
        # observers run unlocked so they may log through this Logger
        if failures:
            self._report(failures, severity)

    def _print_log(self, apply_formatting: bool, severity: int, values: tuple[Any, ...]) -> None:
        msg = render_values(*values)
        if apply_formatting:
            msg = self.formatter(severity, msg)
        self._write(severity, msg)

    def _print_logf(self, apply_formatting: bool, severity: int, template: str, args: tuple[Any, ...]) -> None:
        if apply_formatting:
            msg = self.formatter(severity, template, *args)
        else:
            msg = interpolate(template, args)
        self._write(severity, msg)

    # -------------------------------------------------------------------------
    # Unformatted output (syslog severity INFO, stdout)
    # -------------------------------------------------------------------------

    def println(self, *values: Any) -> None:
        self._print_log(False, Severity.INFO, values)

    def printf(self, template: str, *args: Any) -> None:
        self._print_logf(False, Severity.INFO, template, args)

    # -------------------------------------------------------------------------
    # Leveled output
    # -------------------------------------------------------------------------

    def log(self, severity: int, *values: Any) -> None:
        self._print_log(True, severity, values)

    def logf(self, severity: int, template: str, *args: Any) -> None:
        self._print_logf(True, severity, template, args)

    def debug(self, *values: Any) -> None:
        self._print_log(True, Severity.DEBUG, values)

    def debugf(self, template: str, *args: Any) -> None:
        self._print_logf(True, Severity.DEBUG, template, args)

    def info(self, *values: Any) -> None:
        self._print_log(True, Severity.INFO, values)

    def infof(self, template: str, *args: Any) -> None:
        self._print_logf(True, Severity.INFO, template, args)

    def notice(self, *values: Any) -> None:
        self._print_log(True, Severity.NOTICE, values)

    def noticef(self, template: str, *args: Any) -> None:
        self._print_logf(True, Severity.NOTICE, template, args)

    def warn(self, *values: Any) -> None:
        self._print_log(True, Severity.WARNING, values)

    def warnf(self, template: str, *args: Any) -> None:
        self._print_logf(True, Severity.WARNING, template, args)

    def error(self, *values: Any) -> None:
        self._print_log(True, Severity.ERROR, values)

    def errorf(self, template: str, *args: Any) -> None:
        self._print_logf(True, Severity.ERROR, template, args)

    def critical(self, *values: Any) -> None:
        self._print_log(True, Severity.CRITICAL, values)

    def criticalf(self, template: str, *args: Any) -> None:
        self._print_logf(True, Severity.CRITICAL, template, args)

    def alert(self, *values: Any) -> None:
        self._print_log(True, Severity.ALERT, values)

    def alertf(self, template: str, *args: Any) -> None:
        self._print_logf(True, Severity.ALERT, template, args)

    def emergency(self, *values: Any) -> None:
        self._print_log(True, Severity.EMERGENCY, values)

    def emergencyf(self, template: str, *args: Any) -> None:
        self._print_logf(True, Severity.EMERGENCY, template, args)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close the file and syslog sinks. Later calls only reach the std streams."""
        with self._lock:
            for sink in (self._file_sink, self._remote_sink):
                if sink is None:
                    continue
                try:
                    sink.close()
                except Exception as exc:
                    get_logger("fanlog.core").warning("sink_close_failed", sink=sink.name, error=str(exc))
            self._file_sink = None
            self._remote_sink = None

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


# =============================================================================
# Construction
# =============================================================================


def _connect_remote(app_name: str, mask: int, address: str | None) -> RemoteSink:
    try:
        transport = SyslogTransport.connect(mask, app_name, address)
    except (OSError, ValueError) as exc:
        raise RemoteSinkSetupFailed(app_name=app_name, reason=str(exc)) from exc
    return RemoteSink(transport)


def new_logger(
    app_name: str,
    file_path: str = "",
    enable_syslog: bool = False,
    syslog_mask: int = 0,
    *,
    syslog_address: str | None = None,
    std_output: bool = True,
    formatter: Formatter = format_log,
    on_sink_error: SinkErrorObserver | None = None,
) -> Logger:
    """
    Build a Logger.

    Args:
        app_name: Syslog ident
        file_path: Log file to append to; empty means no file sink
        enable_syslog: Connect to the system log
        syslog_mask: facility|severity priority, 0 for INFO|SYSLOG
        syslog_address: Socket path or host:port, None for the local default
        std_output: Write lines to stdout/stderr
        formatter: Line formatter for this Logger only
        on_sink_error: Observer for per-call sink failures

    Raises:
        RemoteSinkSetupFailed, InvalidLogDirectory, DirectoryStatFailed,
        LogFileOpenFailed
    """
    remote_sink = None
    if enable_syslog:
        remote_sink = _connect_remote(app_name, syslog_mask, syslog_address)

    file_sink = None
    if file_path:
        try:
            file_sink = FileSink(file_path)
        except SetupError:
            if remote_sink is not None:
                remote_sink.close()
            raise

    return Logger(
        file_sink=file_sink,
        remote_sink=remote_sink,
        formatter=formatter,
        std_output=std_output,
        on_sink_error=on_sink_error,
    )


def exit_with_error(exc: FanlogError) -> NoReturn:
    print(exc, file=sys.stderr)
    sys.exit(1)


def new_logger_or_fatal(
    app_name: str,
    file_path: str = "",
    enable_syslog: bool = False,
    syslog_mask: int = 0,
    **kwargs: Any,
) -> Logger:
    """Like ``new_logger`` but exits the process with status 1 on failure."""
    try:
        return new_logger(app_name, file_path, enable_syslog, syslog_mask, **kwargs)
    except FanlogError as exc:
        exit_with_error(exc)


def new_logger_from_settings(settings: LoggerSettings | None = None, **kwargs: Any) -> Logger:
    """Build a Logger from ``LoggerSettings`` (loaded from the environment if omitted)."""
    settings = settings or LoggerSettings()
    kwargs.setdefault(
        "formatter",
        LineFormatter(
            timestamp_format=settings.timestamp_format,
            level_width=settings.level_width,
            separator=settings.separator,
        ),
    )
    return new_logger(
        settings.app_name,
        settings.file_path,
        settings.enable_syslog,
        settings.syslog_mask,
        syslog_address=settings.syslog_address,
        std_output=settings.std_output,
        **kwargs,
    )
