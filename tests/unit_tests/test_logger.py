import io
import re
import threading
from unittest.mock import MagicMock, patch

import pytest

from fanlog.core import Logger, new_logger, new_logger_or_fatal
from fanlog.exceptions import InvalidLogDirectory, LogFileOpenFailed, RemoteSinkSetupFailed
from fanlog.severity import Severity
from fanlog.sinks import BaseSink, FileSink, RemoteSink, StreamSink

DECORATED = re.compile(r"^(?P<level>.{7}) \| .+? \| \d{2}/\d{2}/\d{4} \d{2}:\d{2}:\d{2}\.\d{3} \| (?P<msg>.*)$")


class OrderedSink(BaseSink):
    """Appends (sink name, line) to a shared journal."""

    def __init__(self, name, journal, fail=False):
        self.name = name
        self._journal = journal
        self._fail = fail

    def emit(self, severity, line):
        if self._fail:
            raise OSError(f"{self.name} is broken")
        self._journal.append((self.name, line))

    def close(self):
        pass


def build(log_path, transport, **kwargs) -> Logger:
    return Logger(file_sink=FileSink(log_path), remote_sink=RemoteSink(transport), **kwargs)


class TestDispatch:
    def test_warn_reaches_all_sinks(self, log_path, transport, capsys) -> None:
        logger = build(log_path, transport)
        logger.warn("disk low")

        file_lines = log_path.read_text().splitlines()
        assert len(file_lines) == 1
        match = DECORATED.match(file_lines[0])
        assert match.group("level") == "WARNING"
        assert match.group("msg") == "disk low"

        captured = capsys.readouterr()
        assert captured.out == file_lines[0] + "\n"
        assert captured.err == ""
        assert transport.calls == [("warning", file_lines[0])]

    @pytest.mark.parametrize(
        "method,label,remote,stream",
        [
            ("debug", "DEBUG  ", "debug", "out"),
            ("info", "INFO   ", "info", "out"),
            ("notice", "NOTICE ", "notice", "out"),
            ("warn", "WARNING", "warning", "out"),
            ("error", "ERROR  ", "err", "err"),
            ("critical", "CRIT   ", "crit", "err"),
            ("alert", "ALERT  ", "alert", "err"),
            ("emergency", "EMERG  ", "emerg", "err"),
        ],
    )
    def test_level_routing(self, transport, capsys, method, label, remote, stream) -> None:
        logger = Logger(remote_sink=RemoteSink(transport))
        getattr(logger, method)("a", 1)
        getattr(logger, method + "f")("b=%d", 2)

        captured = capsys.readouterr()
        lines = getattr(captured, stream).splitlines()
        other = captured.err if stream == "out" else captured.out
        assert other == ""
        assert [DECORATED.match(line).group("level", "msg") for line in lines] == [
            (label, "a 1"),
            (label, "b=2"),
        ]
        assert [call[0] for call in transport.calls] == [remote, remote]

    def test_sink_order(self) -> None:
        journal = []
        logger = Logger(
            file_sink=OrderedSink("file", journal),
            stream_sink=OrderedSink("stream", journal),
            remote_sink=OrderedSink("syslog", journal),
        )
        logger.info("x")
        assert [name for name, _ in journal] == ["file", "stream", "syslog"]
        assert len({line for _, line in journal}) == 1

    def test_template_without_args_is_verbatim(self, capsys) -> None:
        Logger().infof("50%d off")
        assert DECORATED.match(capsys.readouterr().out.rstrip("\n")).group("msg") == "50%d off"

    def test_generic_log_with_unknown_severity(self, transport, capsys) -> None:
        logger = Logger(remote_sink=RemoteSink(transport))
        logger.log(12, "odd")
        line = capsys.readouterr().out.rstrip("\n")
        assert line.startswith("UNKNOWN | ")
        assert transport.calls == [("info", line)]

    def test_custom_formatter(self, capsys) -> None:
        logger = Logger(formatter=lambda severity, template, *args: f"[{int(severity)}] {template % args if args else template}")
        logger.errorf("code=%d", 7)
        assert capsys.readouterr().err == "[3] code=7\n"


class TestUnformatted:
    def test_printf_is_undecorated(self, capsys) -> None:
        logger = new_logger("svc", "")
        logger.printf("n=%d", 3)
        captured = capsys.readouterr()
        assert captured.out == "n=3\n"
        assert captured.err == ""

    def test_println_joins_values(self, log_path, transport, capsys) -> None:
        logger = build(log_path, transport)
        logger.println("instance2", "println")
        assert capsys.readouterr().out == "instance2 println\n"
        assert log_path.read_text() == "instance2 println\n"
        assert transport.calls == [("info", "instance2 println")]

    def test_printf_without_args_keeps_percent(self, capsys) -> None:
        Logger().printf("100%")
        assert capsys.readouterr().out == "100%\n"


class TestFailureIsolation:
    def test_failing_file_sink_does_not_block_others(self, transport) -> None:
        journal = []
        observed = []
        logger = Logger(
            file_sink=OrderedSink("file", journal, fail=True),
            stream_sink=OrderedSink("stream", journal),
            remote_sink=RemoteSink(transport),
            on_sink_error=lambda name, severity, exc: observed.append((name, severity, type(exc))),
        )
        logger.error("boom")
        assert [name for name, _ in journal] == ["stream"]
        assert [method for method, _ in transport.calls] == ["err"]
        assert observed == [("file", Severity.ERROR, OSError)]

    def test_failing_remote_sink_is_reported(self, transport_factory, capsys) -> None:
        observed = []
        logger = Logger(
            remote_sink=RemoteSink(transport_factory(fail_on={"crit"})),
            on_sink_error=lambda name, severity, exc: observed.append(name),
        )
        logger.critical("still printed")
        assert "still printed" in capsys.readouterr().err
        assert observed == ["syslog"]

    def test_observer_errors_are_dropped(self) -> None:
        journal = []
        observer = MagicMock(side_effect=RuntimeError("observer broke"))
        logger = Logger(
            file_sink=OrderedSink("file", journal, fail=True),
            stream_sink=OrderedSink("stream", journal),
            on_sink_error=observer,
        )
        logger.info("ok")
        observer.assert_called_once()
        assert journal[0][0] == "stream"

    def test_observer_may_log_through_the_same_logger(self) -> None:
        journal = []
        observed = []
        holder = {}

        def observer(name, severity, exc):
            observed.append(name)
            holder["logger"].warnf("sink %s degraded", name)

        logger = Logger(
            file_sink=OrderedSink("file", journal, fail=True),
            stream_sink=OrderedSink("stream", journal),
            on_sink_error=observer,
        )
        holder["logger"] = logger

        worker = threading.Thread(target=logger.info, args=("x",), daemon=True)
        worker.start()
        worker.join(2)

        assert not worker.is_alive()
        # the observer's own line fails on the file sink too, but is not reported again
        assert observed == ["file"]
        assert [DECORATED.match(line).group("msg") for _, line in journal] == ["x", "sink file degraded"]

    def test_default_observer_uses_structlog(self) -> None:
        journal = []
        logger = Logger(file_sink=OrderedSink("file", journal, fail=True), stream_sink=OrderedSink("stream", journal))
        with patch("fanlog.core.get_logger") as get_logger:
            logger.notice("x")
        get_logger.return_value.warning.assert_called_once_with(
            "sink_write_failed", sink="file", severity="NOTICE", error="file is broken"
        )


class TestTemplateErrors:
    def test_out_of_range_char_still_reaches_sinks(self, capsys) -> None:
        Logger().infof("char=%c", 2**40)
        line = capsys.readouterr().out.rstrip("\n")
        assert DECORATED.match(line).group("msg") == f"char=%c {2**40}"

    def test_raw_printf_with_bad_args(self, capsys) -> None:
        Logger().printf("%(missing)s", 1)
        assert capsys.readouterr().out == "%(missing)s 1\n"


class TestStdOutputToggle:
    def test_disabled_std_output_still_writes_file_and_syslog(self, log_path, transport, capsys) -> None:
        logger = build(log_path, transport, std_output=False)
        logger.error("quiet")
        captured = capsys.readouterr()
        assert captured.out == captured.err == ""
        assert "quiet" in log_path.read_text()
        assert len(transport.calls) == 1


class TestLifecycle:
    def test_close_detaches_sinks(self, log_path, transport, capsys) -> None:
        logger = build(log_path, transport)
        logger.close()
        logger.close()
        assert transport.closed
        assert not logger.has_durable_sink
        assert not logger.has_remote_sink
        logger.info("after close")
        assert "after close" in capsys.readouterr().out
        assert log_path.read_text() == ""

    def test_context_manager_closes(self, log_path, transport) -> None:
        with build(log_path, transport) as logger:
            logger.info("inside")
        assert transport.closed
        assert "inside" in log_path.read_text()

    def test_concurrent_lines_do_not_interleave(self, log_path) -> None:
        logger = Logger(file_sink=FileSink(log_path), stream_sink=StreamSink(io.StringIO(), io.StringIO()))

        def worker(n):
            for i in range(50):
                logger.infof("worker=%d i=%d %s", n, i, "x" * 200)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        lines = log_path.read_text().splitlines()
        assert len(lines) == 400
        assert all(DECORATED.match(line) and line.endswith("x" * 200) for line in lines)


class TestNewLogger:
    def test_without_file_path_has_no_durable_sink(self, capsys) -> None:
        logger = new_logger("svc", "")
        assert not logger.has_durable_sink
        assert not logger.has_remote_sink
        logger.warn("fine")
        assert "fine" in capsys.readouterr().out

    def test_scenario_warn_to_file(self, log_path) -> None:
        with patch("fanlog.core.SyslogTransport.connect") as connect:
            logger = new_logger("svc", str(log_path), False, 0)
            logger.warn("disk low")
        connect.assert_not_called()
        assert re.match(r"^WARNING \| .+ \| .+ \| disk low$", log_path.read_text().rstrip("\n"))

    def test_missing_directory_fails_and_creates_nothing(self, tmp_path) -> None:
        path = tmp_path / "missing" / "t.log"
        with pytest.raises(InvalidLogDirectory):
            new_logger("svc", str(path))
        assert not path.parent.exists()

    def test_open_failure(self, tmp_path) -> None:
        (tmp_path / "dir.log").mkdir()
        with pytest.raises(LogFileOpenFailed):
            new_logger("svc", str(tmp_path / "dir.log"))

    def test_syslog_connection_failure(self, tmp_path) -> None:
        with pytest.raises(RemoteSinkSetupFailed) as exc_info:
            new_logger("svc", "", True, 0, syslog_address=str(tmp_path / "no.sock"))
        assert isinstance(exc_info.value.__cause__, OSError)
        assert exc_info.value.details["app_name"] == "svc"

    def test_syslog_connect_uses_mask_and_name(self, transport) -> None:
        with patch("fanlog.core.SyslogTransport.connect", return_value=transport) as connect:
            logger = new_logger("svc", "", True, 131, syslog_address="/dev/log")
        connect.assert_called_once_with(131, "svc", "/dev/log")
        assert logger.has_remote_sink

    def test_remote_sink_closed_when_file_setup_fails(self, tmp_path, transport) -> None:
        with patch("fanlog.core.SyslogTransport.connect", return_value=transport):
            with pytest.raises(InvalidLogDirectory):
                new_logger("svc", str(tmp_path / "missing" / "t.log"), True)
        assert transport.closed

    def test_or_fatal_exits(self, tmp_path, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            new_logger_or_fatal("svc", str(tmp_path / "missing" / "t.log"))
        assert exc_info.value.code == 1
        assert "does not exist" in capsys.readouterr().err

    def test_or_fatal_returns_logger(self, log_path) -> None:
        assert new_logger_or_fatal("svc", str(log_path)).has_durable_sink
