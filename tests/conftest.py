from datetime import datetime, timedelta, timezone

import pytest

from fanlog.default import get_provider


class RecordingTransport:
    """Stands in for SyslogTransport and records every write."""

    def __init__(self, fail_on: set[str] | None = None):
        self.calls: list[tuple[str, str]] = []
        self.closed = False
        self._fail_on = fail_on or set()

    def _record(self, method: str, msg: str) -> None:
        if method in self._fail_on:
            raise OSError(f"{method} refused")
        self.calls.append((method, msg))

    def debug(self, msg):
        self._record("debug", msg)

    def info(self, msg):
        self._record("info", msg)

    def notice(self, msg):
        self._record("notice", msg)

    def warning(self, msg):
        self._record("warning", msg)

    def err(self, msg):
        self._record("err", msg)

    def crit(self, msg):
        self._record("crit", msg)

    def alert(self, msg):
        self._record("alert", msg)

    def emerg(self, msg):
        self._record("emerg", msg)

    def close(self):
        self.closed = True


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "t.log"


@pytest.fixture
def fixed_now():
    """14:03:07.215 on 5 March 2024, two hours east of UTC."""
    return datetime(2024, 3, 5, 14, 3, 7, 215_999, tzinfo=timezone(timedelta(hours=2), "CEST"))


@pytest.fixture(autouse=True)
def reset_default_logger():
    """Every test starts and ends with no default Logger installed."""
    get_provider().reset()
    yield
    get_provider().reset()



@pytest.fixture
def transport_factory():
    return RecordingTransport
