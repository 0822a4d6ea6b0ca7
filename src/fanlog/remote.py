"""
Syslog transport used as the remote severity sink.

Wraps ``logging.handlers.SysLogHandler`` for socket setup and reconnection,
but writes pre-rendered lines at an explicit severity instead of going
through ``LogRecord`` level mapping.
"""

from __future__ import annotations

import os
import socket
from logging.handlers import SYSLOG_UDP_PORT, SysLogHandler

from .severity import Severity, split_mask

_DEFAULT_SOCKETS = ("/dev/log", "/var/run/syslog", "/var/run/log")

Address = str | tuple[str, int]


def resolve_address(address: str | None) -> Address:
    """Turn a configured address into what ``SysLogHandler`` expects.

    ``None`` probes the platform's local socket, falling back to UDP on
    localhost. ``"host:port"`` selects UDP; anything else is a socket path.
    """
    if address is None:
        for candidate in _DEFAULT_SOCKETS:
            if os.path.exists(candidate):
                return candidate
        return ("localhost", SYSLOG_UDP_PORT)

    host, sep, port = address.rpartition(":")
    if sep and host and port.isdigit() and not address.startswith("/"):
        return (host, int(port))
    return address


class SyslogTransport(SysLogHandler):
    """A connected syslog writer with one method per severity."""

    def __init__(
        self,
        app_name: str,
        *,
        facility: int,
        default_severity: int = Severity.INFO,
        address: Address = "/dev/log",
    ):
        # SysLogHandler wants the unshifted facility code
        super().__init__(address=address, facility=facility >> 3)
        self.app_name = app_name
        self.default_severity = default_severity
        self.ident = f"{app_name}[{os.getpid()}]: "

    @classmethod
    def connect(cls, mask: int, app_name: str, address: str | None = None) -> "SyslogTransport":
        """Open a transport for ``app_name``; raises ``OSError`` if the socket is unusable."""
        facility, severity = split_mask(mask)
        return cls(app_name, facility=facility, default_severity=severity, address=resolve_address(address))

    def createSocket(self) -> None:
        # SysLogHandler ignores an unreachable unix socket; treat it as a setup error
        if isinstance(self.address, str):
            self.unixsocket = True
            self._connect_unixsocket(self.address)
        else:
            super().createSocket()

    def send(self, severity: int, msg: str) -> None:
        priority = self.encodePriority(self.facility, int(severity))
        payload = f"<{priority}>{self.ident}{msg}"
        if self.append_nul:
            payload += "\000"
        data = payload.encode("utf-8")

        self.acquire()
        try:
            if self.unixsocket:
                try:
                    self.socket.send(data)
                except OSError:
                    self.socket.close()
                    self._connect_unixsocket(self.address)
                    self.socket.send(data)
            elif self.socktype == socket.SOCK_DGRAM:
                self.socket.sendto(data, self.address)
            else:
                self.socket.sendall(data)
        finally:
            self.release()

    def write(self, msg: str) -> None:
        self.send(self.default_severity, msg)

    def debug(self, msg: str) -> None:
        self.send(Severity.DEBUG, msg)

    def info(self, msg: str) -> None:
        self.send(Severity.INFO, msg)

    def notice(self, msg: str) -> None:
        self.send(Severity.NOTICE, msg)

    def warning(self, msg: str) -> None:
        self.send(Severity.WARNING, msg)

    def err(self, msg: str) -> None:
        self.send(Severity.ERROR, msg)

    def crit(self, msg: str) -> None:
        self.send(Severity.CRITICAL, msg)

    def alert(self, msg: str) -> None:
        self.send(Severity.ALERT, msg)

    def emerg(self, msg: str) -> None:
        self.send(Severity.EMERGENCY, msg)
