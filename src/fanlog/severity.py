"""
Severity taxonomy and syslog priority helpers.

Numeric values follow <syslog.h>: severities occupy the low three bits of a
priority, facilities are pre-shifted into the bits above them. A priority
mask is therefore ``facility | severity``.
"""

from __future__ import annotations

from enum import IntEnum


class Severity(IntEnum):
    """The eight syslog severities, most severe first."""

    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


class Facility(IntEnum):
    KERN = 0 << 3
    USER = 1 << 3
    MAIL = 2 << 3
    DAEMON = 3 << 3
    AUTH = 4 << 3
    SYSLOG = 5 << 3
    LPR = 6 << 3
    NEWS = 7 << 3
    UUCP = 8 << 3
    CRON = 9 << 3
    AUTHPRIV = 10 << 3
    FTP = 11 << 3
    LOCAL0 = 16 << 3
    LOCAL1 = 17 << 3
    LOCAL2 = 18 << 3
    LOCAL3 = 19 << 3
    LOCAL4 = 20 << 3
    LOCAL5 = 21 << 3
    LOCAL6 = 22 << 3
    LOCAL7 = 23 << 3


SEVERITY_MASK = 0x07
FACILITY_MASK = 0x03F8

DEFAULT_SYSLOG_MASK = int(Facility.SYSLOG) | int(Severity.INFO)

_LABELS: dict[int, str] = {
    Severity.EMERGENCY: "EMERG",
    Severity.ALERT: "ALERT",
    Severity.CRITICAL: "CRIT",
    Severity.ERROR: "ERROR",
    Severity.WARNING: "WARNING",
    Severity.NOTICE: "NOTICE",
    Severity.INFO: "INFO",
    Severity.DEBUG: "DEBUG",
}


def label_of(severity: int) -> str:
    """Return the display label for a severity, ``"UNKNOWN"`` for anything else."""
    if isinstance(severity, bool) or not isinstance(severity, int):
        return "UNKNOWN"
    return _LABELS.get(int(severity), "UNKNOWN")


def split_mask(mask: int) -> tuple[int, int]:
    """Split a priority mask into ``(facility, severity)``.

    A zero mask selects ``DEFAULT_SYSLOG_MASK``.
    """
    if not mask:
        mask = DEFAULT_SYSLOG_MASK
    if mask < 0 or mask > FACILITY_MASK | SEVERITY_MASK:
        raise ValueError(f"invalid syslog priority mask: {mask}")
    return mask & FACILITY_MASK, mask & SEVERITY_MASK
