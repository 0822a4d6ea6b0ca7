"""
Line rendering for log entries.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

from .severity import label_of

# (severity, template, *args) -> rendered line
Formatter = Callable[..., str]


def render_values(*values: Any) -> str:
    """Render variadic values the way ``print`` does."""
    return " ".join(str(v) for v in values)


def interpolate(template: str, args: tuple[Any, ...]) -> str:
    """Apply printf-style substitution; no-op when ``args`` is empty.

    A template that cannot be applied to ``args`` renders as the template
    followed by the arguments instead of raising.
    """
    if not args:
        return template
    try:
        return template % args
    except Exception:
        return render_values(template, *args)


class LineFormatter:
    """Renders ``LEVEL | ZONE | DD/MM/YYYY HH:MM:SS.mmm | message`` lines.

    Layout is per instance; class attributes only hold the defaults.
    """

    TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"
    LEVEL_WIDTH = 7
    SEPARATOR = " | "

    def __init__(
        self,
        *,
        timestamp_format: str | None = None,
        level_width: int | None = None,
        separator: str | None = None,
    ):
        self.timestamp_format = timestamp_format or self.TIMESTAMP_FORMAT
        self.level_width = level_width or self.LEVEL_WIDTH
        self.separator = self.SEPARATOR if separator is None else separator

    @staticmethod
    def _fit_left(text: str, width: int) -> str:
        if width <= 0:
            return text
        return f"{text:<{width}.{width}}"

    def _format_timestamp(self, now: datetime) -> str:
        return f"{now.strftime(self.timestamp_format)}.{now.microsecond // 1000:03d}"

    @staticmethod
    def _zone_name(now: datetime) -> str:
        return now.tzname() or now.strftime("%z") or "UTC"

    def format(self, severity: int, message: str, *, now: datetime | None = None) -> str:
        # zone and stamp come from the same instant
        if now is None:
            now = datetime.now().astimezone()
        elif now.tzinfo is None:
            now = now.astimezone()

        return self.separator.join(
            [
                self._fit_left(label_of(severity), self.level_width),
                self._zone_name(now),
                self._format_timestamp(now),
                message,
            ]
        )

    def __call__(self, severity: int, template: str, *args: Any, now: datetime | None = None) -> str:
        return self.format(severity, interpolate(template, args), now=now)


_default_formatter = LineFormatter()


def format_log(severity: int, template: str, *args: Any, now: datetime | None = None) -> str:
    """Default formatter: interpolate ``args`` into ``template`` and decorate it."""
    return _default_formatter(severity, template, *args, now=now)
