"""
fanlog Configuration Module.

Settings are read from ``FANLOG_*`` environment variables and ``.env``:

    from fanlog.config import LoggerSettings

    settings = LoggerSettings()
    settings.file_path
"""

from .logger import LoggerSettings

__all__ = ["LoggerSettings"]
