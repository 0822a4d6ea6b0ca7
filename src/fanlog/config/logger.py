"""
Logger Configuration.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggerSettings(BaseSettings):
    """Construction parameters for a fanlog Logger."""

    model_config = SettingsConfigDict(
        env_prefix="FANLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app_name: str = Field(default="fanlog", description="Syslog ident")
    file_path: str = Field(default="", description="Log file path, empty disables the file sink")
    enable_syslog: bool = Field(default=False, description="Connect to the system log")
    syslog_mask: int = Field(
        default=0,
        ge=0,
        le=0x3FF,
        description="Syslog facility|severity priority, 0 for INFO|SYSLOG",
    )
    syslog_address: str | None = Field(
        default=None,
        description="Syslog socket path or host:port, None probes the local socket",
    )
    std_output: bool = Field(default=True, description="Write to stdout/stderr")
    timestamp_format: str = Field(default="%d/%m/%Y %H:%M:%S", description="Line timestamp format")
    level_width: int = Field(default=7, ge=1, description="Level column width")
    separator: str = Field(default=" | ", description="Line column separator")
