"""Operational logging for homesphere."""

from homesphere.telemetry.system_logger import (
    configure_system_logger_file,
    get_logger,
    get_system_logger,
    set_console_level,
)

__all__ = [
    "configure_system_logger_file",
    "get_logger",
    "get_system_logger",
    "set_console_level",
]
