"""Logging helpers shared by the system logger."""

from homesphere.utils.logging.iso_formatter import ISO8601Formatter

__all__ = ["ISO8601Formatter"]
