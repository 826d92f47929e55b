"""Operational logging for homesphere.

Every module logs through a child of the ``homesphere`` logger
(``homesphere.gateway``, ``homesphere.session``...), with dict messages:

    _logger.warning({"event": "session_load_failed", "message": "..."})

Destinations:
- stderr: WARNING and above by default, INFO with --verbose
- <log_dir>/homesphere/system.jsonl: WARNING and above, one JSON object per line

The file destination is added by configure_system_logger_file() once the
config (and so log_dir) is known. Tokens and passwords are never logged.
"""

from __future__ import annotations

__all__ = [
    "ConsoleFormatter",
    "configure_system_logger_file",
    "get_console_level",
    "get_logger",
    "get_system_logger",
    "set_console_level",
]

import logging
import sys
from pathlib import Path

from homesphere.constants import APP_NAME
from homesphere.utils.file_helpers import set_secure_permissions
from homesphere.utils.logging.iso_formatter import ISO8601Formatter


class ConsoleFormatter(logging.Formatter):
    """One short line per record: ``LEVEL [area] text``.

    For dict messages the text is the "message" field, falling back to
    "event". The area is the logger name below ``homesphere``.
    """

    def format(self, record: logging.LogRecord) -> str:
        area = record.name.partition(".")[2] or record.name
        if isinstance(record.msg, dict):
            text = record.msg.get("message") or record.msg.get("event", "")
        else:
            text = record.getMessage()
        return f"{record.levelname} [{area}] {text}"


_root: logging.Logger | None = None
_console: logging.Handler | None = None
_log_file: Path | None = None


def get_system_logger() -> logging.Logger:
    """Return the ``homesphere`` logger, attaching the stderr handler on first use."""
    global _root, _console

    if _root is None:
        _root = logging.getLogger(APP_NAME)
        _root.setLevel(logging.DEBUG)
        _root.propagate = False

        _console = logging.StreamHandler(sys.stderr)
        _console.setLevel(logging.WARNING)
        _console.setFormatter(ConsoleFormatter())
        _root.addHandler(_console)

    return _root


def get_logger(area: str) -> logging.Logger:
    """Logger for one area of the package, e.g. ``get_logger("gateway")``."""
    get_system_logger()
    return logging.getLogger(f"{APP_NAME}.{area}")


def set_console_level(level: int) -> None:
    """Change the stderr threshold (logging.INFO for --verbose)."""
    get_system_logger()
    if _console is not None:
        _console.setLevel(level)


def get_console_level() -> int:
    get_system_logger()
    return _console.level if _console is not None else logging.WARNING


def configure_system_logger_file(log_path: Path) -> None:
    """Also write WARNING and above to ``log_path`` as JSONL.

    Only the first call has an effect. If the log directory cannot be
    created, logging continues on stderr alone.
    """
    global _log_file

    if _log_file is not None:
        return

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        return
    set_secure_permissions(log_path.parent, is_directory=True)

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setLevel(logging.WARNING)
    handler.setFormatter(ISO8601Formatter())
    get_system_logger().addHandler(handler)
    _log_file = log_path
