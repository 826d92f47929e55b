"""File helpers for config and session files.

Both kinds of file may hold credentials or point at them, so everything
written here is owner-only (0o600 files in 0o700 directories).
"""

from __future__ import annotations

__all__ = [
    "load_validated_json",
    "set_secure_permissions",
    "write_private_file",
]

import json
import sys
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_PRIVATE_DIR_MODE = 0o700
_PRIVATE_FILE_MODE = 0o600


def set_secure_permissions(path: Path, *, is_directory: bool = False) -> None:
    """Restrict ``path`` to its owner. No-op on Windows.

    Filesystems that refuse chmod (some network mounts) are tolerated.
    """
    if sys.platform == "win32":
        return
    try:
        path.chmod(_PRIVATE_DIR_MODE if is_directory else _PRIVATE_FILE_MODE)
    except OSError:
        pass


def write_private_file(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` with owner-only permissions.

    Raises:
        OSError: If the directory or file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    set_secure_permissions(path.parent, is_directory=True)
    path.write_bytes(data)
    set_secure_permissions(path)


def _format_errors(error: ValidationError) -> str:
    return "\n".join(
        f"  - {'.'.join(str(part) for part in item['loc'])}: {item['msg']}" for item in error.errors()
    )


def load_validated_json(file_path: Path, model_class: type[ModelT], file_type: str = "file") -> ModelT:
    """Read ``file_path`` as JSON and validate it into ``model_class``.

    Args:
        file_path: JSON file to read.
        model_class: Pydantic model describing the file.
        file_type: Word used in error messages ("config").

    Raises:
        ValueError: Unreadable file, invalid JSON, or failed validation.
            The message lists every failing field as ``path.to.field: reason``.
    """
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_type} file {file_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Could not read {file_type} file {file_path}: {e}") from e

    try:
        return model_class.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid {file_type} in {file_path}:\n{_format_errors(e)}") from e
