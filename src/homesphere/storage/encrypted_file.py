"""Fallback key-value store using a Fernet-encrypted file.

Used when no keyring backend is usable. All keys live in one JSON object,
encrypted as a whole with a key derived from machine-specific identifiers,
so the file is useless when copied to another machine.
"""

from __future__ import annotations

__all__ = ["EncryptedFileStore"]

import base64
import hashlib
import json
import platform
import socket
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from homesphere.constants import APP_NAME, CONFIG_DIR, ENCRYPTED_STORE_FILENAME
from homesphere.exceptions import StorageError
from homesphere.storage.base import KeyValueStore
from homesphere.utils.file_helpers import write_private_file

if TYPE_CHECKING:
    from cryptography.fernet import Fernet


def _get_machine_id() -> str:
    """Get platform-specific machine identifier, hostname as last resort."""
    system = platform.system()

    if system == "Darwin":
        try:
            result = subprocess.run(
                ["ioreg", "-rd1", "-c", "IOPlatformExpertDevice"],
                capture_output=True,
                text=True,
                timeout=5,
            )
            for line in result.stdout.split("\n"):
                if "IOPlatformUUID" in line:
                    parts = line.split("=")
                    if len(parts) >= 2:
                        return parts[1].strip().strip('"')
        except (subprocess.SubprocessError, OSError):
            pass

    elif system == "Linux":
        for path in ["/etc/machine-id", "/var/lib/dbus/machine-id"]:
            try:
                with open(path) as f:
                    return f.read().strip()
            except OSError:
                continue

    return socket.gethostname()


def derive_machine_key() -> bytes:
    """Derive a Fernet key from machine identifiers with PBKDF2.

    Returns:
        URL-safe base64 encoded 32-byte key.
    """
    combined = f"{_get_machine_id()}:{socket.gethostname()}:{APP_NAME}-session-storage"
    # Static salt keeps the key stable across restarts; machine data supplies uniqueness
    salt = f"{APP_NAME}-v1".encode()
    key = hashlib.pbkdf2_hmac("sha256", combined.encode(), salt, iterations=100_000, dklen=32)
    return base64.urlsafe_b64encode(key)


class EncryptedFileStore(KeyValueStore):
    """Store persisting every key in one encrypted file.

    Args:
        path: File location. Defaults to <config dir>/session.enc.
        key: Fernet key. Defaults to a key derived from this machine.
    """

    def __init__(self, path: Path | None = None, key: bytes | None = None) -> None:
        self._path = path or Path(CONFIG_DIR) / ENCRYPTED_STORE_FILENAME
        self._key = key

    @property
    def path(self) -> Path:
        return self._path

    def _fernet(self) -> "Fernet":
        from cryptography.fernet import Fernet

        if self._key is None:
            self._key = derive_machine_key()
        return Fernet(self._key)

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}

        try:
            decrypted = self._fernet().decrypt(self._path.read_bytes())
        except Exception as e:
            raise StorageError(
                f"Failed to decrypt {self._path} (may be corrupted or key changed): {e}"
            ) from e

        try:
            data = json.loads(decrypted.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to parse {self._path} (may be corrupted): {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Unexpected content in {self._path}: expected an object")
        return {str(k): str(v) for k, v in data.items()}

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            if not data:
                if self._path.exists():
                    self._path.unlink()
                return
            encrypted = self._fernet().encrypt(json.dumps(data).encode("utf-8"))
            write_private_file(self._path, encrypted)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}") from e

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        try:
            data = self._read_all()
        except StorageError:
            # An unreadable file cannot hold anything worth keeping
            self._write_all({})
            return
        if data.pop(key, None) is not None:
            self._write_all(data)

    @property
    def backend_name(self) -> str:
        return "encrypted_file"
