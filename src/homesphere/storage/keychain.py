"""Key-value storage in the OS keychain via the keyring library.

Uses the system's secure credential storage:
- macOS: Keychain
- Windows: Credential Locker
- Linux: Secret Service API (GNOME Keyring, KDE Wallet, etc.)

Each key becomes one keychain entry under the service name.
"""

from __future__ import annotations

__all__ = [
    "KeychainStore",
    "is_keyring_available",
]

from homesphere.constants import APP_NAME, KEYRING_SERVICE
from homesphere.exceptions import StorageError
from homesphere.storage.base import KeyValueStore
from homesphere.telemetry.system_logger import get_logger

_logger = get_logger("storage")


class KeychainStore(KeyValueStore):
    """Store backed by the OS keychain."""

    def __init__(self, service: str = KEYRING_SERVICE) -> None:
        self._service = service

    def get(self, key: str) -> str | None:
        import keyring

        try:
            return keyring.get_password(self._service, key)
        except Exception as e:
            raise StorageError(f"Failed to access keychain: {e}") from e

    def set(self, key: str, value: str) -> None:
        import keyring

        try:
            keyring.set_password(self._service, key, value)
        except Exception as e:
            raise StorageError(f"Failed to save '{key}' to keychain: {e}") from e

    def delete(self, key: str) -> None:
        import keyring
        from keyring.errors import PasswordDeleteError

        try:
            keyring.delete_password(self._service, key)
        except PasswordDeleteError:
            # Entry doesn't exist, that's fine
            pass
        except Exception as e:
            raise StorageError(f"Failed to delete '{key}' from keychain: {e}") from e

    @property
    def backend_name(self) -> str:
        return "keychain"


def _unavailable(reason: str, detail: str) -> bool:
    _logger.debug({"event": "keychain_unavailable", "reason": reason, "message": detail})
    return False


def is_keyring_available(probe_suffix: str = "probe") -> bool:
    """Tell whether session data can live in the OS keychain.

    A keyring that imports fine can still refuse writes (locked Secret
    Service, missing DBus), so a throwaway entry is written, read back and
    removed under ``<service>-<probe_suffix>``.
    """
    try:
        import keyring
        from keyring.backends.fail import Keyring as FailKeyring
    except ImportError as e:
        return _unavailable("import_error", str(e))

    if isinstance(keyring.get_keyring(), FailKeyring):
        return _unavailable("fail_backend", "No usable keyring backend; using the encrypted file")

    service = f"{KEYRING_SERVICE}-{probe_suffix}"
    probe = f"{APP_NAME}-probe"
    try:
        keyring.set_password(service, probe, probe)
        round_trip = keyring.get_password(service, probe)
        keyring.delete_password(service, probe)
    except Exception as e:
        # KeyringError, DBus and permission failures all mean "not usable"
        return _unavailable(type(e).__name__, str(e))
    return round_trip == probe
