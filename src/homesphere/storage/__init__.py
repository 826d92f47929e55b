"""Durable storage for the session.

Provides three KeyValueStore backends:
1. KeychainStore (primary): OS keychain via keyring
2. EncryptedFileStore (fallback): Fernet-encrypted file
3. MemoryStore: process-local, for tests and ephemeral runs

SessionStore layers the two-key session layout on top of any of them.
"""

from __future__ import annotations

__all__ = [
    "EncryptedFileStore",
    "KeyValueStore",
    "KeychainStore",
    "MemoryStore",
    "SessionStore",
    "create_store",
]

from typing import TYPE_CHECKING

from homesphere.storage.base import KeyValueStore
from homesphere.storage.encrypted_file import EncryptedFileStore
from homesphere.storage.keychain import KeychainStore, is_keyring_available
from homesphere.storage.memory import MemoryStore
from homesphere.storage.session_store import SessionStore

if TYPE_CHECKING:
    from homesphere.config import StorageConfig


def create_store(config: "StorageConfig") -> KeyValueStore:
    """Create the configured storage backend.

    "auto" prefers the keychain when usable, falling back to the encrypted file.
    """
    if config.backend == "memory":
        return MemoryStore()
    if config.backend == "keychain":
        return KeychainStore()
    if config.backend == "encrypted_file":
        return EncryptedFileStore()
    if is_keyring_available():
        return KeychainStore()
    return EncryptedFileStore()
