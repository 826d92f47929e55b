"""Durable key-value store interface."""

from __future__ import annotations

__all__ = ["KeyValueStore"]

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract base class for durable string key-value backends."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, None if the key is absent.

        Raises:
            StorageError: If the backend cannot be read.
        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        Raises:
            StorageError: If the backend cannot be written.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``. Removing an absent key is not an error.

        Raises:
            StorageError: If the backend cannot be written.
        """

    @property
    def backend_name(self) -> str:
        """Short name for status display."""
        return type(self).__name__
