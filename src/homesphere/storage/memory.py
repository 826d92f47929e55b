"""In-process store. Nothing survives a restart."""

from __future__ import annotations

__all__ = ["MemoryStore"]

from homesphere.storage.base import KeyValueStore


class MemoryStore(KeyValueStore):
    """Dict-backed store for tests and ephemeral runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)

    @property
    def backend_name(self) -> str:
        return "memory"
