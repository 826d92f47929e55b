"""Two-key persistence of the session.

Layout in the underlying KeyValueStore:
- "token": the bearer token, an opaque string
- "user":  the user profile, a JSON object

Both keys are written together and cleared together. A half-written session
is never left behind on purpose, and a half-present one reads as no session.
"""

from __future__ import annotations

__all__ = ["SessionStore"]

import json

from pydantic import ValidationError as PydanticValidationError

from homesphere.constants import TOKEN_STORAGE_KEY, USER_STORAGE_KEY
from homesphere.exceptions import StorageError
from homesphere.models import Session, UserProfile
from homesphere.storage.base import KeyValueStore
from homesphere.telemetry.system_logger import get_logger

_logger = get_logger("storage")


class SessionStore:
    """Reads and writes a Session through a KeyValueStore."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @property
    def backend_name(self) -> str:
        return self._store.backend_name

    def save(self, session: Session) -> None:
        """Persist token and user.

        If the user write fails after the token was written, the token is
        removed again so no partial session remains.

        Raises:
            StorageError: If either write fails.
        """
        self._store.set(TOKEN_STORAGE_KEY, session.token)
        try:
            self._store.set(USER_STORAGE_KEY, session.user.to_json())
        except StorageError:
            try:
                self._store.delete(TOKEN_STORAGE_KEY)
            except StorageError as cleanup_error:
                _logger.error(
                    {
                        "event": "session_partial_write",
                        "message": "Token persisted without user and could not be removed",
                        "error": str(cleanup_error),
                    }
                )
            raise

    def load(self) -> Session | None:
        """Load the persisted session.

        Returns None when nothing is stored, when only one half is present,
        or when the stored data cannot be read or parsed. Never raises.
        """
        try:
            token = self._store.get(TOKEN_STORAGE_KEY)
            user_raw = self._store.get(USER_STORAGE_KEY)
        except StorageError as e:
            _logger.warning(
                {
                    "event": "session_load_failed",
                    "message": f"Could not read stored session: {e}",
                    "backend": self.backend_name,
                }
            )
            return None

        if not token and not user_raw:
            return None

        if not token or not user_raw:
            _logger.warning(
                {
                    "event": "session_incomplete",
                    "message": "Stored session is missing its token or user; ignoring it",
                    "has_token": bool(token),
                    "has_user": bool(user_raw),
                }
            )
            return None

        try:
            return Session(token=token, user=UserProfile.from_json(user_raw))
        except (PydanticValidationError, json.JSONDecodeError, ValueError) as e:
            _logger.warning(
                {
                    "event": "session_corrupt",
                    "message": "Stored user profile is unreadable; ignoring stored session",
                    "error_type": type(e).__name__,
                }
            )
            return None

    def clear(self) -> None:
        """Delete both keys.

        The user key is deleted even if deleting the token failed.

        Raises:
            StorageError: The first failure, after both deletes were attempted.
        """
        first_error: StorageError | None = None
        for key in (TOKEN_STORAGE_KEY, USER_STORAGE_KEY):
            try:
                self._store.delete(key)
            except StorageError as e:
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error
