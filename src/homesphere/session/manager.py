"""Session manager: who is using this device right now.

Single source of truth for the authenticated identity. The manager is an
explicit object: construct one at startup, pass it to whatever needs it,
call initialize() once, and close() on teardown.

States:
    UNINITIALIZED -> UNAUTHENTICATED | AUTHENTICATED   (initialize)
    UNAUTHENTICATED -> AUTHENTICATED                   (login, register)
    AUTHENTICATED -> UNAUTHENTICATED                   (logout, token rejected)

Nothing ever returns to UNINITIALIZED.

Role checks (is_admin, is_agent...) are advisory. They decide what to show;
the server decides what is allowed.
"""

from __future__ import annotations

__all__ = [
    "SessionListener",
    "SessionManager",
    "SessionState",
]

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from homesphere.exceptions import (
    AuthenticationError,
    AuthorizationError,
    GatewayError,
    RegistrationError,
    StorageError,
)
from homesphere.gateway.client import server_message
from homesphere.models import Credentials, RegistrationData, Role, Session, UserProfile
from homesphere.telemetry.system_logger import get_logger

if TYPE_CHECKING:
    from homesphere.gateway.api import HomeSphereAPI
    from homesphere.storage.session_store import SessionStore


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


SessionListener = Callable[[SessionState], None]

_logger = get_logger("session")


class SessionManager:
    """Owns the session; the gateway only reads its token.

    Usage:
        manager = SessionManager(api, SessionStore(create_store(config.storage)))
        await manager.initialize()

        if not manager.is_authenticated:
            await manager.login(Credentials(email=..., password=...))

        unsubscribe = manager.subscribe(lambda state: ...)

        await manager.logout()
        manager.close()
    """

    def __init__(self, api: "HomeSphereAPI", store: "SessionStore") -> None:
        """Initialize the manager and attach it to the gateway.

        Args:
            api: Gateway facade used for auth calls.
            store: Durable two-key session storage.
        """
        self._api = api
        self._store = store
        self._session: Session | None = None
        self._state = SessionState.UNINITIALIZED
        self._listeners: list[SessionListener] = []

        api.client.set_token_provider(self._current_token)
        self._detach_rejection = api.client.add_rejection_listener(self._on_rejected)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def current_user(self) -> UserProfile | None:
        return self._session.user if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._state is SessionState.AUTHENTICATED

    def has_role(self, role: Role | str) -> bool:
        user = self.current_user
        return user is not None and user.role is Role.parse(role)

    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)

    def is_agent(self) -> bool:
        return self.has_role(Role.AGENT)

    def require_role(self, role: Role | str) -> UserProfile:
        """Return the current user if it has ``role``.

        Raises:
            AuthorizationError: If signed out or the role differs. This is a
                local, advisory refusal; the server enforces the real one.
        """
        wanted = Role.parse(role)
        user = self.current_user
        if user is None or user.role is not wanted:
            raise AuthorizationError(f"You need {wanted.value.lower()} privileges to access this screen.")
        return user

    def _current_token(self) -> str | None:
        return self._session.token if self._session else None

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Call ``listener`` with the new state after every transition.

        Returns:
            Callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, session: Session | None) -> None:
        self._session = session
        self._state = SessionState.AUTHENTICATED if session else SessionState.UNAUTHENTICATED
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                _logger.error(
                    {
                        "event": "session_listener_failed",
                        "message": f"Session listener raised: {e}",
                        "error_type": type(e).__name__,
                    }
                )

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def initialize(self) -> SessionState:
        """Restore the persisted session, if any.

        Always reaches a terminal state: missing, partial or corrupt storage
        means UNAUTHENTICATED. Calling it again has no effect.
        """
        if self._state is not SessionState.UNINITIALIZED:
            return self._state

        session = self._store.load()
        if session is not None:
            _logger.info(
                {
                    "event": "session_restored",
                    "message": "Restored stored session",
                    "user_id": str(session.user.id),
                    "role": session.user.role.value,
                }
            )
        self._transition(session)
        return self._state

    async def login(self, credentials: Credentials) -> Session:
        """Authenticate and persist the new session.

        Raises:
            AuthenticationError: With the server message when there is one,
                otherwise "Login failed". Session state is unchanged.
        """
        try:
            response = await self._api.login(credentials)
        except GatewayError as e:
            _logger.info({"event": "login_failed", "message": f"Login failed: {e}"})
            raise _auth_failure(e, AuthenticationError, "Login failed") from e

        session = response.to_session()
        self._establish(session, "login")
        return session

    async def register(self, data: RegistrationData) -> Session:
        """Create an account and sign in as it.

        Raises:
            RegistrationError: With the server message when there is one,
                otherwise "Registration failed". Session state is unchanged.
        """
        try:
            response = await self._api.register(data)
        except GatewayError as e:
            _logger.info({"event": "registration_failed", "message": f"Registration failed: {e}"})
            raise _auth_failure(e, RegistrationError, "Registration failed") from e

        session = response.to_session()
        self._establish(session, "register")
        return session

    async def logout(self) -> None:
        """Sign out. Never fails and never blocks on the network outcome.

        The server call is best effort; local storage is cleared regardless.
        """
        if self._session is not None:
            try:
                await self._api.logout()
            except GatewayError as e:
                _logger.info(
                    {
                        "event": "server_logout_failed",
                        "message": f"Server-side logout failed, clearing locally: {e}",
                    }
                )
        self._clear_storage()
        # A refused logout request has already demoted and notified
        if self._session is not None or self._state is not SessionState.UNAUTHENTICATED:
            self._transition(None)
        _logger.info({"event": "logout", "message": "Signed out"})

    def close(self) -> None:
        """Detach from the gateway. The in-memory session is left as is."""
        self._detach_rejection()
        self._api.client.set_token_provider(None)
        self._listeners.clear()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _establish(self, session: Session, via: str) -> None:
        try:
            self._store.save(session)
        except StorageError as e:
            # Durability is best effort; the in-memory session stays valid
            _logger.warning(
                {
                    "event": "session_persist_failed",
                    "message": f"Signed in, but the session could not be saved: {e}",
                    "backend": self._store.backend_name,
                }
            )
        self._transition(session)
        _logger.info(
            {
                "event": f"{via}_succeeded",
                "message": f"Signed in as {session.user.display_name}",
                "user_id": str(session.user.id),
                "role": session.user.role.value,
            }
        )

    def _clear_storage(self) -> None:
        try:
            self._store.clear()
        except StorageError as e:
            _logger.warning(
                {
                    "event": "session_clear_failed",
                    "message": f"Could not clear stored session: {e}",
                    "backend": self._store.backend_name,
                }
            )

    def _on_rejected(self, error: AuthorizationError, token: str) -> None:
        """Demote when the server refuses the current token."""
        if self._session is None or self._session.token != token:
            # Response to a request made with an older token
            return
        _logger.warning(
            {
                "event": "session_rejected",
                "message": "Server rejected the session token; signing out",
                "status_code": error.status_code,
            }
        )
        self._clear_storage()
        self._transition(None)


def _auth_failure(
    error: GatewayError,
    error_class: type[AuthenticationError],
    fallback: str,
) -> AuthenticationError:
    """Map any gateway failure of an auth call to ``error_class``."""
    message = (server_message(error.server_body) if error.server_body else None) or fallback
    return error_class(message, status_code=error.status_code, server_body=error.server_body)
