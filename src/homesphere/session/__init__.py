"""Session management for the device user."""

from homesphere.session.manager import SessionListener, SessionManager, SessionState

__all__ = ["SessionListener", "SessionManager", "SessionState"]
