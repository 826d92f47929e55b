"""Custom exceptions for homesphere.

This module contains all custom exceptions used throughout the package.
Exceptions are organized into two categories:

Remote Errors (raised by the gateway, one channel for every failure):
    - GatewayError: Base for anything that went wrong talking to the API
    - TransportError: Connection failure, timeout, unstructured error status
    - AuthenticationError: Login rejected or auth endpoint unreachable
    - RegistrationError: Registration rejected
    - AuthorizationError: Server refused a request (401/403)
    - UnexpectedResponseShape: 2xx body matched no declared shape

Local Errors (never reach the network):
    - ValidationError: Form input failed client-side checks
    - StorageError: Durable key-value store failed
    - ConfigurationError: Config file invalid
    - ScopeClosedError: Work spawned on a torn-down screen scope

Usage:
    from homesphere.exceptions import GatewayError, ValidationError
"""

from __future__ import annotations

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConfigurationError",
    "GatewayError",
    "HomeSphereError",
    "RegistrationError",
    "ScopeClosedError",
    "StorageError",
    "TransportError",
    "UnexpectedResponseShape",
    "ValidationError",
]

from typing import Any


class HomeSphereError(Exception):
    """Base exception for every error raised by homesphere."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Remote Errors
# =============================================================================


class GatewayError(HomeSphereError):
    """A request to the remote API failed.

    Callers never handle raw httpx exceptions: connection problems, timeouts
    and error responses all arrive as a GatewayError subclass.

    Attributes:
        message: Human-readable description, taken from the server when it
            sent one.
        status_code: HTTP status, None when no response was received.
        server_body: Parsed JSON error object from the server, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        server_body: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.server_body = server_body

    def __repr__(self) -> str:
        parts = [f"{type(self).__name__}({self.message!r}"]
        if self.status_code is not None:
            parts.append(f", status_code={self.status_code!r}")
        if self.server_body is not None:
            parts.append(f", server_body={self.server_body!r}")
        parts.append(")")
        return "".join(parts)


class TransportError(GatewayError):
    """The request never produced a usable answer.

    Raised when:
    - The server cannot be reached (DNS, refused connection, TLS)
    - The request timed out
    - A non-2xx status came back without a parsable JSON object body
    """


class AuthenticationError(GatewayError):
    """Credentials were rejected or the auth endpoint was unreachable.

    Only raised for login/register. Carries the server message when the
    server provided one, otherwise a generic "Login failed".
    """


class RegistrationError(AuthenticationError):
    """Registration was rejected (duplicate email, missing agent fields...).

    The caller re-presents the form; nothing was persisted.
    """


class AuthorizationError(GatewayError):
    """The server refused a request for lack of credential or privilege.

    This is the authoritative signal. Client-side role checks are advisory
    and can be bypassed; the server decides. When the refused request carried
    a session token, the session manager treats the token as revoked.
    """


class UnexpectedResponseShape(GatewayError):
    """A 2xx response body matched none of the shapes declared for it.

    Raised instead of guessing, so a wrapped payload is never mistaken for
    the payload itself.
    """


# =============================================================================
# Local Errors
# =============================================================================


class ValidationError(HomeSphereError):
    """Form input failed client-side constraints.

    Raised before any network call. Never reaches the gateway.

    Attributes:
        field: Name of the offending field, None for form-level problems.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class StorageError(HomeSphereError):
    """The durable key-value store could not be read or written."""


class ConfigurationError(HomeSphereError):
    """Configuration file is invalid.

    Raised when:
    - Config file contains invalid JSON
    - Config file fails Pydantic validation
    """


class ScopeClosedError(HomeSphereError):
    """Work was scheduled on a screen scope that has already been closed."""
