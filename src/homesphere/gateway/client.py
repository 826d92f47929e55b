"""HTTP client for the HomeSphere API.

GatewayClient is the only place that touches httpx. It:
- appends resource paths to the configured base URL
- attaches "Authorization: Bearer <token>" when a token is available
- turns every failure (connection, timeout, error status) into a
  GatewayError subclass
- notifies rejection listeners when a request carrying a token is refused,
  so the session can demote itself

The token is read from the token provider once per request, at request
construction time. The client never writes session state.
"""

from __future__ import annotations

__all__ = [
    "GatewayClient",
    "RejectionListener",
    "TokenProvider",
    "error_from_response",
    "server_message",
]

import json
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from homesphere.constants import DEFAULT_HTTP_TIMEOUT_SECONDS, USER_AGENT
from homesphere.exceptions import (
    AuthorizationError,
    GatewayError,
    TransportError,
    UnexpectedResponseShape,
)
from homesphere.telemetry.system_logger import get_logger

TokenProvider = Callable[[], str | None]

# Called with the error and the token the refused request carried
RejectionListener = Callable[[AuthorizationError, str], None]

# Fields a server error body may carry its human-readable message in
_MESSAGE_FIELDS: tuple[str, ...] = ("message", "error", "detail")

_logger = get_logger("gateway")


def server_message(body: dict[str, Any]) -> str | None:
    """Return the human-readable message of a server error body, if any."""
    for field in _MESSAGE_FIELDS:
        value = body.get(field)
        if isinstance(value, str) and value.strip():
            return value
    return None


def error_from_response(response: httpx.Response) -> GatewayError:
    """Build the normalized error for a non-2xx response.

    Args:
        response: The error response.

    Returns:
        AuthorizationError for 401/403, GatewayError when the server sent a
        JSON object, TransportError otherwise.
    """
    status = response.status_code
    server_body: dict[str, Any] | None = None
    try:
        parsed = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError):
        parsed = None
    if isinstance(parsed, dict):
        server_body = parsed

    message = (server_message(server_body) if server_body else None) or (
        f"Request failed with status {status}"
    )

    if status in (401, 403):
        return AuthorizationError(message, status_code=status, server_body=server_body)
    if server_body is not None:
        return GatewayError(message, status_code=status, server_body=server_body)
    return TransportError(message, status_code=status)


class GatewayClient:
    """Authenticated async HTTP client with uniform error reporting.

    Usage:
        async with GatewayClient("https://api.example.com", token_provider=get_token) as client:
            body = await client.request("GET", "/api/properties", params={"city": "Lagos"})

    Writes are never retried here; retrying is the caller's decision
    (see homesphere.gateway.retry for reads).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        token_provider: TokenProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base endpoint, e.g. "http://192.168.1.10:3000".
            timeout: Request timeout in seconds.
            token_provider: Returns the current bearer token or None.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self._base_url = base_url.rstrip("/")
        self._token_provider = token_provider
        self._rejection_listeners: list[RejectionListener] = []
        self._http = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            },
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def set_token_provider(self, provider: TokenProvider | None) -> None:
        self._token_provider = provider

    def add_rejection_listener(self, listener: RejectionListener) -> Callable[[], None]:
        """Register a listener for refused authenticated requests.

        Returns:
            Callable that removes the listener.
        """
        self._rejection_listeners.append(listener)

        def remove() -> None:
            if listener in self._rejection_listeners:
                self._rejection_listeners.remove(listener)

        return remove

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_data: Any = None,
        authenticated: bool = True,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE).
            path: Resource path, e.g. "/api/properties/12".
            params: Query parameters, forwarded verbatim (None values dropped).
            json_data: JSON body for POST/PUT.
            authenticated: Attach the session token when one is available.
                Login and register pass False.

        Returns:
            Parsed JSON body; {} for 204 or an empty body.

        Raises:
            TransportError: Connection failure, timeout, unstructured error status.
            AuthorizationError: 401/403.
            GatewayError: Other error status with a structured body.
            UnexpectedResponseShape: 2xx body that is not JSON.
        """
        token = self._token_provider() if (authenticated and self._token_provider) else None
        headers = {"Authorization": f"Bearer {token}"} if token else None
        query = {k: v for k, v in params.items() if v is not None} if params else None

        try:
            response = await self._http.request(
                method,
                path,
                params=query,
                json=json_data,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            _logger.warning({"event": "request_timeout", "message": f"{method} {path} timed out"})
            raise TransportError(f"Request to {path} timed out") from e
        except httpx.HTTPError as e:
            _logger.warning(
                {
                    "event": "request_failed",
                    "message": f"{method} {path} failed: {e}",
                    "error_type": type(e).__name__,
                }
            )
            raise TransportError(f"Could not reach the server: {e}") from e

        _logger.debug(
            {
                "event": "request_completed",
                "method": method,
                "path": path,
                "status": response.status_code,
                "authenticated": token is not None,
            }
        )

        if response.is_error:
            error = error_from_response(response)
            if isinstance(error, AuthorizationError) and token is not None:
                self._notify_rejection(error, token)
            raise error

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
            raise UnexpectedResponseShape(
                f"Response from {path} is not JSON", status_code=response.status_code
            ) from e

    def _notify_rejection(self, error: AuthorizationError, token: str) -> None:
        for listener in list(self._rejection_listeners):
            try:
                listener(error, token)
            except Exception as e:
                _logger.error(
                    {
                        "event": "rejection_listener_failed",
                        "message": f"Rejection listener raised: {e}",
                        "error_type": type(e).__name__,
                    }
                )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "GatewayClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
