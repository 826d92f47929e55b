"""Resource surface of the HomeSphere API.

One method per backend operation. Every method returns the normalized
payload (never the transport envelope) and fails with a GatewayError
subclass. List methods take an open filter mapping; unknown keys are
forwarded as query parameters and left to the server to ignore.

Endpoints:
    auth        POST /api/auth/login, /api/auth/register, /api/auth/logout
    properties  GET|POST /api/properties, GET|PUT|DELETE /api/properties/{id}
    favorites   GET|POST /api/favorites, DELETE /api/favorites/{id}
    reviews     GET|POST /api/reviews, GET /api/reviews/property/{id},
                POST /api/reviews/{id}/like|dislike
    agents      GET /api/agents, /api/agents/{id}, /api/agents/{id}/reviews,
                /api/agents/{id}/properties, /api/agents/profile
    contact     POST /api/contact
    admin       GET /api/admin/dashboard/stats, /api/admin/agents
"""

from __future__ import annotations

__all__ = ["HomeSphereAPI"]

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError as PydanticValidationError

from homesphere.exceptions import UnexpectedResponseShape
from homesphere.gateway import normalize as shapes
from homesphere.gateway.client import GatewayClient
from homesphere.models import AuthResponse, Credentials, RegistrationData

Params = Mapping[str, Any]


def _segment(value: Any) -> str:
    """Encode an identifier for use as one path segment."""
    return quote(str(value), safe="")


class HomeSphereAPI:
    """Typed facade over GatewayClient.

    Args:
        client: The gateway client every call goes through.
    """

    def __init__(self, client: GatewayClient) -> None:
        self._client = client

    @property
    def client(self) -> GatewayClient:
        return self._client

    async def _get(self, path: str, shape: shapes.ResourceShape, params: Params | None = None) -> Any:
        body = await self._client.request("GET", path, params=params)
        return shapes.unwrap(body, shape)

    async def _send(
        self,
        method: str,
        path: str,
        shape: shapes.ResourceShape,
        payload: Any = None,
    ) -> Any:
        body = await self._client.request(method, path, json_data=payload)
        return shapes.unwrap(body, shape)

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    async def _authenticate(self, path: str, payload: dict[str, Any]) -> AuthResponse:
        body = await self._client.request("POST", path, json_data=payload, authenticated=False)
        try:
            return AuthResponse.model_validate(body)
        except PydanticValidationError as e:
            raise UnexpectedResponseShape(
                f"Auth response from {path} lacks a token or user profile"
            ) from e

    async def login(self, credentials: Credentials) -> AuthResponse:
        return await self._authenticate("/api/auth/login", credentials.model_dump(by_alias=True))

    async def register(self, data: RegistrationData) -> AuthResponse:
        return await self._authenticate("/api/auth/register", data.to_payload())

    async def logout(self) -> Any:
        """Best-effort server-side token invalidation."""
        return await self._send("POST", "/api/auth/logout", shapes.ANY_OBJECT)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    async def get_properties(self, params: Params | None = None) -> list[dict[str, Any]]:
        return await self._get("/api/properties", shapes.PROPERTIES, params)

    async def get_property(self, property_id: Any) -> dict[str, Any]:
        return await self._get(f"/api/properties/{_segment(property_id)}", shapes.PROPERTY)

    async def create_property(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._send("POST", "/api/properties", shapes.PROPERTY, data)

    async def update_property(self, property_id: Any, data: dict[str, Any]) -> dict[str, Any]:
        return await self._send("PUT", f"/api/properties/{_segment(property_id)}", shapes.PROPERTY, data)

    async def delete_property(self, property_id: Any) -> Any:
        return await self._send("DELETE", f"/api/properties/{_segment(property_id)}", shapes.ANY_OBJECT)

    # -------------------------------------------------------------------------
    # Favorites
    # -------------------------------------------------------------------------

    async def get_favorites(self) -> list[dict[str, Any]]:
        return await self._get("/api/favorites", shapes.FAVORITES)

    async def add_to_favorites(self, property_id: Any) -> Any:
        return await self._send("POST", "/api/favorites", shapes.ANY_OBJECT, {"propertyId": property_id})

    async def remove_from_favorites(self, property_id: Any) -> Any:
        return await self._send("DELETE", f"/api/favorites/{_segment(property_id)}", shapes.ANY_OBJECT)

    # -------------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------------

    async def get_reviews(self, params: Params | None = None) -> list[dict[str, Any]]:
        return await self._get("/api/reviews", shapes.REVIEWS, params)

    async def get_property_reviews(self, property_id: Any) -> list[dict[str, Any]]:
        return await self._get(f"/api/reviews/property/{_segment(property_id)}", shapes.REVIEWS)

    async def submit_review(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._send("POST", "/api/reviews", shapes.REVIEW, data)

    async def like_review(self, review_id: Any) -> Any:
        return await self._send("POST", f"/api/reviews/{_segment(review_id)}/like", shapes.ANY_OBJECT)

    async def dislike_review(self, review_id: Any) -> Any:
        return await self._send("POST", f"/api/reviews/{_segment(review_id)}/dislike", shapes.ANY_OBJECT)

    # -------------------------------------------------------------------------
    # Agents
    # -------------------------------------------------------------------------

    async def get_agents(self, params: Params | None = None) -> list[dict[str, Any]]:
        return await self._get("/api/agents", shapes.AGENTS, params)

    async def get_agent(self, agent_id: Any) -> dict[str, Any]:
        return await self._get(f"/api/agents/{_segment(agent_id)}", shapes.AGENT)

    async def get_agent_reviews(self, agent_id: Any) -> list[dict[str, Any]]:
        return await self._get(f"/api/agents/{_segment(agent_id)}/reviews", shapes.REVIEWS)

    async def get_agent_properties(self, agent_id: Any) -> list[dict[str, Any]]:
        return await self._get(f"/api/agents/{_segment(agent_id)}/properties", shapes.PROPERTIES)

    async def get_agent_profile(self) -> dict[str, Any]:
        return await self._get("/api/agents/profile", shapes.AGENT)

    # -------------------------------------------------------------------------
    # Contact and admin
    # -------------------------------------------------------------------------

    async def submit_contact(self, data: dict[str, Any]) -> Any:
        return await self._send("POST", "/api/contact", shapes.ANY_OBJECT, data)

    async def get_admin_dashboard_stats(self) -> Any:
        return await self._get("/api/admin/dashboard/stats", shapes.ANY_OBJECT)

    async def get_admin_agents(self, params: Params | None = None) -> list[dict[str, Any]]:
        return await self._get("/api/admin/agents", shapes.AGENTS, params)
