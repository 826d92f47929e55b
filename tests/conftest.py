"""Shared fixtures: a scripted HomeSphere API served through httpx.MockTransport."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from homesphere.gateway import GatewayClient, HomeSphereAPI
from homesphere.models import Session, UserProfile
from homesphere.session import SessionManager
from homesphere.storage import MemoryStore, SessionStore

from tests.support import BASE_URL, FakeServer


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
async def client(server: FakeServer) -> AsyncIterator[GatewayClient]:
    gateway = GatewayClient(BASE_URL, transport=httpx.MockTransport(server))
    yield gateway
    await gateway.aclose()


@pytest.fixture
def api(client: GatewayClient) -> HomeSphereAPI:
    return HomeSphereAPI(client)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def manager(api: HomeSphereAPI, store: MemoryStore) -> SessionManager:
    return SessionManager(api, SessionStore(store))


@pytest.fixture
def user_payload() -> dict[str, Any]:
    """Profile as the server sends it."""
    return {
        "id": 7,
        "firstName": "Ada",
        "lastName": "Obi",
        "email": "ada@example.com",
        "role": "USER",
        "phone": "+2348000000000",
    }


@pytest.fixture
def agent_payload(user_payload: dict[str, Any]) -> dict[str, Any]:
    return {**user_payload, "id": 9, "email": "agent@example.com", "role": "AGENT"}


@pytest.fixture
def user_session(user_payload: dict[str, Any]) -> Session:
    return Session(token="tok-user", user=UserProfile.model_validate(user_payload))
