"""Test doubles for the HomeSphere API, shared by the fixtures in conftest.py."""

from __future__ import annotations

__all__ = ["BASE_URL", "FakeServer", "Gate", "request_json", "stored_session"]

import asyncio
import inspect
import json
from collections.abc import Callable
from typing import Any

import httpx

from homesphere.models import Session
from homesphere.storage import MemoryStore, SessionStore

BASE_URL = "http://api.test"

Route = Callable[[httpx.Request], Any]


class FakeServer:
    """Answers requests from a (method, path) route table and records them.

    A route is either a (status, json_body) tuple or a callable taking the
    request and returning an httpx.Response (sync or async).
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, Any] | Route] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, body: Any = None) -> None:
        self.routes[(method, path)] = (status, body)

    def handle(self, method: str, path: str, route: Route) -> None:
        self.routes[(method, path)] = route

    def gated(self, method: str, path: str, status: int = 200, body: Any = None) -> "Gate":
        """Hold the response until the returned gate is opened."""
        gate = Gate(status, body)
        self.routes[(method, path)] = gate
        return gate

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": f"No route for {request.method} {request.url.path}"})
        if isinstance(route, tuple):
            status, body = route
            if body is None:
                return httpx.Response(status)
            return httpx.Response(status, json=body)
        result = route(request)
        if inspect.isawaitable(result):
            result = await result
        return result


class Gate:
    """Route that waits for open() before responding."""

    def __init__(self, status: int, body: Any) -> None:
        self.status = status
        self.body = body
        self.entered = asyncio.Event()
        self._released = asyncio.Event()

    def open(self) -> None:
        self._released.set()

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.entered.set()
        await self._released.wait()
        return httpx.Response(self.status, json=self.body)


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content)


def stored_session(store: MemoryStore, session: Session) -> None:
    """Write ``session`` into ``store`` the way SessionStore lays it out."""
    SessionStore(store).save(session)
