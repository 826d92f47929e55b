"""Unit tests for homesphere CLI commands.

Tests CLI behavior using Click's CliRunner, with the API served by
httpx.MockTransport and the session kept in a MemoryStore.
Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest
from click.testing import CliRunner, Result

from homesphere import __version__
from homesphere.cli import cli
from homesphere.cli.runtime import RuntimeOptions
from homesphere.config import AppConfig, LoggingConfig
from homesphere.constants import TOKEN_STORAGE_KEY
from homesphere.models import Session, UserProfile
from homesphere.storage import MemoryStore

from tests.support import FakeServer, request_json, stored_session

LISTINGS = [
    {"id": 1, "title": "Two-bed flat", "price": 250000, "city": "Lagos", "state": "Lagos"},
    {"id": 2, "title": "Beach villa", "price": 1200000, "city": "Lekki", "state": "Lagos"},
]


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def options(server: FakeServer, store: MemoryStore, tmp_path: Path) -> RuntimeOptions:
    return RuntimeOptions(
        config=AppConfig(logging=LoggingConfig(log_dir=str(tmp_path))),
        store=store,
        transport=httpx.MockTransport(server),
    )


@pytest.fixture
def invoke(runner: CliRunner, options: RuntimeOptions) -> Any:
    def _invoke(*args: str, input: str | None = None) -> Result:
        return runner.invoke(cli, list(args), obj=options, input=input)

    return _invoke


@pytest.fixture
def signed_in(store: MemoryStore, user_session: Session) -> MemoryStore:
    stored_session(store, user_session)
    return store


@pytest.fixture
def agent_signed_in(store: MemoryStore, agent_payload: dict[str, Any]) -> MemoryStore:
    stored_session(store, Session(token="tok-agent", user=UserProfile.model_validate(agent_payload)))
    return store


class TestMainGroup:
    """Tests for the top-level group."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["-h"])

        assert result.exit_code == 0
        for command in ("auth", "properties", "favorites", "reviews", "agents", "contact", "admin"):
            assert command in result.output


class TestAuthCommands:
    """Tests for auth login/register/logout/status."""

    def test_login_success(
        self, invoke: Any, server: FakeServer, store: MemoryStore, user_payload: dict[str, Any]
    ) -> None:
        # Arrange
        server.on("POST", "/api/auth/login", body={"token": "tok-1", "user": user_payload})

        # Act
        result = invoke("auth", "login", "--email", "ada@example.com", "--password", "secret1")

        # Assert
        assert result.exit_code == 0, result.output
        assert "Signed in as Ada Obi" in result.output
        assert store.get(TOKEN_STORAGE_KEY) == "tok-1"

    def test_login_prompts_for_credentials(
        self, invoke: Any, server: FakeServer, user_payload: dict[str, Any]
    ) -> None:
        server.on("POST", "/api/auth/login", body={"token": "tok-1", "user": user_payload})

        result = invoke("auth", "login", input="ada@example.com\nsecret1\n")

        assert result.exit_code == 0, result.output
        assert request_json(server.requests[0])["email"] == "ada@example.com"

    def test_login_failure_shows_server_message(self, invoke: Any, server: FakeServer, store: MemoryStore) -> None:
        server.on("POST", "/api/auth/login", status=401, body={"message": "Invalid credentials"})

        result = invoke("auth", "login", "--email", "ada@example.com", "--password", "wrong")

        assert result.exit_code == 1
        assert "Invalid credentials" in result.output
        assert store.keys() == []

    def test_register_agent_prompts_for_business_details(
        self, invoke: Any, server: FakeServer, agent_payload: dict[str, Any]
    ) -> None:
        # Arrange
        server.on("POST", "/api/auth/register", status=201, body={"token": "tok-a", "user": agent_payload})

        # Act
        result = invoke(
            "auth", "register",
            "--role", "agent",
            "--first-name", "Ada",
            "--last-name", "Obi",
            "--email", "agent@example.com",
            "--phone", "+2348000000000",
            "--password", "secret1",
            input="Obi Homes\nRC-1\n4\nFirst Bank\n0123456789\n",
        )

        # Assert
        assert result.exit_code == 0, result.output
        body = request_json(server.requests[0])
        assert body["role"] == "AGENT"
        assert body["businessName"] == "Obi Homes"
        assert body["accountNumber"] == "0123456789"

    def test_register_rejects_short_password_before_any_request(
        self, invoke: Any, server: FakeServer
    ) -> None:
        result = invoke(
            "auth", "register",
            "--first-name", "Ada",
            "--last-name", "Obi",
            "--email", "ada@example.com",
            "--phone", "+2348000000000",
            "--password", "123",
        )

        assert result.exit_code == 1
        assert "Password must be at least 6 characters" in result.output
        assert server.requests == []

    def test_status_signed_out(self, invoke: Any) -> None:
        result = invoke("auth", "status")

        assert result.exit_code == 0
        assert "Not signed in" in result.output

    def test_status_json(self, invoke: Any, signed_in: MemoryStore) -> None:
        result = invoke("auth", "status", "--json")

        data = json.loads(result.output)
        assert data["authenticated"] is True
        assert data["user"]["email"] == "ada@example.com"

    def test_logout_clears_even_when_server_fails(
        self, invoke: Any, server: FakeServer, signed_in: MemoryStore
    ) -> None:
        server.on("POST", "/api/auth/logout", status=500)

        result = invoke("auth", "logout")

        assert result.exit_code == 0
        assert "Signed out" in result.output
        assert signed_in.keys() == []


class TestPropertyCommands:
    """Tests for properties list/show."""

    def test_list_stars_favorites(self, invoke: Any, server: FakeServer, signed_in: MemoryStore) -> None:
        # Arrange
        server.on("GET", "/api/properties", body={"properties": LISTINGS})
        server.on("GET", "/api/favorites", body=[LISTINGS[1]])

        # Act
        result = invoke("properties", "list", "--filter", "city=Lagos")

        # Assert
        assert result.exit_code == 0, result.output
        assert "Properties: 2" in result.output
        assert "★ [2] Beach villa" in result.output
        assert "$250,000" in result.output
        assert server.requests_to("GET", "/api/properties")[0].url.params["city"] == "Lagos"

    def test_list_json_when_signed_out(self, invoke: Any, server: FakeServer) -> None:
        server.on("GET", "/api/properties", body=LISTINGS)

        result = invoke("properties", "list", "--json")

        rows = json.loads(result.output)
        assert [row["isFavorite"] for row in rows] == [False, False]

    def test_malformed_filter(self, invoke: Any) -> None:
        result = invoke("properties", "list", "--filter", "city")

        assert result.exit_code == 2
        assert "key=value" in result.output

    def test_show(self, invoke: Any, server: FakeServer) -> None:
        server.on("GET", "/api/properties/1", body={"property": {**LISTINGS[0], "bedrooms": 2}})
        server.on("GET", "/api/reviews/property/1", body=[{"rating": 4, "comment": "Bright and quiet"}])

        result = invoke("properties", "show", "1")

        assert result.exit_code == 0, result.output
        assert "Two-bed flat" in result.output
        assert "Bedrooms: 2" in result.output
        assert "★★★★☆  Bright and quiet" in result.output

    def test_unexpected_shape_is_reported(self, invoke: Any, server: FakeServer) -> None:
        server.on("GET", "/api/properties", body={"items": LISTINGS})

        result = invoke("properties", "list")

        assert result.exit_code == 1
        assert "Unexpected properties response" in result.output


class TestFavoriteCommands:
    """Tests for favorites commands."""

    def test_requires_sign_in(self, invoke: Any, server: FakeServer) -> None:
        result = invoke("favorites", "toggle", "1")

        assert result.exit_code == 1
        assert "Not signed in" in result.output
        assert server.requests == []

    def test_add(self, invoke: Any, server: FakeServer, signed_in: MemoryStore) -> None:
        server.on("GET", "/api/favorites", body=[])
        server.on("POST", "/api/favorites", status=201, body={"message": "Added"})

        result = invoke("favorites", "add", "2")

        assert result.exit_code == 0, result.output
        assert "Saved property 2" in result.output
        assert request_json(server.requests_to("POST", "/api/favorites")[0]) == {"propertyId": "2"}

    def test_add_existing_is_a_no_op(self, invoke: Any, server: FakeServer, signed_in: MemoryStore) -> None:
        server.on("GET", "/api/favorites", body=[LISTINGS[1]])

        result = invoke("favorites", "add", "2")

        assert "already saved" in result.output
        assert server.requests_to("POST", "/api/favorites") == []

    def test_toggle_failure_reports_error(self, invoke: Any, server: FakeServer, signed_in: MemoryStore) -> None:
        server.on("GET", "/api/favorites", body=[LISTINGS[0]])
        server.on("DELETE", "/api/favorites/1", status=500, body={"message": "Database unavailable"})

        result = invoke("favorites", "toggle", "1")

        assert result.exit_code == 1
        assert "Database unavailable" in result.output

    def test_list(self, invoke: Any, server: FakeServer, signed_in: MemoryStore) -> None:
        server.on("GET", "/api/favorites", body={"favorites": LISTINGS})

        result = invoke("favorites", "list")

        assert "Saved properties: 2" in result.output


class TestReviewCommands:
    """Tests for reviews commands."""

    def test_submit_validates_comment(self, invoke: Any, server: FakeServer, signed_in: MemoryStore) -> None:
        result = invoke("reviews", "submit", "--property", "1", "--rating", "5", "--comment", "Nice")

        assert result.exit_code == 1
        assert "at least 10 characters long" in result.output
        assert server.requests == []

    def test_submit(self, invoke: Any, server: FakeServer, signed_in: MemoryStore) -> None:
        server.on("POST", "/api/reviews", status=201, body={"review": {"id": 3}})

        result = invoke("reviews", "submit", "--property", "1", "--rating", "5", "--comment", "Great location")

        assert result.exit_code == 0, result.output
        assert request_json(server.requests[0]) == {"rating": 5, "comment": "Great location", "propertyId": "1"}

    def test_list_for_property(self, invoke: Any, server: FakeServer) -> None:
        server.on("GET", "/api/reviews/property/1", body={"reviews": [{"id": 3, "rating": 5, "comment": "Great"}]})

        result = invoke("reviews", "list", "--property", "1")

        assert "Reviews: 1" in result.output

    def test_like(self, invoke: Any, server: FakeServer, signed_in: MemoryStore) -> None:
        server.on("POST", "/api/reviews/3/like", body={"likes": 1})

        result = invoke("reviews", "like", "3")

        assert "Liked review 3" in result.output


class TestOtherCommands:
    """Tests for agents, contact and admin."""

    def test_agents_show(self, invoke: Any, server: FakeServer) -> None:
        server.on("GET", "/api/agents/9", body={"agent": {"id": 9, "firstName": "Ada", "lastName": "Obi"}})
        server.on("GET", "/api/agents/9/properties", body=LISTINGS)
        server.on("GET", "/api/agents/9/reviews", body=[])

        result = invoke("agents", "show", "9")

        assert result.exit_code == 0, result.output
        assert "--- Ada Obi ---" in result.output
        assert "Listings: 2" in result.output

    def test_contact(self, invoke: Any, server: FakeServer) -> None:
        server.on("POST", "/api/contact", body={"message": "Sent"})

        result = invoke(
            "contact",
            "--name", "Ada",
            "--email", "ada@example.com",
            "--subject", "Viewing",
            "--message", "Is the flat still available?",
        )

        assert result.exit_code == 0, result.output
        assert request_json(server.requests[0])["subject"] == "Viewing"

    def test_admin_stats_refused_for_users(self, invoke: Any, server: FakeServer, signed_in: MemoryStore) -> None:
        result = invoke("admin", "stats")

        assert result.exit_code == 1
        assert "You need admin privileges" in result.output
        assert server.requests == []

    def test_admin_stats(self, invoke: Any, server: FakeServer, store: MemoryStore) -> None:
        stored_session(store, Session(token="tok-admin", user=UserProfile(id=1, role="ADMIN")))
        server.on("GET", "/api/admin/dashboard/stats", body={"users": 10, "properties": 4})

        result = invoke("admin", "stats")

        assert result.exit_code == 0, result.output
        assert "users:" in result.output
        assert "10" in result.output


class TestPropertyFormCommands:
    """Tests for properties create/update/delete."""

    FORM = (
        "--title", "Two-bed flat",
        "--type", "apartment",
        "--address", "12 Marina Road",
        "--city", "Lagos",
        "--state", "Lagos",
    )

    def test_create(self, invoke: Any, server: FakeServer, agent_signed_in: MemoryStore) -> None:
        # Arrange
        server.on("POST", "/api/properties", status=201, body={"property": {"id": 12, "title": "Two-bed flat"}})

        # Act
        result = invoke("properties", "create", *self.FORM, "--price", "250000", "--bedrooms", "2")

        # Assert
        assert result.exit_code == 0, result.output
        assert "Created property 12" in result.output
        body = request_json(server.requests_to("POST", "/api/properties")[0])
        assert body["price"] == 250000.0
        assert body["bedrooms"] == 2
        assert body["bathrooms"] is None
        assert body["propertyType"] == "apartment"
        assert body["status"] == "ACTIVE"

    def test_create_lists_missing_fields(self, invoke: Any, server: FakeServer, agent_signed_in: MemoryStore) -> None:
        result = invoke("properties", "create", "--title", "Flat", "--type", "house")

        assert result.exit_code == 1
        assert "Please fill in: address, city, state, price" in result.output
        assert server.requests == []

    def test_create_rejects_bad_price(self, invoke: Any, server: FakeServer, agent_signed_in: MemoryStore) -> None:
        result = invoke("properties", "create", *self.FORM, "--price", "0")

        assert result.exit_code == 1
        assert "Please enter a valid price" in result.output
        assert server.requests == []

    def test_create_refused_for_users(self, invoke: Any, server: FakeServer, signed_in: MemoryStore) -> None:
        result = invoke("properties", "create", *self.FORM, "--price", "250000")

        assert result.exit_code == 1
        assert "You need agent privileges" in result.output
        assert server.requests == []

    def test_update_keeps_unchanged_fields(
        self, invoke: Any, server: FakeServer, agent_signed_in: MemoryStore
    ) -> None:
        # Arrange
        current = {
            "id": 12,
            "title": "Two-bed flat",
            "propertyType": "apartment",
            "address": "12 Marina Road",
            "city": "Lagos",
            "state": "Lagos",
            "price": 250000,
            "bedrooms": 2,
            "status": "ACTIVE",
        }
        server.on("GET", "/api/properties/12", body={"property": current})
        server.on("PUT", "/api/properties/12", body={"property": {**current, "price": 230000}})

        # Act
        result = invoke("properties", "update", "12", "--price", "230000", "--status", "pending")

        # Assert
        assert result.exit_code == 0, result.output
        body = request_json(server.requests_to("PUT", "/api/properties/12")[0])
        assert body["price"] == 230000.0
        assert body["title"] == "Two-bed flat"
        assert body["bedrooms"] == 2
        assert body["status"] == "PENDING"

    def test_delete(self, invoke: Any, server: FakeServer, agent_signed_in: MemoryStore) -> None:
        server.on("DELETE", "/api/properties/12", status=204)

        result = invoke("properties", "delete", "12", "--yes")

        assert result.exit_code == 0, result.output
        assert "Deleted property 12" in result.output
        assert len(server.requests_to("DELETE", "/api/properties/12")) == 1

    def test_delete_asks_first(self, invoke: Any, server: FakeServer, agent_signed_in: MemoryStore) -> None:
        result = invoke("properties", "delete", "12", input="n\n")

        assert result.exit_code == 1
        assert server.requests == []


class TestDashboardCommands:
    """Tests for agents dashboard and admin agents."""

    def test_agent_dashboard(self, invoke: Any, server: FakeServer, agent_signed_in: MemoryStore) -> None:
        # Arrange
        server.on("GET", "/api/agents/profile", body={"agent": {"id": 9, "firstName": "Ada", "lastName": "Obi"}})
        server.on(
            "GET",
            "/api/agents/9/properties",
            body=[{**LISTINGS[0], "status": "ACTIVE"}, {**LISTINGS[1], "status": "SOLD"}],
        )
        server.on("GET", "/api/agents/9/reviews", body={"reviews": [{"rating": 4}, {"rating": 5}]})

        # Act
        result = invoke("agents", "dashboard", "--json")

        # Assert
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["stats"] == {"totalProperties": 2, "activeListings": 1, "totalReviews": 2, "averageRating": 4.5}
        assert data["agent"]["id"] == 9

    def test_agent_dashboard_text(self, invoke: Any, server: FakeServer, agent_signed_in: MemoryStore) -> None:
        server.on("GET", "/api/agents/profile", body={"id": 9, "businessName": "Obi Homes"})
        server.on("GET", "/api/agents/9/properties", body=[])
        server.on("GET", "/api/agents/9/reviews", body=[])

        result = invoke("agents", "dashboard")

        assert result.exit_code == 0, result.output
        assert "--- Obi Homes ---" in result.output
        assert "Reviews:  0 (average 0)" in result.output
        assert "No listings yet" in result.output

    def test_agent_dashboard_refused_for_users(
        self, invoke: Any, server: FakeServer, signed_in: MemoryStore
    ) -> None:
        result = invoke("agents", "dashboard")

        assert result.exit_code == 1
        assert "You need agent privileges" in result.output
        assert server.requests == []

    def test_admin_agents(self, invoke: Any, server: FakeServer, store: MemoryStore) -> None:
        stored_session(store, Session(token="tok-admin", user=UserProfile(id=1, role="ADMIN")))
        server.on(
            "GET",
            "/api/admin/agents",
            body={"agents": [{"id": 9, "firstName": "Ada", "lastName": "Obi", "businessName": "Obi Homes"}]},
        )

        result = invoke("admin", "agents")

        assert result.exit_code == 0, result.output
        assert "Agents: 1" in result.output
        assert "[9] Ada Obi" in result.output
        assert "Obi Homes" in result.output

    def test_admin_agents_refused_for_agents(
        self, invoke: Any, server: FakeServer, agent_signed_in: MemoryStore
    ) -> None:
        result = invoke("admin", "agents")

        assert result.exit_code == 1
        assert "You need admin privileges" in result.output
