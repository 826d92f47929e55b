"""Pydantic models for session identity and request payloads.

The API speaks camelCase JSON. Models use snake_case attributes with
camelCase aliases and accept either form on input.
"""

from __future__ import annotations

__all__ = [
    "AuthResponse",
    "Credentials",
    "RegistrationData",
    "Role",
    "Session",
    "UserProfile",
    "property_id",
]

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from homesphere.exceptions import UnexpectedResponseShape


class Role(str, Enum):
    """Account role. Client-side checks on it are advisory only."""

    USER = "USER"
    AGENT = "AGENT"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value: "str | Role") -> "Role":
        """Parse a role case-insensitively ("agent" -> Role.AGENT)."""
        if isinstance(value, Role):
            return value
        try:
            return cls(value.strip().upper())
        except (ValueError, AttributeError) as e:
            raise ValueError(f"Unknown role: {value!r}") from e


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserProfile(_CamelModel):
    """Profile record of the signed-in user.

    Unknown fields sent by the server are kept so a round trip through
    storage does not lose them.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: int | str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    role: Role = Role.USER
    phone: str | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, value: Any) -> Role:
        return Role.parse(value)

    @property
    def display_name(self) -> str:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.email or str(self.id)

    def to_json(self) -> str:
        """Serialize with camelCase keys for storage."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data: str) -> "UserProfile":
        return cls.model_validate_json(data)


class Session(BaseModel):
    """Authenticated identity: a bearer token and the profile it belongs to.

    Both halves are mandatory. There is no such thing as a token without a
    user or a user without a token.
    """

    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1)
    user: UserProfile

    def __repr__(self) -> str:
        # Never put the token in logs or tracebacks
        return f"Session(user_id={self.user.id!r}, role={self.user.role.value!r})"


class Credentials(_CamelModel):
    """Login input."""

    email: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(email={self.email!r})"


class RegistrationData(_CamelModel):
    """Registration payload.

    Agents additionally supply business details; those fields are left out
    of the request body for other roles.
    """

    role: Role
    first_name: str
    last_name: str
    email: str
    password: str
    phone: str | None = None

    business_name: str | None = None
    registration_number: str | None = None
    years_of_experience: int | str | None = None
    bank_name: str | None = None
    account_number: str | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, value: Any) -> Role:
        return Role.parse(value)

    def to_payload(self) -> dict[str, Any]:
        """Request body in the API's camelCase form."""
        exclude: set[str] = set()
        if self.role is not Role.AGENT:
            exclude = {
                "business_name",
                "registration_number",
                "years_of_experience",
                "bank_name",
                "account_number",
            }
        return self.model_dump(mode="json", by_alias=True, exclude=exclude, exclude_none=True)

    def __repr__(self) -> str:
        return f"RegistrationData(email={self.email!r}, role={self.role.value!r})"


class AuthResponse(BaseModel):
    """Body of a successful login or register call."""

    model_config = ConfigDict(extra="ignore")

    token: str = Field(min_length=1)
    user: UserProfile

    def to_session(self) -> Session:
        return Session(token=self.token, user=self.user)


def property_id(item: dict[str, Any]) -> str:
    """Return the canonical identity of a property record.

    ``id`` is the only identity field. Older listing payloads carry
    ``listingId`` instead; those are rejected rather than silently mapped,
    since the two are not guaranteed to name the same record.

    Raises:
        UnexpectedResponseShape: If the record has no ``id``.
    """
    value = item.get("id")
    if value is None:
        if "listingId" in item:
            raise UnexpectedResponseShape(
                "Property record carries 'listingId' but no 'id'; refusing to guess its identity"
            )
        raise UnexpectedResponseShape("Property record has no 'id' field")
    return str(value)
