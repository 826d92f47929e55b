"""Client-side form validation.

Every check here runs before a request is built; a ValidationError never
reaches the gateway. Messages are user-facing. Each validator stops at the
first problem so the form can point at one field.
"""

from __future__ import annotations

__all__ = [
    "build_property_payload",
    "build_registration",
    "build_review_payload",
    "validate_contact",
    "validate_credentials",
    "validate_property",
    "validate_registration_step",
    "validate_review",
]

import re
from collections.abc import Mapping
from typing import Any

from homesphere.constants import (
    MAX_RATING,
    MIN_PASSWORD_LENGTH,
    MIN_RATING,
    MIN_REVIEW_COMMENT_LENGTH,
)
from homesphere.exceptions import ValidationError
from homesphere.models import Credentials, RegistrationData, Role

_EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

# Registration wizard: step 1 picks the role, step 2 personal details,
# step 3 agent business details (agents only)
PERSONAL_DETAILS_STEP = 2
AGENT_DETAILS_STEP = 3

_PERSONAL_FIELDS: tuple[str, ...] = (
    "firstName",
    "lastName",
    "email",
    "password",
    "confirmPassword",
    "phone",
)
_AGENT_FIELDS: tuple[str, ...] = ("businessName", "registrationNumber", "bankName", "accountNumber")
_PROPERTY_REQUIRED: tuple[str, ...] = ("title", "propertyType", "address", "city", "state", "price")
_PROPERTY_INT_FIELDS: tuple[str, ...] = ("bedrooms", "bathrooms", "squareFootage")


def _text(form: Mapping[str, Any], field: str) -> str:
    value = form.get(field)
    return "" if value is None else str(value).strip()


def _is_email(value: str) -> bool:
    return _EMAIL_PATTERN.search(value) is not None


def validate_credentials(email: str, password: str) -> Credentials:
    """Check the login form.

    Raises:
        ValidationError: If either field is empty.
    """
    if not email.strip():
        raise ValidationError("Email is required", field="email")
    if not password:
        raise ValidationError("Password is required", field="password")
    return Credentials(email=email.strip(), password=password)


def validate_registration_step(form: Mapping[str, Any], step: int, role: Role | str) -> None:
    """Check one step of the registration wizard.

    Args:
        form: Wizard fields, camelCase keys as the form holds them.
        step: Wizard step being left (2 = personal, 3 = agent details).
        role: Role chosen on step 1.

    Raises:
        ValidationError: On the first failing constraint.
    """
    if step == PERSONAL_DETAILS_STEP:
        missing = [field for field in _PERSONAL_FIELDS if not _text(form, field)]
        if missing:
            raise ValidationError("Please fill in all required fields", field=missing[0])
        if form.get("password") != form.get("confirmPassword"):
            raise ValidationError("Passwords do not match", field="confirmPassword")
        if not _is_email(_text(form, "email")):
            raise ValidationError("Please enter a valid email", field="email")
        if len(str(form.get("password"))) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
            )

    if step == AGENT_DETAILS_STEP and Role.parse(role) is Role.AGENT:
        missing = [field for field in _AGENT_FIELDS if not _text(form, field)]
        if missing:
            raise ValidationError("Please fill in all agent-specific fields", field=missing[0])


def build_registration(form: Mapping[str, Any], role: Role | str) -> RegistrationData:
    """Validate every wizard step and build the registration payload.

    Raises:
        ValidationError: On the first failing constraint.
    """
    parsed_role = Role.parse(role)
    validate_registration_step(form, PERSONAL_DETAILS_STEP, parsed_role)
    validate_registration_step(form, AGENT_DETAILS_STEP, parsed_role)

    data: dict[str, Any] = {
        "role": parsed_role,
        "first_name": _text(form, "firstName"),
        "last_name": _text(form, "lastName"),
        "email": _text(form, "email"),
        "password": form["password"],
        "phone": _text(form, "phone"),
    }
    if parsed_role is Role.AGENT:
        data.update(
            business_name=_text(form, "businessName"),
            registration_number=_text(form, "registrationNumber"),
            years_of_experience=_text(form, "yearsOfExperience") or None,
            bank_name=_text(form, "bankName"),
            account_number=_text(form, "accountNumber"),
        )
    return RegistrationData(**data)


def validate_review(rating: int | None, comment: str | None) -> None:
    """Check the review form.

    Raises:
        ValidationError: Missing rating, missing or too short comment.
    """
    if not rating or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError("Please select a rating", field="rating")
    text = (comment or "").strip()
    if not text:
        raise ValidationError("Please write a review comment", field="comment")
    if len(text) < MIN_REVIEW_COMMENT_LENGTH:
        raise ValidationError(
            f"Review comment must be at least {MIN_REVIEW_COMMENT_LENGTH} characters long",
            field="comment",
        )


def build_review_payload(rating: int | None, comment: str | None, property_id: Any = None) -> dict[str, Any]:
    """Validate and build the review body ({rating, comment, propertyId})."""
    validate_review(rating, comment)
    return {"rating": rating, "comment": (comment or "").strip(), "propertyId": property_id}


def _parse_price(value: Any) -> float | None:
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if price > 0 and price != float("inf") else None


def validate_property(form: Mapping[str, Any]) -> None:
    """Check the agent's property form.

    Raises:
        ValidationError: Missing required fields (all listed at once) or a
            price that is not a positive number.
    """
    missing = [field for field in _PROPERTY_REQUIRED if not _text(form, field)]
    if missing:
        raise ValidationError(f"Please fill in: {', '.join(missing)}", field=missing[0])
    if _parse_price(form.get("price")) is None:
        raise ValidationError("Please enter a valid price", field="price")


def build_property_payload(form: Mapping[str, Any]) -> dict[str, Any]:
    """Validate the property form and convert its numeric fields.

    Price becomes a float; bedrooms, bathrooms and square footage become
    ints, or None when left blank.

    Raises:
        ValidationError: See validate_property; also for non-integer counts.
    """
    validate_property(form)
    payload = dict(form)
    payload["price"] = _parse_price(form.get("price"))
    for field in _PROPERTY_INT_FIELDS:
        raw = _text(form, field)
        if not raw:
            payload[field] = None
            continue
        try:
            payload[field] = int(raw)
        except ValueError as e:
            raise ValidationError(f"{field} must be a whole number", field=field) from e
    payload.setdefault("status", "ACTIVE")
    return payload


def validate_contact(form: Mapping[str, Any]) -> None:
    """Check the contact form.

    Raises:
        ValidationError: On the first missing or malformed field.
    """
    if not _text(form, "name"):
        raise ValidationError("Name is required", field="name")
    email = _text(form, "email")
    if not email:
        raise ValidationError("Email is required", field="email")
    if not _is_email(email):
        raise ValidationError("Please enter a valid email address", field="email")
    if not _text(form, "subject"):
        raise ValidationError("Subject is required", field="subject")
    if not _text(form, "message"):
        raise ValidationError("Message is required", field="message")
