"""Tests for client-side form validation."""

from __future__ import annotations

from typing import Any

import pytest

from homesphere.exceptions import ValidationError
from homesphere.models import Role
from homesphere.validation import (
    build_property_payload,
    build_registration,
    build_review_payload,
    validate_contact,
    validate_credentials,
    validate_property,
    validate_registration_step,
    validate_review,
)


@pytest.fixture
def personal_form() -> dict[str, Any]:
    return {
        "firstName": "Ada",
        "lastName": "Obi",
        "email": "ada@example.com",
        "password": "secret1",
        "confirmPassword": "secret1",
        "phone": "+2348000000000",
    }


@pytest.fixture
def agent_form(personal_form: dict[str, Any]) -> dict[str, Any]:
    return {
        **personal_form,
        "businessName": "Obi Homes",
        "registrationNumber": "RC-1",
        "yearsOfExperience": "4",
        "bankName": "First Bank",
        "accountNumber": "0123456789",
    }


@pytest.fixture
def property_form() -> dict[str, Any]:
    return {
        "title": "Two-bed flat",
        "propertyType": "APARTMENT",
        "address": "1 Marina Rd",
        "city": "Lagos",
        "state": "Lagos",
        "price": "250000",
        "bedrooms": "2",
        "bathrooms": "",
        "squareFootage": None,
    }


class TestCredentials:
    """Tests for login validation."""

    def test_valid_credentials_are_trimmed(self) -> None:
        credentials = validate_credentials("  ada@example.com ", "pw")
        assert credentials.email == "ada@example.com"

    @pytest.mark.parametrize(("email", "password", "field"), [("", "pw", "email"), ("a@b.co", "", "password")])
    def test_empty_fields_rejected(self, email: str, password: str, field: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_credentials(email, password)
        assert exc_info.value.field == field


class TestRegistrationSteps:
    """Tests for the registration wizard."""

    def test_valid_personal_step_passes(self, personal_form: dict[str, Any]) -> None:
        validate_registration_step(personal_form, 2, Role.USER)

    def test_missing_field_rejected(self, personal_form: dict[str, Any]) -> None:
        personal_form["phone"] = "  "
        with pytest.raises(ValidationError, match="Please fill in all required fields"):
            validate_registration_step(personal_form, 2, Role.USER)

    def test_password_mismatch_rejected(self, personal_form: dict[str, Any]) -> None:
        personal_form["confirmPassword"] = "secret2"
        with pytest.raises(ValidationError, match="Passwords do not match"):
            validate_registration_step(personal_form, 2, Role.USER)

    def test_bad_email_rejected(self, personal_form: dict[str, Any]) -> None:
        personal_form["email"] = "ada@example"
        with pytest.raises(ValidationError, match="valid email"):
            validate_registration_step(personal_form, 2, Role.USER)

    def test_short_password_rejected(self, personal_form: dict[str, Any]) -> None:
        personal_form["password"] = personal_form["confirmPassword"] = "12345"
        with pytest.raises(ValidationError, match="at least 6 characters"):
            validate_registration_step(personal_form, 2, Role.USER)

    def test_agent_step_requires_business_fields(self, personal_form: dict[str, Any]) -> None:
        with pytest.raises(ValidationError, match="agent-specific"):
            validate_registration_step(personal_form, 3, "agent")

    def test_agent_step_ignored_for_users(self, personal_form: dict[str, Any]) -> None:
        validate_registration_step(personal_form, 3, Role.USER)

    def test_build_registration_for_agent(self, agent_form: dict[str, Any]) -> None:
        data = build_registration(agent_form, "AGENT")

        assert data.role is Role.AGENT
        assert data.business_name == "Obi Homes"
        assert data.to_payload()["accountNumber"] == "0123456789"

    def test_build_registration_for_user_omits_agent_fields(self, agent_form: dict[str, Any]) -> None:
        payload = build_registration(agent_form, Role.USER).to_payload()
        assert "businessName" not in payload
        assert "confirmPassword" not in payload


class TestReview:
    """Tests for review validation."""

    def test_missing_rating(self) -> None:
        with pytest.raises(ValidationError, match="Please select a rating"):
            validate_review(None, "A lovely, bright flat")

    def test_missing_comment(self) -> None:
        with pytest.raises(ValidationError, match="Please write a review comment"):
            validate_review(4, "   ")

    def test_short_comment(self) -> None:
        with pytest.raises(ValidationError, match="at least 10 characters long"):
            validate_review(4, "  too short ")

    def test_payload(self) -> None:
        payload = build_review_payload(5, " Great location and agent ", 12)
        assert payload == {"rating": 5, "comment": "Great location and agent", "propertyId": 12}


class TestProperty:
    """Tests for the property form."""

    def test_all_missing_fields_listed(self, property_form: dict[str, Any]) -> None:
        property_form["title"] = ""
        property_form["city"] = None

        with pytest.raises(ValidationError) as exc_info:
            validate_property(property_form)

        assert exc_info.value.message == "Please fill in: title, city"

    @pytest.mark.parametrize("price", ["-5", "0", "abc"])
    def test_invalid_price(self, property_form: dict[str, Any], price: str) -> None:
        property_form["price"] = price
        with pytest.raises(ValidationError, match="Please enter a valid price"):
            validate_property(property_form)

    def test_payload_converts_numbers(self, property_form: dict[str, Any]) -> None:
        payload = build_property_payload(property_form)

        assert payload["price"] == 250000.0
        assert payload["bedrooms"] == 2
        assert payload["bathrooms"] is None
        assert payload["squareFootage"] is None

    def test_non_integer_count_rejected(self, property_form: dict[str, Any]) -> None:
        property_form["bedrooms"] = "two"
        with pytest.raises(ValidationError) as exc_info:
            build_property_payload(property_form)
        assert exc_info.value.field == "bedrooms"


class TestContact:
    """Tests for the contact form."""

    def test_valid_form(self) -> None:
        validate_contact({"name": "Ada", "email": "ada@example.com", "subject": "Hi", "message": "Hello"})

    def test_invalid_email(self) -> None:
        with pytest.raises(ValidationError, match="valid email"):
            validate_contact({"name": "Ada", "email": "nope", "subject": "Hi", "message": "Hello"})

    def test_missing_message(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_contact({"name": "Ada", "email": "ada@example.com", "subject": "Hi"})
        assert exc_info.value.field == "message"
