"""
Tests for intake form field validation.
"""

import pytest

from conftest import JANE_DOE
from src.intake.schema import ClaimDraft
from src.intake.validator import REQUIRED_MESSAGES, validate_draft


def create_valid_draft(**overrides) -> ClaimDraft:
    values = dict(JANE_DOE)
    values.update(overrides)
    return ClaimDraft(**values)


def test_valid_draft_has_no_errors():
    assert validate_draft(create_valid_draft()) == {}


def test_empty_draft_reports_every_field():
    errors = validate_draft(ClaimDraft())

    assert errors == REQUIRED_MESSAGES


@pytest.mark.parametrize("field_name", [
    "customer_name", "email", "phone", "policy_number",
    "incident_date", "description", "vehicle_brand",
])
def test_blank_text_field_is_required(field_name):
    errors = validate_draft(create_valid_draft(**{field_name: "   "}))

    assert errors == {field_name: REQUIRED_MESSAGES[field_name]}


@pytest.mark.parametrize("field_name", ["incident_type", "vehicle_type"])
def test_missing_choice_is_required(field_name):
    errors = validate_draft(create_valid_draft(**{field_name: None}))

    assert errors == {field_name: REQUIRED_MESSAGES[field_name]}


@pytest.mark.parametrize("email", ["jane", "jane@", "@x.com", "jane@x", "jane doe@x.com"])
def test_invalid_email(email):
    errors = validate_draft(create_valid_draft(email=email))

    assert errors == {"email": "Invalid email address"}


@pytest.mark.parametrize("email", ["jane.doe+claims@example.co.uk", "  jane@x.com  "])
def test_valid_email(email):
    assert validate_draft(create_valid_draft(email=email)) == {}


@pytest.mark.parametrize("incident_date", ["05/01/2024", "2024-1-5", "yesterday", "20240105"])
def test_incident_date_format(incident_date):
    errors = validate_draft(create_valid_draft(incident_date=incident_date))

    assert errors == {"incident_date": "Date must be in YYYY-MM-DD format"}


def test_incident_date_must_exist_on_calendar():
    errors = validate_draft(create_valid_draft(incident_date="2024-02-30"))

    assert errors == {"incident_date": "Date must be a valid calendar date"}


def test_image_is_optional():
    draft = create_valid_draft()
    draft.image = None

    assert validate_draft(draft) == {}
