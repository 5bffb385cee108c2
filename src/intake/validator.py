"""
Field validation for the claim intake form.

ClaimFormData holds the constraints of every form field; validate_draft
runs it over a whole draft and reports one message per failing field.
"""

import re
from datetime import date
from typing import Dict, Optional

from pydantic import BaseModel, EmailStr, ValidationError, ValidationInfo, field_validator

from .schema import ClaimDraft, IncidentType, VehicleType


DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

REQUIRED_MESSAGES = {
    "customer_name": "Full name is required",
    "email": "Email is required",
    "phone": "Phone number is required",
    "policy_number": "Policy number is required",
    "incident_date": "Date of incident is required",
    "incident_type": "Type of incident is required",
    "description": "Description is required",
    "vehicle_brand": "Brand is required",
    "vehicle_type": "Vehicle type is required",
}

# Messages for failures reported by pydantic's own types
FORMAT_MESSAGES = {
    "email": "Invalid email address",
}


class ClaimFormData(BaseModel):
    """Constraints applied to the intake form values."""

    customer_name: str
    email: EmailStr
    phone: str
    policy_number: str

    incident_date: str
    incident_type: Optional[IncidentType] = None
    description: str
    vehicle_brand: str
    vehicle_type: Optional[VehicleType] = None

    @field_validator(
        "customer_name", "email", "phone", "policy_number",
        "incident_date", "description", "vehicle_brand",
        mode="before",
    )
    @classmethod
    def validate_required(cls, v, info: ValidationInfo):
        if not isinstance(v, str) or not v.strip():
            raise ValueError(REQUIRED_MESSAGES[info.field_name])
        return v.strip()

    @field_validator("incident_type", "vehicle_type", mode="before")
    @classmethod
    def validate_choice(cls, v, info: ValidationInfo):
        if v is None or v == "":
            raise ValueError(REQUIRED_MESSAGES[info.field_name])
        return v

    @field_validator("incident_date")
    @classmethod
    def validate_incident_date(cls, v: str) -> str:
        if not DATE_PATTERN.match(v):
            raise ValueError("Date must be in YYYY-MM-DD format")
        try:
            date.fromisoformat(v)
        except ValueError:
            raise ValueError("Date must be a valid calendar date")
        return v


def _error_message(field_name: str, error: dict) -> str:
    """Prefer the message raised by our validators over pydantic's wrapper text."""
    ctx_error = error.get("ctx", {}).get("error")
    if error.get("type") == "value_error" and ctx_error is not None:
        return str(ctx_error)
    return FORMAT_MESSAGES.get(field_name, error["msg"])


def validate_draft(draft: ClaimDraft) -> Dict[str, str]:
    """
    Validate every form field of a draft.

    Args:
        draft: The draft to check

    Returns:
        Mapping of field name to error message; empty when the draft is valid
    """
    try:
        ClaimFormData.model_validate(draft.form_values())
    except ValidationError as exc:
        errors: Dict[str, str] = {}
        for error in exc.errors():
            field_name = str(error["loc"][0])
            errors.setdefault(field_name, _error_message(field_name, error))
        return errors
    return {}
