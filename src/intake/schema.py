"""
Canonical schema for car claim intake.

Defines the mutable draft edited by the intake form, the immutable record
produced on submission, and the damage assessment returned by the image
analysis service.
"""

import base64
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ============================================================================
# Enums
# ============================================================================


class IncidentType(str, Enum):
    """Type of incident being claimed."""
    COLLISION = "collision"
    FIRE = "fire"
    THEFT = "theft"
    VANDALISM = "vandalism"
    NATURAL = "natural"
    MECHANICAL = "mechanical"


class VehicleType(str, Enum):
    """Vehicle class by wheel count."""
    TWO_WHEELER = "2-wheeler"
    THREE_WHEELER = "3-wheeler"
    FOUR_WHEELER = "4-wheeler"


class IntakeStep(str, Enum):
    """Steps of the intake form, in the order they are presented."""
    CUSTOMER = "customer"
    INCIDENT = "incident"
    EVIDENCE = "evidence"
    REVIEW = "review"

    @classmethod
    def ordered(cls) -> list["IntakeStep"]:
        return [cls.CUSTOMER, cls.INCIDENT, cls.EVIDENCE, cls.REVIEW]

    @property
    def position(self) -> int:
        return IntakeStep.ordered().index(self)

    def next(self) -> Optional["IntakeStep"]:
        """Following step, or None on review."""
        steps = IntakeStep.ordered()
        return steps[self.position + 1] if self.position + 1 < len(steps) else None

    def previous(self) -> Optional["IntakeStep"]:
        """Preceding step, or None on customer."""
        return IntakeStep.ordered()[self.position - 1] if self.position > 0 else None


NEW_CLAIM_STATUS = "New"


# ============================================================================
# Evidence
# ============================================================================


class ImageAttachment(BaseModel):
    """A damage photo attached to the draft, with its preview reference."""

    filename: str = Field(description="Original file name of the upload")
    content_type: str = Field(default="image/jpeg", description="MIME type of the upload")
    content: bytes = Field(description="Raw image bytes sent to damage assessment")
    preview_ref: str = Field(description="Reference used to render a preview of the image")

    @classmethod
    def from_bytes(cls, filename: str, content: bytes, content_type: str = "image/jpeg") -> "ImageAttachment":
        """Build an attachment, deriving a data URI preview from the bytes."""
        encoded = base64.b64encode(content).decode("ascii")
        return cls(
            filename=filename,
            content_type=content_type,
            content=content,
            preview_ref=f"data:{content_type};base64,{encoded}",
        )


class DamageAssessment(BaseModel):
    """Result of the external damage assessment for a claim photo."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    severity: str = Field(description="Severity label reported by the service")
    estimated_cost: float = Field(description="Estimated repair cost")
    repair_time: float = Field(description="Estimated repair time")
    notes: Optional[str] = Field(default=None, description="Free-text notes from the assessor")


# ============================================================================
# Draft and Record
# ============================================================================


class ClaimDraft(BaseModel):
    """
    In-progress claim data edited through the intake form.

    Field values default to empty so that a fresh draft mirrors a blank form.
    """

    customer_name: str = ""
    email: str = ""
    phone: str = ""
    policy_number: str = ""

    incident_date: str = Field(default="", description="Date of incident, YYYY-MM-DD")
    incident_type: Optional[IncidentType] = None
    description: str = ""
    vehicle_brand: str = ""
    vehicle_type: Optional[VehicleType] = None

    image: Optional[ImageAttachment] = None

    def form_values(self) -> dict:
        """Return the form field values, excluding the attachment."""
        return self.model_dump(exclude={"image"})


class ClaimRecord(BaseModel):
    """
    Persisted claim, immutable once created.

    Serializes with camelCase keys, the shape stored by every claim store.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="12-digit claim identifier")

    customer_name: str
    email: str
    phone: str
    policy_number: str

    incident_date: str
    incident_type: IncidentType
    description: str
    vehicle_brand: str
    vehicle_type: VehicleType

    image: Optional[str] = Field(default=None, description="Preview reference of the damage photo")
    status: str = Field(default=NEW_CLAIM_STATUS, description="Workflow status")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    damage_assessment: Optional[DamageAssessment] = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Ensure the identifier is non-empty."""
        if not v or not v.strip():
            raise ValueError("id cannot be empty")
        return v.strip()

    def with_status(self, status: str) -> "ClaimRecord":
        """Return a copy of this record carrying a new status."""
        return self.model_copy(update={"status": status})

    def to_storage(self) -> dict:
        """Serialize for storage, keyed the way records are stored."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_storage(cls, data: dict) -> "ClaimRecord":
        return cls.model_validate(data)


class SubmissionOutcome(BaseModel):
    """What the form should do after a submission attempt."""

    success: bool
    record: Optional[ClaimRecord] = None
    error: Optional[str] = None
    redirect_to: Optional[str] = Field(default=None, description="Detail view path on success")

    @classmethod
    def succeeded(cls, record: ClaimRecord) -> "SubmissionOutcome":
        return cls(success=True, record=record, redirect_to=f"/claims/{record.id}")

    @classmethod
    def failed(cls, message: str) -> "SubmissionOutcome":
        return cls(success=False, error=message)
