"""
Car claim intake module.

Multi-step claim form with optional photo damage assessment.
"""

from .schema import (
    # Enums
    IncidentType,
    VehicleType,
    IntakeStep,
    # Models
    ImageAttachment,
    DamageAssessment,
    ClaimDraft,
    ClaimRecord,
    SubmissionOutcome,
)
from .errors import (
    IntakeError,
    UnknownFieldError,
    DraftValidationError,
    SubmissionError,
    EnrichmentError,
    StorageError,
    SubmissionInProgress,
)
from .validator import validate_draft
from .damage_assessor import DamageAssessor, HttpDamageAssessor, create_damage_assessor
from .submission import SubmissionOrchestrator, generate_claim_id
from .form_controller import ClaimFormController, FIELD_DEFINITIONS

__all__ = [
    # Functions
    "validate_draft",
    "generate_claim_id",
    "create_damage_assessor",
    # Classes
    "ClaimFormController",
    "SubmissionOrchestrator",
    "DamageAssessor",
    "HttpDamageAssessor",
    "FIELD_DEFINITIONS",
    # Enums
    "IncidentType",
    "VehicleType",
    "IntakeStep",
    # Models
    "ImageAttachment",
    "DamageAssessment",
    "ClaimDraft",
    "ClaimRecord",
    "SubmissionOutcome",
    # Errors
    "IntakeError",
    "UnknownFieldError",
    "DraftValidationError",
    "SubmissionError",
    "EnrichmentError",
    "StorageError",
    "SubmissionInProgress",
]
