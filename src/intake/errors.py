"""Error types for claim intake and submission."""

from typing import Dict, Optional


SUBMISSION_FAILED_MESSAGE = "There was a problem submitting your claim."


class IntakeError(Exception):
    """Base class for claim intake errors."""


class UnknownFieldError(IntakeError, KeyError):
    """Raised when a field name is not part of the intake form."""

    def __init__(self, field_name: str):
        super().__init__(field_name)
        self.field_name = field_name

    def __str__(self) -> str:
        return f"Unknown form field: {self.field_name!r}"


class DraftValidationError(IntakeError):
    """
    Raised when the draft fails field validation.

    Attributes:
        errors: Mapping of field name to error message
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Claim form has invalid fields: {fields}")


class SubmissionError(IntakeError):
    """
    A submission attempt failed.

    Every subclass reduces to the same user-visible message; the
    specific cause is kept for logging.
    """

    user_message = SUBMISSION_FAILED_MESSAGE

    def __init__(self, message: str, claim_id: Optional[str] = None):
        super().__init__(message)
        self.claim_id = claim_id


class EnrichmentError(SubmissionError):
    """Damage assessment failed, returned a non-success status, or is not configured."""

    def __init__(self, message: str, claim_id: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, claim_id=claim_id)
        self.status_code = status_code


class StorageError(SubmissionError):
    """The claim could not be persisted or was not found after saving."""


class SubmissionInProgress(IntakeError):
    """A submission is already running for this form."""
