"""
Claim form controller for the multi-step intake form.

Tracks the active step, the draft being edited and its validation state,
and hands a completed draft to the submission orchestrator.
"""

import logging
from typing import Any, Dict, Optional, Protocol, Set

from .errors import (
    DraftValidationError,
    SubmissionError,
    SubmissionInProgress,
    UnknownFieldError,
    SUBMISSION_FAILED_MESSAGE,
)
from .schema import (
    ClaimDraft,
    ImageAttachment,
    IncidentType,
    IntakeStep,
    SubmissionOutcome,
    VehicleType,
)
from .submission import SubmissionOrchestrator
from .validator import validate_draft

logger = logging.getLogger(__name__)


# Field definitions with step, label and requirement
FIELD_DEFINITIONS = [
    # Customer step
    {"id": "customer_name", "step": IntakeStep.CUSTOMER, "label": "Full Name", "required": True},
    {"id": "email", "step": IntakeStep.CUSTOMER, "label": "Email", "required": True},
    {"id": "phone", "step": IntakeStep.CUSTOMER, "label": "Phone Number", "required": True},
    {"id": "policy_number", "step": IntakeStep.CUSTOMER, "label": "Policy Number", "required": True},
    # Incident step
    {"id": "incident_date", "step": IntakeStep.INCIDENT, "label": "Date of Incident", "required": True},
    {"id": "incident_type", "step": IntakeStep.INCIDENT, "label": "Type of Incident", "required": True},
    {"id": "vehicle_type", "step": IntakeStep.INCIDENT, "label": "Vehicle Type", "required": True},
    {"id": "vehicle_brand", "step": IntakeStep.INCIDENT, "label": "Brand", "required": True},
    {"id": "description", "step": IntakeStep.INCIDENT, "label": "Description", "required": True},
]

FIELD_IDS = {f["id"] for f in FIELD_DEFINITIONS}

ENUM_FIELDS = {
    "incident_type": IncidentType,
    "vehicle_type": VehicleType,
}

# Review listing order, as shown on the review step
REVIEW_LABELS = [
    ("customer_name", "Name"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("policy_number", "Policy #"),
    ("incident_date", "Date"),
    ("incident_type", "Type"),
    ("vehicle_brand", "Brand"),
    ("vehicle_type", "Vehicle"),
    ("description", "Description"),
]


def fields_for_step(step: IntakeStep) -> list[str]:
    """Required field IDs collected on a step."""
    return [f["id"] for f in FIELD_DEFINITIONS if f["step"] == step and f["required"]]


class Navigator(Protocol):
    """Receives the navigation signal after a submission attempt."""

    def go_to(self, path: str) -> None: ...

    def show_error(self, message: str) -> None: ...


class ClaimFormController:
    """
    Manages one intake session of the claim form.

    Steps run customer -> incident -> evidence -> review. Moving forward
    with advance() is never gated; jumping to a step requires every step
    before it to be complete. Advancing from review submits the claim.
    """

    def __init__(
        self,
        orchestrator: SubmissionOrchestrator,
        navigator: Optional[Navigator] = None,
    ):
        """Initialize a new form session with an empty draft."""
        self.orchestrator = orchestrator
        self.navigator = navigator

        self.draft = ClaimDraft()
        self.step = IntakeStep.CUSTOMER
        self.busy = False
        self.submitted = False
        self.last_outcome: Optional[SubmissionOutcome] = None

        self._touched: Set[str] = set()
        self._coercion_errors: Dict[str, str] = {}
        self._all_errors: Dict[str, str] = {}

    # ------------------------------------------------------------------
    # Field editing
    # ------------------------------------------------------------------

    @property
    def errors(self) -> Dict[str, str]:
        """Outstanding validation errors, for fields the user has edited."""
        return {name: msg for name, msg in self._all_errors.items() if name in self._touched}

    def _ensure_editable(self) -> None:
        if self.busy:
            raise RuntimeError("Claim is being submitted")
        if self.submitted:
            raise RuntimeError("Claim has already been submitted")

    def _convert_enum_value(self, name: str, value: Any) -> Any:
        """Convert string values to the field's enum type."""
        enum_cls = ENUM_FIELDS[name]
        if value is None or isinstance(value, enum_cls):
            return value
        value_norm = str(value).lower().strip()
        if not value_norm:
            return None
        try:
            return enum_cls(value_norm)
        except ValueError:
            choices = ", ".join(member.value for member in enum_cls)
            self._coercion_errors[name] = f"Invalid option {value!r}; expected one of: {choices}"
            return None

    def set_field(self, name: str, value: Any) -> Dict[str, str]:
        """
        Update a form field and re-validate the whole draft.

        Args:
            name: Field ID (see FIELD_DEFINITIONS)
            value: New value; enum fields accept members or their string values

        Returns:
            The outstanding validation errors after the update
        """
        self._ensure_editable()
        if name not in FIELD_IDS:
            raise UnknownFieldError(name)

        self._coercion_errors.pop(name, None)
        if name in ENUM_FIELDS:
            value = self._convert_enum_value(name, value)
        elif value is None:
            value = ""
        else:
            value = str(value).strip()

        setattr(self.draft, name, value)
        self._touched.add(name)
        self._revalidate()
        return self.errors

    def _revalidate(self) -> None:
        errors = validate_draft(self.draft)
        errors.update(self._coercion_errors)
        self._all_errors = errors

    def attach_image(self, filename: str, content: bytes, content_type: str = "image/jpeg") -> ImageAttachment:
        """Attach a damage photo, replacing any previous one."""
        self._ensure_editable()
        self.draft.image = ImageAttachment.from_bytes(filename, content, content_type)
        logger.debug(f"Attached image {filename} ({len(content)} bytes)")
        return self.draft.image

    def clear_image(self) -> None:
        """Remove the attached photo and its preview."""
        self._ensure_editable()
        self.draft.image = None

    # ------------------------------------------------------------------
    # Step state
    # ------------------------------------------------------------------

    def is_step_complete(self, step: IntakeStep) -> bool:
        """
        Check whether a step's fields are filled in.

        Any outstanding error on the draft makes the customer and
        incident steps incomplete. Evidence is always complete; review
        is never complete on its own.
        """
        if step == IntakeStep.EVIDENCE:
            return True
        if step == IntakeStep.REVIEW:
            return False

        if self.errors:
            return False
        return all(getattr(self.draft, name) for name in fields_for_step(step))

    def can_jump_to(self, step: IntakeStep) -> bool:
        """Whether every step before `step` is complete."""
        return all(self.is_step_complete(s) for s in IntakeStep.ordered()[:step.position])

    def jump_to(self, step: IntakeStep) -> bool:
        """
        Move directly to a step.

        Returns:
            True if the step changed, False if the request was ignored
        """
        if self.submitted or self.busy or not self.can_jump_to(step):
            logger.debug(f"Ignoring jump to {step.value} from {self.step.value}")
            return False
        self.step = step
        return True

    def retreat(self) -> IntakeStep:
        """Go back one step. No-op on the first step."""
        if not self.busy and not self.submitted:
            previous = self.step.previous()
            if previous is not None:
                self.step = previous
        return self.step

    async def advance(self) -> Optional[SubmissionOutcome]:
        """
        Move to the next step, or submit when on review.

        Returns:
            The SubmissionOutcome when a submission ran, otherwise None
        """
        if self.step == IntakeStep.REVIEW:
            return await self.submit()

        if not self.busy and not self.submitted:
            following = self.step.next()
            logger.debug(f"Advancing from {self.step.value} to {following.value}")
            self.step = following
        return None

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def _begin_submission(self) -> None:
        if self.busy:
            raise SubmissionInProgress("A submission is already running")
        if self.submitted:
            raise SubmissionInProgress("Claim has already been submitted")

    def _check_ready(self) -> None:
        if self.step != IntakeStep.REVIEW:
            raise DraftValidationError({"step": f"Cannot submit from the {self.step.value} step"})

        errors = validate_draft(self.draft)
        errors.update(self._coercion_errors)
        if errors:
            # Everything is now outstanding so the form shows every problem
            self._touched.update(FIELD_IDS)
            self._all_errors = errors
            raise DraftValidationError(errors)

        if not (self.is_step_complete(IntakeStep.CUSTOMER) and self.is_step_complete(IntakeStep.INCIDENT)):
            raise DraftValidationError({"step": "Customer and incident details are incomplete"})

    async def submit(self) -> Optional[SubmissionOutcome]:
        """
        Submit the claim.

        Ignored (returns None) while another submission is running or after
        a successful one. Otherwise returns the outcome; failures leave the
        form on the review step so the user can retry.
        """
        try:
            self._begin_submission()
        except SubmissionInProgress as exc:
            logger.debug(f"Ignoring submission: {exc}")
            return None

        try:
            self._check_ready()
        except DraftValidationError as exc:
            logger.info(f"Submission blocked by validation: {exc}")
            return self._finish(SubmissionOutcome.failed(str(exc)))

        self.busy = True
        try:
            record = await self.orchestrator.submit(self.draft.model_copy(deep=True))
        except SubmissionError as exc:
            logger.error(f"Submission error: {exc}", exc_info=True)
            outcome = SubmissionOutcome.failed(exc.user_message)
        except Exception as exc:
            logger.error(f"Unexpected submission error: {exc}", exc_info=True)
            outcome = SubmissionOutcome.failed(SUBMISSION_FAILED_MESSAGE)
        else:
            self.submitted = True
            outcome = SubmissionOutcome.succeeded(record)
        finally:
            self.busy = False

        return self._finish(outcome)

    def _finish(self, outcome: SubmissionOutcome) -> SubmissionOutcome:
        self.last_outcome = outcome
        if self.navigator is not None:
            if outcome.success:
                self.navigator.go_to(outcome.redirect_to)
            else:
                self.navigator.show_error(outcome.error)
        return outcome

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Export the current form state."""
        return {
            "step": self.step.value,
            "values": self.draft.model_dump(mode="json", exclude={"image"}),
            "image_preview": self.draft.image.preview_ref if self.draft.image else None,
            "errors": self.errors,
            "busy": self.busy,
            "submitted": self.submitted,
            "steps_enabled": {s.value: self.can_jump_to(s) for s in IntakeStep.ordered()},
        }

    def get_summary(self) -> str:
        """Generate the review listing of the entered details."""
        lines = []
        for name, label in REVIEW_LABELS:
            value = getattr(self.draft, name)
            if isinstance(value, (IncidentType, VehicleType)):
                value = value.value
            lines.append(f"{label}: {value or ''}")
        if self.draft.image:
            lines.append(f"Photo: {self.draft.image.filename}")
        return "\n".join(lines)
