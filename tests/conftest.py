"""
Shared fixtures for claim intake tests.
"""

import asyncio
from typing import List, Optional

import pytest

from src.intake.damage_assessor import DamageAssessor
from src.intake.errors import EnrichmentError
from src.intake.form_controller import ClaimFormController
from src.intake.schema import ClaimRecord, DamageAssessment, ImageAttachment, IntakeStep
from src.intake.submission import SubmissionOrchestrator
from src.storage.claim_store import InMemoryClaimStore


JANE_DOE = {
    "customer_name": "Jane Doe",
    "email": "jane@x.com",
    "phone": "555-0100",
    "policy_number": "POL123",
    "incident_date": "2024-01-05",
    "incident_type": "collision",
    "description": "rear-ended at light",
    "vehicle_brand": "Toyota",
    "vehicle_type": "4-wheeler",
}

CUSTOMER_FIELDS = ["customer_name", "email", "phone", "policy_number"]
INCIDENT_FIELDS = ["incident_date", "incident_type", "description", "vehicle_brand", "vehicle_type"]


class CountingStore(InMemoryClaimStore):
    """In-memory store that records create calls."""

    def __init__(self):
        super().__init__()
        self.create_calls: List[ClaimRecord] = []

    def create(self, record: ClaimRecord) -> None:
        self.create_calls.append(record)
        super().create(record)


class FakeAssessor(DamageAssessor):
    """Assessor returning a fixed assessment, or failing on demand."""

    def __init__(self, assessment: Optional[DamageAssessment] = None, fail: bool = False, delay: float = 0.0):
        self.assessment = assessment or DamageAssessment(
            severity="moderate", estimated_cost=1200.0, repair_time=3, notes="Rear bumper dented"
        )
        self.fail = fail
        self.delay = delay
        self.calls: List[tuple] = []

    async def assess(self, image: ImageAttachment, claim_id: str) -> DamageAssessment:
        self.calls.append((image.filename, claim_id))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise EnrichmentError("Failed to get damage assessment (HTTP 500)", claim_id=claim_id, status_code=500)
        return self.assessment


def fill_fields(controller: ClaimFormController, values: dict) -> None:
    for name, value in values.items():
        controller.set_field(name, value)


@pytest.fixture
def store() -> CountingStore:
    return CountingStore()


@pytest.fixture
def assessor() -> FakeAssessor:
    return FakeAssessor()


@pytest.fixture
def orchestrator(store, assessor) -> SubmissionOrchestrator:
    return SubmissionOrchestrator(store=store, assessor=assessor)


@pytest.fixture
def controller(orchestrator) -> ClaimFormController:
    return ClaimFormController(orchestrator)


@pytest.fixture
def review_controller(controller) -> ClaimFormController:
    """Controller with the Jane Doe claim filled in, on the review step."""
    fill_fields(controller, JANE_DOE)
    assert controller.jump_to(IntakeStep.REVIEW)
    return controller
