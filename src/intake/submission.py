"""
Submission of completed claim drafts.

Assigns the claim identifier, requests a damage assessment when a photo is
attached, stores the record and confirms it can be read back.
"""

import logging
import random
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Optional

from .damage_assessor import DamageAssessor
from .errors import EnrichmentError, StorageError
from .schema import NEW_CLAIM_STATUS, ClaimDraft, ClaimRecord, DamageAssessment

if TYPE_CHECKING:
    from ..storage.claim_store import ClaimStore

logger = logging.getLogger(__name__)

CLAIM_ID_LENGTH = 12
MAX_ID_ATTEMPTS = 10

_id_random = random.SystemRandom()


def generate_claim_id() -> str:
    """
    Generate a 12-digit numeric claim ID.

    Digits are drawn uniformly; no check is made against existing claims.
    """
    return "".join(_id_random.choice("0123456789") for _ in range(CLAIM_ID_LENGTH))


class SubmissionOrchestrator:
    """
    Turns a completed draft into a stored claim record.

    The draft is read, never modified. Any failure aborts the whole
    submission: nothing is stored unless the assessment (when needed)
    succeeded.
    """

    def __init__(
        self,
        store: "ClaimStore",
        assessor: Optional[DamageAssessor] = None,
        id_generator: Callable[[], str] = generate_claim_id,
        ensure_unique_ids: bool = False,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        """
        Initialize the orchestrator.

        Args:
            store: Store receiving the claim record
            assessor: Damage assessor used when a photo is attached
            id_generator: Produces new claim identifiers
            ensure_unique_ids: Redraw identifiers already present in the store
            clock: Source of the creation timestamp
        """
        self.store = store
        self.assessor = assessor
        self.id_generator = id_generator
        self.ensure_unique_ids = ensure_unique_ids
        self.clock = clock

    def _new_claim_id(self) -> str:
        if not self.ensure_unique_ids:
            return self.id_generator()

        for _ in range(MAX_ID_ATTEMPTS):
            claim_id = self.id_generator()
            if not self.store.exists(claim_id):
                return claim_id
            logger.warning(f"Claim ID {claim_id} already in use, drawing another")
        raise StorageError(f"Could not draw an unused claim ID after {MAX_ID_ATTEMPTS} attempts")

    async def _assess(self, draft: ClaimDraft, claim_id: str) -> Optional[DamageAssessment]:
        if draft.image is None:
            return None
        if self.assessor is None:
            raise EnrichmentError("Damage detection service is not configured", claim_id=claim_id)
        return await self.assessor.assess(draft.image, claim_id)

    def build_record(
        self,
        claim_id: str,
        draft: ClaimDraft,
        assessment: Optional[DamageAssessment],
    ) -> ClaimRecord:
        """Assemble the claim record from the draft and its assessment."""
        return ClaimRecord(
            id=claim_id,
            **draft.form_values(),
            image=draft.image.preview_ref if draft.image else None,
            status=NEW_CLAIM_STATUS,
            created_at=self.clock(),
            damage_assessment=assessment,
        )

    async def submit(self, draft: ClaimDraft) -> ClaimRecord:
        """
        Submit a validated draft.

        Args:
            draft: Completed draft; its fields must already pass validation

        Returns:
            The stored ClaimRecord, as read back from the store

        Raises:
            EnrichmentError: The damage assessment failed
            StorageError: The record could not be stored or read back
        """
        claim_id = self._new_claim_id()
        logger.info(f"Submitting claim {claim_id} (photo attached: {draft.image is not None})")

        assessment = await self._assess(draft, claim_id)
        record = self.build_record(claim_id, draft, assessment)

        try:
            self.store.create(record)
        except Exception as exc:
            raise StorageError(f"Failed to save claim data: {exc}", claim_id=claim_id) from exc

        try:
            saved = self.store.get(claim_id)
        except Exception as exc:
            raise StorageError(f"Failed to read back claim data: {exc}", claim_id=claim_id) from exc

        if saved is None:
            raise StorageError("Failed to save claim data", claim_id=claim_id)

        logger.info(f"Claim {claim_id} stored with status {saved.status}")
        return saved
