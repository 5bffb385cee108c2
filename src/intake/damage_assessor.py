"""
Damage assessment for claim photos.

Sends the uploaded photo to the damage detection service and parses the
assessment it returns. The interface allows swapping in other assessors.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx
from pydantic import ValidationError

from ..utils.config import Settings
from .errors import EnrichmentError
from .schema import DamageAssessment, ImageAttachment

logger = logging.getLogger(__name__)


class DamageAssessor(ABC):
    """Base class for damage assessment."""

    @abstractmethod
    async def assess(self, image: ImageAttachment, claim_id: str) -> DamageAssessment:
        """
        Assess the damage shown in a claim photo.

        Args:
            image: The attached photo
            claim_id: Identifier generated for the claim being submitted

        Returns:
            DamageAssessment reported for the photo

        Raises:
            EnrichmentError: If the assessment could not be obtained
        """
        pass


class HttpDamageAssessor(DamageAssessor):
    """Assessor backed by the damage detection HTTP service."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the HTTP assessor.

        Args:
            base_url: Base URL of the damage detection service
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def detect_url(self) -> str:
        return f"{self.base_url}/detect"

    async def assess(self, image: ImageAttachment, claim_id: str) -> DamageAssessment:
        files = {"image": (image.filename, image.content, image.content_type)}
        data = {"claim_id": claim_id}

        logger.info(f"Requesting damage assessment for claim {claim_id} ({len(image.content)} bytes)")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.detect_url, files=files, data=data)
        except httpx.HTTPError as exc:
            raise EnrichmentError(
                f"Damage detection request failed: {exc}", claim_id=claim_id
            ) from exc

        if not response.is_success:
            raise EnrichmentError(
                f"Failed to get damage assessment (HTTP {response.status_code})",
                claim_id=claim_id,
                status_code=response.status_code,
            )

        try:
            assessment = DamageAssessment.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise EnrichmentError(
                f"Damage detection returned an unreadable assessment: {exc}",
                claim_id=claim_id,
                status_code=response.status_code,
            ) from exc

        logger.info(
            f"Damage assessment for claim {claim_id}: "
            f"severity={assessment.severity}, estimated_cost={assessment.estimated_cost}"
        )
        return assessment


def create_damage_assessor(settings: Settings) -> Optional[DamageAssessor]:
    """
    Factory function to create the configured damage assessor.

    Returns:
        HttpDamageAssessor when a service URL is configured, otherwise None
    """
    if not settings.damage_detection_api_url:
        logger.warning("DAMAGE_DETECTION_API_URL is not set; photo submissions will fail")
        return None
    return HttpDamageAssessor(
        base_url=settings.damage_detection_api_url,
        timeout=settings.damage_detection_timeout,
    )
