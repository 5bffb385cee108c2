"""
Tests for the HTTP damage assessor.

Requests are served by httpx.MockTransport; no network access.
"""

import json

import httpx
import pytest

from src.intake.damage_assessor import HttpDamageAssessor, create_damage_assessor
from src.intake.errors import EnrichmentError
from src.intake.schema import ImageAttachment
from src.utils.config import Settings


ASSESSMENT_JSON = {
    "severity": "moderate",
    "estimatedCost": 1850.0,
    "repairTime": 4,
    "notes": "Rear bumper and tail light",
}


@pytest.fixture
def image() -> ImageAttachment:
    return ImageAttachment.from_bytes("bumper.jpg", b"\xff\xd8\xffimage-bytes", "image/jpeg")


def make_assessor(handler) -> HttpDamageAssessor:
    return HttpDamageAssessor("http://detector.test/", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_posts_image_and_claim_id(image):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["method"] = request.method
        seen["body"] = request.read()
        return httpx.Response(200, json=ASSESSMENT_JSON)

    assessment = await make_assessor(handler).assess(image, "123456789012")

    assert seen["method"] == "POST"
    assert seen["url"] == "http://detector.test/detect"
    assert b'name="claim_id"' in seen["body"]
    assert b"123456789012" in seen["body"]
    assert b'name="image"; filename="bumper.jpg"' in seen["body"]
    assert b"image-bytes" in seen["body"]

    assert assessment.severity == "moderate"
    assert assessment.estimated_cost == 1850.0
    assert assessment.repair_time == 4


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 404, 500, 503])
async def test_non_success_status_raises(image, status_code):
    assessor = make_assessor(lambda request: httpx.Response(status_code, json={"detail": "nope"}))

    with pytest.raises(EnrichmentError) as exc_info:
        await assessor.assess(image, "123456789012")

    assert exc_info.value.status_code == status_code
    assert exc_info.value.claim_id == "123456789012"


@pytest.mark.asyncio
async def test_transport_error_raises(image):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(EnrichmentError):
        await make_assessor(handler).assess(image, "123456789012")


@pytest.mark.asyncio
async def test_unreadable_body_raises(image):
    assessor = make_assessor(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

    with pytest.raises(EnrichmentError):
        await assessor.assess(image, "123456789012")


@pytest.mark.asyncio
async def test_incomplete_assessment_raises(image):
    body = json.dumps({"severity": "minor"}).encode()
    assessor = make_assessor(lambda request: httpx.Response(200, content=body))

    with pytest.raises(EnrichmentError):
        await assessor.assess(image, "123456789012")


def test_factory_without_url_returns_none():
    assert create_damage_assessor(Settings(damage_detection_api_url=None)) is None


def test_factory_with_url():
    assessor = create_damage_assessor(
        Settings(damage_detection_api_url="http://detector.test", damage_detection_timeout=5)
    )

    assert isinstance(assessor, HttpDamageAssessor)
    assert assessor.detect_url == "http://detector.test/detect"
    assert assessor.timeout == 5
