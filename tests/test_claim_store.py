"""
Tests for claim record stores.

Both stores are run through the same checks.
"""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import JANE_DOE
from src.intake.schema import ClaimRecord, DamageAssessment
from src.storage.claim_store import ClaimStoreError, InMemoryClaimStore, SQLiteClaimStore


BASE_TIME = datetime(2024, 1, 6, 9, 30, tzinfo=timezone.utc)


def create_record(claim_id: str, minutes: int = 0, **overrides) -> ClaimRecord:
    values = dict(JANE_DOE)
    values.update(overrides)
    return ClaimRecord(id=claim_id, created_at=BASE_TIME + timedelta(minutes=minutes), **values)


@pytest.fixture(params=["memory", "sqlite"])
def claim_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryClaimStore()
    return SQLiteClaimStore(tmp_path / "claims.db")


def test_get_missing_returns_none(claim_store):
    assert claim_store.get("000000000000") is None
    assert not claim_store.exists("000000000000")


def test_create_then_get(claim_store):
    record = create_record(
        "123456789012",
        damage_assessment=DamageAssessment(severity="minor", estimated_cost=250.0, repair_time=2, notes="scratch"),
    )
    claim_store.create(record)

    assert claim_store.get("123456789012") == record


def test_duplicate_id_rejected(claim_store):
    claim_store.create(create_record("123456789012"))

    with pytest.raises(ClaimStoreError):
        claim_store.create(create_record("123456789012"))


def test_update_status(claim_store):
    claim_store.create(create_record("123456789012"))

    updated = claim_store.update_status("123456789012", "Approved")

    assert updated.status == "Approved"
    assert claim_store.get("123456789012").status == "Approved"


def test_update_status_missing(claim_store):
    assert claim_store.update_status("000000000000", "Approved") is None


def test_delete(claim_store):
    claim_store.create(create_record("123456789012"))

    assert claim_store.delete("123456789012")
    assert claim_store.get("123456789012") is None
    assert not claim_store.delete("123456789012")


def test_list_all_in_creation_order(claim_store):
    claim_store.create(create_record("100000000000", minutes=0))
    claim_store.create(create_record("200000000000", minutes=5))
    claim_store.create(create_record("300000000000", minutes=10))

    assert [r.id for r in claim_store.list_all()] == ["100000000000", "200000000000", "300000000000"]


def test_sqlite_persists_across_instances(tmp_path):
    db_path = tmp_path / "claims.db"
    SQLiteClaimStore(db_path).create(create_record("123456789012"))

    reopened = SQLiteClaimStore(db_path)

    assert reopened.get("123456789012").customer_name == "Jane Doe"
    assert reopened.count() == 1


def test_sqlite_filters_by_status(tmp_path):
    store = SQLiteClaimStore(tmp_path / "claims.db")
    store.create(create_record("100000000000"))
    store.create(create_record("200000000000", minutes=1))
    store.update_status("200000000000", "Approved")

    assert [r.id for r in store.list_all(status="Approved")] == ["200000000000"]
    assert store.count(status="New") == 1
