"""
Claim record storage.

Keyed stores for submitted claim records. The intake form receives a store
explicitly; nothing here is reached as ambient global state by the form.
"""

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from ..intake.schema import ClaimRecord
from ..utils.config import get_settings

logger = logging.getLogger(__name__)


class ClaimStoreError(Exception):
    """Raised when a store cannot complete an operation."""


class ClaimStore(ABC):
    """
    Keyed store of claim records.

    Usage:
        store = SQLiteClaimStore()

        # Save a claim
        store.create(record)

        # Retrieve
        record = store.get(record.id)

        # Update status
        store.update_status(record.id, "Approved")
    """

    @abstractmethod
    def create(self, record: ClaimRecord) -> None:
        """Persist a new record. Raises ClaimStoreError if the id is taken."""

    @abstractmethod
    def get(self, claim_id: str) -> Optional[ClaimRecord]:
        """Return the record with this id, or None."""

    @abstractmethod
    def update_status(self, claim_id: str, status: str) -> Optional[ClaimRecord]:
        """Set a new status. Returns the updated record, or None if not found."""

    @abstractmethod
    def delete(self, claim_id: str) -> bool:
        """Delete a record. Returns True if something was deleted."""

    @abstractmethod
    def list_all(self) -> List[ClaimRecord]:
        """All records, in the order they were created."""

    def exists(self, claim_id: str) -> bool:
        return self.get(claim_id) is not None


class InMemoryClaimStore(ClaimStore):
    """Session-scoped store holding records in a dict."""

    def __init__(self):
        self._records: Dict[str, ClaimRecord] = {}

    def create(self, record: ClaimRecord) -> None:
        if record.id in self._records:
            raise ClaimStoreError(f"Claim {record.id} already exists")
        self._records[record.id] = record

    def get(self, claim_id: str) -> Optional[ClaimRecord]:
        return self._records.get(claim_id)

    def update_status(self, claim_id: str, status: str) -> Optional[ClaimRecord]:
        record = self._records.get(claim_id)
        if record is None:
            return None
        updated = record.with_status(status)
        self._records[claim_id] = updated
        return updated

    def delete(self, claim_id: str) -> bool:
        return self._records.pop(claim_id, None) is not None

    def list_all(self) -> List[ClaimRecord]:
        return list(self._records.values())


class SQLiteClaimStore(ClaimStore):
    """
    SQLite-based storage for claim records.

    Each record is kept as its camelCase JSON document, with the id,
    status and creation time broken out for querying.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize the claim store."""
        self.db_path = Path(db_path or get_settings().claims_db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        """Create tables if they don't exist."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS claims (
                    claim_id TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL,
                    status TEXT NOT NULL,
                    data TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_claims_status ON claims(status)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_claims_created ON claims(created_at)")
            conn.commit()

    @contextmanager
    def _get_connection(self):
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def create(self, record: ClaimRecord) -> None:
        data = record.to_storage()
        try:
            with self._get_connection() as conn:
                conn.execute(
                    "INSERT INTO claims (claim_id, created_at, status, data) VALUES (?, ?, ?, ?)",
                    (record.id, data["createdAt"], record.status, json.dumps(data)),
                )
                conn.commit()
        except sqlite3.IntegrityError as exc:
            raise ClaimStoreError(f"Claim {record.id} already exists") from exc
        logger.info(f"Saved claim {record.id} to {self.db_path}")

    def get(self, claim_id: str) -> Optional[ClaimRecord]:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT data FROM claims WHERE claim_id = ?",
                (claim_id,)
            ).fetchone()

        if row:
            return ClaimRecord.from_storage(json.loads(row["data"]))
        return None

    def update_status(self, claim_id: str, status: str) -> Optional[ClaimRecord]:
        record = self.get(claim_id)
        if record is None:
            return None

        updated = record.with_status(status)
        with self._get_connection() as conn:
            conn.execute(
                "UPDATE claims SET status = ?, data = ? WHERE claim_id = ?",
                (status, json.dumps(updated.to_storage()), claim_id)
            )
            conn.commit()
        return updated

    def delete(self, claim_id: str) -> bool:
        """Delete a claim."""
        with self._get_connection() as conn:
            result = conn.execute(
                "DELETE FROM claims WHERE claim_id = ?",
                (claim_id,)
            )
            conn.commit()
            return result.rowcount > 0

    def list_all(self, status: Optional[str] = None) -> List[ClaimRecord]:
        query = "SELECT data FROM claims"
        params = []
        if status:
            query += " WHERE status = ?"
            params.append(status)
        query += " ORDER BY created_at ASC, rowid ASC"

        with self._get_connection() as conn:
            rows = conn.execute(query, params).fetchall()
        return [ClaimRecord.from_storage(json.loads(row["data"])) for row in rows]

    def count(self, status: Optional[str] = None) -> int:
        """Count claims, optionally by status."""
        with self._get_connection() as conn:
            if status:
                row = conn.execute(
                    "SELECT COUNT(*) FROM claims WHERE status = ?",
                    (status,)
                ).fetchone()
            else:
                row = conn.execute("SELECT COUNT(*) FROM claims").fetchone()
            return row[0]


# =============================================================================
# Convenience Functions
# =============================================================================

@lru_cache
def get_claim_store() -> SQLiteClaimStore:
    """Get the default claim store (singleton)."""
    return SQLiteClaimStore()
