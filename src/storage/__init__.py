"""
Storage module for persisting submitted claim records.

Provides:
- An in-memory store scoped to one session
- A SQLite-based store for durable local storage
"""

from .claim_store import (
    ClaimStore,
    ClaimStoreError,
    InMemoryClaimStore,
    SQLiteClaimStore,
    get_claim_store,
)

__all__ = [
    "ClaimStore",
    "ClaimStoreError",
    "InMemoryClaimStore",
    "SQLiteClaimStore",
    "get_claim_store",
]
