"""Document store abstraction shared by the Firestore and in-memory backends.

The core only needs collection-style storage: insert, filtered/sorted/paged
reads, counts, merge updates, single and bulk deletes and a group-by count.
`open_store` picks one implementation at startup; nothing re-decides per call.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..config import Settings
from ..exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class Query:
    """Filter understood by every store.

    - `equals`: exact match per field
    - `search` over `search_fields`: case-insensitive substring, any field may match
    - `include` / `exclude`: set membership per field ($in / $nin)
    """

    equals: Dict[str, Any] = field(default_factory=dict)
    search: Optional[str] = None
    search_fields: Sequence[str] = ()
    include: Dict[str, Sequence[Any]] = field(default_factory=dict)
    exclude: Dict[str, Sequence[Any]] = field(default_factory=dict)

    def matches(self, doc: Dict[str, Any]) -> bool:
        for key, value in self.equals.items():
            if doc.get(key) != value:
                return False
        for key, values in self.include.items():
            if doc.get(key) not in values:
                return False
        for key, values in self.exclude.items():
            if doc.get(key) in values:
                return False
        if self.search:
            needle = self.search.lower()
            if not any(needle in str(doc.get(f) or "").lower() for f in self.search_fields):
                return False
        return True


def sort_key(order_by: str):
    # documents missing the field sort after everything else when descending
    def _key(doc: Dict[str, Any]):
        value = doc.get(order_by)
        return (value is not None, value if value is not None else 0)

    return _key


class DocumentStore(ABC):
    """Collection-style storage used by the bill, workflow and settings stores."""

    backend: str = "abstract"

    @abstractmethod
    def insert_one(self, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        """Insert `doc`, assigning an `id` unless one is present. Returns the stored copy."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def find(
        self,
        collection: str,
        query: Optional[Query] = None,
        *,
        order_by: Optional[str] = None,
        descending: bool = True,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        ...

    def count(self, collection: str, query: Optional[Query] = None) -> int:
        return len(self.find(collection, query))

    @abstractmethod
    def update_one(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Shallow-merge `updates` into an existing document.

        Returns the merged document, or None when the id does not exist. Never
        creates a document.
        """

    @abstractmethod
    def upsert(self, collection: str, doc_id: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    def delete_one(self, collection: str, doc_id: str) -> bool:
        ...

    @abstractmethod
    def delete_many(self, collection: str, field_name: str, value: Any) -> int:
        """Delete every document whose `field_name` equals `value`. Zero matches is fine."""

    @abstractmethod
    def group_count(self, collection: str, field_name: str) -> Dict[str, int]:
        """Count documents per distinct value of `field_name`; absent values are skipped."""

    def ping(self) -> None:
        """Raise if the backend cannot be reached."""

    def close(self) -> None:
        """Release client resources."""


def open_store(settings: Settings) -> DocumentStore:
    """Build the store selected by configuration. Called once per process."""
    from .memory_store import MemoryStore
    from .sample_data import seed_sample_data

    def _memory() -> DocumentStore:
        store = MemoryStore()
        if settings.SEED_SAMPLE_DATA:
            seed_sample_data(store, settings)
        return store

    if settings.STORE_BACKEND == "memory":
        logger.info("Using in-memory store (seeded=%s)", settings.SEED_SAMPLE_DATA)
        return _memory()

    if settings.STORE_BACKEND != "firestore":
        raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND!r}")

    try:
        from .firestore import FirestoreStore

        store = FirestoreStore(settings)
        store.ping()
        logger.info("Using Firestore store (database=%s)", settings.FIRESTORE_DATABASE_ID)
        return store
    except Exception as exc:  # noqa: BLE001
        if not settings.STORE_FALLBACK_MEMORY:
            raise StoreUnavailableError(f"Firestore unavailable: {exc}") from exc
        # Development affordance only: the fallback shares nothing with Firestore
        # and resets on every process start.
        logger.warning("Firestore unavailable (%s); falling back to in-memory store", exc)
        return _memory()
