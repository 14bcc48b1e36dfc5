"""Firestore-backed document store."""
from __future__ import annotations

import functools
import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from google.api_core.exceptions import GoogleAPIError, NotFound
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from ..config import Settings
from ..exceptions import StoreUnavailableError
from .store import DocumentStore, Query, sort_key

logger = logging.getLogger(__name__)


def _guard(fn):
    """Surface Firestore failures as StoreUnavailableError."""

    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except GoogleAPIError as exc:
            logger.error("Firestore %s failed: %s", fn.__name__, exc)
            raise StoreUnavailableError("Storage error, please try again") from exc

    return wrapper


def _snapshot_to_dict(snap) -> Dict[str, Any]:
    data = snap.to_dict() or {}
    data["id"] = snap.id
    return data


class FirestoreStore(DocumentStore):
    """Thin wrapper around the Firestore client.

    Only equality filters are sent to Firestore; search, set membership,
    sorting and paging happen client-side so no composite index is needed.
    """

    backend = "firestore"

    def __init__(self, settings: Settings) -> None:
        # Use explicit database if provided in env, else default
        if settings.FIRESTORE_DATABASE_ID:
            self.client = firestore.Client(
                project=settings.GCP_PROJECT or None,
                database=settings.FIRESTORE_DATABASE_ID,
            )
        else:
            self.client = firestore.Client()
        self._ping_collection = settings.BILLS_COLLECTION

    @_guard
    def ping(self) -> None:
        list(self.client.collection(self._ping_collection).limit(1).stream())

    def close(self) -> None:
        close = getattr(self.client, "close", None)
        if callable(close):
            close()

    @_guard
    def insert_one(self, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        col = self.client.collection(collection)
        ref = col.document(doc["id"]) if doc.get("id") else col.document()
        record = {**doc, "id": ref.id}
        ref.create(record)
        return record

    @_guard
    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        snap = self.client.collection(collection).document(str(doc_id)).get()
        return _snapshot_to_dict(snap) if snap.exists else None

    @_guard
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
        q = self.client.collection(collection)
        if query is not None:
            for key, value in query.equals.items():
                q = q.where(filter=FieldFilter(key, "==", value))
        docs = [_snapshot_to_dict(snap) for snap in q.stream()]
        if query is not None:
            docs = [d for d in docs if query.matches(d)]
        if order_by:
            docs.sort(key=sort_key(order_by), reverse=descending)
        docs = docs[skip:]
        if limit is not None:
            docs = docs[:limit]
        return docs

    @_guard
    def update_one(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ref = self.client.collection(collection).document(str(doc_id))
        updates = {k: v for k, v in updates.items() if k != "id"}
        try:
            # update() fails on a missing document instead of recreating it
            ref.update(updates)
        except NotFound:
            return None
        snap = ref.get()
        return _snapshot_to_dict(snap) if snap.exists else None

    @_guard
    def upsert(self, collection: str, doc_id: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        ref = self.client.collection(collection).document(str(doc_id))
        ref.set({**doc, "id": str(doc_id)}, merge=True)
        return _snapshot_to_dict(ref.get())

    @_guard
    def delete_one(self, collection: str, doc_id: str) -> bool:
        ref = self.client.collection(collection).document(str(doc_id))
        if not ref.get().exists:
            return False
        ref.delete()
        return True

    @_guard
    def delete_many(self, collection: str, field_name: str, value: Any) -> int:
        q = self.client.collection(collection).where(filter=FieldFilter(field_name, "==", value))
        count = 0
        for snap in q.stream():
            snap.reference.delete()
            count += 1
        return count

    @_guard
    def group_count(self, collection: str, field_name: str) -> Dict[str, int]:
        counts: Counter = Counter()
        for snap in self.client.collection(collection).select([field_name]).stream():
            value = (snap.to_dict() or {}).get(field_name)
            if value is not None:
                counts[value] += 1
        return dict(counts)
