"""In-process document store used for tests, local development and as the
fallback when Firestore cannot be reached at startup."""
from __future__ import annotations

import copy
import itertools
import threading
from collections import Counter
from typing import Any, Dict, List, Optional
from uuid import uuid4

from .store import DocumentStore, Query, sort_key


class MemoryStore(DocumentStore):
    """Dict-of-dicts store guarded by a single lock.

    Reads and writes go through deep copies so callers never share state with
    the store.
    """

    backend = "memory"

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        # insertion order, used to break ties between equal sort values
        self._seq: Dict[str, int] = {}
        self._counter = itertools.count()

    def _col(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(name, {})

    def insert_one(self, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        record = copy.deepcopy(doc)
        if not record.get("id"):
            record["id"] = uuid4().hex
        with self._lock:
            col = self._col(collection)
            if record["id"] in col:
                raise ValueError(f"{collection} with id={record['id']} already exists")
            col[record["id"]] = record
            self._seq[f"{collection}/{record['id']}"] = next(self._counter)
            return copy.deepcopy(record)

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            doc = self._col(collection).get(str(doc_id))
            return copy.deepcopy(doc) if doc is not None else None

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
        with self._lock:
            rows = [d for d in self._col(collection).values() if query is None or query.matches(d)]
            if order_by:
                by_field = sort_key(order_by)
                rows.sort(
                    key=lambda d: (by_field(d), self._seq.get(f"{collection}/{d['id']}", 0)),
                    reverse=descending,
                )
            rows = rows[skip:]
            if limit is not None:
                rows = rows[:limit]
            return copy.deepcopy(rows)

    def update_one(self, collection: str, doc_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self._lock:
            col = self._col(collection)
            existing = col.get(str(doc_id))
            if existing is None:
                return None
            merged = {**existing, **copy.deepcopy(updates), "id": existing["id"]}
            col[existing["id"]] = merged
            return copy.deepcopy(merged)

    def upsert(self, collection: str, doc_id: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            col = self._col(collection)
            key = str(doc_id)
            if f"{collection}/{key}" not in self._seq:
                self._seq[f"{collection}/{key}"] = next(self._counter)
            merged = {**col.get(key, {}), **copy.deepcopy(doc), "id": key}
            col[key] = merged
            return copy.deepcopy(merged)

    def delete_one(self, collection: str, doc_id: str) -> bool:
        with self._lock:
            removed = self._col(collection).pop(str(doc_id), None)
            self._seq.pop(f"{collection}/{doc_id}", None)
            return removed is not None

    def delete_many(self, collection: str, field_name: str, value: Any) -> int:
        with self._lock:
            col = self._col(collection)
            doomed = [k for k, d in col.items() if d.get(field_name) == value]
            for k in doomed:
                del col[k]
                self._seq.pop(f"{collection}/{k}", None)
            return len(doomed)

    def group_count(self, collection: str, field_name: str) -> Dict[str, int]:
        with self._lock:
            counts = Counter(
                d[field_name] for d in self._col(collection).values() if d.get(field_name) is not None
            )
        return dict(counts)
