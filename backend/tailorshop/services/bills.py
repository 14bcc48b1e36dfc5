"""Bill store: persistence and derived amounts for customer orders."""
from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import uuid4

from ..exceptions import NotFoundError
from ..models import BillCreate, BillPage, BillUpdate, Pagination
from ..utils.validation import parse_payload
from .store import DocumentStore, Query

logger = logging.getLogger(__name__)

_AMOUNT_FIELDS = ("quantity", "rate", "advance")


def compute_totals(quantity: float, rate: float, advance: float) -> Tuple[float, float]:
    """Return (subtotal, balance). Balance is not clamped and may go negative."""
    subtotal = quantity * rate
    return subtotal, subtotal - advance


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _bill_number(created: datetime) -> str:
    return f"ST-{created:%Y%m%d}-{uuid4().hex[:6].upper()}"


class BillStore:
    """CRUD for bills on top of a DocumentStore collection."""

    def __init__(self, store: DocumentStore, collection: str = "bills") -> None:
        self._store = store
        self.collection = collection

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = parse_payload(BillCreate, payload)
        subtotal, balance = compute_totals(data.quantity, data.rate, data.advance)
        now = _now()
        fields = data.model_dump(mode="json")
        fields["measurements"] = {k: v for k, v in fields["measurements"].items() if v is not None}
        doc = {
            **fields,
            "billNo": _bill_number(now),
            "subtotal": subtotal,
            "balance": balance,
            "status": "pending",
            "createdAt": now,
            "updatedAt": now,
        }
        bill = self._store.insert_one(self.collection, doc)
        logger.info("Created bill %s (%s) for %s", bill["id"], bill["billNo"], bill["customerName"])
        return bill

    def get(self, bill_id: str) -> Dict[str, Any]:
        bill = self._store.get(self.collection, bill_id)
        if bill is None:
            raise NotFoundError("Bill not found")
        return bill

    def list(
        self,
        *,
        search: Optional[str] = None,
        statuses: Sequence[str] = (),
        exclude_statuses: Sequence[str] = (),
        page: int = 1,
        limit: int = 10,
    ) -> BillPage:
        """Newest-first page of bills matching the search and status filters.

        `search` is a case-insensitive substring match on customer name or phone.
        """
        page = max(1, page)
        limit = max(1, limit)
        query = Query(
            search=(search or "").strip() or None,
            search_fields=("customerName", "phone"),
            include={"status": list(statuses)} if statuses else {},
            exclude={"status": list(exclude_statuses)} if exclude_statuses else {},
        )
        bills = self._store.find(
            self.collection,
            query,
            order_by="createdAt",
            descending=True,
            skip=(page - 1) * limit,
            limit=limit,
        )
        total = self._store.count(self.collection, query)
        return BillPage(
            bills=bills,
            pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
        )

    def all(self) -> List[Dict[str, Any]]:
        return self._store.find(self.collection)

    def recent(self, limit: int = 5) -> List[Dict[str, Any]]:
        return self._store.find(self.collection, order_by="createdAt", descending=True, limit=limit)

    def update(self, bill_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Apply a partial update.

        When any of quantity, rate or advance is sent, subtotal and balance are
        recomputed from the stored values overridden by the supplied ones.
        """
        data = parse_payload(BillUpdate, payload)
        updates = {k: v for k, v in data.model_dump(mode="json", exclude_unset=True).items() if v is not None}

        current = self._store.get(self.collection, bill_id)
        if current is None:
            raise NotFoundError("Bill not found")

        if "measurements" in updates:
            sent = {k: v for k, v in updates["measurements"].items() if v is not None}
            updates["measurements"] = {**(current.get("measurements") or {}), **sent}

        if any(k in updates for k in _AMOUNT_FIELDS):
            quantity = updates.get("quantity", current.get("quantity") or 0)
            rate = updates.get("rate", current.get("rate") or 0)
            advance = updates.get("advance", current.get("advance") or 0)
            updates["subtotal"], updates["balance"] = compute_totals(quantity, rate, advance)

        updates["updatedAt"] = _now()
        bill = self._store.update_one(self.collection, bill_id, updates)
        if bill is None:
            # deleted between the read and the write
            raise NotFoundError("Bill not found")
        return bill

    def delete(self, bill_id: str) -> None:
        if not self._store.delete_one(self.collection, bill_id):
            raise NotFoundError("Bill not found")
        logger.info("Deleted bill %s", bill_id)
