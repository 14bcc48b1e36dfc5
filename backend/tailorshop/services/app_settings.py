"""Key/value settings kept in the settings collection (e.g. the UPI payment address)."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from ..models import UpiSetting
from ..utils.validation import parse_payload
from .store import DocumentStore

logger = logging.getLogger(__name__)

UPI_KEY = "upi"


class SettingsStore:
    def __init__(self, store: DocumentStore, collection: str = "settings") -> None:
        self._store = store
        self.collection = collection

    def get(self, key: str, default: Any = "") -> Any:
        doc = self._store.get(self.collection, key)
        return doc.get("value", default) if doc else default

    def put(self, key: str, value: Any) -> Dict[str, Any]:
        doc = self._store.upsert(
            self.collection,
            key,
            {"key": key, "value": value, "updatedAt": datetime.now(timezone.utc)},
        )
        logger.info("Setting %r updated", key)
        return doc

    def get_upi(self) -> str:
        return self.get(UPI_KEY, "")

    def set_upi(self, payload: Dict[str, Any]) -> str:
        data = parse_payload(UpiSetting, payload)
        self.put(UPI_KEY, data.upi)
        return data.upi
