"""Workflow store: production-stage jobs linked to bills by `billId`."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from ..exceptions import NotFoundError
from ..models import JOB_COMPLETED_MARKER, WorkflowJobCreate, WorkflowJobOverride, WorkflowJobUpdate
from ..utils.validation import parse_payload
from .store import DocumentStore, Query

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class WorkflowStore:
    """CRUD for workflow jobs.

    Stage ordering is not enforced here; single-step transitions live in
    `orchestration.order_service.OrderService`.
    """

    def __init__(self, store: DocumentStore, collection: str = "workflow") -> None:
        self._store = store
        self.collection = collection

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = parse_payload(WorkflowJobCreate, payload)
        now = _now()
        job = self._store.insert_one(
            self.collection,
            {**data.model_dump(mode="json", exclude_none=True), "createdAt": now, "updatedAt": now},
        )
        logger.info("Created workflow job %s for bill %s at stage %s", job["id"], job["billId"], job["stage"])
        return job

    def get(self, job_id: str) -> Dict[str, Any]:
        job = self._store.get(self.collection, job_id)
        if job is None:
            raise NotFoundError("Workflow not found")
        return job

    def list(
        self,
        stage: Optional[str] = None,
        bills: Optional[Mapping[str, Dict[str, Any]]] = None,
    ) -> List[Dict[str, Any]]:
        """Jobs ordered by most recently updated.

        With `bills` (bill id -> bill), each job gains a `bill` key holding its
        bill, or None when the bill no longer exists.
        """
        query = Query(equals={"stage": stage}) if stage else None
        jobs = self._store.find(self.collection, query, order_by="updatedAt", descending=True)
        if bills is not None:
            for job in jobs:
                job["bill"] = bills.get(str(job.get("billId")))
        return jobs

    def for_bill(self, bill_id: str) -> List[Dict[str, Any]]:
        return self._store.find(self.collection, Query(equals={"billId": bill_id}))

    def stage_counts(self) -> Dict[str, int]:
        return self._store.group_count(self.collection, "stage")

    def _write(self, job_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        job = self._store.update_one(self.collection, job_id, {**updates, "updatedAt": _now()})
        if job is None:
            raise NotFoundError("Workflow not found")
        return job

    def update_details(self, job_id: str, payload: Dict[str, Any], *, stage: Optional[str] = None) -> Dict[str, Any]:
        """Merge assignee, notes and images.

        `stage` in the payload is ignored; callers that already checked the
        transition pass it explicitly.
        """
        data = parse_payload(WorkflowJobUpdate, payload)
        updates = data.model_dump(mode="json", exclude_unset=True, exclude={"stage"})
        if stage is not None:
            updates["stage"] = stage
        return self._write(job_id, updates)

    def set_stage(self, job_id: str, stage: str) -> Dict[str, Any]:
        return self._write(job_id, {"stage": stage})

    def override_fields(self, job_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Unchecked administrative write: any stage value is accepted regardless of order."""
        data = parse_payload(WorkflowJobOverride, payload)
        updates = data.model_dump(mode="json", exclude_unset=True)
        logger.warning("Unchecked override of workflow job %s: %s", job_id, sorted(updates))
        return self._write(job_id, updates)

    def mark_completed(self, job_id: str) -> Dict[str, Any]:
        """Set the completion marker; independent of `stage`."""
        now = _now()
        job = self._store.update_one(
            self.collection,
            job_id,
            {"status": JOB_COMPLETED_MARKER, "completedAt": now, "updatedAt": now},
        )
        if job is None:
            raise NotFoundError("Workflow not found")
        return job

    def delete(self, job_id: str) -> None:
        if not self._store.delete_one(self.collection, job_id):
            raise NotFoundError("Workflow not found")
        logger.info("Deleted workflow job %s", job_id)

    def delete_for_bill(self, bill_id: str) -> int:
        return self._store.delete_many(self.collection, "billId", bill_id)
