from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ...exceptions import RecordValidationError, StageTransitionError
from ...models import STAGES
from ..bills import BillStore
from ..workflow import WorkflowStore
from .stages import is_single_step, next_stage, previous_stage

logger = logging.getLogger(__name__)


class OrderService:
    """Coordinates the bill and workflow stores.

    - Creating a bill spawns one job at "cutting".
    - Deleting a bill removes every job pointing at it.
    - Deleting a job leaves its bill alone; the bill is the primary record.
    - Stage moves go one step at a time (read current, compute target, write).

    Multi-step writes are independent steps, not a transaction. A failure in
    between can leave a bill without a job (spawn failed after the bill was
    written) or a job whose bill is gone; both are tolerated by readers.
    """

    def __init__(self, bills: BillStore, workflow: WorkflowStore) -> None:
        self.bills = bills
        self.workflow = workflow

    # --- Bills ---
    def create_bill(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        bill = self.bills.create(payload)
        try:
            job = self.workflow.create(
                {"billId": bill["id"], "customerName": bill["customerName"], "stage": STAGES[0]}
            )
        except Exception:  # noqa: BLE001
            # The bill is already committed; it stays without a job rather than
            # being rolled back.
            logger.exception("[%s] failed to spawn workflow job for new bill", bill["id"])
        else:
            logger.info("[%s] spawned workflow job %s", bill["id"], job["id"])
        return bill

    def update_bill(self, bill_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.bills.update(bill_id, payload)

    def delete_bill(self, bill_id: str) -> Dict[str, Any]:
        """Delete a bill and all of its jobs.

        Jobs go first so a retry after a partial failure finishes the cascade.
        Raises NotFoundError when the bill did not exist.
        """
        removed = self.workflow.delete_for_bill(bill_id)
        self.bills.delete(bill_id)
        logger.info("[%s] bill deleted with %d workflow job(s)", bill_id, removed)
        return {"id": bill_id, "deletedJobs": removed}

    # --- Jobs ---
    def create_job(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.workflow.create(payload)

    def list_jobs(self, stage: Optional[str] = None) -> List[Dict[str, Any]]:
        """Jobs joined with their bills; a missing bill yields `bill: None`."""
        if stage is not None and stage not in STAGES:
            raise RecordValidationError(f"Unknown stage: {stage}")
        bills = {str(b["id"]): b for b in self.bills.all()}
        return self.workflow.list(stage=stage, bills=bills)

    def update_job(self, job_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Checked update: details are merged, a stage change must be one step."""
        target = payload.get("stage") if isinstance(payload, dict) else None
        move_to = None
        if target is not None:
            if target not in STAGES:
                raise RecordValidationError(f"Unknown stage: {target}")
            current = self.workflow.get(job_id)
            if target != current.get("stage"):
                if not is_single_step(current.get("stage"), target):
                    raise StageTransitionError(
                        f"Cannot move from {current.get('stage')!r} to {target!r}; stages change one step at a time"
                    )
                logger.info("[%s] stage %s -> %s", job_id, current.get("stage"), target)
                move_to = target
        return self.workflow.update_details(job_id, payload, stage=move_to)

    def advance_stage(self, job_id: str) -> Dict[str, Any]:
        job = self.workflow.get(job_id)
        target = next_stage(job.get("stage"))
        if target is None:
            logger.info("[%s] advance is a no-op at stage %r", job_id, job.get("stage"))
            return job
        logger.info("[%s] stage %s -> %s", job_id, job.get("stage"), target)
        return self.workflow.set_stage(job_id, target)

    def regress_stage(self, job_id: str) -> Dict[str, Any]:
        job = self.workflow.get(job_id)
        target = previous_stage(job.get("stage"))
        if target is None:
            logger.info("[%s] regress is a no-op at stage %r", job_id, job.get("stage"))
            return job
        logger.info("[%s] stage %s -> %s", job_id, job.get("stage"), target)
        return self.workflow.set_stage(job_id, target)

    def mark_job_completed(self, job_id: str) -> Dict[str, Any]:
        return self.workflow.mark_completed(job_id)

    def override_job(self, job_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.workflow.override_fields(job_id, payload)

    def delete_job(self, job_id: str) -> None:
        self.workflow.delete(job_id)
