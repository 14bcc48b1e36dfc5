"""Dashboard aggregation, recomputed from the stores on every request."""
from __future__ import annotations

from ..models import CLOSED_STATUSES, DashboardStats
from .bills import BillStore
from .workflow import WorkflowStore


class DashboardService:
    def __init__(self, bills: BillStore, workflow: WorkflowStore, recent_limit: int = 5) -> None:
        self.bills = bills
        self.workflow = workflow
        self.recent_limit = recent_limit

    def summary(self) -> DashboardStats:
        """Counts and revenue over all bills plus job counts per stage.

        Revenue is the gross invoiced value (sum of subtotals), not money
        collected. Stages without jobs are left out of `workflowStages`.
        """
        bills = self.bills.all()
        customers = {b.get("customerName") for b in bills if b.get("customerName") is not None}
        completed = sum(1 for b in bills if b.get("status") in CLOSED_STATUSES)
        revenue = sum(float(b.get("subtotal") or 0) for b in bills)
        return DashboardStats(
            totalCustomers=len(customers),
            activeOrders=len(bills) - completed,
            completedOrders=completed,
            revenue=round(revenue, 2),
            recentBills=self.bills.recent(self.recent_limit),
            workflowStages=self.workflow.stage_counts(),
        )
