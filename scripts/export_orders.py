#!/usr/bin/env python3
"""
Export bills and their production stage from Firestore to CSV.

What it does
- Reads the `bills` and `workflow` collections (optionally a createdAt date range)
- Joins each bill with its workflow job(s) by billId
- Writes one row per bill (amounts, balance, status, current stage, assignee)
- Writes a small summary CSV grouped by stage (count, invoiced, outstanding)

Requirements
- google-cloud-firestore
- A service account or ADC with read access to the Firestore database

Usage examples
# All bills
python scripts/export_orders.py

# Bills created in a date range (inclusive)
python scripts/export_orders.py --start 2025-09-01 --end 2025-09-30

# Specify GCP project or Firestore database id if needed
python scripts/export_orders.py --project star-tailors --database "(default)"
"""
from __future__ import annotations

import argparse
import csv
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

STAGES = ("cutting", "stitching", "finishing", "packaging", "delivered")


@dataclass
class OrderRow:
    bill_id: str
    bill_no: str
    customer_name: str
    phone: str
    garment_type: str
    quantity: int
    subtotal: float
    advance: float
    balance: float
    status: str
    stage: str
    assigned_to: str
    job_count: int
    created_at: Optional[datetime]
    due_date: str


def _to_float(val) -> float:
    try:
        return float(val or 0)
    except (TypeError, ValueError):
        return 0.0


def fetch_bills(client: firestore.Client, collection: str, start: Optional[datetime], end: Optional[datetime]) -> Iterable[Dict]:
    q = client.collection(collection)
    if start is not None:
        q = q.where(filter=FieldFilter("createdAt", ">=", start))
    if end is not None:
        q = q.where(filter=FieldFilter("createdAt", "<", end))
    for doc in q.stream():
        yield {**(doc.to_dict() or {}), "id": doc.id}


def fetch_jobs_by_bill(client: firestore.Client, collection: str) -> Dict[str, List[Dict]]:
    out: Dict[str, List[Dict]] = {}
    for doc in client.collection(collection).stream():
        job = doc.to_dict() or {}
        out.setdefault(str(job.get("billId")), []).append(job)
    return out


def build_row(bill: Dict, jobs: List[Dict]) -> OrderRow:
    # several jobs for one bill should not happen; report the most recently updated
    latest = max(jobs, key=lambda j: j.get("updatedAt") or datetime.min.replace(tzinfo=timezone.utc)) if jobs else {}
    return OrderRow(
        bill_id=bill.get("id", ""),
        bill_no=bill.get("billNo", ""),
        customer_name=bill.get("customerName", ""),
        phone=bill.get("phone", ""),
        garment_type=bill.get("garmentType", ""),
        quantity=int(bill.get("quantity") or 0),
        subtotal=_to_float(bill.get("subtotal")),
        advance=_to_float(bill.get("advance")),
        balance=_to_float(bill.get("balance")),
        status=bill.get("status", ""),
        stage=latest.get("stage", "") if latest else "",
        assigned_to=latest.get("assignedTo", "") if latest else "",
        job_count=len(jobs),
        created_at=bill.get("createdAt"),
        due_date=str(bill.get("dueDate") or ""),
    )


def summarize(rows: List[OrderRow]) -> Dict[str, Dict[str, float]]:
    summary: Dict[str, Dict[str, float]] = {}
    for stage in STAGES + ("none",):
        group = [r for r in rows if (r.stage or "none") == stage]
        if not group:
            continue
        summary[stage] = {
            "count": float(len(group)),
            "invoiced": round(sum(r.subtotal for r in group), 2),
            "outstanding": round(sum(r.balance for r in group), 2),
        }
    return summary


def write_csv_orders(path: Path, rows: List[OrderRow]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow([
            "billId",
            "billNo",
            "customerName",
            "phone",
            "garmentType",
            "quantity",
            "subtotal",
            "advance",
            "balance",
            "status",
            "stage",
            "assignedTo",
            "jobCount",
            "createdAt",
            "dueDate",
        ])
        for r in rows:
            w.writerow([
                r.bill_id,
                r.bill_no,
                r.customer_name,
                r.phone,
                r.garment_type,
                r.quantity,
                f"{r.subtotal:.2f}",
                f"{r.advance:.2f}",
                f"{r.balance:.2f}",
                r.status,
                r.stage,
                r.assigned_to,
                r.job_count,
                r.created_at.isoformat() if isinstance(r.created_at, datetime) else "",
                r.due_date,
            ])


def write_csv_summary(path: Path, summary: Dict[str, Dict[str, float]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        keys = ["count", "invoiced", "outstanding"]
        w.writerow(["stage"] + keys)
        for stage, stats in summary.items():
            w.writerow([stage] + [stats.get(k, "") for k in keys])


def main() -> None:
    parser = argparse.ArgumentParser(description="Export bills with their workflow stage from Firestore")
    parser.add_argument("--start", type=str, help="Start date (YYYY-MM-DD, inclusive)")
    parser.add_argument("--end", type=str, help="End date (YYYY-MM-DD, inclusive)")
    parser.add_argument("--project", type=str, default=os.getenv("GCP_PROJECT", os.getenv("GOOGLE_CLOUD_PROJECT", "")))
    parser.add_argument("--database", type=str, default=os.getenv("FIRESTORE_DATABASE_ID", "(default)"))
    parser.add_argument("--bills-collection", type=str, default=os.getenv("BILLS_COLLECTION", "bills"))
    parser.add_argument("--workflow-collection", type=str, default=os.getenv("WORKFLOW_COLLECTION", "workflow"))
    parser.add_argument("--output-dir", type=str, default="exports")

    args = parser.parse_args()

    start = datetime.strptime(args.start, "%Y-%m-%d").replace(tzinfo=timezone.utc) if args.start else None
    # Inclusive end: compare against the following midnight
    end = (
        (datetime.strptime(args.end, "%Y-%m-%d") + timedelta(days=1)).replace(tzinfo=timezone.utc)
        if args.end
        else None
    )

    client = firestore.Client(project=args.project or None, database=args.database)

    jobs_by_bill = fetch_jobs_by_bill(client, args.workflow_collection)
    rows = [
        build_row(b, jobs_by_bill.get(str(b.get("id")), []))
        for b in fetch_bills(client, args.bills_collection, start, end)
    ]
    rows.sort(key=lambda r: r.created_at or datetime.min.replace(tzinfo=timezone.utc), reverse=True)
    summary = summarize(rows)

    ts = datetime.now().strftime("%Y%m%d-%H%M%S")
    outdir = Path(args.output_dir)
    write_csv_orders(outdir / f"orders-{ts}.csv", rows)
    write_csv_summary(outdir / f"stages-{ts}.csv", summary)

    # Print human-friendly summary
    print("Exported bills:", len(rows))
    for stage, stats in summary.items():
        print(f"\nStage: {stage}")
        for k, v in stats.items():
            print(f"  {k}: {v}")


if __name__ == "__main__":
    main()
