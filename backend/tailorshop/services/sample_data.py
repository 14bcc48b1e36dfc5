"""Sample bills and jobs preloaded into the in-memory store."""
from __future__ import annotations

from datetime import datetime, timezone

from ..config import Settings
from .store import DocumentStore

SAMPLE_BILLS = [
    {
        "id": "1",
        "billNo": "ST-20240101-0001",
        "customerName": "John Doe",
        "phone": "+91 9876543210",
        "garmentType": "shirt",
        "quantity": 2,
        "rate": 800.0,
        "subtotal": 1600.0,
        "advance": 500.0,
        "balance": 1100.0,
        "status": "pending",
        "dueDate": "2024-01-15",
        "measurements": {"length": 30, "shoulder": 18, "sleeve": 24, "chest": 40},
        "images": [],
        "drawings": [],
        "createdAt": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "updatedAt": datetime(2024, 1, 1, tzinfo=timezone.utc),
    },
    {
        "id": "2",
        "billNo": "ST-20240102-0002",
        "customerName": "Jane Smith",
        "phone": "+91 8765432109",
        "garmentType": "dress",
        "quantity": 1,
        "rate": 1200.0,
        "subtotal": 1200.0,
        "advance": 600.0,
        "balance": 600.0,
        "status": "in-progress",
        "dueDate": "2024-01-20",
        "measurements": {"length": 42, "chest": 36, "waist": 28, "hips": 38},
        "images": [],
        "drawings": [],
        "createdAt": datetime(2024, 1, 2, tzinfo=timezone.utc),
        "updatedAt": datetime(2024, 1, 2, tzinfo=timezone.utc),
    },
]

SAMPLE_JOBS = [
    {
        "id": "1",
        "billId": "1",
        "customerName": "John Doe",
        "stage": "cutting",
        "images": [],
        "createdAt": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "updatedAt": datetime(2024, 1, 1, tzinfo=timezone.utc),
    },
    {
        "id": "2",
        "billId": "2",
        "customerName": "Jane Smith",
        "stage": "stitching",
        "images": [],
        "createdAt": datetime(2024, 1, 2, tzinfo=timezone.utc),
        "updatedAt": datetime(2024, 1, 2, tzinfo=timezone.utc),
    },
]


def seed_sample_data(store: DocumentStore, settings: Settings) -> None:
    for bill in SAMPLE_BILLS:
        store.upsert(settings.BILLS_COLLECTION, bill["id"], bill)
    for job in SAMPLE_JOBS:
        store.upsert(settings.WORKFLOW_COLLECTION, job["id"], job)
