"""Health and readiness endpoints."""
from __future__ import annotations

from datetime import datetime, timezone
from fastapi import APIRouter, Depends

from ..deps import get_store
from ..services.store import DocumentStore

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz(store: DocumentStore = Depends(get_store)) -> dict:
    """Liveness probe endpoint."""
    return {
        "status": "ok",
        "store": store.backend,
        "time": datetime.now(timezone.utc).isoformat(),
    }
