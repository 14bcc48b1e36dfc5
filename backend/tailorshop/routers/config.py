"""Runtime config endpoint for frontend consumption."""
from __future__ import annotations

from fastapi import APIRouter

from ..config import get_settings
from ..models import BILL_STATUSES, STAGES

router = APIRouter(tags=["config"])


@router.get("/config")
async def get_config() -> dict:
    """Expose non-sensitive runtime values: pipeline stages, bill statuses, paging."""
    settings = get_settings()
    return {
        "stages": list(STAGES),
        "billStatuses": list(BILL_STATUSES),
        "defaultPageSize": settings.DEFAULT_PAGE_SIZE,
        "maxPageSize": settings.MAX_PAGE_SIZE,
    }
