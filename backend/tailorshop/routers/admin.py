"""Admin router: dashboard summary, payment address and unchecked job overrides."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from ..deps import get_dashboard_service, get_order_service, get_settings_store
from ..services.app_settings import SettingsStore
from ..services.dashboard import DashboardService
from ..services.orchestration.order_service import OrderService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("")
async def dashboard(service: DashboardService = Depends(get_dashboard_service)) -> dict:
    return {"success": True, "data": service.summary().model_dump()}


@router.get("/upi")
async def get_upi(settings_store: SettingsStore = Depends(get_settings_store)) -> dict:
    return {"success": True, "upi": settings_store.get_upi()}


@router.put("/upi")
async def put_upi(
    payload: Dict[str, Any] = Body(...),
    settings_store: SettingsStore = Depends(get_settings_store),
) -> dict:
    return {"success": True, "upi": settings_store.set_upi(payload)}


@router.put("/workflow/{job_id}")
async def override_job(
    job_id: str,
    payload: Dict[str, Any] = Body(...),
    orders: OrderService = Depends(get_order_service),
) -> dict:
    """Unchecked overwrite of job fields. Stage order is NOT enforced on this path."""
    return {"success": True, "data": orders.override_job(job_id, payload)}
