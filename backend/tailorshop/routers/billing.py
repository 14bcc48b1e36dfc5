"""Billing router: bills (orders) and their cascade to workflow jobs."""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from ..config import Settings, get_settings
from ..deps import get_bill_store, get_order_service
from ..services.bills import BillStore
from ..services.orchestration.order_service import OrderService
from ..utils.params import split_csv

router = APIRouter(prefix="/billing", tags=["billing"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_bill(
    payload: Dict[str, Any] = Body(...),
    orders: OrderService = Depends(get_order_service),
) -> dict:
    """Create a bill; a workflow job at "cutting" is spawned alongside it."""
    return {"success": True, "data": orders.create_bill(payload)}


@router.get("")
async def list_bills(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    search: Optional[str] = None,
    status_in: Optional[str] = Query(None, alias="status", description="Comma-separated statuses to include"),
    status_out: Optional[str] = Query(None, alias="excludeStatus", description="Comma-separated statuses to exclude"),
    bills: BillStore = Depends(get_bill_store),
    settings: Settings = Depends(get_settings),
) -> dict:
    """Newest-first page of bills, optionally filtered by name/phone search and status."""
    size = min(limit or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    result = bills.list(
        search=search,
        statuses=split_csv(status_in),
        exclude_statuses=split_csv(status_out),
        page=page,
        limit=size,
    )
    return {"success": True, "data": result.model_dump()}


@router.get("/{bill_id}")
async def get_bill(bill_id: str, bills: BillStore = Depends(get_bill_store)) -> dict:
    return {"success": True, "data": bills.get(bill_id)}


@router.put("/{bill_id}")
async def update_bill(
    bill_id: str,
    payload: Dict[str, Any] = Body(...),
    orders: OrderService = Depends(get_order_service),
) -> dict:
    """Partial update; subtotal and balance follow quantity, rate and advance."""
    return {"success": True, "data": orders.update_bill(bill_id, payload)}


@router.delete("/{bill_id}")
async def delete_bill(bill_id: str, orders: OrderService = Depends(get_order_service)) -> dict:
    """Delete a bill together with every workflow job that references it."""
    result = orders.delete_bill(bill_id)
    return {
        "success": True,
        "message": "Bill and related workflow data deleted successfully",
        "data": result,
    }
