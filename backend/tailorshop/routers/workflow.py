"""Workflow router: production jobs and their stage transitions.

Only single-step stage moves are possible here. The unchecked override lives
under /admin.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status

from ..deps import get_order_service, get_workflow_store
from ..services.orchestration.order_service import OrderService
from ..services.workflow import WorkflowStore

router = APIRouter(prefix="/workflow", tags=["workflow"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_job(
    payload: Dict[str, Any] = Body(...),
    orders: OrderService = Depends(get_order_service),
) -> dict:
    return {"success": True, "data": orders.create_job(payload)}


@router.get("")
async def list_jobs(stage: Optional[str] = None, orders: OrderService = Depends(get_order_service)) -> dict:
    """All jobs, most recently updated first, each with its bill (or null)."""
    return {"success": True, "data": {"workflows": orders.list_jobs(stage)}}


@router.get("/{job_id}")
async def get_job(job_id: str, workflow: WorkflowStore = Depends(get_workflow_store)) -> dict:
    return {"success": True, "data": workflow.get(job_id)}


@router.put("/{job_id}")
async def update_job(
    job_id: str,
    payload: Dict[str, Any] = Body(...),
    orders: OrderService = Depends(get_order_service),
) -> dict:
    """Merge job details; `stage`, if sent, may only move one step."""
    return {"success": True, "data": orders.update_job(job_id, payload)}


@router.patch("/{job_id}")
async def mark_completed(job_id: str, orders: OrderService = Depends(get_order_service)) -> dict:
    """Mark the job completed (status + completedAt); the stage is untouched."""
    return {"success": True, "data": orders.mark_job_completed(job_id)}


@router.post("/{job_id}/advance")
async def advance_stage(job_id: str, orders: OrderService = Depends(get_order_service)) -> dict:
    return {"success": True, "data": orders.advance_stage(job_id)}


@router.post("/{job_id}/regress")
async def regress_stage(job_id: str, orders: OrderService = Depends(get_order_service)) -> dict:
    return {"success": True, "data": orders.regress_stage(job_id)}


@router.delete("/{job_id}")
async def delete_job(job_id: str, orders: OrderService = Depends(get_order_service)) -> dict:
    """Delete one job. Its bill is kept."""
    orders.delete_job(job_id)
    return {"success": True, "message": "Workflow deleted successfully"}
