"""FastAPI dependencies: services built around the store opened at startup."""
from __future__ import annotations

from fastapi import Depends, Request

from .config import Settings, get_settings
from .exceptions import StoreUnavailableError
from .services.app_settings import SettingsStore
from .services.bills import BillStore
from .services.dashboard import DashboardService
from .services.orchestration.order_service import OrderService
from .services.store import DocumentStore
from .services.workflow import WorkflowStore


def get_store(request: Request) -> DocumentStore:
    """Return the store handle the lifespan placed on `app.state`."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreUnavailableError("Store is not initialised")
    return store


def get_bill_store(
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> BillStore:
    return BillStore(store, settings.BILLS_COLLECTION)


def get_workflow_store(
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> WorkflowStore:
    return WorkflowStore(store, settings.WORKFLOW_COLLECTION)


def get_order_service(
    bills: BillStore = Depends(get_bill_store),
    workflow: WorkflowStore = Depends(get_workflow_store),
) -> OrderService:
    return OrderService(bills, workflow)


def get_dashboard_service(
    bills: BillStore = Depends(get_bill_store),
    workflow: WorkflowStore = Depends(get_workflow_store),
    settings: Settings = Depends(get_settings),
) -> DashboardService:
    return DashboardService(bills, workflow, recent_limit=settings.RECENT_BILLS_LIMIT)


def get_settings_store(
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> SettingsStore:
    return SettingsStore(store, settings.SETTINGS_COLLECTION)
