from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tailorshop.config import get_settings
from tailorshop.services.bills import BillStore
from tailorshop.services.dashboard import DashboardService
from tailorshop.services.memory_store import MemoryStore
from tailorshop.services.orchestration.order_service import OrderService
from tailorshop.services.workflow import WorkflowStore


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def bills(store) -> BillStore:
    return BillStore(store)


@pytest.fixture
def workflow(store) -> WorkflowStore:
    return WorkflowStore(store)


@pytest.fixture
def orders(bills, workflow) -> OrderService:
    return OrderService(bills, workflow)


@pytest.fixture
def dashboard(bills, workflow) -> DashboardService:
    return DashboardService(bills, workflow)


@pytest.fixture
def asha() -> dict:
    return {
        "customerName": "Asha",
        "phone": "999",
        "garmentType": "shirt",
        "quantity": 2,
        "rate": 500,
        "advance": 200,
    }


@pytest.fixture
def make_bill(asha):
    def _make(**overrides) -> dict:
        return {**asha, **overrides}

    return _make


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("SEED_SAMPLE_DATA", "false")
    get_settings.cache_clear()
    from tailorshop.main import app

    with TestClient(app) as c:
        yield c
    get_settings.cache_clear()
