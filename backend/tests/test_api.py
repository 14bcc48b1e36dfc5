from __future__ import annotations

from fastapi.testclient import TestClient

from tailorshop.config import get_settings
from tailorshop.exceptions import StoreUnavailableError


def _create(client, **overrides):
    body = {"customerName": "Asha", "phone": "999", "garmentType": "shirt", "quantity": 2, "rate": 500, "advance": 200}
    body.update(overrides)
    resp = client.post("/api/billing", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def _job_for(client, bill_id):
    jobs = client.get("/api/workflow").json()["data"]["workflows"]
    return [j for j in jobs if j["billId"] == bill_id]


def test_health_reports_memory_store(client):
    body = client.get("/api/healthz").json()
    assert body["status"] == "ok"
    assert body["store"] == "memory"


def test_config_lists_stages(client):
    body = client.get("/api/config").json()
    assert body["stages"] == ["cutting", "stitching", "finishing", "packaging", "delivered"]


def test_create_bill_and_scenario(client):
    bill = _create(client)
    assert (bill["subtotal"], bill["balance"], bill["status"]) == (1000, 800, "pending")

    jobs = _job_for(client, bill["id"])
    assert len(jobs) == 1 and jobs[0]["stage"] == "cutting"
    assert jobs[0]["bill"]["id"] == bill["id"]

    resp = client.post(f"/api/workflow/{jobs[0]['id']}/advance")
    assert resp.json()["data"]["stage"] == "stitching"

    resp = client.delete(f"/api/billing/{bill['id']}")
    assert resp.status_code == 200
    assert resp.json()["data"]["deletedJobs"] == 1
    assert _job_for(client, bill["id"]) == []


def test_create_bill_missing_fields(client):
    resp = client.post("/api/billing", json={"customerName": "Asha"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "Missing required fields" in body["error"]


def test_non_object_body_is_rejected(client):
    resp = client.post("/api/billing", json=["not", "an", "object"])
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_list_search_and_pagination(client):
    _create(client, customerName="Asha Rao")
    _create(client, customerName="Ravi", phone="555")
    resp = client.get("/api/billing", params={"search": "ASHA", "page": 1, "limit": 10})
    data = resp.json()["data"]
    assert [b["customerName"] for b in data["bills"]] == ["Asha Rao"]
    assert data["pagination"] == {"page": 1, "limit": 10, "total": 1, "pages": 1}


def test_list_bad_page_is_400(client):
    resp = client.get("/api/billing", params={"page": 0})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_update_bill_recomputes(client):
    bill = _create(client)
    resp = client.put(f"/api/billing/{bill['id']}", json={"quantity": 3})
    data = resp.json()["data"]
    assert (data["subtotal"], data["balance"]) == (1500, 1300)


def test_bill_not_found(client):
    for method in ("get", "delete"):
        resp = getattr(client, method)("/api/billing/missing")
        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Bill not found"}
    assert client.put("/api/billing/missing", json={"rate": 1}).status_code == 404


def test_manual_job_and_checked_update(client):
    resp = client.post("/api/workflow", json={"billId": "b-1", "customerName": "Walk-in"})
    assert resp.status_code == 201
    job = resp.json()["data"]
    assert job["stage"] == "cutting"

    resp = client.put(f"/api/workflow/{job['id']}", json={"stage": "packaging"})
    assert resp.status_code == 409
    assert resp.json()["success"] is False

    resp = client.put(f"/api/workflow/{job['id']}", json={"stage": "stitching", "assignedTo": "Ravi"})
    assert resp.json()["data"]["stage"] == "stitching"


def test_manual_job_requires_fields(client):
    resp = client.post("/api/workflow", json={"customerName": "x"})
    assert resp.status_code == 400


def test_regress_and_mark_completed(client):
    bill = _create(client)
    job = _job_for(client, bill["id"])[0]
    assert client.post(f"/api/workflow/{job['id']}/regress").json()["data"]["stage"] == "cutting"
    done = client.patch(f"/api/workflow/{job['id']}").json()["data"]
    assert done["status"] == "Completed"
    assert done["stage"] == "cutting"


def test_admin_override_skips_order(client):
    bill = _create(client)
    job = _job_for(client, bill["id"])[0]
    resp = client.put(f"/api/admin/workflow/{job['id']}", json={"stage": "delivered"})
    assert resp.json()["data"]["stage"] == "delivered"


def test_delete_job_keeps_bill(client):
    bill = _create(client)
    job = _job_for(client, bill["id"])[0]
    assert client.delete(f"/api/workflow/{job['id']}").status_code == 200
    assert client.get(f"/api/billing/{bill['id']}").status_code == 200
    assert client.delete(f"/api/workflow/{job['id']}").status_code == 404


def test_list_jobs_by_stage(client):
    bill = _create(client)
    job = _job_for(client, bill["id"])[0]
    client.post(f"/api/workflow/{job['id']}/advance")
    assert client.get("/api/workflow", params={"stage": "cutting"}).json()["data"]["workflows"] == []
    assert len(client.get("/api/workflow", params={"stage": "stitching"}).json()["data"]["workflows"]) == 1
    assert client.get("/api/workflow", params={"stage": "ironing"}).status_code == 400


def test_dashboard(client):
    _create(client)
    _create(client, customerName="Ravi", rate=250)
    data = client.get("/api/admin").json()["data"]
    assert data["totalCustomers"] == 2
    assert data["revenue"] == 1500
    assert data["activeOrders"] + data["completedOrders"] == 2
    assert data["workflowStages"] == {"cutting": 2}
    assert len(data["recentBills"]) == 2


def test_upi_endpoints(client):
    assert client.get("/api/admin/upi").json() == {"success": True, "upi": ""}
    assert client.put("/api/admin/upi", json={"upi": ""}).status_code == 400
    assert client.put("/api/admin/upi", json={"upi": "shop@okbank"}).json()["upi"] == "shop@okbank"
    assert client.get("/api/admin/upi").json()["upi"] == "shop@okbank"


def test_numeric_phone_accepted(client):
    bill = _create(client, phone=9876543210)
    assert bill["phone"] == "9876543210"


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Not Found"}


def test_wrong_method_uses_error_envelope(client):
    resp = client.patch("/api/billing/x")
    assert resp.status_code == 405
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Method Not Allowed"
    assert "allow" in resp.headers


def test_store_outage_is_503(client, monkeypatch):
    def _down(*args, **kwargs):
        raise StoreUnavailableError("Storage error, please try again")

    monkeypatch.setattr(client.app.state.store, "find", _down)
    resp = client.get("/api/billing")
    assert resp.status_code == 503
    assert resp.json() == {"success": False, "error": "Storage error, please try again"}


def test_unexpected_error_is_500(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("SEED_SAMPLE_DATA", "false")
    get_settings.cache_clear()
    from tailorshop.main import app

    with TestClient(app, raise_server_exceptions=False) as c:
        monkeypatch.setattr(c.app.state.store, "find", lambda *a, **kw: 1 / 0)
        resp = c.get("/api/billing")
    get_settings.cache_clear()
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Unexpected internal error"}
