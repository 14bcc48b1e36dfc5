from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tailorshop.exceptions import NotFoundError, RecordValidationError
from tailorshop.services.bills import compute_totals


def test_create_computes_amounts_and_defaults(bills, asha):
    bill = bills.create(asha)
    assert bill["subtotal"] == 1000
    assert bill["balance"] == 800
    assert bill["status"] == "pending"
    assert bill["id"]
    assert bill["billNo"].startswith("ST-")
    assert bill["createdAt"] == bill["updatedAt"]


def test_create_without_advance_defaults_to_zero(bills, make_bill):
    payload = make_bill()
    del payload["advance"]
    bill = bills.create(payload)
    assert bill["advance"] == 0
    assert bill["balance"] == bill["subtotal"] == 1000


def test_numeric_phone_is_stored_as_text(bills, make_bill):
    bill = bills.create(make_bill(phone=9876543210))
    assert bill["phone"] == "9876543210"
    updated = bills.update(bill["id"], {"phone": 9123456789.0})
    assert updated["phone"] == "9123456789"


@pytest.mark.parametrize("field", ["customerName", "phone", "garmentType", "quantity", "rate"])
def test_create_requires_fields(bills, make_bill, field):
    payload = make_bill()
    del payload[field]
    with pytest.raises(RecordValidationError, match=field):
        bills.create(payload)


def test_create_rejects_blank_and_out_of_range(bills, make_bill):
    with pytest.raises(RecordValidationError):
        bills.create(make_bill(customerName="   "))
    with pytest.raises(RecordValidationError):
        bills.create(make_bill(quantity=0))
    with pytest.raises(RecordValidationError):
        bills.create(make_bill(rate=-1))


def test_balance_is_not_clamped(bills, make_bill):
    bill = bills.create(make_bill(advance=1500))
    assert bill["balance"] == -500


def test_measurements_keep_only_sent_fields(bills, make_bill):
    bill = bills.create(make_bill(measurements={"chest": 40, "waist": 32}))
    assert bill["measurements"] == {"chest": 40, "waist": 32}


def test_get_missing_raises(bills):
    with pytest.raises(NotFoundError):
        bills.get("nope")


def test_update_recomputes_from_merged_values(bills, asha):
    bill = bills.create(asha)
    updated = bills.update(bill["id"], {"rate": 600})
    assert updated["quantity"] == 2
    assert updated["subtotal"] == 1200
    assert updated["balance"] == 1000

    updated = bills.update(bill["id"], {"advance": 0})
    assert updated["subtotal"] == 1200
    assert updated["balance"] == 1200


def test_update_without_amounts_leaves_totals(bills, asha):
    bill = bills.create(asha)
    updated = bills.update(bill["id"], {"status": "in-progress", "tailorNotes": "extra pocket"})
    assert updated["status"] == "in-progress"
    assert updated["subtotal"] == 1000
    assert updated["updatedAt"] >= bill["updatedAt"]


def test_update_merges_measurements(bills, make_bill):
    bill = bills.create(make_bill(measurements={"chest": 40}))
    updated = bills.update(bill["id"], {"measurements": {"waist": 30}})
    assert updated["measurements"] == {"chest": 40, "waist": 30}


def test_update_rejects_unknown_status(bills, asha):
    bill = bills.create(asha)
    with pytest.raises(RecordValidationError):
        bills.update(bill["id"], {"status": "lost"})


def test_update_missing_raises(bills):
    with pytest.raises(NotFoundError):
        bills.update("nope", {"rate": 10})


def test_update_after_delete_is_not_found(bills, asha):
    bill = bills.create(asha)
    bills.delete(bill["id"])
    with pytest.raises(NotFoundError):
        bills.update(bill["id"], {"notes": "late"})


def test_delete_missing_raises(bills):
    with pytest.raises(NotFoundError):
        bills.delete("nope")


def _seed(store, names):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i, (name, phone, status) in enumerate(names):
        store.insert_one(
            "bills",
            {"customerName": name, "phone": phone, "status": status, "subtotal": 100, "createdAt": base + timedelta(days=i)},
        )


def test_list_search_matches_name_or_phone_any_case(store, bills):
    _seed(store, [("Asha Rao", "111", "pending"), ("Ravi", "222", "pending"), ("Meena", "98asha", "pending")])
    page = bills.list(search="asha")
    names = [b["customerName"] for b in page.bills]
    assert names == ["Meena", "Asha Rao"]
    assert page.pagination.total == 2


def test_list_newest_first_with_pagination(store, bills):
    _seed(store, [(f"c{i}", str(i), "pending") for i in range(5)])
    page = bills.list(page=2, limit=2)
    assert [b["customerName"] for b in page.bills] == ["c2", "c1"]
    assert page.pagination.model_dump() == {"page": 2, "limit": 2, "total": 5, "pages": 3}


def test_list_status_filters(store, bills):
    _seed(store, [("a", "1", "pending"), ("b", "2", "completed"), ("c", "3", "delivered")])
    assert {b["customerName"] for b in bills.list(statuses=["completed", "delivered"]).bills} == {"b", "c"}
    assert {b["customerName"] for b in bills.list(exclude_statuses=["completed", "delivered"]).bills} == {"a"}


def test_compute_totals():
    assert compute_totals(3, 250.5, 100) == (751.5, 651.5)
