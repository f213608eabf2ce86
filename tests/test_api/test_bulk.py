"""API tests for the bulk assignment endpoints."""
from sqlalchemy import select, func

from divecenter.models import Assignment, EquipmentBasket, BasketStatus


def _count_assignments(db_session):
    total = db_session.scalar(select(func.count()).select_from(Assignment))
    db_session.rollback()
    return total


def _row(seed, item, start="2024-03-01", end="2024-03-03", booking="booking_alice"):
    return {
        "booking_id": seed[booking],
        "equipment_item_id": seed[item],
        "checkout_date": start,
        "return_date": end,
    }


def test_bulk_create_partial_success(client, seed, db_session):
    # Existing reservation makes the wetsuit row conflict
    client.post("/api/assignments", json=_row(seed, "wetsuit"))
    before = _count_assignments(db_session)

    res = client.post("/api/assignments/bulk", json={"items": [
        _row(seed, "bcd"),
        _row(seed, "regulator"),
        _row(seed, "wetsuit"),                        # conflict
        _row(seed, "tank_b"),                         # other dive center
        {"booking_id": seed["booking_alice"], "equipment_source": "Customer Own",
         "customer_equipment_type": "Mask"},
    ]})
    assert res.status_code == 201
    data = res.json()
    assert data["success_count"] == 3
    assert data["failed_count"] == 2
    assert [f["index"] for f in data["failed"]] == [2, 3]
    assert data["failed"][0]["conflicting_assignments"][0]["checkout_date"] == "2024-03-01"
    assert data["failed"][0]["item"]["equipment_item_id"] == seed["wetsuit"]
    assert data["failed"][1]["error"] == "Equipment item not found"

    assert _count_assignments(db_session) == before + 3


def test_bulk_create_rows_conflicting_with_each_other(client, seed):
    res = client.post("/api/assignments/bulk", json={"items": [
        _row(seed, "bcd", "2024-03-01", "2024-03-03"),
        _row(seed, "bcd", "2024-03-03", "2024-03-05", booking="booking_bob"),
    ]})
    assert res.status_code == 201
    data = res.json()
    assert data["success_count"] == 1
    assert data["failed"][0]["index"] == 1


def test_bulk_create_nothing_valid_persists_nothing(client, seed, db_session):
    before = _count_assignments(db_session)
    res = client.post("/api/assignments/bulk", json={"items": [
        _row(seed, "tank_b"),
        {"booking_id": seed["booking_alice"]},
    ]})
    assert res.status_code == 422
    detail = res.json()["detail"]
    assert len(detail["failed"]) == 2
    assert _count_assignments(db_session) == before


def test_bulk_create_requires_items(client, seed):
    assert client.post("/api/assignments/bulk", json={"items": []}).status_code == 422


def test_bulk_return_rechecks_basket_once(client, seed, db_session):
    basket = client.post("/api/baskets", json={"customer_id": seed["alice"]}).json()
    ids = []
    for item in ("bcd", "regulator"):
        res = client.post("/api/assignments", json={
            "basket_id": basket["id"], "equipment_item_id": seed[item], "assignment_status": "Checked Out",
        })
        ids.append(res.json()["id"])

    res = client.post("/api/assignments/bulk-return", json={
        "assignment_ids": ids + [999999],
        "damage_info": {str(ids[0]): {"damage_reported": True, "damage_description": "Cracked hose"}},
    })
    assert res.status_code == 201
    data = res.json()
    assert sorted(a["id"] for a in data["returned"]) == sorted(ids)
    assert data["failed"] == [{
        "index": 2, "item": None, "assignment_id": 999999,
        "error": "Assignment not found", "conflicting_assignments": [],
    }]
    damaged = next(a for a in data["returned"] if a["id"] == ids[0])
    assert damaged["damage_reported"] is True

    status = db_session.get(EquipmentBasket, basket["id"]).status
    db_session.rollback()
    assert status == BasketStatus.returned


def test_bulk_return_all_failed(client, seed):
    a = client.post("/api/assignments", json=_row(seed, "bcd")).json()
    client.put(f"/api/assignments/{a['id']}/return")

    res = client.post("/api/assignments/bulk-return", json={"assignment_ids": [a["id"]]})
    assert res.status_code == 422
    assert res.json()["detail"]["failed"][0]["error"] == "Assignment is already returned"


def test_bulk_check_availability(client, seed):
    client.post("/api/assignments", json=_row(seed, "bcd"))

    res = client.post("/api/assignments/bulk-check-availability", json={"items": [
        {"equipment_item_id": seed["bcd"], "checkout_date": "2024-03-03", "return_date": "2024-03-04"},
        {"equipment_item_id": seed["regulator"], "checkout_date": "2024-03-03", "return_date": "2024-03-04"},
        {"equipment_item_id": seed["tank_b"], "checkout_date": "2024-03-03", "return_date": "2024-03-04"},
    ]})
    assert res.status_code == 200
    results = res.json()["results"]
    assert [r["index"] for r in results] == [0, 1, 2]
    assert results[0]["available"] is False
    assert len(results[0]["conflicting_assignments"]) == 1
    assert results[1]["available"] is True
    assert results[2]["available"] is False
    assert results[2]["error"] == "Equipment item not found"
