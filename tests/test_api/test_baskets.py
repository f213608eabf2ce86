"""API tests for /api/baskets."""
from datetime import date, timedelta

from divecenter.models import EquipmentItem, ItemStatus


def _basket(client, seed, **extra):
    payload = {"customer_id": seed["alice"], "booking_id": seed["booking_alice"]}
    payload.update(extra)
    res = client.post("/api/baskets", json=payload)
    assert res.status_code == 201, res.text
    return res.json()


def _add(client, basket, item_id, status="Checked Out"):
    res = client.post("/api/assignments", json={
        "basket_id": basket["id"], "equipment_item_id": item_id, "assignment_status": status,
    })
    assert res.status_code == 201, res.text
    return res.json()


def _item_status(db_session, item_id):
    status = db_session.get(EquipmentItem, item_id).status
    db_session.rollback()
    return status


def test_create_basket_numbers_sequentially(client, seed):
    first = _basket(client, seed)
    second = _basket(client, seed, booking_id=None, customer_id=seed["bob"])
    year = date.today().year

    assert first["basket_no"] == f"BASK-{year}-001"
    assert second["basket_no"] == f"BASK-{year}-002"
    assert first["status"] == "Active"
    assert first["checkout_date"] == date.today().isoformat()


def test_basket_numbers_are_per_center(client, other_client, seed):
    _basket(client, seed)
    res = other_client.post("/api/baskets", json={"customer_id": seed["carol"]})
    assert res.status_code == 201
    assert res.json()["basket_no"].endswith("-001")


def test_create_basket_rejects_foreign_customer(client, seed):
    res = client.post("/api/baskets", json={"customer_id": seed["carol"]})
    assert res.status_code == 404


def test_create_basket_booking_must_match_customer(client, seed):
    res = client.post("/api/baskets", json={"customer_id": seed["bob"], "booking_id": seed["booking_alice"]})
    assert res.status_code == 422


def test_member_inherits_basket_booking(client, seed):
    basket = _basket(client, seed)
    a = _add(client, basket, seed["bcd"])
    assert a["booking_id"] == seed["booking_alice"]
    assert a["basket_id"] == basket["id"]


def test_member_booking_mismatch_rejected(client, seed):
    basket = _basket(client, seed)
    res = client.post("/api/assignments", json={
        "basket_id": basket["id"], "booking_id": seed["booking_bob"], "equipment_item_id": seed["bcd"],
    })
    assert res.status_code == 422


def test_damaged_then_clean_return_completes_basket(client, seed, db_session):
    basket = _basket(client, seed)
    bcd = _add(client, basket, seed["bcd"])
    reg = _add(client, basket, seed["regulator"])

    client.put(f"/api/assignments/{bcd['id']}/return", json={"damage_reported": True})
    assert _item_status(db_session, seed["bcd"]) == ItemStatus.maintenance
    assert client.get(f"/api/baskets/{basket['id']}").json()["status"] == "Active"

    client.put(f"/api/assignments/{reg['id']}/return")
    assert _item_status(db_session, seed["regulator"]) == ItemStatus.available
    data = client.get(f"/api/baskets/{basket['id']}").json()
    assert data["status"] == "Returned"
    assert data["actual_return_date"] == date.today().isoformat()


def test_return_basket_returns_every_open_member(client, seed):
    basket = _basket(client, seed)
    bcd = _add(client, basket, seed["bcd"])
    _add(client, basket, seed["regulator"])
    _add(client, basket, seed["wetsuit"], status="Pending")

    res = client.put(f"/api/baskets/{basket['id']}/return", json={
        "damage_info": {str(bcd["id"]): {"damage_reported": True, "damage_description": "Dump valve stuck"}},
    })
    assert res.status_code == 200
    data = res.json()
    assert data["status"] == "Returned"
    assert {a["assignment_status"] for a in data["assignments"]} == {"Returned"}
    damaged = next(a for a in data["assignments"] if a["id"] == bcd["id"])
    assert damaged["damage_description"] == "Dump valve stuck"


def test_return_basket_partial_keeps_it_active(client, seed):
    basket = _basket(client, seed)
    bcd = _add(client, basket, seed["bcd"])
    _add(client, basket, seed["regulator"])

    res = client.put(f"/api/baskets/{basket['id']}/return", json={"assignment_ids": [bcd["id"]]})
    assert res.status_code == 200
    assert res.json()["status"] == "Active"


def test_return_basket_rejects_non_member(client, seed):
    basket = _basket(client, seed)
    _add(client, basket, seed["bcd"])
    stranger = client.post("/api/assignments", json={
        "booking_id": seed["booking_bob"], "equipment_item_id": seed["fins"],
    }).json()

    res = client.put(f"/api/baskets/{basket['id']}/return", json={"assignment_ids": [stranger["id"]]})
    assert res.status_code == 422


def test_lost_member_blocks_completion_until_force_close(client, admin_client, seed):
    basket = _basket(client, seed)
    lost = _add(client, basket, seed["bcd"])
    _add(client, basket, seed["regulator"])
    client.put(f"/api/assignments/{lost['id']}/lost")

    res = client.put(f"/api/baskets/{basket['id']}/return")
    assert res.status_code == 200
    assert res.json()["status"] == "Active"

    res = client.post(f"/api/baskets/{basket['id']}/force-close", json={"reason": "BCD lost at sea"})
    assert res.status_code == 403

    res = admin_client.post(f"/api/baskets/{basket['id']}/force-close", json={"reason": "BCD lost at sea"})
    assert res.status_code == 200
    data = res.json()
    assert data["status"] == "Returned"
    assert "BCD lost at sea" in data["notes"]

    res = admin_client.post(f"/api/baskets/{basket['id']}/force-close", json={"reason": "again"})
    assert res.status_code == 400


def test_returned_basket_rejects_new_members(client, seed):
    basket = _basket(client, seed)
    a = _add(client, basket, seed["bcd"])
    client.put(f"/api/assignments/{a['id']}/return")

    res = client.post("/api/assignments", json={"basket_id": basket["id"], "equipment_item_id": seed["fins"]})
    assert res.status_code == 400
    assert client.put(f"/api/baskets/{basket['id']}/return").status_code == 400


def test_list_baskets(client, other_client, seed):
    _basket(client, seed)
    _basket(client, seed, booking_id=None, customer_id=seed["bob"])

    res = client.get("/api/baskets", params={"customer_id": seed["bob"]})
    assert res.status_code == 200
    assert res.json()["total"] == 1
    assert client.get("/api/baskets", params={"status": "Active"}).json()["total"] == 2
    assert other_client.get("/api/baskets").json()["total"] == 0


def test_get_basket_of_other_center(client, other_client, seed):
    basket = _basket(client, seed)
    assert other_client.get(f"/api/baskets/{basket['id']}").status_code == 404


def test_member_created_returned_completes_basket(client, seed):
    basket = _basket(client, seed)
    _add(client, basket, seed["bcd"], status="Returned")

    data = client.get(f"/api/baskets/{basket['id']}").json()
    assert [a["assignment_status"] for a in data["assignments"]] == ["Returned"]
    assert data["status"] == "Returned"
    assert data["actual_return_date"] == date.today().isoformat()


def test_member_created_returned_keeps_basket_with_open_members_active(client, seed):
    basket = _basket(client, seed)
    _add(client, basket, seed["bcd"])
    _add(client, basket, seed["regulator"], status="Returned")

    assert client.get(f"/api/baskets/{basket['id']}").json()["status"] == "Active"


def test_bulk_members_created_returned_complete_basket(client, seed):
    basket = _basket(client, seed)
    res = client.post("/api/assignments/bulk", json={"items": [
        {"basket_id": basket["id"], "equipment_item_id": seed["bcd"], "assignment_status": "Returned"},
        {"basket_id": basket["id"], "equipment_item_id": seed["regulator"], "assignment_status": "Returned"},
    ]})
    assert res.status_code == 201
    assert res.json()["success_count"] == 2
    assert client.get(f"/api/baskets/{basket['id']}").json()["status"] == "Returned"


def test_update_basket(client, other_client, seed):
    basket = _basket(client, seed)
    later = (date.today() + timedelta(days=3)).isoformat()

    res = client.put(f"/api/baskets/{basket['id']}", json={
        "expected_return_date": later, "notes": "Boat dive", "center_bucket_no": "B-7",
    })
    assert res.status_code == 200
    data = res.json()
    assert data["expected_return_date"] == later
    assert data["notes"] == "Boat dive"
    assert data["center_bucket_no"] == "B-7"
    assert data["basket_no"] == basket["basket_no"]

    earlier = (date.today() - timedelta(days=1)).isoformat()
    assert client.put(f"/api/baskets/{basket['id']}", json={"expected_return_date": earlier}).status_code == 422
    assert other_client.put(f"/api/baskets/{basket['id']}", json={"notes": "x"}).status_code == 404


def test_cancel_last_open_member_completes_basket(client, seed):
    basket = _basket(client, seed)
    done = _add(client, basket, seed["bcd"])
    mistake = _add(client, basket, seed["regulator"], status="Pending")
    client.put(f"/api/assignments/{done['id']}/return")
    assert client.get(f"/api/baskets/{basket['id']}").json()["status"] == "Active"

    assert client.delete(f"/api/assignments/{mistake['id']}").status_code == 204
    data = client.get(f"/api/baskets/{basket['id']}").json()
    assert data["status"] == "Returned"
    assert [a["id"] for a in data["assignments"]] == [done["id"]]


def test_cancel_only_member_leaves_basket_open(client, seed):
    basket = _basket(client, seed)
    mistake = _add(client, basket, seed["bcd"], status="Pending")

    assert client.delete(f"/api/assignments/{mistake['id']}").status_code == 204
    data = client.get(f"/api/baskets/{basket['id']}").json()
    assert data["status"] == "Active"
    assert data["assignments"] == []
