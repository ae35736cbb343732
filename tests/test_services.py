"""Services: creation with their worship set, listing and cascade delete."""

from tests.conftest import LEADER_ID, MUSICIAN_ID
from tests.factories import days_from_now, make_instrument, make_service, make_service_type, make_slot


async def test_create_service_creates_draft_set(client, db, leader_headers):
    service_type = make_service_type(db)
    drums = make_instrument(db)
    db.add("default_assignments", service_type_id=service_type["id"], instrument_id=drums["id"], user_id=MUSICIAN_ID)

    response = await client.post(
        "/api/v1/services",
        json={"date": "2030-01-06T10:00:00Z", "serviceTypeId": service_type["id"]},
        headers=leader_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["serviceType"]["name"] == "Sunday"
    assert data["worshipSet"]["status"] == "draft"
    sets = db.rows("worship_sets", service_id=data["id"])
    assert len(sets) == 1
    assert db.rows("assignments", set_id=sets[0]["id"])[0]["user_id"] == MUSICIAN_ID


async def test_duplicate_service_is_rejected(client, db, leader_headers):
    service_type = make_service_type(db)
    payload = {"date": "2030-01-06T10:00:00Z", "serviceTypeId": service_type["id"]}
    await client.post("/api/v1/services", json=payload, headers=leader_headers)
    response = await client.post("/api/v1/services", json=payload, headers=leader_headers)
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "A service of this type already exists for the specified date"
    assert len(db.rows("services")) == 1


async def test_invalid_service_type_id_is_400(client, leader_headers):
    response = await client.post(
        "/api/v1/services",
        json={"date": "2030-01-06T10:00:00Z", "serviceTypeId": "not-a-valid-uuid"},
        headers=leader_headers,
    )
    assert response.status_code == 400
    assert "error" in response.json()


async def test_musician_cannot_create_service(client, db, musician_headers):
    service_type = make_service_type(db)
    response = await client.post(
        "/api/v1/services",
        json={"date": "2030-01-06T10:00:00Z", "serviceTypeId": service_type["id"]},
        headers=musician_headers,
    )
    assert response.status_code == 403


async def test_upcoming_excludes_past_services(client, db, musician_headers):
    service_type = make_service_type(db)
    make_service(db, service_type, when=days_from_now(-7))
    later, _ = make_service(db, service_type, when=days_from_now(14))
    sooner, _ = make_service(db, service_type, when=days_from_now(7))
    response = await client.get("/api/v1/services", params={"upcoming": "true"}, headers=musician_headers)
    assert [s["id"] for s in response.json()["data"]] == [sooner["id"], later["id"]]


async def test_get_service_includes_worship_set_detail(client, db, musician_headers):
    service, worship_set = make_service(db, make_service_type(db), leader_user_id=LEADER_ID)
    response = await client.get(f"/api/v1/services/{service['id']}", headers=musician_headers)
    data = response.json()["data"]
    assert data["worshipSet"]["id"] == worship_set["id"]
    assert data["worshipSet"]["leaderUser"]["id"] == LEADER_ID
    assert data["worshipSet"]["setSongs"] == []


async def test_update_sets_worship_set_leader(client, db, leader_headers):
    service, worship_set = make_service(db, make_service_type(db))
    response = await client.put(
        f"/api/v1/services/{service['id']}",
        json={"status": "published", "worshipSetLeaderId": LEADER_ID},
        headers=leader_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "published"
    assert db.get("worship_sets", worship_set["id"])["leader_user_id"] == LEADER_ID


async def test_admin_deletes_service_and_its_set(client, db, admin_headers, leader_headers):
    service, worship_set = make_service(db, make_service_type(db))
    make_slot(db, worship_set, MUSICIAN_ID)
    assert (await client.delete(f"/api/v1/services/{service['id']}", headers=leader_headers)).status_code == 403
    response = await client.delete(f"/api/v1/services/{service['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert db.rows("services") == []
    assert db.rows("worship_sets") == []
    assert db.rows("suggestion_slots") == []
