"""Worship sets: creation with defaults, publishing rules, cascade delete, leaders."""

from tests.conftest import LEADER_ID, MUSICIAN_ID, OTHER_MUSICIAN_ID
from tests.factories import (
    days_from_now, make_instrument, make_service, make_service_type, make_set_song, make_slot, make_song,
    make_version,
)


async def test_admin_creates_set_with_default_assignments(client, db, admin_headers):
    service_type = make_service_type(db)
    drums = make_instrument(db)
    db.add("default_assignments", service_type_id=service_type["id"], instrument_id=drums["id"], user_id=MUSICIAN_ID)
    service = db.add("services", service_type_id=service_type["id"], service_date=days_from_now(7))

    response = await client.post("/api/v1/worship-sets", json={"serviceId": service["id"]}, headers=admin_headers)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "draft"
    assert [(a["userId"], a["status"]) for a in data["assignments"]] == [(MUSICIAN_ID, "invited")]


async def test_second_set_for_service_is_rejected(client, db, admin_headers):
    service, _ = make_service(db, make_service_type(db))
    response = await client.post("/api/v1/worship-sets", json={"serviceId": service["id"]}, headers=admin_headers)
    assert response.status_code == 400


async def test_leader_role_cannot_create_set(client, db, leader_headers):
    service = db.add("services", service_type_id=make_service_type(db)["id"], service_date=days_from_now(7))
    response = await client.post("/api/v1/worship-sets", json={"serviceId": service["id"]}, headers=leader_headers)
    assert response.status_code == 403


async def test_detail_by_service(client, db, musician_headers):
    service, worship_set = make_service(db, make_service_type(db))
    make_set_song(db, worship_set, make_version(db, make_song(db)), position=1)
    make_slot(db, worship_set, MUSICIAN_ID)
    response = await client.get(f"/api/v1/worship-sets/{service['id']}", headers=musician_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["songCount"] == 1
    assert data["setSongs"][0]["song"]["title"] == "Amazing Grace"
    assert len(data["suggestionSlots"]) == 1


async def test_set_leader_publishes(client, db, musician_headers):
    _, worship_set = make_service(db, make_service_type(db), leader_user_id=MUSICIAN_ID)
    response = await client.post(f"/api/v1/worship-sets/{worship_set['id']}/publish", headers=musician_headers)
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "published"


async def test_other_user_cannot_update_set(client, db, other_headers):
    _, worship_set = make_service(db, make_service_type(db), leader_user_id=MUSICIAN_ID)
    response = await client.put(f"/api/v1/worship-sets/{worship_set['id']}", json={"notes": "x"}, headers=other_headers)
    assert response.status_code == 403


async def test_publish_with_two_new_songs_is_rejected(client, db, admin_headers):
    _, worship_set = make_service(db, make_service_type(db))
    version = make_version(db, make_song(db, familiarity=10))
    make_set_song(db, worship_set, version, position=1, is_new=True)
    make_set_song(db, worship_set, version, position=2, is_new=True)
    response = await client.put(
        f"/api/v1/worship-sets/{worship_set['id']}", json={"status": "published"}, headers=admin_headers
    )
    assert response.status_code == 400
    assert db.get("worship_sets", worship_set["id"])["status"] == "draft"


async def test_publish_with_seven_songs_is_rejected(client, db, admin_headers):
    _, worship_set = make_service(db, make_service_type(db))
    version = make_version(db, make_song(db))
    for position in range(1, 8):
        make_set_song(db, worship_set, version, position=position)
    response = await client.post(f"/api/v1/worship-sets/{worship_set['id']}/publish", headers=admin_headers)
    assert response.status_code == 400


async def test_update_missing_set_is_404(client, admin_headers):
    from tests.conftest import MISSING_ID

    response = await client.put(f"/api/v1/worship-sets/{MISSING_ID}", json={"notes": "x"}, headers=admin_headers)
    assert response.status_code == 404


async def test_delete_cascades_children_first(client, db, admin_headers):
    _, worship_set = make_service(db, make_service_type(db))
    version = make_version(db, make_song(db))
    make_set_song(db, worship_set, version, position=1)
    slot = make_slot(db, worship_set, MUSICIAN_ID)
    db.add("suggestions", slot_id=slot["id"], song_id=version["song_id"])
    db.add("assignments", set_id=worship_set["id"], instrument_id=make_instrument(db)["id"], user_id=MUSICIAN_ID)
    db.calls.clear()

    response = await client.delete(f"/api/v1/worship-sets/{worship_set['id']}", headers=admin_headers)
    assert response.status_code == 200
    for table in ("worship_sets", "set_songs", "suggestion_slots", "suggestions", "assignments"):
        assert db.rows(table) == []
    deletes = [table for operation, table in db.calls if operation == "delete"]
    assert deletes == ["suggestions", "suggestion_slots", "set_songs", "assignments", "worship_sets"]


async def test_assign_leader_requires_leader_role(client, db, admin_headers):
    _, worship_set = make_service(db, make_service_type(db))
    url = f"/api/v1/worship-sets/{worship_set['id']}/assign-leader"
    rejected = await client.put(url, json={"leaderUserId": OTHER_MUSICIAN_ID}, headers=admin_headers)
    accepted = await client.put(url, json={"leaderUserId": LEADER_ID}, headers=admin_headers)
    assert rejected.status_code == 400
    assert accepted.status_code == 200
    assert accepted.json()["data"]["leaderUserId"] == LEADER_ID


async def test_suggested_leader_follows_rotation(client, db, admin_headers):
    service_type = make_service_type(db)
    db.table("users").update({"roles": ["leader"]}).eq("id", OTHER_MUSICIAN_ID).execute()
    db.add("leader_rotations", user_id=LEADER_ID, service_type_id=service_type["id"], rotation_order=1)
    db.add("leader_rotations", user_id=OTHER_MUSICIAN_ID, service_type_id=service_type["id"], rotation_order=2)
    make_service(db, service_type, when=days_from_now(-7), leader_user_id=LEADER_ID)
    _, upcoming = make_service(db, service_type, when=days_from_now(7))

    response = await client.get(f"/api/v1/worship-sets/{upcoming['id']}/suggested-leader", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["userId"] == OTHER_MUSICIAN_ID
