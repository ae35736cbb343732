"""Instrument assignments: invitations, responses and bulk replacement."""

from tests.conftest import ADMIN_ID, LEADER_ID, MISSING_ID, MUSICIAN_ID, OTHER_MUSICIAN_ID, bearer
from tests.factories import make_instrument, make_service, make_service_type


def _invite(db, worship_set, instrument, user_id, status="invited"):
    return db.add("assignments", set_id=worship_set["id"], instrument_id=instrument["id"], user_id=user_id, status=status)


async def test_assigned_user_accepts(client, db, musician_headers):
    _, worship_set = make_service(db, make_service_type(db))
    assignment = _invite(db, worship_set, make_instrument(db), MUSICIAN_ID)
    response = await client.put(
        f"/api/v1/assignments/{assignment['id']}", json={"status": "accepted"}, headers=musician_headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "accepted"
    assert data["respondedAt"] is not None


async def test_other_user_cannot_respond(client, db, other_headers, admin_headers):
    _, worship_set = make_service(db, make_service_type(db))
    assignment = _invite(db, worship_set, make_instrument(db), MUSICIAN_ID)
    for headers in (other_headers, admin_headers):
        response = await client.put(
            f"/api/v1/assignments/{assignment['id']}", json={"status": "accepted"}, headers=headers
        )
        assert response.status_code == 403
    assert db.get("assignments", assignment["id"])["status"] == "invited"


async def test_only_invited_assignments_can_change(client, db, musician_headers):
    _, worship_set = make_service(db, make_service_type(db))
    assignment = _invite(db, worship_set, make_instrument(db), MUSICIAN_ID, status="accepted")
    response = await client.put(
        f"/api/v1/assignments/{assignment['id']}", json={"status": "declined"}, headers=musician_headers
    )
    assert response.status_code == 403


async def test_response_cannot_go_back_to_invited(client, db, musician_headers):
    _, worship_set = make_service(db, make_service_type(db))
    assignment = _invite(db, worship_set, make_instrument(db), MUSICIAN_ID)
    response = await client.put(
        f"/api/v1/assignments/{assignment['id']}", json={"status": "invited"}, headers=musician_headers
    )
    assert response.status_code == 403


async def test_set_leader_invites(client, db, musician_headers):
    _, worship_set = make_service(db, make_service_type(db), leader_user_id=MUSICIAN_ID)
    instrument = make_instrument(db)
    response = await client.post(
        "/api/v1/assignments",
        json={"setId": worship_set["id"], "instrumentId": instrument["id"], "userId": OTHER_MUSICIAN_ID},
        headers=musician_headers,
    )
    assert response.status_code == 201
    assert response.json()["data"]["status"] == "invited"
    assert response.json()["data"]["instrument"]["code"] == "drums"


async def test_non_leader_cannot_invite(client, db, other_headers):
    _, worship_set = make_service(db, make_service_type(db), leader_user_id=LEADER_ID)
    instrument = make_instrument(db)
    response = await client.post(
        "/api/v1/assignments",
        json={"setId": worship_set["id"], "instrumentId": instrument["id"], "userId": OTHER_MUSICIAN_ID},
        headers=other_headers,
    )
    assert response.status_code == 403


async def test_instrument_limit_is_enforced(client, db, admin_headers):
    _, worship_set = make_service(db, make_service_type(db))
    instrument = make_instrument(db, max_per_set=1)
    _invite(db, worship_set, instrument, MUSICIAN_ID)
    response = await client.post(
        "/api/v1/assignments",
        json={"setId": worship_set["id"], "instrumentId": instrument["id"], "userId": OTHER_MUSICIAN_ID},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert "Maximum 1 Drums" in response.json()["error"]["message"]


async def test_duplicate_invitation_is_conflict(client, db, admin_headers):
    _, worship_set = make_service(db, make_service_type(db))
    instrument = make_instrument(db, max_per_set=2)
    _invite(db, worship_set, instrument, MUSICIAN_ID)
    response = await client.post(
        "/api/v1/assignments",
        json={"setId": worship_set["id"], "instrumentId": instrument["id"], "userId": MUSICIAN_ID},
        headers=admin_headers,
    )
    assert response.status_code == 400


async def test_musician_lists_only_own_assignments(client, db):
    _, worship_set = make_service(db, make_service_type(db))
    drums = make_instrument(db)
    bass = make_instrument(db, code="bass", display_name="Bass")
    _invite(db, worship_set, drums, MUSICIAN_ID)
    _invite(db, worship_set, bass, OTHER_MUSICIAN_ID)
    own = await client.get("/api/v1/assignments", headers=bearer(MUSICIAN_ID))
    everything = await client.get("/api/v1/assignments", headers=bearer(ADMIN_ID))
    assert [a["userId"] for a in own.json()["data"]] == [MUSICIAN_ID]
    assert len(everything.json()["data"]) == 2


async def test_set_leader_deletes_assignment(client, db, musician_headers):
    _, worship_set = make_service(db, make_service_type(db), leader_user_id=MUSICIAN_ID)
    assignment = _invite(db, worship_set, make_instrument(db), OTHER_MUSICIAN_ID)
    response = await client.delete(f"/api/v1/assignments/{assignment['id']}", headers=musician_headers)
    assert response.status_code == 200
    assert db.get("assignments", assignment["id"]) is None


async def test_bulk_replace_through_service(client, db, leader_headers):
    service, worship_set = make_service(db, make_service_type(db))
    drums = make_instrument(db)
    bass = make_instrument(db, code="bass", display_name="Bass")
    keys = make_instrument(db, code="keys", display_name="Keys")
    _invite(db, worship_set, drums, MUSICIAN_ID, status="accepted")
    _invite(db, worship_set, keys, MUSICIAN_ID, status="accepted")

    response = await client.put(
        f"/api/v1/services/{service['id']}/assignments",
        json={"assignments": {drums["id"]: OTHER_MUSICIAN_ID, bass["id"]: MUSICIAN_ID, keys["id"]: ""}},
        headers=leader_headers,
    )
    assert response.status_code == 200
    by_instrument = {a["instrument_id"]: a for a in db.rows("assignments", set_id=worship_set["id"])}
    assert by_instrument[drums["id"]]["user_id"] == OTHER_MUSICIAN_ID
    assert by_instrument[drums["id"]]["status"] == "invited"
    assert by_instrument[bass["id"]]["user_id"] == MUSICIAN_ID
    assert keys["id"] not in by_instrument


async def test_bulk_replace_leaves_unlisted_instruments(client, db, leader_headers):
    service, worship_set = make_service(db, make_service_type(db))
    drums = make_instrument(db)
    bass = make_instrument(db, code="bass", display_name="Bass")
    kept = _invite(db, worship_set, bass, MUSICIAN_ID, status="accepted")
    await client.put(
        f"/api/v1/services/{service['id']}/assignments",
        json={"assignments": {drums["id"]: OTHER_MUSICIAN_ID}},
        headers=leader_headers,
    )
    assert db.get("assignments", kept["id"])["status"] == "accepted"


async def test_bulk_replace_forbidden_for_musician(client, db, musician_headers):
    service, _ = make_service(db, make_service_type(db))
    drums = make_instrument(db)
    response = await client.put(
        f"/api/v1/services/{service['id']}/assignments",
        json={"assignments": {drums["id"]: MUSICIAN_ID}},
        headers=musician_headers,
    )
    assert response.status_code == 403


async def test_bulk_replace_with_unknown_user_changes_nothing(client, db, leader_headers):
    service, worship_set = make_service(db, make_service_type(db))
    drums = make_instrument(db)
    bass = make_instrument(db, code="bass", display_name="Bass")
    accepted = _invite(db, worship_set, drums, MUSICIAN_ID, status="accepted")
    response = await client.put(
        f"/api/v1/services/{service['id']}/assignments",
        json={"assignments": {bass["id"]: OTHER_MUSICIAN_ID, drums["id"]: MISSING_ID}},
        headers=leader_headers,
    )
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "User not found"
    assert db.rows("assignments", set_id=worship_set["id"]) == [db.get("assignments", accepted["id"])]
    assert db.get("assignments", accepted["id"])["status"] == "accepted"
