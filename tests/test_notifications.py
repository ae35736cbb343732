"""Notification log access rules."""

from tests.conftest import MUSICIAN_ID, OTHER_MUSICIAN_ID


def _log(db, user_id, template_key="set_published"):
    return db.add("notification_logs", user_id=user_id, channel="email", template_key=template_key, status="sent")


async def test_leader_creates_notification(client, leader_headers):
    response = await client.post(
        "/api/v1/notifications",
        json={"userId": MUSICIAN_ID, "channel": "sms", "templateKey": "slot_reminder",
              "payloadJson": {"slot": "abc"}, "status": "queued"},
        headers=leader_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["channel"] == "sms"
    assert data["sentAt"] is not None


async def test_musician_cannot_create_notification(client, musician_headers):
    response = await client.post(
        "/api/v1/notifications",
        json={"userId": MUSICIAN_ID, "channel": "email", "templateKey": "x", "status": "sent"},
        headers=musician_headers,
    )
    assert response.status_code == 403


async def test_unknown_channel_is_400(client, leader_headers):
    response = await client.post(
        "/api/v1/notifications",
        json={"userId": MUSICIAN_ID, "channel": "pigeon", "templateKey": "x", "status": "sent"},
        headers=leader_headers,
    )
    assert response.status_code == 400


async def test_user_reads_own_notifications(client, db, musician_headers):
    _log(db, MUSICIAN_ID)
    _log(db, OTHER_MUSICIAN_ID)
    own = await client.get(f"/api/v1/notifications/user/{MUSICIAN_ID}", headers=musician_headers)
    other = await client.get(f"/api/v1/notifications/user/{OTHER_MUSICIAN_ID}", headers=musician_headers)
    assert own.status_code == 200
    assert len(own.json()["data"]) == 1
    assert other.status_code == 403


async def test_single_notification_owner_or_leader(client, db, musician_headers, other_headers, leader_headers):
    log = _log(db, MUSICIAN_ID)
    url = f"/api/v1/notifications/{log['id']}"
    assert (await client.get(url, headers=musician_headers)).status_code == 200
    assert (await client.get(url, headers=leader_headers)).status_code == 200
    assert (await client.get(url, headers=other_headers)).status_code == 403


async def test_leader_reads_anyones_notifications(client, db, leader_headers):
    _log(db, MUSICIAN_ID)
    response = await client.get(f"/api/v1/notifications/user/{MUSICIAN_ID}", headers=leader_headers)
    assert response.status_code == 200
    assert response.json()["data"][0]["userId"] == MUSICIAN_ID
