"""What each user plays: self-service profile, admin edits, leader lookups."""

from tests.conftest import MISSING_ID, MUSICIAN_ID, OTHER_MUSICIAN_ID
from tests.factories import make_instrument


def _url(user_id):
    return f"/api/v1/users/{user_id}/instruments"


async def test_musician_sets_own_instruments(client, db, musician_headers):
    drums = make_instrument(db)
    bass = make_instrument(db, code="bass", display_name="Bass")
    response = await client.put(
        _url(MUSICIAN_ID),
        json={"instruments": [
            {"instrumentId": drums["id"], "isPrimary": True, "proficiencyLevel": 4},
            {"instrumentId": bass["id"]},
        ]},
        headers=musician_headers,
    )
    assert response.status_code == 200
    played = response.json()["data"]
    assert [i["code"] for i in played] == ["bass", "drums"]
    assert played[1]["isPrimary"] is True
    assert played[1]["proficiencyLevel"] == 4
    assert played[0]["isPrimary"] is False

    cleared = await client.put(_url(MUSICIAN_ID), json={"instruments": []}, headers=musician_headers)
    assert cleared.json()["data"] == []
    assert db.rows("user_instruments") == []


async def test_profile_access(client, db, musician_headers, other_headers, leader_headers, admin_headers):
    drums = make_instrument(db)
    db.add("user_instruments", user_id=MUSICIAN_ID, instrument_id=drums["id"])
    body = {"instruments": [{"instrumentId": drums["id"]}]}

    assert (await client.get(_url(MUSICIAN_ID), headers=other_headers)).status_code == 403
    assert (await client.put(_url(MUSICIAN_ID), json=body, headers=other_headers)).status_code == 403
    assert (await client.get(_url(MUSICIAN_ID), headers=leader_headers)).status_code == 200
    assert (await client.put(_url(MUSICIAN_ID), json=body, headers=leader_headers)).status_code == 403
    assert (await client.put(_url(MUSICIAN_ID), json=body, headers=admin_headers)).status_code == 200


async def test_invalid_instrument_lists_are_rejected(client, db, musician_headers):
    drums = make_instrument(db)
    bass = make_instrument(db, code="bass", display_name="Bass")
    unknown = await client.put(
        _url(MUSICIAN_ID), json={"instruments": [{"instrumentId": MISSING_ID}]}, headers=musician_headers
    )
    assert unknown.status_code == 400
    two_primary = await client.put(
        _url(MUSICIAN_ID),
        json={"instruments": [
            {"instrumentId": drums["id"], "isPrimary": True},
            {"instrumentId": bass["id"], "isPrimary": True},
        ]},
        headers=musician_headers,
    )
    assert two_primary.status_code == 400
    bad_level = await client.put(
        _url(MUSICIAN_ID),
        json={"instruments": [{"instrumentId": drums["id"], "proficiencyLevel": 9}]},
        headers=musician_headers,
    )
    assert bad_level.status_code == 400
    assert db.rows("user_instruments") == []


async def test_adding_a_primary_instrument_demotes_the_old_one(client, db, musician_headers):
    drums = make_instrument(db)
    bass = make_instrument(db, code="bass", display_name="Bass")
    db.add("user_instruments", user_id=MUSICIAN_ID, instrument_id=drums["id"], is_primary=True)
    response = await client.post(
        _url(MUSICIAN_ID), json={"instrumentId": bass["id"], "isPrimary": True}, headers=musician_headers
    )
    assert response.status_code == 201
    primary = {i["code"]: i["isPrimary"] for i in response.json()["data"]}
    assert primary == {"bass": True, "drums": False}

    duplicate = await client.post(_url(MUSICIAN_ID), json={"instrumentId": bass["id"]}, headers=musician_headers)
    assert duplicate.status_code == 400


async def test_remove_instrument(client, db, musician_headers):
    drums = make_instrument(db)
    db.add("user_instruments", user_id=MUSICIAN_ID, instrument_id=drums["id"])
    url = f"{_url(MUSICIAN_ID)}/{drums['id']}"
    assert (await client.delete(url, headers=musician_headers)).status_code == 200
    assert (await client.delete(url, headers=musician_headers)).status_code == 404


async def test_unknown_user_is_404(client, admin_headers):
    response = await client.get(_url(MISSING_ID), headers=admin_headers)
    assert response.status_code == 404


async def test_leader_finds_players_of_an_instrument(client, db, leader_headers):
    drums = make_instrument(db)
    bass = make_instrument(db, code="bass", display_name="Bass")
    db.add("user_instruments", user_id=OTHER_MUSICIAN_ID, instrument_id=drums["id"])
    db.add("user_instruments", user_id=MUSICIAN_ID, instrument_id=bass["id"])

    response = await client.get("/api/v1/users", params={"instrumentId": drums["id"]}, headers=leader_headers)
    assert [u["id"] for u in response.json()["data"]] == [OTHER_MUSICIAN_ID]

    keys = make_instrument(db, code="keys", display_name="Keys")
    nobody = await client.get("/api/v1/users", params={"instrumentId": keys["id"]}, headers=leader_headers)
    assert nobody.json()["data"] == []


async def test_played_instrument_can_still_be_deleted(client, db, admin_headers):
    drums = make_instrument(db)
    db.add("user_instruments", user_id=MUSICIAN_ID, instrument_id=drums["id"])
    response = await client.delete(f"/api/v1/instruments/{drums['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert db.rows("user_instruments") == []
