"""Set song list: ceilings, positions and reordering."""

from tests.factories import make_service, make_service_type, make_set_song, make_song, make_version


def _set_with_songs(db, count):
    _, worship_set = make_service(db, make_service_type(db))
    version = make_version(db, make_song(db))
    songs = [make_set_song(db, worship_set, version, position=p) for p in range(1, count + 1)]
    return worship_set, version, songs


def _positions(db, worship_set):
    rows = sorted(db.rows("set_songs", set_id=worship_set["id"]), key=lambda r: r["position"])
    return [(r["id"], r["position"]) for r in rows]


async def test_add_appends_and_defaults_is_new(client, db, leader_headers):
    worship_set, _, _ = _set_with_songs(db, 1)
    unfamiliar = make_version(db, make_song(db, title="Fresh", familiarity=20))
    response = await client.post(
        "/api/v1/set-songs",
        json={"setId": worship_set["id"], "songVersionId": unfamiliar["id"], "keyOverride": "D"},
        headers=leader_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["position"] == 2
    assert data["isNew"] is True
    assert data["song"]["title"] == "Fresh"


async def test_insert_at_position_shifts_later_songs(client, db, leader_headers):
    worship_set, version, songs = _set_with_songs(db, 2)
    response = await client.post(
        "/api/v1/set-songs",
        json={"setId": worship_set["id"], "songVersionId": version["id"], "position": 1, "isNew": False},
        headers=leader_headers,
    )
    new_id = response.json()["data"]["id"]
    assert _positions(db, worship_set) == [(new_id, 1), (songs[0]["id"], 2), (songs[1]["id"], 3)]


async def test_seventh_song_is_rejected(client, db, leader_headers):
    worship_set, version, _ = _set_with_songs(db, 6)
    response = await client.post(
        "/api/v1/set-songs",
        json={"setId": worship_set["id"], "songVersionId": version["id"]},
        headers=leader_headers,
    )
    assert response.status_code == 400
    assert len(db.rows("set_songs", set_id=worship_set["id"])) == 6


async def test_flipping_second_song_to_new_is_rejected(client, db, leader_headers):
    worship_set, _, songs = _set_with_songs(db, 2)
    db.table("set_songs").update({"is_new": True}).eq("id", songs[0]["id"]).execute()
    response = await client.put(f"/api/v1/set-songs/{songs[1]['id']}", json={"isNew": True}, headers=leader_headers)
    assert response.status_code == 400
    assert db.get("set_songs", songs[1]["id"])["is_new"] is False


async def test_delete_closes_the_gap(client, db, leader_headers):
    worship_set, _, songs = _set_with_songs(db, 3)
    response = await client.delete(f"/api/v1/set-songs/{songs[0]['id']}", headers=leader_headers)
    assert response.status_code == 200
    assert _positions(db, worship_set) == [(songs[1]["id"], 1), (songs[2]["id"], 2)]


async def test_move_by_position_update(client, db, leader_headers):
    worship_set, _, songs = _set_with_songs(db, 3)
    await client.put(f"/api/v1/set-songs/{songs[2]['id']}", json={"position": 1}, headers=leader_headers)
    assert _positions(db, worship_set) == [(songs[2]["id"], 1), (songs[0]["id"], 2), (songs[1]["id"], 3)]


async def test_reorder(client, db, leader_headers):
    worship_set, _, songs = _set_with_songs(db, 3)
    order = [songs[1]["id"], songs[2]["id"], songs[0]["id"]]
    response = await client.put(
        f"/api/v1/set-songs/set/{worship_set['id']}/reorder", json={"songIds": order}, headers=leader_headers
    )
    assert response.status_code == 200
    assert [s["id"] for s in response.json()["data"]] == order


async def test_reorder_must_be_complete(client, db, leader_headers):
    worship_set, _, songs = _set_with_songs(db, 3)
    response = await client.put(
        f"/api/v1/set-songs/set/{worship_set['id']}/reorder",
        json={"songIds": [songs[0]["id"], songs[1]["id"]]},
        headers=leader_headers,
    )
    assert response.status_code == 400


async def test_musician_reads_but_cannot_edit(client, db, musician_headers):
    worship_set, version, _ = _set_with_songs(db, 1)
    listed = await client.get(f"/api/v1/set-songs/set/{worship_set['id']}", headers=musician_headers)
    assert listed.status_code == 200
    response = await client.post(
        "/api/v1/set-songs",
        json={"setId": worship_set["id"], "songVersionId": version["id"]},
        headers=musician_headers,
    )
    assert response.status_code == 403
