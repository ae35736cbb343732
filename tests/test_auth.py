"""Authentication: login, credential exchange, /me and the 401/403 split."""

from tests.conftest import ADMIN_ID, MUSICIAN_ID, bearer


async def test_login_returns_token_and_user(client):
    response = await client.post(
        "/api/v1/auth/login", json={"email": "musician@example.com", "password": "password123"}
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token"].startswith("access-")
    assert data["refreshToken"] == f"refresh-{MUSICIAN_ID}"
    assert data["user"]["roles"] == ["musician"]


async def test_login_with_wrong_password_is_401(client):
    response = await client.post(
        "/api/v1/auth/login", json={"email": "musician@example.com", "password": "nope"}
    )
    assert response.status_code == 401
    assert response.json() == {"error": {"message": "Invalid email or password"}}


async def test_login_of_deactivated_user_is_401(client, db):
    db.table("users").update({"is_active": False}).eq("id", MUSICIAN_ID).execute()
    response = await client.post(
        "/api/v1/auth/login", json={"email": "musician@example.com", "password": "password123"}
    )
    assert response.status_code == 401


async def test_issued_token_is_accepted(client):
    login = await client.post(
        "/api/v1/auth/login", json={"email": "admin@example.com", "password": "password123"}
    )
    token = login.json()["data"]["token"]
    response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["data"]["id"] == ADMIN_ID


async def test_me_lists_permissions(client, musician_headers):
    response = await client.get("/api/v1/auth/me", headers=musician_headers)
    data = response.json()["data"]
    assert data["email"] == "musician@example.com"
    assert "songs:read" in data["permissions"]
    assert "songs:create" not in data["permissions"]


async def test_missing_token_is_401(client):
    response = await client.get("/api/v1/songs")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


async def test_invalid_token_is_401(client):
    response = await client.get("/api/v1/songs", headers={"Authorization": "Bearer forged"})
    assert response.status_code == 401


async def test_deactivated_user_token_is_401(client, db, musician_headers):
    db.table("users").update({"is_active": False}).eq("id", MUSICIAN_ID).execute()
    response = await client.get("/api/v1/songs", headers=musician_headers)
    assert response.status_code == 401


async def test_insufficient_role_is_403(client, musician_headers):
    response = await client.post("/api/v1/songs", json={"title": "Mine"}, headers=musician_headers)
    assert response.status_code == 403


async def test_token_lookup_is_cached(client, db, musician_headers):
    await client.get("/api/v1/songs", headers=musician_headers)
    await client.get("/api/v1/songs", headers=musician_headers)
    assert db.auth.get_user_calls == 1


async def test_token_exchange(client):
    response = await client.post("/api/v1/auth/token", json={"refreshToken": f"refresh-{MUSICIAN_ID}"})
    assert response.status_code == 200
    token = response.json()["data"]["token"]
    me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["data"]["id"] == MUSICIAN_ID


async def test_token_exchange_rejects_unknown_session(client):
    response = await client.post("/api/v1/auth/token", json={"refreshToken": "refresh-unknown"})
    assert response.status_code == 401


async def test_users_can_read_themselves_only(client, musician_headers):
    own = await client.get(f"/api/v1/users/{MUSICIAN_ID}", headers=musician_headers)
    other = await client.get(f"/api/v1/users/{ADMIN_ID}", headers=musician_headers)
    assert own.status_code == 200
    assert other.status_code == 403


async def test_admin_updates_roles(client, admin_headers):
    response = await client.put(
        f"/api/v1/users/{MUSICIAN_ID}/roles", json={"roles": ["leader", "musician"]}, headers=admin_headers
    )
    assert response.status_code == 200
    assert set(response.json()["data"]["roles"]) == {"leader", "musician"}
    me = await client.get("/api/v1/auth/me", headers=bearer(MUSICIAN_ID))
    assert "services:create" in me.json()["data"]["permissions"]


async def test_list_users_filters_by_role(client, leader_headers):
    response = await client.get("/api/v1/users", params={"role": "leader"}, headers=leader_headers)
    assert response.status_code == 200
    assert [u["email"] for u in response.json()["data"]] == ["leader@example.com"]
