"""App-level behavior: error envelope, body cap, headers, health checks."""

from app.config.settings import settings
from tests.conftest import MISSING_ID


async def test_health_and_ready_need_no_auth(client):
    assert (await client.get("/health")).json() == {"status": "healthy"}
    assert (await client.get("/ready")).json() == {"status": "ready"}


async def test_security_headers_are_set(client):
    response = await client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


async def test_oversized_body_is_rejected(client, admin_headers):
    payload = {"title": "x" * (settings.max_request_body_bytes + 10)}
    response = await client.post("/api/v1/songs", json=payload, headers=admin_headers)
    assert response.status_code == 413
    assert response.json() == {"error": {"message": "Request body too large"}}


async def test_chunked_oversized_body_is_rejected(client, admin_headers):
    async def chunks():
        for _ in range(4):
            yield b"x" * (settings.max_request_body_bytes // 2)

    response = await client.post(
        "/api/v1/songs", content=chunks(), headers={**admin_headers, "Content-Type": "application/json"}
    )
    assert response.status_code == 413


async def test_small_body_passes_through(client, admin_headers):
    response = await client.post("/api/v1/songs", json={"title": "Small"}, headers=admin_headers)
    assert response.status_code == 201


async def test_not_found_uses_error_envelope(client, admin_headers):
    response = await client.get(f"/api/v1/songs/{MISSING_ID}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json() == {"error": {"message": "Song not found"}}


async def test_malformed_path_id_is_400(client, admin_headers):
    response = await client.get("/api/v1/songs/not-a-uuid", headers=admin_headers)
    assert response.status_code == 400
    body = response.json()
    assert body["error"]["message"] == "Validation failed"
    assert body["error"]["details"]


async def test_invalid_body_is_400(client, admin_headers):
    response = await client.post("/api/v1/songs", json={"familiarityScore": 10}, headers=admin_headers)
    assert response.status_code == 400
    assert "details" in response.json()["error"]
