"""Pytest configuration and shared fixtures.

- In-memory Supabase fake injected through dependency_overrides
- Seeded admin / leader / musician users with bearer tokens
- Async HTTP client over the ASGI app
"""

# Set environment variables BEFORE any imports that trigger Settings validation
import os

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections.abc import AsyncGenerator
from unittest.mock import patch

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.core.credentials import credential_exchange
from app.database.supabase_client import get_supabase
from app.modules.auth.service import clear_auth_cache
from tests.fakes import FakeSupabase

ADMIN_ID = "00000000-0000-4000-8000-000000000001"
LEADER_ID = "00000000-0000-4000-8000-000000000002"
MUSICIAN_ID = "00000000-0000-4000-8000-000000000003"
OTHER_MUSICIAN_ID = "00000000-0000-4000-8000-000000000004"
MISSING_ID = "00000000-0000-4000-8000-00000000dead"


@pytest.fixture(autouse=True)
def _reset_auth_caches():
    clear_auth_cache()
    credential_exchange.clear()
    yield
    clear_auth_cache()
    credential_exchange.clear()


@pytest.fixture(autouse=True)
def _disable_rate_limiter():
    """Disable slowapi rate limiting so repeated calls are not throttled."""
    with patch("app.core.rate_limit.limiter.enabled", False):
        yield


@pytest.fixture
def db() -> FakeSupabase:
    fake = FakeSupabase()
    people = [
        (ADMIN_ID, "admin@example.com", "Ada Admin", ["admin"]),
        (LEADER_ID, "leader@example.com", "Lee Leader", ["leader", "musician"]),
        (MUSICIAN_ID, "musician@example.com", "Max Musician", ["musician"]),
        (OTHER_MUSICIAN_ID, "other@example.com", "Olive Other", ["musician"]),
    ]
    for user_id, email, name, roles in people:
        fake.add("users", id=user_id, email=email, name=name, roles=roles)
        fake.auth.register(user_id, email)
    return fake


@pytest_asyncio.fixture
async def app(db: FakeSupabase) -> AsyncGenerator[FastAPI]:
    from app.main import app as fastapi_app

    fastapi_app.dependency_overrides[get_supabase] = lambda: db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def bearer(user_id: str) -> dict:
    return {"Authorization": f"Bearer token-{user_id}"}


@pytest.fixture
def admin_headers() -> dict:
    return bearer(ADMIN_ID)


@pytest.fixture
def leader_headers() -> dict:
    return bearer(LEADER_ID)


@pytest.fixture
def musician_headers() -> dict:
    return bearer(MUSICIAN_ID)


@pytest.fixture
def other_headers() -> dict:
    return bearer(OTHER_MUSICIAN_ID)
