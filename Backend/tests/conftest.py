# tests/conftest.py
"""
Shared pytest fixtures for Component Studio backend tests.

Provides:
- ASGI test client
- In-memory Redis double installed into studio.cache
- Authenticated-user override for routes that need a user
- MongoDB-backed fixtures (skipped when MongoDB is not reachable)
"""
import os
import uuid
from types import SimpleNamespace
from typing import Any, Dict

# Must be set before studio.core.config builds its settings
os.environ["RATE_LIMIT"] = "10000/minute"
os.environ["JWT_SECRET"] = "test-secret"
os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017/component_studio_test")
os.environ.setdefault("FRONTEND_DIST_PATH", "/nonexistent/frontend")

import pytest
from beanie import PydanticObjectId
from httpx import AsyncClient, ASGITransport

from studio import cache, db
from studio.core.security import get_current_user
from studio.main import app
from tests.utils.fake_redis import FakeRedis


# ═══════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════

@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def async_client():
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def fake_redis():
    client = FakeRedis()
    cache.set_cache_client(client)
    yield client
    cache.set_cache_client(None)


@pytest.fixture
def fake_user():
    return SimpleNamespace(id=PydanticObjectId(), email="tester@example.com", is_active=True)


@pytest.fixture
def authenticated(fake_user):
    """Bypass JWT + MongoDB lookup for routes that only need *a* user."""
    app.dependency_overrides[get_current_user] = lambda: fake_user
    yield fake_user
    app.dependency_overrides.pop(get_current_user, None)


_mongo_state: Dict[str, Any] = {"unavailable": False}


@pytest.fixture
async def mongo():
    if _mongo_state["unavailable"]:
        pytest.skip("MongoDB not available")

    await db.connect_db()
    if not db.is_connected():
        _mongo_state["unavailable"] = True
        pytest.skip(f"MongoDB not available: {db.get_connection_error()}")

    yield db.get_db()
    await db.disconnect_db()


@pytest.fixture
async def mongo_user(mongo):
    """A real User document; routes resolve it through the override."""
    from studio.core.security import hash_password
    from studio.models import Session, User

    user = User(
        email=f"user-{uuid.uuid4().hex[:10]}@example.com",
        name="Test User",
        password_hash=hash_password("secret123"),
    )
    await user.insert()
    app.dependency_overrides[get_current_user] = lambda: user

    yield user

    app.dependency_overrides.pop(get_current_user, None)
    await Session.find(Session.user_id == user.id).delete()
    await user.delete()
