"""
Redis mirror and generic cache helpers.
"""
import json

import pytest

from studio import cache
from studio.core.config import settings
from studio.core.exceptions import CacheError
from tests.utils.fake_redis import FakeRedis

pytestmark = pytest.mark.anyio


async def test_session_mirror_roundtrip(fake_redis):
    state = {"userId": "u1", "chatHistory": [], "componentCode": {"jsx": "<A/>"}}

    await cache.set_session_data("abc", state)

    assert json.loads(fake_redis.store["session:abc"]) == state
    assert fake_redis.ttls["session:abc"] == settings.cache.session_ttl
    assert await cache.get_session_data("abc") == state

    await cache.delete_session_data("abc")
    assert await cache.get_session_data("abc") is None


async def test_generic_cache_uses_default_ttl(fake_redis):
    await cache.set_cache("k", {"a": 1})
    assert fake_redis.ttls["k"] == settings.cache.default_ttl

    await cache.set_cache("k2", [1, 2], ttl=42)
    assert fake_redis.ttls["k2"] == 42
    assert await cache.get_cache("k2") == [1, 2]


async def test_undecodable_value_reads_as_miss(fake_redis):
    fake_redis.store["broken"] = "{not json"
    assert await cache.get_cache("broken") is None


async def test_clear_cache_by_pattern(fake_redis):
    await cache.set_cache("ai_generate:1", {})
    await cache.set_cache("ai_generate:2", {})
    await cache.set_session_data("s1", {})

    assert await cache.clear_cache("ai_generate:*") == 2
    assert list(fake_redis.store) == ["session:s1"]
    assert await cache.clear_cache("nothing:*") == 0


async def test_helpers_are_noops_without_client():
    cache.set_cache_client(None)

    await cache.set_cache("k", {"a": 1})
    await cache.set_session_data("abc", {})
    await cache.delete_session_data("abc")
    assert await cache.get_cache("k") is None
    assert await cache.get_session_data("abc") is None
    assert await cache.clear_cache("*") == 0

    with pytest.raises(CacheError):
        cache.get_cache_client()


async def test_redis_errors_degrade():
    cache.set_cache_client(FakeRedis(fail=True))
    try:
        await cache.set_cache("k", {"a": 1})
        await cache.delete_session_data("abc")
        assert await cache.get_cache("k") is None
        assert await cache.clear_cache("*") == 0
    finally:
        cache.set_cache_client(None)


async def test_connect_cache_failure_is_reported(monkeypatch):
    class Unreachable(FakeRedis):
        async def ping(self):
            raise ConnectionError("Connection refused")

    monkeypatch.setattr(cache.redis, "from_url", lambda url, **kwargs: Unreachable())

    assert await cache.connect_cache() is None
    assert not cache.is_connected()
    assert "Connection refused" in cache.get_connection_error()
