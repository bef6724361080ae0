# studio/cache/__init__.py
"""
Redis cache.

Two uses:
- a TTL'd mirror of each open session (``session:<id>``) holding chat history,
  component code and UI state;
- a generic JSON key/value cache (AI generation results, revoked tokens).

MongoDB stays authoritative. When Redis is down the write helpers do nothing
and the read helpers return None.
"""
import json
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from studio.core.config import settings
from studio.core.exceptions import CacheError
from studio.core.logging import log

SESSION_KEY_PREFIX = "session:"

_client: Optional[redis.Redis] = None
_connection_error: Optional[str] = None


async def connect_cache() -> Optional[redis.Redis]:
    global _client, _connection_error
    try:
        client = redis.from_url(settings.cache.redis_url, decode_responses=True)
        await client.ping()
    except Exception as e:
        _connection_error = str(e)
        _client = None
        log("CACHE", f"Redis not available: {_connection_error}")
        return None

    _client = client
    _connection_error = None
    log("CACHE", "Redis client connected")
    return _client


async def disconnect_cache() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        log("CACHE", "Redis client closed")
    _client = None


def set_cache_client(client: Optional[redis.Redis]) -> None:
    """Install an already-built client (tests, embedding)."""
    global _client
    _client = client


def get_cache_client() -> redis.Redis:
    if _client is None:
        raise CacheError("Redis client not initialized", {"error": _connection_error})
    return _client


def is_connected() -> bool:
    return _client is not None


def get_connection_error() -> Optional[str]:
    return _connection_error


def session_key(session_id: str) -> str:
    return f"{SESSION_KEY_PREFIX}{session_id}"


# ---------------------------------------------------------------------------
# SESSION MIRROR
# ---------------------------------------------------------------------------

async def set_session_data(session_id: str, data: Any, ttl: Optional[int] = None) -> None:
    await set_cache(session_key(session_id), data, ttl or settings.cache.session_ttl)


async def get_session_data(session_id: str) -> Optional[Any]:
    return await get_cache(session_key(session_id))


async def delete_session_data(session_id: str) -> None:
    if not is_connected():
        return
    try:
        await get_cache_client().delete(session_key(session_id))
    except RedisError as e:
        log("CACHE", f"DEL {session_key(session_id)} failed: {e}")


# ---------------------------------------------------------------------------
# GENERIC JSON CACHE
# ---------------------------------------------------------------------------

async def set_cache(key: str, data: Any, ttl: Optional[int] = None) -> None:
    if not is_connected():
        return
    try:
        await get_cache_client().setex(key, ttl or settings.cache.default_ttl, json.dumps(data, default=str))
    except RedisError as e:
        log("CACHE", f"SETEX {key} failed: {e}")


async def get_cache(key: str) -> Optional[Any]:
    if not is_connected():
        return None
    try:
        raw = await get_cache_client().get(key)
    except RedisError as e:
        log("CACHE", f"GET {key} failed: {e}")
        return None

    if raw is None:
        log("CACHE-MISS", key)
        return None

    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        log("CACHE", f"Discarding undecodable value under {key}")
        return None

    log("CACHE-HIT", key)
    return value


async def clear_cache(pattern: str) -> int:
    """Delete every key matching ``pattern``. Returns the number of keys removed."""
    if not is_connected():
        return 0
    client = get_cache_client()
    try:
        keys = [key async for key in client.scan_iter(match=pattern)]
        if not keys:
            return 0
        return await client.delete(*keys)
    except RedisError as e:
        log("CACHE", f"Clearing {pattern} failed: {e}")
        return 0
