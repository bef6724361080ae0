# studio/db/__init__.py
"""
Database module.
"""
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie

from studio.core.config import settings
from studio.core.logging import log

# Motor client instance
_client: Optional[AsyncIOMotorClient] = None
_db = None
_connection_error: Optional[str] = None


async def connect_db():
    """
    Connect to MongoDB and register the Beanie documents.

    If MongoDB is not available, stores the error for later retrieval
    rather than failing startup. Routes that need the database answer 503.
    """
    global _client, _db, _connection_error
    mongo_url = settings.database.mongodb_url
    try:
        _client = AsyncIOMotorClient(
            mongo_url,
            serverSelectionTimeoutMS=settings.database.server_selection_timeout_ms,
        )

        # Prefer the database named in the URL, fall back to DB_NAME
        try:
            _db = _client.get_default_database()
        except Exception:
            _db = _client[settings.database.db_name]

        # Fails fast if MongoDB is not running
        await _client.admin.command("ping")
        log("DB", f"Connected to MongoDB ({_db.name})")

        from studio.models import DOCUMENT_MODELS

        await init_beanie(database=_db, document_models=DOCUMENT_MODELS)
        log("DB", "Beanie ODM initialized")
        _connection_error = None
    except Exception as e:
        _connection_error = str(e)
        log("DB", f"MongoDB not available: {_connection_error}")
        log("DB", f"Session and auth routes will answer 503 until {mongo_url} is reachable")
        if _client:
            _client.close()
        _client = None
        _db = None


async def disconnect_db():
    """Disconnect from MongoDB."""
    global _client, _db
    if _client:
        _client.close()
        log("DB", "Disconnected from MongoDB")
    _client = None
    _db = None


def get_db():
    """
    Get database instance.

    Returns None if MongoDB is not connected.
    """
    return _db


def is_connected() -> bool:
    """Check if database is connected."""
    return _db is not None


def get_connection_error() -> Optional[str]:
    return _connection_error
