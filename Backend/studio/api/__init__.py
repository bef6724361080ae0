# studio/api/__init__.py
"""
API module - All route handlers.
"""
from . import health, auth, sessions, ai, preview

__all__ = [
    "health",
    "auth",
    "sessions",
    "ai",
    "preview",
]
