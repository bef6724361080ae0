# studio/core/__init__.py
"""
Core module - configuration, logging, errors and security helpers.
"""
from .config import settings
from .exceptions import (
    StudioError,
    LLMError,
    RateLimitError,
    ParseError,
    CacheError,
    AuthError,
)

__all__ = [
    "settings",
    "StudioError",
    "LLMError",
    "RateLimitError",
    "ParseError",
    "CacheError",
    "AuthError",
]
