# studio/core/exceptions.py
"""
Custom exceptions for the application.
"""
from typing import Optional, Dict, Any


class StudioError(Exception):
    """Base exception for all Component Studio errors."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LLMError(StudioError):
    """LLM provider error."""
    def __init__(self, provider: str, message: str, status: Optional[int] = None):
        super().__init__(message, {"provider": provider, "status": status})
        self.provider = provider
        self.status = status


class RateLimitError(LLMError):
    """Upstream provider answered 429."""
    def __init__(self, provider: str, message: str = "Rate limited by provider"):
        super().__init__(provider, message, status=429)


class ParseError(StudioError):
    """Model output contained a JSON block that could not be decoded."""
    pass


class CacheError(StudioError):
    """Redis cache error."""
    pass


class AuthError(StudioError):
    """Token could not be issued or verified."""
    pass
