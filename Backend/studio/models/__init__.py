# studio/models/__init__.py
from .session import (
    ChatMessage,
    ComponentCode,
    Session,
    SessionSummary,
    UIState,
    Viewport,
    camelize_keys,
    clean_description,
    clean_tags,
    clean_title,
)
from .user import User, UserPreferences

DOCUMENT_MODELS = [User, Session]

__all__ = [
    "ChatMessage",
    "ComponentCode",
    "Session",
    "SessionSummary",
    "UIState",
    "Viewport",
    "camelize_keys",
    "clean_description",
    "clean_tags",
    "clean_title",
    "User",
    "UserPreferences",
    "DOCUMENT_MODELS",
]
