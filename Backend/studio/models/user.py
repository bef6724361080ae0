from datetime import datetime
from typing import Any, Dict, Literal, Optional

from beanie import Document, Indexed, Insert, Replace, Save, SaveChanges, before_event
from pydantic import BaseModel, Field, field_validator

from .session import iso, utcnow


class UserPreferences(BaseModel):
    theme: Literal["light", "dark", "auto"] = "light"
    language: str = "en"


class User(Document):
    email: Indexed(str, unique=True)
    name: str = Field(..., min_length=1, max_length=100)
    password_hash: str
    avatar: Optional[str] = None
    is_active: bool = True
    last_login: Optional[datetime] = None
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    class Settings:
        name = "users"

    @before_event(Insert, Replace, Save, SaveChanges)
    def touch(self):
        self.updated_at = utcnow()

    def to_response(self) -> Dict[str, Any]:
        """Public profile; never includes the password hash."""
        return {
            "_id": str(self.id),
            "email": self.email,
            "name": self.name,
            "avatar": self.avatar,
            "isActive": self.is_active,
            "lastLogin": iso(self.last_login),
            "preferences": self.preferences.model_dump(),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
