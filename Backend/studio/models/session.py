from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from beanie import Document, Insert, PydanticObjectId, Replace, Save, SaveChanges, before_event
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pymongo import ASCENDING, DESCENDING, TEXT, IndexModel


ChatRole = Literal["user", "assistant"]
Theme = Literal["light", "dark"]

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def camelize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Accept snake_case keys from clients alongside camelCase ones."""
    return {to_camel(k) if "_" in k else k: v for k, v in data.items()}


class EmbeddedModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ChatMessage(EmbeddedModel):
    role: ChatRole
    content: str = Field(..., min_length=1)
    timestamp: datetime = Field(default_factory=utcnow)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ComponentCode(EmbeddedModel):
    jsx: str = ""
    css: str = ""
    tsx: str = ""
    version: int = 1
    last_modified: datetime = Field(default_factory=utcnow)


class Viewport(EmbeddedModel):
    width: int = 1200
    height: int = 800


class UIState(EmbeddedModel):
    selected_element: Optional[str] = None
    properties: Dict[str, Any] = Field(default_factory=dict)
    viewport: Viewport = Field(default_factory=Viewport)
    theme: Theme = "light"


def clean_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Title is required")
    if len(value) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
    return value


def clean_description(value: Optional[str]) -> str:
    value = (value or "").strip()
    if len(value) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters")
    return value


def clean_tags(value: Optional[List[str]]) -> List[str]:
    return [t.strip() for t in (value or []) if t and t.strip()]


class Session(Document):
    """
    A user's editing session: chat transcript, generated component and editor state.
    """
    user_id: PydanticObjectId
    title: str
    description: str = ""
    chat_history: List[ChatMessage] = Field(default_factory=list)
    component_code: ComponentCode = Field(default_factory=ComponentCode)
    ui_state: UIState = Field(default_factory=UIState)
    is_active: bool = True
    last_accessed: datetime = Field(default_factory=utcnow)
    tags: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return clean_title(value)

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, value: Optional[str]) -> str:
        return clean_description(value)

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, value: Optional[List[str]]) -> List[str]:
        return clean_tags(value)

    class Settings:
        name = "sessions"
        validate_on_save = True
        indexes = [
            IndexModel([("user_id", ASCENDING), ("last_accessed", DESCENDING)]),
            IndexModel([("user_id", ASCENDING), ("is_active", ASCENDING)]),
            IndexModel([("title", TEXT), ("description", TEXT)]),
        ]

    @before_event(Insert, Replace, Save, SaveChanges)
    def touch(self):
        now = utcnow()
        self.last_accessed = now
        self.updated_at = now

    @property
    def message_count(self) -> int:
        return len(self.chat_history)

    async def add_chat_message(
        self, role: ChatRole, content: str, metadata: Optional[Dict[str, Any]] = None
    ) -> ChatMessage:
        message = ChatMessage(role=role, content=content, metadata=metadata or {})
        self.chat_history.append(message)
        await self.save()
        return message

    async def update_component_code(
        self, jsx: Optional[str] = None, css: Optional[str] = None, tsx: Optional[str] = None
    ) -> ComponentCode:
        """Replace the given code fields (None keeps the current value) and bump the version."""
        code = self.component_code
        if jsx is not None:
            code.jsx = jsx
        if css is not None:
            code.css = css
        if tsx is not None:
            code.tsx = tsx
        code.version += 1
        code.last_modified = utcnow()
        await self.save()
        return code

    async def update_ui_state(self, patch: Dict[str, Any]) -> UIState:
        """Shallow-merge ``patch`` over the current UI state.

        Raises pydantic.ValidationError when the merged state is invalid.
        """
        merged = {**self.ui_state.model_dump(by_alias=True), **camelize_keys(patch)}
        self.ui_state = UIState.model_validate(merged)
        await self.save()
        return self.ui_state

    def state_payload(self) -> Dict[str, Any]:
        return {
            "chatHistory": [m.to_response() for m in self.chat_history],
            "componentCode": self.component_code.to_response(),
            "uiState": self.ui_state.to_response(),
        }

    def cache_payload(self) -> Dict[str, Any]:
        """Document mirrored into Redis under ``session:<id>``; userId allows ownership checks on reads."""
        return {"userId": str(self.user_id), **self.state_payload()}

    def to_response(self) -> Dict[str, Any]:
        return {
            "_id": str(self.id),
            "userId": str(self.user_id),
            "title": self.title,
            "description": self.description,
            **self.state_payload(),
            "isActive": self.is_active,
            "lastAccessed": iso(self.last_accessed),
            "tags": list(self.tags),
            "metadata": dict(self.metadata),
            "messageCount": self.message_count,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }

    def stats(self) -> Dict[str, Any]:
        roles = [m.role for m in self.chat_history]
        return {
            "messageCount": self.message_count,
            "codeVersion": self.component_code.version,
            "lastModified": iso(self.component_code.last_modified),
            "createdAt": iso(self.created_at),
            "lastAccessed": iso(self.last_accessed),
            "userMessages": roles.count("user"),
            "assistantMessages": roles.count("assistant"),
        }


class SessionSummary(BaseModel):
    """List projection: everything except the heavy embedded fields."""
    id: PydanticObjectId = Field(alias="_id")
    user_id: PydanticObjectId
    title: str
    description: str = ""
    is_active: bool = True
    last_accessed: datetime
    tags: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_response(self) -> Dict[str, Any]:
        return {
            "_id": str(self.id),
            "userId": str(self.user_id),
            "title": self.title,
            "description": self.description,
            "chatHistory": [],
            "componentCode": ComponentCode().to_response(),
            "uiState": UIState().to_response(),
            "isActive": self.is_active,
            "lastAccessed": iso(self.last_accessed),
            "tags": list(self.tags),
            "metadata": dict(self.metadata),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
