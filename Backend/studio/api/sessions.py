# studio/api/sessions.py
"""
Session routes.

MongoDB is authoritative; every write that changes chat history, component
code or UI state refreshes the Redis mirror under ``session:<id>``.
"""
import math
import re
from typing import Any, Dict, List, Optional

from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel, ValidationError

from studio import cache
from studio.core.logging import log
from studio.core.security import get_current_user
from studio.lib.export import build_component_zip
from studio.models import (
    Session,
    SessionSummary,
    User,
    clean_description,
    clean_tags,
    clean_title,
)
from studio.preview import build_preview_html


router = APIRouter(prefix="/api/sessions", tags=["Sessions"])

CHAT_ROLES = ("user", "assistant")


class CreateSessionRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None


class UpdateSessionRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None


class ChatMessageRequest(BaseModel):
    role: Optional[str] = None
    content: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class ComponentCodeRequest(BaseModel):
    jsx: Optional[str] = None
    css: Optional[str] = None
    tsx: Optional[str] = None


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")


def _server_error(message: str, error: Exception, session_id: Optional[str] = None) -> HTTPException:
    log("SESSIONS", f"{message}: {error}", session_id=session_id)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


async def get_owned_session(session_id: str, user: User = Depends(get_current_user)) -> Session:
    """The caller's active session, or 404 (also for malformed ids)."""
    try:
        oid = PydanticObjectId(session_id)
    except (InvalidId, TypeError):
        raise _not_found()

    session = await Session.find_one(
        Session.id == oid,
        Session.user_id == user.id,
        Session.is_active == True,  # noqa: E712
    )
    if not session:
        raise _not_found()
    return session


async def mirror(session: Session) -> None:
    await cache.set_session_data(str(session.id), session.cache_payload())


def build_search_query(user_id: PydanticObjectId, search: Optional[str]) -> Dict[str, Any]:
    query: Dict[str, Any] = {"user_id": user_id, "is_active": True}
    if search:
        # Literal substring match, case-insensitive
        pattern = {"$regex": re.escape(search), "$options": "i"}
        query["$or"] = [
            {"title": pattern},
            {"description": pattern},
            {"tags": pattern},
        ]
    return query


@router.get("")
async def list_sessions(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=200),
    user: User = Depends(get_current_user),
):
    """List the caller's active sessions, most recently accessed first."""
    query = build_search_query(user.id, search)
    try:
        summaries = await (
            Session.find(query)
            .sort(-Session.last_accessed)
            .skip((page - 1) * limit)
            .limit(limit)
            .project(SessionSummary)
            .to_list()
        )
        total = await Session.find(query).count()
    except Exception as e:
        raise _server_error("Failed to fetch sessions", e)

    return {
        "sessions": [s.to_response() for s in summaries],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit),
        },
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_session(data: CreateSessionRequest, user: User = Depends(get_current_user)):
    if not data.title or not data.title.strip():
        raise HTTPException(status_code=400, detail="Title is required")

    try:
        title = clean_title(data.title)
        description = clean_description(data.description)
        tags = clean_tags(data.tags)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    session = Session(user_id=user.id, title=title, description=description, tags=tags)
    try:
        await session.insert()
    except Exception as e:
        raise _server_error("Failed to create session", e)

    return {"message": "Session created successfully", "session": session.to_response()}


@router.get("/{session_id}")
async def get_session(session: Session = Depends(get_owned_session)):
    """Full session; also warms the Redis mirror."""
    await mirror(session)
    return {"session": session.to_response()}


@router.put("/{session_id}")
async def update_session(data: UpdateSessionRequest, session: Session = Depends(get_owned_session)):
    try:
        if data.title is not None:
            session.title = clean_title(data.title)
        if data.description is not None:
            session.description = clean_description(data.description)
        if data.tags is not None:
            session.tags = clean_tags(data.tags)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        await session.save()
    except Exception as e:
        raise _server_error("Failed to update session", e, str(session.id))

    return {"message": "Session updated successfully", "session": session.to_response()}


@router.delete("/{session_id}")
async def delete_session(session: Session = Depends(get_owned_session)):
    """Soft delete: the document stays, flagged inactive, and the mirror is dropped."""
    session.is_active = False
    try:
        await session.save()
    except Exception as e:
        raise _server_error("Failed to delete session", e, str(session.id))

    await cache.delete_session_data(str(session.id))
    return {"message": "Session deleted successfully"}


@router.post("/{session_id}/chat")
async def add_chat_message(data: ChatMessageRequest, session: Session = Depends(get_owned_session)):
    if not data.role or not data.content:
        raise HTTPException(status_code=400, detail="Role and content are required")
    if data.role not in CHAT_ROLES:
        raise HTTPException(status_code=400, detail="Role must be 'user' or 'assistant'")

    try:
        await session.add_chat_message(data.role, data.content, data.metadata)
    except Exception as e:
        raise _server_error("Failed to add chat message", e, str(session.id))

    await mirror(session)
    return {"message": "Chat message added successfully", "messageCount": session.message_count}


@router.put("/{session_id}/code")
async def update_component_code(data: ComponentCodeRequest, session: Session = Depends(get_owned_session)):
    try:
        code = await session.update_component_code(data.jsx, data.css, data.tsx)
    except Exception as e:
        raise _server_error("Failed to update component code", e, str(session.id))

    await mirror(session)
    return {"message": "Component code updated successfully", "componentCode": code.to_response()}


@router.put("/{session_id}/ui-state")
async def update_ui_state(
    patch: Dict[str, Any] = Body(...),
    session: Session = Depends(get_owned_session),
):
    try:
        ui_state = await session.update_ui_state(patch)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid UI state")
    except Exception as e:
        raise _server_error("Failed to update UI state", e, str(session.id))

    await mirror(session)
    return {"message": "UI state updated successfully", "uiState": ui_state.to_response()}


@router.get("/{session_id}/stats")
async def get_session_stats(session: Session = Depends(get_owned_session)):
    return {"stats": session.stats()}


@router.get("/{session_id}/state")
async def get_session_state(session_id: str, user: User = Depends(get_current_user)):
    """
    Editor state (chat, code, UI) read through the Redis mirror.

    Falls back to MongoDB on a miss, or when the mirrored entry belongs to
    someone else, and refills the mirror.
    """
    cached = await cache.get_session_data(session_id)
    if isinstance(cached, dict) and cached.get("userId") == str(user.id):
        state = {k: v for k, v in cached.items() if k != "userId"}
        return {"state": state, "cached": True}

    session = await get_owned_session(session_id, user)
    await mirror(session)
    return {"state": session.state_payload(), "cached": False}


@router.get("/{session_id}/preview", response_class=HTMLResponse)
async def preview_session(session: Session = Depends(get_owned_session)):
    code = session.component_code
    log("PREVIEW", f"Rendering preview v{code.version}", session_id=str(session.id))
    return HTMLResponse(build_preview_html(code.jsx, code.css))


@router.get("/{session_id}/export")
async def export_session(session: Session = Depends(get_owned_session)):
    filename, payload = build_component_zip(session.component_code, session.title)
    log("EXPORT", f"Exported {filename} ({len(payload)} bytes)", session_id=str(session.id))
    return Response(
        content=payload,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
