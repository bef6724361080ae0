# studio/api/preview.py
"""
Preview endpoint for code that is not (yet) stored in a session.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from studio.core.logging import log
from studio.core.security import get_current_user
from studio.models import User
from studio.preview import build_preview_html


router = APIRouter(prefix="/api/preview", tags=["Preview"])


class PreviewRequest(BaseModel):
    jsx: Optional[str] = None
    css: Optional[str] = None


@router.post("", response_class=HTMLResponse)
async def render_preview(data: PreviewRequest, user: User = Depends(get_current_user)):
    html = build_preview_html(data.jsx or "", data.css or "")
    log("PREVIEW", f"Rendered ad-hoc preview ({len(html)} bytes)")
    return HTMLResponse(html)
