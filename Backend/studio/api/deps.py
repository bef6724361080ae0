# studio/api/deps.py
"""
Shared route dependencies.
"""
from fastapi import HTTPException, status

from studio.db import is_connected


def require_db() -> None:
    if not is_connected():
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database not available")
