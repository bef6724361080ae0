# studio/core/security.py
"""
Password hashing, JWT issuing and the ``get_current_user`` dependency.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from studio import cache
from studio.core.config import settings
from studio.core.exceptions import AuthError

REVOKED_TOKEN_PREFIX = "revoked_token:"

security = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(user_id: str, expires_in: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + (expires_in or timedelta(hours=settings.auth.jwt_expiration_hours)),
    }
    return jwt.encode(payload, settings.auth.jwt_secret, algorithm=settings.auth.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify a token.

    Raises:
        AuthError: expired, malformed or missing claims
    """
    try:
        payload = jwt.decode(token, settings.auth.jwt_secret, algorithms=[settings.auth.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token")

    if not payload.get("sub") or not payload.get("jti"):
        raise AuthError("Invalid token")
    return payload


def revoked_key(jti: str) -> str:
    return f"{REVOKED_TOKEN_PREFIX}{jti}"


async def revoke_token(payload: Dict[str, Any]) -> None:
    """Remember a token's jti in Redis until it would have expired anyway."""
    remaining = int(payload["exp"] - datetime.now(timezone.utc).timestamp())
    if remaining > 0:
        await cache.set_cache(revoked_key(payload["jti"]), True, remaining)


async def is_token_revoked(jti: str) -> bool:
    return bool(await cache.get_cache(revoked_key(jti)))


async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Dict[str, Any]:
    if not credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    try:
        payload = decode_access_token(credentials.credentials)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)

    if await is_token_revoked(payload["jti"]):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token revoked")
    return payload


async def get_current_user(payload: Dict[str, Any] = Depends(get_token_payload)):
    from studio.db import is_connected
    from studio.models import User

    if not is_connected():
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database not available")

    try:
        user = await User.get(PydanticObjectId(payload["sub"]))
    except InvalidId:
        user = None

    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user
