# studio/api/auth.py
"""
Authentication routes.

Users are a system entity: only register / login / logout / profile and
password management live here. Sessions reference ``user_id``.
"""
import re
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pymongo.errors import DuplicateKeyError

from studio.api.deps import require_db
from studio.core.config import settings
from studio.core.logging import log
from studio.core.security import (
    create_access_token,
    get_current_user,
    get_token_payload,
    hash_password,
    revoke_token,
    verify_password,
)
from studio.models import User, UserPreferences
from studio.models.session import utcnow


router = APIRouter(prefix="/api/auth", tags=["Auth"])

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
NAME_MAX_LENGTH = 100


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = None
    avatar: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")


def _check_password_length(password: str) -> None:
    minimum = settings.auth.min_password_length
    if len(password) < minimum:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {minimum} characters",
        )


def _check_name(name: str) -> None:
    if len(name) > NAME_MAX_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Name cannot exceed {NAME_MAX_LENGTH} characters",
        )


def _server_error(message: str, error: Exception) -> HTTPException:
    log("AUTH", f"{message}: {error}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


def _auth_response(user: User, message: str) -> Dict[str, Any]:
    return {
        "message": message,
        "token": create_access_token(str(user.id)),
        "user": user.to_response(),
    }


@router.post("/register", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_db)])
async def register(data: RegisterRequest):
    email = (data.email or "").strip().lower()
    name = (data.name or "").strip()
    if not email or not data.password or not name:
        raise HTTPException(status_code=400, detail="Email, password and name are required")
    if not EMAIL_RE.match(email):
        raise HTTPException(status_code=400, detail="Invalid email address")
    _check_name(name)
    _check_password_length(data.password)

    if await User.find_one(User.email == email):
        raise HTTPException(status_code=400, detail="User already exists with this email")

    user = User(email=email, name=name, password_hash=hash_password(data.password), last_login=utcnow())
    try:
        await user.insert()
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="User already exists with this email")
    except Exception as e:
        raise _server_error("Registration failed", e)

    log("AUTH", f"Registered {email}")
    return _auth_response(user, "User registered successfully")


@router.post("/login", dependencies=[Depends(require_db)])
async def login(data: LoginRequest):
    email = (data.email or "").strip().lower()
    if not email or not data.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    user = await User.find_one(User.email == email)
    if not user or not user.is_active or not verify_password(data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user.last_login = utcnow()
    try:
        await user.save()
    except Exception as e:
        raise _server_error("Login failed", e)

    log("AUTH", f"Login {email}")
    return _auth_response(user, "Login successful")


@router.post("/logout")
async def logout(payload: Dict[str, Any] = Depends(get_token_payload)):
    await revoke_token(payload)
    return {"message": "Logged out successfully"}


@router.get("/profile")
async def get_profile(user: User = Depends(get_current_user)):
    return {"user": user.to_response()}


@router.put("/profile")
async def update_profile(data: UpdateProfileRequest, user: User = Depends(get_current_user)):
    if data.name is not None:
        name = data.name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="Name cannot be empty")
        _check_name(name)
        user.name = name
    if data.avatar is not None:
        user.avatar = data.avatar or None
    if data.preferences is not None:
        try:
            user.preferences = UserPreferences.model_validate(
                {**user.preferences.model_dump(), **data.preferences}
            )
        except ValidationError:
            raise HTTPException(status_code=400, detail="Invalid preferences")

    try:
        await user.save()
    except Exception as e:
        raise _server_error("Failed to update profile", e)
    return {"user": user.to_response()}


@router.put("/change-password")
async def change_password(data: ChangePasswordRequest, user: User = Depends(get_current_user)):
    if not data.current_password or not data.new_password:
        raise HTTPException(status_code=400, detail="Current password and new password are required")
    if not verify_password(data.current_password, user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")
    _check_password_length(data.new_password)

    user.password_hash = hash_password(data.new_password)
    try:
        await user.save()
    except Exception as e:
        raise _server_error("Failed to change password", e)
    return {"message": "Password changed successfully"}
