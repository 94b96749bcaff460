"""Pydantic request/response schemas."""

from app.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
    UserProfile,
    UsersListResponse,
)
from app.schemas.health import HealthResponse

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "SignupRequest",
    "SignupResponse",
    "UserProfile",
    "UsersListResponse",
]
