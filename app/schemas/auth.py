"""Request/response schemas for auth, profile and admin endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.security import (
    BCRYPT_MAX_PASSWORD_BYTES,
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup (case-insensitive match)."""
    return (email or "").strip().lower()


class _CamelModel(BaseModel):
    """Responses are serialized with camelCase keys (isAdmin, isLocked)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SignupRequest(BaseModel):
    """
    New account details. Any isAdmin/isLocked keys in the body are ignored;
    new accounts always start as unlocked non-admins.
    """

    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN, description="Display name")
    email: EmailStr = Field(..., description="Email (login key)")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        return v


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN, description="Email")
    password: str = Field(..., min_length=1, description="Password")


class CurrentUser(_CamelModel):
    """Authenticated, admitted user attached to the request for downstream handlers."""

    id: int
    name: str
    email: str
    is_admin: bool
    is_locked: bool


class UserProfile(_CamelModel):
    """Public view of a user (no password hash)."""

    id: int
    name: str
    email: str
    is_admin: bool
    is_locked: bool


class SignupResponse(_CamelModel):
    id: int
    name: str
    email: str
    is_admin: bool
    token: str = Field(..., description="JWT bearer token")


class LoginResponse(UserProfile):
    """Profile plus token. isLocked is informational; locked accounts are refused per request."""

    token: str = Field(..., description="JWT bearer token")


class UsersListResponse(BaseModel):
    """Response for GET /admin/users."""

    users: list[UserProfile]
