"""Signup/login and the auth dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core import get_db, get_settings
from app.core.errors import Forbidden, InvalidCredentials, Unauthorized
from app.core.security import TokenIssuer
from app.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
)
from app.services.credentials import CredentialStore

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_token_issuer() -> TokenIssuer:
    """Dependency: token issuer built from the current settings."""
    return TokenIssuer(get_settings())


def get_credential_store(db: Annotated[Session, Depends(get_db)]) -> CredentialStore:
    return CredentialStore(db)


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> SignupResponse:
    """
    Register a new user and return the profile with a JWT.
    The user is committed before the token is minted.
    """
    user = store.create(body.name, body.email, body.password)
    logger.info("User signed up", extra={"user_id": user.id})
    return SignupResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        is_admin=user.is_admin,
        token=issuer.issue(user.id),
    )


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> LoginResponse:
    """
    Authenticate with email and password; returns the profile and a JWT.
    Include the token in the Authorization header as: Bearer <token>

    Locked accounts still get a token with isLocked=true; every authenticated
    route refuses them.
    """
    try:
        user = store.authenticate(body.email, body.password)
    except InvalidCredentials:
        logger.warning("Login failed", extra={"email": body.email.strip().lower()})
        raise
    logger.info("User logged in", extra={"user_id": user.id, "is_locked": user.is_locked})
    return LoginResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        is_admin=user.is_admin,
        is_locked=user.is_locked,
        token=issuer.issue(user.id),
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT for an existing, unlocked user.
    Raises 401 if the token is missing/invalid or the user is gone, 403 if locked.
    """
    if credentials is None:
        raise Unauthorized("Not authorized, no token")
    user_id = issuer.verify(credentials.credentials)
    user = store.get(user_id)
    if user is None:
        raise Unauthorized("Not authorized, user not found")
    if user.is_locked:
        logger.warning("Rejected request from locked account", extra={"user_id": user.id})
        raise Forbidden("Account is locked")
    return CurrentUser.model_validate(user)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require an authenticated admin. Raises 403 for non-admin."""
    if not current_user.is_admin:
        raise Forbidden("Not authorized as an admin")
    return current_user
