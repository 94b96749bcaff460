"""Admin-only account management: list users, lock and unlock accounts."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.api.routes.auth import get_credential_store, require_admin
from app.core.errors import NotFound, ValidationError
from app.models import User
from app.schemas.auth import CurrentUser, UserProfile, UsersListResponse
from app.services.credentials import CredentialStore

logger = logging.getLogger(__name__)

router = APIRouter()

# users.id is a 32-bit INTEGER primary key.
UserId = Annotated[int, Path(ge=1, le=2**31 - 1)]


def _get_user_or_404(store: CredentialStore, user_id: int) -> User:
    user = store.get(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(users=[UserProfile.model_validate(u) for u in store.list_users()])


@router.put("/users/{user_id}/lock", response_model=UserProfile)
def lock_user(
    user_id: UserId,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> UserProfile:
    """
    Lock an account. Tokens already issued to it stop working on the next request.
    Admins cannot lock their own account.
    """
    if user_id == admin.id:
        raise ValidationError("You cannot lock your own account")
    user = store.set_locked(_get_user_or_404(store, user_id), True)
    logger.info("Account locked", extra={"user_id": user.id, "admin_id": admin.id})
    return UserProfile.model_validate(user)


@router.put("/users/{user_id}/unlock", response_model=UserProfile)
def unlock_user(
    user_id: UserId,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
) -> UserProfile:
    """Unlock an account."""
    user = store.set_locked(_get_user_or_404(store, user_id), False)
    logger.info("Account unlocked", extra={"user_id": user.id, "admin_id": admin.id})
    return UserProfile.model_validate(user)
