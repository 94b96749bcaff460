"""Routes for the authenticated user's own account."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.routes.auth import get_current_user
from app.schemas.auth import CurrentUser, UserProfile

router = APIRouter()


@router.get("/profile", response_model=UserProfile)
def get_profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserProfile:
    """Return the profile of the user the bearer token belongs to."""
    return UserProfile.model_validate(current_user.model_dump())
