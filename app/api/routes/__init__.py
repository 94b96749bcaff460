"""API routes mounted under API_PREFIX."""

from fastapi import APIRouter

from app.api.routes import admin, auth, users

router = APIRouter()
router.include_router(auth.router, prefix="/users", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
