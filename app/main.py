"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import health
from app.api.routes import router as api_router
from app.core.config import settings
from app.core.errors import install_exception_handlers

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)

APP_VERSION = "1.0.0"

app = FastAPI(
    title="Mystère Meal API",
    version=APP_VERSION,
    docs_url="/api-docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_exception_handlers(app)

app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, object]:
    """Root route; minimal payload for discovery."""
    return {
        "message": "Mystère Meal API Server",
        "version": APP_VERSION,
        "endpoints": {
            "health": "/health",
            "apiDocs": "/api-docs",
            "auth": f"{settings.API_PREFIX}/users/signup, {settings.API_PREFIX}/users/login",
            "profile": f"{settings.API_PREFIX}/users/profile",
            "admin": f"{settings.API_PREFIX}/admin",
        },
    }
