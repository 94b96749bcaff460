"""Shared test setup: in-memory SQLite database and an app client wired to it."""

import unittest
from collections.abc import Generator
from unittest.mock import patch

from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.routes.auth import get_token_issuer
from app.core.config import Settings
from app.core.database import get_db
from app.core.security import TokenIssuer
from app.main import app
from app.models import Base, User
from app.services.credentials import CredentialStore

TEST_JWT_SECRET = "test-secret-not-for-production"


def make_settings(**overrides: object) -> Settings:
    """Settings isolated from the process environment and any .env file."""
    values: dict[str, object] = {
        "APP_ENV": "dev",
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": SecretStr(TEST_JWT_SECRET),
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database with the schema created; shared by all threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


class DatabaseTestCase(unittest.TestCase):
    """Per-test database; bcrypt runs at minimum cost to keep tests fast."""

    def setUp(self) -> None:
        rounds = patch("app.core.security.BCRYPT_ROUNDS", 4)
        rounds.start()
        self.addCleanup(rounds.stop)
        self.session_factory = make_session_factory()

    def open_session(self) -> Session:
        db = self.session_factory()
        self.addCleanup(db.close)
        return db

    def create_user(
        self, name: str, email: str, password: str, *, is_admin: bool = False
    ) -> User:
        db = self.session_factory()
        try:
            return CredentialStore(db).create(name, email, password, is_admin=is_admin)
        finally:
            db.close()

    def count_users(self) -> int:
        db = self.session_factory()
        try:
            return db.query(User).count()
        finally:
            db.close()


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient whose get_db and token issuer use the test setup."""

    def setUp(self) -> None:
        super().setUp()
        self.settings = make_settings()
        self.issuer = TokenIssuer(self.settings)

        def override_get_db() -> Generator[Session, None, None]:
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_token_issuer] = lambda: self.issuer
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

    def bearer(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def signup(self, name: str, email: str, password: str, **extra: object):
        return self.client.post(
            "/api/users/signup",
            json={"name": name, "email": email, "password": password, **extra},
        )

    def login(self, email: str, password: str):
        return self.client.post("/api/users/login", json={"email": email, "password": password})
