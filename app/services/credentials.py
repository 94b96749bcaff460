"""Credential store: user lookup, creation and account flags over the users table."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateEmail, InvalidCredentials
from app.core.security import hash_password, verify_password
from app.models import User
from app.schemas.auth import normalize_email

logger = logging.getLogger(__name__)


# Checked against when the email is unknown, so both login failures cost one bcrypt check.
TIMING_HASH = hash_password("timing-equalizer-not-a-real-password")


class CredentialStore:
    """
    Persisted user records for one database session.

    Emails are normalized before every read and write; the unique index on
    users.email is the final guard against concurrent duplicate signups.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def find_by_email(self, email: str) -> User | None:
        """Case-insensitive exact match on email."""
        normalized = normalize_email(email)
        if not normalized:
            return None
        return self.db.query(User).filter(User.email == normalized).first()

    def create(self, name: str, email: str, password: str, *, is_admin: bool = False) -> User:
        """
        Hash the password and persist a new user; commit before returning.

        Raises DuplicateEmail if the email is taken, including when a concurrent
        signup wins the race to the unique index.
        """
        normalized = normalize_email(email)
        if self.find_by_email(normalized) is not None:
            raise DuplicateEmail()

        user = User(
            name=name.strip(),
            email=normalized,
            password_hash=hash_password(password),
            is_admin=is_admin,
            is_locked=False,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateEmail() from e
        self.db.refresh(user)
        logger.info("User created", extra={"user_id": user.id, "is_admin": user.is_admin})
        return user

    def authenticate(self, email: str, password: str) -> User:
        """
        Return the user for valid credentials.

        Unknown email and wrong password both raise InvalidCredentials. Lock
        state is not checked here.
        """
        user = self.find_by_email(email)
        if user is None:
            verify_password(password, TIMING_HASH)
            raise InvalidCredentials()
        if not verify_password(password, user.password_hash):
            raise InvalidCredentials()
        return user

    def list_users(self) -> list[User]:
        return self.db.query(User).order_by(User.id).all()

    def set_locked(self, user: User, locked: bool) -> User:
        user.is_locked = locked
        self.db.commit()
        self.db.refresh(user)
        return user

    def set_admin(self, user: User, is_admin: bool) -> User:
        user.is_admin = is_admin
        self.db.commit()
        self.db.refresh(user)
        return user
