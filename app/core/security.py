"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from app.core.errors import Unauthorized

if TYPE_CHECKING:
    from app.core.config import Settings

# Bcrypt cost (rounds).
BCRYPT_ROUNDS = 12

# bcrypt only reads the first 72 bytes of its input.
BCRYPT_MAX_PASSWORD_BYTES = 72

NAME_MIN_LEN = 1
NAME_MAX_LEN = 255
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 1
PASSWORD_MAX_LEN = BCRYPT_MAX_PASSWORD_BYTES

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage with a fresh random salt."""
    return bcrypt.hashpw(
        plain_password.encode("utf-8"),
        bcrypt.gensalt(rounds=BCRYPT_ROUNDS),
    ).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Corrupt hashes never match."""
    try:
        pw_bytes = plain_password.encode("utf-8")
        # Longer inputs would be silently truncated by some bcrypt builds.
        if len(pw_bytes) > BCRYPT_MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


class TokenIssuer:
    """
    Mints and verifies signed bearer tokens for a user id.

    Tokens carry sub (user id), iat and exp. They are stateless: expiry is the
    only way a token stops being valid.
    """

    def __init__(self, settings: "Settings") -> None:
        self._secret = settings.JWT_SECRET.get_secret_value()
        self._algorithm = settings.JWT_ALGORITHM
        self.lifetime = timedelta(days=settings.JWT_EXPIRE_DAYS)

    def issue(self, user_id: int, now: datetime | None = None) -> str:
        """Create a token for user_id expiring `lifetime` after issuance."""
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> int:
        """
        Return the user id embedded in a valid token.

        Raises Unauthorized for a bad signature, malformed token, missing claims
        or an expired token, without saying which.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
            return int(payload["sub"])
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise Unauthorized() from e
