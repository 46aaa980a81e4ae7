"""Password hashing, JWT issue/validation and role checks."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from campus_connect.core.config import settings
from campus_connect.core.errors import InvalidTokenError
from campus_connect.schemas.auth import CurrentUser

if TYPE_CHECKING:
    from campus_connect.models.user import User

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Tokens are valid for a fixed 24 hours. There is no revocation list: a leaked
# token stays valid until it expires.
ACCESS_TOKEN_LIFETIME = timedelta(hours=24)

REQUIRED_CLAIMS = ["sub", "exp", "iat", "iss", "aud", "username", "email", "role"]


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(user: "User | CurrentUser", now: datetime | None = None) -> str:
    """Create a signed JWT carrying the user's id, username, email and role."""
    issued_at = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(user.id),
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": issued_at,
        "exp": issued_at + ACCESS_TOKEN_LIFETIME,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return the raw claims.
    Raises jwt.PyJWTError on bad signature, wrong issuer/audience, missing claims or expiry.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
        options={"require": REQUIRED_CLAIMS},
    )


def validate_access_token(token: str | None) -> CurrentUser:
    """
    Validate a bearer token and return the identity it carries.

    Raises InvalidTokenError (expired=True for well-formed tokens past exp) and
    nothing else, whatever the input.
    """
    if not token or not token.strip():
        raise InvalidTokenError("Not authenticated")
    try:
        payload = decode_access_token(token.strip())
    except jwt.ExpiredSignatureError as e:
        raise InvalidTokenError("Token has expired", expired=True, cause=e) from e
    except jwt.PyJWTError as e:
        raise InvalidTokenError("Invalid token", cause=e) from e
    try:
        return CurrentUser(
            id=int(payload["sub"]),
            username=str(payload["username"]),
            email=str(payload["email"]),
            role=str(payload["role"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidTokenError("Invalid token payload", cause=e) from e


def has_role(identity: CurrentUser | None, required_role: str) -> bool:
    """Pure capability check: True when identity holds required_role."""
    return identity is not None and identity.role == required_role
