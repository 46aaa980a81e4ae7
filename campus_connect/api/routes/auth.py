"""Register/login endpoints and auth dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campus_connect.core.database import get_db
from campus_connect.core.errors import (
    AuthenticationError,
    PermissionDeniedError,
    ValidationFailedError,
)
from campus_connect.core.security import (
    create_access_token,
    has_role,
    hash_password,
    validate_access_token,
    verify_password,
)
from campus_connect.models.user import ROLE_ADMIN, ROLE_USER, User
from campus_connect.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(user),
        username=user.username,
        role=user.role,
    )


@router.post("/register", response_model=AuthResponse)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Create a regular account and return a token for it."""
    username = body.username.strip()
    email = str(body.email).strip().lower()
    if not username:
        raise ValidationFailedError("Username is required")
    if db.query(User.id).filter(User.username == username).first() is not None:
        raise ValidationFailedError("Username already exists")
    if db.query(User.id).filter(User.email == email).first() is not None:
        raise ValidationFailedError("Email already exists")

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(body.password),
        role=ROLE_USER,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration for the same name or email.
        db.rollback()
        raise ValidationFailedError("Username or email already exists", cause=e) from e
    db.refresh(user)
    logger.info("User registered: id=%s username=%s", user.id, user.username)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    username = body.username.strip()
    user = db.query(User).filter(User.username == username).first()
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info("Login failed for username=%s", username)
        raise AuthenticationError("Invalid username or password")
    return _auth_response(user)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT and return its identity. Raises 401 if missing or invalid."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    return validate_access_token(credentials.credentials)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'Admin'. Raises 403 otherwise."""
    if not has_role(current_user, ROLE_ADMIN):
        raise PermissionDeniedError("Admin access required")
    return current_user
