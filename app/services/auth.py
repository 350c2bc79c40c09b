"""Registration, login and bearer-credential checks.

Token verification is pure computation: the principal comes from the signed
claims, not from a store lookup, so a valid token keeps working until it
expires (if JWT_EXPIRE_MINUTES is set) or the signing secret rotates.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    ConflictError,
    ForbiddenError,
    UnauthenticatedError,
    ValidationError,
)
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.models.user import DEFAULT_ROLE, ROLES, User
from app.schemas.auth import CurrentUser

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def _validate_credentials(username: str, password: str) -> str:
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError("username & password required")
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        raise ValidationError("Invalid username length.")
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        raise ValidationError(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters."
        )
    return username


def issue_token(user: User, settings: "Settings") -> str:
    """Sign a bearer token for a stored user."""
    return create_access_token(
        user_id=user.id, username=user.username, role=user.role, settings=settings
    )


def register_user(
    db: Session, username: str, password: str, settings: "Settings"
) -> tuple[User, str]:
    """
    Create a writer account and sign a token for it.

    Raises ValidationError for missing/invalid credentials and ConflictError
    when the username is taken (including a concurrent insert of the same name).
    """
    username = _validate_credentials(username, password)

    existing = db.query(User).filter(User.username == username).first()
    if existing is not None:
        raise ConflictError("username already exists")

    user = User(
        username=username,
        password_hash=hash_password(password),
        role=DEFAULT_ROLE,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("username already exists") from e
    db.refresh(user)
    logger.info("Registered user id=%s username=%s", user.id, user.username)
    return user, issue_token(user, settings)


def authenticate_user(
    db: Session, username: str, password: str, settings: "Settings"
) -> tuple[User, str]:
    """
    Check a username/password pair and sign a token.

    Unknown user and wrong password are both ValidationError with the same message.
    """
    if not username or not password:
        raise ValidationError("username & password required")

    user = db.query(User).filter(User.username == username.strip()).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Rejected login for username=%s", username)
        raise ValidationError("Invalid username or password.")
    logger.info("Login user id=%s", user.id)
    return user, issue_token(user, settings)


def principal_from_authorization(
    authorization: str | None, settings: "Settings"
) -> CurrentUser:
    """
    Turn a raw Authorization header value into a principal.

    Missing header, a header without a bearer token, and a token that fails
    verification are distinct UnauthenticatedError messages.
    """
    if authorization is None or not authorization.strip():
        raise UnauthenticatedError("Missing Authorization header")

    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token:
        raise UnauthenticatedError("Invalid Authorization header")

    try:
        payload = decode_access_token(token, settings)
    except jwt.PyJWTError as e:
        raise UnauthenticatedError("Invalid or expired token") from e

    try:
        return CurrentUser(
            id=int(payload["sub"]),
            username=str(payload.get("username", "")),
            role=str(payload.get("role", "")),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise UnauthenticatedError("Invalid token payload") from e


def check_role(principal: CurrentUser, allowed_roles: Iterable[str]) -> CurrentUser:
    """Return principal if its role is allowed; otherwise raise ForbiddenError."""
    allowed = frozenset(allowed_roles)
    unknown = allowed - set(ROLES)
    if unknown:
        raise ValueError(f"Unknown roles: {sorted(unknown)}")
    if principal.role not in allowed:
        raise ForbiddenError("Forbidden")
    return principal
