"""Register/login routes and auth dependencies (get_current_user, require_roles)."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.models.user import User
from app.schemas.auth import (
    AuthResponse,
    CredentialsRequest,
    CurrentUser,
    UserRead,
    UsersListResponse,
)
from app.services.auth import (
    authenticate_user,
    check_role,
    principal_from_authorization,
    register_user,
)

router = APIRouter()
# Documents the bearer scheme in OpenAPI; the raw header is parsed below.
security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    _credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """Dependency: require a valid Bearer token and return its principal. Raises 401 otherwise."""
    return principal_from_authorization(request.headers.get("authorization"), settings)


def require_roles(*allowed_roles: str) -> Callable[..., CurrentUser]:
    """Dependency factory: authenticated principal whose role is in allowed_roles, else 403."""

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        return check_role(current_user, allowed_roles)

    return dependency


@router.post("/register", response_model=AuthResponse)
def register(
    body: CredentialsRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """Create a writer account; returns the user and a bearer token."""
    user, token = register_user(db, body.username, body.password, settings)
    return AuthResponse(
        message="User created", user=UserRead.model_validate(user), token=token
    )


@router.post("/login", response_model=AuthResponse)
def login(
    body: CredentialsRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """
    Authenticate with username and password; returns the user and a bearer token.
    Include the token in the Authorization header as: Bearer <token>
    """
    user, token = authenticate_user(db, body.username, body.password, settings)
    return AuthResponse(
        message="Login success", user=UserRead.model_validate(user), token=token
    )


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_roles("admin"))],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users (admin only)."""
    users = db.query(User).order_by(User.id).all()
    return UsersListResponse(users=[UserRead.model_validate(u) for u in users])
