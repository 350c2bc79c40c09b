"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CredentialsRequest(BaseModel):
    """Username and password for register and login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class CurrentUser(BaseModel):
    """Authenticated principal (id, username, role) recovered from a verified token."""

    id: int
    username: str
    role: str


class UserRead(BaseModel):
    """User as returned to clients (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str
    created_at: datetime | None = None


class AuthResponse(BaseModel):
    """Response for register and login."""

    message: str
    user: UserRead
    token: str = Field(..., description="Bearer token for the Authorization header")


class UsersListResponse(BaseModel):
    """Response for GET /auth/users (admin only)."""

    users: list[UserRead]
