"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    CredentialsRequest,
    CurrentUser,
    UserRead,
    UsersListResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.home import HomeFeedResponse
from app.schemas.post import (
    MessageResponse,
    PostCreate,
    PostRead,
    PostStatus,
    PostType,
    PostUpdate,
)
from app.schemas.upload import UploadResponse

__all__ = [
    "AuthResponse",
    "CredentialsRequest",
    "CurrentUser",
    "HealthResponse",
    "HomeFeedResponse",
    "MessageResponse",
    "PostCreate",
    "PostRead",
    "PostStatus",
    "PostType",
    "PostUpdate",
    "UploadResponse",
    "UserRead",
    "UsersListResponse",
]
