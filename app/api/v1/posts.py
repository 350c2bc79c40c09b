"""Authenticated post management: CRUD plus publish/unpublish."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_roles
from app.core.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.post import (
    MessageResponse,
    PostCreate,
    PostRead,
    PostStatus,
    PostUpdate,
)
from app.services import posts as post_service

router = APIRouter()

# Roles allowed to change what readers see (publish, unpublish, delete).
EDITORIAL_ROLES = ("editor", "admin")

# Post ids are PostgreSQL INTEGER; larger values fail validation instead of reaching the driver.
MAX_POST_ID = 2**31 - 1
PostId = Annotated[int, Path(ge=1, le=MAX_POST_ID)]


@router.get("", response_model=list[PostRead])
def list_posts(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    status: Annotated[PostStatus | None, Query()] = None,
) -> list[PostRead]:
    """All posts (any status unless filtered), newest first."""
    return [PostRead.model_validate(p) for p in post_service.list_posts(db, status)]


@router.post("", response_model=PostRead, status_code=201)
def create_post(
    body: PostCreate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PostRead:
    """Create a post owned by the caller. Status is draft unless the body sets it."""
    return PostRead.model_validate(post_service.create_post(db, body, user))


@router.get("/{post_id}", response_model=PostRead)
def get_post(
    post_id: PostId,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PostRead:
    return PostRead.model_validate(post_service.get_post(db, post_id))


@router.put("/{post_id}", response_model=PostRead)
def update_post(
    post_id: PostId,
    body: PostUpdate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PostRead:
    """Replace the supplied fields. Unknown id is 404."""
    return PostRead.model_validate(post_service.update_post(db, post_id, body))


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: PostId,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(require_roles(*EDITORIAL_ROLES))],
) -> MessageResponse:
    """Delete a post. Responds the same whether or not the id existed."""
    post_service.delete_post(db, post_id)
    return MessageResponse(message="Deleted")


@router.patch("/{post_id}/publish", response_model=PostRead)
def publish_post(
    post_id: PostId,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(require_roles(*EDITORIAL_ROLES))],
) -> PostRead:
    return PostRead.model_validate(post_service.publish_post(db, post_id))


@router.patch("/{post_id}/unpublish", response_model=PostRead)
def unpublish_post(
    post_id: PostId,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(require_roles(*EDITORIAL_ROLES))],
) -> PostRead:
    return PostRead.model_validate(post_service.unpublish_post(db, post_id))
