"""Post lifecycle: create, list, read, update, delete and status transitions.

Two states only, draft and published. publish/unpublish touch nothing but
status; a full update may also set status directly.
"""

import logging

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models.post import STATUS_DRAFT, STATUS_PUBLISHED, Post
from app.schemas.auth import CurrentUser
from app.schemas.post import PostCreate, PostUpdate

logger = logging.getLogger(__name__)

# Fields that may be cleared to NULL by an update; all others ignore explicit nulls.
NULLABLE_FIELDS = frozenset({"emag_page"})


def create_post(db: Session, data: PostCreate, principal: CurrentUser) -> Post:
    """Persist a new post owned by the caller. Status defaults to draft."""
    post = Post(**data.model_dump())
    post.author_id = principal.id
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info(
        "Created post id=%s author_id=%s status=%s", post.id, post.author_id, post.status
    )
    return post


def list_posts(db: Session, status: str | None = None) -> list[Post]:
    """All posts, optionally filtered by status, newest first."""
    query = db.query(Post)
    if status:
        query = query.filter(Post.status == status)
    return query.order_by(Post.created_at.desc(), Post.id.desc()).all()


def get_post(db: Session, post_id: int) -> Post:
    """Return a post or raise NotFoundError."""
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def update_post(db: Session, post_id: int, data: PostUpdate) -> Post:
    """Overwrite the supplied fields of an existing post."""
    post = get_post(db, post_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(post, field, value)
    db.commit()
    db.refresh(post)
    logger.info("Updated post id=%s", post.id)
    return post


def delete_post(db: Session, post_id: int) -> None:
    """Delete by id. A missing id is not an error."""
    deleted = db.query(Post).filter(Post.id == post_id).delete(synchronize_session=False)
    db.commit()
    logger.info("Delete post id=%s deleted=%s", post_id, deleted)


def set_post_status(db: Session, post_id: int, status: str) -> Post:
    """Move a post to draft or published, leaving every other field untouched."""
    if status not in (STATUS_DRAFT, STATUS_PUBLISHED):
        raise ValueError(f"Unknown post status: {status}")
    post = get_post(db, post_id)
    post.status = status
    db.commit()
    db.refresh(post)
    logger.info("Post id=%s status=%s", post.id, status)
    return post


def publish_post(db: Session, post_id: int) -> Post:
    return set_post_status(db, post_id, STATUS_PUBLISHED)


def unpublish_post(db: Session, post_id: int) -> Post:
    return set_post_status(db, post_id, STATUS_DRAFT)
