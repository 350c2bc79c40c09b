"""Public read queries over published posts: listing, category filter, free-text search."""

from sqlalchemy import ColumnElement, any_, literal, or_
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models.post import STATUS_PUBLISHED, Post

# Fields matched by free-text search.
SEARCH_FIELDS = (Post.title, Post.sapo, Post.tags)


def _newest_first(query):
    return query.order_by(Post.created_at.desc(), Post.id.desc())


def category_filter(label: str) -> ColumnElement[bool]:
    """Exact membership of label in the post's category array."""
    return literal(label) == any_(Post.category)


def text_filter(q: str) -> ColumnElement[bool]:
    """Case-insensitive literal substring match on title OR sapo OR tags."""
    return or_(*(column.icontains(q, autoescape=True) for column in SEARCH_FIELDS))


def published_posts(db: Session) -> list[Post]:
    """Every published post, newest first."""
    return _newest_first(db.query(Post).filter(Post.status == STATUS_PUBLISHED)).all()


def get_published_post(db: Session, post_id: int) -> Post:
    """A published post by id; drafts are reported as not found."""
    post = db.get(Post, post_id)
    if post is None or post.status != STATUS_PUBLISHED:
        raise NotFoundError("Post not found")
    return post


def posts_by_category(db: Session, label: str) -> list[Post]:
    """Published posts carrying exactly this category label, newest first."""
    return _newest_first(
        db.query(Post).filter(Post.status == STATUS_PUBLISHED, category_filter(label))
    ).all()


def search_posts(db: Session, q: str) -> list[Post]:
    """Published posts whose title, sapo or tags contain q. Empty q matches all."""
    query = db.query(Post).filter(Post.status == STATUS_PUBLISHED)
    q = (q or "").strip()
    if q:
        query = query.filter(text_filter(q))
    return _newest_first(query).all()
