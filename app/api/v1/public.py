"""Public read endpoints for the website: no credential required."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.v1.posts import PostId
from app.core.database import get_db
from app.schemas.home import HomeFeedResponse
from app.schemas.post import PostRead
from app.services import search
from app.services.home_feed import build_home_feed

router = APIRouter()
home_router = APIRouter()


@router.get("/posts", response_model=list[PostRead])
def list_published(db: Annotated[Session, Depends(get_db)]) -> list[PostRead]:
    """All published posts, newest first."""
    return [PostRead.model_validate(p) for p in search.published_posts(db)]


@router.get("/posts/{post_id}", response_model=PostRead)
def get_published(
    post_id: PostId,
    db: Annotated[Session, Depends(get_db)],
) -> PostRead:
    """A single published post; drafts and unknown ids are 404."""
    return PostRead.model_validate(search.get_published_post(db, post_id))


@router.get("/category/{slug}", response_model=list[PostRead])
def by_category(
    slug: str,
    db: Annotated[Session, Depends(get_db)],
) -> list[PostRead]:
    """Published posts carrying exactly this category label, newest first."""
    return [PostRead.model_validate(p) for p in search.posts_by_category(db, slug)]


@router.get("/search", response_model=list[PostRead])
def search_published(
    db: Annotated[Session, Depends(get_db)],
    q: Annotated[str, Query(max_length=256)] = "",
) -> list[PostRead]:
    """Published posts whose title, sapo or tags contain q (case-insensitive)."""
    return [PostRead.model_validate(p) for p in search.search_posts(db, q)]


@home_router.get("", response_model=HomeFeedResponse)
def get_home(db: Annotated[Session, Depends(get_db)]) -> HomeFeedResponse:
    """
    Home page payload: freshest post as highlight, the next two as recent,
    and up to four posts per topical section.
    """
    feed = build_home_feed(search.published_posts(db))
    return HomeFeedResponse.model_validate(feed.as_dict(), from_attributes=True)
