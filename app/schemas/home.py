"""Pydantic schema for the home-page feed."""

from pydantic import BaseModel, Field

from app.schemas.post import PostRead


class HomeFeedResponse(BaseModel):
    """Highlight, two recent posts and five topical sections (at most 4 posts each)."""

    highlight: PostRead | None = Field(default=None, description="Freshest published post")
    recent: list[PostRead] = Field(default_factory=list)
    news: list[PostRead] = Field(default_factory=list)
    experience: list[PostRead] = Field(default_factory=list)
    profiles: list[PostRead] = Field(default_factory=list)
    academic: list[PostRead] = Field(default_factory=list)
    multimedia: list[PostRead] = Field(default_factory=list)
