"""Pydantic schemas for posts: create, update and read shapes."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

PostStatus = Literal["draft", "published"]
PostType = Literal["normal", "emagazine"]


class PostCreate(BaseModel):
    """
    Fields a caller may set when creating a post.

    author_id is not accepted here; it always comes from the bearer token.
    """

    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., min_length=1, max_length=512)
    sapo: str = ""
    author: str = Field(default="", max_length=255)
    thumbnail: str = Field(default="", max_length=2048)
    tags: str = Field(default="", max_length=1024)
    content: str = ""
    type: PostType = "normal"
    emag_page: str | None = Field(default=None, max_length=2048)
    category: list[str] = Field(default_factory=list)
    status: PostStatus = "draft"

    @model_validator(mode="after")
    def emagazine_requires_page(self) -> "PostCreate":
        if self.type == "emagazine" and not (self.emag_page and self.emag_page.strip()):
            raise ValueError("emag_page is required for emagazine posts")
        return self


class PostUpdate(BaseModel):
    """Replacement values for an existing post; omitted fields are left as stored."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(default=None, min_length=1, max_length=512)
    sapo: str | None = None
    author: str | None = Field(default=None, max_length=255)
    thumbnail: str | None = Field(default=None, max_length=2048)
    tags: str | None = Field(default=None, max_length=1024)
    content: str | None = None
    type: PostType | None = None
    emag_page: str | None = Field(default=None, max_length=2048)
    category: list[str] | None = None
    status: PostStatus | None = None


class PostRead(BaseModel):
    """Post as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    sapo: str
    author: str
    author_id: int | None
    thumbnail: str
    tags: str
    content: str
    type: str
    emag_page: str | None
    category: list[str]
    status: str
    created_at: datetime | None


class MessageResponse(BaseModel):
    """Plain acknowledgement body."""

    message: str
