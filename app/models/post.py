"""ORM model for articles and their publication status."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY

from app.models.base import Base

STATUS_DRAFT = "draft"
STATUS_PUBLISHED = "published"
POST_STATUSES = (STATUS_DRAFT, STATUS_PUBLISHED)

TYPE_NORMAL = "normal"
TYPE_EMAGAZINE = "emagazine"
POST_TYPES = (TYPE_NORMAL, TYPE_EMAGAZINE)


class Post(Base):
    """
    One article. `emagazine` posts point at an external page (emag_page)
    instead of carrying inline content.

    author_id is always the authenticated creator; author is a free display name.
    """

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(512), nullable=False, default="")
    sapo = Column(Text, nullable=False, default="")
    author = Column(String(255), nullable=False, default="")
    author_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    thumbnail = Column(String(2048), nullable=False, default="")
    tags = Column(String(1024), nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    type = Column(String(32), nullable=False, default=TYPE_NORMAL)
    emag_page = Column(String(2048), nullable=True)
    category = Column(ARRAY(String(128)), nullable=False, default=list)
    status = Column(String(32), nullable=False, default=STATUS_DRAFT, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
