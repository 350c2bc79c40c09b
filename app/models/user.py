"""ORM model for staff accounts (auth and RBAC)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from app.models.base import Base

ROLES = ("writer", "editor", "admin")
DEFAULT_ROLE = "writer"


class User(Base):
    """
    Staff account for JWT authentication and role-based access control.

    role: 'writer', 'editor' or 'admin'. Only set at creation; never edited over HTTP.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=DEFAULT_ROLE)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
