from uuid import uuid4

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import relationship

from xtermux.database.entities.base import Base, utcnow

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLE_BLOCKED = "blocked"
VALID_ROLES = (ROLE_USER, ROLE_ADMIN, ROLE_BLOCKED)


class User(Base):
    """
    A registered account together with its public profile.

    The profile columns (username, avatar, role) live on the same row as the
    credentials; there is no separate profiles table.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    username = Column(String(64), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(128), nullable=False)
    avatar_url = Column(Text, nullable=True)
    role = Column(String(16), nullable=False, default=ROLE_USER)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=True)

    sessions = relationship("ChatSession", back_populates="user", cascade="all, delete-orphan")
    progress = relationship("GuideProgress", back_populates="user", cascade="all, delete-orphan")
