"""SQLAlchemy tables for demos and their comments (tasks)."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .session import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class DemoRow(Base):
    __tablename__ = "demos"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(Text, nullable=False)
    client = Column(Text, nullable=False, default="")
    demo_url = Column(Text, nullable=False)
    thumbnail_url = Column(Text, nullable=True)
    category = Column(String(255), nullable=False, default="")
    priority = Column(Integer, nullable=False, default=3)
    status = Column(String(64), nullable=False, default="active")
    # Python-side default keeps microseconds, so ordering by created_at is stable on SQLite too.
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False, index=True)

    comments = relationship("CommentRow", back_populates="demo", cascade="all,delete-orphan", passive_deletes=True)


class CommentRow(Base):
    __tablename__ = "comments"

    id = Column(String(36), primary_key=True, default=_uuid)
    demo_id = Column(String(36), ForeignKey("demos.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    priority = Column(String(16), nullable=False, default="Mid")
    status = Column(String(32), nullable=False, default="Pending")
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False, index=True)

    demo = relationship("DemoRow", back_populates="comments")
