"""SQLAlchemy ORM models.

These models define the database schema. DAOs convert these to Pydantic
domain models before returning to services - SQLAlchemy objects should
never leak outside the DAO layer.
"""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.database import Base


class MediaRecordModel(Base):
    """Media record ORM model.

    One row per uploaded piece of media, across all content collections.
    """

    __tablename__ = "media_records"

    id = Column(String, primary_key=True)
    content_type = Column(String, nullable=False, index=True)
    owner_id = Column(String, nullable=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    tags = Column(JSON, nullable=False, default=list)

    # Primary asset
    public_id = Column(String, nullable=False)
    url = Column(String, nullable=False)
    resource_type = Column(String, nullable=False)
    format = Column(String, nullable=True)
    duration = Column(Float, nullable=True)

    # Secondary asset, set only once its upload has completed
    thumbnail_url = Column(String, nullable=True)
    thumbnail_public_id = Column(String, nullable=True)

    views = Column(Integer, nullable=False, default=0)
    likes_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    likes = relationship(
        "MediaLikeModel",
        back_populates="record",
        cascade="all, delete-orphan",
    )
    comments = relationship(
        "MediaCommentModel",
        back_populates="record",
        cascade="all, delete-orphan",
    )


class MediaLikeModel(Base):
    """Like ORM model.

    At most one like per user per record.
    """

    __tablename__ = "media_likes"

    __table_args__ = (
        UniqueConstraint("record_id", "user_id", name="uq_media_like_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    record_id = Column(
        String,
        ForeignKey("media_records.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    record = relationship("MediaRecordModel", back_populates="likes")


class MediaCommentModel(Base):
    """Comment ORM model. Comments are listed oldest first."""

    __tablename__ = "media_comments"

    id = Column(String, primary_key=True)
    record_id = Column(
        String,
        ForeignKey("media_records.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(String, nullable=False)
    user_name = Column(String, nullable=False)
    user_image = Column(String, nullable=True)
    content = Column(Text, nullable=False)
    likes = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    # Relationships
    record = relationship("MediaRecordModel", back_populates="comments")
