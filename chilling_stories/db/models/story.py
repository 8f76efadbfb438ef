"""
Story table ORM model
"""

from sqlalchemy import Column, String, Text, Integer, TIMESTAMP, ForeignKey, Index, CheckConstraint
from datetime import datetime

from chilling_stories.db.base import Base


class Story(Base):
    """Story table"""
    __tablename__ = "stories"

    # Primary key
    id = Column(String(64), primary_key=True, comment="Story ID")

    # Foreign keys
    author_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, comment="Author")

    # Metadata
    title = Column(String(256), nullable=False, comment="Title")
    description = Column(Text, nullable=True, comment="Description")
    cover_image_path = Column(String(512), nullable=True, comment="Poster filename")
    status = Column(String(20), nullable=False, default="ongoing", comment="ongoing / completed")

    # Counters
    view_count = Column(Integer, nullable=False, default=0, comment="Views")
    favorite_count = Column(Integer, nullable=False, default=0, comment="Active favorites")

    # Timestamps
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="Created at")

    # Constraints and indexes
    __table_args__ = (
        CheckConstraint('view_count >= 0', name='ck_stories_view_count'),
        CheckConstraint('favorite_count >= 0', name='ck_stories_favorite_count'),
        Index('idx_stories_author_id', 'author_id'),
        Index('idx_stories_created_at', 'created_at', postgresql_ops={'created_at': 'DESC'}),
        Index('idx_stories_view_count', 'view_count', postgresql_ops={'view_count': 'DESC'}),
        Index('idx_stories_favorite_count', 'favorite_count', postgresql_ops={'favorite_count': 'DESC'}),
    )
