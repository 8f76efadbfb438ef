"""
Chapter table ORM model
"""

from sqlalchemy import Column, String, Text, Integer, TIMESTAMP, ForeignKey, Index, UniqueConstraint
from datetime import datetime

from chilling_stories.db.base import Base


class Chapter(Base):
    """Chapter table"""
    __tablename__ = "chapters"

    # Primary key
    id = Column(String(64), primary_key=True, comment="Chapter ID")

    # Foreign keys
    story_id = Column(String(64), ForeignKey("stories.id", ondelete="CASCADE"), nullable=False, comment="Owning story")

    # Content
    order_num = Column(Integer, nullable=False, comment="Position within the story, from 1")
    title = Column(String(256), nullable=False, comment="Title")
    content = Column(Text, nullable=False, comment="Raw text body")

    # Timestamps
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="Created at")

    # Constraints and indexes
    __table_args__ = (
        UniqueConstraint('story_id', 'order_num', name='uk_chapter_story_order'),
        Index('idx_chapters_story_created', 'story_id', 'created_at'),
    )
