"""
Reading progress table ORM model
"""

from sqlalchemy import Column, String, Integer, TIMESTAMP, ForeignKey, Index, UniqueConstraint
from datetime import datetime

from chilling_stories.db.base import Base


class ReadingProgress(Base):
    """Reading progress table, one row per (user, story)"""
    __tablename__ = "reading_progress"

    # Primary key
    id = Column(Integer, primary_key=True, autoincrement=True, comment="Auto-increment ID")

    # Foreign keys
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, comment="User ID")
    story_id = Column(String(64), ForeignKey("stories.id", ondelete="CASCADE"), nullable=False, comment="Story ID")

    # Progress
    last_chapter_id = Column(String(64), ForeignKey("chapters.id", ondelete="SET NULL"), nullable=True, comment="Last chapter read")
    last_order_num = Column(Integer, nullable=True, comment="Order number of the last chapter read")

    # Timestamps
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="Last read at")

    # Constraints and indexes
    __table_args__ = (
        UniqueConstraint('user_id', 'story_id', name='uk_reading_progress_user_story'),
        Index('idx_progress_user_updated', 'user_id', 'updated_at', postgresql_ops={'updated_at': 'DESC'}),
    )
