"""
Favorite table ORM model
"""

from sqlalchemy import Column, String, Integer, TIMESTAMP, ForeignKey, Index, UniqueConstraint
from datetime import datetime

from chilling_stories.db.base import Base


class Favorite(Base):
    """Favorite table, a row means the user has favorited the story"""
    __tablename__ = "favorites"

    # Primary key
    id = Column(Integer, primary_key=True, autoincrement=True, comment="Auto-increment ID")

    # Foreign keys
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, comment="User ID")
    story_id = Column(String(64), ForeignKey("stories.id", ondelete="CASCADE"), nullable=False, comment="Story ID")

    # Timestamps
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="Favorited at")

    # Constraints and indexes
    __table_args__ = (
        UniqueConstraint('user_id', 'story_id', name='uk_favorite_user_story'),
        Index('idx_favorites_user', 'user_id', 'created_at', postgresql_ops={'created_at': 'DESC'}),
        Index('idx_favorites_story', 'story_id'),
    )
