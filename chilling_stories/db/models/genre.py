"""
Genre and story-genre link ORM models
"""

from sqlalchemy import Column, String, Integer, ForeignKey, Index

from chilling_stories.db.base import Base


class Genre(Base):
    """Genre table, names are stored trimmed and lower-cased"""
    __tablename__ = "genres"

    id = Column(Integer, primary_key=True, autoincrement=True, comment="Auto-increment ID")
    name = Column(String(64), unique=True, nullable=False, comment="Normalized name")


class StoryGenre(Base):
    """Story <-> genre link table"""
    __tablename__ = "story_genres"

    story_id = Column(String(64), ForeignKey("stories.id", ondelete="CASCADE"), primary_key=True, comment="Story ID")
    genre_id = Column(Integer, ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True, comment="Genre ID")

    __table_args__ = (
        Index('idx_story_genres_genre', 'genre_id'),
    )
