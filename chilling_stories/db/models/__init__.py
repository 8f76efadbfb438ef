"""
Database ORM models

Exports every SQLAlchemy model class
"""

from chilling_stories.db.base import Base

# Import every model so Base knows every table
from .user import User
from .story import Story
from .chapter import Chapter
from .genre import Genre, StoryGenre
from .favorite import Favorite
from .progress import ReadingProgress

__all__ = [
    # Base
    "Base",

    # Models
    "User",
    "Story",
    "Chapter",
    "Genre",
    "StoryGenre",
    "Favorite",
    "ReadingProgress",
]
