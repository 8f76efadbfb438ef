"""
Data access objects (DAO)

Wrap database statements for the service layer
"""

from .user_dao import UserDAO
from .story_dao import StoryDAO
from .chapter_dao import ChapterDAO
from .genre_dao import GenreDAO
from .favorite_dao import FavoriteDAO
from .progress_dao import ProgressDAO

__all__ = [
    "UserDAO",
    "StoryDAO",
    "ChapterDAO",
    "GenreDAO",
    "FavoriteDAO",
    "ProgressDAO",
]
