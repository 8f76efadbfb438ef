"""
Data models

Pydantic models used for API validation and as service return types
"""

# Response envelope
from .response import ApiResponse, ErrorResponse

# User
from .user import UserRole, UserCreate, UserLogin, RoleUpdate, UserModel, Principal

# Story
from .story import (
    StoryStatus, StoryRanking, StoryCreate, StoryUpdate, GenreModel,
    StoryModel, StorySummary, StoryWithFavorite, StoryDetail, FavoriteStatus,
    GenresUpdate
)

# Chapter
from .chapter import ChapterCreate, ChapterUpload, ChapterUpdate, ChapterCreated, ChapterModel

# Reading progress
from .progress import ReadingProgressModel, ReadingProgressItem

__all__ = [
    # Response
    "ApiResponse",
    "ErrorResponse",

    # User
    "UserRole",
    "UserCreate",
    "UserLogin",
    "RoleUpdate",
    "UserModel",
    "Principal",

    # Story
    "StoryStatus",
    "StoryRanking",
    "StoryCreate",
    "StoryUpdate",
    "GenreModel",
    "StoryModel",
    "StorySummary",
    "StoryWithFavorite",
    "StoryDetail",
    "FavoriteStatus",
    "GenresUpdate",

    # Chapter
    "ChapterCreate",
    "ChapterUpload",
    "ChapterUpdate",
    "ChapterCreated",
    "ChapterModel",

    # Reading progress
    "ReadingProgressModel",
    "ReadingProgressItem",
]
