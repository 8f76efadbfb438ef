"""
Story data models

One view model per projection shape returned by the story queries.
"""

from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from enum import Enum


class StoryStatus(str, Enum):
    """Story publication status"""
    ONGOING = "ongoing"
    COMPLETED = "completed"


class StoryRanking(str, Enum):
    """Ordering used by the story list queries"""
    NEWEST = "newest"
    VIEWS = "views"
    FAVORITES = "favorites"


class StoryCreate(BaseModel):
    """Create story request"""
    title: str = Field(..., description="Title")
    description: Optional[str] = Field(None, description="Description")
    cover_image_path: Optional[str] = Field(None, description="Poster filename")


class StoryUpdate(BaseModel):
    """Partial story update, empty values are ignored"""
    title: Optional[str] = None
    description: Optional[str] = None
    cover_image_path: Optional[str] = None
    status: Optional[StoryStatus] = None


class GenreModel(BaseModel):
    """Genre"""
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class StoryModel(BaseModel):
    """Story row"""
    id: str = Field(..., description="Story ID")
    title: str = Field(..., description="Title")
    description: Optional[str] = Field(None, description="Description")
    cover_image_path: Optional[str] = Field(None, description="Poster filename")
    author_id: str = Field(..., description="Author ID")
    status: StoryStatus = Field(StoryStatus.ONGOING, description="Status")
    view_count: int = Field(0, description="Views")
    favorite_count: int = Field(0, description="Favorites")
    created_at: datetime = Field(..., description="Created at")

    model_config = ConfigDict(from_attributes=True)


class StorySummary(StoryModel):
    """Story with chapter aggregates and author name"""
    chapter_count: int = Field(0, description="Number of chapters")
    last_update_at: Optional[datetime] = Field(None, description="Newest chapter time, or creation time")
    author_name: Optional[str] = Field(None, description="Author username")


class StoryWithFavorite(StorySummary):
    """Story summary plus the viewer's favorite flag"""
    is_favorited: bool = Field(False, description="Whether the viewer favorited the story")


class StoryDetail(StoryWithFavorite):
    """Single story with its genres"""
    genres: List[str] = Field(default_factory=list, description="Genre names")


class FavoriteStatus(BaseModel):
    """Result of a favorite toggle"""
    is_favorited: bool
    favorite_count: int = 0


class GenresUpdate(BaseModel):
    """Replace-all genre request"""
    genres: List[str] = Field(default_factory=list, description="Genre names")
