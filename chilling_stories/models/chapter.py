"""
Chapter data models
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


class ChapterCreate(BaseModel):
    """Create chapter request"""
    story_id: str = Field(..., description="Owning story")
    order_num: int = Field(..., ge=1, description="Position within the story")
    title: str = Field(..., description="Title")
    content: str = Field(..., description="Raw text body")


class ChapterUpload(BaseModel):
    """Chapter read from an uploaded file"""
    title: str
    content: str


class ChapterUpdate(BaseModel):
    """Partial chapter update, empty values are ignored"""
    title: Optional[str] = None
    content: Optional[str] = None


class ChapterCreated(BaseModel):
    """Chapter created by a bulk upload"""
    chapter_id: str
    title: str
    order_num: int


class ChapterModel(BaseModel):
    """Chapter row"""
    id: str
    story_id: str
    order_num: int
    title: str
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
