"""
Reading progress data models
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


class ReadingProgressModel(BaseModel):
    """Reading progress row"""
    user_id: str
    story_id: str
    last_chapter_id: Optional[str] = None
    last_order_num: Optional[int] = None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReadingProgressItem(BaseModel):
    """Reading history entry with story, author and chapter details"""
    story_id: str
    title: str
    cover_image_path: Optional[str] = None
    status: str
    author_id: str
    author_name: Optional[str] = None
    last_chapter_id: Optional[str] = None
    last_order_num: Optional[int] = None
    last_chapter_title: Optional[str] = Field(None, description="Title of the last chapter read")
    total_chapters: int = 0
    updated_at: datetime
