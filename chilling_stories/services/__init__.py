"""
Business service layer
"""

from .exceptions import ChapterOrderConflictError, UploadRejectedError
from .story_service import StoryService
from .chapter_service import ChapterService
from .engagement_service import EngagementService
from .user_service import UserService
from .storage_service import StorageService

__all__ = [
    # Exceptions
    "ChapterOrderConflictError",
    "UploadRejectedError",

    # Domain services
    "StoryService",
    "ChapterService",
    "EngagementService",

    # Collaborators
    "UserService",
    "StorageService",
]
