"""
Engagement service

Favorites, view counters and reading progress
"""

from typing import Optional, List

from loguru import logger

from chilling_stories.db import Database
from chilling_stories.db.dao import StoryDAO, FavoriteDAO, ProgressDAO
from chilling_stories.models import (
    FavoriteStatus, StoryWithFavorite, ReadingProgressModel, ReadingProgressItem
)


class EngagementService:
    """Engagement service"""

    def __init__(self, database: Database):
        self.database = database

    # ==================== Favorites ====================

    async def toggle_favorite(self, user_id: str, story_id: str) -> Optional[FavoriteStatus]:
        """
        Favorite or unfavorite a story

        The story row is locked for the whole check-then-act so the favorite
        row and favorite_count change together.

        Args:
            user_id: user ID
            story_id: story ID

        Returns:
            new state, None when the story does not exist
        """
        async with self.database.session() as session:
            if await StoryDAO.lock_counters(session, story_id) is None:
                return None

            if await FavoriteDAO.exists(session, user_id, story_id):
                await FavoriteDAO.delete(session, user_id, story_id)
                await StoryDAO.decrement_favorite_count(session, story_id)
                is_favorited = False
            else:
                await FavoriteDAO.create(session, user_id, story_id)
                await StoryDAO.increment_favorite_count(session, story_id)
                is_favorited = True

            favorite_count = await StoryDAO.get_favorite_count(session, story_id)

        logger.info(f"{'⭐' if is_favorited else '☆'} {user_id} {'favorited' if is_favorited else 'unfavorited'} {story_id}")
        return FavoriteStatus(is_favorited=is_favorited, favorite_count=favorite_count)

    async def is_favorited(self, user_id: str, story_id: str) -> bool:
        async with self.database.session() as session:
            return await FavoriteDAO.exists(session, user_id, story_id)

    async def get_favorited_stories(self, user_id: str) -> List[StoryWithFavorite]:
        """Stories the user favorited, most recent first"""
        async with self.database.session() as session:
            rows = await StoryDAO.list_favorited_by(session, user_id)
        return [StoryWithFavorite.model_validate(row) for row in rows]

    # ==================== Views ====================

    async def increment_view_count(self, story_id: str) -> bool:
        """Count one view, False when the story does not exist"""
        async with self.database.session() as session:
            return await StoryDAO.increment_view_count(session, story_id)

    # ==================== Reading progress ====================

    async def update_reading_progress(
        self,
        user_id: str,
        story_id: str,
        chapter_id: str,
        order_num: int
    ) -> None:
        """
        Point the user's progress in a story at a chapter

        Last write wins: reading an earlier chapter moves progress back.
        """
        async with self.database.session() as session:
            await ProgressDAO.save(session, user_id, story_id, chapter_id, order_num)

    async def get_reading_progress(self, user_id: str, story_id: str) -> Optional[ReadingProgressModel]:
        async with self.database.session() as session:
            progress = await ProgressDAO.get(session, user_id, story_id)
        return ReadingProgressModel.model_validate(progress) if progress else None

    async def get_all_reading_progress(self, user_id: str) -> List[ReadingProgressItem]:
        """Reading history, most recently read first"""
        async with self.database.session() as session:
            rows = await ProgressDAO.list_for_user(session, user_id)
        return [ReadingProgressItem.model_validate(row) for row in rows]

    async def delete_reading_progress(self, user_id: str, story_id: str) -> bool:
        """Remove a story from the user's reading history"""
        async with self.database.session() as session:
            deleted = await ProgressDAO.delete(session, user_id, story_id)

        if deleted:
            logger.info(f"🧹 Reading progress removed: {user_id} / {story_id}")
        return deleted
