"""
Favorite data access object
"""

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from chilling_stories.db.dml import insert_for
from chilling_stories.db.models.favorite import Favorite


class FavoriteDAO:
    """Favorite DAO"""

    @staticmethod
    async def exists(session: AsyncSession, user_id: str, story_id: str) -> bool:
        """Whether the user has favorited the story"""
        result = await session.execute(
            select(func.count(Favorite.id)).where(
                Favorite.user_id == user_id,
                Favorite.story_id == story_id
            )
        )
        return (result.scalar() or 0) > 0

    @staticmethod
    async def create(session: AsyncSession, user_id: str, story_id: str) -> bool:
        """
        Insert a favorite row

        Returns:
            False when the row already existed
        """
        result = await session.execute(
            insert_for(session, Favorite)
            .values(user_id=user_id, story_id=story_id)
            .on_conflict_do_nothing(index_elements=["user_id", "story_id"])
        )
        return result.rowcount > 0

    @staticmethod
    async def delete(session: AsyncSession, user_id: str, story_id: str) -> bool:
        """Remove a favorite row"""
        result = await session.execute(
            delete(Favorite).where(
                Favorite.user_id == user_id,
                Favorite.story_id == story_id
            )
        )
        return result.rowcount > 0
