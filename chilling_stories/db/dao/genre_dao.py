"""
Genre data access object
"""

from typing import List
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from chilling_stories.db.dml import insert_for
from chilling_stories.db.models.genre import Genre, StoryGenre


class GenreDAO:
    """Genre DAO"""

    @staticmethod
    async def get_or_create(session: AsyncSession, name: str) -> int:
        """
        Insert a genre if absent and return its ID

        Concurrent callers with the same name both succeed, the unique
        constraint on genres.name keeps a single row.

        Args:
            session: database session
            name: normalized genre name

        Returns:
            genre ID
        """
        await session.execute(
            insert_for(session, Genre)
            .values(name=name)
            .on_conflict_do_nothing(index_elements=["name"])
        )
        result = await session.execute(
            select(Genre.id).where(Genre.name == name)
        )
        return result.scalar_one()

    @staticmethod
    async def link(session: AsyncSession, story_id: str, genre_id: int) -> bool:
        """Attach a genre to a story, no-op when already attached"""
        result = await session.execute(
            insert_for(session, StoryGenre)
            .values(story_id=story_id, genre_id=genre_id)
            .on_conflict_do_nothing(index_elements=["story_id", "genre_id"])
        )
        return result.rowcount > 0

    @staticmethod
    async def unlink_all(session: AsyncSession, story_id: str) -> int:
        """Detach every genre from a story"""
        result = await session.execute(
            delete(StoryGenre).where(StoryGenre.story_id == story_id)
        )
        return result.rowcount

    @staticmethod
    async def get_all(session: AsyncSession) -> List[Genre]:
        """Every genre, alphabetical"""
        result = await session.execute(
            select(Genre).order_by(Genre.name.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_for_story(session: AsyncSession, story_id: str) -> List[Genre]:
        """Genres attached to a story, alphabetical"""
        result = await session.execute(
            select(Genre)
            .join(StoryGenre, StoryGenre.genre_id == Genre.id)
            .where(StoryGenre.story_id == story_id)
            .order_by(Genre.name.asc())
        )
        return list(result.scalars().all())
