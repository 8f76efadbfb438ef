"""
Chapter data access object
"""

from typing import Optional, List, Dict, Any
from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from chilling_stories.db.models.chapter import Chapter
from chilling_stories.db.models.story import Story
from chilling_stories.utils.id_generator import generate_chapter_id


class ChapterDAO:
    """Chapter DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        story_id: str,
        order_num: int,
        title: str,
        content: str
    ) -> Chapter:
        """
        Create a chapter

        Args:
            session: database session
            story_id: owning story
            order_num: position within the story
            title: title
            content: raw text body

        Returns:
            Chapter: the new chapter
        """
        chapter = Chapter(
            id=generate_chapter_id(),
            story_id=story_id,
            order_num=order_num,
            title=title,
            content=content,
        )

        session.add(chapter)
        await session.flush()

        return chapter

    @staticmethod
    async def get_by_id(session: AsyncSession, chapter_id: str) -> Optional[Chapter]:
        """Get a chapter by ID"""
        result = await session.execute(
            select(Chapter).where(Chapter.id == chapter_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_order(session: AsyncSession, story_id: str, order_num: int) -> Optional[Chapter]:
        """Get a chapter by its position in a story"""
        result = await session.execute(
            select(Chapter).where(
                Chapter.story_id == story_id,
                Chapter.order_num == order_num
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_by_story(session: AsyncSession, story_id: str) -> List[Chapter]:
        """Chapters of a story in reading order"""
        result = await session.execute(
            select(Chapter)
            .where(Chapter.story_id == story_id)
            .order_by(Chapter.order_num.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def max_order_num(session: AsyncSession, story_id: str) -> int:
        """Highest order number in a story, 0 when it has no chapters"""
        result = await session.execute(
            select(func.max(Chapter.order_num)).where(Chapter.story_id == story_id)
        )
        return result.scalar() or 0

    @staticmethod
    async def order_exists(session: AsyncSession, story_id: str, order_num: int) -> bool:
        result = await session.execute(
            select(func.count(Chapter.id)).where(
                Chapter.story_id == story_id,
                Chapter.order_num == order_num
            )
        )
        return (result.scalar() or 0) > 0

    @staticmethod
    async def update_fields(session: AsyncSession, chapter_id: str, values: Dict[str, Any]) -> bool:
        """Write the given columns of one chapter"""
        if not values:
            return False

        result = await session.execute(
            update(Chapter)
            .where(Chapter.id == chapter_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    @staticmethod
    async def update_fields_by_order(
        session: AsyncSession,
        story_id: str,
        order_num: int,
        values: Dict[str, Any]
    ) -> bool:
        """Write the given columns of the chapter at a story position"""
        if not values:
            return False

        result = await session.execute(
            update(Chapter)
            .where(Chapter.story_id == story_id, Chapter.order_num == order_num)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    @staticmethod
    async def delete_by_id(session: AsyncSession, chapter_id: str) -> bool:
        result = await session.execute(
            delete(Chapter)
            .where(Chapter.id == chapter_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    @staticmethod
    async def delete_by_order(session: AsyncSession, story_id: str, order_num: int) -> bool:
        result = await session.execute(
            delete(Chapter)
            .where(Chapter.story_id == story_id, Chapter.order_num == order_num)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    @staticmethod
    async def get_author_id(session: AsyncSession, chapter_id: str) -> Optional[str]:
        """Author of the story owning a chapter"""
        result = await session.execute(
            select(Story.author_id)
            .join(Chapter, Chapter.story_id == Story.id)
            .where(Chapter.id == chapter_id)
        )
        return result.scalar_one_or_none()
