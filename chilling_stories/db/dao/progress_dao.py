"""
Reading progress data access object
"""

from typing import Optional, List, Dict, Any
from datetime import datetime
from sqlalchemy import select, delete, func
from sqlalchemy.orm import aliased
from sqlalchemy.ext.asyncio import AsyncSession

from chilling_stories.db.dml import insert_for
from chilling_stories.db.models.progress import ReadingProgress
from chilling_stories.db.models.story import Story
from chilling_stories.db.models.chapter import Chapter
from chilling_stories.db.models.user import User


class ProgressDAO:
    """Reading progress DAO"""

    @staticmethod
    async def save(
        session: AsyncSession,
        user_id: str,
        story_id: str,
        chapter_id: str,
        order_num: int
    ) -> None:
        """
        Save progress

        Insert, or overwrite the existing (user, story) row. The latest read
        always wins, whether it moved forward or backward.
        """
        now = datetime.utcnow()
        statement = insert_for(session, ReadingProgress).values(
            user_id=user_id,
            story_id=story_id,
            last_chapter_id=chapter_id,
            last_order_num=order_num,
            updated_at=now,
        )
        await session.execute(
            statement.on_conflict_do_update(
                index_elements=["user_id", "story_id"],
                set_={
                    "last_chapter_id": statement.excluded.last_chapter_id,
                    "last_order_num": statement.excluded.last_order_num,
                    "updated_at": statement.excluded.updated_at,
                }
            )
        )

    @staticmethod
    async def get(
        session: AsyncSession,
        user_id: str,
        story_id: str
    ) -> Optional[ReadingProgress]:
        """Get progress"""
        result = await session.execute(
            select(ReadingProgress).where(
                ReadingProgress.user_id == user_id,
                ReadingProgress.story_id == story_id
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def delete(
        session: AsyncSession,
        user_id: str,
        story_id: str
    ) -> bool:
        """Delete progress"""
        result = await session.execute(
            delete(ReadingProgress).where(
                ReadingProgress.user_id == user_id,
                ReadingProgress.story_id == story_id
            )
        )
        return result.rowcount > 0

    @staticmethod
    async def list_for_user(session: AsyncSession, user_id: str) -> List[Dict[str, Any]]:
        """
        Reading history of a user

        Joins the story, its author and the last chapter read. Most recently
        read first.
        """
        last_chapter = aliased(Chapter)
        total_chapters = (
            select(func.count(Chapter.id))
            .where(Chapter.story_id == Story.id)
            .correlate(Story)
            .scalar_subquery()
        )

        result = await session.execute(
            select(
                ReadingProgress.story_id,
                Story.title,
                Story.cover_image_path,
                Story.status,
                Story.author_id,
                User.username.label("author_name"),
                ReadingProgress.last_chapter_id,
                ReadingProgress.last_order_num,
                last_chapter.title.label("last_chapter_title"),
                total_chapters.label("total_chapters"),
                ReadingProgress.updated_at,
            )
            .select_from(ReadingProgress)
            .join(Story, Story.id == ReadingProgress.story_id)
            .outerjoin(User, User.id == Story.author_id)
            .outerjoin(last_chapter, last_chapter.id == ReadingProgress.last_chapter_id)
            .where(ReadingProgress.user_id == user_id)
            .order_by(ReadingProgress.updated_at.desc(), ReadingProgress.id.desc())
        )
        return [dict(row) for row in result.mappings().all()]
