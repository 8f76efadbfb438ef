"""
Chapter service

Ordered chapter CRUD within a story. Reads that count as a visit also bump
the story view count and, for a known reader, the reading progress, in the
same transaction as the read.
"""

from typing import Optional, List, Sequence

from loguru import logger
from sqlalchemy.exc import IntegrityError

from chilling_stories.db import Database
from chilling_stories.db.dao import ChapterDAO, StoryDAO, ProgressDAO
from chilling_stories.models import (
    ChapterCreate, ChapterUpload, ChapterUpdate, ChapterCreated, ChapterModel
)
from chilling_stories.services.exceptions import ChapterOrderConflictError


class ChapterService:
    """Chapter service"""

    def __init__(self, database: Database):
        self.database = database

    # ==================== Writes ====================

    async def add_chapter(self, chapter_data: ChapterCreate) -> str:
        """
        Add one chapter at an explicit position

        Raises:
            ChapterOrderConflictError: the position is already taken

        Returns:
            new chapter ID
        """
        story_id, order_num = chapter_data.story_id, chapter_data.order_num

        try:
            async with self.database.session() as session:
                if await ChapterDAO.order_exists(session, story_id, order_num):
                    raise ChapterOrderConflictError(story_id, order_num)

                chapter = await ChapterDAO.create(
                    session=session,
                    story_id=story_id,
                    order_num=order_num,
                    title=chapter_data.title,
                    content=chapter_data.content
                )
        except IntegrityError:
            # A concurrent insert won the position after the check
            taken = await self._first_taken_order(story_id, [order_num])
            if taken is None:
                raise
            raise ChapterOrderConflictError(story_id, taken) from None

        logger.info(f"📄 Chapter #{chapter.order_num} added to {chapter.story_id}: {chapter.id}")
        return chapter.id

    async def add_chapters_bulk(
        self,
        story_id: str,
        uploads: Sequence[ChapterUpload]
    ) -> List[ChapterCreated]:
        """
        Append uploaded chapters after the story's last chapter

        Positions continue from the current maximum order number, in list
        order. All chapters are created or none.

        Raises:
            ChapterOrderConflictError: another upload took one of the positions
        """
        created = []
        order_nums = []

        try:
            async with self.database.session() as session:
                next_order = await ChapterDAO.max_order_num(session, story_id) + 1
                order_nums = [next_order + offset for offset in range(len(uploads))]

                for order_num, upload in zip(order_nums, uploads):
                    chapter = await ChapterDAO.create(
                        session=session,
                        story_id=story_id,
                        order_num=order_num,
                        title=upload.title,
                        content=upload.content
                    )
                    created.append(ChapterCreated(
                        chapter_id=chapter.id,
                        title=chapter.title,
                        order_num=chapter.order_num
                    ))
        except IntegrityError:
            taken = await self._first_taken_order(story_id, order_nums)
            if taken is None:
                raise
            raise ChapterOrderConflictError(story_id, taken) from None

        logger.info(f"📚 {len(created)} chapters appended to {story_id}")
        return created

    async def _first_taken_order(self, story_id: str, order_nums: Sequence[int]) -> Optional[int]:
        """First of the positions that is occupied, None when all are free"""
        async with self.database.session() as session:
            for order_num in order_nums:
                if await ChapterDAO.get_by_order(session, story_id, order_num):
                    return order_num
        return None

    async def update_chapter(self, chapter_id: str, changes: ChapterUpdate) -> bool:
        """Partially update a chapter by ID"""
        values = self._changed_values(changes)
        if not values:
            return False

        async with self.database.session() as session:
            return await ChapterDAO.update_fields(session, chapter_id, values)

    async def update_chapter_by_order(
        self,
        story_id: str,
        order_num: int,
        changes: ChapterUpdate
    ) -> bool:
        """Partially update the chapter at a story position"""
        values = self._changed_values(changes)
        if not values:
            return False

        async with self.database.session() as session:
            return await ChapterDAO.update_fields_by_order(session, story_id, order_num, values)

    async def delete_chapter_by_id(self, chapter_id: str) -> bool:
        async with self.database.session() as session:
            deleted = await ChapterDAO.delete_by_id(session, chapter_id)

        if deleted:
            logger.info(f"🗑️  Chapter deleted: {chapter_id}")
        return deleted

    async def delete_chapter_by_order(self, story_id: str, order_num: int) -> bool:
        async with self.database.session() as session:
            deleted = await ChapterDAO.delete_by_order(session, story_id, order_num)

        if deleted:
            logger.info(f"🗑️  Chapter #{order_num} deleted from {story_id}")
        return deleted

    @staticmethod
    def _changed_values(changes: ChapterUpdate) -> dict:
        return {key: value for key, value in changes.model_dump().items() if value}

    # ==================== Reads ====================

    async def get_chapters_by_story_id(self, story_id: str) -> List[ChapterModel]:
        """Chapters of a story, ascending by order number"""
        async with self.database.session() as session:
            chapters = await ChapterDAO.list_by_story(session, story_id)
        return [ChapterModel.model_validate(chapter) for chapter in chapters]

    async def get_chapter_by_id(self, chapter_id: str) -> Optional[ChapterModel]:
        async with self.database.session() as session:
            chapter = await ChapterDAO.get_by_id(session, chapter_id)
        return ChapterModel.model_validate(chapter) if chapter else None

    async def get_chapter_by_order(
        self,
        story_id: str,
        order_num: int,
        count_view: bool = False
    ) -> Optional[ChapterModel]:
        """
        Get the chapter at a story position

        Args:
            story_id: story ID
            order_num: position
            count_view: also increment the story view count

        Returns:
            the chapter, None when not found
        """
        async with self.database.session() as session:
            chapter = await ChapterDAO.get_by_order(session, story_id, order_num)
            if chapter and count_view:
                await StoryDAO.increment_view_count(session, story_id)

        return ChapterModel.model_validate(chapter) if chapter else None

    async def get_chapter_by_order_with_progress(
        self,
        story_id: str,
        order_num: int,
        user_id: Optional[str] = None
    ) -> Optional[ChapterModel]:
        """
        Read a chapter as a reader

        Increments the story view count and, when the reader is known,
        moves their reading progress to this chapter. Both happen in the
        transaction of the read.
        """
        async with self.database.session() as session:
            chapter = await ChapterDAO.get_by_order(session, story_id, order_num)
            if not chapter:
                return None
            await self._record_read(session, chapter, user_id)

        return ChapterModel.model_validate(chapter)

    async def get_chapter_by_id_with_progress(
        self,
        chapter_id: str,
        user_id: Optional[str] = None
    ) -> Optional[ChapterModel]:
        """Same as get_chapter_by_order_with_progress, looked up by chapter ID"""
        async with self.database.session() as session:
            chapter = await ChapterDAO.get_by_id(session, chapter_id)
            if not chapter:
                return None
            await self._record_read(session, chapter, user_id)

        return ChapterModel.model_validate(chapter)

    @staticmethod
    async def _record_read(session, chapter, user_id: Optional[str]) -> None:
        if user_id:
            await ProgressDAO.save(session, user_id, chapter.story_id, chapter.id, chapter.order_num)
        await StoryDAO.increment_view_count(session, chapter.story_id)

    # ==================== Ownership ====================

    async def get_author_by_chapter_id(self, chapter_id: str) -> Optional[str]:
        """Author of the story owning a chapter"""
        async with self.database.session() as session:
            return await ChapterDAO.get_author_id(session, chapter_id)

    async def get_author_by_story_id(self, story_id: str) -> Optional[str]:
        """Author of a story"""
        async with self.database.session() as session:
            return await StoryDAO.get_author_id(session, story_id)
