"""
Story service

Story creation, updates, deletion, genre tagging, search and ranked lists
"""

from typing import Optional, List, Iterable

from loguru import logger

from chilling_stories.db import Database
from chilling_stories.db.dao import StoryDAO, GenreDAO
from chilling_stories.models import (
    StoryCreate, StoryUpdate, StoryModel, StoryWithFavorite, StoryDetail,
    StoryRanking, GenreModel
)
from chilling_stories.utils.text import normalize_genre_names


class StoryService:
    """Story service"""

    def __init__(self, database: Database, top_limit: int = 30, text_config: str = "english"):
        self.database = database
        self.top_limit = top_limit
        self.text_config = text_config

    # ==================== Writes ====================

    async def create_story(self, author_id: str, story_data: StoryCreate) -> str:
        """
        Create a story

        Args:
            author_id: owning author
            story_data: title, description, poster filename

        Returns:
            new story ID
        """
        async with self.database.session() as session:
            story = await StoryDAO.create(
                session=session,
                author_id=author_id,
                title=story_data.title,
                description=story_data.description,
                cover_image_path=story_data.cover_image_path
            )

        logger.info(f"📖 Story created: {story.id} by {author_id}")
        return story.id

    async def create_story_with_genres(
        self,
        author_id: str,
        story_data: StoryCreate,
        genre_names: Iterable[str]
    ) -> str:
        """
        Create a story and attach its genres in one transaction

        Any failure rolls back the story row as well.

        Args:
            author_id: owning author
            story_data: title, description, poster filename
            genre_names: raw genre names, normalized before use

        Returns:
            new story ID
        """
        names = normalize_genre_names(genre_names)

        async with self.database.session() as session:
            story = await StoryDAO.create(
                session=session,
                author_id=author_id,
                title=story_data.title,
                description=story_data.description,
                cover_image_path=story_data.cover_image_path
            )
            await self._attach_genres(session, story.id, names)

        logger.info(f"📖 Story created: {story.id} by {author_id} with genres {names}")
        return story.id

    async def update_story(self, story_id: str, changes: StoryUpdate) -> bool:
        """
        Partially update a story

        Only non-empty fields are written.

        Returns:
            False when nothing was supplied or the story does not exist
        """
        values = {
            key: value for key, value in changes.model_dump().items()
            if value not in (None, "")
        }
        if "status" in values:
            values["status"] = changes.status.value

        if not values:
            return False

        async with self.database.session() as session:
            updated = await StoryDAO.update_fields(session, story_id, values)

        if updated:
            logger.info(f"✏️  Story updated: {story_id} ({', '.join(values)})")
        return updated

    async def delete_story(self, story_id: str) -> bool:
        """
        Delete a story

        Chapters, genre links, favorites and progress cascade. The poster file
        is left to the caller, who reads the filename before deleting.
        """
        async with self.database.session() as session:
            deleted = await StoryDAO.delete(session, story_id)

        if deleted:
            logger.info(f"🗑️  Story deleted: {story_id}")
        return deleted

    async def update_story_genres(self, story_id: str, genre_names: Iterable[str]) -> None:
        """
        Replace every genre of a story

        An empty list leaves the story without genres.
        """
        names = normalize_genre_names(genre_names)

        async with self.database.session() as session:
            await GenreDAO.unlink_all(session, story_id)
            await self._attach_genres(session, story_id, names)

        logger.info(f"🏷️  Story genres replaced: {story_id} -> {names}")

    @staticmethod
    async def _attach_genres(session, story_id: str, names: List[str]) -> None:
        for name in names:
            genre_id = await GenreDAO.get_or_create(session, name)
            await GenreDAO.link(session, story_id, genre_id)

    # ==================== Reads ====================

    async def search_stories(self, keyword: Optional[str] = None) -> List[StoryModel]:
        """
        Search stories by title and description

        Without a keyword every story is returned.
        """
        keyword = keyword.strip() if keyword else None

        async with self.database.session() as session:
            rows = await StoryDAO.search(session, keyword, self.text_config)

        return [StoryModel.model_validate(row) for row in rows]

    async def get_story_by_id(
        self,
        story_id: str,
        viewer_id: Optional[str] = None
    ) -> Optional[StoryDetail]:
        """
        Get a story with aggregates and genres

        Args:
            story_id: story ID
            viewer_id: current user, fills is_favorited

        Returns:
            story detail, None when not found
        """
        async with self.database.session() as session:
            row = await StoryDAO.get_summary(session, story_id, viewer_id)
            if not row:
                return None
            genres = await GenreDAO.get_for_story(session, story_id)

        return StoryDetail.model_validate({**row, "genres": [genre.name for genre in genres]})

    async def get_author_by_story_id(self, story_id: str) -> Optional[str]:
        """Author of a story, None when not found"""
        async with self.database.session() as session:
            return await StoryDAO.get_author_id(session, story_id)

    async def get_story_cover(self, story_id: str) -> Optional[str]:
        """Poster filename of a story"""
        async with self.database.session() as session:
            story = await StoryDAO.get_by_id(session, story_id)
        return story.cover_image_path if story else None

    async def list_stories(
        self,
        ranking: StoryRanking = StoryRanking.NEWEST,
        viewer_id: Optional[str] = None,
        author_id: Optional[str] = None
    ) -> List[StoryWithFavorite]:
        """
        Unified story list

        Ranked lists are capped at top_limit; an author's list is complete.
        Without a viewer, is_favorited is always False.
        """
        limit = None if author_id else self.top_limit

        async with self.database.session() as session:
            rows = await StoryDAO.list_summaries(
                session,
                ranking=ranking,
                viewer_id=viewer_id,
                author_id=author_id,
                limit=limit
            )

        return [StoryWithFavorite.model_validate(row) for row in rows]

    async def get_newest_stories(self) -> List[StoryWithFavorite]:
        return await self.list_stories(StoryRanking.NEWEST)

    async def get_top_stories_by_view(self) -> List[StoryWithFavorite]:
        return await self.list_stories(StoryRanking.VIEWS)

    async def get_top_stories_by_favorite(self) -> List[StoryWithFavorite]:
        return await self.list_stories(StoryRanking.FAVORITES)

    async def get_stories_by_author(self, author_id: str) -> List[StoryWithFavorite]:
        return await self.list_stories(StoryRanking.NEWEST, author_id=author_id)

    async def get_newest_stories_for_user(self, viewer_id: Optional[str]) -> List[StoryWithFavorite]:
        return await self.list_stories(StoryRanking.NEWEST, viewer_id=viewer_id)

    async def get_top_stories_by_view_for_user(self, viewer_id: Optional[str]) -> List[StoryWithFavorite]:
        return await self.list_stories(StoryRanking.VIEWS, viewer_id=viewer_id)

    async def get_top_stories_by_favorite_for_user(self, viewer_id: Optional[str]) -> List[StoryWithFavorite]:
        return await self.list_stories(StoryRanking.FAVORITES, viewer_id=viewer_id)

    async def get_stories_by_author_for_user(
        self,
        author_id: str,
        viewer_id: Optional[str]
    ) -> List[StoryWithFavorite]:
        return await self.list_stories(StoryRanking.NEWEST, viewer_id=viewer_id, author_id=author_id)

    # ==================== Genres ====================

    async def get_all_genres(self) -> List[GenreModel]:
        """Every genre, alphabetical"""
        async with self.database.session() as session:
            genres = await GenreDAO.get_all(session)
        return [GenreModel.model_validate(genre) for genre in genres]

    async def get_story_genres(self, story_id: str) -> List[GenreModel]:
        """Genres attached to a story"""
        async with self.database.session() as session:
            genres = await GenreDAO.get_for_story(session, story_id)
        return [GenreModel.model_validate(genre) for genre in genres]
