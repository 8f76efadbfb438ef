"""
Story data access object
"""

from typing import Optional, List, Dict, Any
from sqlalchemy import select, update, delete, func, or_, false, case
from sqlalchemy.ext.asyncio import AsyncSession

from chilling_stories.db.dml import is_postgresql
from chilling_stories.db.models.story import Story
from chilling_stories.db.models.chapter import Chapter
from chilling_stories.db.models.favorite import Favorite
from chilling_stories.db.models.user import User
from chilling_stories.models.story import StoryRanking
from chilling_stories.utils.id_generator import generate_story_id


RANKING_ORDER = {
    StoryRanking.NEWEST: Story.created_at.desc(),
    StoryRanking.VIEWS: Story.view_count.desc(),
    StoryRanking.FAVORITES: Story.favorite_count.desc(),
}


def story_columns():
    """Columns of the plain story projection"""
    return [
        Story.id,
        Story.title,
        Story.description,
        Story.cover_image_path,
        Story.author_id,
        Story.status,
        Story.view_count,
        Story.favorite_count,
        Story.created_at,
    ]


def summary_columns(viewer_id: Optional[str] = None):
    """
    Story columns plus correlated chapter aggregates, author name and the
    viewer's favorite flag
    """
    chapter_count = (
        select(func.count(Chapter.id))
        .where(Chapter.story_id == Story.id)
        .correlate(Story)
        .scalar_subquery()
    )
    newest_chapter = (
        select(func.max(Chapter.created_at))
        .where(Chapter.story_id == Story.id)
        .correlate(Story)
        .scalar_subquery()
    )

    if viewer_id:
        is_favorited = (
            select(Favorite.id)
            .where(Favorite.user_id == viewer_id, Favorite.story_id == Story.id)
            .correlate(Story)
            .exists()
        )
    else:
        is_favorited = false()

    return story_columns() + [
        chapter_count.label("chapter_count"),
        func.coalesce(newest_chapter, Story.created_at).label("last_update_at"),
        User.username.label("author_name"),
        is_favorited.label("is_favorited"),
    ]


def summary_query(viewer_id: Optional[str] = None):
    return (
        select(*summary_columns(viewer_id))
        .select_from(Story)
        .outerjoin(User, User.id == Story.author_id)
    )


class StoryDAO:
    """Story DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        author_id: str,
        title: str,
        description: Optional[str] = None,
        cover_image_path: Optional[str] = None
    ) -> Story:
        """
        Create a story

        Args:
            session: database session
            author_id: owning author
            title: title
            description: optional description
            cover_image_path: optional poster filename

        Returns:
            Story: the new story
        """
        story = Story(
            id=generate_story_id(),
            author_id=author_id,
            title=title,
            description=description or None,
            cover_image_path=cover_image_path or None,
            status="ongoing",
            view_count=0,
            favorite_count=0,
        )

        session.add(story)
        await session.flush()

        return story

    @staticmethod
    async def get_by_id(session: AsyncSession, story_id: str) -> Optional[Story]:
        """Get a story by ID"""
        result = await session.execute(
            select(Story).where(Story.id == story_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_author_id(session: AsyncSession, story_id: str) -> Optional[str]:
        """Owning author of a story"""
        result = await session.execute(
            select(Story.author_id).where(Story.id == story_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def update_fields(session: AsyncSession, story_id: str, values: Dict[str, Any]) -> bool:
        """Write the given columns, returns whether a row matched"""
        if not values:
            return False

        result = await session.execute(
            update(Story)
            .where(Story.id == story_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    @staticmethod
    async def delete(session: AsyncSession, story_id: str) -> bool:
        """Delete a story, chapters and links cascade in the database"""
        result = await session.execute(
            delete(Story)
            .where(Story.id == story_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    @staticmethod
    async def search(
        session: AsyncSession,
        keyword: Optional[str] = None,
        text_config: str = "english"
    ) -> List[Dict[str, Any]]:
        """
        Full text search over title and description

        PostgreSQL ranks matches with ts_rank, other dialects fall back to a
        case-insensitive substring match.

        Args:
            session: database session
            keyword: search words, None lists every story
            text_config: PostgreSQL text search configuration

        Returns:
            story rows
        """
        query = select(*story_columns())

        if not keyword:
            query = query.order_by(Story.id.asc())
        elif is_postgresql(session):
            document = func.to_tsvector(
                text_config,
                func.coalesce(Story.title, "") + " " + func.coalesce(Story.description, "")
            )
            ts_query = func.plainto_tsquery(text_config, keyword)
            query = (
                query.where(document.op("@@")(ts_query))
                .order_by(func.ts_rank(document, ts_query).desc(), Story.id.asc())
            )
        else:
            pattern = f"%{keyword}%"
            query = (
                query.where(or_(Story.title.ilike(pattern), Story.description.ilike(pattern)))
                .order_by(Story.id.asc())
            )

        result = await session.execute(query)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def get_summary(
        session: AsyncSession,
        story_id: str,
        viewer_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Single story with aggregates"""
        result = await session.execute(
            summary_query(viewer_id).where(Story.id == story_id)
        )
        row = result.mappings().one_or_none()
        return dict(row) if row else None

    @staticmethod
    async def list_summaries(
        session: AsyncSession,
        ranking: StoryRanking = StoryRanking.NEWEST,
        viewer_id: Optional[str] = None,
        author_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Ranked story list with aggregates

        Args:
            session: database session
            ranking: newest / views / favorites, always descending
            viewer_id: adds the viewer's favorite flag
            author_id: restricts to one author's stories
            limit: maximum number of rows

        Returns:
            story summary rows, ties broken by id
        """
        query = summary_query(viewer_id)

        if author_id:
            query = query.where(Story.author_id == author_id)

        query = query.order_by(RANKING_ORDER[ranking], Story.id.asc())

        if limit:
            query = query.limit(limit)

        result = await session.execute(query)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def list_favorited_by(session: AsyncSession, user_id: str) -> List[Dict[str, Any]]:
        """Stories the user favorited, most recent favorite first"""
        result = await session.execute(
            summary_query(user_id)
            .join(Favorite, Favorite.story_id == Story.id)
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        )
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def lock_counters(session: AsyncSession, story_id: str) -> Optional[int]:
        """
        Lock the story row for the rest of the transaction

        Returns:
            current favorite count, None when the story does not exist
        """
        result = await session.execute(
            select(Story.favorite_count).where(Story.id == story_id).with_for_update()
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_favorite_count(session: AsyncSession, story_id: str) -> int:
        result = await session.execute(
            select(Story.favorite_count).where(Story.id == story_id)
        )
        return result.scalar() or 0

    @staticmethod
    async def increment_view_count(session: AsyncSession, story_id: str) -> bool:
        """view_count = view_count + 1"""
        result = await session.execute(
            update(Story)
            .where(Story.id == story_id)
            .values(view_count=Story.view_count + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    @staticmethod
    async def increment_favorite_count(session: AsyncSession, story_id: str) -> bool:
        """favorite_count = favorite_count + 1"""
        result = await session.execute(
            update(Story)
            .where(Story.id == story_id)
            .values(favorite_count=Story.favorite_count + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    @staticmethod
    async def decrement_favorite_count(session: AsyncSession, story_id: str) -> bool:
        """favorite_count = favorite_count - 1, never below 0"""
        result = await session.execute(
            update(Story)
            .where(Story.id == story_id)
            .values(
                favorite_count=case(
                    (Story.favorite_count > 0, Story.favorite_count - 1),
                    else_=0
                )
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
