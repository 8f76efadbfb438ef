"""
Engagement service tests

Favorite toggling and counters, view counts and reading history.
"""

import pytest

from chilling_stories.db.dao import StoryDAO
from chilling_stories.models import StoryCreate, ChapterCreate


@pytest.fixture
async def story_id(story_service, author_id):
    return await story_service.create_story(
        author_id, StoryCreate(title="Crawlspace", cover_image_path="crawlspace_0.jpg")
    )


class TestToggleFavorite:

    async def test_toggle_alternates(self, engagement, story_id, reader_id):
        states = []
        for _ in range(4):
            result = await engagement.toggle_favorite(reader_id, story_id)
            states.append((result.is_favorited, result.favorite_count))

        assert states == [(True, 1), (False, 0), (True, 1), (False, 0)]

    async def test_count_matches_favorite_rows(self, engagement, story_service, story_id, reader_id, second_reader_id):
        await engagement.toggle_favorite(reader_id, story_id)
        await engagement.toggle_favorite(second_reader_id, story_id)
        result = await engagement.toggle_favorite(reader_id, story_id)

        assert result.is_favorited is False
        assert result.favorite_count == 1
        assert await engagement.is_favorited(second_reader_id, story_id) is True
        assert await engagement.is_favorited(reader_id, story_id) is False
        assert (await story_service.get_story_by_id(story_id)).favorite_count == 1

    async def test_count_never_goes_below_zero(self, database, engagement, story_id, reader_id):
        await engagement.toggle_favorite(reader_id, story_id)

        # Counter drifted out of sync with the favorite rows
        async with database.session() as session:
            await StoryDAO.update_fields(session, story_id, {"favorite_count": 0})

        result = await engagement.toggle_favorite(reader_id, story_id)

        assert result.is_favorited is False
        assert result.favorite_count == 0

    async def test_unknown_story(self, engagement, reader_id):
        assert await engagement.toggle_favorite(reader_id, "story_missing") is None

    async def test_favorited_stories_most_recent_first(self, engagement, story_service, author_id, story_id, reader_id):
        later = await story_service.create_story(author_id, StoryCreate(title="Attic"))
        await engagement.toggle_favorite(reader_id, story_id)
        await engagement.toggle_favorite(reader_id, later)

        stories = await engagement.get_favorited_stories(reader_id)

        assert [story.id for story in stories] == [later, story_id]
        assert all(story.is_favorited for story in stories)
        assert stories[1].favorite_count == 1


class TestViewCount:

    async def test_increment(self, engagement, story_service, story_id):
        assert await engagement.increment_view_count(story_id) is True
        assert await engagement.increment_view_count(story_id) is True

        assert (await story_service.get_story_by_id(story_id)).view_count == 2

    async def test_unknown_story(self, engagement):
        assert await engagement.increment_view_count("story_missing") is False


class TestReadingProgress:

    @pytest.fixture
    async def chapter_ids(self, chapter_service, story_id):
        return [
            await chapter_service.add_chapter(ChapterCreate(
                story_id=story_id, order_num=n, title=f"Night {n}", content="..."
            ))
            for n in (1, 2, 3)
        ]

    async def test_upsert_keeps_one_row(self, engagement, story_id, chapter_ids, reader_id):
        await engagement.update_reading_progress(reader_id, story_id, chapter_ids[2], 3)
        await engagement.update_reading_progress(reader_id, story_id, chapter_ids[0], 1)

        history = await engagement.get_all_reading_progress(reader_id)

        assert len(history) == 1
        assert history[0].last_chapter_id == chapter_ids[0]
        assert history[0].last_order_num == 1

    async def test_history_entry_details(self, engagement, story_id, chapter_ids, reader_id):
        await engagement.update_reading_progress(reader_id, story_id, chapter_ids[1], 2)

        [item] = await engagement.get_all_reading_progress(reader_id)

        assert item.story_id == story_id
        assert item.title == "Crawlspace"
        assert item.cover_image_path == "crawlspace_0.jpg"
        assert item.author_name == "author_one"
        assert item.last_chapter_title == "Night 2"
        assert item.total_chapters == 3
        assert item.status == "ongoing"

    async def test_history_most_recent_first(self, engagement, story_service, chapter_service, author_id, story_id, chapter_ids, reader_id):
        other = await story_service.create_story(author_id, StoryCreate(title="Cellar"))
        other_chapter = await chapter_service.add_chapter(ChapterCreate(
            story_id=other, order_num=1, title="Down", content="..."
        ))
        await engagement.update_reading_progress(reader_id, story_id, chapter_ids[0], 1)
        await engagement.update_reading_progress(reader_id, other, other_chapter, 1)

        history = await engagement.get_all_reading_progress(reader_id)
        assert [item.story_id for item in history] == [other, story_id]

        await engagement.update_reading_progress(reader_id, story_id, chapter_ids[2], 3)
        history = await engagement.get_all_reading_progress(reader_id)
        assert [item.story_id for item in history] == [story_id, other]

    async def test_progress_is_per_user(self, engagement, story_id, chapter_ids, reader_id, second_reader_id):
        await engagement.update_reading_progress(reader_id, story_id, chapter_ids[2], 3)

        assert await engagement.get_reading_progress(second_reader_id, story_id) is None
        assert await engagement.get_all_reading_progress(second_reader_id) == []

    async def test_delete(self, engagement, story_id, chapter_ids, reader_id):
        await engagement.update_reading_progress(reader_id, story_id, chapter_ids[0], 1)

        assert await engagement.delete_reading_progress(reader_id, story_id) is True
        assert await engagement.delete_reading_progress(reader_id, story_id) is False
        assert await engagement.get_all_reading_progress(reader_id) == []
