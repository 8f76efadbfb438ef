"""
Story service tests

Creation with genres, partial updates, deletion, genre replacement,
search and ranked lists.
"""

import pytest

from chilling_stories.db.dao import GenreDAO
from chilling_stories.models import StoryCreate, StoryUpdate, StoryStatus, ChapterCreate
from chilling_stories.services import StoryService


def new_story(title="The Hollow House", description="A ghost waits upstairs", cover=None):
    return StoryCreate(title=title, description=description, cover_image_path=cover)


class TestCreateStory:

    async def test_create_story_defaults(self, story_service, author_id):
        story_id = await story_service.create_story(author_id, new_story(cover="hollow_house_0.png"))

        story = await story_service.get_story_by_id(story_id)
        assert story_id.startswith("story_")
        assert story.title == "The Hollow House"
        assert story.cover_image_path == "hollow_house_0.png"
        assert story.author_id == author_id
        assert story.author_name == "author_one"
        assert story.status == StoryStatus.ONGOING
        assert story.view_count == 0
        assert story.favorite_count == 0
        assert story.chapter_count == 0
        assert story.genres == []
        assert story.is_favorited is False

    async def test_last_update_falls_back_to_creation_time(self, story_service, author_id):
        story_id = await story_service.create_story(author_id, new_story())

        story = await story_service.get_story_by_id(story_id)
        assert story.last_update_at == story.created_at

    async def test_genres_are_normalized_and_deduplicated(self, story_service, author_id):
        story_id = await story_service.create_story_with_genres(
            author_id, new_story(), [" Horror ", "horror", "Mystery", "", "   "]
        )

        story = await story_service.get_story_by_id(story_id)
        assert story.genres == ["horror", "mystery"]

        genres = await story_service.get_all_genres()
        assert [genre.name for genre in genres] == ["horror", "mystery"]

    async def test_existing_genre_is_reused(self, story_service, author_id):
        await story_service.create_story_with_genres(author_id, new_story(), ["Horror"])
        second_id = await story_service.create_story_with_genres(
            author_id, new_story(title="Second"), ["HORROR", "Gothic"]
        )

        genres = await story_service.get_all_genres()
        assert [genre.name for genre in genres] == ["gothic", "horror"]

        story_genres = await story_service.get_story_genres(second_id)
        assert {genre.name for genre in story_genres} == {"gothic", "horror"}

    async def test_failure_rolls_back_story_and_genres(self, story_service, author_id, monkeypatch):
        original = GenreDAO.get_or_create
        calls = []

        async def flaky_get_or_create(session, name):
            calls.append(name)
            if len(calls) == 3:
                raise RuntimeError("genre insert failed")
            return await original(session, name)

        monkeypatch.setattr(GenreDAO, "get_or_create", staticmethod(flaky_get_or_create))

        with pytest.raises(RuntimeError):
            await story_service.create_story_with_genres(
                author_id, new_story(), ["horror", "mystery", "gothic"]
            )

        assert await story_service.search_stories() == []
        assert await story_service.get_all_genres() == []


class TestUpdateStory:

    async def test_empty_update_is_a_no_op(self, story_service, author_id):
        story_id = await story_service.create_story(author_id, new_story())

        assert await story_service.update_story(story_id, StoryUpdate()) is False
        assert await story_service.update_story(story_id, StoryUpdate(title="", description="")) is False

        story = await story_service.get_story_by_id(story_id)
        assert story.title == "The Hollow House"
        assert story.description == "A ghost waits upstairs"

    async def test_partial_update_keeps_other_fields(self, story_service, author_id):
        story_id = await story_service.create_story(author_id, new_story(cover="old.png"))

        assert await story_service.update_story(story_id, StoryUpdate(title="The Hollow Home")) is True

        story = await story_service.get_story_by_id(story_id)
        assert story.title == "The Hollow Home"
        assert story.description == "A ghost waits upstairs"
        assert story.cover_image_path == "old.png"

    async def test_status_can_be_completed(self, story_service, author_id):
        story_id = await story_service.create_story(author_id, new_story())

        await story_service.update_story(story_id, StoryUpdate(status=StoryStatus.COMPLETED))

        story = await story_service.get_story_by_id(story_id)
        assert story.status == StoryStatus.COMPLETED

    async def test_unknown_story(self, story_service):
        assert await story_service.update_story("story_missing", StoryUpdate(title="x")) is False


class TestDeleteStory:

    async def test_delete_cascades_to_chapters(self, story_service, chapter_service, author_id):
        story_id = await story_service.create_story_with_genres(author_id, new_story(), ["horror"])
        chapter_id = await chapter_service.add_chapter(
            ChapterCreate(story_id=story_id, order_num=1, title="One", content="...")
        )

        assert await story_service.delete_story(story_id) is True

        assert await story_service.get_story_by_id(story_id) is None
        assert await chapter_service.get_chapter_by_id(chapter_id) is None
        assert await story_service.get_story_genres(story_id) == []

    async def test_delete_unknown_story(self, story_service):
        assert await story_service.delete_story("story_missing") is False

    async def test_cover_and_author_lookup(self, story_service, author_id):
        story_id = await story_service.create_story(author_id, new_story(cover="cover_0.webp"))

        assert await story_service.get_story_cover(story_id) == "cover_0.webp"
        assert await story_service.get_author_by_story_id(story_id) == author_id
        assert await story_service.get_story_cover("story_missing") is None
        assert await story_service.get_author_by_story_id("story_missing") is None


class TestUpdateStoryGenres:

    async def test_replace_all(self, story_service, author_id):
        story_id = await story_service.create_story_with_genres(
            author_id, new_story(), ["Horror", "Mystery"]
        )

        await story_service.update_story_genres(story_id, ["Romance", " romance "])
        genres = await story_service.get_story_genres(story_id)
        assert [genre.name for genre in genres] == ["romance"]

        # Unused genres stay in the catalogue
        all_genres = await story_service.get_all_genres()
        assert [genre.name for genre in all_genres] == ["horror", "mystery", "romance"]

    async def test_empty_list_removes_every_genre(self, story_service, author_id):
        story_id = await story_service.create_story_with_genres(author_id, new_story(), ["Horror"])

        await story_service.update_story_genres(story_id, [])

        assert await story_service.get_story_genres(story_id) == []


class TestSearchStories:

    @pytest.fixture
    async def story_ids(self, story_service, author_id):
        return [
            await story_service.create_story(author_id, new_story("Ghost Lights", "Lanterns on the marsh")),
            await story_service.create_story(author_id, new_story("The Well", "Something in the water")),
            await story_service.create_story(author_id, new_story("Night Shift", "A GHOST in the ward")),
        ]

    async def test_no_keyword_lists_everything_by_id(self, story_service, story_ids):
        stories = await story_service.search_stories()
        assert [story.id for story in stories] == sorted(story_ids)

        assert [story.id for story in await story_service.search_stories("   ")] == sorted(story_ids)

    async def test_keyword_matches_title_or_description(self, story_service, story_ids):
        stories = await story_service.search_stories("ghost")

        assert {story.id for story in stories} == {story_ids[0], story_ids[2]}

    async def test_no_match(self, story_service, story_ids):
        assert await story_service.search_stories("vampire") == []


class TestStoryLists:

    async def test_newest_first(self, story_service, author_id):
        first = await story_service.create_story(author_id, new_story("First"))
        second = await story_service.create_story(author_id, new_story("Second"))
        third = await story_service.create_story(author_id, new_story("Third"))

        stories = await story_service.get_newest_stories()
        assert [story.id for story in stories] == [third, second, first]

    async def test_top_by_view_with_id_tiebreak(self, story_service, engagement, author_id):
        ids = [await story_service.create_story(author_id, new_story(f"Story {i}")) for i in range(3)]

        for _ in range(3):
            await engagement.increment_view_count(ids[2])
        await engagement.increment_view_count(ids[0])
        await engagement.increment_view_count(ids[1])

        stories = await story_service.get_top_stories_by_view()
        assert [story.id for story in stories] == [ids[2]] + sorted(ids[:2])
        assert [story.view_count for story in stories] == [3, 1, 1]

    async def test_top_by_favorite(self, story_service, engagement, author_id, reader_id, second_reader_id):
        ids = [await story_service.create_story(author_id, new_story(f"Story {i}")) for i in range(3)]

        await engagement.toggle_favorite(reader_id, ids[1])
        await engagement.toggle_favorite(second_reader_id, ids[1])
        await engagement.toggle_favorite(reader_id, ids[2])

        stories = await story_service.get_top_stories_by_favorite()
        assert [story.id for story in stories] == [ids[1], ids[2], ids[0]]
        assert [story.favorite_count for story in stories] == [2, 1, 0]

    async def test_rankings_are_capped(self, database, author_id):
        service = StoryService(database, top_limit=2)
        for i in range(3):
            await service.create_story(author_id, new_story(f"Story {i}"))

        assert len(await service.get_newest_stories()) == 2
        assert len(await service.get_top_stories_by_view()) == 2
        assert len(await service.get_top_stories_by_favorite()) == 2
        assert len(await service.get_stories_by_author(author_id)) == 3

    async def test_stories_by_author(self, story_service, author_id, other_author_id):
        mine = [await story_service.create_story(author_id, new_story(f"Mine {i}")) for i in range(2)]
        await story_service.create_story(other_author_id, new_story("Theirs"))

        stories = await story_service.get_stories_by_author(author_id)
        assert [story.id for story in stories] == list(reversed(mine))
        assert all(story.author_name == "author_one" for story in stories)

    async def test_is_favorited_follows_the_viewer(self, story_service, engagement, author_id, reader_id, second_reader_id):
        liked = await story_service.create_story(author_id, new_story("Liked"))
        other = await story_service.create_story(author_id, new_story("Other"))
        await engagement.toggle_favorite(reader_id, liked)

        flags = {story.id: story.is_favorited for story in await story_service.get_newest_stories_for_user(reader_id)}
        assert flags == {liked: True, other: False}

        flags = {story.id: story.is_favorited for story in await story_service.get_newest_stories_for_user(second_reader_id)}
        assert flags == {liked: False, other: False}

        anonymous = await story_service.get_top_stories_by_favorite_for_user(None)
        assert all(story.is_favorited is False for story in anonymous)

        by_author = await story_service.get_stories_by_author_for_user(author_id, reader_id)
        assert {story.id for story in by_author if story.is_favorited} == {liked}

        detail = await story_service.get_story_by_id(liked, viewer_id=reader_id)
        assert detail.is_favorited is True

    async def test_chapter_aggregates(self, story_service, chapter_service, author_id):
        story_id = await story_service.create_story(author_id, new_story())
        await chapter_service.add_chapter(ChapterCreate(story_id=story_id, order_num=1, title="One", content="a"))
        second = await chapter_service.add_chapter(ChapterCreate(story_id=story_id, order_num=2, title="Two", content="b"))

        [story] = await story_service.get_newest_stories()
        newest_chapter = await chapter_service.get_chapter_by_id(second)

        assert story.chapter_count == 2
        assert story.last_update_at == newest_chapter.created_at
