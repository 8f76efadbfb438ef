"""
Response formatting tests
"""

from datetime import datetime

from chilling_stories.api.formatters import poster_link, avatar_link, format_story, format_user
from chilling_stories.models import StoryWithFavorite, UserModel, UserRole

BASE_URL = "http://localhost:8000"


class TestLinks:

    def test_poster_link(self):
        assert poster_link(BASE_URL, "dem_trang_0.png") == \
            "http://localhost:8000/assets/images/poster/stories/dem_trang_0.png"
        assert poster_link(BASE_URL + "/", "a.png") == \
            "http://localhost:8000/assets/images/poster/stories/a.png"
        assert poster_link(BASE_URL, None) is None
        assert poster_link(BASE_URL, "") is None
        assert poster_link(BASE_URL, "a.png", "/assets/media/posters") == \
            "http://localhost:8000/assets/media/posters/a.png"

    def test_avatar_link(self):
        assert avatar_link(BASE_URL, "/assets/images/users/avatars/default.png") == \
            "http://localhost:8000/assets/images/users/avatars/default.png"
        assert avatar_link(BASE_URL, "https://cdn.example.com/a.png") == "https://cdn.example.com/a.png"
        assert avatar_link(BASE_URL, None) is None


class TestFormatStory:

    def test_model_gets_cover_link(self):
        story = StoryWithFavorite(
            id="story_1",
            title="Crawlspace",
            cover_image_path="crawlspace_0.jpg",
            author_id="user_1",
            created_at=datetime(2024, 5, 1, 12, 0, 0),
            chapter_count=3,
            is_favorited=True,
        )

        data = format_story(BASE_URL, story)

        assert data["cover_link"] == "http://localhost:8000/assets/images/poster/stories/crawlspace_0.jpg"
        assert data["chapter_count"] == 3
        assert data["is_favorited"] is True
        assert data["created_at"] == "2024-05-01T12:00:00"

    def test_dict_counts_are_coerced(self):
        data = format_story(BASE_URL, {
            "id": "story_1",
            "cover_image_path": None,
            "chapter_count": "4",
            "total_chapters": 7.0,
            "is_favorited": 1,
        })

        assert data["cover_link"] is None
        assert data["chapter_count"] == 4
        assert data["total_chapters"] == 7
        assert data["is_favorited"] is True

    def test_custom_poster_path(self):
        data = format_story(BASE_URL, {"id": "story_1", "cover_image_path": "t_0.png"}, "/assets/media/posters")

        assert data["cover_link"] == "http://localhost:8000/assets/media/posters/t_0.png"


class TestFormatUser:

    def test_avatar_link_added(self):
        user = UserModel(
            id="user_1",
            username="mara",
            email="mara@example.com",
            role=UserRole.AUTHOR,
            avatar_url="/assets/images/users/avatars/avatar_user_1_1700000000000.png",
            created_at=datetime(2024, 5, 1),
        )

        data = format_user(BASE_URL, user)

        assert data["role"] == "author"
        assert data["avatar_link"] == \
            "http://localhost:8000/assets/images/users/avatars/avatar_user_1_1700000000000.png"
