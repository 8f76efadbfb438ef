"""
Storage service tests - poster naming, upload validation and cleanup
"""

import io

import pytest
from starlette.datastructures import Headers, UploadFile

from chilling_stories.services import StorageService, UploadRejectedError

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def upload(filename, data=PNG_BYTES, content_type="image/png"):
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def storage(tmp_path):
    service = StorageService(tmp_path / "assets", max_poster_size=1024, max_avatar_size=1024, max_chapter_size=64)
    service.ensure_dirs()
    return service


class TestPosters:

    async def test_counter_increments_per_slug(self, storage):
        first = await storage.save_poster(upload("cover.png"), "Đêm Trăng")
        second = await storage.save_poster(upload("other.PNG"), "Đêm Trăng")
        other = await storage.save_poster(upload("x.png"), "The Well")

        assert (first, second, other) == ("dem_trang_0.png", "dem_trang_1.png", "the_well_0.png")
        assert (storage.poster_dir / first).read_bytes() == PNG_BYTES

    async def test_counter_continues_after_highest(self, storage):
        (storage.poster_dir / "the_well_7.jpg").write_bytes(b"old")
        (storage.poster_dir / "the_well_extra_9.jpg").write_bytes(b"old")

        filename = await storage.save_poster(upload("new.webp", content_type="image/webp"), "The Well")

        assert filename == "the_well_8.webp"

    async def test_untitled_story(self, storage):
        assert await storage.save_poster(upload("a.png"), None) == "story_0.png"

    async def test_rejects_other_types(self, storage):
        with pytest.raises(UploadRejectedError):
            await storage.save_poster(upload("cover.gif", content_type="image/gif"), "Title")

    async def test_rejects_large_files(self, storage):
        with pytest.raises(UploadRejectedError):
            await storage.save_poster(upload("cover.png", data=b"0" * 2048), "Title")

        assert list(storage.poster_dir.iterdir()) == []

    async def test_delete(self, storage):
        filename = await storage.save_poster(upload("cover.png"), "Title")

        assert storage.delete_poster(filename) is True
        assert storage.delete_poster(filename) is False
        assert storage.delete_poster(None) is False

    async def test_link_path_follows_poster_dir(self, tmp_path):
        storage = StorageService(tmp_path / "assets", poster_dir="media/posters")

        filename = await storage.save_poster(upload("cover.png"), "T")

        assert (tmp_path / "assets" / "media" / "posters" / filename).exists()
        assert storage.poster_url_path == "/assets/media/posters"


class TestAvatars:

    async def test_save_returns_public_path(self, storage):
        path = await storage.save_avatar(upload("me.jpg", content_type="image/jpeg"), "user_1")

        assert path.startswith("/assets/images/users/avatars/avatar_user_1_")
        assert path.endswith(".jpg")
        assert storage.delete_avatar(path) is True

    def test_default_avatar_is_kept(self, storage):
        default = storage.avatar_dir / "default.png"
        default.write_bytes(PNG_BYTES)

        assert storage.delete_avatar("/assets/images/users/avatars/default.png") is False
        assert default.exists()


class TestChapterUploads:

    async def test_title_from_filename(self, storage):
        chapter = await storage.read_chapter_upload(
            upload("01 - The Door.md", data="Knock knock.".encode("utf-8"), content_type="text/markdown")
        )

        assert chapter.title == "01 - The Door"
        assert chapter.content == "Knock knock."

    async def test_explicit_title(self, storage):
        chapter = await storage.read_chapter_upload(
            upload("raw.txt", data=b"Hello", content_type="text/plain"), title="Prologue"
        )

        assert chapter.title == "Prologue"

    @pytest.mark.parametrize("filename,data", [
        ("chapter.pdf", b"%PDF"),
        ("chapter.txt", b"\xff\xfe\x00bad"),
        ("chapter.txt", b"x" * 100),
    ])
    async def test_rejected(self, storage, filename, data):
        with pytest.raises(UploadRejectedError):
            await storage.read_chapter_upload(upload(filename, data=data, content_type="text/plain"))
