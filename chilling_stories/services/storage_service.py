"""
Storage service

Keeps uploaded poster, avatar and chapter file bytes on local disk. The
domain services only ever see the resulting filenames.
"""

import re
import time
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
from loguru import logger

from chilling_stories.models import ChapterUpload
from chilling_stories.services.exceptions import UploadRejectedError
from chilling_stories.utils.text import slugify, strip_extension

IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp"}
CHAPTER_EXTENSIONS = {".txt", ".md"}


class StorageService:
    """Local file storage under the assets directory"""

    def __init__(
        self,
        assets_dir: Path,
        poster_dir: str = "images/poster/stories",
        avatar_dir: str = "images/users/avatars",
        default_avatar: str = "/assets/images/users/avatars/default.png",
        max_poster_size: int = 5 * 1024 * 1024,
        max_avatar_size: int = 8 * 1024 * 1024,
        max_chapter_size: int = 20 * 1024 * 1024,
        max_chapter_files: int = 50,
    ):
        self.assets_dir = Path(assets_dir)
        self.poster_subdir = poster_dir
        self.avatar_subdir = avatar_dir
        self.default_avatar = default_avatar
        self.max_poster_size = max_poster_size
        self.max_avatar_size = max_avatar_size
        self.max_chapter_size = max_chapter_size
        self.max_chapter_files = max_chapter_files

    @classmethod
    def from_settings(cls, settings) -> "StorageService":
        return cls(
            assets_dir=settings.ASSETS_DIR,
            poster_dir=settings.POSTER_DIR,
            avatar_dir=settings.AVATAR_DIR,
            default_avatar=settings.DEFAULT_AVATAR,
            max_poster_size=settings.MAX_POSTER_SIZE,
            max_avatar_size=settings.MAX_AVATAR_SIZE,
            max_chapter_size=settings.MAX_CHAPTER_SIZE,
            max_chapter_files=settings.MAX_CHAPTER_FILES,
        )

    @property
    def poster_dir(self) -> Path:
        return self.assets_dir / self.poster_subdir

    @property
    def avatar_dir(self) -> Path:
        return self.assets_dir / self.avatar_subdir

    @property
    def poster_url_path(self) -> str:
        """Public URL prefix of poster files under the /assets mount"""
        return f"/assets/{self.poster_subdir.strip('/')}"

    def ensure_dirs(self) -> None:
        for directory in (self.poster_dir, self.avatar_dir):
            directory.mkdir(parents=True, exist_ok=True)

    # ==================== Posters ====================

    def next_poster_name(self, title: Optional[str], extension: str) -> str:
        """
        Poster filename for a story title

        Format: <slug>_<n><ext>, n is one more than the highest counter
        already used for that slug.
        """
        slug = slugify(title or "") or "story"
        pattern = re.compile(rf"^{re.escape(slug)}_(\d+)\.")

        counters = [-1]
        if self.poster_dir.exists():
            for path in self.poster_dir.iterdir():
                match = pattern.match(path.name)
                if match:
                    counters.append(int(match.group(1)))

        return f"{slug}_{max(counters) + 1}{extension}"

    async def save_poster(self, upload: UploadFile, title: Optional[str]) -> str:
        """
        Store a poster image

        Raises:
            UploadRejectedError: not a jpeg/png/webp image, or too large

        Returns:
            stored filename
        """
        data = await self._read_image(upload, self.max_poster_size, "posters")
        filename = self.next_poster_name(title, Path(upload.filename or "").suffix.lower())

        self.poster_dir.mkdir(parents=True, exist_ok=True)
        (self.poster_dir / filename).write_bytes(data)

        logger.info(f"🖼️  Poster saved: {filename}")
        return filename

    def delete_poster(self, filename: Optional[str]) -> bool:
        """Remove a poster file, missing files are ignored"""
        if not filename:
            return False

        path = self.poster_dir / Path(filename).name
        if not path.exists():
            return False

        path.unlink()
        logger.info(f"🗑️  Poster deleted: {filename}")
        return True

    # ==================== Avatars ====================

    async def save_avatar(self, upload: UploadFile, user_id: str) -> str:
        """
        Store an avatar image

        Returns:
            public path, e.g. /assets/images/users/avatars/avatar_<user>_<ms>.png
        """
        data = await self._read_image(upload, self.max_avatar_size, "avatars")
        extension = Path(upload.filename or "").suffix.lower()
        filename = f"avatar_{user_id}_{int(time.time() * 1000)}{extension}"

        self.avatar_dir.mkdir(parents=True, exist_ok=True)
        (self.avatar_dir / filename).write_bytes(data)

        return f"/assets/{self.avatar_subdir}/{filename}"

    def delete_avatar(self, public_path: Optional[str]) -> bool:
        """Remove a previous avatar, the default avatar is never deleted"""
        if not public_path or public_path == self.default_avatar:
            return False

        path = self.avatar_dir / Path(public_path).name
        if not path.exists():
            return False

        path.unlink()
        return True

    # ==================== Chapters ====================

    async def read_chapter_upload(self, upload: UploadFile, title: Optional[str] = None) -> ChapterUpload:
        """
        Read an uploaded chapter file

        Only UTF-8 .txt and .md files are accepted. Nothing is kept on disk.

        Args:
            upload: uploaded file
            title: chapter title, defaults to the filename without extension
        """
        filename = upload.filename or ""
        if Path(filename).suffix.lower() not in CHAPTER_EXTENSIONS:
            raise UploadRejectedError("Only .txt and .md files are allowed")

        data = await upload.read()
        if len(data) > self.max_chapter_size:
            raise UploadRejectedError(f"Chapter file {filename} is too large")

        try:
            content = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise UploadRejectedError(f"Chapter file {filename} is not valid UTF-8") from e

        return ChapterUpload(title=title or strip_extension(filename), content=content)

    @staticmethod
    async def _read_image(upload: UploadFile, max_size: int, kind: str) -> bytes:
        if upload.content_type not in IMAGE_TYPES:
            raise UploadRejectedError(f"Only JPG, PNG and WEBP are allowed for {kind}")

        data = await upload.read()
        if len(data) > max_size:
            raise UploadRejectedError(f"Image exceeds the {max_size // (1024 * 1024)} MB limit for {kind}")
        return data
