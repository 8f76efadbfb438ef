"""
Response formatting

Adds public asset links to story rows before they are returned.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel

POSTER_PATH = "/assets/images/poster/stories"


def poster_link(base_url: str, filename: Optional[str], poster_path: str = POSTER_PATH) -> Optional[str]:
    if not filename:
        return None
    return f"{base_url.rstrip('/')}{poster_path}/{filename}"


def avatar_link(base_url: str, path: Optional[str]) -> Optional[str]:
    """Absolute avatar URL, external URLs are returned unchanged"""
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def format_story(
    base_url: str,
    story: Union[BaseModel, Dict[str, Any]],
    poster_path: str = POSTER_PATH
) -> Dict[str, Any]:
    """
    Story payload for the API

    Adds cover_link and makes sure the aggregate fields are plain ints and
    bools whatever the driver returned.
    """
    data = story.model_dump(mode="json") if isinstance(story, BaseModel) else dict(story)

    for key in ("chapter_count", "total_chapters", "view_count", "favorite_count"):
        if key in data and data[key] is not None:
            data[key] = int(data[key])
    if "is_favorited" in data:
        data["is_favorited"] = bool(data["is_favorited"])

    data["cover_link"] = poster_link(base_url, data.get("cover_image_path"), poster_path)
    return data


def format_user(base_url: str, user: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    """User payload with an absolute avatar link"""
    data = user.model_dump(mode="json") if isinstance(user, BaseModel) else dict(user)
    data["avatar_link"] = avatar_link(base_url, data.get("avatar_url"))
    return data
