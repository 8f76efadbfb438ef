"""
Story routes - creation, listing, rankings, favorites and reading history
"""

import json
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from loguru import logger

from chilling_stories.models import (
    ApiResponse, Principal, UserRole, StoryCreate, StoryUpdate, StoryStatus, GenresUpdate
)
from chilling_stories.api.deps import (
    get_current_user, get_current_user_optional, require_roles, ensure_story_owner,
    get_story_service, get_engagement_service, get_storage_service,
    get_base_url, get_poster_path
)
from chilling_stories.api.formatters import format_story, poster_link
from chilling_stories.services import (
    StoryService, EngagementService, StorageService, UploadRejectedError
)

router = APIRouter()


def parse_genres(raw: Optional[str]) -> List[str]:
    """
    Genres sent as a form field

    Accepts a JSON array, falls back to a comma separated list.
    """
    if not raw:
        return []

    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return raw.split(",")

    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="genres must be a JSON array of names"
        )
    return [str(item) for item in value]


def _viewer_id(current_user: Optional[Principal]) -> Optional[str]:
    return current_user.id if current_user else None


# ==================== Create / search ====================

@router.post("/", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_story(
    title: str = Form(...),
    description: Optional[str] = Form(None),
    genres: Optional[str] = Form(None, description="JSON array of genre names"),
    poster: Optional[UploadFile] = File(None),
    current_user: Principal = Depends(require_roles(UserRole.AUTHOR, UserRole.ADMIN)),
    story_service: StoryService = Depends(get_story_service),
    storage: StorageService = Depends(get_storage_service),
    base_url: str = Depends(get_base_url),
    poster_path: str = Depends(get_poster_path)
):
    """
    Create a story with its genres and poster

    Multipart form:
    - **title**: required
    - **description**: optional
    - **genres**: JSON array, e.g. `["Horror", "Mystery"]`
    - **poster**: optional jpeg/png/webp image
    """
    genre_names = parse_genres(genres)

    cover_image_path = None
    if poster is not None and poster.filename:
        try:
            cover_image_path = await storage.save_poster(poster, title)
        except UploadRejectedError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    story_data = StoryCreate(title=title, description=description, cover_image_path=cover_image_path)

    try:
        story_id = await story_service.create_story_with_genres(current_user.id, story_data, genre_names)
    except Exception:
        storage.delete_poster(cover_image_path)
        raise

    return ApiResponse(
        message="Story created",
        data={
            "story_id": story_id,
            "cover_image_path": cover_image_path,
            "poster_link": poster_link(base_url, cover_image_path, poster_path),
            "genres_added": genre_names,
        }
    )


@router.get("/", response_model=ApiResponse)
async def search_stories(
    search: Optional[str] = Query(None, description="Full-text keyword"),
    story_service: StoryService = Depends(get_story_service),
    base_url: str = Depends(get_base_url),
    poster_path: str = Depends(get_poster_path)
):
    """Search stories by title and description, every story without a keyword"""
    stories = await story_service.search_stories(search)
    return ApiResponse(data=[format_story(base_url, story, poster_path) for story in stories])


@router.get("/genres/all", response_model=ApiResponse)
async def get_all_genres(story_service: StoryService = Depends(get_story_service)):
    """Every genre, alphabetical"""
    genres = await story_service.get_all_genres()
    return ApiResponse(data=[genre.model_dump() for genre in genres])


# ==================== Rankings ====================

@router.get("/top/new", response_model=ApiResponse)
async def top_new(
    current_user: Optional[Principal] = Depends(get_current_user_optional),
    story_service: StoryService = Depends(get_story_service),
    base_url: str = Depends(get_base_url),
    poster_path: str = Depends(get_poster_path)
):
    """30 newest stories"""
    stories = await story_service.get_newest_stories_for_user(_viewer_id(current_user))
    return ApiResponse(data=[format_story(base_url, story, poster_path) for story in stories])


@router.get("/top/views", response_model=ApiResponse)
async def top_views(
    current_user: Optional[Principal] = Depends(get_current_user_optional),
    story_service: StoryService = Depends(get_story_service),
    base_url: str = Depends(get_base_url),
    poster_path: str = Depends(get_poster_path)
):
    """Top 30 stories by views"""
    stories = await story_service.get_top_stories_by_view_for_user(_viewer_id(current_user))
    return ApiResponse(data=[format_story(base_url, story, poster_path) for story in stories])


@router.get("/top/favorites", response_model=ApiResponse)
async def top_favorites(
    current_user: Optional[Principal] = Depends(get_current_user_optional),
    story_service: StoryService = Depends(get_story_service),
    base_url: str = Depends(get_base_url),
    poster_path: str = Depends(get_poster_path)
):
    """Top 30 stories by favorites"""
    stories = await story_service.get_top_stories_by_favorite_for_user(_viewer_id(current_user))
    return ApiResponse(data=[format_story(base_url, story, poster_path) for story in stories])


@router.get("/authors/{author_id}", response_model=ApiResponse)
async def stories_by_author(
    author_id: str,
    current_user: Optional[Principal] = Depends(get_current_user_optional),
    story_service: StoryService = Depends(get_story_service),
    base_url: str = Depends(get_base_url),
    poster_path: str = Depends(get_poster_path)
):
    """Every story of an author, newest first"""
    stories = await story_service.get_stories_by_author_for_user(author_id, _viewer_id(current_user))
    return ApiResponse(data=[format_story(base_url, story, poster_path) for story in stories])


# ==================== Favorites / history ====================

@router.get("/favorites/me", response_model=ApiResponse)
async def my_favorites(
    current_user: Principal = Depends(get_current_user),
    engagement: EngagementService = Depends(get_engagement_service),
    base_url: str = Depends(get_base_url),
    poster_path: str = Depends(get_poster_path)
):
    """Stories the current user favorited"""
    stories = await engagement.get_favorited_stories(current_user.id)
    return ApiResponse(data=[format_story(base_url, story, poster_path) for story in stories])


@router.get("/history/me", response_model=ApiResponse)
async def my_history(
    current_user: Principal = Depends(get_current_user),
    engagement: EngagementService = Depends(get_engagement_service),
    base_url: str = Depends(get_base_url),
    poster_path: str = Depends(get_poster_path)
):
    """Reading history, most recently read first"""
    items = await engagement.get_all_reading_progress(current_user.id)
    return ApiResponse(data=[format_story(base_url, item, poster_path) for item in items])


@router.delete("/history/{story_id}", response_model=ApiResponse)
async def remove_from_history(
    story_id: str,
    current_user: Principal = Depends(get_current_user),
    engagement: EngagementService = Depends(get_engagement_service)
):
    """Remove a story from the reading history"""
    if not await engagement.delete_reading_progress(current_user.id, story_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="History entry not found"
        )
    return ApiResponse(message="Removed from history")


# ==================== Single story ====================

@router.get("/{story_id}/info", response_model=ApiResponse)
async def get_story_info(
    story_id: str,
    current_user: Optional[Principal] = Depends(get_current_user_optional),
    story_service: StoryService = Depends(get_story_service),
    base_url: str = Depends(get_base_url),
    poster_path: str = Depends(get_poster_path)
):
    """Story metadata with genres, without chapters"""
    story = await story_service.get_story_by_id(story_id, _viewer_id(current_user))
    if not story:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Story not found"
        )
    return ApiResponse(data=format_story(base_url, story, poster_path))


@router.patch("/{story_id}", response_model=ApiResponse)
async def update_story(
    story_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    story_status: Optional[StoryStatus] = Form(None, alias="status"),
    poster: Optional[UploadFile] = File(None),
    current_user: Principal = Depends(require_roles(UserRole.AUTHOR, UserRole.ADMIN)),
    story_service: StoryService = Depends(get_story_service),
    storage: StorageService = Depends(get_storage_service)
):
    """
    Update story metadata

    Multipart form, missing fields keep their value. A new poster replaces
    the previous file.
    """
    ensure_story_owner(current_user, await story_service.get_author_by_story_id(story_id))
    old_cover = await story_service.get_story_cover(story_id)

    cover_image_path = None
    if poster is not None and poster.filename:
        try:
            cover_image_path = await storage.save_poster(poster, title or story_id)
        except UploadRejectedError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    changes = StoryUpdate(
        title=title,
        description=description,
        cover_image_path=cover_image_path,
        status=story_status
    )
    if not await story_service.update_story(story_id, changes):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Nothing to update"
        )

    if cover_image_path and old_cover:
        storage.delete_poster(old_cover)

    return ApiResponse(message="Story updated")


@router.delete("/{story_id}", response_model=ApiResponse)
async def delete_story(
    story_id: str,
    current_user: Principal = Depends(require_roles(UserRole.AUTHOR, UserRole.ADMIN)),
    story_service: StoryService = Depends(get_story_service),
    storage: StorageService = Depends(get_storage_service)
):
    """Delete a story, its chapters and its poster file"""
    ensure_story_owner(current_user, await story_service.get_author_by_story_id(story_id))

    cover_image_path = await story_service.get_story_cover(story_id)
    if not await story_service.delete_story(story_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Story not found"
        )

    storage.delete_poster(cover_image_path)
    return ApiResponse(message="Story and associated files deleted")


@router.put("/{story_id}/genres", response_model=ApiResponse)
async def update_genres(
    story_id: str,
    data: GenresUpdate,
    current_user: Principal = Depends(require_roles(UserRole.AUTHOR, UserRole.ADMIN)),
    story_service: StoryService = Depends(get_story_service)
):
    """Replace every genre of a story"""
    ensure_story_owner(current_user, await story_service.get_author_by_story_id(story_id))

    await story_service.update_story_genres(story_id, data.genres)
    genres = await story_service.get_story_genres(story_id)

    return ApiResponse(
        message="Story genres updated",
        data={"updated_genres": [genre.name for genre in genres]}
    )


@router.patch("/{story_id}/view", response_model=ApiResponse)
async def add_view(
    story_id: str,
    engagement: EngagementService = Depends(get_engagement_service)
):
    """Count one view"""
    if not await engagement.increment_view_count(story_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Story not found"
        )
    return ApiResponse(message="View counted")


@router.post("/{story_id}/favorite", response_model=ApiResponse)
async def toggle_favorite(
    story_id: str,
    current_user: Principal = Depends(get_current_user),
    engagement: EngagementService = Depends(get_engagement_service)
):
    """Favorite the story, or unfavorite it when already favorited"""
    result = await engagement.toggle_favorite(current_user.id, story_id)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Story not found"
        )

    logger.debug(f"Favorite toggled by {current_user.id} on {story_id}: {result.is_favorited}")
    return ApiResponse(
        message="Added to favorites" if result.is_favorited else "Removed from favorites",
        data=result.model_dump()
    )
