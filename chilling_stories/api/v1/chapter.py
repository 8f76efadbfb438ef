"""
Chapter routes - uploads, reading and editing

Mounted under /stories next to the story routes.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from chilling_stories.models import ApiResponse, Principal, UserRole, ChapterCreate, ChapterUpdate
from chilling_stories.api.deps import (
    get_current_user_optional, require_roles, ensure_story_owner,
    get_chapter_service, get_engagement_service, get_storage_service
)
from chilling_stories.services import (
    ChapterService, EngagementService, StorageService,
    ChapterOrderConflictError, UploadRejectedError
)

router = APIRouter()

author_or_admin = require_roles(UserRole.AUTHOR, UserRole.ADMIN)


# ==================== Uploads ====================

@router.post("/upload-chapter", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def upload_chapter(
    story_id: str = Form(...),
    chapter_title: str = Form(...),
    order_num: int = Form(..., ge=1),
    chapter_file: UploadFile = File(...),
    current_user: Principal = Depends(author_or_admin),
    chapter_service: ChapterService = Depends(get_chapter_service),
    storage: StorageService = Depends(get_storage_service)
):
    """
    Upload one .txt/.md file as a chapter at an explicit position

    - **story_id**: owning story
    - **chapter_title**: chapter title
    - **order_num**: position, must be free
    - **chapter_file**: UTF-8 text file
    """
    ensure_story_owner(current_user, await chapter_service.get_author_by_story_id(story_id))

    try:
        upload = await storage.read_chapter_upload(chapter_file, title=chapter_title)
        chapter_id = await chapter_service.add_chapter(ChapterCreate(
            story_id=story_id,
            order_num=order_num,
            title=upload.title,
            content=upload.content
        ))
    except UploadRejectedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ChapterOrderConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ApiResponse(
        message="Chapter added",
        data={
            "chapter_id": chapter_id,
            "story_id": story_id,
            "order_num": order_num,
            "title": upload.title,
        }
    )


@router.post("/upload-chapters", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def upload_chapters(
    story_id: str = Form(...),
    chapters: List[UploadFile] = File(...),
    current_user: Principal = Depends(author_or_admin),
    chapter_service: ChapterService = Depends(get_chapter_service),
    storage: StorageService = Depends(get_storage_service)
):
    """
    Upload several .txt/.md files as chapters

    Chapters are appended after the story's last chapter in upload order;
    titles come from the file names.
    """
    ensure_story_owner(current_user, await chapter_service.get_author_by_story_id(story_id))

    max_files = storage.max_chapter_files
    if not chapters:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files uploaded")
    if len(chapters) > max_files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {max_files} files per upload"
        )

    try:
        uploads = [await storage.read_chapter_upload(chapter) for chapter in chapters]
    except UploadRejectedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        created = await chapter_service.add_chapters_bulk(story_id, uploads)
    except ChapterOrderConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ApiResponse(
        message=f"{len(created)} chapters added successfully",
        data=[chapter.model_dump() for chapter in created]
    )


# ==================== Reading ====================

@router.get("/{story_id}/chapters", response_model=ApiResponse)
async def get_story_chapters(
    story_id: str,
    chapter_service: ChapterService = Depends(get_chapter_service),
    engagement: EngagementService = Depends(get_engagement_service)
):
    """Chapters of a story in reading order, counts one view"""
    if not await engagement.increment_view_count(story_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Story not found"
        )

    chapters = await chapter_service.get_chapters_by_story_id(story_id)
    return ApiResponse(data=[chapter.model_dump(mode="json") for chapter in chapters])


@router.get("/chapters/{chapter_id}", response_model=ApiResponse)
async def get_chapter(
    chapter_id: str,
    current_user: Optional[Principal] = Depends(get_current_user_optional),
    chapter_service: ChapterService = Depends(get_chapter_service)
):
    """Full chapter content, saves reading progress for a signed-in reader"""
    chapter = await chapter_service.get_chapter_by_id_with_progress(
        chapter_id, current_user.id if current_user else None
    )
    if not chapter:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Chapter not found"
        )
    return ApiResponse(data=chapter.model_dump(mode="json"))


@router.get("/{story_id}/chapters/{order_num}", response_model=ApiResponse)
async def get_chapter_by_number(
    story_id: str,
    order_num: int,
    current_user: Optional[Principal] = Depends(get_current_user_optional),
    chapter_service: ChapterService = Depends(get_chapter_service)
):
    """Chapter at a position, saves reading progress for a signed-in reader"""
    chapter = await chapter_service.get_chapter_by_order_with_progress(
        story_id, order_num, current_user.id if current_user else None
    )
    if not chapter:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Chapter not found"
        )
    return ApiResponse(data=chapter.model_dump(mode="json"))


# ==================== Editing ====================

@router.patch("/chapters/{chapter_id}", response_model=ApiResponse)
async def update_chapter(
    chapter_id: str,
    data: ChapterUpdate,
    current_user: Principal = Depends(author_or_admin),
    chapter_service: ChapterService = Depends(get_chapter_service)
):
    """Update a chapter's title or content"""
    author_id = await chapter_service.get_author_by_chapter_id(chapter_id)
    if author_id is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chapter not found")
    ensure_story_owner(current_user, author_id)

    if not await chapter_service.update_chapter(chapter_id, data):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Nothing to update")
    return ApiResponse(message="Chapter updated")


@router.patch("/{story_id}/chapters/{order_num}", response_model=ApiResponse)
async def update_chapter_by_number(
    story_id: str,
    order_num: int,
    data: ChapterUpdate,
    current_user: Principal = Depends(author_or_admin),
    chapter_service: ChapterService = Depends(get_chapter_service)
):
    """Update the chapter at a position"""
    ensure_story_owner(current_user, await chapter_service.get_author_by_story_id(story_id))

    if not await chapter_service.update_chapter_by_order(story_id, order_num, data):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Chapter not found or nothing to update"
        )
    return ApiResponse(message="Chapter updated")


@router.delete("/chapters/{chapter_id}", response_model=ApiResponse)
async def delete_chapter(
    chapter_id: str,
    current_user: Principal = Depends(author_or_admin),
    chapter_service: ChapterService = Depends(get_chapter_service)
):
    """Delete a chapter by ID"""
    author_id = await chapter_service.get_author_by_chapter_id(chapter_id)
    if author_id is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chapter not found")
    ensure_story_owner(current_user, author_id)

    if not await chapter_service.delete_chapter_by_id(chapter_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chapter not found")
    return ApiResponse(message="Chapter deleted")


@router.delete("/{story_id}/chapters/{order_num}", response_model=ApiResponse)
async def delete_chapter_by_number(
    story_id: str,
    order_num: int,
    current_user: Principal = Depends(author_or_admin),
    chapter_service: ChapterService = Depends(get_chapter_service)
):
    """Delete the chapter at a position"""
    ensure_story_owner(current_user, await chapter_service.get_author_by_story_id(story_id))

    if not await chapter_service.delete_chapter_by_order(story_id, order_num):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chapter not found")
    return ApiResponse(message="Chapter deleted")
