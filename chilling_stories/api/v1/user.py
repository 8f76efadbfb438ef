"""
User routes - profiles and role management
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from loguru import logger

from chilling_stories.models import ApiResponse, Principal, RoleUpdate, UserRole
from chilling_stories.api.deps import (
    get_current_user, require_roles, get_user_service, get_storage_service, get_base_url
)
from chilling_stories.api.formatters import format_user
from chilling_stories.services import UserService, StorageService, UploadRejectedError

router = APIRouter()


@router.get("/profile", response_model=ApiResponse)
async def get_profile(
    current_user: Principal = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
    base_url: str = Depends(get_base_url)
):
    """Own profile"""
    user = await user_service.get_user(current_user.id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return ApiResponse(data=format_user(base_url, user))


@router.put("/profile", response_model=ApiResponse)
async def update_profile(
    username: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    avatar_image: Optional[UploadFile] = File(None),
    current_user: Principal = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
    storage: StorageService = Depends(get_storage_service),
    base_url: str = Depends(get_base_url)
):
    """
    Update own profile

    Multipart form. Missing fields keep their value; a new avatar replaces
    the previous file.
    """
    existing = await user_service.get_user(current_user.id)
    if not existing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    avatar_url = None
    if avatar_image is not None and avatar_image.filename:
        try:
            avatar_url = await storage.save_avatar(avatar_image, current_user.id)
        except UploadRejectedError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        result = await user_service.update_profile(
            current_user.id,
            username=username,
            email=email,
            phone=phone,
            avatar_url=avatar_url
        )
    except Exception:
        # The new avatar is orphaned if the row was not written
        storage.delete_avatar(avatar_url)
        raise

    if not result.success:
        storage.delete_avatar(avatar_url)
        conflict = result.error["code"] != "USER_NOT_FOUND"
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST if conflict else status.HTTP_404_NOT_FOUND,
            detail=result.error
        )

    if avatar_url:
        storage.delete_avatar(existing.avatar_url)
        logger.info(f"🖼️  Avatar replaced for {current_user.id}")

    return ApiResponse(data=format_user(base_url, result.data), message=result.message)


@router.get("/", response_model=ApiResponse)
async def list_users(
    current_user: Principal = Depends(require_roles(UserRole.ADMIN)),
    user_service: UserService = Depends(get_user_service),
    base_url: str = Depends(get_base_url)
):
    """Every user (admin only)"""
    users = await user_service.get_all_users()
    return ApiResponse(data=[format_user(base_url, user) for user in users])


@router.get("/{user_id}", response_model=ApiResponse)
async def get_user(
    user_id: str,
    user_service: UserService = Depends(get_user_service),
    base_url: str = Depends(get_base_url)
):
    """Public profile of a user"""
    user = await user_service.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    data = format_user(base_url, user)
    data.pop("email", None)
    data.pop("phone", None)
    return ApiResponse(data=data)


@router.patch("/{user_id}/role", response_model=ApiResponse)
async def update_role(
    user_id: str,
    data: RoleUpdate,
    current_user: Principal = Depends(require_roles(UserRole.ADMIN)),
    user_service: UserService = Depends(get_user_service),
    base_url: str = Depends(get_base_url)
):
    """Change a user's role (admin only)"""
    user = await user_service.update_user_role(user_id, data.role)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return ApiResponse(data=format_user(base_url, user), message="Role updated")
