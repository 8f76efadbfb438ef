"""
Authentication routes
"""

from fastapi import APIRouter, Depends, HTTPException, status

from chilling_stories.models import ApiResponse, UserCreate, UserLogin, Principal
from chilling_stories.api.deps import get_current_user, get_user_service, get_base_url
from chilling_stories.api.formatters import format_user
from chilling_stories.services import UserService

router = APIRouter()


@router.post("/register", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: UserCreate,
    user_service: UserService = Depends(get_user_service)
):
    """
    Register

    - **username**: 3-64 characters
    - **email**: unique email
    - **password**: at least 6 characters
    - **role**: viewer (default) or author
    """
    result = await user_service.register(data)

    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result.error
        )
    return result


@router.post("/login", response_model=ApiResponse)
async def login(
    data: UserLogin,
    user_service: UserService = Depends(get_user_service)
):
    """Log in with email and password, returns a bearer token"""
    result = await user_service.login(data.email, data.password)

    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.error
        )
    return result


@router.get("/me", response_model=ApiResponse)
async def me(
    current_user: Principal = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
    base_url: str = Depends(get_base_url)
):
    """Profile of the token holder"""
    user = await user_service.get_user(current_user.id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return ApiResponse(data=format_user(base_url, user))
