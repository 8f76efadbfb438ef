"""
API dependencies - services, authentication and authorization
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from chilling_stories.db import Database
from chilling_stories.models import Principal, UserRole
from chilling_stories.services import (
    StoryService, ChapterService, EngagementService, UserService, StorageService
)
from chilling_stories.utils.auth import decode_access_token

# Bearer token, missing credentials are reported by get_current_user
security = HTTPBearer(auto_error=False)


# ==================== Services ====================

def get_database(request: Request) -> Database:
    return request.app.state.database


def get_story_service(request: Request) -> StoryService:
    return request.app.state.story_service


def get_chapter_service(request: Request) -> ChapterService:
    return request.app.state.chapter_service


def get_engagement_service(request: Request) -> EngagementService:
    return request.app.state.engagement_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_storage_service(request: Request) -> StorageService:
    return request.app.state.storage_service


def get_base_url(request: Request) -> str:
    """Scheme and host of the current request, used for asset links"""
    return str(request.base_url).rstrip("/")


def get_poster_path(request: Request) -> str:
    """URL prefix of poster files, follows the configured poster directory"""
    return request.app.state.storage_service.poster_url_path


# ==================== Authentication ====================

def _principal_from_token(token: str) -> Optional[Principal]:
    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        return None

    try:
        role = UserRole(payload.get("role", UserRole.VIEWER.value))
    except ValueError:
        return None

    return Principal(id=payload["sub"], username=payload.get("username", ""), role=role)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Principal:
    """
    Parse the current user from the JWT

    Raises:
        401 when no token is sent, 403 when the token is invalid or expired
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token is missing"
        )

    principal = _principal_from_token(credentials.credentials)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token"
        )
    return principal


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[Principal]:
    """
    Optional authentication (None for anonymous requests)

    An invalid token is treated as anonymous.
    """
    if not credentials:
        return None
    return _principal_from_token(credentials.credentials)


def require_roles(*roles: UserRole):
    """
    Role allow-list dependency

    Usage:
    ```python
    @router.post("/", dependencies=[Depends(require_roles(UserRole.AUTHOR, UserRole.ADMIN))])
    ```
    """
    async def checker(current_user: Principal = Depends(get_current_user)) -> Principal:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Permission denied: insufficient role"
            )
        return current_user

    return checker


def ensure_story_owner(principal: Principal, author_id: Optional[str]) -> None:
    """
    Allow admins and the author of the story

    Raises:
        404 when the story does not exist, 403 when the caller is not its owner
    """
    if author_id is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Story not found"
        )

    if not principal.is_admin and principal.id != author_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not own this story"
        )
