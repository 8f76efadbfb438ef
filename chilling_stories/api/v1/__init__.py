"""
API v1 router aggregation
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .user import router as user_router
from .chapter import router as chapter_router
from .story import router as story_router

# v1 API router
api_router = APIRouter()

# Accounts
api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(user_router, prefix="/users", tags=["User"])

# Chapter routes share the /stories prefix; registered first so the literal
# /chapters/... paths win over /{story_id}/...
api_router.include_router(chapter_router, prefix="/stories", tags=["Chapter"])
api_router.include_router(story_router, prefix="/stories", tags=["Story"])
