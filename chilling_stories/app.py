"""
FastAPI application entry point
"""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger

from chilling_stories.config import settings
from chilling_stories.api import api_v1_router
from chilling_stories.db import create_database
from chilling_stories.db.init_db import init_database
from chilling_stories.services import (
    StoryService, ChapterService, EngagementService, UserService, StorageService
)
from chilling_stories.utils.logging import setup_logging


def build_services(app: FastAPI, database, app_settings=settings) -> None:
    """Attach the database gateway and every service to app.state"""
    storage = StorageService.from_settings(app_settings)
    storage.ensure_dirs()

    app.state.database = database
    app.state.story_service = StoryService(
        database,
        top_limit=app_settings.TOP_STORIES_LIMIT,
        text_config=app_settings.FULL_TEXT_CONFIG
    )
    app.state.chapter_service = ChapterService(database)
    app.state.engagement_service = EngagementService(database)
    app.state.user_service = UserService(database, default_avatar=app_settings.DEFAULT_AVATAR)
    app.state.storage_service = storage


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    logger.info(f"🚀 Starting {settings.APP_NAME} {settings.APP_VERSION}...")

    database = create_database(settings)
    try:
        await init_database(database, settings.FULL_TEXT_CONFIG)
        logger.success("✅ Database initialized")
    except Exception as e:
        logger.error(f"❌ Database initialization failed: {e}")
        await database.dispose()
        raise

    build_services(app, database)
    logger.success("🎉 Application started successfully!")

    yield

    logger.info("👋 Shutting down...")
    await database.dispose()
    logger.success("✅ Application shutdown complete")


# FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Tag every log line of a request with a short request id"""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
    started = time.perf_counter()

    with logger.contextualize(request_id=request_id):
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)")

    response.headers["X-Request-ID"] = request_id
    return response


# API routes
app.include_router(api_v1_router, prefix=settings.API_V1_PREFIX)

# Posters and avatars
app.mount("/assets", StaticFiles(directory=settings.ASSETS_DIR, check_dir=False), name="assets")


@app.get("/")
async def root():
    """Health check"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "ok"
    }


@app.get("/health")
async def health_check(request: Request):
    """Health check (detailed)"""
    health_status = {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "services": {}
    }

    database = getattr(request.app.state, "database", None)
    if database is None:
        health_status["services"]["database"] = "not_initialized"
        health_status["status"] = "degraded"
    else:
        try:
            await database.ping()
            health_status["services"]["database"] = "healthy"
        except Exception as e:
            logger.warning(f"⚠️  Database health check failed: {e}")
            health_status["services"]["database"] = "unhealthy"
            health_status["status"] = "degraded"

    return health_status


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {type(exc).__name__}: {str(exc)}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "code": 500,
            "message": "Internal server error",
            "error": {
                "type": type(exc).__name__,
                "message": str(exc)
            }
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "chilling_stories.app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
