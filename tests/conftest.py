"""
Shared fixtures

Every test gets its own file-backed SQLite database behind the Database
gateway, with all tables created.
"""

import pytest

from chilling_stories.db import Database
from chilling_stories.db.dao import UserDAO
from chilling_stories.services import StoryService, ChapterService, EngagementService, UserService


async def make_user(database: Database, username: str, role: str = "viewer") -> str:
    """Insert a user directly, skipping password hashing"""
    async with database.session() as session:
        user = await UserDAO.create(
            session,
            username=username,
            email=f"{username}@example.com",
            password_hash="not-a-real-hash",
            role=role
        )
    return user.id


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'chilling_test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def story_service(database):
    return StoryService(database, top_limit=30)


@pytest.fixture
def chapter_service(database):
    return ChapterService(database)


@pytest.fixture
def engagement(database):
    return EngagementService(database)


@pytest.fixture
def user_service(database):
    return UserService(database)


@pytest.fixture
async def author_id(database):
    return await make_user(database, "author_one", role="author")


@pytest.fixture
async def other_author_id(database):
    return await make_user(database, "author_two", role="author")


@pytest.fixture
async def reader_id(database):
    return await make_user(database, "reader_one")


@pytest.fixture
async def second_reader_id(database):
    return await make_user(database, "reader_two")


@pytest.fixture
def create_user(database):
    """Factory for extra users inside a test"""
    async def _create(username: str, role: str = "viewer") -> str:
        return await make_user(database, username, role)
    return _create
