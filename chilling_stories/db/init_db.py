"""
Database initialization script

Creates every table and, on PostgreSQL, the full-text search index over
story title and description.
"""

import asyncio

from loguru import logger
from sqlalchemy import text

from chilling_stories.config.settings import settings
from chilling_stories.db.base import Database, create_database


def story_search_index_sql(text_config: str) -> str:
    """GIN expression index matching the search query expression"""
    return (
        "CREATE INDEX IF NOT EXISTS idx_stories_fulltext ON stories "
        f"USING GIN (to_tsvector('{text_config}', "
        "coalesce(title, '') || ' ' || coalesce(description, '')))"
    )


async def create_search_index(database: Database, text_config: str) -> None:
    """Create the full-text index, skipped on dialects without GIN"""
    if database.dialect_name != "postgresql":
        logger.info(f"📦 Full-text index skipped on {database.dialect_name}")
        return

    async with database.engine.begin() as conn:
        await conn.execute(text(story_search_index_sql(text_config)))
    logger.info("✅ Full-text index created")


async def init_database(database: Database, text_config: str = "english") -> None:
    """Create tables and indexes, safe to run on an initialized database"""
    await database.create_all()
    logger.info("✅ All tables created")

    await create_search_index(database, text_config)


async def main():
    logger.info("🚀 Starting database initialization...")
    database = create_database(settings)

    try:
        await init_database(database, settings.FULL_TEXT_CONFIG)
        logger.success("🎉 Database initialization completed")
    except Exception as e:
        logger.error(f"❌ Database initialization failed: {e}")
        raise
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
