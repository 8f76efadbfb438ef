"""
Dialect-aware INSERT ... ON CONFLICT helpers

PostgreSQL in production, SQLite in tests. Both support
`on_conflict_do_nothing` / `on_conflict_do_update`.
"""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


def insert_for(session: AsyncSession, model):
    """
    Return the dialect specific Core `insert()` for a model's table

    The statement targets the Table rather than the mapped class so the
    result keeps its rowcount.
    """
    table = getattr(model, "__table__", model)
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(table)
    if dialect == "sqlite":
        return sqlite.insert(table)
    raise NotImplementedError(f"Unsupported database dialect: {dialect}")


def is_postgresql(session: AsyncSession) -> bool:
    return session.get_bind().dialect.name == "postgresql"
