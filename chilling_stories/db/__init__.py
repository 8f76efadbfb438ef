"""
Database module

SQLAlchemy ORM models, DAOs and the Database gateway
"""

from .base import Base, Database, create_database, get_database_url

__all__ = [
    "Base",
    "Database",
    "create_database",
    "get_database_url",
]
