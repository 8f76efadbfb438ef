"""
User table ORM model
"""

from sqlalchemy import Column, String, TIMESTAMP, Index
from datetime import datetime

from chilling_stories.db.base import Base


class User(Base):
    """User table"""
    __tablename__ = "users"

    # Primary key
    id = Column(String(64), primary_key=True, comment="User ID")

    # Profile
    username = Column(String(64), unique=True, nullable=False, comment="Username")
    email = Column(String(128), unique=True, nullable=False, comment="Email")
    phone = Column(String(32), nullable=True, comment="Phone number")
    password_hash = Column(String(256), nullable=False, comment="Password hash")
    avatar_url = Column(String(512), nullable=True, comment="Avatar public path")

    # Access
    role = Column(String(20), nullable=False, default="viewer", comment="admin / author / viewer")

    # Timestamps
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="Created at")

    # Indexes
    __table_args__ = (
        Index('idx_users_role', 'role'),
        Index('idx_users_created_at', 'created_at'),
    )
