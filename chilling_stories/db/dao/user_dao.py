"""
User data access object
"""

from typing import Optional, List
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from chilling_stories.db.models.user import User
from chilling_stories.utils.id_generator import generate_user_id


class UserDAO:
    """User DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        username: str,
        email: str,
        password_hash: str,
        role: str = "viewer",
        phone: Optional[str] = None,
        avatar_url: Optional[str] = None
    ) -> User:
        """
        Create a user

        Args:
            session: database session
            username: unique username
            email: unique email
            password_hash: already hashed password
            role: admin / author / viewer

        Returns:
            User: the new user
        """
        user = User(
            id=generate_user_id(),
            username=username,
            email=email,
            phone=phone,
            password_hash=password_hash,
            role=role,
            avatar_url=avatar_url,
        )

        session.add(user)
        await session.flush()

        return user

    @staticmethod
    async def get_by_id(session: AsyncSession, user_id: str) -> Optional[User]:
        """Get a user by ID"""
        result = await session.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(session: AsyncSession, email: str) -> Optional[User]:
        """Get a user by email"""
        result = await session.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_username(session: AsyncSession, username: str) -> Optional[User]:
        """Get a user by username"""
        result = await session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_all(session: AsyncSession) -> List[User]:
        """All users, newest first"""
        result = await session.execute(
            select(User).order_by(User.created_at.desc(), User.id.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def update_profile(session: AsyncSession, user_id: str, **fields) -> bool:
        """
        Update profile columns

        Only non-empty values are written, the others keep their current value.
        """
        values = {key: value for key, value in fields.items() if value}
        if not values:
            return await UserDAO.get_by_id(session, user_id) is not None

        result = await session.execute(
            update(User).where(User.id == user_id).values(**values)
        )
        return result.rowcount > 0

    @staticmethod
    async def update_role(session: AsyncSession, user_id: str, role: str) -> bool:
        """Change a user's role"""
        result = await session.execute(
            update(User).where(User.id == user_id).values(role=role)
        )
        return result.rowcount > 0
