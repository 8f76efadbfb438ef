"""
User service

Registration, login, profiles and role management
"""

from typing import Optional, List

from loguru import logger

from chilling_stories.db import Database
from chilling_stories.db.dao import UserDAO
from chilling_stories.models import ApiResponse, UserCreate, UserModel, UserRole
from chilling_stories.utils.auth import verify_password, get_password_hash, create_access_token


class UserService:
    """User service"""

    def __init__(self, database: Database, default_avatar: Optional[str] = None):
        self.database = database
        self.default_avatar = default_avatar

    async def register(self, user_data: UserCreate) -> ApiResponse:
        """
        Register a user

        Args:
            user_data: registration data

        Returns:
            API response with the new user ID
        """
        # Admins are promoted, never self-registered
        if user_data.role == UserRole.ADMIN:
            return ApiResponse(
                success=False,
                message="Role not allowed",
                error={"code": "ROLE_NOT_ALLOWED", "message": "Admin accounts cannot be registered"}
            )

        async with self.database.session() as session:
            # Email must be unique
            if await UserDAO.get_by_email(session, user_data.email):
                return ApiResponse(
                    success=False,
                    message="Email already registered",
                    error={"code": "EMAIL_EXISTS", "message": "This email is already registered"}
                )

            # Username must be unique
            if await UserDAO.get_by_username(session, user_data.username):
                return ApiResponse(
                    success=False,
                    message="Username already taken",
                    error={"code": "USERNAME_EXISTS", "message": "This username is already taken"}
                )

            user = await UserDAO.create(
                session=session,
                username=user_data.username,
                email=user_data.email,
                password_hash=get_password_hash(user_data.password),
                role=user_data.role.value,
                avatar_url=self.default_avatar
            )

        logger.info(f"👤 User registered: {user.id} ({user.role})")

        return ApiResponse(
            success=True,
            message="User registered successfully",
            data={"user_id": user.id}
        )

    async def login(self, email: str, password: str) -> ApiResponse:
        """
        Log a user in

        Returns:
            API response with the access token and the user profile
        """
        async with self.database.session() as session:
            user = await UserDAO.get_by_email(session, email)

        if not user or not verify_password(password, user.password_hash):
            return ApiResponse(
                success=False,
                message="Invalid email or password",
                error={"code": "INVALID_CREDENTIALS", "message": "Invalid email or password"}
            )

        token = create_access_token(
            data={"sub": user.id, "username": user.username, "role": user.role}
        )

        return ApiResponse(
            success=True,
            message="Login successful",
            data={
                "token": token,
                "user": UserModel.model_validate(user).model_dump(mode="json"),
            }
        )

    async def get_user(self, user_id: str) -> Optional[UserModel]:
        async with self.database.session() as session:
            user = await UserDAO.get_by_id(session, user_id)
        return UserModel.model_validate(user) if user else None

    async def get_all_users(self) -> List[UserModel]:
        """Every user, newest first"""
        async with self.database.session() as session:
            users = await UserDAO.get_all(session)
        return [UserModel.model_validate(user) for user in users]

    async def update_profile(
        self,
        user_id: str,
        username: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        avatar_url: Optional[str] = None
    ) -> ApiResponse:
        """
        Update profile fields

        Missing fields keep their value. A username or email held by another
        user is rejected with the same codes as registration.

        Returns:
            API response with the updated UserModel
        """
        async with self.database.session() as session:
            if email:
                owner = await UserDAO.get_by_email(session, email)
                if owner and owner.id != user_id:
                    return ApiResponse(
                        success=False,
                        message="Email already registered",
                        error={"code": "EMAIL_EXISTS", "message": "This email is already registered"}
                    )

            if username:
                owner = await UserDAO.get_by_username(session, username)
                if owner and owner.id != user_id:
                    return ApiResponse(
                        success=False,
                        message="Username already taken",
                        error={"code": "USERNAME_EXISTS", "message": "This username is already taken"}
                    )

            found = await UserDAO.update_profile(
                session, user_id,
                username=username, email=email, phone=phone, avatar_url=avatar_url
            )
            if not found:
                return ApiResponse(
                    success=False,
                    message="User not found",
                    error={"code": "USER_NOT_FOUND", "message": "User not found"}
                )
            user = await UserDAO.get_by_id(session, user_id)
            await session.refresh(user)

        return ApiResponse(message="Profile updated", data=UserModel.model_validate(user))

    async def update_user_role(self, user_id: str, role: UserRole) -> Optional[UserModel]:
        """Promote or demote a user"""
        async with self.database.session() as session:
            if not await UserDAO.update_role(session, user_id, role.value):
                return None
            user = await UserDAO.get_by_id(session, user_id)
            await session.refresh(user)

        logger.info(f"🔑 Role of {user_id} set to {role.value}")
        return UserModel.model_validate(user)
