"""
User service tests - registration, login, profiles and roles
"""

import pytest

from chilling_stories.models import UserCreate, UserRole
from chilling_stories.utils.auth import decode_access_token


def registration(username="mara", email="mara@example.com", password="s3cret!", role=UserRole.VIEWER):
    return UserCreate(username=username, email=email, password=password, role=role)


class TestRegister:

    async def test_register_viewer_by_default(self, user_service):
        result = await user_service.register(UserCreate(username="mara", email="mara@example.com", password="s3cret!"))

        assert result.success is True
        user = await user_service.get_user(result.data["user_id"])
        assert user.id.startswith("user_")
        assert user.role == UserRole.VIEWER

    async def test_register_author(self, user_service):
        result = await user_service.register(registration(role=UserRole.AUTHOR))

        user = await user_service.get_user(result.data["user_id"])
        assert user.role == UserRole.AUTHOR

    async def test_duplicate_email(self, user_service):
        await user_service.register(registration())

        result = await user_service.register(registration(username="other"))

        assert result.success is False
        assert result.error["code"] == "EMAIL_EXISTS"

    async def test_duplicate_username(self, user_service):
        await user_service.register(registration())

        result = await user_service.register(registration(email="other@example.com"))

        assert result.success is False
        assert result.error["code"] == "USERNAME_EXISTS"

    async def test_admin_cannot_self_register(self, user_service):
        result = await user_service.register(registration(role=UserRole.ADMIN))

        assert result.success is False
        assert result.error["code"] == "ROLE_NOT_ALLOWED"


class TestLogin:

    async def test_login_returns_token_and_profile(self, user_service):
        registered = await user_service.register(registration(role=UserRole.AUTHOR))

        result = await user_service.login("mara@example.com", "s3cret!")

        assert result.success is True
        claims = decode_access_token(result.data["token"])
        assert claims["sub"] == registered.data["user_id"]
        assert claims["username"] == "mara"
        assert claims["role"] == "author"
        assert result.data["user"]["email"] == "mara@example.com"
        assert "password_hash" not in result.data["user"]

    @pytest.mark.parametrize("email,password", [
        ("mara@example.com", "wrong-password"),
        ("nobody@example.com", "s3cret!"),
    ])
    async def test_invalid_credentials(self, user_service, email, password):
        await user_service.register(registration())

        result = await user_service.login(email, password)

        assert result.success is False
        assert result.error["code"] == "INVALID_CREDENTIALS"


class TestProfiles:

    async def test_partial_profile_update(self, user_service, reader_id):
        result = await user_service.update_profile(reader_id, phone="0123456789")

        assert result.success is True
        assert result.data.phone == "0123456789"
        assert result.data.username == "reader_one"
        assert result.data.email == "reader_one@example.com"

    async def test_update_missing_user(self, user_service):
        result = await user_service.update_profile("user_missing", username="ghost")

        assert result.success is False
        assert result.error["code"] == "USER_NOT_FOUND"

    @pytest.mark.parametrize("fields,code", [
        ({"email": "author_one@example.com"}, "EMAIL_EXISTS"),
        ({"username": "author_one"}, "USERNAME_EXISTS"),
    ])
    async def test_taken_username_or_email(self, user_service, author_id, reader_id, fields, code):
        result = await user_service.update_profile(reader_id, **fields)

        assert result.success is False
        assert result.error["code"] == code
        assert (await user_service.get_user(reader_id)).username == "reader_one"

    async def test_keeping_own_username_and_email(self, user_service, reader_id):
        result = await user_service.update_profile(
            reader_id, username="reader_one", email="reader_one@example.com", phone="555"
        )

        assert result.success is True
        assert result.data.phone == "555"

    async def test_update_role(self, user_service, reader_id):
        user = await user_service.update_user_role(reader_id, UserRole.AUTHOR)

        assert user.role == UserRole.AUTHOR
        assert await user_service.update_user_role("user_missing", UserRole.ADMIN) is None

    async def test_all_users_newest_first(self, user_service, author_id, reader_id):
        users = await user_service.get_all_users()

        assert [user.id for user in users] == [reader_id, author_id]
