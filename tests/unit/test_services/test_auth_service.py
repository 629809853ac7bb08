"""Unit tests for AuthService with a mocked repository."""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from finance_tracker.core.exceptions import ConflictError, UnauthenticatedError
from finance_tracker.core.security import TokenService, hash_password
from finance_tracker.models.user import User
from finance_tracker.services.auth import AuthService


@pytest.fixture
def token_service():
    return TokenService(secret="auth-service-secret")


@pytest.fixture
def user_repo():
    repo = AsyncMock()
    repo.email_exists.return_value = False

    async def create(user):
        user.id = uuid4()
        return user

    repo.create.side_effect = create
    repo.save.side_effect = lambda user: user
    return repo


@pytest.fixture
def service(user_repo, token_service):
    return AuthService(user_repo, token_service)


def stored_user(email="jane@example.com", password="password123"):
    return User(id=uuid4(), email=email, name="Jane", password_hash=hash_password(password))


class TestSignup:
    @pytest.mark.asyncio
    async def test_creates_user_and_issues_token(self, service, user_repo, token_service):
        token, user = await service.signup("  Jane  ", "  Jane@Example.COM ", "secret1")

        assert user.email == "jane@example.com"
        assert user.name == "Jane"
        assert user.password_hash != "secret1"
        assert token_service.verify(token) == user.id
        user_repo.email_exists.assert_awaited_once_with("jane@example.com")

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, service, user_repo):
        user_repo.email_exists.return_value = True

        with pytest.raises(ConflictError):
            await service.signup("Jane", "jane@example.com", "secret1")

        user_repo.create.assert_not_awaited()


class TestLogin:
    @pytest.mark.asyncio
    async def test_valid_credentials(self, service, user_repo, token_service):
        user = stored_user()
        user_repo.get_by_email.return_value = user

        token, logged_in = await service.login("jane@example.com", "password123")

        assert logged_in is user
        assert token_service.verify(token) == user.id

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, service, user_repo):
        user_repo.get_by_email.return_value = stored_user()
        with pytest.raises(UnauthenticatedError) as wrong_password:
            await service.login("jane@example.com", "nope")

        user_repo.get_by_email.return_value = None
        with pytest.raises(UnauthenticatedError) as unknown_email:
            await service.login("ghost@example.com", "password123")

        assert wrong_password.value.error_code == unknown_email.value.error_code == "AUTH_002"

    @pytest.mark.asyncio
    async def test_unknown_email_still_runs_a_hash_check(self, service, user_repo):
        user_repo.get_by_email.return_value = None

        with patch(
            "finance_tracker.services.auth.verify_password", return_value=True
        ) as verify:
            with pytest.raises(UnauthenticatedError):
                await service.login("ghost@example.com", "password123")

        verify.assert_called_once()
        assert verify.call_args.args[1].startswith("$argon2")


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_changes_name_and_email(self, service, user_repo):
        user = stored_user()

        updated = await service.update_profile(user, name="Janet", email="Janet@Example.com")

        assert updated.name == "Janet"
        assert updated.email == "janet@example.com"
        user_repo.email_exists.assert_awaited_once_with(
            "janet@example.com", exclude_user_id=user.id
        )

    @pytest.mark.asyncio
    async def test_same_email_is_not_a_conflict(self, service, user_repo):
        user = stored_user()

        await service.update_profile(user, email="JANE@example.com")

        user_repo.email_exists.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_email_taken_by_other_user(self, service, user_repo):
        user_repo.email_exists.return_value = True
        user = stored_user()

        with pytest.raises(ConflictError):
            await service.update_profile(user, email="taken@example.com")

        assert user.email == "jane@example.com"
        user_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_values_leave_profile_unchanged(self, service):
        user = stored_user()

        updated = await service.update_profile(user, name="  ", email=None)

        assert updated.name == "Jane"
