"""Unit tests for UserService."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from cafe_ordering_service.auth.password_hasher import PasswordHasher
from cafe_ordering_service.auth.token_service import TokenService
from cafe_ordering_service.exceptions import (
    DuplicateEmailError,
    EmailInUseError,
    EmailNotFoundError,
    UserNotFoundError,
    WrongPasswordError,
)
from cafe_ordering_service.models.user_models import User
from cafe_ordering_service.repositories.user_repository import UserRepository
from cafe_ordering_service.services.user_service import UserService


@pytest.mark.unit
class TestUserService:
    """Test suite for UserService."""

    @pytest.fixture
    def user_repository(self) -> MagicMock:
        return MagicMock(spec=UserRepository)

    @pytest.fixture
    def hasher(self) -> PasswordHasher:
        return PasswordHasher(rounds=4)

    @pytest.fixture
    def service(self, user_repository: MagicMock, hasher: PasswordHasher) -> UserService:
        return UserService(
            user_repository=user_repository,
            token_service=TokenService(secret_key="user-service-test-secret-0123456789"),
            password_hasher=hasher,
        )

    @pytest.fixture
    def stored_user(self, hasher: PasswordHasher) -> User:
        return User(
            id="user_1", email="ann@example.com", password=hasher.hash("secret"), name="Ann"
        )

    @pytest.mark.asyncio
    async def test_signup(
        self, service: UserService, user_repository: MagicMock, hasher: PasswordHasher
    ) -> None:
        """Test that signup normalizes the email and stores a hash."""
        user_repository.find_by_email.return_value = None
        user_repository.create_user.return_value = True

        result = await service.signup(
            email="Ann@Example.com", password="secret", name="Ann", birthday=date(1990, 1, 2)
        )

        assert result.user.email == "ann@example.com"
        assert result.user.password != "secret"
        assert hasher.verify("secret", result.user.password)
        assert result.user.admin is False
        assert result.claims["user_id"] == result.user.id
        assert result.claims["admin"] is False
        user_repository.find_by_email.assert_called_once_with("ann@example.com")

    @pytest.mark.asyncio
    async def test_signup_duplicate_email(
        self, service: UserService, user_repository: MagicMock, stored_user: User
    ) -> None:
        """Test that a registered email cannot sign up again."""
        user_repository.find_by_email.return_value = stored_user

        with pytest.raises(DuplicateEmailError):
            await service.signup(email="ann@example.com", password="x", name="Ann")

        user_repository.create_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_signup_duplicate_email_race(
        self, service: UserService, user_repository: MagicMock
    ) -> None:
        """Test that a store-level email conflict is still a duplicate."""
        user_repository.find_by_email.return_value = None
        user_repository.create_user.return_value = False

        with pytest.raises(DuplicateEmailError):
            await service.signup(email="ann@example.com", password="x", name="Ann")

    @pytest.mark.asyncio
    async def test_login(
        self, service: UserService, user_repository: MagicMock, stored_user: User
    ) -> None:
        """Test a successful login."""
        user_repository.find_by_email.return_value = stored_user

        result = await service.login(email="ANN@example.com", password="secret")

        assert result.user == stored_user
        assert service.token_service.verify(result.token) == "user_1"
        user_repository.find_by_email.assert_called_once_with("ann@example.com")

    @pytest.mark.asyncio
    async def test_login_unknown_email(
        self, service: UserService, user_repository: MagicMock
    ) -> None:
        """Test logging in with an unregistered email."""
        user_repository.find_by_email.return_value = None

        with pytest.raises(EmailNotFoundError):
            await service.login(email="nobody@example.com", password="secret")

    @pytest.mark.asyncio
    async def test_login_wrong_password(
        self, service: UserService, user_repository: MagicMock, stored_user: User
    ) -> None:
        """Test logging in with the wrong password."""
        user_repository.find_by_email.return_value = stored_user

        with pytest.raises(WrongPasswordError):
            await service.login(email="ann@example.com", password="wrong")

    @pytest.mark.asyncio
    async def test_update_profile(
        self,
        service: UserService,
        user_repository: MagicMock,
        stored_user: User,
        hasher: PasswordHasher,
    ) -> None:
        """Test that given fields change and the password is re-hashed."""
        user_repository.get_user.return_value = stored_user
        user_repository.find_by_email.return_value = None
        user_repository.update_user.return_value = True

        result = await service.update_profile(
            user_id="user_1", name="Annie", email="Annie@Example.com", password="new-secret"
        )

        assert result.user.name == "Annie"
        assert result.user.email == "annie@example.com"
        assert hasher.verify("new-secret", result.user.password)
        user_repository.update_user.assert_called_once_with(
            result.user, previous_email="ann@example.com"
        )

    @pytest.mark.asyncio
    async def test_update_profile_email_in_use(
        self, service: UserService, user_repository: MagicMock, stored_user: User
    ) -> None:
        """Test that another user's email cannot be taken over."""
        user_repository.get_user.return_value = stored_user
        user_repository.find_by_email.return_value = stored_user.model_copy(update={"id": "user_2"})

        with pytest.raises(EmailInUseError):
            await service.update_profile(user_id="user_1", email="bob@example.com")

    @pytest.mark.asyncio
    async def test_update_profile_own_email(
        self, service: UserService, user_repository: MagicMock, stored_user: User
    ) -> None:
        """Test that re-submitting the current email is allowed."""
        user_repository.get_user.return_value = stored_user
        user_repository.find_by_email.return_value = stored_user
        user_repository.update_user.return_value = True

        result = await service.update_profile(user_id="user_1", email="ann@example.com")

        assert result.user.email == "ann@example.com"

    @pytest.mark.asyncio
    async def test_update_profile_missing_user(
        self, service: UserService, user_repository: MagicMock
    ) -> None:
        """Test updating a deleted user."""
        user_repository.get_user.return_value = None

        with pytest.raises(UserNotFoundError):
            await service.update_profile(user_id="user_1", name="Annie")

    @pytest.mark.asyncio
    async def test_update_profile_user_deleted_during_write(
        self, service: UserService, user_repository: MagicMock, stored_user: User
    ) -> None:
        """Test that a rejected write for a vanished user is reported as not found."""
        user_repository.get_user.side_effect = [stored_user, None]
        user_repository.update_user.return_value = False

        with pytest.raises(UserNotFoundError):
            await service.update_profile(user_id="user_1", name="Annie")

    @pytest.mark.asyncio
    async def test_update_profile_email_claimed_during_write(
        self, service: UserService, user_repository: MagicMock, stored_user: User
    ) -> None:
        """Test that losing the email claim to a concurrent update reports it in use."""
        user_repository.get_user.return_value = stored_user
        user_repository.find_by_email.return_value = None
        user_repository.update_user.return_value = False

        with pytest.raises(EmailInUseError):
            await service.update_profile(user_id="user_1", email="bob@example.com")

    @pytest.mark.asyncio
    async def test_delete_profile(
        self, service: UserService, user_repository: MagicMock, stored_user: User
    ) -> None:
        """Test deleting the caller's own profile."""
        user_repository.get_user.return_value = stored_user

        assert await service.delete_profile("user_1") == stored_user
        user_repository.delete_user.assert_called_once_with(stored_user)

    @pytest.mark.asyncio
    async def test_delete_profile_missing_user(
        self, service: UserService, user_repository: MagicMock
    ) -> None:
        """Test deleting a profile that no longer exists."""
        user_repository.get_user.return_value = None

        with pytest.raises(UserNotFoundError):
            await service.delete_profile("user_1")
