"""User service for signup, login and self-service profile management."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from cafe_ordering_service.auth.password_hasher import PasswordHasher
from cafe_ordering_service.auth.token_service import TokenService
from cafe_ordering_service.exceptions import (
    DuplicateEmailError,
    EmailInUseError,
    EmailNotFoundError,
    UserNotFoundError,
    WrongPasswordError,
)
from cafe_ordering_service.models.user_models import User, normalize_email
from cafe_ordering_service.observability.decorators import traced
from cafe_ordering_service.observability.metrics import record_login, record_signup
from cafe_ordering_service.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Result of an operation that hands the caller a fresh token.

    Attributes:
        user: The user the token identifies
        token: Signed JWT
        claims: Verified claims of the token
    """

    user: User
    token: str
    claims: dict[str, Any]


class UserService:
    """Service for user accounts.

    Emails are compared in normalized (lower-cased) form. Passwords are only
    ever stored as bcrypt hashes.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        token_service: TokenService,
        password_hasher: PasswordHasher,
    ) -> None:
        """Initialize the UserService.

        Args:
            user_repository: Repository for users
            token_service: Service for issuing tokens
            password_hasher: Hasher for passwords
        """
        self.user_repository = user_repository
        self.token_service = token_service
        self.password_hasher = password_hasher

    def _issue(self, user: User) -> AuthResult:
        token = self.token_service.issue(user)
        return AuthResult(user=user, token=token, claims=self.token_service.decode(token))

    async def list_users(self) -> list[User]:
        return self.user_repository.list_users()

    async def find_user(self, user_id: str) -> User | None:
        return self.user_repository.get_user(user_id)

    @traced("signup", service_name="cafe-svc")
    async def signup(
        self, email: str, password: str, name: str, birthday: date | None = None
    ) -> AuthResult:
        """Register a new user and sign them in.

        Args:
            email: Email address, unique across users
            password: Plain-text password
            name: Display name
            birthday: Optional birthday

        Returns:
            AuthResult for the new user

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        email = normalize_email(email)
        if self.user_repository.find_by_email(email) is not None:
            raise DuplicateEmailError()

        user = User(
            email=email,
            password=self.password_hasher.hash(password),
            name=name,
            birthday=birthday,
        )
        if not self.user_repository.create_user(user):
            raise DuplicateEmailError()

        record_signup()
        logger.info(f"User {user.id} signed up")
        return self._issue(user)

    @traced("login", service_name="cafe-svc")
    async def login(self, email: str, password: str) -> AuthResult:
        """Authenticate with email and password.

        Raises:
            EmailNotFoundError: If no user has this email
            WrongPasswordError: If the password does not match
        """
        user = self.user_repository.find_by_email(normalize_email(email))
        if user is None:
            record_login("unknown_email")
            raise EmailNotFoundError()

        if not self.password_hasher.verify(password, user.password):
            record_login("wrong_password")
            raise WrongPasswordError()

        record_login("success")
        logger.info(f"User {user.id} logged in")
        return self._issue(user)

    @traced("update_profile", service_name="cafe-svc")
    async def update_profile(
        self,
        user_id: str,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
        birthday: date | None = None,
    ) -> AuthResult:
        """Update the caller's own profile.

        Only the fields that are given change. A new password is re-hashed.

        Args:
            user_id: Authenticated user id
            name: New display name
            email: New email address
            password: New plain-text password
            birthday: New birthday

        Returns:
            AuthResult with a token reflecting the updated record

        Raises:
            UserNotFoundError: If the user no longer exists
            EmailInUseError: If another user holds the new email
        """
        user = self.user_repository.get_user(user_id)
        if user is None:
            raise UserNotFoundError()

        updates: dict[str, Any] = {}
        if name:
            updates["name"] = name
        if email:
            email = normalize_email(email)
            existing = self.user_repository.find_by_email(email)
            if existing is not None and existing.id != user.id:
                raise EmailInUseError()
            updates["email"] = email
        if password:
            updates["password"] = self.password_hasher.hash(password)
        if birthday:
            updates["birthday"] = birthday

        updated = user.model_copy(update=updates)
        if not self.user_repository.update_user(updated, previous_email=user.email):
            if self.user_repository.get_user(user.id) is None:
                raise UserNotFoundError()
            raise EmailInUseError()

        logger.info(f"User {user.id} updated: {', '.join(sorted(updates)) or 'no changes'}")
        return self._issue(updated)

    @traced("delete_profile", service_name="cafe-svc")
    async def delete_profile(self, user_id: str) -> User:
        """Delete the caller's own profile.

        Returns:
            The deleted user

        Raises:
            UserNotFoundError: If the user no longer exists
        """
        user = self.user_repository.get_user(user_id)
        if user is None:
            raise UserNotFoundError()

        self.user_repository.delete_user(user)
        logger.info(f"User {user.id} deleted")
        return user
