"""JSON Web Token issuance and verification.

Tokens are HS256-signed and carry the user id plus the admin flag the user
had when the token was issued. The admin claim is informational: admin-only
routes re-read the user record before granting access.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from cafe_ordering_service.exceptions import InvalidTokenError
from cafe_ordering_service.models.user_models import User

ALGORITHM = "HS256"


class TokenService:
    """Issues and verifies signed identity tokens."""

    def __init__(self, secret_key: str, expires_in: timedelta = timedelta(days=7)) -> None:
        """Initialize the token service.

        Args:
            secret_key: Secret used to sign tokens
            expires_in: Token lifetime

        Raises:
            ValueError: If secret_key is empty
        """
        if not secret_key:
            raise ValueError("A token signing secret must be provided")

        self.secret_key = secret_key
        self.expires_in = expires_in

    def issue(self, user: User) -> str:
        """Create a signed token for a user.

        Args:
            user: The user the token identifies

        Returns:
            str: Encoded JWT
        """
        now = datetime.now(UTC)
        claims = {
            "user_id": user.id,
            "admin": user.admin,
            "iat": now,
            "exp": now + self.expires_in,
        }
        return jwt.encode(claims, self.secret_key, algorithm=ALGORITHM)

    def decode(self, token: str) -> dict[str, Any]:
        """Verify a token and return its claims.

        Args:
            token: Encoded JWT

        Returns:
            dict: Verified claims

        Raises:
            InvalidTokenError: If the token is malformed, tampered with, expired
                or has no user id
        """
        try:
            claims: dict[str, Any] = jwt.decode(
                token,
                self.secret_key,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError() from e

        if not isinstance(claims.get("user_id"), str):
            raise InvalidTokenError()

        return claims

    def verify(self, token: str) -> str:
        """Verify a token and return the user id it identifies."""
        user_id: str = self.decode(token)["user_id"]
        return user_id
