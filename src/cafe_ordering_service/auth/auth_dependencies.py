"""FastAPI dependencies for bearer-token authentication.

Provides dependency functions for endpoints that require a signed-in user or
an admin. Missing and invalid tokens are rejected with 401, non-admin users
on admin routes with 403.
"""

import logging
from typing import Annotated

from fastapi import Header

from cafe_ordering_service.auth.token_service import TokenService
from cafe_ordering_service.exceptions import (
    AccessDeniedError,
    AuthenticationRequiredError,
    InvalidTokenError,
)
from cafe_ordering_service.models.user_models import User
from cafe_ordering_service.observability.metrics import record_auth_failure
from cafe_ordering_service.services.user_service import UserService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def extract_bearer_token(authorization: str | None) -> str | None:
    """Pull the token out of an ``Authorization: Bearer <token>`` header.

    Args:
        authorization: Raw header value

    Returns:
        The token, or None when the header is missing or not a bearer header
    """
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None

    token = authorization[len(BEARER_PREFIX) :].strip()
    return token or None


def get_user_id_from_header(
    authorization: Annotated[str | None, Header()] = None,
    token_service: TokenService | None = None,
) -> str:
    """FastAPI dependency to authenticate the caller from the Authorization header.

    Args:
        authorization: Authorization header (injected by FastAPI)
        token_service: TokenService used to verify the token

    Returns:
        str: The authenticated user id

    Raises:
        AuthenticationRequiredError: 401 if no bearer token is supplied
        InvalidTokenError: 401 if the token fails verification
    """
    token = extract_bearer_token(authorization)
    if token is None:
        record_auth_failure("missing_token")
        raise AuthenticationRequiredError()

    if token_service is None:
        raise InvalidTokenError()

    try:
        return token_service.verify(token)
    except InvalidTokenError:
        record_auth_failure("invalid_token")
        logger.info("Rejected request with invalid token")
        raise


async def ensure_admin(user_id: str, user_service: UserService) -> User:
    """Check the current admin flag of an authenticated user.

    The user is re-read from the store so revoked admin rights take effect
    immediately, regardless of the claims in the token.

    Args:
        user_id: Authenticated user id
        user_service: Service used to load the user

    Returns:
        User: The admin user

    Raises:
        AccessDeniedError: 403 if the user no longer exists or is not an admin
    """
    user = await user_service.find_user(user_id)
    if user is None or not user.admin:
        record_auth_failure("not_admin")
        logger.info(f"Admin access denied for user {user_id}")
        raise AccessDeniedError()

    return user
