"""Domain exceptions for the cafe ordering service.

Every expected failure carries the HTTP status and the user-facing message it
should be rendered with. The API layer registers a single exception handler
for ``CafeServiceError`` so services can raise without knowing about HTTP.
Anything else, ``StoreError`` included, is rendered by the generic 500
responder.
"""

from typing import Any


class CafeServiceError(Exception):
    """Base exception for expected service failures."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra or {}
        super().__init__(message)

    def to_response_body(self) -> dict[str, Any]:
        """Build the JSON body for this error."""
        return {**self.extra, "message": self.message}


class ValidationError(CafeServiceError):
    """Request conflicts with existing data (duplicate name or email)."""

    status_code = 400


class NotFoundError(CafeServiceError):
    """A referenced record does not exist."""

    status_code = 404


class AuthenticationError(CafeServiceError):
    """Caller could not be authenticated."""

    status_code = 401


class AuthorizationError(CafeServiceError):
    """Caller is authenticated but not allowed to perform the action."""

    status_code = 403


class ConflictError(CafeServiceError):
    """Action would break referential integrity."""

    status_code = 400


class DuplicateNameError(ValidationError):
    """A category or item with the same name already exists."""

    def __init__(self, entity: str) -> None:
        article = "An" if entity[0].lower() in "aeiou" else "A"
        super().__init__(f"{article} {entity} with this name already exists.")
        self.entity = entity


class DuplicateEmailError(ValidationError):
    def __init__(self) -> None:
        super().__init__("A profile with this email already exists.")


class EmailInUseError(ValidationError):
    def __init__(self) -> None:
        super().__init__("This email is already in use.")


class AlreadyFavouritedError(ValidationError):
    def __init__(self) -> None:
        super().__init__("This item is already in your favourites.")


class ItemNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Item not found.")


class CategoryNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Category not found.")


class CustomisationNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Customisation not found.")


class EmptyCategoryError(NotFoundError):
    """Raised for a category lookup that yields no items.

    A category id that does not exist produces the same error as an existing
    category with no items.
    """

    def __init__(self) -> None:
        super().__init__("There are currently no items in this category.")


class UserNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("User not found.")


class EmailNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Email not found.", extra={"status": "failed", "data": []})


class OrderNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Order not found.")


class FavouriteNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("This item is not in your favourites.")


class AuthenticationRequiredError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__("Authentication token is required")


class InvalidTokenError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__("Invalid token")


class WrongPasswordError(AuthenticationError):
    def __init__(self) -> None:
        super().__init__(
            "Your password is incorrect, please double check and try again.",
            extra={"status": "failed", "data": []},
        )


class AccessDeniedError(AuthorizationError):
    def __init__(self) -> None:
        super().__init__("Access denied! must be an admin.")


class CategoryInUseError(ConflictError):
    def __init__(self) -> None:
        super().__init__(
            "Cannot delete this category as there are still items associated with it."
        )


class StoreError(Exception):
    """The document store failed to complete a request.

    Not a ``CafeServiceError``: store failures are unexpected and go through
    the generic error responder.
    """

    status_code = 500

    def __init__(self, message: str, operation: str | None = None) -> None:
        self.message = message
        self.operation = operation
        super().__init__(message)
