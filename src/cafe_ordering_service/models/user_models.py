"""User account model."""

import uuid
from datetime import UTC, date, datetime
from typing import Any

from pydantic import BaseModel, Field


def new_user_id() -> str:
    """Generate a user identifier."""
    return f"user_{uuid.uuid4().hex}"


def normalize_email(email: str) -> str:
    """Canonical form used for storage and uniqueness checks."""
    return email.strip().lower()


class User(BaseModel):
    """Cafe customer or staff account.

    The password attribute holds a bcrypt hash and is excluded from every
    serialized representation except the DynamoDB item.
    """

    id: str = Field(default_factory=new_user_id, description="User identifier")
    email: str = Field(..., description="Unique, lower-cased email address")
    password: str = Field(..., description="bcrypt password hash", exclude=True)
    name: str = Field(..., description="Display name")
    birthday: date | None = Field(None, description="Optional birthday")
    admin: bool = Field(default=False, description="Whether the user may manage the menu")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format."""
        item: dict[str, Any] = {
            "id": self.id,
            "email": self.email,
            "password": self.password,
            "name": self.name,
            "admin": self.admin,
            "created_at": self.created_at.isoformat(),
        }

        if self.birthday is not None:
            item["birthday"] = self.birthday.isoformat()

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "User":
        """Create User from DynamoDB item."""
        data: dict[str, Any] = {
            "id": item["id"],
            "email": item["email"],
            "password": item["password"],
            "name": item["name"],
            "admin": bool(item.get("admin", False)),
        }

        if "birthday" in item:
            data["birthday"] = date.fromisoformat(item["birthday"])

        if "created_at" in item:
            data["created_at"] = datetime.fromisoformat(item["created_at"])

        return cls(**data)
