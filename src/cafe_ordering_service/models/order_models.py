"""Order and favourite models.

Orders snapshot the name and unit price of each item at the time they are
placed so later menu edits do not rewrite order history. Favourites are
stored with (user_id, item_id) as composite key.
"""

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator

MAX_LINE_QUANTITY = 1000


def new_order_id() -> str:
    """Generate an order identifier."""
    return f"order_{uuid.uuid4().hex}"


class OrderStatusEnum(str, Enum):
    """Enumeration of order status values."""

    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderLine(BaseModel):
    """A single menu item within an order."""

    item_id: str = Field(..., description="Ordered menu item")
    name: str = Field(..., description="Item name when the order was placed")
    unit_price: Decimal = Field(..., description="Item price when the order was placed", ge=0)
    quantity: int = Field(..., description="Number of units ordered", ge=1, le=MAX_LINE_QUANTITY)

    @field_serializer("unit_price", when_used="json")
    def serialize_unit_price(self, unit_price: Decimal) -> float:
        return float(unit_price)

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


class Order(BaseModel):
    """Customer order.

    Stored in DynamoDB keyed by ``id`` with a ``user_id-index`` GSI.
    """

    id: str = Field(default_factory=new_order_id, description="Order identifier")
    user_id: str = Field(..., description="User who placed the order")
    lines: list[OrderLine] = Field(..., description="Ordered items", min_length=1)
    status: OrderStatusEnum = Field(default=OrderStatusEnum.PENDING)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("lines")
    @classmethod
    def validate_lines(cls, v: list[OrderLine]) -> list[OrderLine]:
        """Validate that an order has at least one line."""
        if not v:
            raise ValueError("an order needs at least one item")
        return v

    @property
    def total(self) -> Decimal:
        """Order total computed from line subtotals."""
        return sum((line.subtotal for line in self.lines), Decimal("0"))

    def to_response(self) -> dict[str, Any]:
        """JSON representation including the computed total."""
        body = self.model_dump(mode="json")
        body["total"] = float(self.total)
        return body

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "lines": [
                {
                    "item_id": line.item_id,
                    "name": line.name,
                    "unit_price": line.unit_price,
                    "quantity": line.quantity,
                }
                for line in self.lines
            ],
            "total": self.total,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Order":
        """Create Order from DynamoDB item."""
        return cls(
            id=item["id"],
            user_id=item["user_id"],
            lines=[
                OrderLine(
                    item_id=line["item_id"],
                    name=line["name"],
                    unit_price=Decimal(str(line["unit_price"])),
                    quantity=int(line["quantity"]),
                )
                for line in item["lines"]
            ],
            status=OrderStatusEnum(item["status"]),
            created_at=datetime.fromisoformat(item["created_at"]),
        )


class Favourite(BaseModel):
    """A menu item a user has marked as favourite."""

    user_id: str = Field(..., description="User identifier")
    item_id: str = Field(..., description="Favourite menu item")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format."""
        return {
            "user_id": self.user_id,
            "item_id": self.item_id,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Favourite":
        """Create Favourite from DynamoDB item."""
        data: dict[str, Any] = {"user_id": item["user_id"], "item_id": item["item_id"]}

        if "created_at" in item:
            data["created_at"] = datetime.fromisoformat(item["created_at"])

        return cls(**data)
