"""Menu data models.

Categories group menu items. Each item references exactly one category by id.
Both are stored in DynamoDB keyed by ``id``; items carry a ``category_id``
attribute indexed by the ``category_id-index`` GSI, and each category keeps
an ``item_count`` that item writes move in the same transaction.

Customisations (milk, sugar, size and extras) are a separate catalog of
add-ons with their own unique names.
"""

import uuid
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_serializer

# DynamoDB numbers hold 38 significant digits; keep catalog values well inside
PRICE_MAX_DIGITS = 10
PRICE_DECIMAL_PLACES = 2
MAX_STOCK_QUANTITY = 1_000_000


def new_category_id() -> str:
    """Generate a category identifier."""
    return f"cat_{uuid.uuid4().hex}"


def new_item_id() -> str:
    """Generate a menu item identifier."""
    return f"item_{uuid.uuid4().hex}"


def new_customisation_id() -> str:
    """Generate a customisation identifier."""
    return f"cust_{uuid.uuid4().hex}"


class Category(BaseModel):
    """Menu category model."""

    id: str = Field(default_factory=new_category_id, description="Category identifier")
    name: str = Field(..., description="Unique category name", min_length=1)
    item_count: int = Field(default=0, description="Items referencing this category", ge=0)

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format."""
        return {"id": self.id, "name": self.name, "item_count": self.item_count}

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Category":
        """Create Category from DynamoDB item."""
        return cls(id=item["id"], name=item["name"], item_count=int(item.get("item_count", 0)))


class MenuItem(BaseModel):
    """Menu item model."""

    id: str = Field(default_factory=new_item_id, description="Item identifier")
    name: str = Field(..., description="Unique item name", min_length=1)
    category_id: str = Field(..., description="Category this item belongs to")
    price: Decimal = Field(
        ...,
        description="Item price",
        ge=0,
        max_digits=PRICE_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
    )
    quantity: int = Field(default=0, description="Units available", ge=0, le=MAX_STOCK_QUANTITY)
    description: str | None = Field(None, description="Item description")
    image: str | None = Field(None, description="Reference to item image")

    @field_serializer("price", when_used="json")
    def serialize_price(self, price: Decimal) -> float:
        """Render price as a JSON number."""
        return float(price)

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation (numbers as Decimal)
        """
        item: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "category_id": self.category_id,
            "price": self.price,
            "quantity": self.quantity,
        }

        if self.description is not None:
            item["description"] = self.description

        if self.image is not None:
            item["image"] = self.image

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "MenuItem":
        """Create MenuItem from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            MenuItem: Parsed model instance
        """
        return cls(
            id=item["id"],
            name=item["name"],
            category_id=item["category_id"],
            price=Decimal(str(item["price"])),
            quantity=int(item.get("quantity", 0)),
            description=item.get("description"),
            image=item.get("image"),
        )


class CustomisationCategoryEnum(str, Enum):
    """Kinds of drink customisation."""

    MILK = "milk"
    SUGAR = "sugar"
    SIZE = "size"
    EXTRA = "extra"


class Customisation(BaseModel):
    """An add-on such as oat milk or an extra shot."""

    id: str = Field(default_factory=new_customisation_id, description="Customisation identifier")
    category: CustomisationCategoryEnum = Field(..., description="Kind of customisation")
    name: str = Field(..., description="Unique customisation name", min_length=1)
    quantity: int = Field(default=0, description="Units available", ge=0, le=MAX_STOCK_QUANTITY)
    price: Decimal = Field(
        default=Decimal("0"),
        description="Surcharge",
        ge=0,
        max_digits=PRICE_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
    )

    @field_serializer("price", when_used="json")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format."""
        return {
            "id": self.id,
            "category": self.category.value,
            "name": self.name,
            "quantity": self.quantity,
            "price": self.price,
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Customisation":
        """Create Customisation from DynamoDB item."""
        return cls(
            id=item["id"],
            category=CustomisationCategoryEnum(item["category"]),
            name=item["name"],
            quantity=int(item.get("quantity", 0)),
            price=Decimal(str(item.get("price", 0))),
        )
