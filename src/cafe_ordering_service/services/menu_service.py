"""Menu service for catalog management.

Enforces the catalog invariants: category, item and customisation names are
unique, every item references an existing category, and a category cannot be
deleted while items still reference it. Pre-checks give fast, friendly errors;
the repositories' conditional writes remain the real guarantee under
concurrency. When a write condition fails the service re-reads to report the
specific cause.
"""

import logging
from decimal import Decimal
from typing import Any

from cafe_ordering_service.exceptions import (
    CategoryInUseError,
    CategoryNotFoundError,
    CustomisationNotFoundError,
    DuplicateNameError,
    EmptyCategoryError,
    ItemNotFoundError,
)
from cafe_ordering_service.models.menu_models import (
    Category,
    Customisation,
    CustomisationCategoryEnum,
    MenuItem,
)
from cafe_ordering_service.observability.decorators import traced
from cafe_ordering_service.repositories.menu_repositories import (
    CategoryRepository,
    CustomisationRepository,
    ItemRepository,
)

logger = logging.getLogger(__name__)

UPDATABLE_ITEM_FIELDS = ("name", "price", "quantity", "description", "image")


class MenuService:
    """Service for reading and changing the menu catalog."""

    def __init__(
        self,
        category_repository: CategoryRepository,
        item_repository: ItemRepository,
        customisation_repository: CustomisationRepository,
    ) -> None:
        """Initialize the MenuService.

        Args:
            category_repository: Repository for categories
            item_repository: Repository for menu items
            customisation_repository: Repository for drink customisations
        """
        self.category_repository = category_repository
        self.item_repository = item_repository
        self.customisation_repository = customisation_repository

    async def list_items(self) -> list[MenuItem]:
        return self.item_repository.list_items()

    async def list_categories(self) -> list[Category]:
        return self.category_repository.list_categories()

    async def get_item(self, item_id: str) -> MenuItem:
        """Get a menu item by id.

        Raises:
            ItemNotFoundError: If no item has this id
        """
        item = self.item_repository.get_item(item_id)
        if item is None:
            raise ItemNotFoundError()
        return item

    async def list_items_by_category(self, category_id: str) -> list[MenuItem]:
        """List the items in a category.

        An unknown category id and a category without items both raise
        EmptyCategoryError.

        Raises:
            EmptyCategoryError: If the lookup yields no items
        """
        items = self.item_repository.list_items_by_category(category_id)
        if not items:
            raise EmptyCategoryError()
        return items

    @traced("create_category", service_name="cafe-svc")
    async def create_category(self, name: str) -> Category:
        """Create a category with a unique name.

        Args:
            name: Category name

        Returns:
            The saved category

        Raises:
            DuplicateNameError: If a category with this name exists
        """
        if self.category_repository.find_by_name(name) is not None:
            raise DuplicateNameError("category")

        category = Category(name=name)
        if not self.category_repository.create_category(category):
            raise DuplicateNameError("category")

        logger.info(f"Created category {category.id} ({category.name})")
        return category

    @traced("create_item", service_name="cafe-svc")
    async def create_item(
        self,
        name: str,
        category_name: str,
        price: Decimal,
        quantity: int = 0,
        description: str | None = None,
        image: str | None = None,
    ) -> MenuItem:
        """Create a menu item in an existing category.

        Args:
            name: Unique item name
            category_name: Name of the category the item belongs to
            price: Item price
            quantity: Units available
            description: Optional description
            image: Optional image reference

        Returns:
            The saved item

        Raises:
            CategoryNotFoundError: If no category has this name
            DuplicateNameError: If an item with this name exists
        """
        category = self.category_repository.find_by_name(category_name)
        if category is None:
            raise CategoryNotFoundError()

        if self.item_repository.find_by_name(name) is not None:
            raise DuplicateNameError("item")

        item = MenuItem(
            name=name,
            category_id=category.id,
            price=price,
            quantity=quantity,
            description=description,
            image=image,
        )
        if not self.item_repository.create_item(item):
            if self.category_repository.get_category(category.id) is None:
                raise CategoryNotFoundError()
            raise DuplicateNameError("item")

        logger.info(f"Created item {item.id} ({item.name}) in category {category.id}")
        return item

    @traced("update_item", service_name="cafe-svc")
    async def update_item(self, item_id: str, changes: dict[str, Any]) -> MenuItem:
        """Apply a partial update to a menu item.

        Args:
            item_id: Item to update
            changes: Fields to change. ``category`` is a category name and is
                resolved to its id; None values are ignored.

        Returns:
            The updated item

        Raises:
            ItemNotFoundError: If no item has this id
            CategoryNotFoundError: If ``category`` names no existing category
            DuplicateNameError: If the new name belongs to another item
        """
        item = self.item_repository.get_item(item_id)
        if item is None:
            raise ItemNotFoundError()

        updates = {
            field: changes[field]
            for field in UPDATABLE_ITEM_FIELDS
            if changes.get(field) is not None
        }

        if changes.get("category") is not None:
            category = self.category_repository.find_by_name(changes["category"])
            if category is None:
                raise CategoryNotFoundError()
            updates["category_id"] = category.id

        if "name" in updates and updates["name"] != item.name:
            existing = self.item_repository.find_by_name(updates["name"])
            if existing is not None and existing.id != item.id:
                raise DuplicateNameError("item")

        updated = MenuItem(**{**item.model_dump(), **updates})
        if not self.item_repository.update_item(updated, previous=item):
            if self.item_repository.get_item(item.id) is None:
                raise ItemNotFoundError()
            if self.category_repository.get_category(updated.category_id) is None:
                raise CategoryNotFoundError()
            raise DuplicateNameError("item")

        logger.info(f"Updated item {item.id}: {', '.join(sorted(updates)) or 'no changes'}")
        return updated

    @traced("delete_item", service_name="cafe-svc")
    async def delete_item(self, item_id: str) -> MenuItem:
        """Delete a menu item.

        Returns:
            The deleted item

        Raises:
            ItemNotFoundError: If no item has this id
        """
        item = self.item_repository.get_item(item_id)
        if item is None:
            raise ItemNotFoundError()

        if not self.item_repository.delete_item(item):
            raise ItemNotFoundError()

        logger.info(f"Deleted item {item.id} ({item.name})")
        return item

    @traced("delete_category", service_name="cafe-svc")
    async def delete_category(self, category_id: str) -> Category:
        """Delete a category that no item references.

        The stored ``item_count`` decides, and the delete itself is
        conditioned on it being zero.

        Returns:
            The deleted category

        Raises:
            CategoryNotFoundError: If no category has this id
            CategoryInUseError: If any item still references the category
        """
        category = self.category_repository.get_category(category_id)
        if category is None:
            raise CategoryNotFoundError()

        if category.item_count > 0:
            raise CategoryInUseError()

        if not self.category_repository.delete_category(category):
            if self.category_repository.get_category(category.id) is None:
                raise CategoryNotFoundError()
            raise CategoryInUseError()

        logger.info(f"Deleted category {category.id} ({category.name})")
        return category

    async def list_customisations(self) -> list[Customisation]:
        return self.customisation_repository.list_customisations()

    @traced("create_customisation", service_name="cafe-svc")
    async def create_customisation(
        self,
        category: CustomisationCategoryEnum,
        name: str,
        quantity: int = 0,
        price: Decimal = Decimal("0"),
    ) -> Customisation:
        """Create a customisation with a unique name.

        Raises:
            DuplicateNameError: If a customisation with this name exists
        """
        if self.customisation_repository.find_by_name(name) is not None:
            raise DuplicateNameError("customisation")

        customisation = Customisation(category=category, name=name, quantity=quantity, price=price)
        if not self.customisation_repository.create_customisation(customisation):
            raise DuplicateNameError("customisation")

        logger.info(f"Created customisation {customisation.id} ({customisation.name})")
        return customisation

    @traced("delete_customisation", service_name="cafe-svc")
    async def delete_customisation(self, customisation_id: str) -> Customisation:
        customisation = self.customisation_repository.get_customisation(customisation_id)
        if customisation is None:
            raise CustomisationNotFoundError()

        self.customisation_repository.delete_customisation(customisation)
        logger.info(f"Deleted customisation {customisation.id} ({customisation.name})")
        return customisation
