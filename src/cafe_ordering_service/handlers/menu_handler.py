"""Menu routes: catalog reads for everyone, catalog changes for admins."""

import logging
from decimal import Decimal
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from cafe_ordering_service.handlers.dependencies import AdminUser, get_menu_service
from cafe_ordering_service.models.menu_models import (
    MAX_STOCK_QUANTITY,
    PRICE_DECIMAL_PLACES,
    PRICE_MAX_DIGITS,
    CustomisationCategoryEnum,
)
from cafe_ordering_service.services.menu_service import MenuService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/menu", tags=["Menu"])

Menu = Annotated[MenuService, Depends(get_menu_service)]


class CategoryCreateRequest(BaseModel):
    """Request body for creating a category."""

    name: str = Field(..., min_length=1)


class ItemCreateRequest(BaseModel):
    """Request body for creating a menu item.

    ``category`` is the name of an existing category.
    """

    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    price: Decimal = Field(
        ..., ge=0, max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES
    )
    quantity: int = Field(default=0, ge=0, le=MAX_STOCK_QUANTITY)
    description: str | None = None
    image: str | None = None


class ItemUpdateRequest(BaseModel):
    """Request body for a partial item update."""

    name: str | None = Field(None, min_length=1)
    category: str | None = None
    price: Decimal | None = Field(
        None, ge=0, max_digits=PRICE_MAX_DIGITS, decimal_places=PRICE_DECIMAL_PLACES
    )
    quantity: int | None = Field(None, ge=0, le=MAX_STOCK_QUANTITY)
    description: str | None = None
    image: str | None = None


class CustomisationCreateRequest(BaseModel):
    """Request body for creating a customisation."""

    category: CustomisationCategoryEnum
    name: str = Field(..., min_length=1)
    quantity: int = Field(default=0, ge=0, le=MAX_STOCK_QUANTITY)
    price: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        max_digits=PRICE_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
    )


@router.get("")
@router.get("/items", include_in_schema=False)
async def list_items(menu_service: Menu) -> dict[str, Any]:
    """List every menu item."""
    items = await menu_service.list_items()
    return {"result": [item.model_dump(mode="json") for item in items]}


@router.get("/categories")
async def list_categories(menu_service: Menu) -> dict[str, Any]:
    """List every category."""
    categories = await menu_service.list_categories()
    return {"result": [category.model_dump(mode="json") for category in categories]}


@router.get("/categories/{category_id}")
@router.get("/category/{category_id}", include_in_schema=False)
async def list_items_by_category(category_id: str, menu_service: Menu) -> dict[str, Any]:
    """List the items of one category (404 when there are none)."""
    items = await menu_service.list_items_by_category(category_id)
    return {"result": [item.model_dump(mode="json") for item in items]}


@router.post("/create/category", status_code=201)
async def create_category(
    body: CategoryCreateRequest, menu_service: Menu, admin: AdminUser
) -> dict[str, Any]:
    """Create a category."""
    category = await menu_service.create_category(body.name)
    logger.info(f"Admin {admin.id} created category {category.id}")
    return {"message": "Category added successfully"}


@router.post("/create/item", status_code=201)
async def create_item(body: ItemCreateRequest, menu_service: Menu, admin: AdminUser) -> dict[str, Any]:
    """Create a menu item in an existing category."""
    item = await menu_service.create_item(
        name=body.name,
        category_name=body.category,
        price=body.price,
        quantity=body.quantity,
        description=body.description,
        image=body.image,
    )
    logger.info(f"Admin {admin.id} created item {item.id}")
    return {"message": "Item added successfully."}


@router.patch("/update/item/{item_id}")
async def update_item(
    item_id: str, body: ItemUpdateRequest, menu_service: Menu, admin: AdminUser
) -> dict[str, Any]:
    """Partially update a menu item."""
    item = await menu_service.update_item(item_id, body.model_dump(exclude_unset=True))
    logger.info(f"Admin {admin.id} updated item {item.id}")
    return {"message": "Item updated successfully", "item": item.model_dump(mode="json")}


@router.delete("/delete/item/{item_id}")
async def delete_item(item_id: str, menu_service: Menu, admin: AdminUser) -> dict[str, Any]:
    """Delete a menu item."""
    item = await menu_service.delete_item(item_id)
    logger.info(f"Admin {admin.id} deleted item {item.id}")
    return {"message": f"Item {item.name} deleted successfully."}


@router.delete("/delete/category/{category_id}")
async def delete_category(category_id: str, menu_service: Menu, admin: AdminUser) -> dict[str, Any]:
    """Delete a category that has no items."""
    category = await menu_service.delete_category(category_id)
    logger.info(f"Admin {admin.id} deleted category {category.id}")
    return {"message": f"Category {category.name} deleted successfully."}


@router.get("/customisations")
async def list_customisations(menu_service: Menu) -> dict[str, Any]:
    """List every customisation."""
    customisations = await menu_service.list_customisations()
    return {"result": [c.model_dump(mode="json") for c in customisations]}


@router.post("/create/customisation", status_code=201)
async def create_customisation(
    body: CustomisationCreateRequest, menu_service: Menu, admin: AdminUser
) -> dict[str, Any]:
    """Create a customisation."""
    customisation = await menu_service.create_customisation(
        category=body.category, name=body.name, quantity=body.quantity, price=body.price
    )
    logger.info(f"Admin {admin.id} created customisation {customisation.id}")
    return {"message": "Customisation added successfully."}


@router.delete("/delete/customisation/{customisation_id}")
async def delete_customisation(
    customisation_id: str, menu_service: Menu, admin: AdminUser
) -> dict[str, Any]:
    """Delete a customisation."""
    customisation = await menu_service.delete_customisation(customisation_id)
    logger.info(f"Admin {admin.id} deleted customisation {customisation.id}")
    return {"message": f"Customisation {customisation.name} deleted successfully."}


# Registered last so the fixed paths above take precedence
@router.get("/{item_id}")
@router.get("/item/{item_id}", include_in_schema=False)
async def get_item(item_id: str, menu_service: Menu) -> dict[str, Any]:
    """Get a single menu item."""
    item = await menu_service.get_item(item_id)
    return {"result": item.model_dump(mode="json")}
