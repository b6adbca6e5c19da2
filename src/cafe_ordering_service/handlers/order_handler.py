"""Order and favourite routes. All of them require a signed-in user."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from cafe_ordering_service.handlers.dependencies import (
    AdminUser,
    UserId,
    get_favourite_service,
    get_order_service,
)
from cafe_ordering_service.models.order_models import MAX_LINE_QUANTITY, OrderStatusEnum
from cafe_ordering_service.services.order_service import FavouriteService, OrderService

logger = logging.getLogger(__name__)

orders_router = APIRouter(prefix="/orders", tags=["Orders"])
favourites_router = APIRouter(prefix="/favourites", tags=["Favourites"])

Orders = Annotated[OrderService, Depends(get_order_service)]
Favourites = Annotated[FavouriteService, Depends(get_favourite_service)]


class OrderLineRequest(BaseModel):
    item_id: str
    quantity: int = Field(default=1, ge=1, le=MAX_LINE_QUANTITY)


class OrderCreateRequest(BaseModel):
    """Request body for placing an order."""

    items: list[OrderLineRequest] = Field(..., min_length=1)


class OrderStatusRequest(BaseModel):
    status: OrderStatusEnum


@orders_router.post("", status_code=201)
async def place_order(body: OrderCreateRequest, order_service: Orders, user_id: UserId) -> dict[str, Any]:
    """Place an order for the caller."""
    order = await order_service.place_order(
        user_id, [(line.item_id, line.quantity) for line in body.items]
    )
    return {"message": "Order placed successfully.", "order": order.to_response()}


@orders_router.get("")
async def list_my_orders(order_service: Orders, user_id: UserId) -> dict[str, Any]:
    """List the caller's orders, newest first."""
    orders = await order_service.list_orders_for_user(user_id)
    return {"result": [order.to_response() for order in orders]}


@orders_router.get("/all")
async def list_all_orders(order_service: Orders, admin: AdminUser) -> dict[str, Any]:
    """List every order (admin only)."""
    orders = await order_service.list_all_orders()
    return {"result": [order.to_response() for order in orders]}


@orders_router.get("/{order_id}")
async def get_order(order_id: str, order_service: Orders, user_id: UserId) -> dict[str, Any]:
    """Get one of the caller's orders."""
    order = await order_service.get_order(order_id, user_id)
    return {"result": order.to_response()}


@orders_router.patch("/{order_id}/status")
async def update_order_status(
    order_id: str, body: OrderStatusRequest, order_service: Orders, admin: AdminUser
) -> dict[str, Any]:
    """Move an order to a new status (admin only)."""
    order = await order_service.update_order_status(order_id, body.status)
    logger.info(f"Admin {admin.id} set order {order_id} to {body.status.value}")
    return {"message": "Order status updated.", "order": order.to_response()}


@favourites_router.get("")
async def list_favourites(favourite_service: Favourites, user_id: UserId) -> dict[str, Any]:
    """List the caller's favourite items."""
    items = await favourite_service.list_favourites(user_id)
    return {"result": [item.model_dump(mode="json") for item in items]}


@favourites_router.post("/{item_id}", status_code=201)
async def add_favourite(item_id: str, favourite_service: Favourites, user_id: UserId) -> dict[str, Any]:
    """Add an item to the caller's favourites."""
    await favourite_service.add_favourite(user_id, item_id)
    return {"message": "Item added to favourites."}


@favourites_router.delete("/{item_id}")
async def remove_favourite(
    item_id: str, favourite_service: Favourites, user_id: UserId
) -> dict[str, Any]:
    """Remove an item from the caller's favourites."""
    await favourite_service.remove_favourite(user_id, item_id)
    return {"message": "Item removed from favourites."}
