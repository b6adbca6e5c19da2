"""Order and favourite services."""

import logging

from cafe_ordering_service.exceptions import (
    AlreadyFavouritedError,
    FavouriteNotFoundError,
    ItemNotFoundError,
    OrderNotFoundError,
)
from cafe_ordering_service.models.menu_models import MenuItem
from cafe_ordering_service.models.order_models import (
    Favourite,
    Order,
    OrderLine,
    OrderStatusEnum,
)
from cafe_ordering_service.observability.decorators import traced
from cafe_ordering_service.observability.metrics import record_order_placed
from cafe_ordering_service.repositories.menu_repositories import ItemRepository
from cafe_ordering_service.repositories.order_repositories import (
    FavouriteRepository,
    OrderRepository,
)

logger = logging.getLogger(__name__)


class OrderService:
    """Service for placing and tracking orders.

    Item names and prices are copied onto each order line when the order is
    placed, and the total is always computed server side.
    """

    def __init__(self, order_repository: OrderRepository, item_repository: ItemRepository) -> None:
        """Initialize the OrderService.

        Args:
            order_repository: Repository for orders
            item_repository: Repository for menu items
        """
        self.order_repository = order_repository
        self.item_repository = item_repository

    @traced("place_order", service_name="cafe-svc")
    async def place_order(self, user_id: str, lines: list[tuple[str, int]]) -> Order:
        """Place an order for the caller.

        Args:
            user_id: Authenticated user id
            lines: (item_id, quantity) pairs

        Returns:
            The saved order

        Raises:
            ItemNotFoundError: If any item id does not exist
        """
        order_lines = []
        for item_id, quantity in lines:
            item = self.item_repository.get_item(item_id)
            if item is None:
                raise ItemNotFoundError()
            order_lines.append(
                OrderLine(item_id=item.id, name=item.name, unit_price=item.price, quantity=quantity)
            )

        order = Order(user_id=user_id, lines=order_lines)
        self.order_repository.save_order(order)

        record_order_placed(len(order_lines))
        logger.info(f"Order {order.id} placed by {user_id} ({len(order_lines)} lines)")
        return order

    async def list_orders_for_user(self, user_id: str) -> list[Order]:
        orders = self.order_repository.list_orders_for_user(user_id)
        return sorted(orders, key=lambda order: order.created_at, reverse=True)

    async def list_all_orders(self) -> list[Order]:
        orders = self.order_repository.list_orders()
        return sorted(orders, key=lambda order: order.created_at, reverse=True)

    async def get_order(self, order_id: str, user_id: str) -> Order:
        """Get one of the caller's orders.

        Raises:
            OrderNotFoundError: If the order does not exist or belongs to
                another user
        """
        order = self.order_repository.get_order(order_id)
        if order is None or order.user_id != user_id:
            raise OrderNotFoundError()
        return order

    @traced("update_order_status", service_name="cafe-svc")
    async def update_order_status(self, order_id: str, status: OrderStatusEnum) -> Order:
        """Move an order to a new status.

        Raises:
            OrderNotFoundError: If the order does not exist
        """
        if not self.order_repository.update_status(order_id, status):
            raise OrderNotFoundError()

        order = self.order_repository.get_order(order_id)
        if order is None:
            raise OrderNotFoundError()

        logger.info(f"Order {order_id} moved to {status.value}")
        return order


class FavouriteService:
    """Service for a user's favourite menu items."""

    def __init__(
        self, favourite_repository: FavouriteRepository, item_repository: ItemRepository
    ) -> None:
        """Initialize the FavouriteService.

        Args:
            favourite_repository: Repository for favourites
            item_repository: Repository for menu items
        """
        self.favourite_repository = favourite_repository
        self.item_repository = item_repository

    async def add_favourite(self, user_id: str, item_id: str) -> MenuItem:
        """Mark an item as a favourite.

        Raises:
            ItemNotFoundError: If the item does not exist
            AlreadyFavouritedError: If the item is already a favourite
        """
        item = self.item_repository.get_item(item_id)
        if item is None:
            raise ItemNotFoundError()

        if not self.favourite_repository.add_favourite(Favourite(user_id=user_id, item_id=item_id)):
            raise AlreadyFavouritedError()

        return item

    async def list_favourites(self, user_id: str) -> list[MenuItem]:
        """List the caller's favourite items.

        Favourites pointing at items deleted since are skipped.
        """
        items = []
        for favourite in self.favourite_repository.list_favourites(user_id):
            item = self.item_repository.get_item(favourite.item_id)
            if item is not None:
                items.append(item)
        return items

    async def remove_favourite(self, user_id: str, item_id: str) -> None:
        """Remove an item from the caller's favourites.

        Raises:
            FavouriteNotFoundError: If the item was not a favourite
        """
        if not self.favourite_repository.remove_favourite(user_id, item_id):
            raise FavouriteNotFoundError()
