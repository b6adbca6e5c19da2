"""DynamoDB repository classes for orders and favourites."""

import logging

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from cafe_ordering_service.models.order_models import Favourite, Order, OrderStatusEnum
from cafe_ordering_service.repositories.unique_constraints import (
    is_condition_failure,
    query_all,
    scan_all,
    store_error,
)

logger = logging.getLogger(__name__)


class OrderRepository:
    """Repository for order CRUD operations.

    Manages order records in DynamoDB with ``id`` as partition key and a
    Global Secondary Index on ``user_id``.
    """

    USER_INDEX = "user_id-index"

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def save_order(self, order: Order) -> None:
        """Save or replace an order."""
        try:
            self.table.put_item(Item=order.to_dynamodb_item())
        except ClientError as e:
            raise store_error("save order", e) from e

    def get_order(self, order_id: str) -> Order | None:
        """Retrieve an order by id.

        Args:
            order_id: Order identifier

        Returns:
            Order if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"id": order_id})
        except ClientError as e:
            raise store_error("get order", e) from e

        if "Item" not in response:
            return None

        return Order.from_dynamodb_item(response["Item"])

    def list_orders_for_user(self, user_id: str) -> list[Order]:
        """List orders placed by a user.

        Uses a Global Secondary Index on user_id.
        """
        try:
            items = query_all(
                self.table,
                IndexName=self.USER_INDEX,
                KeyConditionExpression="user_id = :uid",
                ExpressionAttributeValues={":uid": user_id},
            )
        except ClientError as e:
            raise store_error("list orders", e) from e

        return [Order.from_dynamodb_item(item) for item in items]

    def list_orders(self) -> list[Order]:
        """List every order."""
        try:
            items = scan_all(self.table)
        except ClientError as e:
            raise store_error("list all orders", e) from e

        return [Order.from_dynamodb_item(item) for item in items]

    def update_status(self, order_id: str, status: OrderStatusEnum) -> bool:
        """Update status for an order.

        Args:
            order_id: Order identifier
            status: New status

        Returns:
            bool: True if updated, False if the order does not exist
        """
        try:
            self.table.update_item(
                Key={"id": order_id},
                UpdateExpression="SET #status = :status",
                ConditionExpression="attribute_exists(id)",
                ExpressionAttributeNames={"#status": "status"},
                ExpressionAttributeValues={":status": status.value},
            )
            return True

        except ClientError as e:
            if is_condition_failure(e):
                return False
            raise store_error("update order status", e) from e


class FavouriteRepository:
    """Repository for favourite items.

    Manages favourite records in DynamoDB with composite key (user_id, item_id).
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def add_favourite(self, favourite: Favourite) -> bool:
        """Save a favourite.

        Returns:
            bool: True if saved, False if the item was already a favourite
        """
        try:
            self.table.put_item(
                Item=favourite.to_dynamodb_item(),
                ConditionExpression="attribute_not_exists(item_id)",
            )
            return True

        except ClientError as e:
            if is_condition_failure(e):
                return False
            raise store_error("add favourite", e) from e

    def list_favourites(self, user_id: str) -> list[Favourite]:
        """List favourites for a user."""
        try:
            items = query_all(
                self.table,
                KeyConditionExpression="user_id = :uid",
                ExpressionAttributeValues={":uid": user_id},
            )
        except ClientError as e:
            raise store_error("list favourites", e) from e

        return [Favourite.from_dynamodb_item(item) for item in items]

    def remove_favourite(self, user_id: str, item_id: str) -> bool:
        """Delete a favourite.

        Returns:
            bool: True if deleted, False if it did not exist
        """
        try:
            self.table.delete_item(
                Key={"user_id": user_id, "item_id": item_id},
                ConditionExpression="attribute_exists(item_id)",
            )
            return True

        except ClientError as e:
            if is_condition_failure(e):
                return False
            raise store_error("remove favourite", e) from e
