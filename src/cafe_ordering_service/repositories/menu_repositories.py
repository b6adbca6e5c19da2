"""DynamoDB repository classes for the menu catalog.

Lookups return None for missing records. Writes whose conditions fail (a
taken unique name, a missing category, a record deleted in the meantime)
return False. Any other DynamoDB failure is logged and raised as StoreError.

Each category carries an ``item_count`` that every item write moves in the
same transaction as the item itself. Category deletion is conditioned on that
count, so the "no items left" check never depends on the eventually
consistent ``category_id-index``.
"""

import logging
from typing import Any

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from cafe_ordering_service.models.menu_models import Category, Customisation, MenuItem
from cafe_ordering_service.repositories.unique_constraints import (
    CATEGORY_NAME,
    CUSTOMISATION_NAME,
    ITEM_NAME,
    UniqueConstraintTable,
    is_condition_failure,
    query_all,
    scan_all,
    store_error,
)

logger = logging.getLogger(__name__)


def adjust_item_count(table_name: str, category_id: str, delta: int) -> dict[str, Any]:
    """Build a transaction entry that moves a category's item count.

    The entry is conditioned on the category existing, so an item can never
    be written against a deleted category.
    """
    return {
        "Update": {
            "TableName": table_name,
            "Key": {"id": category_id},
            "UpdateExpression": "ADD item_count :delta",
            "ConditionExpression": "attribute_exists(id)",
            "ExpressionAttributeValues": {":delta": delta},
        }
    }


class CategoryRepository:
    """Repository for category CRUD operations.

    Manages category records in DynamoDB with ``id`` as partition key.
    """

    def __init__(
        self,
        dynamodb_resource: DynamoDBServiceResource,
        table_name: str,
        unique_constraints: UniqueConstraintTable,
    ) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
            unique_constraints: Guard table for unique category names
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)
        self.unique_constraints = unique_constraints

    def get_category(self, category_id: str) -> Category | None:
        """Retrieve a category by id.

        Args:
            category_id: Category identifier

        Returns:
            Category if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"id": category_id}, ConsistentRead=True)
        except ClientError as e:
            raise store_error("get category", e) from e

        if "Item" not in response:
            return None

        return Category.from_dynamodb_item(response["Item"])

    def find_by_name(self, name: str) -> Category | None:
        """Retrieve a category by its exact name.

        Args:
            name: Category name

        Returns:
            Category if found, None otherwise
        """
        category_id = self.unique_constraints.lookup(CATEGORY_NAME, name)
        if category_id is None:
            return None
        return self.get_category(category_id)

    def list_categories(self) -> list[Category]:
        """List every category.

        Returns:
            list: List of Category objects (empty list if none found)
        """
        try:
            items = scan_all(self.table)
        except ClientError as e:
            raise store_error("list categories", e) from e

        return [Category.from_dynamodb_item(item) for item in items]

    def create_category(self, category: Category) -> bool:
        """Save a new category and claim its name.

        Args:
            category: Category to save

        Returns:
            bool: True if saved, False if the name is already taken
        """
        try:
            self.dynamodb.meta.client.transact_write_items(
                TransactItems=[
                    {"Put": {"TableName": self.table_name, "Item": category.to_dynamodb_item()}},
                    self.unique_constraints.claim(CATEGORY_NAME, category.name, category.id),
                ]
            )
            return True

        except ClientError as e:
            if is_condition_failure(e):
                logger.info(f"Category name already claimed: {category.name}")
                return False
            raise store_error("create category", e) from e

    def delete_category(self, category: Category) -> bool:
        """Delete a category that no item references and release its name.

        Args:
            category: Category to delete

        Returns:
            bool: True if deleted, False if items still reference it or it
                is already gone
        """
        try:
            self.dynamodb.meta.client.transact_write_items(
                TransactItems=[
                    {
                        "Delete": {
                            "TableName": self.table_name,
                            "Key": {"id": category.id},
                            "ConditionExpression": (
                                "attribute_exists(id) AND "
                                "(attribute_not_exists(item_count) OR item_count = :zero)"
                            ),
                            "ExpressionAttributeValues": {":zero": 0},
                        }
                    },
                    self.unique_constraints.release(CATEGORY_NAME, category.name),
                ]
            )
            return True

        except ClientError as e:
            if is_condition_failure(e):
                logger.info(f"Category {category.id} still referenced or already deleted")
                return False
            raise store_error("delete category", e) from e


class ItemRepository:
    """Repository for menu item CRUD operations.

    Manages item records in DynamoDB with ``id`` as partition key and a
    Global Secondary Index on ``category_id``. Writes also touch the
    categories table to keep each category's ``item_count`` current.
    """

    CATEGORY_INDEX = "category_id-index"

    def __init__(
        self,
        dynamodb_resource: DynamoDBServiceResource,
        table_name: str,
        unique_constraints: UniqueConstraintTable,
        category_table_name: str,
    ) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
            unique_constraints: Guard table for unique item names
            category_table_name: Table holding the categories items reference
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)
        self.unique_constraints = unique_constraints
        self.category_table_name = category_table_name

    def get_item(self, item_id: str) -> MenuItem | None:
        """Retrieve a menu item by id.

        Args:
            item_id: Item identifier

        Returns:
            MenuItem if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"id": item_id})
        except ClientError as e:
            raise store_error("get item", e) from e

        if "Item" not in response:
            return None

        return MenuItem.from_dynamodb_item(response["Item"])

    def find_by_name(self, name: str) -> MenuItem | None:
        """Retrieve a menu item by its exact name."""
        item_id = self.unique_constraints.lookup(ITEM_NAME, name)
        if item_id is None:
            return None
        return self.get_item(item_id)

    def list_items(self) -> list[MenuItem]:
        """List every menu item."""
        try:
            items = scan_all(self.table)
        except ClientError as e:
            raise store_error("list items", e) from e

        return [MenuItem.from_dynamodb_item(item) for item in items]

    def list_items_by_category(self, category_id: str) -> list[MenuItem]:
        """List the items that reference a category.

        Uses a Global Secondary Index on category_id.

        Args:
            category_id: Category identifier

        Returns:
            list: List of MenuItem objects (empty list if none found)
        """
        try:
            items = query_all(
                self.table,
                IndexName=self.CATEGORY_INDEX,
                KeyConditionExpression="category_id = :cid",
                ExpressionAttributeValues={":cid": category_id},
            )
        except ClientError as e:
            raise store_error("list items by category", e) from e

        return [MenuItem.from_dynamodb_item(item) for item in items]

    def create_item(self, item: MenuItem) -> bool:
        """Save a new item, claim its name and count it against its category.

        Args:
            item: MenuItem to save

        Returns:
            bool: True if saved, False if the name is already taken or the
                category no longer exists
        """
        try:
            self.dynamodb.meta.client.transact_write_items(
                TransactItems=[
                    {"Put": {"TableName": self.table_name, "Item": item.to_dynamodb_item()}},
                    self.unique_constraints.claim(ITEM_NAME, item.name, item.id),
                    adjust_item_count(self.category_table_name, item.category_id, 1),
                ]
            )
            return True

        except ClientError as e:
            if is_condition_failure(e):
                logger.info(f"Item {item.name} rejected by a write condition")
                return False
            raise store_error("create item", e) from e

    def update_item(self, item: MenuItem, previous: MenuItem) -> bool:
        """Replace an item, moving its name claim and category count as needed.

        Args:
            item: Updated MenuItem
            previous: The item as it was read before the update

        Returns:
            bool: True if saved, False if the new name is taken, the target
                category is gone or the item was deleted in the meantime
        """
        transact_items: list[dict[str, Any]] = [
            {
                "Put": {
                    "TableName": self.table_name,
                    "Item": item.to_dynamodb_item(),
                    "ConditionExpression": "attribute_exists(id)",
                }
            },
        ]
        if item.name != previous.name:
            transact_items.append(self.unique_constraints.release(ITEM_NAME, previous.name))
            transact_items.append(self.unique_constraints.claim(ITEM_NAME, item.name, item.id))
        if item.category_id != previous.category_id:
            transact_items.append(
                adjust_item_count(self.category_table_name, previous.category_id, -1)
            )
            transact_items.append(adjust_item_count(self.category_table_name, item.category_id, 1))

        try:
            self.dynamodb.meta.client.transact_write_items(TransactItems=transact_items)
            return True

        except ClientError as e:
            if is_condition_failure(e):
                logger.info(f"Update of item {item.id} rejected by a write condition")
                return False
            raise store_error("update item", e) from e

    def delete_item(self, item: MenuItem) -> bool:
        """Delete an item, release its name and uncount it from its category.

        Returns:
            bool: True if deleted, False if it was already gone
        """
        try:
            self.dynamodb.meta.client.transact_write_items(
                TransactItems=[
                    {
                        "Delete": {
                            "TableName": self.table_name,
                            "Key": {"id": item.id},
                            "ConditionExpression": "attribute_exists(id)",
                        }
                    },
                    self.unique_constraints.release(ITEM_NAME, item.name),
                    adjust_item_count(self.category_table_name, item.category_id, -1),
                ]
            )
            return True

        except ClientError as e:
            if is_condition_failure(e):
                logger.info(f"Item {item.id} already deleted")
                return False
            raise store_error("delete item", e) from e


class CustomisationRepository:
    """Repository for drink customisations.

    Manages customisation records in DynamoDB with ``id`` as partition key.
    """

    def __init__(
        self,
        dynamodb_resource: DynamoDBServiceResource,
        table_name: str,
        unique_constraints: UniqueConstraintTable,
    ) -> None:
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)
        self.unique_constraints = unique_constraints

    def get_customisation(self, customisation_id: str) -> Customisation | None:
        try:
            response = self.table.get_item(Key={"id": customisation_id})
        except ClientError as e:
            raise store_error("get customisation", e) from e

        if "Item" not in response:
            return None

        return Customisation.from_dynamodb_item(response["Item"])

    def find_by_name(self, name: str) -> Customisation | None:
        customisation_id = self.unique_constraints.lookup(CUSTOMISATION_NAME, name)
        if customisation_id is None:
            return None
        return self.get_customisation(customisation_id)

    def list_customisations(self) -> list[Customisation]:
        try:
            items = scan_all(self.table)
        except ClientError as e:
            raise store_error("list customisations", e) from e

        return [Customisation.from_dynamodb_item(item) for item in items]

    def create_customisation(self, customisation: Customisation) -> bool:
        """Save a new customisation and claim its name.

        Returns:
            bool: True if saved, False if the name is already taken
        """
        try:
            self.dynamodb.meta.client.transact_write_items(
                TransactItems=[
                    {
                        "Put": {
                            "TableName": self.table_name,
                            "Item": customisation.to_dynamodb_item(),
                        }
                    },
                    self.unique_constraints.claim(
                        CUSTOMISATION_NAME, customisation.name, customisation.id
                    ),
                ]
            )
            return True

        except ClientError as e:
            if is_condition_failure(e):
                logger.info(f"Customisation name already claimed: {customisation.name}")
                return False
            raise store_error("create customisation", e) from e

    def delete_customisation(self, customisation: Customisation) -> None:
        """Delete a customisation and release its name."""
        try:
            self.dynamodb.meta.client.transact_write_items(
                TransactItems=[
                    {"Delete": {"TableName": self.table_name, "Key": {"id": customisation.id}}},
                    self.unique_constraints.release(CUSTOMISATION_NAME, customisation.name),
                ]
            )
        except ClientError as e:
            raise store_error("delete customisation", e) from e
