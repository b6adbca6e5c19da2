"""Store-level uniqueness for non-key attributes.

DynamoDB only enforces uniqueness on primary keys, so every unique value
(category, item and customisation names, user emails) owns a guard record
in a dedicated table keyed by ``constraint_key``. Guards are written in the same transaction
as the entity with ``attribute_not_exists``, which makes the store the source
of truth for uniqueness: a concurrent duplicate cancels the transaction.
"""

import logging
from typing import Any

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from cafe_ordering_service.exceptions import StoreError

logger = logging.getLogger(__name__)

CATEGORY_NAME = "category_name"
ITEM_NAME = "item_name"
USER_EMAIL = "user_email"
CUSTOMISATION_NAME = "customisation_name"


def is_condition_failure(error: ClientError) -> bool:
    """Check whether a ClientError was caused by a failed write condition.

    Args:
        error: Error raised by a put or transact_write_items call

    Returns:
        bool: True for conditional check failures, False for anything else
    """
    code = error.response.get("Error", {}).get("Code")
    if code == "ConditionalCheckFailedException":
        return True
    if code == "TransactionCanceledException":
        reasons = error.response.get("CancellationReasons", [])
        return any(reason.get("Code") == "ConditionalCheckFailed" for reason in reasons)
    return False


def store_error(operation: str, error: ClientError) -> StoreError:
    """Log a DynamoDB failure and wrap it for the error responder."""
    message = error.response.get("Error", {}).get("Message") or str(error)
    logger.error(f"Failed to {operation}: {error}")
    return StoreError(message, operation=operation)


def scan_all(table: Table) -> list[dict[str, Any]]:
    """Scan every page of a table."""
    response = table.scan()
    items = list(response.get("Items", []))

    while "LastEvaluatedKey" in response:
        response = table.scan(ExclusiveStartKey=response["LastEvaluatedKey"])
        items.extend(response.get("Items", []))

    return items


def query_all(table: Table, **kwargs: Any) -> list[dict[str, Any]]:
    """Run a query and follow pagination until exhausted."""
    response = table.query(**kwargs)
    items = list(response.get("Items", []))

    while "LastEvaluatedKey" in response:
        response = table.query(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
        items.extend(response.get("Items", []))

    return items


class UniqueConstraintTable:
    """Guard records backing unique names and emails.

    Manages records in DynamoDB with ``constraint_key`` as partition key and
    the owning entity id in ``entity_id``.
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize the constraint table.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    @staticmethod
    def constraint_key(kind: str, value: str) -> str:
        return f"{kind}#{value}"

    def lookup(self, kind: str, value: str) -> str | None:
        """Find the entity that owns a unique value.

        Args:
            kind: Constraint kind (e.g. ``category_name``)
            value: The unique value

        Returns:
            The owning entity id, or None if the value is free
        """
        try:
            response = self.table.get_item(Key={"constraint_key": self.constraint_key(kind, value)})
        except ClientError as e:
            raise store_error(f"look up {kind}", e) from e

        if "Item" not in response:
            return None

        entity_id: str = response["Item"]["entity_id"]
        return entity_id

    def claim(self, kind: str, value: str, entity_id: str) -> dict[str, Any]:
        """Build a transaction entry that claims a unique value."""
        return {
            "Put": {
                "TableName": self.table_name,
                "Item": {
                    "constraint_key": self.constraint_key(kind, value),
                    "entity_id": entity_id,
                },
                "ConditionExpression": "attribute_not_exists(constraint_key)",
            }
        }

    def release(self, kind: str, value: str) -> dict[str, Any]:
        """Build a transaction entry that releases a unique value."""
        return {
            "Delete": {
                "TableName": self.table_name,
                "Key": {"constraint_key": self.constraint_key(kind, value)},
            }
        }
