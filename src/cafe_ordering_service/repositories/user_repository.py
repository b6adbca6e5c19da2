"""DynamoDB repository for user accounts."""

import logging
from typing import Any

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from cafe_ordering_service.models.user_models import User
from cafe_ordering_service.repositories.unique_constraints import (
    USER_EMAIL,
    UniqueConstraintTable,
    is_condition_failure,
    scan_all,
    store_error,
)

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user CRUD operations.

    Manages user records in DynamoDB with ``id`` as partition key. Email
    uniqueness is held by the shared unique-constraint table.
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
            unique_constraints: Guard table for unique emails
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)
        self.unique_constraints = unique_constraints

    def get_user(self, user_id: str) -> User | None:
        """Retrieve a user by id.

        Args:
            user_id: User identifier

        Returns:
            User if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"id": user_id})
        except ClientError as e:
            raise store_error("get user", e) from e

        if "Item" not in response:
            return None

        return User.from_dynamodb_item(response["Item"])

    def find_by_email(self, email: str) -> User | None:
        """Retrieve a user by normalized email.

        Args:
            email: Lower-cased email address

        Returns:
            User if found, None otherwise
        """
        user_id = self.unique_constraints.lookup(USER_EMAIL, email)
        if user_id is None:
            return None
        return self.get_user(user_id)

    def list_users(self) -> list[User]:
        """List every user."""
        try:
            items = scan_all(self.table)
        except ClientError as e:
            raise store_error("list users", e) from e

        return [User.from_dynamodb_item(item) for item in items]

    def create_user(self, user: User) -> bool:
        """Save a new user and claim the email.

        Args:
            user: User to save

        Returns:
            bool: True if saved, False if the email is already taken
        """
        try:
            self.dynamodb.meta.client.transact_write_items(
                TransactItems=[
                    {"Put": {"TableName": self.table_name, "Item": user.to_dynamodb_item()}},
                    self.unique_constraints.claim(USER_EMAIL, user.email, user.id),
                ]
            )
            return True

        except ClientError as e:
            if is_condition_failure(e):
                logger.info("Signup rejected by email constraint")
                return False
            raise store_error("create user", e) from e

    def update_user(self, user: User, previous_email: str) -> bool:
        """Replace a user, moving the email claim when it changed.

        Args:
            user: Updated User
            previous_email: Email stored before the update

        Returns:
            bool: True if saved, False if the new email is already taken or
                the user was deleted in the meantime
        """
        transact_items: list[dict[str, Any]] = [
            {
                "Put": {
                    "TableName": self.table_name,
                    "Item": user.to_dynamodb_item(),
                    "ConditionExpression": "attribute_exists(id)",
                }
            },
        ]
        if user.email != previous_email:
            transact_items.append(self.unique_constraints.release(USER_EMAIL, previous_email))
            transact_items.append(self.unique_constraints.claim(USER_EMAIL, user.email, user.id))

        try:
            self.dynamodb.meta.client.transact_write_items(TransactItems=transact_items)
            return True

        except ClientError as e:
            if is_condition_failure(e):
                logger.info(f"Profile update for {user.id} rejected by a write condition")
                return False
            raise store_error("update user", e) from e

    def delete_user(self, user: User) -> None:
        """Delete a user and release the email."""
        try:
            self.dynamodb.meta.client.transact_write_items(
                TransactItems=[
                    {"Delete": {"TableName": self.table_name, "Key": {"id": user.id}}},
                    self.unique_constraints.release(USER_EMAIL, user.email),
                ]
            )
        except ClientError as e:
            raise store_error("delete user", e) from e
