"""Store handle owning the DynamoDB resource and its repositories."""

import logging
from dataclasses import dataclass

from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource

from cafe_ordering_service.repositories.menu_repositories import (
    CategoryRepository,
    CustomisationRepository,
    ItemRepository,
)
from cafe_ordering_service.repositories.order_repositories import (
    FavouriteRepository,
    OrderRepository,
)
from cafe_ordering_service.repositories.unique_constraints import UniqueConstraintTable
from cafe_ordering_service.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass
class TableNames:
    """DynamoDB table names used by the service."""

    users: str = "cafe-users"
    categories: str = "cafe-categories"
    items: str = "cafe-items"
    orders: str = "cafe-orders"
    favourites: str = "cafe-favourites"
    customisations: str = "cafe-customisations"
    unique_constraints: str = "cafe-unique-constraints"


class CafeStore:
    """Opened once at startup and closed on shutdown.

    Every repository shares the same DynamoDB resource and unique-constraint
    table.
    """

    def __init__(
        self, dynamodb_resource: DynamoDBServiceResource, table_names: TableNames | None = None
    ) -> None:
        """Initialize the store and its repositories.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_names: Table names (defaults to the ``cafe-*`` tables)
        """
        self.dynamodb = dynamodb_resource
        self.table_names = table_names or TableNames()

        self.unique_constraints = UniqueConstraintTable(
            dynamodb_resource=dynamodb_resource, table_name=self.table_names.unique_constraints
        )
        self.users = UserRepository(
            dynamodb_resource=dynamodb_resource,
            table_name=self.table_names.users,
            unique_constraints=self.unique_constraints,
        )
        self.categories = CategoryRepository(
            dynamodb_resource=dynamodb_resource,
            table_name=self.table_names.categories,
            unique_constraints=self.unique_constraints,
        )
        self.items = ItemRepository(
            dynamodb_resource=dynamodb_resource,
            table_name=self.table_names.items,
            unique_constraints=self.unique_constraints,
            category_table_name=self.table_names.categories,
        )
        self.customisations = CustomisationRepository(
            dynamodb_resource=dynamodb_resource,
            table_name=self.table_names.customisations,
            unique_constraints=self.unique_constraints,
        )
        self.orders = OrderRepository(
            dynamodb_resource=dynamodb_resource, table_name=self.table_names.orders
        )
        self.favourites = FavouriteRepository(
            dynamodb_resource=dynamodb_resource, table_name=self.table_names.favourites
        )

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self.dynamodb.meta.client.close()
        logger.info("DynamoDB client closed")
