"""Main application entry point for the cafe ordering service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os
from datetime import timedelta
from typing import Any

import boto3
from fastapi import FastAPI

from cafe_ordering_service.auth.password_hasher import PasswordHasher
from cafe_ordering_service.auth.token_service import TokenService
from cafe_ordering_service.handlers.api_handler import create_app
from cafe_ordering_service.observability import configure_logging, setup_observability
from cafe_ordering_service.repositories.store import CafeStore, TableNames
from cafe_ordering_service.services.menu_service import MenuService
from cafe_ordering_service.services.order_service import FavouriteService, OrderService
from cafe_ordering_service.services.user_service import UserService

logger = logging.getLogger(__name__)


def get_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        # Local DynamoDB accepts any credentials
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", "dummy"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", "dummy"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    # Production - boto3 will use default credential chain (IAM role, env vars, etc.)
    return boto3.resource("dynamodb", region_name=region)


def get_table_names() -> TableNames:
    """Read table names from the environment."""
    defaults = TableNames()
    return TableNames(
        users=os.getenv("DYNAMODB_USERS_TABLE", defaults.users),
        categories=os.getenv("DYNAMODB_CATEGORIES_TABLE", defaults.categories),
        items=os.getenv("DYNAMODB_ITEMS_TABLE", defaults.items),
        orders=os.getenv("DYNAMODB_ORDERS_TABLE", defaults.orders),
        favourites=os.getenv("DYNAMODB_FAVOURITES_TABLE", defaults.favourites),
        customisations=os.getenv("DYNAMODB_CUSTOMISATIONS_TABLE", defaults.customisations),
        unique_constraints=os.getenv("DYNAMODB_UNIQUE_TABLE", defaults.unique_constraints),
    )


def create_token_service() -> TokenService:
    """Create the token service from the environment.

    Raises:
        ValueError: If JWT_SECRET_KEY is not set
    """
    secret_key = os.getenv("JWT_SECRET_KEY")
    if not secret_key:
        raise ValueError("JWT_SECRET_KEY must be set in environment")

    expires_minutes = int(os.getenv("JWT_EXPIRES_MINUTES", str(7 * 24 * 60)))
    return TokenService(secret_key=secret_key, expires_in=timedelta(minutes=expires_minutes))


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Opens the DynamoDB store
    3. Creates auth helpers and services
    4. Creates the FastAPI app
    5. Sets up observability

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing cafe ordering service...")

    token_service = create_token_service()
    password_hasher = PasswordHasher(rounds=int(os.getenv("BCRYPT_ROUNDS", "10")))

    table_names = get_table_names()
    store = CafeStore(dynamodb_resource=get_dynamodb_resource(), table_names=table_names)
    logger.info(f"Store configured - users: {table_names.users}, items: {table_names.items}")

    user_service = UserService(
        user_repository=store.users,
        token_service=token_service,
        password_hasher=password_hasher,
    )
    menu_service = MenuService(
        category_repository=store.categories,
        item_repository=store.items,
        customisation_repository=store.customisations,
    )
    order_service = OrderService(order_repository=store.orders, item_repository=store.items)
    favourite_service = FavouriteService(
        favourite_repository=store.favourites, item_repository=store.items
    )

    logger.info("Services initialized")

    cors_origins = [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
    ]

    app = create_app(
        user_service=user_service,
        menu_service=menu_service,
        order_service=order_service,
        favourite_service=favourite_service,
        token_service=token_service,
        store=store,
        cors_origins=cors_origins,
    )

    setup_observability(app)

    logger.info("Cafe ordering service initialized successfully")
    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "3001"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
