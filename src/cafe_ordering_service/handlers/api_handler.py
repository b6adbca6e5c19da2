"""FastAPI application for the cafe ordering API."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from cafe_ordering_service.auth.token_service import TokenService
from cafe_ordering_service.exceptions import CafeServiceError
from cafe_ordering_service.handlers.menu_handler import router as menu_router
from cafe_ordering_service.handlers.order_handler import favourites_router, orders_router
from cafe_ordering_service.handlers.user_handler import router as user_router
from cafe_ordering_service.repositories.store import CafeStore
from cafe_ordering_service.services.menu_service import MenuService
from cafe_ordering_service.services.order_service import FavouriteService, OrderService
from cafe_ordering_service.services.user_service import UserService

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class MessageResponse(BaseModel):
    message: str


async def handle_service_error(request: Request, exc: CafeServiceError) -> JSONResponse:
    """Render an expected domain error with its own status and message."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_response_body())


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed request bodies as 400."""
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request body.", "errors": jsonable_encoder(exc.errors())},
    )


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors; unmatched paths get the page-not-found body."""
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"message": "404 Page not found"})
    return JSONResponse(
        status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort responder for anything the routes did not expect."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=getattr(exc, "status_code", 500),
        content={"message": "Error Occured!", "error": str(exc)},
    )


def create_app(
    user_service: UserService,
    menu_service: MenuService,
    order_service: OrderService,
    favourite_service: FavouriteService,
    token_service: TokenService,
    store: CafeStore | None = None,
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        user_service: Service for user accounts
        menu_service: Service for the menu catalog
        order_service: Service for orders
        favourite_service: Service for favourites
        token_service: Service for verifying bearer tokens
        store: Store handle to close on shutdown
        cors_origins: Allowed CORS origins (defaults to any origin)

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Cafe ordering API starting")
        yield
        if store is not None:
            store.close()
        logger.info("Cafe ordering API stopped")

    app = FastAPI(
        title="Three Beans Cafe API",
        description="Ordering backend for users, menu, orders and favourites",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Store services in app state for access in route dependencies
    app.state.user_service = user_service
    app.state.menu_service = menu_service
    app.state.order_service = order_service
    app.state.favourite_service = favourite_service
    app.state.token_service = token_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    app.add_exception_handler(CafeServiceError, handle_service_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, handle_http_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)

    @app.get("/", response_model=MessageResponse, tags=["Health"])
    async def welcome() -> MessageResponse:
        return MessageResponse(message="Welcome to Three Beans Cafe!")

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Returns:
            Health status indicating service is running
        """
        return HealthResponse(status="healthy")

    app.include_router(user_router)
    app.include_router(menu_router)
    app.include_router(orders_router)
    app.include_router(favourites_router)

    return app
