"""Request-scoped dependencies shared by the route modules.

Services live on ``app.state`` (set by ``create_app``) and are looked up per
request, so tests can swap them on a built application.
"""

from typing import Annotated

from fastapi import Depends, Header, Request

from cafe_ordering_service.auth.auth_dependencies import ensure_admin, get_user_id_from_header
from cafe_ordering_service.models.user_models import User
from cafe_ordering_service.services.menu_service import MenuService
from cafe_ordering_service.services.order_service import FavouriteService, OrderService
from cafe_ordering_service.services.user_service import UserService


def get_menu_service(request: Request) -> MenuService:
    menu_service: MenuService = request.app.state.menu_service
    return menu_service


def get_user_service(request: Request) -> UserService:
    user_service: UserService = request.app.state.user_service
    return user_service


def get_order_service(request: Request) -> OrderService:
    order_service: OrderService = request.app.state.order_service
    return order_service


def get_favourite_service(request: Request) -> FavouriteService:
    favourite_service: FavouriteService = request.app.state.favourite_service
    return favourite_service


def current_user_id(request: Request, authorization: Annotated[str | None, Header()] = None) -> str:
    """Dependency for routes that require a signed-in user."""
    return get_user_id_from_header(
        authorization=authorization, token_service=request.app.state.token_service
    )


async def current_admin(
    user_id: Annotated[str, Depends(current_user_id)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    """Dependency for routes restricted to admins."""
    return await ensure_admin(user_id, user_service)


UserId = Annotated[str, Depends(current_user_id)]
AdminUser = Annotated[User, Depends(current_admin)]
