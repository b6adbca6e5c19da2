"""Shared pytest fixtures and configuration for all tests."""

import os

# Keep main.py from building the real application on import
os.environ.setdefault("ENVIRONMENT", "test")

from decimal import Decimal  # noqa: E402
from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from cafe_ordering_service.auth.password_hasher import PasswordHasher  # noqa: E402
from cafe_ordering_service.auth.token_service import TokenService  # noqa: E402
from cafe_ordering_service.handlers.api_handler import create_app  # noqa: E402
from cafe_ordering_service.models.menu_models import (  # noqa: E402
    Category,
    Customisation,
    MenuItem,
)
from cafe_ordering_service.models.order_models import (  # noqa: E402
    Favourite,
    Order,
    OrderStatusEnum,
)
from cafe_ordering_service.models.user_models import User  # noqa: E402
from cafe_ordering_service.services.menu_service import MenuService  # noqa: E402
from cafe_ordering_service.services.order_service import (  # noqa: E402
    FavouriteService,
    OrderService,
)
from cafe_ordering_service.services.user_service import UserService  # noqa: E402

TEST_SECRET = "test-secret-key-for-signing-tokens-0123456789"


class InMemoryCategoryRepository:
    """In-memory stand-in for CategoryRepository."""

    def __init__(self) -> None:
        self.categories: dict[str, Category] = {}

    def get_category(self, category_id: str) -> Category | None:
        return self.categories.get(category_id)

    def find_by_name(self, name: str) -> Category | None:
        return next((c for c in self.categories.values() if c.name == name), None)

    def list_categories(self) -> list[Category]:
        return list(self.categories.values())

    def create_category(self, category: Category) -> bool:
        if self.find_by_name(category.name) is not None:
            return False
        self.categories[category.id] = category
        return True

    def delete_category(self, category: Category) -> bool:
        stored = self.categories.get(category.id)
        if stored is None or stored.item_count > 0:
            return False
        del self.categories[category.id]
        return True

    def adjust_item_count(self, category_id: str, delta: int) -> bool:
        category = self.categories.get(category_id)
        if category is None:
            return False
        self.categories[category_id] = category.model_copy(
            update={"item_count": category.item_count + delta}
        )
        return True


class InMemoryItemRepository:
    """In-memory stand-in for ItemRepository.

    Moves category item counts the way the DynamoDB transactions do.
    """

    def __init__(self, categories: InMemoryCategoryRepository) -> None:
        self.items: dict[str, MenuItem] = {}
        self.categories = categories

    def get_item(self, item_id: str) -> MenuItem | None:
        return self.items.get(item_id)

    def find_by_name(self, name: str) -> MenuItem | None:
        return next((i for i in self.items.values() if i.name == name), None)

    def list_items(self) -> list[MenuItem]:
        return list(self.items.values())

    def list_items_by_category(self, category_id: str) -> list[MenuItem]:
        return [i for i in self.items.values() if i.category_id == category_id]

    def create_item(self, item: MenuItem) -> bool:
        if self.find_by_name(item.name) is not None:
            return False
        if not self.categories.adjust_item_count(item.category_id, 1):
            return False
        self.items[item.id] = item
        return True

    def update_item(self, item: MenuItem, previous: MenuItem) -> bool:
        if item.id not in self.items:
            return False
        existing = self.find_by_name(item.name)
        if existing is not None and existing.id != item.id:
            return False
        if item.category_id != previous.category_id:
            if not self.categories.adjust_item_count(item.category_id, 1):
                return False
            self.categories.adjust_item_count(previous.category_id, -1)
        self.items[item.id] = item
        return True

    def delete_item(self, item: MenuItem) -> bool:
        if self.items.pop(item.id, None) is None:
            return False
        self.categories.adjust_item_count(item.category_id, -1)
        return True


class InMemoryCustomisationRepository:
    """In-memory stand-in for CustomisationRepository."""

    def __init__(self) -> None:
        self.customisations: dict[str, Customisation] = {}

    def get_customisation(self, customisation_id: str) -> Customisation | None:
        return self.customisations.get(customisation_id)

    def find_by_name(self, name: str) -> Customisation | None:
        return next((c for c in self.customisations.values() if c.name == name), None)

    def list_customisations(self) -> list[Customisation]:
        return list(self.customisations.values())

    def create_customisation(self, customisation: Customisation) -> bool:
        if self.find_by_name(customisation.name) is not None:
            return False
        self.customisations[customisation.id] = customisation
        return True

    def delete_customisation(self, customisation: Customisation) -> None:
        self.customisations.pop(customisation.id, None)


class InMemoryUserRepository:
    """In-memory stand-in for UserRepository."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}

    def get_user(self, user_id: str) -> User | None:
        return self.users.get(user_id)

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    def list_users(self) -> list[User]:
        return list(self.users.values())

    def create_user(self, user: User) -> bool:
        if self.find_by_email(user.email) is not None:
            return False
        self.users[user.id] = user
        return True

    def update_user(self, user: User, previous_email: str) -> bool:
        if user.id not in self.users:
            return False
        existing = self.find_by_email(user.email)
        if existing is not None and existing.id != user.id:
            return False
        self.users[user.id] = user
        return True

    def delete_user(self, user: User) -> None:
        self.users.pop(user.id, None)


class InMemoryOrderRepository:
    """In-memory stand-in for OrderRepository."""

    def __init__(self) -> None:
        self.orders: dict[str, Order] = {}

    def save_order(self, order: Order) -> None:
        self.orders[order.id] = order

    def get_order(self, order_id: str) -> Order | None:
        return self.orders.get(order_id)

    def list_orders_for_user(self, user_id: str) -> list[Order]:
        return [o for o in self.orders.values() if o.user_id == user_id]

    def list_orders(self) -> list[Order]:
        return list(self.orders.values())

    def update_status(self, order_id: str, status: OrderStatusEnum) -> bool:
        order = self.orders.get(order_id)
        if order is None:
            return False
        self.orders[order_id] = order.model_copy(update={"status": status})
        return True


class InMemoryFavouriteRepository:
    """In-memory stand-in for FavouriteRepository."""

    def __init__(self) -> None:
        self.favourites: dict[tuple[str, str], Favourite] = {}

    def add_favourite(self, favourite: Favourite) -> bool:
        key = (favourite.user_id, favourite.item_id)
        if key in self.favourites:
            return False
        self.favourites[key] = favourite
        return True

    def list_favourites(self, user_id: str) -> list[Favourite]:
        return [f for (uid, _), f in self.favourites.items() if uid == user_id]

    def remove_favourite(self, user_id: str, item_id: str) -> bool:
        return self.favourites.pop((user_id, item_id), None) is not None


@pytest.fixture
def token_service() -> TokenService:
    """Fixture providing a token service with a fixed test secret."""
    return TokenService(secret_key=TEST_SECRET)


@pytest.fixture
def password_hasher() -> PasswordHasher:
    """Fixture providing a fast (minimum cost) bcrypt hasher."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def repositories() -> SimpleNamespace:
    """Fixture providing empty in-memory repositories."""
    categories = InMemoryCategoryRepository()
    return SimpleNamespace(
        users=InMemoryUserRepository(),
        categories=categories,
        items=InMemoryItemRepository(categories),
        customisations=InMemoryCustomisationRepository(),
        orders=InMemoryOrderRepository(),
        favourites=InMemoryFavouriteRepository(),
    )


@pytest.fixture
def app(
    repositories: SimpleNamespace, token_service: TokenService, password_hasher: PasswordHasher
) -> FastAPI:
    """Fixture providing the application wired to in-memory repositories."""
    return create_app(
        user_service=UserService(
            user_repository=repositories.users,  # type: ignore[arg-type]
            token_service=token_service,
            password_hasher=password_hasher,
        ),
        menu_service=MenuService(
            category_repository=repositories.categories,  # type: ignore[arg-type]
            item_repository=repositories.items,  # type: ignore[arg-type]
            customisation_repository=repositories.customisations,  # type: ignore[arg-type]
        ),
        order_service=OrderService(
            order_repository=repositories.orders,  # type: ignore[arg-type]
            item_repository=repositories.items,  # type: ignore[arg-type]
        ),
        favourite_service=FavouriteService(
            favourite_repository=repositories.favourites,  # type: ignore[arg-type]
            item_repository=repositories.items,  # type: ignore[arg-type]
        ),
        token_service=token_service,
    )


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Fixture providing a test client for the application."""
    return TestClient(app)


@pytest.fixture
def admin_user(repositories: SimpleNamespace, password_hasher: PasswordHasher) -> User:
    """Fixture providing a stored admin user (password: "password")."""
    user = User(
        email="admin@test.com",
        password=password_hasher.hash("password"),
        name="Admin User",
        admin=True,
    )
    repositories.users.create_user(user)
    return user


@pytest.fixture
def regular_user(repositories: SimpleNamespace, password_hasher: PasswordHasher) -> User:
    """Fixture providing a stored non-admin user (password: "password")."""
    user = User(
        email="user@test.com",
        password=password_hasher.hash("password"),
        name="Test User",
        admin=False,
    )
    repositories.users.create_user(user)
    return user


@pytest.fixture
def admin_token(admin_user: User, token_service: TokenService) -> str:
    return token_service.issue(admin_user)


@pytest.fixture
def user_token(regular_user: User, token_service: TokenService) -> str:
    return token_service.issue(regular_user)


@pytest.fixture
def test_category(repositories: SimpleNamespace) -> Category:
    """Fixture providing a stored category that has one item."""
    category = Category(name="Test Category")
    repositories.categories.create_category(category)
    return category


@pytest.fixture
def test_category_2(repositories: SimpleNamespace) -> Category:
    """Fixture providing a stored category without items."""
    category = Category(name="Test Category 2")
    repositories.categories.create_category(category)
    return category


@pytest.fixture
def test_item(repositories: SimpleNamespace, test_category: Category) -> MenuItem:
    """Fixture providing a stored item in test_category."""
    item = MenuItem(name="Test Item", category_id=test_category.id, price=Decimal("5.99"))
    repositories.items.create_item(item)
    return item
