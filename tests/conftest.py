"""Shared pytest fixtures and configuration for all tests."""

import os

# Keep main.py and lambda_handler.py from building real apps at import time
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import UTC, datetime  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402

from restaurant_admin_service.models.menu_models import MenuCategory, MenuItem  # noqa: E402
from restaurant_admin_service.models.order_models import (  # noqa: E402
    Order,
    OrderLine,
    OrderStatusEnum,
)


@pytest.fixture
def fixed_time() -> datetime:
    """Fixture providing a fixed UTC timestamp."""
    return datetime(2024, 1, 15, 10, 30, tzinfo=UTC)


@pytest.fixture
def menu_item_payload() -> dict:
    """Fixture providing a valid menu item request body."""
    return {
        "name": "Caesar Salad",
        "description": "Fresh romaine lettuce with classic Caesar dressing",
        "category": "Appetizer",
        "price": 8.99,
        "ingredients": ["romaine lettuce", "parmesan", "croutons"],
        "preparationTime": 10,
        "imageUrl": "https://example.com/salad.jpg",
    }


@pytest.fixture
def sample_menu_item(fixed_time: datetime) -> MenuItem:
    """Fixture providing a stored menu item."""
    return MenuItem(
        id="item_1",
        name="Caesar Salad",
        description="Fresh romaine lettuce with classic Caesar dressing",
        category=MenuCategory.APPETIZER,
        price=Decimal("8.99"),
        ingredients=["romaine lettuce", "parmesan", "croutons"],
        is_available=True,
        preparation_time=Decimal("10"),
        image_url="https://example.com/salad.jpg",
        created_at=fixed_time,
        updated_at=fixed_time,
    )


@pytest.fixture
def second_menu_item(fixed_time: datetime) -> MenuItem:
    """Fixture providing another stored menu item in a different category."""
    return MenuItem(
        id="item_2",
        name="Iced Coffee",
        description="Cold brew coffee over ice",
        category=MenuCategory.BEVERAGE,
        price=Decimal("4.50"),
        ingredients=["coffee", "ice", "milk"],
        is_available=False,
        created_at=fixed_time,
        updated_at=fixed_time,
    )


@pytest.fixture
def sample_order(fixed_time: datetime) -> Order:
    """Fixture providing a stored order referencing item_1 and item_2."""
    return Order(
        id="order_1",
        order_number="ORD-1705314600000-ABCDEF12",
        items=[
            OrderLine(menu_item_id="item_1", quantity=2, price=Decimal("8.99")),
            OrderLine(menu_item_id="item_2", quantity=1, price=Decimal("4.50")),
        ],
        total_amount=Decimal("22.48"),
        status=OrderStatusEnum.PENDING,
        customer_name="John Doe",
        table_number=5,
        created_at=fixed_time,
        updated_at=fixed_time,
    )


@pytest.fixture
def order_payload() -> dict:
    """Fixture providing a valid order request body for item_1 and item_2."""
    return {
        "items": [
            {"menuItem": "item_1", "quantity": 2, "price": 8.99},
            {"menuItem": "item_2", "quantity": 1, "price": 4.5},
        ],
        "totalAmount": 22.48,
        "customerName": "John Doe",
        "tableNumber": 5,
    }
