"""Sample data loader for local development.

Creates the tables when asked, clears them, inserts the sample menu and
generates random orders whose line prices are snapshots of the inserted items.
"""

import logging
import random
import uuid
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_admin_service.models.menu_models import MenuItem
from restaurant_admin_service.models.order_models import Order, OrderLine, OrderStatusEnum
from restaurant_admin_service.repositories.store_repositories import (
    MenuItemRepository,
    OrderRepository,
)
from restaurant_admin_service.services.order_service import generate_order_number
from restaurant_admin_service.validation import validate_menu_item

logger = logging.getLogger(__name__)

SAMPLE_ORDER_COUNT = 10

CUSTOMER_NAMES = ["John Doe", "Jane Smith", "Bob Johnson", "Alice Williams", "Charlie Brown"]

SAMPLE_MENU_ITEMS: list[dict[str, Any]] = [
    {
        "name": "Caesar Salad",
        "description": "Fresh romaine lettuce with classic Caesar dressing",
        "category": "Appetizer",
        "price": "8.99",
        "ingredients": ["romaine lettuce", "parmesan", "croutons", "caesar dressing"],
        "preparationTime": 10,
        "imageUrl": "https://images.unsplash.com/photo-1546793665-c74683f339c1",
    },
    {
        "name": "Chicken Wings",
        "description": "Crispy wings with your choice of sauce",
        "category": "Appetizer",
        "price": "12.99",
        "ingredients": ["chicken wings", "buffalo sauce", "ranch dressing"],
        "preparationTime": 20,
        "imageUrl": "https://images.unsplash.com/photo-1608039755401-742074f0548d",
    },
    {
        "name": "Mozzarella Sticks",
        "description": "Golden fried mozzarella with marinara sauce",
        "category": "Appetizer",
        "price": "9.99",
        "ingredients": ["mozzarella cheese", "breadcrumbs", "marinara sauce"],
        "preparationTime": 15,
        "imageUrl": "https://images.unsplash.com/photo-1531749668029-2db88e4276c7",
    },
    {
        "name": "Grilled Salmon",
        "description": "Fresh Atlantic salmon with lemon butter sauce",
        "category": "Main Course",
        "price": "24.99",
        "ingredients": ["salmon", "lemon", "butter", "herbs"],
        "preparationTime": 25,
        "imageUrl": "https://images.unsplash.com/photo-1467003909585-2f8a72700288",
    },
    {
        "name": "Ribeye Steak",
        "description": "12oz premium ribeye cooked to perfection",
        "category": "Main Course",
        "price": "32.99",
        "ingredients": ["ribeye steak", "garlic", "rosemary", "butter"],
        "preparationTime": 30,
        "imageUrl": "https://images.unsplash.com/photo-1558030006-450675393462",
    },
    {
        "name": "Chicken Parmesan",
        "description": "Breaded chicken breast with marinara and mozzarella",
        "category": "Main Course",
        "price": "18.99",
        "ingredients": ["chicken breast", "marinara sauce", "mozzarella", "parmesan"],
        "preparationTime": 25,
        "imageUrl": "https://images.unsplash.com/photo-1632778149955-e80f8ceca2e8",
    },
    {
        "name": "Vegetable Pasta",
        "description": "Penne pasta with seasonal vegetables",
        "category": "Main Course",
        "price": "16.99",
        "ingredients": ["penne pasta", "zucchini", "bell peppers", "tomatoes", "olive oil"],
        "preparationTime": 20,
        "imageUrl": "https://images.unsplash.com/photo-1621996346565-e3dbc646d9a9",
    },
    {
        "name": "Margherita Pizza",
        "description": "Classic pizza with fresh mozzarella and basil",
        "category": "Main Course",
        "price": "14.99",
        "ingredients": ["pizza dough", "tomato sauce", "mozzarella", "basil"],
        "preparationTime": 18,
        "imageUrl": "https://images.unsplash.com/photo-1574071318508-1cdbab80d002",
    },
    {
        "name": "Chocolate Lava Cake",
        "description": "Warm chocolate cake with molten center",
        "category": "Dessert",
        "price": "8.99",
        "ingredients": ["chocolate", "eggs", "flour", "butter", "vanilla ice cream"],
        "preparationTime": 15,
        "imageUrl": "https://images.unsplash.com/photo-1624353365286-3f8d62daad51",
    },
    {
        "name": "Tiramisu",
        "description": "Classic Italian dessert with coffee and mascarpone",
        "category": "Dessert",
        "price": "9.99",
        "ingredients": ["ladyfingers", "mascarpone", "espresso", "cocoa powder"],
        "preparationTime": 10,
        "imageUrl": "https://images.unsplash.com/photo-1571877227200-a0d98ea607e9",
    },
    {
        "name": "Cheesecake",
        "description": "New York style cheesecake with berry compote",
        "category": "Dessert",
        "price": "8.99",
        "ingredients": ["cream cheese", "graham crackers", "berries", "sugar"],
        "preparationTime": 12,
        "imageUrl": "https://images.unsplash.com/photo-1533134242728-2941447084bf",
    },
    {
        "name": "Ice Cream Sundae",
        "description": "Three scoops with your choice of toppings",
        "category": "Dessert",
        "price": "6.99",
        "ingredients": ["vanilla ice cream", "chocolate sauce", "whipped cream", "cherry"],
        "preparationTime": 5,
        "imageUrl": "https://images.unsplash.com/photo-1563805042-7684c019e1cb",
    },
    {
        "name": "Fresh Lemonade",
        "description": "Homemade lemonade with fresh lemons",
        "category": "Beverage",
        "price": "3.99",
        "ingredients": ["lemon", "sugar", "water", "ice"],
        "preparationTime": 5,
        "imageUrl": "https://images.unsplash.com/photo-1523677011781-c91d1bbe2f9b",
    },
    {
        "name": "Iced Coffee",
        "description": "Cold brew coffee over ice",
        "category": "Beverage",
        "price": "4.99",
        "ingredients": ["coffee", "ice", "milk", "sugar"],
        "preparationTime": 3,
        "imageUrl": "https://images.unsplash.com/photo-1517487881594-2787fef5ebf7",
    },
    {
        "name": "Mango Smoothie",
        "description": "Tropical mango smoothie with yogurt",
        "category": "Beverage",
        "price": "5.99",
        "ingredients": ["mango", "yogurt", "honey", "ice"],
        "preparationTime": 5,
        "imageUrl": "https://images.unsplash.com/photo-1505252585461-04db1eb84625",
    },
]


def ensure_table(dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
    """Create a table keyed by ``id`` unless it already exists.

    Args:
        dynamodb_resource: Boto3 DynamoDB resource
        table_name: Name of the table to create
    """
    try:
        table = dynamodb_resource.create_table(
            TableName=table_name,
            KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") == "ResourceInUseException":
            logger.info(f"Table {table_name} already exists")
            return
        raise

    table.wait_until_exists()
    logger.info(f"Created table {table_name}")


def clear_table(table: Table) -> int:
    """Delete every record in a table.

    Returns:
        int: Number of deleted records
    """
    keys: list[dict[str, Any]] = []
    response = table.scan(ProjectionExpression="id")
    keys.extend(response.get("Items", []))
    while "LastEvaluatedKey" in response:
        response = table.scan(
            ProjectionExpression="id", ExclusiveStartKey=response["LastEvaluatedKey"]
        )
        keys.extend(response.get("Items", []))

    with table.batch_writer() as batch:
        for key in keys:
            batch.delete_item(Key={"id": key["id"]})

    return len(keys)


def build_menu_items(now: datetime) -> list[MenuItem]:
    """Validate the sample menu and turn it into stored records."""
    items = []
    for payload in SAMPLE_MENU_ITEMS:
        data = validate_menu_item(payload)
        items.append(
            MenuItem(id=uuid.uuid4().hex, **data.model_dump(), created_at=now, updated_at=now)
        )
    return items


def build_sample_orders(
    menu_items: list[MenuItem],
    count: int = SAMPLE_ORDER_COUNT,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> list[Order]:
    """Generate random orders over the given menu items.

    Each order has one to three lines with quantities between one and three,
    a random status, customer and table. Line prices are copied from the menu
    item and the total is the sum rounded to cents.

    Args:
        menu_items: Items to sample from (must not be empty)
        count: Number of orders to generate
        rng: Random source, seeded in tests
        now: Creation time of the newest order

    Returns:
        Generated orders, newest first
    """
    rng = rng or random.Random()
    now = now or datetime.now(UTC)
    statuses = list(OrderStatusEnum)
    orders = []

    for index in range(count):
        lines = []
        for _ in range(rng.randint(1, 3)):
            item = rng.choice(menu_items)
            lines.append(
                OrderLine(menu_item_id=item.id, quantity=rng.randint(1, 3), price=item.price)
            )

        total = sum((line.line_total for line in lines), Decimal("0")).quantize(Decimal("0.01"))
        created_at = now - timedelta(minutes=index)
        orders.append(
            Order(
                id=uuid.uuid4().hex,
                order_number=generate_order_number(created_at),
                items=lines,
                total_amount=total,
                status=rng.choice(statuses),
                customer_name=rng.choice(CUSTOMER_NAMES),
                table_number=rng.randint(1, 20),
                created_at=created_at,
                updated_at=created_at,
            )
        )

    return orders


def seed_database(
    dynamodb_resource: DynamoDBServiceResource,
    menu_table: str,
    orders_table: str,
    create_tables: bool = False,
    rng: random.Random | None = None,
) -> tuple[int, int]:
    """Replace the contents of both tables with sample data.

    Args:
        dynamodb_resource: Boto3 DynamoDB resource
        menu_table: Menu items table name
        orders_table: Orders table name
        create_tables: Create missing tables first (local DynamoDB)
        rng: Random source for order generation

    Returns:
        Tuple of (menu items created, orders created)
    """
    if create_tables:
        ensure_table(dynamodb_resource, menu_table)
        ensure_table(dynamodb_resource, orders_table)

    menu_repository = MenuItemRepository(dynamodb_resource=dynamodb_resource, table_name=menu_table)
    order_repository = OrderRepository(
        dynamodb_resource=dynamodb_resource, table_name=orders_table
    )

    cleared_items = clear_table(menu_repository.table)
    cleared_orders = clear_table(order_repository.table)
    logger.info(f"Cleared existing data ({cleared_items} menu items, {cleared_orders} orders)")

    menu_items = build_menu_items(datetime.now(UTC))
    for item in menu_items:
        menu_repository.create_item(item)
    logger.info(f"{len(menu_items)} menu items created")

    orders = build_sample_orders(menu_items, rng=rng)
    for order in orders:
        order_repository.create_order(order)
    logger.info(f"{len(orders)} orders created")

    return len(menu_items), len(orders)
