"""Order and sales report models.

Order lines keep a snapshot of the menu item price at order time. The
populated variants resolve each line's menu item reference for display.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from restaurant_admin_service.models.base_models import (
    CamelModel,
    DecimalInput,
    IntInput,
    JsonDecimal,
)
from restaurant_admin_service.models.menu_models import MenuCategory, MenuItem


class OrderStatusEnum(str, Enum):
    """Enumeration of order status values."""

    PENDING = "Pending"
    PREPARING = "Preparing"
    READY = "Ready"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class OrderLine(CamelModel):
    """A single line of an order with its price snapshot."""

    menu_item_id: str = Field(..., description="Referenced menu item")
    quantity: int = Field(..., description="Ordered quantity", ge=1)
    price: JsonDecimal = Field(..., description="Unit price at order time", ge=0)

    @property
    def line_total(self) -> Decimal:
        """Price multiplied by quantity."""
        return self.price * self.quantity

    def to_dynamodb_item(self) -> dict[str, Any]:
        return {
            "menu_item_id": self.menu_item_id,
            "quantity": self.quantity,
            "price": self.price,
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "OrderLine":
        return cls(
            menu_item_id=item["menu_item_id"],
            quantity=int(item["quantity"]),
            price=Decimal(str(item["price"])),
        )


class Order(CamelModel):
    """Order stored in the orders table.

    Only ``status`` and ``updated_at`` change after creation.
    """

    id: str = Field(..., description="Unique order identifier")
    order_number: str = Field(..., description="Human-readable order number")
    items: list[OrderLine] = Field(..., description="Ordered lines", min_length=1)
    total_amount: JsonDecimal = Field(..., description="Order total", ge=0)
    status: OrderStatusEnum = Field(default=OrderStatusEnum.PENDING, description="Order status")
    customer_name: str = Field(..., description="Customer name", min_length=1)
    table_number: int | None = Field(None, description="Table number", ge=1)
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last modification timestamp")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "id": self.id,
            "order_number": self.order_number,
            "items": [line.to_dynamodb_item() for line in self.items],
            "total_amount": self.total_amount,
            "status": self.status.value,
            "customer_name": self.customer_name,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if self.table_number is not None:
            item["table_number"] = self.table_number

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Order":
        """Create Order from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Order: Parsed model instance
        """
        data: dict[str, Any] = {
            "id": item["id"],
            "order_number": item["order_number"],
            "items": [OrderLine.from_dynamodb_item(line) for line in item["items"]],
            "total_amount": Decimal(str(item["total_amount"])),
            "status": OrderStatusEnum(item["status"]),
            "customer_name": item["customer_name"],
            "created_at": datetime.fromisoformat(item["created_at"]),
            "updated_at": datetime.fromisoformat(item["updated_at"]),
        }

        if item.get("table_number") is not None:
            data["table_number"] = int(item["table_number"])

        return cls(**data)


class PopulatedOrderLine(CamelModel):
    """Order line with its menu item resolved; ``menu_item`` is None once deleted."""

    menu_item_id: str
    menu_item: MenuItem | None = None
    quantity: int
    price: JsonDecimal


class PopulatedOrder(CamelModel):
    """Order returned to clients with resolved menu items."""

    id: str
    order_number: str
    items: list[PopulatedOrderLine]
    total_amount: JsonDecimal
    status: OrderStatusEnum
    customer_name: str
    table_number: int | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order: Order, catalog: dict[str, MenuItem]) -> "PopulatedOrder":
        """Resolve line references against a catalog lookup.

        Args:
            order: Stored order
            catalog: Menu items keyed by id

        Returns:
            PopulatedOrder: Order with each line's menu item attached
        """
        return cls(
            id=order.id,
            order_number=order.order_number,
            items=[
                PopulatedOrderLine(
                    menu_item_id=line.menu_item_id,
                    menu_item=catalog.get(line.menu_item_id),
                    quantity=line.quantity,
                    price=line.price,
                )
                for line in order.items
            ],
            total_amount=order.total_amount,
            status=order.status,
            customer_name=order.customer_name,
            table_number=order.table_number,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderLineInput(CamelModel):
    """Validated order line in a create request."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True
    )

    menu_item: str = Field(..., min_length=1)
    quantity: IntInput = Field(..., ge=1)
    price: DecimalInput = Field(..., ge=0)


class OrderInput(CamelModel):
    """Validated payload for order creation."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    items: list[OrderLineInput] = Field(..., min_length=1)
    total_amount: DecimalInput = Field(..., ge=0)
    customer_name: str = Field(..., min_length=1)
    table_number: IntInput | None = Field(None, ge=1)
    status: OrderStatusEnum | None = None


@dataclass
class OrderPage:
    """One page of orders.

    Attributes:
        items: Orders on this page
        total_count: Number of orders matching the filter
        page: 1-based page number
        total_pages: ceil(total_count / page_size)
    """

    items: list[PopulatedOrder]
    total_count: int
    page: int
    total_pages: int


class TopSeller(CamelModel):
    """A row of the top-sellers report."""

    menu_item_id: str
    name: str
    category: MenuCategory
    total_quantity: int
    total_revenue: JsonDecimal
