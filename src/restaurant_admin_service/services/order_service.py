"""Order service for order intake, status updates and paginated listing."""

import logging
import math
import uuid
from collections.abc import Sequence
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, TypeVar

from restaurant_admin_service.exceptions import NotFoundError, ValidationError
from restaurant_admin_service.models.order_models import (
    Order,
    OrderInput,
    OrderLine,
    OrderPage,
    OrderStatusEnum,
    PopulatedOrder,
)
from restaurant_admin_service.observability import traced
from restaurant_admin_service.observability.metrics import (
    record_order_created,
    record_status_change,
)
from restaurant_admin_service.repositories.store_repositories import (
    MenuItemRepository,
    OrderRepository,
)
from restaurant_admin_service.validation import (
    validate_order,
    validate_pagination,
    validate_status,
)

logger = logging.getLogger(__name__)

ORDER_NOT_FOUND = "Order not found"
DEFAULT_PAGE_SIZE = 10
TOTAL_TOLERANCE = Decimal("0.01")

T = TypeVar("T")


def generate_order_number(created_at: datetime) -> str:
    """Build a human-readable order number.

    Format is ``ORD-<epoch millis>-<8 hex chars>``; the random suffix keeps
    numbers unique for orders created in the same millisecond.
    """
    millis = int(created_at.timestamp() * 1000)
    return f"ORD-{millis}-{uuid.uuid4().hex[:8].upper()}"


def paginate(records: Sequence[T], page: int, page_size: int) -> tuple[list[T], int]:
    """Slice one page out of a sorted sequence.

    Args:
        records: All matching records, already sorted
        page: 1-based page number
        page_size: Records per page

    Returns:
        Tuple of (records on the page, total number of pages)
    """
    skip = (page - 1) * page_size
    total_pages = math.ceil(len(records) / page_size)
    return list(records[skip : skip + page_size]), total_pages


class OrderService:
    """Service for orders.

    Orders snapshot each line's price at creation time. After creation only
    the status is mutated, and any status may follow any other.
    """

    def __init__(
        self, order_repository: OrderRepository, menu_repository: MenuItemRepository
    ) -> None:
        """Initialize the OrderService.

        Args:
            order_repository: Repository for order records
            menu_repository: Repository used to resolve menu item references
        """
        self.order_repository = order_repository
        self.menu_repository = menu_repository

    @traced("orders.create_order")
    async def create_order(self, payload: Any) -> PopulatedOrder:
        """Validate and store a new order.

        Args:
            payload: Raw request body

        Returns:
            The stored order with menu items resolved

        Raises:
            ValidationError: If the payload is invalid, references unknown menu
                items, or its total does not match its lines
            ConflictError: If the generated order ID already exists
        """
        data = validate_order(payload)
        self._check_total(data)

        catalog = self.menu_repository.get_items_by_ids([line.menu_item for line in data.items])
        for line in data.items:
            if line.menu_item not in catalog:
                raise ValidationError(f"Menu item {line.menu_item} not found")

        now = datetime.now(UTC)
        order = Order(
            id=uuid.uuid4().hex,
            order_number=generate_order_number(now),
            items=[
                OrderLine(menu_item_id=line.menu_item, quantity=line.quantity, price=line.price)
                for line in data.items
            ],
            total_amount=data.total_amount,
            status=data.status or OrderStatusEnum.PENDING,
            customer_name=data.customer_name,
            table_number=data.table_number,
            created_at=now,
            updated_at=now,
        )
        self.order_repository.create_order(order)
        record_order_created(order.status.value, order.total_amount)

        logger.info(f"Created order {order.order_number} with {len(order.items)} line(s)")
        return PopulatedOrder.from_order(order, catalog)

    @traced("orders.get_order", record_args=("order_id",))
    async def get_order(self, order_id: str) -> PopulatedOrder:
        """Get a single order with menu items resolved.

        Raises:
            NotFoundError: If the order does not exist
        """
        order = self.order_repository.get_order(order_id)
        if order is None:
            raise NotFoundError(ORDER_NOT_FOUND)
        return self._populate([order])[0]

    @traced("orders.update_status", record_args=("order_id", "status"))
    async def update_status(self, order_id: str, status: Any) -> PopulatedOrder:
        """Set the status of an order.

        Args:
            order_id: Order identifier
            status: Requested status value

        Returns:
            The updated order with menu items resolved

        Raises:
            ValidationError: If the status is missing or invalid (nothing is written)
            NotFoundError: If the order does not exist
        """
        new_status = validate_status(status)

        order = self.order_repository.update_status(order_id, new_status, datetime.now(UTC))
        if order is None:
            raise NotFoundError(ORDER_NOT_FOUND)
        record_status_change(new_status.value)

        logger.info(f"Order {order.order_number} moved to {new_status.value}")
        return self._populate([order])[0]

    @traced("orders.list_orders")
    async def list_orders(
        self,
        status: str | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> OrderPage:
        """List orders newest first, one page at a time.

        Args:
            status: Optional exact status filter
            page: 1-based page number
            page_size: Orders per page

        Returns:
            OrderPage with the page's orders and pagination totals

        Raises:
            ValidationError: If page or page_size is not positive
        """
        validate_pagination(page, page_size)

        orders = self.order_repository.list_orders(status or None)
        page_orders, total_pages = paginate(orders, page, page_size)

        return OrderPage(
            items=self._populate(page_orders),
            total_count=len(orders),
            page=page,
            total_pages=total_pages,
        )

    def _populate(self, orders: list[Order]) -> list[PopulatedOrder]:
        item_ids = [line.menu_item_id for order in orders for line in order.items]
        catalog = self.menu_repository.get_items_by_ids(item_ids) if item_ids else {}
        return [PopulatedOrder.from_order(order, catalog) for order in orders]

    @staticmethod
    def _check_total(data: OrderInput) -> None:
        expected = sum((line.price * line.quantity for line in data.items), Decimal("0"))
        if abs(expected - data.total_amount) > TOTAL_TOLERANCE:
            raise ValidationError(
                f'"totalAmount" must equal the sum of item price * quantity ({expected})'
            )
