"""Sales analytics over stored orders."""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal

from restaurant_admin_service.models.menu_models import MenuItem
from restaurant_admin_service.models.order_models import OrderLine, TopSeller
from restaurant_admin_service.observability import traced
from restaurant_admin_service.repositories.store_repositories import (
    MenuItemRepository,
    OrderRepository,
)

logger = logging.getLogger(__name__)

TOP_SELLERS_LIMIT = 5


def rank_top_sellers(
    lines: Iterable[OrderLine],
    catalog: Mapping[str, MenuItem],
    limit: int = TOP_SELLERS_LIMIT,
) -> list[TopSeller]:
    """Rank menu items by total ordered quantity.

    Lines of every order count, cancelled ones included. Groups whose menu
    item is missing from the catalog are dropped. Ties on quantity are broken
    by menu item ID ascending.

    Args:
        lines: Line items flattened across all orders
        catalog: Menu items keyed by ID
        limit: Number of rows to return

    Returns:
        Up to ``limit`` rows, highest quantity first
    """
    quantities: dict[str, int] = {}
    revenues: dict[str, Decimal] = {}

    for line in lines:
        quantities[line.menu_item_id] = quantities.get(line.menu_item_id, 0) + line.quantity
        revenues[line.menu_item_id] = (
            revenues.get(line.menu_item_id, Decimal("0")) + line.line_total
        )

    rows = [
        TopSeller(
            menu_item_id=item_id,
            name=catalog[item_id].name,
            category=catalog[item_id].category,
            total_quantity=quantity,
            total_revenue=revenues[item_id],
        )
        for item_id, quantity in quantities.items()
        if item_id in catalog
    ]
    rows.sort(key=lambda row: (-row.total_quantity, row.menu_item_id))
    return rows[:limit]


class AnalyticsService:
    """Read-only reports joining orders against the menu catalog."""

    def __init__(
        self, order_repository: OrderRepository, menu_repository: MenuItemRepository
    ) -> None:
        """Initialize the AnalyticsService.

        Args:
            order_repository: Repository for order records
            menu_repository: Repository used to join menu item details
        """
        self.order_repository = order_repository
        self.menu_repository = menu_repository

    @traced("analytics.top_sellers")
    async def top_sellers(self, limit: int = TOP_SELLERS_LIMIT) -> list[TopSeller]:
        """Top-selling menu items by quantity across all orders.

        Args:
            limit: Number of rows to return

        Returns:
            List of TopSeller rows
        """
        lines = self.order_repository.list_order_lines()
        if not lines:
            return []

        catalog = self.menu_repository.get_items_by_ids([line.menu_item_id for line in lines])
        rows = rank_top_sellers(lines, catalog, limit)

        logger.debug(f"Top sellers computed from {len(lines)} order line(s)")
        return rows
