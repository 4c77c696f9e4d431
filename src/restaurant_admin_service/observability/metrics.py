"""Custom metrics for the restaurant admin service."""

from decimal import Decimal

from opentelemetry import metrics

# Get meter for admin service
meter = metrics.get_meter("restaurant-admin-svc")

orders_created_counter = meter.create_counter(
    name="orders_created_total",
    description="Total number of orders created by initial status",
    unit="1",
)

order_value_histogram = meter.create_histogram(
    name="order_total_amount",
    description="Total amount of created orders",
    unit="1",
)

order_status_change_counter = meter.create_counter(
    name="order_status_changes_total",
    description="Total number of order status updates by new status",
    unit="1",
)

menu_item_change_counter = meter.create_counter(
    name="menu_item_changes_total",
    description="Total number of catalog writes by operation",
    unit="1",
)

storage_error_counter = meter.create_counter(
    name="storage_errors_total",
    description="Total number of failed DynamoDB operations",
    unit="1",
)


def record_order_created(status: str, total_amount: Decimal) -> None:
    """Record a newly created order.

    Args:
        status: Initial order status
        total_amount: Order total
    """
    orders_created_counter.add(1, {"status": status})
    order_value_histogram.record(float(total_amount))


def record_status_change(status: str) -> None:
    """Record an order status update.

    Args:
        status: The status the order moved to
    """
    order_status_change_counter.add(1, {"status": status})


def record_menu_change(operation: str) -> None:
    """Record a catalog write (create, update, delete, toggle)."""
    menu_item_change_counter.add(1, {"operation": operation})


def record_storage_error(operation: str) -> None:
    """Record a failed storage operation."""
    storage_error_counter.add(1, {"operation": operation})
