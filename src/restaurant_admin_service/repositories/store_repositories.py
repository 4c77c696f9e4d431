"""DynamoDB repository classes for the menu catalog and orders.

Lookups of a missing record return None (or False for deletes), following the
simple-return-value convention for expected outcomes. Storage failures are
logged and raised as UnavailableError so the API layer can answer with a
generic 500 instead of leaking driver details.
"""

import logging
from datetime import datetime
from typing import Any

from boto3.dynamodb.conditions import Attr, ConditionBase
from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_admin_service.exceptions import ConflictError, UnavailableError
from restaurant_admin_service.models.menu_models import MenuFilter, MenuItem
from restaurant_admin_service.models.order_models import Order, OrderLine, OrderStatusEnum
from restaurant_admin_service.observability.metrics import record_storage_error

logger = logging.getLogger(__name__)

# DynamoDB BatchGetItem accepts at most 100 keys per request.
BATCH_GET_LIMIT = 100
MAX_UNPROCESSED_ATTEMPTS = 5


def _is_conditional_failure(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"


def _storage_failure(operation: str, error: Exception) -> UnavailableError:
    logger.error(f"DynamoDB operation {operation} failed: {error}")
    record_storage_error(operation)
    return UnavailableError(operation, error)


def _scan_all(table: Table, **kwargs: Any) -> list[dict[str, Any]]:
    """Scan a table following LastEvaluatedKey until exhausted."""
    response = table.scan(**kwargs)
    items = list(response.get("Items", []))

    while "LastEvaluatedKey" in response:
        response = table.scan(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
        items.extend(response.get("Items", []))

    return items


class MenuItemRepository:
    """Repository for menu item CRUD operations.

    Manages menu item records in DynamoDB with ``id`` as partition key.
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def get_item(self, item_id: str) -> MenuItem | None:
        """Retrieve a menu item by ID.

        Args:
            item_id: Menu item identifier

        Returns:
            MenuItem if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"id": item_id})
        except (ClientError, BotoCoreError) as e:
            raise _storage_failure("get_menu_item", e) from e

        if "Item" not in response:
            return None

        return MenuItem.from_dynamodb_item(response["Item"])

    def create_item(self, item: MenuItem) -> None:
        """Insert a new menu item.

        Args:
            item: MenuItem to insert

        Raises:
            ConflictError: If an item with the same ID already exists
        """
        try:
            self.table.put_item(
                Item=item.to_dynamodb_item(),
                ConditionExpression=Attr("id").not_exists(),
            )
        except ClientError as e:
            if _is_conditional_failure(e):
                raise ConflictError(f"Menu item {item.id} already exists") from e
            raise _storage_failure("create_menu_item", e) from e
        except BotoCoreError as e:
            raise _storage_failure("create_menu_item", e) from e

    def replace_item(self, item: MenuItem) -> bool:
        """Overwrite an existing menu item.

        Args:
            item: MenuItem carrying the ID of the record to replace

        Returns:
            bool: True if replaced, False if no such item exists
        """
        try:
            self.table.put_item(
                Item=item.to_dynamodb_item(),
                ConditionExpression=Attr("id").exists(),
            )
            return True
        except ClientError as e:
            if _is_conditional_failure(e):
                return False
            raise _storage_failure("replace_menu_item", e) from e
        except BotoCoreError as e:
            raise _storage_failure("replace_menu_item", e) from e

    def delete_item(self, item_id: str) -> bool:
        """Delete a menu item.

        Args:
            item_id: Menu item identifier

        Returns:
            bool: True if deleted, False if no such item exists
        """
        try:
            self.table.delete_item(
                Key={"id": item_id},
                ConditionExpression=Attr("id").exists(),
            )
            return True
        except ClientError as e:
            if _is_conditional_failure(e):
                return False
            raise _storage_failure("delete_menu_item", e) from e
        except BotoCoreError as e:
            raise _storage_failure("delete_menu_item", e) from e

    def set_availability(
        self, item_id: str, is_available: bool, updated_at: datetime
    ) -> MenuItem | None:
        """Set the availability flag of a menu item.

        Args:
            item_id: Menu item identifier
            is_available: New availability flag
            updated_at: Modification timestamp

        Returns:
            The updated MenuItem, or None if no such item exists
        """
        try:
            response = self.table.update_item(
                Key={"id": item_id},
                UpdateExpression="SET #available = :available, #updated_at = :updated_at",
                ConditionExpression=Attr("id").exists(),
                ExpressionAttributeNames={
                    "#available": "is_available",
                    "#updated_at": "updated_at",
                },
                ExpressionAttributeValues={
                    ":available": is_available,
                    ":updated_at": updated_at.isoformat(),
                },
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if _is_conditional_failure(e):
                return None
            raise _storage_failure("set_menu_item_availability", e) from e
        except BotoCoreError as e:
            raise _storage_failure("set_menu_item_availability", e) from e

        return MenuItem.from_dynamodb_item(response["Attributes"])

    def list_items(self, menu_filter: MenuFilter | None = None) -> list[MenuItem]:
        """List menu items matching a filter, newest first.

        Args:
            menu_filter: Optional filter options

        Returns:
            list: Matching MenuItem objects sorted by creation time descending
        """
        scan_kwargs: dict[str, Any] = {}
        condition = self._build_condition(menu_filter or MenuFilter())
        if condition is not None:
            scan_kwargs["FilterExpression"] = condition

        try:
            raw_items = _scan_all(self.table, **scan_kwargs)
        except (ClientError, BotoCoreError) as e:
            raise _storage_failure("list_menu_items", e) from e

        items = [MenuItem.from_dynamodb_item(item) for item in raw_items]
        return sort_newest_first(items)

    def search_items(self, query: str) -> list[MenuItem]:
        """Case-insensitive substring search over name, description and ingredients.

        DynamoDB ``contains`` is case-sensitive, so matching happens after the scan.

        Args:
            query: Non-empty search text

        Returns:
            list: Matching MenuItem objects, newest first
        """
        return [item for item in self.list_items() if item.matches_text(query)]

    def get_items_by_ids(self, item_ids: list[str]) -> dict[str, MenuItem]:
        """Fetch several menu items at once.

        Missing IDs are simply absent from the result.

        Args:
            item_ids: Menu item identifiers (duplicates allowed)

        Returns:
            dict: MenuItem objects keyed by ID
        """
        unique_ids = list(dict.fromkeys(item_ids))
        found: dict[str, MenuItem] = {}

        for start in range(0, len(unique_ids), BATCH_GET_LIMIT):
            chunk = unique_ids[start : start + BATCH_GET_LIMIT]
            request: dict[str, Any] = {self.table_name: {"Keys": [{"id": i} for i in chunk]}}

            for _attempt in range(MAX_UNPROCESSED_ATTEMPTS):
                try:
                    response = self.dynamodb.batch_get_item(RequestItems=request)
                except (ClientError, BotoCoreError) as e:
                    raise _storage_failure("batch_get_menu_items", e) from e

                for raw in response.get("Responses", {}).get(self.table_name, []):
                    item = MenuItem.from_dynamodb_item(raw)
                    found[item.id] = item

                request = response.get("UnprocessedKeys") or {}
                if not request:
                    break
            else:
                raise _storage_failure(
                    "batch_get_menu_items", RuntimeError("Unprocessed keys remained after retries")
                )

        return found

    def _build_condition(self, menu_filter: MenuFilter) -> ConditionBase | None:
        conditions: list[ConditionBase] = []

        if menu_filter.category is not None:
            conditions.append(Attr("category").eq(menu_filter.category))

        if menu_filter.is_available is not None:
            conditions.append(Attr("is_available").eq(menu_filter.is_available))

        if menu_filter.min_price is not None:
            conditions.append(Attr("price").gte(menu_filter.min_price))

        if menu_filter.max_price is not None:
            conditions.append(Attr("price").lte(menu_filter.max_price))

        if not conditions:
            return None

        combined = conditions[0]
        for condition in conditions[1:]:
            combined = combined & condition
        return combined


class OrderRepository:
    """Repository for order operations.

    Manages order records in DynamoDB with ``id`` as partition key. Orders are
    never deleted; after creation only the status changes.
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def create_order(self, order: Order) -> None:
        """Insert a new order.

        Args:
            order: Order to insert

        Raises:
            ConflictError: If an order with the same ID already exists
        """
        try:
            self.table.put_item(
                Item=order.to_dynamodb_item(),
                ConditionExpression=Attr("id").not_exists(),
            )
        except ClientError as e:
            if _is_conditional_failure(e):
                raise ConflictError(f"Order {order.order_number} already exists") from e
            raise _storage_failure("create_order", e) from e
        except BotoCoreError as e:
            raise _storage_failure("create_order", e) from e

    def get_order(self, order_id: str) -> Order | None:
        """Retrieve an order by ID.

        Args:
            order_id: Order identifier

        Returns:
            Order if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"id": order_id})
        except (ClientError, BotoCoreError) as e:
            raise _storage_failure("get_order", e) from e

        if "Item" not in response:
            return None

        return Order.from_dynamodb_item(response["Item"])

    def update_status(
        self, order_id: str, status: OrderStatusEnum, updated_at: datetime
    ) -> Order | None:
        """Update the status of an order.

        Args:
            order_id: Order identifier
            status: New status
            updated_at: Modification timestamp

        Returns:
            The updated Order, or None if no such order exists
        """
        try:
            response = self.table.update_item(
                Key={"id": order_id},
                UpdateExpression="SET #status = :status, #updated_at = :updated_at",
                ConditionExpression=Attr("id").exists(),
                ExpressionAttributeNames={"#status": "status", "#updated_at": "updated_at"},
                ExpressionAttributeValues={
                    ":status": status.value,
                    ":updated_at": updated_at.isoformat(),
                },
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if _is_conditional_failure(e):
                return None
            raise _storage_failure("update_order_status", e) from e
        except BotoCoreError as e:
            raise _storage_failure("update_order_status", e) from e

        return Order.from_dynamodb_item(response["Attributes"])

    def list_orders(self, status: str | None = None) -> list[Order]:
        """List orders, optionally filtered by status, newest first.

        Args:
            status: Optional status value to match exactly

        Returns:
            list: Order objects sorted by creation time descending
        """
        scan_kwargs: dict[str, Any] = {}
        if status is not None:
            scan_kwargs["FilterExpression"] = Attr("status").eq(status)

        try:
            raw_items = _scan_all(self.table, **scan_kwargs)
        except (ClientError, BotoCoreError) as e:
            raise _storage_failure("list_orders", e) from e

        orders = [Order.from_dynamodb_item(item) for item in raw_items]
        return sort_newest_first(orders)

    def list_order_lines(self) -> list[OrderLine]:
        """Flatten the lines of every order regardless of status.

        Returns:
            list: One OrderLine per line item across all orders
        """
        try:
            raw_items = _scan_all(
                self.table,
                ProjectionExpression="#items",
                ExpressionAttributeNames={"#items": "items"},
            )
        except (ClientError, BotoCoreError) as e:
            raise _storage_failure("list_order_lines", e) from e

        return [
            OrderLine.from_dynamodb_item(line)
            for item in raw_items
            for line in item.get("items", [])
        ]


def sort_newest_first(records: list[Any]) -> list[Any]:
    """Sort records by created_at descending, ties broken by id descending."""
    return sorted(records, key=lambda record: (record.created_at, record.id), reverse=True)
