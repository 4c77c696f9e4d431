"""Request validation.

Every function here is pure: it inspects the payload and either returns a
validated model or raises ValidationError with the first violated rule.
Services call these before touching storage.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from restaurant_admin_service.exceptions import ValidationError
from restaurant_admin_service.models.base_models import DecimalInput
from restaurant_admin_service.models.menu_models import MenuItemInput
from restaurant_admin_service.models.order_models import OrderInput, OrderStatusEnum

VALID_STATUSES = [status.value for status in OrderStatusEnum]

_price_adapter: TypeAdapter[Decimal] = TypeAdapter(DecimalInput)


def format_location(loc: tuple[Any, ...]) -> str:
    """Render a pydantic error location as ``items[0].quantity``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path


def first_error_message(exc: PydanticValidationError) -> str:
    """Build a human-readable message from the first pydantic error.

    Args:
        exc: Validation error raised by a pydantic model

    Returns:
        str: Message naming the offending field and the violated rule
    """
    error = exc.errors()[0]
    field = format_location(tuple(error.get("loc", ())))
    if error.get("type") == "missing":
        return f'"{field}" is required'

    message = error.get("msg", "is invalid").removeprefix("Value error, ")
    if not field:
        return message
    return f'"{field}": {message}'


def _validate_model(model: type[BaseModel], payload: Any) -> Any:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(first_error_message(e)) from e


def validate_menu_item(payload: Any) -> MenuItemInput:
    """Validate a menu item create/update payload."""
    result: MenuItemInput = _validate_model(MenuItemInput, payload)
    return result


def validate_order(payload: Any) -> OrderInput:
    """Validate an order create payload."""
    result: OrderInput = _validate_model(OrderInput, payload)
    return result


def validate_status(value: Any) -> OrderStatusEnum:
    """Validate a requested order status.

    Raises:
        ValidationError: If the status is missing or not one of the enumerated values
    """
    if value is None or value == "":
        raise ValidationError("Status is required")
    if value not in VALID_STATUSES:
        raise ValidationError("Invalid status")
    return OrderStatusEnum(value)


def validate_search_query(query: str | None) -> str:
    """Validate a free-text search query."""
    if query is None or not query.strip():
        raise ValidationError("Search query is required")
    return query.strip()


def validate_pagination(page: int, page_size: int) -> None:
    """Validate 1-based page number and page size."""
    if page < 1:
        raise ValidationError('"page" must be greater than or equal to 1')
    if page_size < 1:
        raise ValidationError('"limit" must be greater than or equal to 1')


def validate_price_bound(name: str, value: str | None) -> Decimal | None:
    """Parse a minPrice/maxPrice query value; blank means no bound."""
    if value is None or not value.strip():
        return None
    try:
        return _price_adapter.validate_python(value.strip())
    except PydanticValidationError as e:
        message = e.errors()[0].get("msg", "is invalid").removeprefix("Value error, ")
        raise ValidationError(f'"{name}": {message}') from e
