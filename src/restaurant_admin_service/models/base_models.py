"""Shared pydantic building blocks for API and storage models."""

from decimal import Decimal, DecimalException
from typing import Annotated, Any

from boto3.dynamodb.types import DYNAMODB_CONTEXT
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def decimal_to_number(value: Decimal) -> int | float:
    """Convert a stored Decimal to a JSON number.

    Args:
        value: Decimal value read from DynamoDB or parsed from a request

    Returns:
        int when the value is integral, float otherwise
    """
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# DynamoDB only accepts Decimal for numbers; the dashboard expects plain JSON numbers.
JsonDecimal = Annotated[
    Decimal, PlainSerializer(decimal_to_number, return_type=int | float, when_used="json")
]


def _reject_bool(value: Any) -> Any:
    # JSON true/false would otherwise coerce to 1/0
    if isinstance(value, bool):
        raise ValueError("must be a number")
    return value


def _float_as_text(value: Any) -> Any:
    # Decimal(0.1) keeps binary noise that DynamoDB rejects as inexact
    if isinstance(value, float):
        return str(value)
    return value


def check_dynamodb_number(value: Decimal | int) -> Decimal | int:
    """Reject numbers DynamoDB cannot store exactly.

    DynamoDB numbers carry at most 38 significant digits with a magnitude
    between 1e-130 and 1e125. boto3 serializes with ``DYNAMODB_CONTEXT``,
    which traps rounding and overflow instead of storing an approximation.

    Raises:
        ValueError: If the value does not fit
    """
    try:
        DYNAMODB_CONTEXT.create_decimal(value)
    except DecimalException as e:
        raise ValueError(
            "must have at most 38 significant digits and a magnitude between 1e-130 and 1e125"
        ) from e
    return value


DecimalInput = Annotated[
    Decimal,
    BeforeValidator(_float_as_text),
    BeforeValidator(_reject_bool),
    AfterValidator(check_dynamodb_number),
]
IntInput = Annotated[int, BeforeValidator(_reject_bool), AfterValidator(check_dynamodb_number)]


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_response(self) -> dict:
        """Serialize for a JSON response body."""
        return self.model_dump(mode="json", by_alias=True)
