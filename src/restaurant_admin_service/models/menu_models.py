"""Menu catalog models.

MenuItem is the stored catalog record. MenuItemInput is the validated payload
accepted by create and update requests; it never carries system-managed fields.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import AnyUrl, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from restaurant_admin_service.models.base_models import CamelModel, DecimalInput, JsonDecimal

_URL_ADAPTER = TypeAdapter(AnyUrl)


class MenuCategory(str, Enum):
    """Enumeration of menu categories."""

    APPETIZER = "Appetizer"
    MAIN_COURSE = "Main Course"
    DESSERT = "Dessert"
    BEVERAGE = "Beverage"


class MenuItem(CamelModel):
    """Menu item stored in the catalog table."""

    id: str = Field(..., description="Unique identifier for the menu item")
    name: str = Field(..., description="Item name", min_length=1)
    description: str | None = Field(None, description="Item description")
    category: MenuCategory = Field(..., description="Menu category")
    price: JsonDecimal = Field(..., description="Item price", ge=0)
    ingredients: list[str] = Field(default_factory=list, description="Ordered ingredient list")
    is_available: bool = Field(default=True, description="Whether item can be ordered")
    preparation_time: JsonDecimal | None = Field(
        None, description="Preparation time in minutes", ge=0
    )
    image_url: str = Field(default="", description="URL to item image")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last modification timestamp")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "price": self.price,
            "ingredients": list(self.ingredients),
            "is_available": self.is_available,
            "image_url": self.image_url,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if self.description is not None:
            item["description"] = self.description

        if self.preparation_time is not None:
            item["preparation_time"] = self.preparation_time

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "MenuItem":
        """Create MenuItem from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            MenuItem: Parsed model instance
        """
        data: dict[str, Any] = {
            "id": item["id"],
            "name": item["name"],
            "category": MenuCategory(item["category"]),
            "price": Decimal(str(item["price"])),
            "ingredients": list(item.get("ingredients", [])),
            "is_available": item.get("is_available", True),
            "image_url": item.get("image_url", ""),
            "created_at": datetime.fromisoformat(item["created_at"]),
            "updated_at": datetime.fromisoformat(item["updated_at"]),
        }

        if "description" in item:
            data["description"] = item["description"]

        if item.get("preparation_time") is not None:
            data["preparation_time"] = Decimal(str(item["preparation_time"]))

        return cls(**data)

    def matches_text(self, query: str) -> bool:
        """Case-insensitive substring match on name, description or any ingredient."""
        needle = query.lower()
        if needle in self.name.lower():
            return True
        if self.description and needle in self.description.lower():
            return True
        return any(needle in ingredient.lower() for ingredient in self.ingredients)


class MenuItemInput(CamelModel):
    """Validated create/update payload for a menu item."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    name: str = Field(..., min_length=1)
    description: str | None = None
    category: MenuCategory
    price: DecimalInput = Field(..., ge=0)
    ingredients: list[str] = Field(default_factory=list)
    is_available: bool = True
    preparation_time: DecimalInput | None = Field(None, ge=0)
    image_url: str = ""

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, value: str) -> str:
        """Accept an empty string or a syntactically valid URI."""
        if value:
            try:
                _URL_ADAPTER.validate_python(value)
            except PydanticValidationError:
                raise ValueError("must be a valid uri") from None
        return value


@dataclass
class MenuFilter:
    """Filter options for listing menu items. None imposes no constraint.

    Attributes:
        category: Exact category match
        is_available: Availability flag
        min_price: Inclusive lower price bound
        max_price: Inclusive upper price bound
    """

    category: str | None = None
    is_available: bool | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
