"""Menu service for catalog management."""

import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from restaurant_admin_service.exceptions import NotFoundError
from restaurant_admin_service.models.menu_models import MenuFilter, MenuItem
from restaurant_admin_service.observability import traced
from restaurant_admin_service.observability.metrics import record_menu_change
from restaurant_admin_service.repositories.store_repositories import MenuItemRepository
from restaurant_admin_service.validation import validate_menu_item, validate_search_query

logger = logging.getLogger(__name__)

MENU_ITEM_NOT_FOUND = "Menu item not found"


class MenuService:
    """Service for the menu catalog.

    Validates payloads before any write and turns missing records into
    NotFoundError so the API layer can answer with a 404.
    """

    def __init__(self, menu_repository: MenuItemRepository) -> None:
        """Initialize the MenuService.

        Args:
            menu_repository: Repository for menu item records
        """
        self.menu_repository = menu_repository

    @traced("menu.list_items")
    async def list_items(self, menu_filter: MenuFilter | None = None) -> list[MenuItem]:
        """List menu items, newest first.

        Args:
            menu_filter: Optional category, availability and price range filter

        Returns:
            List of matching menu items
        """
        return self.menu_repository.list_items(menu_filter)

    @traced("menu.search_items")
    async def search_items(self, query: str | None) -> list[MenuItem]:
        """Search menu items by name, description or ingredient.

        Args:
            query: Search text, matched case-insensitively as a substring

        Returns:
            List of matching menu items

        Raises:
            ValidationError: If the query is missing or blank
        """
        text = validate_search_query(query)
        return self.menu_repository.search_items(text)

    @traced("menu.get_item", record_args=("item_id",))
    async def get_item(self, item_id: str) -> MenuItem:
        """Get a single menu item.

        Raises:
            NotFoundError: If the item does not exist
        """
        item = self.menu_repository.get_item(item_id)
        if item is None:
            raise NotFoundError(MENU_ITEM_NOT_FOUND)
        return item

    @traced("menu.create_item")
    async def create_item(self, payload: Any) -> MenuItem:
        """Validate and store a new menu item.

        Args:
            payload: Raw request body

        Returns:
            The stored menu item

        Raises:
            ValidationError: If the payload violates the menu item schema
        """
        data = validate_menu_item(payload)
        now = datetime.now(UTC)

        item = MenuItem(
            id=uuid.uuid4().hex,
            **data.model_dump(),
            created_at=now,
            updated_at=now,
        )
        self.menu_repository.create_item(item)
        record_menu_change("create")

        logger.info(f"Created menu item {item.id} ({item.name})")
        return item

    @traced("menu.update_item", record_args=("item_id",))
    async def update_item(self, item_id: str, payload: Any) -> MenuItem:
        """Validate and apply an update to a menu item.

        Fields omitted from the payload keep their stored values; ``id`` and
        ``created_at`` never change.

        Raises:
            ValidationError: If the payload violates the menu item schema
            NotFoundError: If the item does not exist
        """
        data = validate_menu_item(payload)

        existing = self.menu_repository.get_item(item_id)
        if existing is None:
            raise NotFoundError(MENU_ITEM_NOT_FOUND)

        updated = existing.model_copy(
            update={**data.model_dump(exclude_unset=True), "updated_at": datetime.now(UTC)}
        )
        if not self.menu_repository.replace_item(updated):
            raise NotFoundError(MENU_ITEM_NOT_FOUND)
        record_menu_change("update")

        logger.info(f"Updated menu item {item_id}")
        return updated

    @traced("menu.delete_item", record_args=("item_id",))
    async def delete_item(self, item_id: str) -> None:
        """Delete a menu item. Orders referencing it are left untouched.

        Raises:
            NotFoundError: If the item does not exist
        """
        if not self.menu_repository.delete_item(item_id):
            raise NotFoundError(MENU_ITEM_NOT_FOUND)
        record_menu_change("delete")

        logger.info(f"Deleted menu item {item_id}")

    @traced("menu.toggle_availability", record_args=("item_id",))
    async def toggle_availability(self, item_id: str) -> MenuItem:
        """Flip the availability flag and return the updated record.

        Raises:
            NotFoundError: If the item does not exist
        """
        item = await self.get_item(item_id)

        updated = self.menu_repository.set_availability(
            item_id, not item.is_available, datetime.now(UTC)
        )
        if updated is None:
            raise NotFoundError(MENU_ITEM_NOT_FOUND)
        record_menu_change("toggle")

        logger.info(f"Menu item {item_id} availability set to {updated.is_available}")
        return updated
