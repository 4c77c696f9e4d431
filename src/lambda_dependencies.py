"""Shared dependency factory for the Lambda handler.

Dependencies are created once per Lambda container and reused across
invocations to keep warm starts cheap.
"""

import logging
import os
from typing import Any

from fastapi import FastAPI

from restaurant_admin_service.handlers.api_handler import create_app
from restaurant_admin_service.observability import configure_logging
from restaurant_admin_service.repositories.dynamodb import create_dynamodb_resource
from restaurant_admin_service.repositories.store_repositories import (
    MenuItemRepository,
    OrderRepository,
)
from restaurant_admin_service.services.analytics_service import AnalyticsService
from restaurant_admin_service.services.menu_service import MenuService
from restaurant_admin_service.services.order_service import OrderService

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_dynamodb_resource: Any | None = None
_menu_repository: MenuItemRepository | None = None
_order_repository: OrderRepository | None = None
_fastapi_app: FastAPI | None = None


def get_dynamodb_resource() -> Any:
    """Create or retrieve cached DynamoDB resource.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    global _dynamodb_resource

    if _dynamodb_resource is None:
        _dynamodb_resource = create_dynamodb_resource()

    return _dynamodb_resource


def get_menu_repository() -> MenuItemRepository:
    """Create or retrieve cached menu item repository."""
    global _menu_repository

    if _menu_repository is None:
        table_name = os.getenv("DYNAMODB_MENU_ITEMS_TABLE", "restaurant-menu-items")
        _menu_repository = MenuItemRepository(
            dynamodb_resource=get_dynamodb_resource(), table_name=table_name
        )

    return _menu_repository


def get_order_repository() -> OrderRepository:
    """Create or retrieve cached order repository."""
    global _order_repository

    if _order_repository is None:
        table_name = os.getenv("DYNAMODB_ORDERS_TABLE", "restaurant-orders")
        _order_repository = OrderRepository(
            dynamodb_resource=get_dynamodb_resource(), table_name=table_name
        )

    return _order_repository


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    menu_repository = get_menu_repository()
    order_repository = get_order_repository()

    api_keys_str = os.getenv("ADMIN_API_KEY", "")
    api_keys = [key.strip() for key in api_keys_str.split(",") if key.strip()]

    if not api_keys:
        logger.warning("No ADMIN_API_KEY configured - using development key")
        api_keys = ["dummy-key-for-development"]

    cors_origins = [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()
    ]

    _fastapi_app = create_app(
        menu_service=MenuService(menu_repository=menu_repository),
        order_service=OrderService(
            order_repository=order_repository, menu_repository=menu_repository
        ),
        analytics_service=AnalyticsService(
            order_repository=order_repository, menu_repository=menu_repository
        ),
        api_keys=api_keys,
        cors_origins=cors_origins,
    )

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Configure structured logging for the Lambda container.

    Should be called once during Lambda cold start.
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    configure_logging(log_level)

    logger.info("Lambda environment initialized")
