"""Main application entry point for the restaurant admin service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from restaurant_admin_service.handlers.api_handler import create_app
from restaurant_admin_service.observability import configure_logging, setup_observability
from restaurant_admin_service.repositories.dynamodb import create_dynamodb_resource
from restaurant_admin_service.repositories.store_repositories import (
    MenuItemRepository,
    OrderRepository,
)
from restaurant_admin_service.services.analytics_service import AnalyticsService
from restaurant_admin_service.services.menu_service import MenuService
from restaurant_admin_service.services.order_service import OrderService

logger = logging.getLogger(__name__)

DEVELOPMENT_API_KEY = "dummy-key-for-development"


def get_dynamodb_resource() -> Any:
    """Create the DynamoDB resource for the long-running server."""
    return create_dynamodb_resource()


def get_api_keys() -> list[str]:
    """Read admin API keys from ADMIN_API_KEY (comma separated)."""
    api_keys_str = os.getenv("ADMIN_API_KEY", "")
    api_keys = [key.strip() for key in api_keys_str.split(",") if key.strip()]

    if not api_keys:
        logger.warning("No ADMIN_API_KEY configured - using development key for write endpoints")
        api_keys = [DEVELOPMENT_API_KEY]

    return api_keys


def get_cors_origins() -> list[str]:
    """Read allowed browser origins from CORS_ORIGINS (comma separated)."""
    origins_str = os.getenv("CORS_ORIGINS", "")
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


def storage_lifespan(dynamodb_resource: Any) -> Any:
    """Build a lifespan handler that closes the DynamoDB client on shutdown."""

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        logger.info("Closing DynamoDB client")
        dynamodb_resource.meta.client.close()

    return lifespan


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the DynamoDB resource
    3. Initializes repositories and services
    4. Creates the FastAPI app
    5. Sets up observability

    Returns:
        Configured FastAPI application instance
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    configure_logging(log_level)

    logger.info("Initializing restaurant admin service...")

    dynamodb_resource = get_dynamodb_resource()

    menu_table = os.getenv("DYNAMODB_MENU_ITEMS_TABLE", "restaurant-menu-items")
    orders_table = os.getenv("DYNAMODB_ORDERS_TABLE", "restaurant-orders")

    menu_repository = MenuItemRepository(
        dynamodb_resource=dynamodb_resource, table_name=menu_table
    )
    order_repository = OrderRepository(
        dynamodb_resource=dynamodb_resource, table_name=orders_table
    )

    logger.info(f"Repositories configured - menu: {menu_table}, orders: {orders_table}")

    menu_service = MenuService(menu_repository=menu_repository)
    order_service = OrderService(
        order_repository=order_repository, menu_repository=menu_repository
    )
    analytics_service = AnalyticsService(
        order_repository=order_repository, menu_repository=menu_repository
    )

    logger.info("Services initialized")

    app = create_app(
        menu_service=menu_service,
        order_service=order_service,
        analytics_service=analytics_service,
        api_keys=get_api_keys(),
        cors_origins=get_cors_origins(),
        lifespan=storage_lifespan(dynamodb_resource),
    )

    setup_observability(app)

    logger.info("Restaurant admin service initialized successfully")
    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "5000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
