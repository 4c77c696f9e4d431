"""FastAPI application for the restaurant admin API.

Every response uses the envelope ``{success, data?, message?, count?, total?,
page?, pages?}``. Service exceptions are mapped to status codes by the
exception handlers registered in ``create_app``.
"""

import logging
from collections.abc import Callable
from typing import Annotated, Any

from fastapi import Body, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from restaurant_admin_service.auth.api_dependencies import require_api_key
from restaurant_admin_service.auth.api_key_validator import APIKeyValidator
from restaurant_admin_service.exceptions import AdminServiceError, UnavailableError
from restaurant_admin_service.models.base_models import CamelModel
from restaurant_admin_service.models.menu_models import MenuFilter
from restaurant_admin_service.services.analytics_service import AnalyticsService
from restaurant_admin_service.services.menu_service import MenuService
from restaurant_admin_service.services.order_service import DEFAULT_PAGE_SIZE, OrderService
from restaurant_admin_service.validation import format_location, validate_price_bound

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


def envelope(data: Any = None, message: str | None = None, **extra: Any) -> dict[str, Any]:
    """Build a successful response body.

    Args:
        data: A model, a list of models, or plain JSON data
        message: Optional human-readable message
        **extra: Pagination or count fields (count, total, page, pages)

    Returns:
        dict: Response body with ``success`` set to True
    """
    body: dict[str, Any] = {"success": True}
    body.update(extra)
    if message is not None:
        body["message"] = message
    if data is not None:
        if isinstance(data, list):
            body["data"] = [_serialize(entry) for entry in data]
        else:
            body["data"] = _serialize(data)
    return body


def _serialize(value: Any) -> Any:
    if isinstance(value, CamelModel):
        return value.to_response()
    return value


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build a failure response in the envelope format."""
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AdminServiceError)
    async def handle_service_error(_request: Request, exc: AdminServiceError) -> JSONResponse:
        if isinstance(exc, UnavailableError):
            logger.error(f"Storage unavailable during {exc.operation}: {exc.cause}")
            return error_response(exc.status_code, GENERIC_ERROR_MESSAGE)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        if not errors:
            return error_response(400, "Invalid request")
        error = errors[0]
        if error.get("type") == "json_invalid":
            return error_response(400, "Invalid JSON body")
        loc = tuple(error.get("loc", ()))
        field = format_location(loc[1:]) or format_location(loc)
        if error.get("type") == "missing":
            return error_response(400, f'"{field}" is required')
        message = error.get("msg", "is invalid").removeprefix("Value error, ")
        return error_response(400, f'"{field}": {message}')

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message = str(exc.detail)
        if exc.status_code == 404 and message == "Not Found":
            message = "Route not found"
        return error_response(exc.status_code, message)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error: {exc}")
        return error_response(500, GENERIC_ERROR_MESSAGE)


def _register_menu_routes(app: FastAPI, api_key: Callable[..., str]) -> None:
    @app.get("/api/menu", tags=["Menu"])
    async def list_menu_items(
        category: str | None = None,
        availability: str | None = None,
        min_price: Annotated[str | None, Query(alias="minPrice")] = None,
        max_price: Annotated[str | None, Query(alias="maxPrice")] = None,
    ) -> dict[str, Any]:
        """List menu items with optional category, availability and price filters."""
        menu_filter = MenuFilter(
            category=category or None,
            is_available=None if availability is None else availability == "true",
            min_price=validate_price_bound("minPrice", min_price),
            max_price=validate_price_bound("maxPrice", max_price),
        )
        items = await app.state.menu_service.list_items(menu_filter)
        return envelope(items, count=len(items))

    # Declared before /api/menu/{item_id} so "search" is not taken as an ID
    @app.get("/api/menu/search", tags=["Menu"])
    async def search_menu_items(q: str | None = None) -> dict[str, Any]:
        """Search menu items by name, description or ingredient."""
        items = await app.state.menu_service.search_items(q)
        return envelope(items, count=len(items))

    @app.get("/api/menu/{item_id}", tags=["Menu"])
    async def get_menu_item(item_id: str) -> dict[str, Any]:
        """Get a single menu item."""
        item = await app.state.menu_service.get_item(item_id=item_id)
        return envelope(item)

    @app.post("/api/menu", status_code=201, tags=["Menu"])
    async def create_menu_item(
        payload: Annotated[Any, Body()],
        _api_key: str = Depends(api_key),
    ) -> dict[str, Any]:
        """Create a menu item."""
        item = await app.state.menu_service.create_item(payload)
        return envelope(item)

    @app.put("/api/menu/{item_id}", tags=["Menu"])
    async def update_menu_item(
        item_id: str,
        payload: Annotated[Any, Body()],
        _api_key: str = Depends(api_key),
    ) -> dict[str, Any]:
        """Update a menu item."""
        item = await app.state.menu_service.update_item(item_id=item_id, payload=payload)
        return envelope(item)

    @app.delete("/api/menu/{item_id}", tags=["Menu"])
    async def delete_menu_item(
        item_id: str,
        _api_key: str = Depends(api_key),
    ) -> dict[str, Any]:
        """Delete a menu item."""
        await app.state.menu_service.delete_item(item_id=item_id)
        return envelope(message="Menu item deleted successfully")

    @app.patch("/api/menu/{item_id}/availability", tags=["Menu"])
    async def toggle_menu_item_availability(
        item_id: str,
        _api_key: str = Depends(api_key),
    ) -> dict[str, Any]:
        """Flip a menu item's availability and return the updated item."""
        item = await app.state.menu_service.toggle_availability(item_id=item_id)
        return envelope(item)


def _register_order_routes(app: FastAPI, api_key: Callable[..., str]) -> None:
    @app.get("/api/orders", tags=["Orders"])
    async def list_orders(
        status: str | None = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> dict[str, Any]:
        """List orders newest first with status filter and pagination."""
        result = await app.state.order_service.list_orders(
            status=status, page=page, page_size=limit
        )
        return envelope(
            result.items,
            count=len(result.items),
            total=result.total_count,
            page=result.page,
            pages=result.total_pages,
        )

    @app.get("/api/orders/{order_id}", tags=["Orders"])
    async def get_order(order_id: str) -> dict[str, Any]:
        """Get a single order with resolved menu items."""
        order = await app.state.order_service.get_order(order_id=order_id)
        return envelope(order)

    @app.post("/api/orders", status_code=201, tags=["Orders"])
    async def create_order(
        payload: Annotated[Any, Body()],
        _api_key: str = Depends(api_key),
    ) -> dict[str, Any]:
        """Create an order."""
        order = await app.state.order_service.create_order(payload)
        return envelope(order)

    @app.patch("/api/orders/{order_id}/status", tags=["Orders"])
    async def update_order_status(
        order_id: str,
        payload: Annotated[Any, Body()] = None,
        _api_key: str = Depends(api_key),
    ) -> dict[str, Any]:
        """Set an order's status."""
        status = payload.get("status") if isinstance(payload, dict) else None
        order = await app.state.order_service.update_status(order_id=order_id, status=status)
        return envelope(order)


def _register_analytics_routes(app: FastAPI) -> None:
    @app.get("/api/analytics/top-sellers", tags=["Analytics"])
    async def top_sellers() -> dict[str, Any]:
        """Top five menu items by quantity ordered."""
        rows = await app.state.analytics_service.top_sellers()
        return envelope(rows)


def create_app(
    menu_service: MenuService,
    order_service: OrderService,
    analytics_service: AnalyticsService,
    api_keys: list[str],
    cors_origins: list[str] | None = None,
    lifespan: Any = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        menu_service: Service for the menu catalog
        order_service: Service for orders
        analytics_service: Service for sales reports
        api_keys: List of valid API keys for write endpoints
        cors_origins: Origins allowed to call the API from a browser
        lifespan: Optional lifespan context manager (startup/shutdown)

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Restaurant Admin API",
        description="Menu catalog, order management and sales analytics",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Store services in app state for access in route handlers
    app.state.menu_service = menu_service
    app.state.order_service = order_service
    app.state.analytics_service = analytics_service
    app.state.api_key_validator = APIKeyValidator(api_keys=api_keys)

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    _register_exception_handlers(app)

    @app.get("/", tags=["Health"])
    async def root() -> dict[str, str]:
        """Welcome message."""
        return {"message": "Welcome to Restaurant Admin API"}

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    api_key = require_api_key()
    _register_menu_routes(app, api_key)
    _register_order_routes(app, api_key)
    _register_analytics_routes(app)

    return app
