"""OpenTelemetry tracing decorators."""

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span

from restaurant_admin_service.exceptions import AdminServiceError

# Type variable for generic function signatures
F = TypeVar("F", bound=Callable[..., Any])


def _annotate(span: Span, record_args: tuple[str, ...], kwargs: dict[str, Any]) -> None:
    for name in record_args:
        value = kwargs.get(name)
        if isinstance(value, (str, int, float, bool)):
            span.set_attribute(f"admin.{name}", value)


def _record_failure(span: Span, error: Exception) -> None:
    span.set_attribute("success", False)
    span.set_attribute("error.type", type(error).__name__)
    span.set_attribute("error.message", str(error))
    # Validation and not-found outcomes are client errors, not span failures.
    if not isinstance(error, AdminServiceError) or error.status_code >= 500:
        span.record_exception(error)


def traced(
    span_name: str | None = None,
    service_name: str = "restaurant-admin-svc",
    record_args: tuple[str, ...] = (),
) -> Callable[[F], F]:
    """Decorator to add OpenTelemetry tracing to a service operation.

    Creates a new span around the decorated function. Sync and async
    functions are supported.

    Args:
        span_name: Name for the span (defaults to function name if not provided)
        service_name: Service name for span attributes
        record_args: Keyword argument names whose scalar values become span attributes

    Returns:
        Decorated function with tracing

    Example:
        @traced("orders.update_status", record_args=("order_id",))
        async def update_status(self, order_id: str, status: str) -> PopulatedOrder:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name, record_exception=False) as span:
                span.set_attribute("service.name", service_name)
                _annotate(span, record_args, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _record_failure(span, e)
                    raise
                span.set_attribute("success", True)
                return result

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name, record_exception=False) as span:
                span.set_attribute("service.name", service_name)
                _annotate(span, record_args, kwargs)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _record_failure(span, e)
                    raise
                span.set_attribute("success", True)
                return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator
