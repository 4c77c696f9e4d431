"""OpenTelemetry instrumentation and logging utilities."""

from restaurant_admin_service.observability.config import configure_logging, setup_observability
from restaurant_admin_service.observability.decorators import traced

__all__ = ["setup_observability", "configure_logging", "traced"]
