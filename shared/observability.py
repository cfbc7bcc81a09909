"""
Observability helpers for the Storefront services.

Domain events and failures are reported once here and fan out to the log,
the Prometheus counters and the current trace span.
"""

from typing import Any

from .logging import get_logger
from .metrics import MetricsCollector
from .tracing import add_span_event


class ObservabilityManager:
    """Reports business events and errors for one service."""

    def __init__(self, service_name: str, metrics: MetricsCollector):
        self.service_name = service_name
        self.metrics = metrics
        self.logger = get_logger(f"{service_name}.observability")

    def log_error(self, error_type: str, error_message: str, **context: Any):
        """Report a failed request (5xx) or unexpected exception."""
        self.logger.error("Error occurred", error_type=error_type, error_message=error_message, **context)
        self.metrics.record_error(error_type)
        add_span_event("error", error_type=error_type, error_message=error_message)

    def log_business_event(self, event_type: str, **context: Any):
        """Report a completed domain action such as a purchase or book update."""
        self.logger.info("Business event", event_type=event_type, **context)
        self.metrics.record_business_event(event_type)
        add_span_event("business_event", event_type=event_type, **context)


def get_observability_manager(service_name: str, metrics: MetricsCollector,
                              tracing_enabled: bool = False) -> ObservabilityManager:
    """Get an observability manager for a service."""
    manager = ObservabilityManager(service_name, metrics)
    manager.logger.info("Observability initialized", tracing_enabled=tracing_enabled)
    return manager
