"""
Shared metrics configuration for the Storefront services.

Metrics are exposed per service on ``GET /metrics``. Common HTTP and
replication metrics exist on every service; the gateway, catalog and order
services each add their own.
"""

from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry, generate_latest
from typing import Dict, Any, Optional, Sequence
import time
from contextlib import contextmanager


class MetricsCollector:
    """Centralized metrics collector for services.

    Every collector owns its registry, so several service instances can live
    in one process (tests run both replicas of a service side by side).
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _counter(self, name: str, documentation: str, labels: Sequence[str] = ()):
        self._metrics[name] = Counter(name, documentation, list(labels), registry=self.registry)

    def _histogram(self, name: str, documentation: str, labels: Sequence[str] = ()):
        self._metrics[name] = Histogram(name, documentation, list(labels), registry=self.registry)

    def _gauge(self, name: str, documentation: str, labels: Sequence[str] = ()):
        self._metrics[name] = Gauge(name, documentation, list(labels), registry=self.registry)

    def _setup_metrics(self):
        """Set up common metrics for the service."""
        info = Info("service_info", "Service information", registry=self.registry)
        info.info({"service": self.service_name, "version": "1.0.0"})
        self._metrics["service_info"] = info

        # HTTP metrics
        self._counter("http_requests_total", "Total HTTP requests", ["method", "endpoint", "status_code"])
        self._histogram("http_request_duration_seconds", "HTTP request duration in seconds", ["method", "endpoint"])
        self._counter("health_check_total", "Total health check requests", ["status"])
        self._counter("errors_total", "Total errors", ["error_type", "service"])
        self._counter("business_events_total", "Total business events", ["event_type", "service"])

        # Best-effort pushes to a peer replica or to the gateway
        self._counter("replication_total", "Outbound replication and invalidation pushes", ["target", "result"])

        setup = {
            "gateway": self._setup_gateway_metrics,
            "catalog": self._setup_catalog_metrics,
            "order": self._setup_order_metrics,
        }.get(self.service_name)
        if setup:
            setup()

    def _setup_gateway_metrics(self):
        """Set up gateway-specific metrics."""
        self._counter("cache_hits_total", "Total cache hits", ["cache_type"])
        self._counter("cache_misses_total", "Total cache misses", ["cache_type"])
        self._counter("cache_invalidations_total", "Invalidation signals received", ["existed"])
        self._gauge("cache_entries", "Entries currently held by the read cache")
        self._counter("downstream_requests_total", "Requests dispatched to replicas", ["role", "replica"])

    def _setup_catalog_metrics(self):
        """Set up catalog-specific metrics."""
        self._counter("book_updates_total", "Applied book updates", ["origin"])

    def _setup_order_metrics(self):
        """Set up order-specific metrics."""
        self._counter("purchases_total", "Purchase attempts by outcome", ["outcome"])
        self._counter("replicated_orders_total", "Replicated orders received from the peer", ["existed"])
        self._histogram(
            "purchase_duration_seconds",
            "End-to-end purchase latency including catalog round trips",
        )

    def render(self) -> bytes:
        """Prometheus text exposition of this collector's registry."""
        return generate_latest(self.registry)

    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float):
        """Record HTTP request metrics."""
        self.increment_counter("http_requests_total", method=method, endpoint=endpoint, status_code=str(status_code))
        self.observe_histogram("http_request_duration_seconds", duration, method=method, endpoint=endpoint)

    def record_health_check(self, status: str):
        self.increment_counter("health_check_total", status=status)

    def record_error(self, error_type: str, service: Optional[str] = None):
        self.increment_counter("errors_total", error_type=error_type, service=service or self.service_name)

    def record_business_event(self, event_type: str, service: Optional[str] = None):
        self.increment_counter("business_events_total", event_type=event_type, service=service or self.service_name)

    @contextmanager
    def time_operation(self, operation_name: str, **labels):
        """Observe the duration of the enclosed block, also when it raises."""
        start_time = time.perf_counter()
        try:
            yield
        finally:
            self.observe_histogram(operation_name, time.perf_counter() - start_time, **labels)

    def _child(self, metric_name: str, labels: Dict[str, Any]):
        metric = self._metrics.get(metric_name)
        if metric is None:
            return None
        return metric.labels(**labels) if labels else metric

    def increment_counter(self, metric_name: str, **labels):
        """Increment a counter metric; unknown names are ignored."""
        child = self._child(metric_name, labels)
        if child is not None:
            child.inc()

    def set_gauge(self, metric_name: str, value: float, **labels):
        child = self._child(metric_name, labels)
        if child is not None:
            child.set(value)

    def observe_histogram(self, metric_name: str, value: float, **labels):
        child = self._child(metric_name, labels)
        if child is not None:
            child.observe(value)

    def sample(self, metric_name: str, **labels) -> float:
        """Current value of a counter/gauge sample, 0.0 when never touched."""
        value = self.registry.get_sample_value(metric_name, labels or None)
        return value or 0.0


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
