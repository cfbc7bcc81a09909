"""
OpenTelemetry tracing for the Storefront services.

Until a service enables tracing the API's no-op provider is in place, so
``trace_operation`` and ``add_span_event`` cost nothing.
"""

import os
from contextlib import contextmanager
from typing import Any, Dict

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from shared.config import ServiceConfig

TRACER_NAME = "storefront"

_ATTRIBUTE_TYPES = (str, bool, int, float)


def _span_attributes(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if isinstance(value, _ATTRIBUTE_TYPES)}


def configure_tracing(config: ServiceConfig, app=None) -> TracerProvider:
    """Export spans over OTLP and instrument the app and outbound httpx calls.

    The exporter and instrumentation packages are imported here so replicas
    running without tracing never load them.
    """
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

    provider = TracerProvider(resource=Resource.create({
        "service.name": config.service_name,
        "service.namespace": "storefront",
        "service.instance.id": f"{os.getenv('HOSTNAME', 'localhost')}:{config.port}",
        "deployment.environment": config.env,
    }))

    endpoint = config.otel_exporter
    exporter = OTLPSpanExporter(endpoint=endpoint, insecure=endpoint.startswith("http://"))
    provider.add_span_processor(BatchSpanProcessor(exporter))
    if config.enable_console_tracing:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)

    if app is not None:
        FastAPIInstrumentor.instrument_app(app, tracer_provider=provider)
    HTTPXClientInstrumentor().instrument(tracer_provider=provider)
    return provider


@contextmanager
def trace_operation(operation_name: str, **attributes: Any):
    """Run a block inside a span named ``operation_name``.

    None and non-primitive attributes are left off the span. An exception
    escaping the block is recorded and sets the span status to ERROR.
    """
    tracer = trace.get_tracer(TRACER_NAME)
    with tracer.start_as_current_span(operation_name, attributes=_span_attributes(attributes)) as span:
        yield span


def add_span_event(name: str, **attributes: Any) -> None:
    """Attach an event to the active span, if one is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(name, _span_attributes(attributes))
