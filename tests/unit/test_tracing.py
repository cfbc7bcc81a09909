"""
Unit tests for the tracing helpers.
"""

from unittest.mock import patch

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.errors import OutOfStockError
from shared.tracing import add_span_event, trace_operation


@pytest.fixture
def exporter():
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    with patch.object(trace, "get_tracer", provider.get_tracer):
        yield exporter


class TestTraceOperation:
    """Test cases for trace_operation and add_span_event."""

    def test_span_keeps_primitive_attributes(self, exporter):
        with trace_operation("order.purchase", book_id=3, replicated=False, peer=None, order={"id": 1}):
            pass

        span, = exporter.get_finished_spans()
        assert span.name == "order.purchase"
        assert dict(span.attributes) == {"book_id": 3, "replicated": False}

    def test_failure_marks_span_and_propagates(self, exporter):
        with pytest.raises(OutOfStockError):
            with trace_operation("order.purchase", book_id=4):
                raise OutOfStockError()

        span, = exporter.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR
        assert [event.name for event in span.events] == ["exception"]

    def test_event_added_to_active_span(self, exporter):
        with trace_operation("catalog.update", book_id=1):
            add_span_event("business_event", event_type="book_updated", changes=["quantity"])

        span, = exporter.get_finished_spans()
        event, = span.events
        assert event.name == "business_event"
        assert dict(event.attributes) == {"event_type": "book_updated"}

    def test_event_without_active_span_is_ignored(self):
        add_span_event("business_event", event_type="purchase_completed")
