"""
Unit tests for peer replication and request context propagation.
"""

import httpx
import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.logging import bind_request_context, get_request_id, reset_request_context
from shared.metrics import MetricsCollector
from shared.replication import REPLICATED_HEADER, REQUEST_ID_HEADER, PeerReplicator, outbound_headers
from shared.test_helpers import InProcessNetwork


class TestOutboundHeaders:
    """Test cases for outbound_headers."""

    def test_marker_only_when_replicated(self):
        assert REPLICATED_HEADER not in outbound_headers()
        assert outbound_headers(replicated=True)[REPLICATED_HEADER] == "1"

    def test_request_id_propagated(self):
        request_id, tokens = bind_request_context("req-123")
        try:
            assert outbound_headers()[REQUEST_ID_HEADER] == "req-123"
        finally:
            reset_request_context(tokens)

    def test_context_restored_after_reset(self):
        outer_id, outer_tokens = bind_request_context("outer")
        inner_id, inner_tokens = bind_request_context("inner")
        assert get_request_id() == "inner"

        reset_request_context(inner_tokens)
        assert get_request_id() == "outer"
        reset_request_context(outer_tokens)

    def test_generated_request_id(self):
        request_id, tokens = bind_request_context()
        try:
            assert request_id
            assert get_request_id() == request_id
        finally:
            reset_request_context(tokens)


class TestPeerReplicator:
    """Test cases for PeerReplicator."""

    @pytest.fixture
    def network(self):
        network = InProcessNetwork()
        network.register_handler("http://peer", lambda request: httpx.Response(200, json={"ok": True}))
        return network

    @pytest.fixture
    def metrics(self):
        return MetricsCollector("catalog")

    @pytest.mark.asyncio
    async def test_push_sends_marker_and_payload(self, network, metrics):
        replicator = PeerReplicator("http://peer/", network.client(), service_name="catalog", metrics=metrics)

        assert await replicator.push("PATCH", "/update/1", {"quantity": 3}) is True

        calls = network.calls_to("http://peer", "/update/1")
        assert len(calls) == 1
        assert calls[0].method == "PATCH"
        assert calls[0].replicated
        assert calls[0].json() == {"quantity": 3}
        assert metrics.sample("replication_total", target="peer", result="ok") == 1.0

    @pytest.mark.asyncio
    async def test_unreachable_peer_is_swallowed(self, network, metrics):
        network.take_down("http://peer")
        replicator = PeerReplicator("http://peer", network.client(), service_name="catalog", metrics=metrics)

        assert await replicator.push("PATCH", "/update/1", {"quantity": 3}) is False
        assert metrics.sample("replication_total", target="peer", result="error") == 1.0

    @pytest.mark.asyncio
    async def test_error_status_counts_as_failure(self, metrics):
        network = InProcessNetwork()
        network.register_handler("http://peer", lambda request: httpx.Response(500, json={"error": "boom"}))
        replicator = PeerReplicator("http://peer", network.client(), service_name="order", metrics=metrics)

        assert await replicator.push("POST", "/replicate/order", {"id": 1}) is False

    @pytest.mark.asyncio
    async def test_no_peer_configured(self, network):
        replicator = PeerReplicator(None, network.client(), service_name="catalog")

        assert replicator.enabled is False
        assert await replicator.push("PATCH", "/update/1", {}) is False
        assert network.calls == []
