"""
Unit tests for round-robin replica selection.
"""

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.dispatcher import ReplicaSet, configure_replicas, parse_replicas


class TestParseReplicas:
    """Test cases for parse_replicas."""

    def test_comma_separated(self):
        assert parse_replicas("http://a:4000, http://b:4000/") == ["http://a:4000", "http://b:4000"]

    def test_blank_entries_dropped(self):
        assert parse_replicas("http://a:4000,, ,") == ["http://a:4000"]

    @pytest.mark.parametrize("raw", [None, "", []])
    def test_empty(self, raw):
        assert parse_replicas(raw) == []

    def test_sequence_input(self):
        assert parse_replicas(["http://a/", " http://b "]) == ["http://a", "http://b"]


class TestReplicaSet:
    """Test cases for ReplicaSet."""

    def test_cycles_in_configured_order(self):
        replicas = ReplicaSet(["http://a", "http://b", "http://c"], "http://fallback")

        picks = [replicas.next() for _ in range(7)]

        assert picks == [
            "http://a", "http://b", "http://c",
            "http://a", "http://b", "http://c",
            "http://a",
        ]

    def test_single_replica_always_chosen(self):
        replicas = ReplicaSet(["http://only"], "http://fallback")
        assert {replicas.next() for _ in range(3)} == {"http://only"}

    def test_fallback_when_unconfigured(self):
        replicas = configure_replicas(None, "http://localhost:4000/")

        assert replicas.next() == "http://localhost:4000"
        assert replicas.next() == "http://localhost:4000"
        assert replicas.addresses == ["http://localhost:4000"]

    def test_addresses_is_a_copy(self):
        replicas = configure_replicas("http://a,http://b", "http://fallback")
        replicas.addresses.append("http://c")
        assert replicas.addresses == ["http://a", "http://b"]
