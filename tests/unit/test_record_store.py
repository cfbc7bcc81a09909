"""
Unit tests for the JSON record store.
"""

import asyncio
import json

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.store import RecordStore
from shared.test_helpers import TestDataFactory, read_store, write_store


class TestRecordStore:
    """Test cases for RecordStore."""

    @pytest.fixture
    def books(self):
        return TestDataFactory.create_books()

    @pytest.mark.asyncio
    async def test_load_existing(self, tmp_path, books):
        store = RecordStore(write_store(tmp_path / "catalog.json", books), name="catalog")

        assert await store.load() == books

    @pytest.mark.asyncio
    async def test_load_missing_file_is_empty(self, tmp_path):
        store = RecordStore(tmp_path / "missing.json")

        assert await store.load() == []
        assert not store.exists

    @pytest.mark.asyncio
    async def test_load_invalid_json_is_empty(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        assert await RecordStore(path).load() == []

    @pytest.mark.asyncio
    async def test_load_non_list_is_empty(self, tmp_path):
        path = tmp_path / "object.json"
        path.write_text(json.dumps({"id": 1}), encoding="utf-8")

        assert await RecordStore(path).load() == []

    @pytest.mark.asyncio
    async def test_save_replaces_collection(self, tmp_path, books):
        path = write_store(tmp_path / "catalog.json", books)
        store = RecordStore(path)

        await store.save(books[:1])

        assert read_store(path) == books[:1]
        assert list(tmp_path.glob(".catalog.json.*.tmp")) == []

    @pytest.mark.asyncio
    async def test_overlapping_saves_keep_latest_collection(self, tmp_path, books):
        path = write_store(tmp_path / "catalog.json", [])
        store = RecordStore(path)

        await asyncio.gather(store.save(books[:1]), store.save(books[:3]), store.save(books))

        assert read_store(path) == books
        assert list(tmp_path.glob(".catalog.json.*.tmp")) == []

    @pytest.mark.asyncio
    async def test_save_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "orders.json"

        await RecordStore(path).save([TestDataFactory.create_order(1)])

        assert read_store(path)[0]["id"] == 1


class TestSeedIfMissing:
    """Test cases for first-run seeding."""

    def test_copies_seed_when_missing(self, tmp_path):
        seed = write_store(tmp_path / "seed.json", TestDataFactory.create_books())
        store = RecordStore(tmp_path / "data" / "catalog.json")

        assert store.seed_if_missing(seed) is True
        assert read_store(store.path) == read_store(seed)

    def test_existing_store_untouched(self, tmp_path):
        seed = write_store(tmp_path / "seed.json", TestDataFactory.create_books())
        path = write_store(tmp_path / "catalog.json", [])

        assert RecordStore(path).seed_if_missing(seed) is False
        assert read_store(path) == []

    def test_no_seed_given(self, tmp_path):
        store = RecordStore(tmp_path / "catalog.json")

        assert store.seed_if_missing(None) is False
        assert not store.exists
