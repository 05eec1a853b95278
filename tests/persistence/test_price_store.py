"""Tests for the SQLite price store."""

import sqlite3
import time
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from price_selector.config.defaults import StorageParams
from price_selector.errors import StorageError, StorageTimeoutError, StorageUnavailableError
from price_selector.persistence.price_store import PriceStore


class TestSchema:
    """Test database initialization."""

    def test_creates_table_and_index(self, tmp_path):
        """Test creates table and index."""
        db_path = tmp_path / "prices.db"
        PriceStore(str(db_path))

        conn = sqlite3.connect(db_path)
        try:
            tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
            indexes = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='index'")}
        finally:
            conn.close()

        assert "prices" in tables
        assert "idx_prices_lookup" in indexes

    def test_reopening_keeps_rows(self, tmp_path, base_price):
        """Test reopening keeps rows."""
        db_path = str(tmp_path / "prices.db")
        PriceStore(db_path).save(base_price)
        assert PriceStore(db_path).count() == 1

    def test_from_params(self, tmp_path):
        """Test building the store from StorageParams."""
        params = StorageParams(db_path=str(tmp_path / "p.db"), query_timeout_seconds=0.5)
        store = PriceStore.from_params(params)
        assert store.query_timeout_seconds == 0.5
        assert store.count() == 0

    def test_missing_directory_is_unavailable(self, tmp_path):
        """Test missing directory is unavailable."""
        with pytest.raises(StorageUnavailableError) as exc_info:
            PriceStore(str(tmp_path / "missing" / "prices.db"))
        assert exc_info.value.operation == "init_schema"
        assert exc_info.value.retryable is True


class TestSaveAndGet:
    """Test writing and reading records."""

    def test_save_and_get(self, price_store, base_price):
        """Test save and get."""
        record_id = price_store.save(base_price)
        assert record_id == 1

        loaded = price_store.get(1)
        assert loaded == base_price

    def test_get_missing_returns_none(self, price_store):
        """Test retrieving a non-existent record."""
        assert price_store.get(99) is None

    def test_amount_scale_preserved(self, price_store, make_record):
        """Test amount scale preserved."""
        price_store.save(make_record(amount=Decimal("30.50")))
        loaded = price_store.get(1)
        assert str(loaded.price_amount) == "30.50"

    def test_save_all_counts(self, seeded_store):
        """Test that save_all stores every seed record."""
        assert seeded_store.count() == 4

    def test_save_replaces_same_id(self, price_store, make_record):
        """Test save replaces same id."""
        price_store.save(make_record(amount=Decimal("10.00")))
        price_store.save(make_record(amount=Decimal("12.00")))
        assert price_store.count() == 1
        assert price_store.get(1).price_amount == Decimal("12.00")

    def test_record_without_id_gets_one(self, price_store, make_record):
        """Test record without id gets one."""
        record_id = price_store.save(make_record(id=None))
        assert record_id == 1
        assert price_store.get(record_id).id == 1


class TestFindCandidates:
    """Test the candidate query."""

    @pytest.mark.asyncio
    async def test_orders_by_priority_descending(self, seeded_store):
        """Test orders by priority descending."""
        candidates = await seeded_store.find_candidates(datetime(2020, 6, 14, 16, 0), 35455, 1)
        assert [c.price_list_id for c in candidates] == [2, 1]

    @pytest.mark.asyncio
    async def test_window_bounds_are_inclusive(self, seeded_store):
        """Test window bounds are inclusive."""
        at_start = await seeded_store.find_candidates(datetime(2020, 6, 14, 15, 0), 35455, 1)
        at_end = await seeded_store.find_candidates(datetime(2020, 6, 14, 18, 30), 35455, 1)
        after_end = await seeded_store.find_candidates(
            datetime(2020, 6, 14, 18, 30, 0, 1), 35455, 1
        )

        assert 2 in [c.price_list_id for c in at_start]
        assert 2 in [c.price_list_id for c in at_end]
        assert 2 not in [c.price_list_id for c in after_end]

    @pytest.mark.asyncio
    async def test_filters_product_and_brand(self, seeded_store):
        """Test filters product and brand."""
        assert await seeded_store.find_candidates(datetime(2020, 6, 14, 16, 0), 99999, 1) == []
        assert await seeded_store.find_candidates(datetime(2020, 6, 14, 16, 0), 35455, 2) == []

    @pytest.mark.asyncio
    async def test_before_any_window(self, seeded_store):
        """Test before any window."""
        assert await seeded_store.find_candidates(datetime(2020, 6, 13, 23, 59, 59), 35455, 1) == []

    @pytest.mark.asyncio
    async def test_aware_timestamp_converted_to_utc(self, seeded_store):
        """Test aware timestamp converted to UTC."""
        madrid_summer = timezone(timedelta(hours=2))
        # 18:00 in UTC+2 is 16:00 UTC, inside the promo window
        candidates = await seeded_store.find_candidates(
            datetime(2020, 6, 14, 18, 0, tzinfo=madrid_summer), 35455, 1
        )
        assert [c.price_list_id for c in candidates] == [2, 1]

    def test_sync_query_matches(self, seeded_store):
        """Test the blocking candidate query."""
        candidates = seeded_store.find_candidates_sync(datetime(2020, 6, 15, 10, 0), 35455, 1)
        assert [c.price_list_id for c in candidates] == [3, 1]


class TestFailures:
    """Test storage failure translation."""

    @pytest.mark.asyncio
    async def test_unreachable_database(self, price_store, tmp_path):
        """Test unreachable database."""
        price_store.db_path = tmp_path / "gone" / "prices.db"
        with pytest.raises(StorageUnavailableError) as exc_info:
            await price_store.find_candidates(datetime(2020, 6, 14, 10, 0), 35455, 1)
        assert exc_info.value.operation == "find_candidates"

    @pytest.mark.asyncio
    async def test_query_timeout(self, seeded_store, monkeypatch):
        """Test query timeout."""
        def slow_query(applied_at, product_id, brand_id):
            time.sleep(0.3)
            return []

        monkeypatch.setattr(seeded_store, "find_candidates_sync", slow_query)
        seeded_store.query_timeout_seconds = 0.01

        with pytest.raises(StorageTimeoutError) as exc_info:
            await seeded_store.find_candidates(datetime(2020, 6, 14, 10, 0), 35455, 1)
        assert exc_info.value.timeout_seconds == 0.01

    def test_corrupt_row_is_storage_error(self, price_store):
        """Test corrupt row is storage error."""
        conn = sqlite3.connect(price_store.db_path)
        try:
            conn.execute(
                "INSERT INTO prices (id, brand_id, start_date, end_date, price_list, "
                "product_id, priority, price_amount, curr) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (7, 1, "2020-06-14T00:00:00.000000", "2020-12-31T23:59:59.000000",
                 1, 35455, 0, "35.50", "ZZZ"),
            )
            conn.commit()
        finally:
            conn.close()

        with pytest.raises(StorageError) as exc_info:
            price_store.get(7)
        assert exc_info.value.operation == "map_row"
        assert not isinstance(exc_info.value, StorageUnavailableError)
