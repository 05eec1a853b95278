"""SQLite-backed price list storage."""

import asyncio
import sqlite3
import threading
from collections.abc import Iterable
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

import structlog

from ..config.defaults import StorageParams
from ..domain.factory import create_price_record
from ..domain.models import PriceRecord
from ..errors import (
    InvalidInputError,
    StorageError,
    StorageTimeoutError,
    StorageUnavailableError,
)
from ..utils.time import format_timestamp, parse_timestamp
from .base import PriceRepository

logger = structlog.get_logger(__name__)

FIND_APPLICABLE_PRICES = """
    SELECT id, brand_id, start_date, end_date, price_list, product_id,
           priority, price_amount, curr
    FROM prices
    WHERE product_id = ?
      AND brand_id = ?
      AND start_date <= ?
      AND end_date >= ?
    ORDER BY priority DESC, price_list ASC
"""


class PriceStore(PriceRepository):
    """
    SQLite price list table.

    Timestamps are stored as canonical ISO-8601 text (naive UTC, microsecond
    precision) so range predicates compare correctly as strings. Amounts are
    stored as text to keep Decimal scale intact.
    """

    def __init__(
        self,
        db_path: str = "prices.db",
        query_timeout_seconds: float = 2.0,
        connect_timeout_seconds: float = 30.0
    ):
        self.db_path = Path(db_path)
        self.query_timeout_seconds = query_timeout_seconds
        self.connect_timeout_seconds = connect_timeout_seconds
        self.logger = logger
        self._lock = threading.Lock()

        self._init_database()

    @classmethod
    def from_params(cls, params: StorageParams) -> "PriceStore":
        return cls(
            db_path=params.db_path,
            query_timeout_seconds=params.query_timeout_seconds,
            connect_timeout_seconds=params.connect_timeout_seconds,
        )

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection("init_schema") as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS prices (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    brand_id INTEGER NOT NULL,
                    start_date TEXT NOT NULL,
                    end_date TEXT NOT NULL,
                    price_list INTEGER NOT NULL,
                    product_id INTEGER NOT NULL,
                    priority INTEGER NOT NULL,
                    price_amount TEXT NOT NULL,
                    curr TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_prices_lookup
                ON prices(product_id, brand_id, start_date, end_date)
            """)

            conn.commit()

    @contextmanager
    def _get_connection(self, operation: str):
        """Get database connection, translating driver errors to StorageUnavailableError."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.connect_timeout_seconds)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", operation=operation, error=str(e))
            raise StorageUnavailableError(
                f"Price storage unavailable: {e}",
                operation=operation,
                target=str(self.db_path),
            ) from e
        finally:
            if conn:
                conn.close()

    def save(self, record: PriceRecord) -> int:
        """Insert or replace a record. Returns its row id."""
        return self.save_all([record])[0]

    def save_all(self, records: Iterable[PriceRecord]) -> list[int]:
        """Insert or replace records in one transaction. Returns their row ids."""
        ids = []
        with self._lock:
            with self._get_connection("save") as conn:
                for record in records:
                    row = record.as_row()
                    cursor = conn.execute("""
                        INSERT OR REPLACE INTO prices (
                            id, brand_id, start_date, end_date, price_list,
                            product_id, priority, price_amount, curr
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """, (
                        row["id"],
                        row["brand_id"],
                        format_timestamp(row["start_date"]),
                        format_timestamp(row["end_date"]),
                        row["price_list"],
                        row["product_id"],
                        row["priority"],
                        str(row["price_amount"]),
                        row["curr"],
                    ))
                    ids.append(cursor.lastrowid)
                conn.commit()

        self.logger.info("Stored price records", count=len(ids))
        return ids

    def find_candidates_sync(
        self,
        applied_at: datetime,
        product_id: int,
        brand_id: int
    ) -> list[PriceRecord]:
        """Blocking candidate query, ordered by priority descending."""
        ts = format_timestamp(applied_at)

        with self._get_connection("find_candidates") as conn:
            rows = conn.execute(
                FIND_APPLICABLE_PRICES, (product_id, brand_id, ts, ts)
            ).fetchall()

        records = [self._row_to_record(row) for row in rows]

        self.logger.debug(
            "Fetched candidate prices",
            product_id=product_id,
            brand_id=brand_id,
            applied_at=ts,
            count=len(records),
        )
        return records

    async def find_candidates(
        self,
        applied_at: datetime,
        product_id: int,
        brand_id: int
    ) -> list[PriceRecord]:
        """Run the candidate query on a worker thread, bounded by the query timeout."""
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.find_candidates_sync, applied_at, product_id, brand_id),
                timeout=self.query_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            self.logger.error(
                "Candidate query timed out",
                product_id=product_id,
                brand_id=brand_id,
                timeout_seconds=self.query_timeout_seconds,
            )
            raise StorageTimeoutError(
                f"Candidate query exceeded {self.query_timeout_seconds}s",
                timeout_seconds=self.query_timeout_seconds,
                operation="find_candidates",
                target=str(self.db_path),
            ) from e

    def count(self) -> int:
        with self._get_connection("count") as conn:
            return conn.execute("SELECT COUNT(*) FROM prices").fetchone()[0]

    def get(self, record_id: int) -> Optional[PriceRecord]:
        with self._get_connection("get") as conn:
            row = conn.execute("SELECT * FROM prices WHERE id = ?", (record_id,)).fetchone()
        return self._row_to_record(row) if row else None

    def _row_to_record(self, row: sqlite3.Row) -> PriceRecord:
        """Convert database row to PriceRecord through the validating factory."""
        try:
            return create_price_record(
                id=row["id"],
                brand_id=row["brand_id"],
                price_list_id=row["price_list"],
                product_id=row["product_id"],
                priority=row["priority"],
                start_date=parse_timestamp(row["start_date"]),
                end_date=parse_timestamp(row["end_date"]),
                amount=row["price_amount"],
                currency_code=row["curr"],
            )
        except (InvalidInputError, ValueError) as e:
            self.logger.error("Failed to map price row", row_id=row["id"], error=str(e))
            raise StorageError(
                f"Corrupt price row {row['id']}: {e}",
                operation="map_row",
                target=str(self.db_path),
            ) from e
