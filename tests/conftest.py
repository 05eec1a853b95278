"""Pytest configuration and shared fixtures."""

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable

import pytest

from price_selector.domain.factory import create_price_record
from price_selector.domain.models import PriceRecord
from price_selector.persistence.price_store import PriceStore
from price_selector.persistence.seed import load_seed_file

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SEED_FILE = PROJECT_ROOT / "data" / "prices.yaml"


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_record() -> Callable[..., PriceRecord]:
    """Factory for PriceRecords with sensible defaults for product 35455 / brand 1."""

    def _make(**overrides: Any) -> PriceRecord:
        fields: dict[str, Any] = {
            "id": 1,
            "brand_id": 1,
            "price_list_id": 1,
            "product_id": 35455,
            "priority": 0,
            "start_date": datetime(2020, 6, 14, 0, 0, 0),
            "end_date": datetime(2020, 12, 31, 23, 59, 59),
            "amount": Decimal("35.50"),
            "currency_code": "EUR",
        }
        fields.update(overrides)
        return create_price_record(**fields)

    return _make


@pytest.fixture
def base_price(make_record) -> PriceRecord:
    """Priority 0 entry covering the second half of 2020."""
    return make_record()


@pytest.fixture
def promo_price(make_record) -> PriceRecord:
    """Priority 1 entry for the afternoon of 14 June 2020."""
    return make_record(
        id=2,
        price_list_id=2,
        priority=1,
        start_date=datetime(2020, 6, 14, 15, 0, 0),
        end_date=datetime(2020, 6, 14, 18, 30, 0),
        amount=Decimal("25.45"),
    )


@pytest.fixture
def seed_records() -> list[PriceRecord]:
    """The four price lists from data/prices.yaml."""
    return load_seed_file(SEED_FILE)


@pytest.fixture
def price_store(tmp_path) -> PriceStore:
    return PriceStore(str(tmp_path / "prices.db"))


@pytest.fixture
def seeded_store(price_store, seed_records) -> PriceStore:
    price_store.save_all(seed_records)
    return price_store
