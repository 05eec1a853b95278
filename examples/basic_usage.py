#!/usr/bin/env python3
"""
Basic Usage Example - Price Selector

Seeds a SQLite price list from data/prices.yaml and resolves the applicable
price for product 35455, brand 1 at several instants on 14-16 June 2020.

Run: python examples/basic_usage.py
"""

import asyncio
import tempfile
from datetime import datetime
from pathlib import Path

from price_selector.config import ConfigLoader, Settings
from price_selector.errors import InvalidInputError, StorageError
from price_selector.logging import configure_logging
from price_selector.persistence.price_store import PriceStore
from price_selector.persistence.seed import load_seed_file
from price_selector.responses import build_response, error_response
from price_selector.service import PriceLookupService

SEED_FILE = Path(__file__).resolve().parent.parent / "data" / "prices.yaml"

QUERIES = [
    (datetime(2020, 6, 14, 10, 0), 35455, 1),
    (datetime(2020, 6, 14, 16, 0), 35455, 1),
    (datetime(2020, 6, 14, 21, 0), 35455, 1),
    (datetime(2020, 6, 15, 10, 0), 35455, 1),
    (datetime(2020, 6, 16, 21, 0), 35455, 1),
    (datetime(2020, 6, 14, 10, 0), 99999, 1),
    (datetime(2020, 6, 14, 10, 0), 35455, 0),
]


async def run(settings: Settings) -> None:
    PriceStore.from_params(settings.storage).save_all(load_seed_file(SEED_FILE))
    service = PriceLookupService.from_settings(settings)

    for applied_at, product_id, brand_id in QUERIES:
        try:
            response = build_response(
                await service.find_applicable_price(applied_at, product_id, brand_id)
            )
        except (InvalidInputError, StorageError) as e:
            response = error_response(e)

        print(f"{applied_at.isoformat()} product={product_id} brand={brand_id} "
              f"-> {response.status} {response.to_json().decode()}")

    print(f"\nCache stats: {service.cache.stats()}")


def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        settings = ConfigLoader.create().load_settings({
            "cache": {"ttl_seconds": 60, "max_size": 100},
            "storage": {"db_path": str(Path(tmp) / "prices.db")},
            "logging": {"level": "WARNING"},
        })
        configure_logging(level=settings.logging.level, format_json=settings.logging.format_json)
        asyncio.run(run(settings))


if __name__ == "__main__":
    main()
