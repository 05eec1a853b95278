#!/usr/bin/env python3
"""Lookup throughput benchmark: cold (storage) versus warm (cache) queries."""

import asyncio
import sys
import tempfile
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from price_selector.cache.resolution_cache import ResolutionCache
from price_selector.persistence.price_store import PriceStore
from price_selector.persistence.seed import load_seed_file
from price_selector.service import PriceLookupService


async def benchmark_lookups(store: PriceStore, queries: int) -> Dict[str, Any]:
    """Run each query twice and time both passes."""
    service = PriceLookupService(store, ResolutionCache(max_size=queries * 2))
    base = datetime(2020, 6, 14, 0, 0, 0)
    instants = [base + timedelta(minutes=i) for i in range(queries)]

    start_time = time.time()
    for ts in instants:
        await service.find_applicable_price(ts, 35455, 1)
    cold = time.time() - start_time

    start_time = time.time()
    for ts in instants:
        await service.find_applicable_price(ts, 35455, 1)
    warm = time.time() - start_time

    return {
        "queries": queries,
        "cold_total": cold,
        "warm_total": warm,
        "stats": service.cache.stats(),
    }


def main():
    """Main benchmark function."""
    print("⚡ Price Selector Lookup Benchmark")
    print("=" * 40)

    with tempfile.TemporaryDirectory() as tmp:
        store = PriceStore(str(Path(tmp) / "bench.db"))
        store.save_all(load_seed_file(project_root / "data" / "prices.yaml"))

        for size in [100, 500, 1000]:
            try:
                results = asyncio.run(benchmark_lookups(store, size))

                print(f"\n📊 Results for {size} queries:")
                print(f"   Cold: {results['cold_total']*1000/size:.3f}ms per lookup")
                print(f"   Warm: {results['warm_total']*1000/size:.3f}ms per lookup")
                print(f"   Cache hits: {results['stats']['hits']}")

            except Exception as e:
                print(f"   ❌ Benchmark failed: {e}")


if __name__ == "__main__":
    main()
