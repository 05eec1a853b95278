"""
Price list persistence: the repository boundary, the SQLite store and seed
loading.
"""

from .base import InMemoryPriceRepository, PriceRepository
from .price_store import PriceStore
from .seed import load_seed_file, record_from_mapping

__all__ = [
    "PriceRepository",
    "InMemoryPriceRepository",
    "PriceStore",
    "load_seed_file",
    "record_from_mapping",
]
