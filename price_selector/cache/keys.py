"""Deterministic cache keys for price lookups."""

from datetime import datetime

from ..utils.time import format_timestamp

KEY_DELIMITER = "_"


class CacheKeyBuilder:
    """
    Serializes ``(applied_at, product_id, brand_id)`` into a stable string.

    The timestamp is normalized to naive UTC and always written with
    microsecond precision, so equal instants give identical keys whatever
    offset or precision the caller passed in.
    """

    delimiter = KEY_DELIMITER

    def build_key(self, applied_at: datetime, product_id: int, brand_id: int) -> str:
        return self.delimiter.join((
            format_timestamp(applied_at),
            str(int(product_id)),
            str(int(brand_id)),
        ))


def build_cache_key(applied_at: datetime, product_id: int, brand_id: int) -> str:
    """Module-level shortcut for ``CacheKeyBuilder().build_key``."""
    return CacheKeyBuilder().build_key(applied_at, product_id, brand_id)
