"""
Timestamp normalization for price lookups.

Every instant that reaches the domain, the cache key or the storage query is
a naive datetime in UTC. Aware timestamps are converted to UTC and stripped
of tzinfo; naive timestamps are taken to be UTC already. Sub-second precision
is kept as-is and serialized at microsecond precision everywhere.
"""

from datetime import datetime, timezone

# Fixed serialization precision for cache keys and storage parameters
TIMESPEC = "microseconds"


def normalize_timestamp(ts: datetime) -> datetime:
    """
    Normalize a timestamp to naive UTC.

    Args:
        ts: Naive (assumed UTC) or timezone-aware datetime

    Returns:
        Naive datetime representing the same UTC instant
    """
    if ts.tzinfo is not None and ts.utcoffset() is not None:
        return ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts.replace(tzinfo=None)


def format_timestamp(ts: datetime) -> str:
    """
    Format a timestamp in the canonical serialization.

    Always emits microseconds so that ``10:00:00`` and ``10:00:00.000000``
    cannot diverge between writer and reader.
    """
    return normalize_timestamp(ts).isoformat(timespec=TIMESPEC)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string and normalize it to naive UTC."""
    return normalize_timestamp(datetime.fromisoformat(value))
