"""Default configuration parameters for the price selector."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheParams:
    """Resolution cache parameters."""
    enabled: bool = True                   # False runs every lookup uncached
    ttl_seconds: float = 300.0             # Expire-after-write, 5 minutes
    max_size: int = 1000                   # LRU bound on entry count
    deduplicate_inflight: bool = False     # Share one compute per key under concurrency


@dataclass(frozen=True)
class StorageParams:
    """Storage adapter parameters."""
    db_path: str = "prices.db"
    query_timeout_seconds: float = 2.0
    connect_timeout_seconds: float = 30.0


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    cache: CacheParams
    storage: StorageParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        cache=CacheParams(),
        storage=StorageParams(),
        logging=LoggingParams(),
    )
