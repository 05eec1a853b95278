"""Configuration defaults, loading and validation."""

from .defaults import CacheParams, LoggingParams, StorageParams, get_default_config
from .loader import ConfigLoader, ConfigurationError, Settings

__all__ = [
    "CacheParams",
    "StorageParams",
    "LoggingParams",
    "get_default_config",
    "ConfigLoader",
    "ConfigurationError",
    "Settings",
]
