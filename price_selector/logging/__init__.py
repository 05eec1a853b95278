"""
Logging configuration and utilities for the price selector.
"""
from .config import configure_logging, get_cache_logger, get_logger

__all__ = ["configure_logging", "get_logger", "get_cache_logger"]
