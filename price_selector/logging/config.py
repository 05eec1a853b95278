"""
Centralized logging configuration for the price selector.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the system should use this
configuration to ensure consistent formatting and structured logging.
"""
import logging
import sys
from datetime import datetime
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_cache_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for resolution cache events.

    Hits, misses, stores, evictions and degraded lookups are all emitted
    through this logger so they can be filtered by ``subsystem``.
    """
    return get_logger(name).bind(subsystem="cache")


def log_resolution_decision(
    logger: FilteringBoundLogger,
    product_id: int,
    brand_id: int,
    applied_at: datetime,
    candidate_count: int,
    selected: Optional[Any] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log the outcome of a single price resolution.

    Args:
        logger: Structlog logger instance
        product_id: Queried product
        brand_id: Queried brand
        applied_at: Normalized query instant
        candidate_count: Number of applicable candidates considered
        selected: Chosen PriceRecord, or None when nothing applies
        context: Additional context data
    """
    bound_logger = logger.bind(
        product_id=product_id,
        brand_id=brand_id,
        applied_at=applied_at.isoformat(),
        candidate_count=candidate_count,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if selected is None:
        bound_logger.debug("No applicable price")
    else:
        bound_logger.debug(
            "Price resolved",
            record_id=selected.id,
            price_list_id=selected.price_list_id,
            priority=selected.priority,
        )
