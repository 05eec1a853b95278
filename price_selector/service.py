"""
Price lookup orchestration.

Coordinates the lookup pipeline:
Query → Normalization → Cache Key → Resolution Cache → (miss) Storage → Resolver
"""

from datetime import datetime
from typing import Any, Optional

import structlog

from .cache.keys import CacheKeyBuilder
from .cache.resolution_cache import ResolutionCache
from .config.loader import Settings
from .domain.models import PriceRecord
from .domain.resolver import PriceResolver
from .errors import InvalidQueryError
from .persistence.base import PriceRepository
from .persistence.price_store import PriceStore
from .utils.time import normalize_timestamp

logger = structlog.get_logger(__name__)


def _validate_id(name: str, value: Any) -> int:
    if value is None or isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidQueryError(f"{name} must be a positive integer", parameter=name, value=value)
    return value


def _validate_query(applied_at: Any, product_id: Any, brand_id: Any) -> tuple[datetime, int, int]:
    """Check lookup parameters and return them with the timestamp normalized."""
    if not isinstance(applied_at, datetime):
        raise InvalidQueryError(
            "applied_at must be a datetime", parameter="applied_at", value=applied_at
        )
    product_id = _validate_id("product_id", product_id)
    brand_id = _validate_id("brand_id", brand_id)
    return normalize_timestamp(applied_at), product_id, brand_id


class PriceLookupService:
    """
    Finds the applicable price for a product, brand and instant.

    The cache is an explicit handle fixed at construction; there is no
    process-global named cache.
    """

    def __init__(
        self,
        repository: PriceRepository,
        cache: Optional[ResolutionCache] = None,
        resolver: Optional[PriceResolver] = None,
        key_builder: Optional[CacheKeyBuilder] = None
    ) -> None:
        self.logger = logger
        self.repository = repository
        self.cache = cache if cache is not None else ResolutionCache()
        self.resolver = resolver or PriceResolver()
        self.key_builder = key_builder or CacheKeyBuilder()

        self.logger.info(
            "Price lookup service initialized",
            repository=type(repository).__name__,
            cache_ttl_seconds=self.cache.ttl_seconds,
            cache_max_size=self.cache.max_size,
            cache_available=self.cache.available,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PriceLookupService":
        """Wire a SQLite-backed service from loaded settings."""
        return cls(
            repository=PriceStore.from_params(settings.storage),
            cache=ResolutionCache.from_params(settings.cache),
        )

    async def find_applicable_price(
        self,
        applied_at: datetime,
        product_id: int,
        brand_id: int
    ) -> Optional[PriceRecord]:
        """
        Return the highest-priority record applicable at ``applied_at``.

        Args:
            applied_at: Query instant; aware values are converted to UTC
            product_id: Product identifier (positive)
            brand_id: Brand identifier (positive)

        Returns:
            The applicable PriceRecord, or None when no price applies

        Raises:
            InvalidQueryError: If any parameter is missing or malformed
            StorageUnavailableError: If candidates cannot be fetched
            StorageTimeoutError: If the candidate query times out
        """
        applied_at, product_id, brand_id = _validate_query(applied_at, product_id, brand_id)
        cache_key = self.key_builder.build_key(applied_at, product_id, brand_id)

        self.logger.debug(
            "Searching for applicable price",
            product_id=product_id,
            brand_id=brand_id,
            applied_at=applied_at.isoformat(),
            cache_key=cache_key,
        )

        async def compute() -> Optional[PriceRecord]:
            candidates = await self.repository.find_candidates(applied_at, product_id, brand_id)
            return self.resolver.resolve(candidates, applied_at, product_id, brand_id)

        price = await self.cache.get_or_compute(cache_key, compute)

        if price is None:
            self.logger.debug("No applicable price found", cache_key=cache_key)
        return price

    def evict(self, applied_at: datetime, product_id: int, brand_id: int) -> bool:
        """
        Drop the cached resolution for one query.

        Raises:
            InvalidQueryError: If any parameter is missing or malformed
        """
        applied_at, product_id, brand_id = _validate_query(applied_at, product_id, brand_id)
        return self.cache.evict(self.key_builder.build_key(applied_at, product_id, brand_id))

    def clear_cache(self) -> None:
        self.cache.clear()
