"""Storage boundary for candidate price lookups."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime

from ..domain.models import PriceRecord
from ..utils.time import normalize_timestamp


class PriceRepository(ABC):
    """Returns candidate records for a product/brand at an instant."""

    @abstractmethod
    async def find_candidates(
        self,
        applied_at: datetime,
        product_id: int,
        brand_id: int
    ) -> list[PriceRecord]:
        """
        Fetch records for ``product_id``/``brand_id`` valid at ``applied_at``.

        Implementations should order by priority descending. Callers must not
        rely on that ordering.

        Raises:
            StorageUnavailableError: If the backing store cannot be queried
            StorageTimeoutError: If the query exceeds its time bound
        """


class InMemoryPriceRepository(PriceRepository):
    """List-backed repository, used for seeding and tests."""

    def __init__(self, records: Iterable[PriceRecord] = ()):
        self.records: list[PriceRecord] = list(records)

    def add(self, record: PriceRecord) -> None:
        self.records.append(record)

    async def find_candidates(
        self,
        applied_at: datetime,
        product_id: int,
        brand_id: int
    ) -> list[PriceRecord]:
        applied_at = normalize_timestamp(applied_at)
        matches = [
            r for r in self.records
            if r.is_applicable(applied_at, product_id, brand_id)
        ]
        # sorted() is stable, so equal priorities keep insertion order
        return sorted(matches, key=lambda r: (-r.priority, r.price_list_id))
