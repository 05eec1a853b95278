"""
Priority-based selection among applicable price records.

Storage is expected to hand over candidates ordered by priority descending,
but the resolver re-checks applicability and re-derives the maximum itself.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Optional

import structlog

from ..errors import ResolutionInvariantError
from ..logging.config import log_resolution_decision
from .models import PriceRecord

logger = structlog.get_logger(__name__)


def _outranks(candidate: PriceRecord, best: PriceRecord) -> bool:
    """Higher priority wins; on equal priority the smaller price list id wins."""
    if candidate.has_higher_priority_than(best):
        return True
    if candidate.priority == best.priority:
        return candidate.price_list_id < best.price_list_id
    return False


class PriceResolver:
    """Selects the single applicable price record for a query."""

    def __init__(self) -> None:
        self.logger = logger

    def applicable(
        self,
        candidates: Iterable[PriceRecord],
        applied_at: datetime,
        product_id: int,
        brand_id: int
    ) -> list[PriceRecord]:
        """Filter candidates to those applicable at ``applied_at``, preserving order."""
        result = []
        for candidate in candidates:
            if not isinstance(candidate, PriceRecord):
                raise ResolutionInvariantError(
                    f"Candidate is not a PriceRecord: {type(candidate).__name__}",
                    candidate=candidate,
                )
            if candidate.is_applicable(applied_at, product_id, brand_id):
                result.append(candidate)
        return result

    def resolve(
        self,
        candidates: Iterable[PriceRecord],
        applied_at: datetime,
        product_id: int,
        brand_id: int
    ) -> Optional[PriceRecord]:
        """
        Return the applicable record with the highest priority, or None.

        Ties on priority go to the smallest price list id; if that also ties,
        the earliest candidate in input order is kept.
        """
        applicable = self.applicable(candidates, applied_at, product_id, brand_id)

        best: Optional[PriceRecord] = None
        for candidate in applicable:
            if best is None or _outranks(candidate, best):
                best = candidate

        log_resolution_decision(
            self.logger,
            product_id=product_id,
            brand_id=brand_id,
            applied_at=applied_at,
            candidate_count=len(applicable),
            selected=best,
        )
        return best
