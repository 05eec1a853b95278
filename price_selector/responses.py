"""
Response projection for the presentation layer.

Maps a lookup outcome (a PriceRecord, None, or an exception) to a status code
and a body. Errors are dispatched on their ErrorKind.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

import orjson
import structlog

from .domain.models import PriceRecord
from .errors import ErrorKind, classify_error
from .utils.time import TIMESPEC

logger = structlog.get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.STORAGE_TIMEOUT: 503,
    ErrorKind.STORAGE_UNAVAILABLE: 503,
    ErrorKind.CACHE_UNAVAILABLE: 500,
    ErrorKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class PriceResponse:
    """Public fields of a resolved price."""
    product_id: int
    brand_id: int
    price_list: int
    start_date: datetime
    end_date: datetime
    final_price: Decimal
    currency: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "productId": self.product_id,
            "brandId": self.brand_id,
            "priceList": self.price_list,
            "startDate": self.start_date.isoformat(timespec=TIMESPEC),
            "endDate": self.end_date.isoformat(timespec=TIMESPEC),
            "finalPrice": str(self.final_price),
            "currency": self.currency,
        }

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict())


@dataclass(frozen=True)
class LookupResponse:
    """Status code plus JSON-ready body."""
    status: int
    body: dict[str, Any]

    def to_json(self) -> bytes:
        return orjson.dumps(self.body)


def to_price_response(record: PriceRecord) -> PriceResponse:
    return PriceResponse(
        product_id=record.product_id,
        brand_id=record.brand_id,
        price_list=record.price_list_id,
        start_date=record.start_date,
        end_date=record.end_date,
        final_price=record.price_amount,
        currency=record.currency_code,
    )


def build_response(result: Optional[PriceRecord]) -> LookupResponse:
    """200 with the projection when a price applies, 404 otherwise."""
    if result is None:
        return LookupResponse(
            status=404,
            body={"error": "not_found", "message": "No applicable price found"},
        )
    return LookupResponse(status=200, body=to_price_response(result).to_dict())


def error_response(exc: BaseException) -> LookupResponse:
    """Map an exception raised by the lookup to a response."""
    kind = classify_error(exc)
    status = STATUS_BY_KIND[kind]

    body: dict[str, Any] = {"error": kind.value}
    if kind is ErrorKind.INVALID_INPUT:
        body["message"] = str(exc)
    elif kind in (ErrorKind.STORAGE_TIMEOUT, ErrorKind.STORAGE_UNAVAILABLE):
        body["message"] = "Price storage temporarily unavailable"
        body["retryable"] = True
    else:
        body["message"] = "Internal error"

    if status >= 500:
        logger.error("Lookup failed", error_kind=kind.value, error=str(exc))
    else:
        logger.info("Lookup rejected", error_kind=kind.value, error=str(exc))

    return LookupResponse(status=status, body=body)
