"""
Validating constructors for PriceRecord.

All storage rows and seed data pass through here, so a PriceRecord that
exists has positive ids, a non-negative priority, a well-formed validity
window and a non-negative amount in a known currency.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Union

import structlog

from ..errors import InvalidPriceDataError
from .models import DateRange, Money, PriceRecord, to_decimal

logger = structlog.get_logger(__name__)


def _require_positive_int(field: str, value: Any) -> None:
    if value is None or isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidPriceDataError(f"{field} must be a positive integer", field=field, value=value)


def _validate_basic_data(
    brand_id: Any,
    price_list_id: Any,
    product_id: Any,
    priority: Any,
    record_id: Any = None,
) -> None:
    if record_id is not None:
        _require_positive_int("id", record_id)
    _require_positive_int("brand_id", brand_id)
    _require_positive_int("price_list_id", price_list_id)
    _require_positive_int("product_id", product_id)
    if priority is None or isinstance(priority, bool) or not isinstance(priority, int) or priority < 0:
        raise InvalidPriceDataError(
            "priority must be a non-negative integer", field="priority", value=priority
        )


def create_price_record(
    id: Optional[int],
    brand_id: int,
    price_list_id: int,
    product_id: int,
    priority: int,
    start_date: datetime,
    end_date: datetime,
    amount: Union[Decimal, int, float, str],
    currency_code: str,
) -> PriceRecord:
    """
    Build a PriceRecord from flat column values.

    Raises:
        InvalidPriceDataError: If any identifier, priority, date or amount is invalid
        InvalidDateRangeError: If start_date is after end_date
        InvalidCurrencyError: If the currency code is empty or unknown
    """
    logger.debug("Creating price record", product_id=product_id, brand_id=brand_id)

    _validate_basic_data(brand_id, price_list_id, product_id, priority, record_id=id)

    if start_date is None:
        raise InvalidPriceDataError("Start date cannot be null", field="start_date")
    if end_date is None:
        raise InvalidPriceDataError("End date cannot be null", field="end_date")
    if not isinstance(start_date, datetime) or not isinstance(end_date, datetime):
        raise InvalidPriceDataError(
            "Validity bounds must be datetimes",
            field="start_date" if not isinstance(start_date, datetime) else "end_date",
            value=start_date if not isinstance(start_date, datetime) else end_date,
        )

    decimal_amount = to_decimal(amount)
    if decimal_amount < 0:
        raise InvalidPriceDataError(
            "Price amount cannot be negative", field="amount", value=amount
        )

    return PriceRecord(
        id=id,
        product_id=product_id,
        brand_id=brand_id,
        price_list_id=price_list_id,
        priority=priority,
        validity=DateRange.of(start_date, end_date),
        amount=Money.of(decimal_amount, currency_code),
    )


def create_price_record_from_values(
    id: Optional[int],
    brand_id: int,
    price_list_id: int,
    product_id: int,
    priority: int,
    validity: DateRange,
    amount: Money,
) -> PriceRecord:
    """Build a PriceRecord from already-constructed value objects."""
    logger.debug("Creating price record from value objects", product_id=product_id, brand_id=brand_id)

    if validity is None:
        raise InvalidPriceDataError("DateRange cannot be null", field="validity")
    if amount is None:
        raise InvalidPriceDataError("Money cannot be null", field="amount")
    if amount.amount < 0:
        raise InvalidPriceDataError(
            "Price amount cannot be negative", field="amount", value=amount.amount
        )

    _validate_basic_data(brand_id, price_list_id, product_id, priority, record_id=id)

    return PriceRecord(
        id=id,
        product_id=product_id,
        brand_id=brand_id,
        price_list_id=price_list_id,
        priority=priority,
        validity=validity,
        amount=amount,
    )
