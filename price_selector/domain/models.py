"""
Domain models for price resolution.

Immutable value objects (Money, DateRange) and the PriceRecord entity. The
structured value objects are the only stored representation; flat scalar
views are derived on demand for storage and serialization.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from ..errors import InvalidCurrencyError, InvalidDateRangeError, InvalidPriceDataError
from ..utils.time import normalize_timestamp

# Active ISO-4217 alphabetic codes
ISO_4217_CODES = frozenset({
    "AED", "AFN", "ALL", "AMD", "ANG", "AOA", "ARS", "AUD", "AWG", "AZN",
    "BAM", "BBD", "BDT", "BGN", "BHD", "BIF", "BMD", "BND", "BOB", "BRL",
    "BSD", "BTN", "BWP", "BYN", "BZD", "CAD", "CDF", "CHF", "CLP", "CNY",
    "COP", "CRC", "CUP", "CVE", "CZK", "DJF", "DKK", "DOP", "DZD", "EGP",
    "ERN", "ETB", "EUR", "FJD", "FKP", "GBP", "GEL", "GHS", "GIP", "GMD",
    "GNF", "GTQ", "GYD", "HKD", "HNL", "HTG", "HUF", "IDR", "ILS", "INR",
    "IQD", "IRR", "ISK", "JMD", "JOD", "JPY", "KES", "KGS", "KHR", "KMF",
    "KPW", "KRW", "KWD", "KYD", "KZT", "LAK", "LBP", "LKR", "LRD", "LSL",
    "LYD", "MAD", "MDL", "MGA", "MKD", "MMK", "MNT", "MOP", "MRU", "MUR",
    "MVR", "MWK", "MXN", "MYR", "MZN", "NAD", "NGN", "NIO", "NOK", "NPR",
    "NZD", "OMR", "PAB", "PEN", "PGK", "PHP", "PKR", "PLN", "PYG", "QAR",
    "RON", "RSD", "RUB", "RWF", "SAR", "SBD", "SCR", "SDG", "SEK", "SGD",
    "SHP", "SLE", "SOS", "SRD", "SSP", "STN", "SVC", "SYP", "SZL", "THB",
    "TJS", "TMT", "TND", "TOP", "TRY", "TTD", "TWD", "TZS", "UAH", "UGX",
    "USD", "UYU", "UZS", "VES", "VND", "VUV", "WST", "XAF", "XCD", "XOF",
    "XPF", "YER", "ZAR", "ZMW", "ZWL",
})


def to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    """Coerce a numeric value to Decimal without binary float artifacts."""
    if isinstance(value, bool) or value is None:
        raise InvalidPriceDataError("Amount must be numeric", field="amount", value=value)
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # str() first so 25.45 stays 25.45 instead of its binary expansion
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise InvalidPriceDataError(
                f"Amount is not a number: {value!r}", field="amount", value=value
            ) from e
    if not result.is_finite():
        raise InvalidPriceDataError("Amount must be finite", field="amount", value=value)
    return result


@dataclass(frozen=True)
class Money:
    """Amount plus ISO-4217 currency.

    Equality compares amounts numerically, so ``35.50 EUR == 35.5 EUR``.
    Decimal hashing is value-based, which keeps ``hash`` consistent with that.
    """
    amount: Decimal
    currency_code: str

    def __post_init__(self):
        object.__setattr__(self, "amount", to_decimal(self.amount))

        code = self.currency_code
        if not isinstance(code, str) or not code.strip():
            raise InvalidCurrencyError("Currency code cannot be null or empty", currency_code=code)
        if code not in ISO_4217_CODES:
            raise InvalidCurrencyError(f"Unknown ISO-4217 currency code: {code}", currency_code=code)

    @classmethod
    def of(cls, amount: Union[Decimal, int, float, str], currency_code: str) -> "Money":
        return cls(amount=amount, currency_code=currency_code)

    def is_equal_to(self, other: "Money") -> bool:
        return self == other

    def __str__(self) -> str:
        return f"{self.amount} {self.currency_code}"


@dataclass(frozen=True)
class DateRange:
    """Closed interval [start, end] of naive UTC datetimes."""
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start is None or self.end is None:
            raise InvalidDateRangeError(
                "Start and end dates cannot be null", start=self.start, end=self.end
            )
        start = normalize_timestamp(self.start)
        end = normalize_timestamp(self.end)
        if start > end:
            raise InvalidDateRangeError(
                f"Start date {start.isoformat()} cannot be after end date {end.isoformat()}",
                start=start,
                end=end,
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @classmethod
    def of(cls, start: datetime, end: datetime) -> "DateRange":
        return cls(start=start, end=end)

    def contains(self, ts: datetime) -> bool:
        """True if ``start <= ts <= end`` (both ends inclusive)."""
        ts = normalize_timestamp(ts)
        return self.start <= ts <= self.end

    def is_active(self, ts: datetime) -> bool:
        return self.contains(ts)

    def overlaps(self, other: "DateRange") -> bool:
        """Inclusive overlap; ranges sharing an endpoint overlap."""
        return not (self.end < other.start) and not (other.end < self.start)


@dataclass(frozen=True)
class PriceRecord:
    """One pricing-list row. Construct through ``domain.factory``."""
    id: Optional[int]
    product_id: int
    brand_id: int
    price_list_id: int
    priority: int
    validity: DateRange
    amount: Money

    def is_applicable(self, applied_at: datetime, product_id: int, brand_id: int) -> bool:
        return (
            self.product_id == product_id
            and self.brand_id == brand_id
            and self.validity.contains(applied_at)
        )

    def has_higher_priority_than(self, other: "PriceRecord") -> bool:
        return self.priority > other.priority

    @property
    def start_date(self) -> datetime:
        return self.validity.start

    @property
    def end_date(self) -> datetime:
        return self.validity.end

    @property
    def price_amount(self) -> Decimal:
        return self.amount.amount

    @property
    def currency_code(self) -> str:
        return self.amount.currency_code

    def as_row(self) -> dict[str, Any]:
        """Flat column view used by the storage adapter."""
        return {
            "id": self.id,
            "brand_id": self.brand_id,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "price_list": self.price_list_id,
            "product_id": self.product_id,
            "priority": self.priority,
            "price_amount": self.price_amount,
            "curr": self.currency_code,
        }
