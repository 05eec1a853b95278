"""
Price domain: value objects, the PriceRecord entity, its factory and the
priority resolver.
"""

from .factory import create_price_record, create_price_record_from_values
from .models import DateRange, Money, PriceRecord
from .resolver import PriceResolver

__all__ = [
    "DateRange",
    "Money",
    "PriceRecord",
    "PriceResolver",
    "create_price_record",
    "create_price_record_from_values",
]
