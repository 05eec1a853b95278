"""
Invalid input error classifications.

These exceptions are raised synchronously at construction and validation
boundaries. They represent client-side faults and never reach the cache or
the resolver.
"""

from typing import Any, Dict, Optional


class InvalidInputError(Exception):
    """Base class for rejected input data."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class InvalidPriceDataError(InvalidInputError):
    """A price record field violates its construction rules."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class InvalidDateRangeError(InvalidInputError):
    """Validity window with start after end, or missing bounds."""

    def __init__(self, message: str, start: Any = None, end: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.start = start
        self.end = end


class InvalidCurrencyError(InvalidInputError):
    """Currency code is empty or not an ISO-4217 code."""

    def __init__(self, message: str, currency_code: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.currency_code = currency_code


class InvalidQueryError(InvalidInputError):
    """Lookup parameters (timestamp, product id, brand id) are malformed."""

    def __init__(self, message: str, parameter: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.parameter = parameter
        self.value = value
