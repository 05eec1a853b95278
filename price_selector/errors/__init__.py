"""
Error classification for price resolution.

Invalid input fails fast at construction boundaries, storage failures are
retryable and propagate, cache failures degrade to direct computation.
"""

from .infrastructure import (
    CacheUnavailableError,
    ResolutionInvariantError,
    StorageError,
    StorageTimeoutError,
    StorageUnavailableError,
)
from .invalid_input import (
    InvalidCurrencyError,
    InvalidDateRangeError,
    InvalidInputError,
    InvalidPriceDataError,
    InvalidQueryError,
)
from .kinds import ErrorKind, classify_error
from .recovery import GracefulDegradationError, RecoverableError

__all__ = [
    # Invalid input
    "InvalidInputError",
    "InvalidPriceDataError",
    "InvalidDateRangeError",
    "InvalidCurrencyError",
    "InvalidQueryError",
    # Infrastructure
    "StorageError",
    "StorageUnavailableError",
    "StorageTimeoutError",
    "CacheUnavailableError",
    "ResolutionInvariantError",
    # Recovery categories
    "RecoverableError",
    "GracefulDegradationError",
    # Classification
    "ErrorKind",
    "classify_error",
]
