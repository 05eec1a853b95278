"""Tagged error kinds and classification for boundary mapping."""

from enum import Enum

from .infrastructure import CacheUnavailableError, StorageError, StorageTimeoutError
from .invalid_input import InvalidInputError


class ErrorKind(str, Enum):
    """Outcome categories the presentation layer maps to responses."""
    INVALID_INPUT = "invalid_input"
    STORAGE_TIMEOUT = "storage_timeout"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    CACHE_UNAVAILABLE = "cache_unavailable"
    INTERNAL = "internal"


def classify_error(exc: BaseException) -> ErrorKind:
    """Return the kind of an exception, checking the most specific types first."""
    if isinstance(exc, InvalidInputError):
        return ErrorKind.INVALID_INPUT
    if isinstance(exc, StorageTimeoutError):
        return ErrorKind.STORAGE_TIMEOUT
    if isinstance(exc, StorageError):
        return ErrorKind.STORAGE_UNAVAILABLE
    if isinstance(exc, CacheUnavailableError):
        return ErrorKind.CACHE_UNAVAILABLE
    # ResolutionInvariantError and anything unexpected
    return ErrorKind.INTERNAL
