"""
Infrastructure failure classifications.

Storage failures propagate to the orchestration boundary untouched and are
never cached as a negative result.
"""

from typing import Any, Dict, Optional

from .recovery import GracefulDegradationError, RecoverableError


class StorageError(RecoverableError):
    """Base class for storage adapter failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target
        self.context = context or {}


class StorageUnavailableError(StorageError):
    """Database unreachable, locked, or returned a driver error."""


class StorageTimeoutError(StorageError):
    """Candidate query did not complete within the configured timeout."""

    def __init__(self, message: str, timeout_seconds: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timeout_seconds = timeout_seconds


class CacheUnavailableError(GracefulDegradationError):
    """Cache storage missing or failing; lookups fall back to direct computation."""

    def __init__(self, message: str, cache_key: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            degraded_functionality="resolution_cache",
            fallback_strategy="compute_without_caching",
            **kwargs,
        )
        self.cache_key = cache_key


class ResolutionInvariantError(Exception):
    """A candidate handed to the resolver broke its own construction invariants."""

    def __init__(self, message: str, candidate: Any = None):
        super().__init__(message)
        self.candidate = candidate
        self.recoverable = False
