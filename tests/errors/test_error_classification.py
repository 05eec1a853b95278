"""Tests for the error taxonomy."""

import pytest

from price_selector.errors import (
    CacheUnavailableError,
    ErrorKind,
    GracefulDegradationError,
    InvalidCurrencyError,
    InvalidDateRangeError,
    InvalidInputError,
    InvalidPriceDataError,
    InvalidQueryError,
    RecoverableError,
    ResolutionInvariantError,
    StorageError,
    StorageTimeoutError,
    StorageUnavailableError,
    classify_error,
)


class TestHierarchy:
    """Test base classes and recovery attributes."""

    @pytest.mark.parametrize("error_cls", [
        InvalidPriceDataError, InvalidDateRangeError, InvalidCurrencyError, InvalidQueryError,
    ])
    def test_invalid_input_not_recoverable(self, error_cls):
        """Test invalid input not recoverable."""
        error = error_cls("bad")
        assert isinstance(error, InvalidInputError)
        assert error.recoverable is False

    def test_storage_errors_are_retryable(self):
        """Test storage errors are retryable."""
        error = StorageTimeoutError("slow", timeout_seconds=2.0, operation="find_candidates")
        assert isinstance(error, StorageError)
        assert isinstance(error, RecoverableError)
        assert error.retryable is True
        assert error.operation == "find_candidates"
        assert error.timeout_seconds == 2.0

    def test_cache_unavailable_degrades(self):
        """Test cache unavailable degrades."""
        error = CacheUnavailableError("closed", cache_key="k")
        assert isinstance(error, GracefulDegradationError)
        assert error.allows_degradation is True
        assert error.fallback_strategy == "compute_without_caching"
        assert error.cache_key == "k"

    def test_invalid_input_context(self):
        """Test invalid input context."""
        error = InvalidQueryError("bad", parameter="brand_id", value=0, context={"source": "http"})
        assert error.parameter == "brand_id"
        assert error.value == 0
        assert error.context == {"source": "http"}


class TestClassifyError:
    """Test kind dispatch."""

    @pytest.mark.parametrize("exc,kind", [
        (InvalidQueryError("x"), ErrorKind.INVALID_INPUT),
        (InvalidCurrencyError("x"), ErrorKind.INVALID_INPUT),
        (StorageTimeoutError("x"), ErrorKind.STORAGE_TIMEOUT),
        (StorageUnavailableError("x"), ErrorKind.STORAGE_UNAVAILABLE),
        (StorageError("x"), ErrorKind.STORAGE_UNAVAILABLE),
        (CacheUnavailableError("x"), ErrorKind.CACHE_UNAVAILABLE),
        (ResolutionInvariantError("x"), ErrorKind.INTERNAL),
        (KeyError("x"), ErrorKind.INTERNAL),
    ])
    def test_classification(self, exc, kind):
        """Test classify_error for each error type."""
        assert classify_error(exc) is kind

    def test_kind_values_are_strings(self):
        """Test kind values are strings."""
        assert ErrorKind.STORAGE_TIMEOUT == "storage_timeout"
