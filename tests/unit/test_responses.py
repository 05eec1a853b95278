"""Tests for response projection and error mapping."""

import asyncio
from datetime import datetime

import orjson
import pytest

from price_selector.errors import (
    CacheUnavailableError,
    ErrorKind,
    InvalidQueryError,
    ResolutionInvariantError,
    StorageTimeoutError,
    StorageUnavailableError,
)
from price_selector.responses import (
    STATUS_BY_KIND,
    build_response,
    error_response,
    to_price_response,
)


class TestPriceProjection:
    """Test the success body."""

    def test_projection_fields(self, promo_price):
        """Test projection fields."""
        response = to_price_response(promo_price)

        assert response.product_id == 35455
        assert response.brand_id == 1
        assert response.price_list == 2
        assert response.start_date == datetime(2020, 6, 14, 15, 0)
        assert response.end_date == datetime(2020, 6, 14, 18, 30)
        assert str(response.final_price) == "25.45"
        assert response.currency == "EUR"

    def test_json_body(self, promo_price):
        """Test the JSON body keys and formatting."""
        body = orjson.loads(to_price_response(promo_price).to_json())

        assert body == {
            "productId": 35455,
            "brandId": 1,
            "priceList": 2,
            "startDate": "2020-06-14T15:00:00.000000",
            "endDate": "2020-06-14T18:30:00.000000",
            "finalPrice": "25.45",
            "currency": "EUR",
        }

    def test_found_is_200(self, base_price):
        """Test found is 200."""
        response = build_response(base_price)
        assert response.status == 200
        assert response.body["finalPrice"] == "35.50"

    def test_absent_is_404(self):
        """Test absent is 404."""
        response = build_response(None)
        assert response.status == 404
        assert orjson.loads(response.to_json())["error"] == "not_found"


class TestErrorResponses:
    """Test exception to status mapping."""

    def test_invalid_input_is_400(self):
        """Test invalid input is 400."""
        response = error_response(InvalidQueryError("product_id must be a positive integer"))
        assert response.status == 400
        assert response.body == {
            "error": "invalid_input",
            "message": "product_id must be a positive integer",
        }

    @pytest.mark.parametrize("exc", [
        StorageUnavailableError("connection refused"),
        StorageTimeoutError("slow", timeout_seconds=2.0),
    ])
    def test_storage_failures_are_503(self, exc):
        """Test storage failures are 503."""
        response = error_response(exc)
        assert response.status == 503
        assert response.body["retryable"] is True
        # driver details stay out of the body
        assert "connection refused" not in response.body["message"]

    @pytest.mark.parametrize("exc", [
        CacheUnavailableError("gone"),
        ResolutionInvariantError("bad candidate"),
        RuntimeError("boom"),
        asyncio.CancelledError(),
    ])
    def test_other_failures_are_500(self, exc):
        """Test other failures are 500."""
        response = error_response(exc)
        assert response.status == 500
        assert response.body["message"] == "Internal error"

    def test_every_kind_has_a_status(self):
        """Test every kind has a status."""
        assert set(STATUS_BY_KIND) == set(ErrorKind)
