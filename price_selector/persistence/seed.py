"""Load price list records from YAML seed files."""

from pathlib import Path
from typing import Any, Union

import yaml

from ..domain.factory import create_price_record
from ..domain.models import PriceRecord
from ..errors import InvalidPriceDataError
from ..utils.time import normalize_timestamp, parse_timestamp

_REQUIRED = (
    "brand_id", "price_list", "product_id", "priority",
    "start_date", "end_date", "price", "curr",
)


def _as_datetime(value: Any, field: str):
    # PyYAML already turns unquoted ISO timestamps into datetimes
    if hasattr(value, "isoformat") and hasattr(value, "hour"):
        return normalize_timestamp(value)
    if isinstance(value, str):
        try:
            return parse_timestamp(value)
        except ValueError as e:
            raise InvalidPriceDataError(f"Invalid {field}: {value!r}", field=field, value=value) from e
    raise InvalidPriceDataError(f"Invalid {field}: {value!r}", field=field, value=value)


def record_from_mapping(entry: dict[str, Any]) -> PriceRecord:
    """Build a PriceRecord from one seed entry."""
    missing = [name for name in _REQUIRED if name not in entry]
    if missing:
        raise InvalidPriceDataError(
            f"Seed entry missing fields: {', '.join(missing)}", field=missing[0]
        )

    return create_price_record(
        id=entry.get("id"),
        brand_id=entry["brand_id"],
        price_list_id=entry["price_list"],
        product_id=entry["product_id"],
        priority=entry["priority"],
        start_date=_as_datetime(entry["start_date"], "start_date"),
        end_date=_as_datetime(entry["end_date"], "end_date"),
        amount=str(entry["price"]),
        currency_code=entry["curr"],
    )


def load_seed_file(path: Union[str, Path]) -> list[PriceRecord]:
    """
    Load records from a YAML file with a top-level ``prices`` list.

    Raises:
        InvalidPriceDataError: If any entry fails validation
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return [record_from_mapping(entry) for entry in data.get("prices", [])]
