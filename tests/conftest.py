"""Shared fixtures for the test suite."""

import os
import tempfile

# Settings are read at import time, so the environment is prepared first
_DB_DIR: str = tempfile.mkdtemp(prefix="expirycal-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["REFERENCE_DATE"] = "2024-01-10"
os.environ["DEBOUNCE_MS"] = "60000"

# pylint: disable=wrong-import-position
import typing as t  # noqa: E402
from datetime import date, datetime, timezone  # noqa: E402

import pytest  # noqa: E402

from expirycal.core.config import AggregationConfig  # noqa: E402
from expirycal.schemas.item import InventoryItem  # noqa: E402

REFERENCE_DATE: date = date(2024, 1, 10)
CREATED_AT: datetime = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(name="db_path")
def fixture_db_path() -> str:
    """Path of the SQLite file used by the application under test."""
    return os.path.join(_DB_DIR, "test.db")


@pytest.fixture(name="reference_date")
def fixture_reference_date() -> date:
    """The fixed reference date used across the examples."""
    return REFERENCE_DATE


@pytest.fixture(name="config")
def fixture_config() -> AggregationConfig:
    """Default aggregation options."""
    return AggregationConfig()


@pytest.fixture(name="make_item")
def fixture_make_item() -> t.Callable[..., InventoryItem]:
    """Factory building inventory items with sensible defaults."""

    def make_item(
        item_id: str, expiry_date: t.Any = None, **overrides: t.Any
    ) -> InventoryItem:
        fields: t.Dict[str, t.Any] = {
            "id": item_id,
            "name": f"Item {item_id}",
            "quantity": 1,
            "expiry_date": expiry_date,
            "created_at": CREATED_AT,
        }
        fields.update(overrides)
        return InventoryItem(**fields)

    return make_item
