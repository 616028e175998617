"""Pydantic schemas for inventory items."""

import enum
import typing as t
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from expirycal.schemas.date_range import DateRange
from expirycal.schemas.urgency import Urgency, UrgencyLevel


class StorageLocation(str, enum.Enum):
    """Where an item is stored."""

    FRIDGE = "fridge"
    SHELF = "shelf"


class InventoryItem(BaseModel):
    """Read-only snapshot of one inventory record.

    The expiry date is kept as raw text so that malformed values reach
    the classifier, which reports them instead of failing the snapshot.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    name: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit: str | None = None
    location: StorageLocation = StorageLocation.FRIDGE
    category: str | None = None
    expiry_date: str | None = None
    notes: str | None = None
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: t.Any) -> t.Any:
        """Accept integer identifiers from the store.

        Args:
            v (Any): The raw identifier.

        Returns:
            Any: The identifier as text when it was an integer.
        """
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("expiry_date", mode="before")
    @classmethod
    def normalize_expiry_date(cls, v: t.Any) -> t.Any:
        """Normalize date values to ISO text and blanks to None.

        Args:
            v (Any): The raw expiry date.

        Returns:
            Any: ISO text, None, or the value unchanged.
        """
        if isinstance(v, datetime):
            return v.isoformat()
        if isinstance(v, date):
            return v.isoformat()
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ItemCreate(BaseModel):
    """Schema for creating a new inventory item."""

    name: str = Field(..., min_length=1, max_length=255)
    quantity: float = Field(1, gt=0)
    unit: str | None = Field(None, max_length=32)
    location: StorageLocation = StorageLocation.FRIDGE
    category: str | None = Field(None, max_length=50)
    expiry_date: date | None = None
    notes: str | None = Field(None, max_length=1000)


class ItemResponse(InventoryItem):
    """Schema for an inventory item together with its urgency."""

    urgency: Urgency


class ItemListResponse(BaseModel):
    """Schema for item list response."""

    items: t.List[ItemResponse]
    total: int


class SortField(str, enum.Enum):
    """Fields items can be sorted by."""

    EXPIRY_DATE = "expiry_date"
    NAME = "name"
    CREATED_AT = "created_at"
    QUANTITY = "quantity"
    URGENCY = "urgency"


class SortDirection(str, enum.Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class ItemSort(BaseModel):
    """Primary and optional secondary sort keys."""

    model_config = ConfigDict(frozen=True)

    field: SortField = SortField.EXPIRY_DATE
    direction: SortDirection = SortDirection.ASC
    secondary_field: SortField | None = None
    secondary_direction: SortDirection = SortDirection.ASC


class ItemFilter(BaseModel):
    """Criteria for narrowing an item list.

    Empty criteria match everything.
    """

    model_config = ConfigDict(frozen=True)

    categories: t.Tuple[str, ...] = ()
    locations: t.Tuple[StorageLocation, ...] = ()
    urgencies: t.Tuple[UrgencyLevel, ...] = ()
    date_range: DateRange | None = None
    search: str | None = None
