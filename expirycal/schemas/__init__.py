"""Schemas package."""

from expirycal.schemas.calendar import (
    BucketEntry,
    CalendarSnapshot,
    DateBucket,
    ExpiryIssue,
    Indicator,
    LegendCounts,
    MonthAggregate,
    RefreshResult,
)
from expirycal.schemas.date_range import DateRange
from expirycal.schemas.item import (
    InventoryItem,
    ItemCreate,
    ItemFilter,
    ItemListResponse,
    ItemResponse,
    ItemSort,
    SortDirection,
    SortField,
    StorageLocation,
)
from expirycal.schemas.urgency import (
    DATED_LEVELS,
    URGENCY_STYLES,
    ColorScheme,
    Urgency,
    UrgencyLevel,
    UrgencyStyle,
)
from expirycal.schemas.window import VisibleWindow, WindowRange

__all__ = [
    "BucketEntry",
    "CalendarSnapshot",
    "ColorScheme",
    "DATED_LEVELS",
    "DateBucket",
    "DateRange",
    "ExpiryIssue",
    "Indicator",
    "InventoryItem",
    "ItemCreate",
    "ItemFilter",
    "ItemListResponse",
    "ItemResponse",
    "ItemSort",
    "LegendCounts",
    "MonthAggregate",
    "RefreshResult",
    "SortDirection",
    "SortField",
    "StorageLocation",
    "URGENCY_STYLES",
    "Urgency",
    "UrgencyLevel",
    "UrgencyStyle",
    "VisibleWindow",
    "WindowRange",
]
