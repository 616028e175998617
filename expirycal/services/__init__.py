"""Services package."""

from expirycal.services.calendar_pipeline import CalendarPipeline
from expirycal.services.date_aggregator import (
    DateAggregator,
    aggregate,
    group_items_by_date,
)
from expirycal.services.item_filters import filter_items, sort_items
from expirycal.services.item_service import ItemNotFoundError, ItemService
from expirycal.services.item_source import (
    DatabaseItemSource,
    InMemoryItemSource,
    ItemSource,
)
from expirycal.services.legend_calculator import summarize
from expirycal.services.presentation_sink import (
    PresentationSink,
    SnapshotSink,
)
from expirycal.services.render_gate import (
    AggregateFingerprint,
    RenderGate,
    fingerprint,
    should_update,
)
from expirycal.services.urgency_classifier import (
    UrgencyClassifier,
    classify,
    filter_by_urgency,
    sort_by_urgency,
)
from expirycal.services.windowed_provider import (
    WindowedItemProvider,
    stable_order,
)

__all__ = [
    "AggregateFingerprint",
    "CalendarPipeline",
    "DatabaseItemSource",
    "DateAggregator",
    "InMemoryItemSource",
    "ItemNotFoundError",
    "ItemService",
    "ItemSource",
    "PresentationSink",
    "RenderGate",
    "SnapshotSink",
    "UrgencyClassifier",
    "WindowedItemProvider",
    "aggregate",
    "classify",
    "filter_by_urgency",
    "filter_items",
    "fingerprint",
    "group_items_by_date",
    "should_update",
    "sort_by_urgency",
    "sort_items",
    "stable_order",
    "summarize",
]
