"""Pydantic schemas for calendar aggregates."""

import bisect
import typing as t
from datetime import date

from pydantic import BaseModel, ConfigDict, computed_field

from expirycal.schemas.date_range import DateRange
from expirycal.schemas.item import InventoryItem
from expirycal.schemas.urgency import Urgency, UrgencyLevel


class BucketEntry(BaseModel):
    """One item placed on a calendar date."""

    model_config = ConfigDict(frozen=True)

    item: InventoryItem
    urgency: Urgency


class Indicator(BaseModel):
    """A colored mark shown on a calendar date."""

    model_config = ConfigDict(frozen=True)

    level: UrgencyLevel
    color: str


class DateBucket(BaseModel):
    """All items expiring on one calendar date."""

    model_config = ConfigDict(frozen=True)

    date_key: str
    entries: t.Tuple[BucketEntry, ...]
    indicators: t.Tuple[Indicator, ...]
    exact_count: int
    level_counts: t.Dict[UrgencyLevel, int]
    category_counts: t.Dict[str, int]
    dominant_level: UrgencyLevel
    digest: str


class ExpiryIssue(BaseModel):
    """An expiry date that could not be parsed."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    raw_value: str
    reason: str


class MonthAggregate(BaseModel):
    """Calendar aggregate over a snapshot of items."""

    model_config = ConfigDict(frozen=True)

    reference_date: date
    date_range: DateRange | None = None
    selected_date: date | None = None
    buckets: t.Tuple[DateBucket, ...] = ()
    total_items: int = 0
    level_counts: t.Dict[UrgencyLevel, int]
    category_counts: t.Dict[str, int] = {}
    unscheduled_count: int = 0
    unscheduled_category_counts: t.Dict[str, int] = {}
    out_of_range_count: int = 0
    issues: t.Tuple[ExpiryIssue, ...] = ()

    @property
    def scheduled_count(self) -> int:
        """Number of items placed in a bucket."""
        return sum(self.level_counts.values())

    def bucket(self, date_key: str) -> DateBucket | None:
        """Look up the bucket for a date key.

        Args:
            date_key (str): The ``YYYY-MM-DD`` key.

        Returns:
            DateBucket | None: The bucket, or None if no item expires then.
        """
        index: int = bisect.bisect_left(
            self.buckets, date_key, key=lambda b: b.date_key
        )
        if index < len(self.buckets):
            found: DateBucket = self.buckets[index]
            if found.date_key == date_key:
                return found
        return None


class LegendCounts(BaseModel):
    """Summary counts shown in the calendar legend."""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    expired: int = 0
    today: int = 0
    soon: int = 0
    safe: int = 0
    unscheduled: int = 0
    this_week: int = 0
    per_category: t.Dict[str, int] = {}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def urgent_action_required(self) -> bool:
        """Whether any item is expired or expires today."""
        return self.expired > 0 or self.today > 0


class CalendarSnapshot(BaseModel):
    """Aggregate and legend as handed to the presentation layer."""

    aggregate: MonthAggregate
    legend: LegendCounts


class RefreshResult(BaseModel):
    """Outcome of an immediate calendar refresh."""

    updated: bool
    total_items: int
