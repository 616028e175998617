"""Legend statistics calculated from calendar aggregates."""

import collections
import typing as t
from datetime import date, timedelta

from expirycal.schemas.calendar import LegendCounts, MonthAggregate
from expirycal.schemas.urgency import UrgencyLevel
from expirycal.utils.dates import to_date_key

WEEK_DAYS: int = 7


def summarize(aggregate: MonthAggregate) -> LegendCounts:
    """Reduce an aggregate into legend counts.

    Only the counts carried on the aggregate and its buckets are read,
    never the bucket entries, so the cost grows with the number of
    dates rather than the number of items.

    Args:
        aggregate (MonthAggregate): The calendar aggregate.

    Returns:
        LegendCounts: The legend counts.
    """
    reference: date = aggregate.reference_date
    week_start: str = to_date_key(reference)
    week_end: str = to_date_key(reference + timedelta(days=WEEK_DAYS))

    levels: t.Counter[UrgencyLevel] = collections.Counter()
    per_category: t.Counter[str] = collections.Counter(
        aggregate.unscheduled_category_counts
    )
    this_week: int = 0

    for bucket in aggregate.buckets:
        levels.update(bucket.level_counts)
        per_category.update(bucket.category_counts)
        if week_start <= bucket.date_key <= week_end:
            this_week += bucket.exact_count

    expired: int = levels[UrgencyLevel.EXPIRED]
    today: int = levels[UrgencyLevel.TODAY]

    return LegendCounts(
        total=aggregate.total_items,
        expired=expired,
        today=today,
        soon=levels[UrgencyLevel.SOON],
        safe=levels[UrgencyLevel.SAFE],
        unscheduled=aggregate.unscheduled_count,
        this_week=this_week,
        per_category=dict(sorted(per_category.items())),
    )
