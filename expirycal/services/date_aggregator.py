"""Date aggregator - groups classified items into calendar buckets."""

import collections
import hashlib
import logging
import typing as t
from datetime import date

from expirycal.core.config import AggregationConfig
from expirycal.schemas.calendar import (
    BucketEntry,
    DateBucket,
    ExpiryIssue,
    Indicator,
    MonthAggregate,
)
from expirycal.schemas.date_range import DateRange
from expirycal.schemas.item import InventoryItem
from expirycal.schemas.urgency import (
    DATED_LEVELS,
    URGENCY_STYLES,
    Urgency,
    UrgencyLevel,
    UrgencyStyle,
)
from expirycal.services.urgency_classifier import UrgencyClassifier
from expirycal.utils.dates import parse_expiry_date, to_date_key

LOGGER: logging.Logger = logging.getLogger(__name__)

UNCATEGORIZED: str = "Uncategorized"


def category_of(item: InventoryItem) -> str:
    """Category an item is counted under."""
    return item.category or UNCATEGORIZED


def group_items_by_date(
    items: t.Iterable[InventoryItem],
) -> t.Dict[str, t.List[InventoryItem]]:
    """Group items by the date key of their expiry date.

    Items without a parseable expiry date are left out.

    Args:
        items (Iterable[InventoryItem]): The items to group.

    Returns:
        Dict[str, List[InventoryItem]]:
            Items per date key, keys in date order and items by id.
    """
    grouped: t.Dict[str, t.List[InventoryItem]] = collections.defaultdict(
        list
    )
    for item in items:
        if item.expiry_date is None:
            continue
        try:
            expiry: date = parse_expiry_date(item.expiry_date)
        except ValueError:
            continue
        grouped[to_date_key(expiry)].append(item)

    return {
        key: sorted(grouped[key], key=lambda i: i.id)
        for key in sorted(grouped)
    }


def bucket_digest(entries: t.Sequence[BucketEntry]) -> str:
    """Stable digest over the visible content of a bucket.

    Args:
        entries (Sequence[BucketEntry]): The ordered bucket entries.

    Returns:
        str: Hex digest.
    """
    hasher = hashlib.blake2b(digest_size=16)
    for entry in entries:
        item: InventoryItem = entry.item
        hasher.update(
            "\x1f".join(
                (
                    item.id,
                    item.name,
                    repr(item.quantity),
                    item.unit or "",
                    item.location.value,
                    item.category or "",
                    entry.urgency.level.value,
                )
            ).encode("utf-8")
        )
        hasher.update(b"\x1e")
    return hasher.hexdigest()


def build_bucket(
    date_key: str,
    entries: t.Iterable[BucketEntry],
    max_indicators: int,
    styles: t.Mapping[UrgencyLevel, UrgencyStyle],
) -> DateBucket:
    """Build the bucket for one date.

    The indicator list keeps the most urgent levels when a date holds
    more distinct levels than ``max_indicators``; ``exact_count`` always
    carries the full number of items.

    Args:
        date_key (str): The ``YYYY-MM-DD`` key.
        entries (Iterable[BucketEntry]): The entries for that date.
        max_indicators (int): Upper bound on the indicator list.
        styles (Mapping[UrgencyLevel, UrgencyStyle]): Colors per level.

    Returns:
        DateBucket: The bucket.
    """
    ordered: t.Tuple[BucketEntry, ...] = tuple(
        sorted(entries, key=lambda e: e.item.id)
    )
    level_counts: t.Counter[UrgencyLevel] = collections.Counter(
        entry.urgency.level for entry in ordered
    )
    category_counts: t.Counter[str] = collections.Counter(
        category_of(entry.item) for entry in ordered
    )
    present: t.List[UrgencyLevel] = sorted(
        level_counts, key=lambda level: level.rank
    )

    return DateBucket(
        date_key=date_key,
        entries=ordered,
        indicators=tuple(
            Indicator(level=level, color=styles[level].color)
            for level in present[:max_indicators]
        ),
        exact_count=len(ordered),
        level_counts={level: level_counts[level] for level in present},
        category_counts=dict(sorted(category_counts.items())),
        dominant_level=present[0],
        digest=bucket_digest(ordered),
    )


class DateAggregator:
    """Aggregator turning item snapshots into calendar aggregates."""

    config: AggregationConfig

    def __init__(self, config: AggregationConfig | None = None) -> None:
        """Initialize DateAggregator.

        Args:
            config (AggregationConfig | None):
                The aggregation options. Defaults are used when omitted.
        """
        self.config = config or AggregationConfig()

    def aggregate(  # pylint: disable=too-many-locals
        self,
        items: t.Iterable[InventoryItem],
        reference_date: date,
        date_range: DateRange | None = None,
        selected_date: date | None = None,
    ) -> MonthAggregate:
        """Bucket and classify a snapshot of items.

        Every item with a parseable expiry date lands in exactly one
        bucket, or in ``out_of_range_count`` when a range is given and the
        date falls outside it. Items without a usable expiry date are
        counted as unscheduled; malformed ones are also reported as issues.

        Args:
            items (Iterable[InventoryItem]):
                The item snapshot.
            reference_date (date):
                The calendar date considered "today".
            date_range (DateRange | None):
                Optional inclusive range of dates to keep.
            selected_date (date | None):
                The date currently selected by the consumer.

        Returns:
            MonthAggregate: A new immutable aggregate.
        """
        classifier = UrgencyClassifier.from_config(self.config, reference_date)
        styles = URGENCY_STYLES[self.config.color_scheme]

        by_date: t.Dict[str, t.List[BucketEntry]] = collections.defaultdict(
            list
        )
        unscheduled_categories: t.Counter[str] = collections.Counter()
        issues: t.List[ExpiryIssue] = []
        unscheduled: int = 0
        out_of_range: int = 0

        for item in items:
            urgency: Urgency = classifier.classify(item)
            if not urgency.level.is_dated:
                unscheduled += 1
                unscheduled_categories[category_of(item)] += 1
                if urgency.malformed:
                    LOGGER.warning(
                        "Item %s has a malformed expiry date: %r",
                        item.id,
                        item.expiry_date,
                    )
                    issues.append(
                        ExpiryIssue(
                            item_id=item.id,
                            raw_value=item.expiry_date or "",
                            reason=urgency.description,
                        )
                    )
                continue

            expiry: date = parse_expiry_date(t.cast(str, item.expiry_date))
            if date_range is not None and not date_range.contains(expiry):
                out_of_range += 1
                continue
            by_date[to_date_key(expiry)].append(
                BucketEntry(item=item, urgency=urgency)
            )

        buckets: t.Tuple[DateBucket, ...] = tuple(
            build_bucket(
                key,
                by_date[key],
                self.config.max_indicators_per_date,
                styles,
            )
            for key in sorted(by_date)
        )

        level_counts: t.Dict[UrgencyLevel, int] = {
            level: 0 for level in DATED_LEVELS
        }
        categories: t.Counter[str] = collections.Counter()
        for bucket in buckets:
            for level, count in bucket.level_counts.items():
                level_counts[level] += count
            categories.update(bucket.category_counts)

        scheduled: int = sum(level_counts.values())
        LOGGER.debug(
            "Aggregated %d scheduled, %d unscheduled, %d out of range "
            "items into %d buckets",
            scheduled,
            unscheduled,
            out_of_range,
            len(buckets),
        )

        return MonthAggregate(
            reference_date=reference_date,
            date_range=date_range,
            selected_date=selected_date,
            buckets=buckets,
            total_items=scheduled + unscheduled,
            level_counts=level_counts,
            category_counts=dict(sorted(categories.items())),
            unscheduled_count=unscheduled,
            unscheduled_category_counts=dict(
                sorted(unscheduled_categories.items())
            ),
            out_of_range_count=out_of_range,
            issues=tuple(sorted(issues, key=lambda i: i.item_id)),
        )


def aggregate(
    items: t.Iterable[InventoryItem],
    reference_date: date,
    config: AggregationConfig | None = None,
    date_range: DateRange | None = None,
    selected_date: date | None = None,
) -> MonthAggregate:
    """Aggregate items with a one-off DateAggregator.

    Args:
        items (Iterable[InventoryItem]): The item snapshot.
        reference_date (date): The calendar date considered "today".
        config (AggregationConfig | None): The aggregation options.
        date_range (DateRange | None): Optional inclusive range.
        selected_date (date | None): The selected date.

    Returns:
        MonthAggregate: A new immutable aggregate.
    """
    return DateAggregator(config).aggregate(
        items,
        reference_date,
        date_range=date_range,
        selected_date=selected_date,
    )
