"""Render gate - decides whether a new aggregate is worth presenting."""

import hashlib
import logging
from datetime import date

from pydantic import BaseModel, ConfigDict

from expirycal.schemas.calendar import MonthAggregate
from expirycal.schemas.date_range import DateRange

LOGGER: logging.Logger = logging.getLogger(__name__)


class AggregateFingerprint(BaseModel):
    """Small summary of an aggregate compared instead of the full tree."""

    model_config = ConfigDict(frozen=True)

    reference_date: date
    date_range: DateRange | None
    selected_date: date | None
    total_items: int
    unscheduled_count: int
    out_of_range_count: int
    bucket_hash: str
    unscheduled_hash: str


def _unscheduled_hash(aggregate: MonthAggregate) -> str:
    hasher = hashlib.blake2b(digest_size=16)
    for category, count in sorted(
        aggregate.unscheduled_category_counts.items()
    ):
        hasher.update(f"c|{category}|{count}\n".encode("utf-8"))
    for issue in aggregate.issues:
        hasher.update(
            f"i|{issue.item_id}|{issue.raw_value}|{issue.reason}\n".encode(
                "utf-8"
            )
        )
    return hasher.hexdigest()


def fingerprint(aggregate: MonthAggregate) -> AggregateFingerprint:
    """Compute the fingerprint of an aggregate.

    The bucket hash covers each bucket's key, count, level counts and
    content digest, so it costs one step per bucket. Unscheduled
    categories and expiry issues are hashed separately since they feed
    the legend without appearing in any bucket.

    Args:
        aggregate (MonthAggregate): The aggregate.

    Returns:
        AggregateFingerprint: The fingerprint.
    """
    hasher = hashlib.blake2b(digest_size=16)
    for bucket in aggregate.buckets:
        levels: str = ",".join(
            f"{level.value}={count}"
            for level, count in sorted(
                bucket.level_counts.items(), key=lambda kv: kv[0].rank
            )
        )
        hasher.update(
            f"{bucket.date_key}|{bucket.exact_count}|{levels}|"
            f"{bucket.digest}\n".encode("utf-8")
        )

    return AggregateFingerprint(
        reference_date=aggregate.reference_date,
        date_range=aggregate.date_range,
        selected_date=aggregate.selected_date,
        total_items=aggregate.total_items,
        unscheduled_count=aggregate.unscheduled_count,
        out_of_range_count=aggregate.out_of_range_count,
        bucket_hash=hasher.hexdigest(),
        unscheduled_hash=_unscheduled_hash(aggregate),
    )


def should_update(
    prev: MonthAggregate | None, next_aggregate: MonthAggregate
) -> bool:
    """Whether ``next_aggregate`` differs enough from ``prev`` to render.

    Args:
        prev (MonthAggregate | None): The aggregate shown now, if any.
        next_aggregate (MonthAggregate): The freshly computed aggregate.

    Returns:
        bool: True when the presentation should be updated.
    """
    if prev is None:
        return True
    if prev is next_aggregate:
        return False
    return fingerprint(prev) != fingerprint(next_aggregate)


class RenderGate:
    """Holds the last emitted aggregate and gates replacements."""

    def __init__(self) -> None:
        """Initialize RenderGate."""
        self._last: MonthAggregate | None = None
        self._last_fingerprint: AggregateFingerprint | None = None

    @property
    def last_emitted(self) -> MonthAggregate | None:
        """The aggregate most recently accepted."""
        return self._last

    def offer(self, aggregate: MonthAggregate) -> bool:
        """Accept ``aggregate`` if it differs from the last emitted one.

        The stored aggregate is replaced whole, never merged.

        Args:
            aggregate (MonthAggregate): The freshly computed aggregate.

        Returns:
            bool: True if the aggregate was accepted.
        """
        candidate: AggregateFingerprint = fingerprint(aggregate)
        if candidate == self._last_fingerprint:
            LOGGER.debug("Aggregate unchanged, skipping update")
            return False

        self._last, self._last_fingerprint = aggregate, candidate
        return True

    def reset(self) -> None:
        """Forget the last emitted aggregate."""
        self._last = None
        self._last_fingerprint = None
