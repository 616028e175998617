"""Presentation sinks receiving accepted calendar aggregates."""

import typing as t

from expirycal.schemas.calendar import (
    CalendarSnapshot,
    LegendCounts,
    MonthAggregate,
)


class PresentationSink(t.Protocol):  # pylint: disable=too-few-public-methods
    """Receives aggregates to render."""

    def publish(self, aggregate: MonthAggregate, legend: LegendCounts) -> None:
        """Hand a new aggregate and its legend to the presentation layer."""


class SnapshotSink:
    """Sink keeping the latest published snapshot for readers to poll."""

    def __init__(self) -> None:
        """Initialize SnapshotSink."""
        self._snapshot: CalendarSnapshot | None = None
        self.publish_count: int = 0

    @property
    def snapshot(self) -> CalendarSnapshot | None:
        """The latest published snapshot, if any."""
        return self._snapshot

    def publish(self, aggregate: MonthAggregate, legend: LegendCounts) -> None:
        """Replace the stored snapshot.

        Args:
            aggregate (MonthAggregate): The accepted aggregate.
            legend (LegendCounts): Its legend counts.
        """
        self._snapshot = CalendarSnapshot(aggregate=aggregate, legend=legend)
        self.publish_count += 1
