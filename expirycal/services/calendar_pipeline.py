"""Calendar pipeline - from item snapshots to presented aggregates."""

import logging
import typing as t
from datetime import date

from expirycal.core.config import AggregationConfig
from expirycal.schemas.calendar import LegendCounts, MonthAggregate
from expirycal.schemas.date_range import DateRange
from expirycal.schemas.item import InventoryItem
from expirycal.schemas.window import VisibleWindow
from expirycal.services.date_aggregator import DateAggregator
from expirycal.services.item_source import ItemSource
from expirycal.services.legend_calculator import summarize
from expirycal.services.presentation_sink import PresentationSink
from expirycal.services.render_gate import RenderGate
from expirycal.services.windowed_provider import (
    WindowedItemProvider,
    stable_order,
)
from expirycal.utils.dates import today_utc

LOGGER: logging.Logger = logging.getLogger(__name__)


class CalendarPipeline:  # pylint: disable=too-many-instance-attributes
    """Runs item snapshots through aggregation, the gate and the sink.

    Input changes go through the debounced provider; each completed pass
    aggregates, summarizes and offers the result to the render gate, and
    only accepted aggregates reach the presentation sink.
    """

    config: AggregationConfig
    source: ItemSource
    sink: PresentationSink
    aggregator: DateAggregator
    gate: RenderGate
    provider: WindowedItemProvider

    def __init__(
        self,
        source: ItemSource,
        sink: PresentationSink,
        config: AggregationConfig | None = None,
        today: t.Callable[[], date] = today_utc,
    ) -> None:
        """Initialize CalendarPipeline.

        Args:
            source (ItemSource):
                Where item snapshots are fetched from.
            sink (PresentationSink):
                Where accepted aggregates are published.
            config (AggregationConfig | None):
                The aggregation options. Defaults are used when omitted.
            today (Callable[[], date]):
                Clock used when the options carry no reference date.
        """
        self.config = config or AggregationConfig()
        self.source = source
        self.sink = sink
        self.aggregator = DateAggregator(self.config)
        self.gate = RenderGate()
        self.provider = WindowedItemProvider(self.run_pass, self.config)
        self._today = today
        self._selected_date: date | None = None
        self._date_range: DateRange | None = None
        self._items: t.Tuple[InventoryItem, ...] = ()

    @property
    def items(self) -> t.Tuple[InventoryItem, ...]:
        """Stably ordered snapshot used by the most recent pass."""
        return self._items

    @property
    def last_aggregate(self) -> MonthAggregate | None:
        """The aggregate most recently accepted by the gate."""
        return self.gate.last_emitted

    def reference_date(self) -> date:
        """The date passes are classified against."""
        return self.config.reference_date or self._today()

    def select_date(self, selected_date: date | None) -> None:
        """Change the selected date used by the next pass."""
        self._selected_date = selected_date

    def set_date_range(self, date_range: DateRange | None) -> None:
        """Change the date range used by the next pass."""
        self._date_range = date_range

    async def refresh(self, range_hint: DateRange | None = None) -> None:
        """Fetch a snapshot and schedule a debounced pass over it.

        Args:
            range_hint (DateRange | None):
                Forwarded to the source; the pipeline range by default.
        """
        items: t.Sequence[InventoryItem] = await self.source.fetch_items(
            range_hint or self._date_range
        )
        self.provider.schedule_recompute(items)

    async def refresh_now(self) -> bool:
        """Fetch a snapshot and run a pass immediately.

        Any pending debounced pass is dropped since it would only repeat
        work on an older snapshot.

        Returns:
            bool: True if the sink was updated.
        """
        items: t.Sequence[InventoryItem] = await self.source.fetch_items(
            self._date_range
        )
        self.provider.cancel()
        return self.run_pass(items)

    def run_pass(self, items: t.Iterable[InventoryItem]) -> bool:
        """Aggregate a snapshot and publish it if the gate accepts it.

        Args:
            items (Iterable[InventoryItem]): The item snapshot.

        Returns:
            bool: True if the sink was updated.
        """
        self._items = tuple(stable_order(items))
        aggregate: MonthAggregate = self.aggregator.aggregate(
            self._items,
            self.reference_date(),
            date_range=self._date_range,
            selected_date=self._selected_date,
        )
        legend: LegendCounts = summarize(aggregate)

        if not self.gate.offer(aggregate):
            return False

        self.sink.publish(aggregate, legend)
        LOGGER.debug(
            "Published calendar with %d items over %d dates",
            aggregate.total_items,
            len(aggregate.buckets),
        )
        return True

    def window(self, first_visible: int = 0) -> VisibleWindow:
        """Visible window over the latest snapshot.

        Args:
            first_visible (int): Index of the first visible item.

        Returns:
            VisibleWindow: The window.
        """
        return self.provider.get_window(
            self._items,
            self.provider.range_for_offset(first_visible, len(self._items)),
        )
