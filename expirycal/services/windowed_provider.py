"""Windowed item provider - virtualization and debounced recomputation."""

import asyncio
import logging
import math
import typing as t

from expirycal.core.config import AggregationConfig
from expirycal.schemas.item import InventoryItem
from expirycal.schemas.window import VisibleWindow, WindowRange
from expirycal.utils.dates import parse_expiry_date, to_date_key

LOGGER: logging.Logger = logging.getLogger(__name__)

# Share of the window size rendered ahead of and behind the visible rows
BUFFER_RATIO: float = 0.2

RecomputeCallback = t.Callable[[t.Sequence[InventoryItem]], None]


def stable_order(items: t.Iterable[InventoryItem]) -> t.List[InventoryItem]:
    """Order items by expiry date key then id, undated items last.

    Args:
        items (Iterable[InventoryItem]): The items to order.

    Returns:
        List[InventoryItem]: A new ordered list.
    """

    def order_key(item: InventoryItem) -> t.Tuple[int, str, str]:
        if item.expiry_date is not None:
            try:
                key: str = to_date_key(parse_expiry_date(item.expiry_date))
                return 0, key, item.id
            except ValueError:
                pass
        return 1, "", item.id

    return sorted(items, key=order_key)


class WindowedItemProvider:
    """Bounded views over large item sequences plus a debounced trigger.

    Small inventories are never virtualized: below the configured
    threshold the window is always the full sequence.
    """

    config: AggregationConfig

    def __init__(
        self,
        on_recompute: RecomputeCallback,
        config: AggregationConfig | None = None,
    ) -> None:
        """Initialize WindowedItemProvider.

        Args:
            on_recompute (RecomputeCallback):
                Called with the latest item snapshot once input has been
                quiet for the debounce period.
            config (AggregationConfig | None):
                The aggregation options. Defaults are used when omitted.
        """
        self.config = config or AggregationConfig()
        self._on_recompute = on_recompute
        self._handle: asyncio.TimerHandle | None = None
        self._pending_items: t.Tuple[InventoryItem, ...] | None = None
        self._virtualized: bool = False

    def is_virtualized(self, total: int) -> bool:
        """Whether a sequence of ``total`` items gets windowed."""
        return total > self.config.virtualization_threshold

    def range_for_offset(self, first_visible: int, total: int) -> WindowRange:
        """Window around the first visible row, padded on both sides.

        Args:
            first_visible (int): Index of the first visible item.
            total (int): Length of the full sequence.

        Returns:
            WindowRange: The range to request.
        """
        size: int = self.config.window_size
        buffer: int = math.floor(size * BUFFER_RATIO)
        start: int = max(0, first_visible - buffer)
        end: int = max(start, min(total, first_visible + size + buffer))
        return WindowRange(start=start, end=end)

    def get_window(
        self,
        all_items: t.Sequence[InventoryItem],
        window_range: WindowRange | None = None,
    ) -> VisibleWindow:
        """Return the visible slice of ``all_items``.

        The slice keeps the order of ``all_items``. A range starting past
        the end of the current sequence is stale; it is moved back onto
        the sequence and the returned window is flagged.

        Args:
            all_items (Sequence[InventoryItem]):
                The full, stably ordered item sequence.
            window_range (WindowRange | None):
                The requested range. Defaults to the first window.

        Returns:
            VisibleWindow: The window.
        """
        total: int = len(all_items)
        virtualized: bool = self.is_virtualized(total)
        if virtualized != self._virtualized:
            LOGGER.info(
                "Virtualization %s at %d items (threshold %d)",
                "enabled" if virtualized else "disabled",
                total,
                self.config.virtualization_threshold,
            )
            self._virtualized = virtualized

        if not virtualized:
            return VisibleWindow(
                start=0,
                end=total,
                total=total,
                virtualized=False,
                items=tuple(all_items),
            )

        requested: WindowRange = window_range or WindowRange(
            start=0, end=self.config.window_size
        )
        start: int = requested.start
        end: int = min(requested.end, total)
        stale: bool = False

        if start >= total:
            size: int = (requested.end - requested.start) or (
                self.config.window_size
            )
            LOGGER.debug(
                "Window [%d, %d) is past the end of %d items, recomputing",
                requested.start,
                requested.end,
                total,
            )
            start = max(0, total - size)
            end = total
            stale = True

        return VisibleWindow(
            start=start,
            end=end,
            total=total,
            virtualized=True,
            stale=stale,
            items=tuple(all_items[start:end]),
        )

    @property
    def pending(self) -> bool:
        """Whether a debounced recompute is waiting to fire."""
        return self._handle is not None

    def schedule_recompute(self, items: t.Iterable[InventoryItem]) -> None:
        """Schedule a recompute once input has been quiet.

        Each call cancels the pending recompute and restarts the quiet
        period, so only the latest snapshot is ever aggregated. Must be
        called from a running event loop.

        Args:
            items (Iterable[InventoryItem]): The new item snapshot.
        """
        loop: asyncio.AbstractEventLoop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
            LOGGER.debug("Pending recompute superseded")

        self._pending_items = tuple(items)
        self._handle = loop.call_later(
            self.config.debounce_ms / 1000, self._on_timer
        )

    def flush(self) -> bool:
        """Run the pending recompute immediately.

        Returns:
            bool: True if a recompute was pending and ran.
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def cancel(self) -> bool:
        """Drop the pending recompute without running it.

        Returns:
            bool: True if a recompute was pending.
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        self._pending_items = None
        return True

    def _fire(self) -> None:
        items: t.Tuple[InventoryItem, ...] = self._pending_items or ()
        self._handle = None
        self._pending_items = None
        self._on_recompute(items)

    def _on_timer(self) -> None:
        try:
            self._fire()
        except Exception:  # pylint: disable=broad-except
            LOGGER.exception("Debounced recompute failed")
