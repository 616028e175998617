"""Tests for windowing and debounced recomputation."""

import asyncio
import logging

import pytest

from expirycal.core.config import AggregationConfig
from expirycal.schemas.window import WindowRange
from expirycal.services.windowed_provider import (
    WindowedItemProvider,
    stable_order,
)


@pytest.fixture(name="items")
def fixture_items(make_item):
    """A stably ordered set of 150 items."""
    return stable_order(
        make_item(f"{index:03d}", f"2024-02-{index % 28 + 1:02d}")
        for index in range(150)
    )


def _provider(calls=None, **options):
    def record(items):
        if calls is not None:
            calls.append(items)

    return WindowedItemProvider(record, AggregationConfig(**options))


class TestGetWindow:
    """Tests for virtualized windows."""

    def test_small_sets_are_not_virtualized(self, make_item):
        """Below the threshold the window is the full sequence."""
        small = [make_item(str(index)) for index in range(20)]
        window = _provider().get_window(small, WindowRange(start=5, end=10))
        assert not window.virtualized
        assert (window.start, window.end, window.total) == (0, 20, 20)
        assert list(window.items) == small

    def test_threshold_is_exclusive(self, make_item):
        """Exactly the threshold is still a small set."""
        items = [make_item(str(index)) for index in range(100)]
        assert not _provider().get_window(items).virtualized

    def test_large_sets_are_virtualized(self, items):
        """150 items exceed the default threshold of 100."""
        provider = _provider()
        window = provider.get_window(items)
        assert window.virtualized
        assert (window.start, window.end) == (0, 50)
        assert window.total == 150
        assert list(window.items) == items[:50]

    def test_virtualization_holds_for_subsequent_requests(self, items):
        """Every request stays virtualized while the set is large."""
        provider = _provider()
        for start in range(0, 150, 25):
            window = provider.get_window(
                items, WindowRange(start=start, end=start + 25)
            )
            assert window.virtualized

    def test_forward_windows_preserve_order(self, items):
        """Paging forward never reorders items already emitted."""
        provider = _provider()
        emitted = []
        for start in range(0, 150, 30):
            window = provider.get_window(
                items, WindowRange(start=start, end=start + 30)
            )
            emitted.extend(window.items)
        assert emitted == items

    def test_end_clamped_to_sequence(self, items):
        """A range running past the end is cut at the end."""
        window = _provider().get_window(
            items, WindowRange(start=140, end=190)
        )
        assert (window.start, window.end) == (140, 150)
        assert not window.stale

    def test_stale_range_recomputed(self, items):
        """A range past the end is moved back onto the sequence."""
        provider = _provider()
        window = provider.get_window(
            items[:120], WindowRange(start=130, end=160)
        )
        assert window.stale
        assert (window.start, window.end) == (90, 120)
        assert list(window.items) == items[90:120]

    def test_range_for_offset_adds_buffer(self):
        """The window is padded by a fifth of its size on each side."""
        provider = _provider()
        assert provider.range_for_offset(0, 150) == WindowRange(
            start=0, end=60
        )
        assert provider.range_for_offset(40, 150) == WindowRange(
            start=30, end=100
        )
        assert provider.range_for_offset(120, 150) == WindowRange(
            start=110, end=150
        )


def test_stable_order_puts_undated_last(make_item):
    """Dated items come first by date then id."""
    ordered = stable_order(
        [
            make_item("c"),
            make_item("b", "2024-01-02"),
            make_item("a", "2024-01-02"),
            make_item("d", "bad"),
            make_item("e", "2024-01-01"),
        ]
    )
    assert [item.id for item in ordered] == ["e", "a", "b", "c", "d"]


class TestScheduleRecompute:
    """Tests for the debounced trigger."""

    def test_rapid_calls_collapse_into_one(self, make_item):
        """Only the last snapshot of a burst is recomputed."""
        calls = []

        async def scenario():
            provider = _provider(calls, debounce_ms=20)
            for index in range(5):
                provider.schedule_recompute([make_item(str(index))])
            assert provider.pending
            await asyncio.sleep(0.1)
            assert not provider.pending

        asyncio.run(scenario())
        assert len(calls) == 1
        assert [item.id for item in calls[0]] == ["4"]

    def test_quiet_period_restarts(self, make_item):
        """Each call pushes the recompute back by the quiet period."""
        calls = []

        async def scenario():
            provider = _provider(calls, debounce_ms=50)
            provider.schedule_recompute([make_item("a")])
            await asyncio.sleep(0.03)
            provider.schedule_recompute([make_item("b")])
            await asyncio.sleep(0.03)
            assert calls == []
            await asyncio.sleep(0.1)

        asyncio.run(scenario())
        assert [[item.id for item in call] for call in calls] == [["b"]]

    def test_separate_bursts_run_separately(self, make_item):
        """Input arriving after a recompute schedules a new one."""
        calls = []

        async def scenario():
            provider = _provider(calls, debounce_ms=10)
            provider.schedule_recompute([make_item("a")])
            await asyncio.sleep(0.08)
            provider.schedule_recompute([make_item("b")])
            await asyncio.sleep(0.08)

        asyncio.run(scenario())
        assert len(calls) == 2

    def test_cancel_drops_pending(self, make_item):
        """A cancelled recompute never runs."""
        calls = []

        async def scenario():
            provider = _provider(calls, debounce_ms=10)
            provider.schedule_recompute([make_item("a")])
            assert provider.cancel()
            assert not provider.cancel()
            await asyncio.sleep(0.05)

        asyncio.run(scenario())
        assert calls == []

    def test_flush_runs_pending_now(self, make_item):
        """Flushing runs the latest snapshot immediately and only once."""
        calls = []

        async def scenario():
            provider = _provider(calls, debounce_ms=1000)
            provider.schedule_recompute([make_item("a")])
            provider.schedule_recompute([make_item("b")])
            assert provider.flush()
            assert not provider.flush()
            await asyncio.sleep(0.01)

        asyncio.run(scenario())
        assert [[item.id for item in call] for call in calls] == [["b"]]

    def test_failing_recompute_is_logged(self, make_item, caplog):
        """Errors raised by the timed recompute are logged."""

        def explode(_items):
            raise RuntimeError("boom")

        async def scenario():
            provider = WindowedItemProvider(
                explode, AggregationConfig(debounce_ms=0)
            )
            provider.schedule_recompute([make_item("a")])
            await asyncio.sleep(0.02)

        with caplog.at_level(logging.ERROR):
            asyncio.run(scenario())
        assert "Debounced recompute failed" in caplog.text

    def test_requires_running_loop(self, make_item):
        """Scheduling outside an event loop is a usage error."""
        with pytest.raises(RuntimeError):
            _provider().schedule_recompute([make_item("a")])
