"""Tests for the render gate."""

from datetime import date

import pytest

from expirycal.schemas.date_range import DateRange
from expirycal.services.date_aggregator import aggregate
from expirycal.services.legend_calculator import summarize
from expirycal.services.render_gate import (
    RenderGate,
    fingerprint,
    should_update,
)


@pytest.fixture(name="items")
def fixture_items(make_item):
    """A small mixed inventory."""
    return [
        make_item("1", "2024-01-08"),
        make_item("2", "2024-01-10"),
        make_item("3", "2024-01-12", category="Dairy"),
        make_item("4"),
    ]


def test_first_aggregate_always_renders(items, reference_date):
    """With nothing shown yet any aggregate is an update."""
    assert should_update(None, aggregate(items, reference_date))


def test_identical_recompute_is_skipped(items, reference_date):
    """Recomputing the same input yields an equal fingerprint."""
    first = aggregate(items, reference_date)
    second = aggregate(list(reversed(items)), reference_date)
    assert first is not second
    assert fingerprint(first) == fingerprint(second)
    assert not should_update(first, second)
    assert not should_update(first, first)


def test_count_change_renders(items, make_item, reference_date):
    """Adding an item to an existing date is an update."""
    before = aggregate(items, reference_date)
    after = aggregate(
        items + [make_item("5", "2024-01-12")], reference_date
    )
    assert should_update(before, after)


def test_content_change_renders(items, make_item, reference_date):
    """Renaming an item changes the bucket digest."""
    before = aggregate(items, reference_date)
    renamed = [
        make_item("3", "2024-01-12", category="Dairy", name="Yoghurt")
        if item.id == "3"
        else item
        for item in items
    ]
    assert should_update(before, aggregate(renamed, reference_date))


def test_selection_change_renders(items, reference_date):
    """Changing the selected date is an update."""
    before = aggregate(items, reference_date)
    after = aggregate(items, reference_date, selected_date=date(2024, 1, 12))
    assert should_update(before, after)


def test_reference_date_change_renders(items, reference_date):
    """A new day reclassifies items."""
    before = aggregate(items, reference_date)
    after = aggregate(items, date(2024, 1, 11))
    assert should_update(before, after)


def test_unscheduled_change_renders(items, make_item, reference_date):
    """Undated items count towards the fingerprint."""
    before = aggregate(items, reference_date)
    after = aggregate(items + [make_item("9")], reference_date)
    assert should_update(before, after)


class TestRenderGate:
    """Tests for the stateful gate."""

    def test_offer_accepts_then_skips(self, items, reference_date):
        """The gate only accepts aggregates that changed."""
        gate = RenderGate()
        first = aggregate(items, reference_date)
        assert gate.offer(first)
        assert gate.last_emitted is first
        assert not gate.offer(aggregate(items, reference_date))
        assert gate.last_emitted is first

    def test_offer_replaces_whole_aggregate(
        self, items, make_item, reference_date
    ):
        """An accepted aggregate replaces the previous one."""
        gate = RenderGate()
        gate.offer(aggregate(items, reference_date))
        changed = aggregate(items[:2], reference_date)
        assert gate.offer(changed)
        assert gate.last_emitted is changed

    def test_reset(self, items, reference_date):
        """After a reset the next aggregate is accepted again."""
        gate = RenderGate()
        gate.offer(aggregate(items, reference_date))
        gate.reset()
        assert gate.last_emitted is None
        assert gate.offer(aggregate(items, reference_date))


def test_date_range_change_renders(reference_date):
    """Moving between two empty months is still an update."""
    gate = RenderGate()
    february = DateRange.for_month(2024, 2)
    march = DateRange.for_month(2024, 3)
    assert gate.offer(aggregate([], reference_date, date_range=february))
    assert gate.offer(aggregate([], reference_date, date_range=march))
    assert gate.last_emitted.date_range == march


def test_out_of_range_change_renders(make_item, reference_date):
    """Items moving outside the range change the aggregate."""
    january = DateRange.for_month(2024, 1)
    before = aggregate(
        [make_item("1", "2024-01-12")], reference_date, date_range=january
    )
    after = aggregate(
        [make_item("1", "2024-01-12"), make_item("2", "2024-02-12")],
        reference_date,
        date_range=january,
    )
    assert should_update(before, after)


def test_unscheduled_category_change_renders(make_item, reference_date):
    """Recategorizing an undated item changes the legend."""
    before = aggregate([make_item("1", category="Dairy")], reference_date)
    after = aggregate([make_item("1", category="Meat")], reference_date)
    assert summarize(before).per_category != summarize(after).per_category
    assert should_update(before, after)


def test_issue_change_renders(make_item, reference_date):
    """A different malformed value is reported as a new issue."""
    before = aggregate([make_item("1", "garbage")], reference_date)
    after = aggregate([make_item("1", "rubbish")], reference_date)
    assert should_update(before, after)
