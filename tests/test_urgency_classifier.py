"""Tests for urgency classification."""

from datetime import date

import pytest

from expirycal.schemas.urgency import (
    URGENCY_STYLES,
    ColorScheme,
    UrgencyLevel,
)
from expirycal.services.urgency_classifier import (
    UrgencyClassifier,
    classify,
    describe,
    filter_by_urgency,
    level_for_days,
    sort_by_urgency,
)


class TestClassify:
    """Example scenarios at a reference date of 2024-01-10."""

    def test_expires_today(self, make_item, reference_date):
        """An item expiring on the reference date is due today."""
        urgency = classify(make_item("a", "2024-01-10"), reference_date)
        assert urgency.level == UrgencyLevel.TODAY
        assert urgency.days_until_expiry == 0
        assert urgency.description == "Expires today"

    def test_expired(self, make_item, reference_date):
        """Two days past expiry is expired with a negative offset."""
        urgency = classify(make_item("a", "2024-01-08"), reference_date)
        assert urgency.level == UrgencyLevel.EXPIRED
        assert urgency.days_until_expiry == -2
        assert urgency.description == "Expired 2 days ago"

    def test_soon(self, make_item, reference_date):
        """Two days ahead is soon."""
        urgency = classify(make_item("a", "2024-01-12"), reference_date)
        assert urgency.level == UrgencyLevel.SOON
        assert urgency.days_until_expiry == 2

    def test_safe(self, make_item, reference_date):
        """Fifty-one days ahead is safe and described as fresh."""
        urgency = classify(make_item("a", "2024-03-01"), reference_date)
        assert urgency.level == UrgencyLevel.SAFE
        assert urgency.days_until_expiry == 51
        assert urgency.description == "Fresh"

    def test_no_expiry_date(self, make_item, reference_date):
        """Items without an expiry date get the none level."""
        urgency = classify(make_item("a"), reference_date)
        assert urgency.level == UrgencyLevel.NONE
        assert urgency.days_until_expiry is None
        assert not urgency.malformed

    def test_blank_expiry_date_is_missing(self, make_item, reference_date):
        """Blank text is treated as no expiry date."""
        item = make_item("a", "   ")
        assert item.expiry_date is None
        assert classify(item, reference_date).level == UrgencyLevel.NONE

    def test_malformed_expiry_date_is_reported(
        self, make_item, reference_date
    ):
        """Unparseable dates are flagged instead of raising."""
        urgency = classify(make_item("a", "31/01/2024"), reference_date)
        assert urgency.level == UrgencyLevel.NONE
        assert urgency.malformed
        assert urgency.description == "Invalid expiry date"

    def test_time_of_day_is_ignored(self, make_item, reference_date):
        """Two items expiring today classify equally whatever the hour."""
        morning = classify(
            make_item("a", "2024-01-10T00:01:00Z"), reference_date
        )
        evening = classify(
            make_item("b", "2024-01-10T23:59:00Z"), reference_date
        )
        assert morning == evening

    def test_date_objects_accepted(self, make_item, reference_date):
        """Date values are normalized to ISO text."""
        item = make_item("a", date(2024, 1, 11))
        assert item.expiry_date == "2024-01-11"
        assert classify(item, reference_date).level == UrgencyLevel.SOON

    def test_color_scheme(self, make_item, reference_date):
        """The color token follows the selected scheme."""
        item = make_item("a", "2024-01-01")
        default = classify(item, reference_date)
        contrast = classify(
            item, reference_date, color_scheme=ColorScheme.HIGH_CONTRAST
        )
        assert default.color == (
            URGENCY_STYLES[ColorScheme.DEFAULT][UrgencyLevel.EXPIRED].color
        )
        assert contrast.color == (
            URGENCY_STYLES[ColorScheme.HIGH_CONTRAST][
                UrgencyLevel.EXPIRED
            ].color
        )
        assert default.color != contrast.color


@pytest.mark.parametrize(
    ("days", "soon_days", "expected"),
    [
        (-1, 3, UrgencyLevel.EXPIRED),
        (0, 3, UrgencyLevel.TODAY),
        (1, 3, UrgencyLevel.SOON),
        (3, 3, UrgencyLevel.SOON),
        (4, 3, UrgencyLevel.SAFE),
        (5, 7, UrgencyLevel.SOON),
        (1, 0, UrgencyLevel.SAFE),
    ],
)
def test_level_boundaries(days, soon_days, expected):
    """The soon window is configurable and inclusive."""
    assert level_for_days(days, soon_days) == expected


@pytest.mark.parametrize(
    ("days", "expected"),
    [
        (-1, "Expired yesterday"),
        (-5, "Expired 5 days ago"),
        (1, "Expires tomorrow"),
        (30, "Expires in 30 days"),
        (31, "Fresh"),
    ],
)
def test_descriptions(days, expected):
    """Descriptions read naturally around the boundaries."""
    assert describe(days) == expected


def test_level_order():
    """Expired ranks most urgent and none is never ranked above safe."""
    ranks = [
        level.rank
        for level in (
            UrgencyLevel.EXPIRED,
            UrgencyLevel.TODAY,
            UrgencyLevel.SOON,
            UrgencyLevel.SAFE,
            UrgencyLevel.NONE,
        )
    ]
    assert ranks == sorted(ranks)
    assert not UrgencyLevel.NONE.is_dated


def test_classifier_memoizes_by_expiry(make_item, reference_date):
    """Items sharing an expiry date share one classification."""
    classifier = UrgencyClassifier(reference_date)
    first = classifier.classify(make_item("a", "2024-01-12"))
    second = classifier.classify(make_item("b", "2024-01-12"))
    assert first is second


def test_sort_by_urgency(make_item, reference_date):
    """Most urgent first, undated last, ties by id."""
    items = [
        make_item("safe", "2024-02-01"),
        make_item("none"),
        make_item("b-today", "2024-01-10"),
        make_item("expired", "2024-01-01"),
        make_item("a-today", "2024-01-10"),
        make_item("soon", "2024-01-12"),
    ]
    ordered = [item.id for item in sort_by_urgency(items, reference_date)]
    assert ordered == [
        "expired",
        "a-today",
        "b-today",
        "soon",
        "safe",
        "none",
    ]


def test_filter_by_urgency(make_item, reference_date):
    """Only items at the requested level are kept."""
    items = [
        make_item("a", "2024-01-09"),
        make_item("b", "2024-01-10"),
        make_item("c", "2023-12-31"),
    ]
    expired = filter_by_urgency(items, UrgencyLevel.EXPIRED, reference_date)
    assert [item.id for item in expired] == ["a", "c"]
