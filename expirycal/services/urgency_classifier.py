"""Urgency classification of inventory items."""

import typing as t
from datetime import date

from expirycal.core.config import AggregationConfig
from expirycal.schemas.item import InventoryItem
from expirycal.schemas.urgency import (
    URGENCY_STYLES,
    ColorScheme,
    Urgency,
    UrgencyLevel,
)
from expirycal.utils.dates import days_between, parse_expiry_date

# Beyond this many days an item is simply described as fresh
FRESH_AFTER_DAYS: int = 30


def level_for_days(
    days_until_expiry: int, soon_days: int = 3
) -> UrgencyLevel:
    """Map a signed day offset to an urgency level.

    Args:
        days_until_expiry (int):
            Whole days from the reference date to the expiry date.
        soon_days (int):
            Largest offset still considered "soon".

    Returns:
        UrgencyLevel: The urgency level.
    """
    match days_until_expiry:
        case d if d < 0:
            return UrgencyLevel.EXPIRED
        case 0:
            return UrgencyLevel.TODAY
        case d if d <= soon_days:
            return UrgencyLevel.SOON
        case _:
            return UrgencyLevel.SAFE


def describe(days_until_expiry: int) -> str:
    """Human readable description of a day offset.

    Args:
        days_until_expiry (int): Signed days until expiry.

    Returns:
        str: The description.
    """
    match days_until_expiry:
        case -1:
            return "Expired yesterday"
        case d if d < 0:
            return f"Expired {abs(d)} days ago"
        case 0:
            return "Expires today"
        case 1:
            return "Expires tomorrow"
        case d if d <= FRESH_AFTER_DAYS:
            return f"Expires in {d} days"
        case _:
            return "Fresh"


def classify(
    item: InventoryItem,
    reference_date: date,
    soon_days: int = 3,
    color_scheme: ColorScheme = ColorScheme.DEFAULT,
) -> Urgency:
    """Classify an item against a reference date.

    Items without an expiry date, or with one that cannot be parsed,
    get the ``none`` level. Parsing failures set ``malformed`` instead of
    raising, so that one bad record cannot abort a whole pass.

    Args:
        item (InventoryItem):
            The item to classify.
        reference_date (date):
            The calendar date considered "today".
        soon_days (int):
            Largest day offset still considered "soon".
        color_scheme (ColorScheme):
            The scheme the color token is taken from.

    Returns:
        Urgency: The urgency level and its metadata.
    """
    styles = URGENCY_STYLES[color_scheme]

    if item.expiry_date is None:
        return Urgency(
            level=UrgencyLevel.NONE,
            color=styles[UrgencyLevel.NONE].color,
            description="No expiry date set",
        )

    try:
        expiry: date = parse_expiry_date(item.expiry_date)
    except ValueError:
        return Urgency(
            level=UrgencyLevel.NONE,
            color=styles[UrgencyLevel.NONE].color,
            description="Invalid expiry date",
            malformed=True,
        )

    days: int = days_between(expiry, reference_date)
    level: UrgencyLevel = level_for_days(days, soon_days)
    return Urgency(
        level=level,
        days_until_expiry=days,
        color=styles[level].color,
        description=describe(days),
    )


class UrgencyClassifier:
    """Classifier bound to one reference date.

    Results are memoized by raw expiry text, which is valid because
    classification only depends on the expiry date and the reference date.
    """

    reference_date: date
    soon_days: int
    color_scheme: ColorScheme

    def __init__(
        self,
        reference_date: date,
        soon_days: int = 3,
        color_scheme: ColorScheme = ColorScheme.DEFAULT,
    ) -> None:
        """Initialize UrgencyClassifier.

        Args:
            reference_date (date): The calendar date considered "today".
            soon_days (int): Largest day offset still considered "soon".
            color_scheme (ColorScheme): The scheme colors come from.
        """
        self.reference_date = reference_date
        self.soon_days = soon_days
        self.color_scheme = color_scheme
        self._cache: t.Dict[str | None, Urgency] = {}

    @classmethod
    def from_config(
        cls, config: AggregationConfig, reference_date: date
    ) -> "UrgencyClassifier":
        """Build a classifier from aggregation options.

        Args:
            config (AggregationConfig): The aggregation options.
            reference_date (date): The calendar date considered "today".

        Returns:
            UrgencyClassifier: The classifier.
        """
        return cls(
            reference_date,
            soon_days=config.soon_days,
            color_scheme=config.color_scheme,
        )

    def classify(self, item: InventoryItem) -> Urgency:
        """Classify one item.

        Args:
            item (InventoryItem): The item to classify.

        Returns:
            Urgency: The urgency level and its metadata.
        """
        cached: Urgency | None = self._cache.get(item.expiry_date)
        if cached is None:
            cached = classify(
                item,
                self.reference_date,
                soon_days=self.soon_days,
                color_scheme=self.color_scheme,
            )
            self._cache[item.expiry_date] = cached
        return cached


def sort_by_urgency(
    items: t.Iterable[InventoryItem],
    reference_date: date,
    soon_days: int = 3,
) -> t.List[InventoryItem]:
    """Sort items most urgent first.

    Ties are broken by day offset, then by id. Items without a usable
    expiry date come last.

    Args:
        items (Iterable[InventoryItem]): The items to sort.
        reference_date (date): The calendar date considered "today".
        soon_days (int): Largest day offset still considered "soon".

    Returns:
        List[InventoryItem]: A new sorted list.
    """
    classifier = UrgencyClassifier(reference_date, soon_days=soon_days)

    def sort_key(item: InventoryItem) -> t.Tuple[int, float, str]:
        urgency: Urgency = classifier.classify(item)
        days: float = (
            urgency.days_until_expiry
            if urgency.days_until_expiry is not None
            else float("inf")
        )
        return urgency.level.rank, days, item.id

    return sorted(items, key=sort_key)


def filter_by_urgency(
    items: t.Iterable[InventoryItem],
    level: UrgencyLevel,
    reference_date: date,
    soon_days: int = 3,
) -> t.List[InventoryItem]:
    """Keep only the items classified at ``level``.

    Args:
        items (Iterable[InventoryItem]): The items to filter.
        level (UrgencyLevel): The level to keep.
        reference_date (date): The calendar date considered "today".
        soon_days (int): Largest day offset still considered "soon".

    Returns:
        List[InventoryItem]: The matching items in input order.
    """
    classifier = UrgencyClassifier(reference_date, soon_days=soon_days)
    return [
        item for item in items if classifier.classify(item).level == level
    ]
