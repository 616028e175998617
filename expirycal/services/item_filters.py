"""Filtering and sorting of item lists."""

import typing as t
from datetime import date, datetime, timezone

from expirycal.schemas.item import (
    InventoryItem,
    ItemFilter,
    ItemSort,
    SortDirection,
    SortField,
)
from expirycal.schemas.urgency import UrgencyLevel
from expirycal.services.urgency_classifier import UrgencyClassifier
from expirycal.utils.dates import parse_expiry_date


def _expiry_or_none(item: InventoryItem) -> date | None:
    if item.expiry_date is None:
        return None
    try:
        return parse_expiry_date(item.expiry_date)
    except ValueError:
        return None


def _matches_search(item: InventoryItem, search: str) -> bool:
    term: str = search.strip().lower()
    if not term:
        return True
    text: str = " ".join(
        part for part in (item.name, item.category, item.notes) if part
    )
    return term in text.lower()


def filter_items(
    items: t.Iterable[InventoryItem],
    item_filter: ItemFilter,
    classifier: UrgencyClassifier,
) -> t.List[InventoryItem]:
    """Keep the items matching every criterion of ``item_filter``.

    Urgency and date range criteria only ever match dated items.

    Args:
        items (Iterable[InventoryItem]):
            The items to filter.
        item_filter (ItemFilter):
            The criteria.
        classifier (UrgencyClassifier):
            Classifier bound to the reference date.

    Returns:
        List[InventoryItem]: Matching items in input order.
    """
    kept: t.List[InventoryItem] = []
    for item in items:
        if item_filter.categories and (
            item.category not in item_filter.categories
        ):
            continue
        if item_filter.locations and (
            item.location not in item_filter.locations
        ):
            continue
        if item_filter.urgencies and (
            classifier.classify(item).level not in item_filter.urgencies
        ):
            continue
        if item_filter.date_range is not None:
            expiry: date | None = _expiry_or_none(item)
            if expiry is None or not item_filter.date_range.contains(expiry):
                continue
        if item_filter.search and not _matches_search(
            item, item_filter.search
        ):
            continue
        kept.append(item)
    return kept


def _sort_value(
    item: InventoryItem, field: SortField, classifier: UrgencyClassifier
) -> t.Tuple[int, t.Any]:
    """Sort value with a leading flag pushing missing values last."""
    match field:
        case SortField.EXPIRY_DATE:
            expiry: date | None = _expiry_or_none(item)
            return (1, date.max) if expiry is None else (0, expiry)
        case SortField.NAME:
            return 0, item.name.casefold()
        case SortField.CREATED_AT:
            created: datetime = item.created_at
            if created.tzinfo is None:
                created = created.replace(tzinfo=timezone.utc)
            return 0, created
        case SortField.QUANTITY:
            return 0, item.quantity
        case SortField.URGENCY:
            level: UrgencyLevel = classifier.classify(item).level
            return (1, level.rank) if not level.is_dated else (0, level.rank)
    raise ValueError(f"Unsupported sort field: {field}")


def sort_items(
    items: t.Iterable[InventoryItem],
    sort: ItemSort,
    classifier: UrgencyClassifier,
) -> t.List[InventoryItem]:
    """Sort items by a primary and optional secondary key.

    Sorting is stable, and items lacking the sorted value stay last
    whatever the direction.

    Args:
        items (Iterable[InventoryItem]):
            The items to sort.
        sort (ItemSort):
            The sort keys and directions.
        classifier (UrgencyClassifier):
            Classifier bound to the reference date, used for urgency.

    Returns:
        List[InventoryItem]: A new sorted list.
    """
    ordered: t.List[InventoryItem] = list(items)
    keys: t.List[t.Tuple[SortField, SortDirection]] = []
    if sort.secondary_field is not None:
        keys.append((sort.secondary_field, sort.secondary_direction))
    keys.append((sort.field, sort.direction))

    # Least significant key first; stability keeps earlier orderings
    for field, direction in keys:
        descending: bool = direction == SortDirection.DESC
        present: t.List[InventoryItem] = []
        missing: t.List[InventoryItem] = []
        for item in ordered:
            flag, _ = _sort_value(item, field, classifier)
            (missing if flag else present).append(item)
        present.sort(
            key=lambda i, f=field: _sort_value(i, f, classifier)[1],
            reverse=descending,
        )
        ordered = present + missing
    return ordered
