"""Expiry calendar endpoints."""

import typing as t
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from expirycal.core.dependencies import get_pipeline
from expirycal.schemas.calendar import (
    CalendarSnapshot,
    DateBucket,
    MonthAggregate,
    RefreshResult,
)
from expirycal.schemas.date_range import DateRange
from expirycal.schemas.item import InventoryItem
from expirycal.schemas.window import VisibleWindow
from expirycal.services import CalendarPipeline, SnapshotSink, summarize
from expirycal.utils.dates import to_date_key

ROUTER = APIRouter(prefix="/calendar", tags=["Calendar"])


@ROUTER.get("/month", response_model=CalendarSnapshot)
async def get_month(
    pipeline: t.Annotated[CalendarPipeline, Depends(get_pipeline)],
    year: int = Query(..., ge=1, le=9998),
    month: int = Query(..., ge=1, le=12),
    buffer_days: int = Query(
        0, ge=0, le=14, description="Days shown around the month"
    ),
    selected_date: date | None = Query(None),
) -> CalendarSnapshot:
    """Compute the calendar for one month.

    Args:
        pipeline (CalendarPipeline):
            The calendar pipeline.
        year (int):
            The year.
        month (int):
            The month, 1 to 12.
        buffer_days (int):
            Days of padding on each side of the month.
        selected_date (date | None):
            The date selected in the calendar.

    Returns:
        CalendarSnapshot: The aggregate and its legend.
    """
    date_range = DateRange.for_month(year, month, buffer_days)
    items: t.Sequence[InventoryItem] = await pipeline.source.fetch_items(
        date_range
    )
    aggregate: MonthAggregate = pipeline.aggregator.aggregate(
        items,
        pipeline.reference_date(),
        date_range=date_range,
        selected_date=selected_date,
    )
    return CalendarSnapshot(aggregate=aggregate, legend=summarize(aggregate))


@ROUTER.get("/dates/{day}", response_model=DateBucket)
async def get_date(
    day: date,
    pipeline: t.Annotated[CalendarPipeline, Depends(get_pipeline)],
) -> DateBucket:
    """Get the items expiring on one date.

    Args:
        day (date): The calendar date.
        pipeline (CalendarPipeline): The calendar pipeline.

    Returns:
        DateBucket: The bucket for that date.
    """
    date_range = DateRange(start=day, end=day)
    items: t.Sequence[InventoryItem] = await pipeline.source.fetch_items(
        date_range
    )
    aggregate: MonthAggregate = pipeline.aggregator.aggregate(
        items, pipeline.reference_date(), date_range=date_range
    )
    bucket: DateBucket | None = aggregate.bucket(to_date_key(day))
    if bucket is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No items expire on {to_date_key(day)}",
        )
    return bucket


@ROUTER.get("/window", response_model=VisibleWindow)
async def get_window(
    pipeline: t.Annotated[CalendarPipeline, Depends(get_pipeline)],
    first_visible: int = Query(
        0, ge=0, description="Index of the first visible item"
    ),
) -> VisibleWindow:
    """Get the visible window over the ordered inventory.

    Args:
        pipeline (CalendarPipeline): The calendar pipeline.
        first_visible (int): Index of the first visible item.

    Returns:
        VisibleWindow: The window.
    """
    return pipeline.window(first_visible)


@ROUTER.get("/current", response_model=CalendarSnapshot)
async def get_current(
    pipeline: t.Annotated[CalendarPipeline, Depends(get_pipeline)],
) -> CalendarSnapshot:
    """Get the calendar most recently published.

    Args:
        pipeline (CalendarPipeline): The calendar pipeline.

    Returns:
        CalendarSnapshot: The published aggregate and legend.
    """
    sink = pipeline.sink
    if not isinstance(sink, SnapshotSink) or sink.snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No calendar has been published yet",
        )
    return sink.snapshot


@ROUTER.post("/refresh", response_model=RefreshResult)
async def refresh(
    pipeline: t.Annotated[CalendarPipeline, Depends(get_pipeline)],
) -> RefreshResult:
    """Rebuild the calendar immediately.

    Args:
        pipeline (CalendarPipeline): The calendar pipeline.

    Returns:
        RefreshResult: Whether the published calendar changed.
    """
    updated: bool = await pipeline.refresh_now()
    return RefreshResult(updated=updated, total_items=len(pipeline.items))


@ROUTER.post("/select", response_model=RefreshResult)
async def select_date(
    pipeline: t.Annotated[CalendarPipeline, Depends(get_pipeline)],
    selected_date: date | None = Query(None),
) -> RefreshResult:
    """Change the selected date and rebuild the calendar.

    Args:
        pipeline (CalendarPipeline): The calendar pipeline.
        selected_date (date | None): The new selection, None to clear.

    Returns:
        RefreshResult: Whether the published calendar changed.
    """
    pipeline.select_date(selected_date)
    updated: bool = await pipeline.refresh_now()
    return RefreshResult(updated=updated, total_items=len(pipeline.items))
