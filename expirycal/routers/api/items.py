"""Inventory item endpoints."""

import typing as t
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from expirycal.core.database import get_db
from expirycal.core.dependencies import get_pipeline
from expirycal.schemas.date_range import DateRange
from expirycal.schemas.item import (
    InventoryItem,
    ItemCreate,
    ItemFilter,
    ItemListResponse,
    ItemSort,
    SortDirection,
    SortField,
    StorageLocation,
)
from expirycal.schemas.urgency import UrgencyLevel
from expirycal.services import (
    CalendarPipeline,
    ItemNotFoundError,
    ItemService,
    UrgencyClassifier,
)

ROUTER = APIRouter(prefix="/items", tags=["Inventory Items"])


@ROUTER.get("", response_model=ItemListResponse)
# pylint: disable-next=too-many-arguments,too-many-positional-arguments
async def list_items(  # pylint: disable=too-many-locals
    db: t.Annotated[AsyncSession, Depends(get_db)],
    pipeline: t.Annotated[CalendarPipeline, Depends(get_pipeline)],
    category: t.List[str] | None = Query(
        None, description="Keep items in these categories"
    ),
    location: t.List[StorageLocation] | None = Query(
        None, description="Keep items in these storage locations"
    ),
    urgency: t.List[UrgencyLevel] | None = Query(
        None, description="Keep items at these urgency levels"
    ),
    expires_from: date | None = Query(
        None, description="Keep items expiring on or after this date"
    ),
    expires_to: date | None = Query(
        None, description="Keep items expiring on or before this date"
    ),
    search: str | None = Query(
        None, description="Search name, category and notes"
    ),
    sort: SortField = Query(SortField.EXPIRY_DATE, description="Sort field"),
    direction: SortDirection = Query(SortDirection.ASC),
    secondary_sort: SortField | None = Query(
        None, description="Sort field used to break ties"
    ),
    secondary_direction: SortDirection = Query(SortDirection.ASC),
) -> ItemListResponse:
    """List inventory items with their urgency.

    Args:
        db (AsyncSession):
            The database session.
        pipeline (CalendarPipeline):
            The calendar pipeline, which supplies the reference date.
        category (List[str] | None):
            Categories to keep.
        location (List[StorageLocation] | None):
            Storage locations to keep.
        urgency (List[UrgencyLevel] | None):
            Urgency levels to keep.
        expires_from (date | None):
            Earliest expiry date to keep.
        expires_to (date | None):
            Latest expiry date to keep.
        search (str | None):
            Case-insensitive search text.
        sort (SortField):
            Primary sort field.
        direction (SortDirection):
            Primary sort direction.
        secondary_sort (SortField | None):
            Secondary sort field.
        secondary_direction (SortDirection):
            Secondary sort direction.

    Returns:
        ItemListResponse: The matching items.
    """
    date_range: DateRange | None = None
    if expires_from is not None or expires_to is not None:
        if (
            expires_from is not None
            and expires_to is not None
            and expires_to < expires_from
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="expires_to must not be before expires_from",
            )
        date_range = DateRange(
            start=expires_from or date.min, end=expires_to or date.max
        )

    item_filter = ItemFilter(
        categories=tuple(category or ()),
        locations=tuple(location or ()),
        urgencies=tuple(urgency or ()),
        date_range=date_range,
        search=search,
    )
    item_sort = ItemSort(
        field=sort,
        direction=direction,
        secondary_field=secondary_sort,
        secondary_direction=secondary_direction,
    )
    classifier: UrgencyClassifier = UrgencyClassifier.from_config(
        pipeline.config, pipeline.reference_date()
    )

    return await ItemService(db).list_items(
        classifier, item_filter=item_filter, sort=item_sort
    )


@ROUTER.post(
    "", response_model=InventoryItem, status_code=status.HTTP_201_CREATED
)
async def create_item(
    payload: ItemCreate,
    db: t.Annotated[AsyncSession, Depends(get_db)],
    pipeline: t.Annotated[CalendarPipeline, Depends(get_pipeline)],
) -> InventoryItem:
    """Create an inventory item and schedule a calendar recompute.

    Args:
        payload (ItemCreate): The item data.
        db (AsyncSession): The database session.
        pipeline (CalendarPipeline): The calendar pipeline.

    Returns:
        InventoryItem: The created item.
    """
    item: InventoryItem = await ItemService(db).create_item(payload)
    await db.commit()
    await pipeline.refresh()
    return item


@ROUTER.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: int,
    db: t.Annotated[AsyncSession, Depends(get_db)],
    pipeline: t.Annotated[CalendarPipeline, Depends(get_pipeline)],
) -> Response:
    """Delete an inventory item and schedule a calendar recompute.

    Args:
        item_id (int): The ID of the item.
        db (AsyncSession): The database session.
        pipeline (CalendarPipeline): The calendar pipeline.

    Returns:
        Response: An empty response.
    """
    try:
        await ItemService(db).delete_item(item_id)
    except ItemNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    await db.commit()
    await pipeline.refresh()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
