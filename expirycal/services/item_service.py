"""Item service - business logic for inventory item operations."""

import typing as t
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from expirycal.core.models import InventoryRecord
from expirycal.schemas.item import (
    InventoryItem,
    ItemCreate,
    ItemFilter,
    ItemListResponse,
    ItemResponse,
    ItemSort,
)
from expirycal.services.item_filters import filter_items, sort_items
from expirycal.services.urgency_classifier import UrgencyClassifier


class ItemNotFoundError(Exception):
    """Raised when an item is not found."""

    def __init__(self, item_id: int) -> None:
        self.item_id = item_id
        super().__init__(f"Inventory item with ID {item_id} not found")


class ItemService:
    """Service class for inventory item operations."""

    db: AsyncSession

    def __init__(self, db: AsyncSession) -> None:
        """Initialize ItemService.

        Args:
            db (AsyncSession): The database session.
        """
        self.db = db

    async def get_record(self, item_id: int) -> InventoryRecord:
        """Get the stored record by ID.

        Args:
            item_id (int): The ID of the item.

        Returns:
            InventoryRecord: The stored record.
        """
        record: InventoryRecord | None = (
            await self.db.execute(
                select(InventoryRecord).where(InventoryRecord.id == item_id)
            )
        ).scalar_one_or_none()

        if record is None:
            raise ItemNotFoundError(item_id)

        return record

    async def list_items(
        self,
        classifier: UrgencyClassifier,
        item_filter: ItemFilter | None = None,
        sort: ItemSort | None = None,
    ) -> ItemListResponse:
        """List items with their urgency, filtered and sorted.

        Args:
            classifier (UrgencyClassifier):
                Classifier bound to the reference date.
            item_filter (ItemFilter | None):
                Optional filter criteria.
            sort (ItemSort | None):
                Optional sort keys; expiry date ascending by default.

        Returns:
            ItemListResponse: The matching items.
        """
        records: t.Sequence[InventoryRecord] = (
            (
                await self.db.execute(
                    select(InventoryRecord).order_by(InventoryRecord.id)
                )
            )
            .scalars()
            .all()
        )
        items: t.List[InventoryItem] = [record.to_item() for record in records]

        if item_filter is not None:
            items = filter_items(items, item_filter, classifier)
        items = sort_items(items, sort or ItemSort(), classifier)

        return ItemListResponse(
            items=[
                ItemResponse(
                    **item.model_dump(), urgency=classifier.classify(item)
                )
                for item in items
            ],
            total=len(items),
        )

    async def create_item(self, payload: ItemCreate) -> InventoryItem:
        """Create a new inventory item.

        Args:
            payload (ItemCreate): The item data.

        Returns:
            InventoryItem: Snapshot of the created item.
        """
        expiry: date | None = payload.expiry_date
        record = InventoryRecord(
            name=payload.name,
            quantity=payload.quantity,
            unit=payload.unit,
            location=payload.location,
            category=payload.category,
            expiry_date=expiry.isoformat() if expiry is not None else None,
            notes=payload.notes,
        )
        self.db.add(record)
        await self.db.flush()
        await self.db.refresh(record)
        return record.to_item()

    async def delete_item(self, item_id: int) -> None:
        """Delete an inventory item.

        Args:
            item_id (int): The ID of the item.
        """
        record: InventoryRecord = await self.get_record(item_id)
        await self.db.delete(record)
        await self.db.flush()
