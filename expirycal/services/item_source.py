"""Item sources supplying inventory snapshots to the calendar pipeline."""

import typing as t

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from expirycal.core.models import InventoryRecord
from expirycal.schemas.date_range import DateRange
from expirycal.schemas.item import InventoryItem


class ItemSource(t.Protocol):  # pylint: disable=too-few-public-methods
    """Supplies inventory snapshots."""

    async def fetch_items(
        self, range_hint: DateRange | None = None
    ) -> t.Sequence[InventoryItem]:
        """Return a snapshot of the inventory.

        Args:
            range_hint (DateRange | None):
                Dates the caller is interested in. Sources may ignore it.

        Returns:
            Sequence[InventoryItem]: The item snapshot.
        """


class InMemoryItemSource:
    """Item source backed by a replaceable in-memory snapshot."""

    def __init__(self, items: t.Iterable[InventoryItem] = ()) -> None:
        """Initialize InMemoryItemSource.

        Args:
            items (Iterable[InventoryItem]): The initial snapshot.
        """
        self._items: t.Tuple[InventoryItem, ...] = tuple(items)

    def replace(self, items: t.Iterable[InventoryItem]) -> None:
        """Replace the whole snapshot."""
        self._items = tuple(items)

    async def fetch_items(
        self, range_hint: DateRange | None = None
    ) -> t.Sequence[InventoryItem]:
        """Return the current snapshot; the range hint is ignored."""
        return self._items


class DatabaseItemSource:  # pylint: disable=too-few-public-methods
    """Item source reading the inventory table."""

    session_maker: async_sessionmaker[AsyncSession]

    def __init__(
        self, session_maker: async_sessionmaker[AsyncSession]
    ) -> None:
        """Initialize DatabaseItemSource.

        Args:
            session_maker (async_sessionmaker[AsyncSession]):
                Factory for the sessions used to read the snapshot.
        """
        self.session_maker = session_maker

    async def fetch_items(
        self, range_hint: DateRange | None = None
    ) -> t.Sequence[InventoryItem]:
        """Read every stored item.

        The range hint is not pushed into the query: stored expiry dates
        are raw text, and undated or malformed items must still be
        counted by the aggregator.

        Args:
            range_hint (DateRange | None): Ignored.

        Returns:
            Sequence[InventoryItem]: The item snapshot ordered by id.
        """
        async with self.session_maker() as session:
            records: t.Sequence[InventoryRecord] = (
                (
                    await session.execute(
                        select(InventoryRecord).order_by(InventoryRecord.id)
                    )
                )
                .scalars()
                .all()
            )
        return [record.to_item() for record in records]
