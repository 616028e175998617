"""SQLAlchemy database models."""

from datetime import datetime

from sqlalchemy import DateTime, Enum, Float, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from expirycal.core.database import Base
from expirycal.schemas.item import InventoryItem, StorageLocation


class InventoryRecord(Base):  # pylint: disable=too-few-public-methods
    """Stored inventory item.

    The expiry date is kept as the text clients supplied; the calendar
    pipeline parses it and reports values it cannot read.
    """

    __tablename__ = "inventory_items"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    quantity: Mapped[float] = mapped_column(Float, nullable=False, default=1)
    unit: Mapped[str | None] = mapped_column(String(32), nullable=True)
    location: Mapped[StorageLocation] = mapped_column(
        Enum(StorageLocation),
        nullable=False,
        default=StorageLocation.FRIDGE,
    )
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    expiry_date: Mapped[str | None] = mapped_column(
        String(40), nullable=True, index=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),  # pylint: disable=not-callable
    )

    def to_item(self) -> InventoryItem:
        """Snapshot this record as an InventoryItem.

        Returns:
            InventoryItem: The read-only item snapshot.
        """
        return InventoryItem.model_validate(self)
