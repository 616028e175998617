"""Pydantic schemas for virtualized item windows."""

import typing as t

from pydantic import BaseModel, ConfigDict, Field, model_validator

from expirycal.schemas.item import InventoryItem


class WindowRange(BaseModel):
    """Half-open ``[start, end)`` index range requested by a consumer."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(0, ge=0)
    end: int = Field(0, ge=0)

    @model_validator(mode="after")
    def check_order(self) -> "WindowRange":
        """Ensure the range does not end before it starts.

        Returns:
            WindowRange: The validated range.
        """
        if self.end < self.start:
            raise ValueError("window range must not end before it starts")
        return self


class VisibleWindow(BaseModel):
    """A view over a contiguous slice of an ordered item sequence."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    total: int
    virtualized: bool
    stale: bool = False
    items: t.Tuple[InventoryItem, ...] = ()
