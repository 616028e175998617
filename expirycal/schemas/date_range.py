"""Inclusive calendar date range."""

from datetime import date

from pydantic import BaseModel, ConfigDict, model_validator

from expirycal.utils.dates import month_bounds


class DateRange(BaseModel):
    """Inclusive range of calendar dates."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @model_validator(mode="after")
    def check_order(self) -> "DateRange":
        """Ensure the range does not end before it starts.

        Returns:
            DateRange: The validated range.
        """
        if self.end < self.start:
            raise ValueError("date range must not end before it starts")
        return self

    def contains(self, value: date) -> bool:
        """Whether ``value`` lies inside the range."""
        return self.start <= value <= self.end

    @classmethod
    def for_month(
        cls, year: int, month: int, buffer_days: int = 0
    ) -> "DateRange":
        """Build the range covering a month.

        Args:
            year (int): The year.
            month (int): The month, 1 to 12.
            buffer_days (int):
                Days of padding on each side, used by month views that
                show the surrounding weeks.

        Returns:
            DateRange: The month range.
        """
        start, end = month_bounds(year, month, buffer_days)
        return cls(start=start, end=end)
