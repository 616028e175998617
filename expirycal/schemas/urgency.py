"""Urgency levels, color schemes and classification results."""

import enum
import typing as t

from pydantic import BaseModel, ConfigDict


class UrgencyLevel(str, enum.Enum):
    """Urgency of an item relative to its expiry date.

    The four dated levels are ordered from most to least urgent.
    ``NONE`` marks items without a usable expiry date and is never ranked.
    """

    EXPIRED = "expired"
    TODAY = "today"
    SOON = "soon"
    SAFE = "safe"
    NONE = "none"

    @property
    def rank(self) -> int:
        """Position in the urgency order, 0 being the most urgent."""
        return _RANKS[self]

    @property
    def is_dated(self) -> bool:
        """Whether items of this level are placed on the calendar."""
        return self is not UrgencyLevel.NONE


_RANKS: t.Dict[UrgencyLevel, int] = {
    UrgencyLevel.EXPIRED: 0,
    UrgencyLevel.TODAY: 1,
    UrgencyLevel.SOON: 2,
    UrgencyLevel.SAFE: 3,
    UrgencyLevel.NONE: 4,
}

DATED_LEVELS: t.Tuple[UrgencyLevel, ...] = (
    UrgencyLevel.EXPIRED,
    UrgencyLevel.TODAY,
    UrgencyLevel.SOON,
    UrgencyLevel.SAFE,
)


class ColorScheme(str, enum.Enum):
    """Available calendar color schemes."""

    DEFAULT = "default"
    HIGH_CONTRAST = "high_contrast"


class UrgencyStyle(BaseModel):
    """Color tokens attached to an urgency level."""

    model_config = ConfigDict(frozen=True)

    color: str
    background: str


URGENCY_STYLES: t.Dict[ColorScheme, t.Dict[UrgencyLevel, UrgencyStyle]] = {
    ColorScheme.DEFAULT: {
        UrgencyLevel.EXPIRED: UrgencyStyle(
            color="#DC2626", background="#FEF2F2"
        ),
        UrgencyLevel.TODAY: UrgencyStyle(
            color="#EA580C", background="#FFF7ED"
        ),
        UrgencyLevel.SOON: UrgencyStyle(
            color="#EAB308", background="#FEFCE8"
        ),
        UrgencyLevel.SAFE: UrgencyStyle(
            color="#16A34A", background="#F0FDF4"
        ),
        UrgencyLevel.NONE: UrgencyStyle(
            color="#6B7280", background="#F9FAFB"
        ),
    },
    ColorScheme.HIGH_CONTRAST: {
        UrgencyLevel.EXPIRED: UrgencyStyle(
            color="#B91C1C", background="#FEE2E2"
        ),
        UrgencyLevel.TODAY: UrgencyStyle(
            color="#C2410C", background="#FED7AA"
        ),
        UrgencyLevel.SOON: UrgencyStyle(
            color="#A16207", background="#FEF08A"
        ),
        UrgencyLevel.SAFE: UrgencyStyle(
            color="#15803D", background="#DCFCE7"
        ),
        UrgencyLevel.NONE: UrgencyStyle(
            color="#374151", background="#E5E7EB"
        ),
    },
}


class Urgency(BaseModel):
    """Result of classifying one item against a reference date."""

    model_config = ConfigDict(frozen=True)

    level: UrgencyLevel
    days_until_expiry: int | None = None
    color: str
    description: str
    malformed: bool = False
