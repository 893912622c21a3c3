"""Shared enumerations used across yfp."""

from __future__ import annotations

from enum import StrEnum


class Frequency(StrEnum):
    """Sampling granularity of a requested price history."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def wire_code(self) -> str:
        """Interval code understood by the quote history endpoint."""
        return _WIRE_CODES[self]


# Map frequencies to the data source's interval strings
_WIRE_CODES: dict[Frequency, str] = {
    Frequency.DAILY: "1d",
    Frequency.WEEKLY: "1wk",
    Frequency.MONTHLY: "1mo",
}


class FileFormat(StrEnum):
    """Supported export formats. The value doubles as the file extension."""

    CSV = "csv"
    JSON = "json"
