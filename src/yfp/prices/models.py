"""Price history data models."""

from __future__ import annotations

from functools import total_ordering
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from yfp.core.models import Frequency
from yfp.prices.dates import (
    DateValue,
    DisplayDate,
    EpochDate,
    date_value_from_string,
    parse_canonical_date,
    to_display_string,
)

# Column order of every exported record
FIELD_ORDER: tuple[str, ...] = (
    "date",
    "open",
    "high",
    "low",
    "close",
    "adj_close",
    "volume",
)


@total_ordering
class PriceBar(BaseModel):
    """One open/high/low/close/adj-close/volume observation for one date.

    Values are carried exactly as extracted, with no cross-field checks
    (high >= low and friends).

    ``date`` accepts an ``EpochDate``/``DisplayDate``, a raw epoch int, or a
    "YYYY-MM-DD" string (stored as an epoch clamped to >= 0). It always
    serializes as the "Mon D, YYYY" display string.
    """

    model_config = ConfigDict(frozen=True)

    date: DateValue = Field(default_factory=EpochDate)
    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    close: float = 0.0
    adj_close: float = 0.0
    volume: int = 0

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> Any:
        if isinstance(v, str):
            return date_value_from_string(v)
        if isinstance(v, int) and not isinstance(v, bool):
            return EpochDate(epoch=v)
        return v

    @field_validator("volume")
    @classmethod
    def volume_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"volume must be >= 0, got {v}")
        return v

    @field_serializer("date")
    def serialize_date(self, value: EpochDate | DisplayDate) -> str:
        return to_display_string(value)

    def as_record(self) -> dict[str, Any]:
        """Plain dict in export column order, date rendered for display.

        Raises:
            FormatError: If the date is an out-of-range epoch.
        """
        record: dict[str, Any] = {name: getattr(self, name) for name in FIELD_ORDER}
        record["date"] = to_display_string(self.date)
        return record

    def _ordering_key(self) -> tuple:
        return (
            self.date.sort_key(),
            self.open,
            self.high,
            self.low,
            self.close,
            self.adj_close,
            self.volume,
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PriceBar):
            return NotImplemented
        return self._ordering_key() < other._ordering_key()


class HistoryQuery(BaseModel):
    """Parameters for one price history request."""

    model_config = ConfigDict(frozen=True)

    ticker: str
    start: str
    end: str | None = None
    frequency: Frequency = Frequency.DAILY

    @field_validator("ticker")
    @classmethod
    def ticker_not_empty(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("ticker must not be empty")
        return v

    @field_validator("start", "end")
    @classmethod
    def canonical_bounds(cls, v: str | None) -> str | None:
        # DateParseError is not a ValueError, so it escapes pydantic unwrapped
        if v is not None:
            parse_canonical_date(v)
        return v
