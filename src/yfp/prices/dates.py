"""Date representations used by the price history pipeline.

A ``DateValue`` is exactly one of:

- ``EpochDate``: seconds since 1970-01-01T00:00:00Z, anchored at UTC midnight.
- ``DisplayDate``: an already-rendered "Mon D, YYYY" string.

Three textual formats are in play and are kept apart:

- ``to_display_string`` writes ``Dec 28, 2005`` (export date column).
- ``parse_compact_date`` reads ``Dec 28,2005`` (first cell of a table row).
- ``parse_canonical_date`` reads ``2005-12-28`` (caller bounds, deserialization).

A bar written out by the exporter cannot be read back through
``date_value_from_string``: the display form is not the canonical form.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from yfp.core.exceptions import DateParseError, FormatError

CANONICAL_FORMAT = "%Y-%m-%d"
COMPACT_FORMAT = "Mon D,YYYY"

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# English names, independent of the process locale
_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_MONTH_ABBR = tuple(name[:3] for name in _MONTH_NAMES)
_MONTH_LOOKUP: dict[str, int] = {
    **{name.lower(): i + 1 for i, name in enumerate(_MONTH_NAMES)},
    **{abbr.lower(): i + 1 for i, abbr in enumerate(_MONTH_ABBR)},
}

# "Dec 20,2024"; whitespace around the day and before the year is optional
_COMPACT_RE = re.compile(r"^([A-Za-z]+)\s*(\d{1,2}),\s*(\d{4})$", re.ASCII)


class EpochDate(BaseModel):
    """An absolute calendar day as epoch seconds at UTC midnight."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["epoch"] = "epoch"
    epoch: int = 0

    def sort_key(self) -> tuple[int, int, str]:
        return (0, self.epoch, "")


class DisplayDate(BaseModel):
    """A date that is already in its "Mon D, YYYY" display form."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["display"] = "display"
    text: str

    def sort_key(self) -> tuple[int, int, str]:
        return (1, 0, self.text)


DateValue = Annotated[EpochDate | DisplayDate, Field(discriminator="kind")]


def to_display_string(value: EpochDate | DisplayDate) -> str:
    """Render a date value as "Mon D, YYYY" (e.g. "Dec 28, 2005").

    Display strings pass through untouched.

    Raises:
        FormatError: If the epoch falls outside the representable calendar.
    """
    if isinstance(value, DisplayDate):
        return value.text

    try:
        moment = _UNIX_EPOCH + timedelta(seconds=value.epoch)
    except OverflowError as e:
        raise FormatError(
            f"Epoch {value.epoch} does not map to a calendar date",
            context={"epoch": value.epoch},
        ) from e

    return f"{_MONTH_ABBR[moment.month - 1]} {moment.day}, {moment.year:04d}"


def parse_canonical_date(text: str) -> int:
    """Convert "YYYY-MM-DD" to epoch seconds at UTC midnight.

    Raises:
        DateParseError: If text is not a valid "YYYY-MM-DD" date.
    """
    try:
        parsed = datetime.strptime(text, CANONICAL_FORMAT)
    except (TypeError, ValueError) as e:
        raise DateParseError(
            f"Invalid date {text!r}, expected YYYY-MM-DD",
            context={"value": text, "expected_format": "YYYY-MM-DD"},
        ) from e
    return int(parsed.replace(tzinfo=timezone.utc).timestamp())


def parse_compact_date(text: str) -> int:
    """Convert a table cell date like "Dec 20,2024" to epoch seconds.

    Month names may be abbreviated or spelled out and are matched
    case-insensitively; a space before the year is accepted, so the
    "Dec 20, 2024" form seen on live pages parses as well.

    Raises:
        DateParseError: If text is not a recognisable month/day/year triple.
    """
    match = _COMPACT_RE.match(text) if isinstance(text, str) else None
    month = _MONTH_LOOKUP.get(match.group(1).lower()) if match else None
    if match is None or month is None:
        raise DateParseError(
            f"Invalid date {text!r}, expected {COMPACT_FORMAT}",
            context={"value": text, "expected_format": COMPACT_FORMAT},
        )

    try:
        day = datetime(
            int(match.group(3)), month, int(match.group(2)), tzinfo=timezone.utc
        )
    except ValueError as e:
        raise DateParseError(
            f"Invalid date {text!r}: {e}",
            context={"value": text, "expected_format": COMPACT_FORMAT},
        ) from e
    return int(day.timestamp())


def to_human_phrase(text: str) -> str:
    """Convert "YYYY-MM-DD" to a long-form phrase, e.g. "December 28, 2005"."""
    try:
        parsed = datetime.strptime(text, CANONICAL_FORMAT)
    except (TypeError, ValueError) as e:
        raise DateParseError(
            f"Invalid date {text!r}, expected YYYY-MM-DD",
            context={"value": text, "expected_format": "YYYY-MM-DD"},
        ) from e
    return f"{_MONTH_NAMES[parsed.month - 1]} {parsed.day}, {parsed.year}"


def date_value_from_string(text: str) -> EpochDate:
    """Deserialize a "YYYY-MM-DD" string into an epoch date.

    Pre-1970 dates clamp to epoch zero. Display strings are rejected.
    """
    return EpochDate(epoch=max(parse_canonical_date(text), 0))


def format_canonical(day: date) -> str:
    """Format a calendar date as "YYYY-MM-DD"."""
    return day.strftime(CANONICAL_FORMAT)
