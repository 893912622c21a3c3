"""Quote history page parser: HTML price table to PriceBar records."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from bs4 import BeautifulSoup, Tag

from yfp.core.exceptions import DateParseError, MissingTableError
from yfp.core.models import Frequency
from yfp.prices.capacity import estimate_capacity
from yfp.prices.dates import EpochDate, format_canonical, parse_compact_date
from yfp.prices.models import PriceBar

logger = logging.getLogger(__name__)

# open, high, low, close, adj close, volume
_VALUE_SLOTS = 6

# Volume is an unsigned 64-bit count; larger values saturate
_MAX_VOLUME = 2**64 - 1


class RowStatus(StrEnum):
    """Outcome of scanning one table row."""

    EMITTED = "emitted"
    REJECTED_DATE = "rejected_date"
    REJECTED_EMPTY = "rejected_empty"


@dataclass(frozen=True)
class RowScan:
    """Classification of a single row. ``bar`` is set only when EMITTED."""

    status: RowStatus
    bar: PriceBar | None = None


def scan_row(cells: Sequence[str]) -> RowScan:
    """Classify one row of cell texts and build its PriceBar if it has one.

    The first cell must hold a "Mon D,YYYY" date, otherwise the row is a
    header or spacer. The next six cells fill open, high, low, close,
    adj close and volume in that order; anything past the sixth is ignored.
    A cell that is not a number (split and dividend notes) leaves its slot
    at zero. The row is kept as long as at least one slot parsed.
    """
    if not cells:
        return RowScan(RowStatus.REJECTED_DATE)

    try:
        epoch = parse_compact_date(cells[0])
    except DateParseError:
        return RowScan(RowStatus.REJECTED_DATE)
    if epoch == 0:
        return RowScan(RowStatus.REJECTED_DATE)

    slots = [0.0] * _VALUE_SLOTS
    parsed_any = False
    for i, text in enumerate(cells[1 : 1 + _VALUE_SLOTS]):
        value = _parse_number(text)
        if value is None:
            continue
        slots[i] = value
        parsed_any = True

    if not parsed_any:
        return RowScan(RowStatus.REJECTED_EMPTY)

    open_, high, low, close, adj_close, volume = slots
    return RowScan(
        RowStatus.EMITTED,
        PriceBar(
            date=EpochDate(epoch=epoch),
            open=open_,
            high=high,
            low=low,
            close=close,
            adj_close=adj_close,
            volume=_truncate_volume(volume),
        ),
    )


def _parse_number(text: str) -> float | None:
    """Parse a cell as a plain decimal number, thousands commas allowed."""
    # float() also takes "1_000", which is not a table number
    if "_" in text:
        return None
    try:
        return float(text.replace(",", ""))
    except ValueError:
        return None


def _truncate_volume(value: float) -> int:
    """Drop the fractional part, saturating to the unsigned 64-bit range.

    NaN and negatives become 0; +inf and oversized values become the maximum.
    """
    if math.isnan(value) or value <= 0:
        return 0
    if value >= _MAX_VOLUME:
        return _MAX_VOLUME
    return int(value)


class HistoryTableParser:
    """Extracts price bars from a quote history page.

    Only the first ``<tbody>`` in document order is read. Rows are
    returned in source order; nothing is sorted or deduplicated.

    Args:
        today: Clock used for the default end date. Defaults to the
            local calendar date.
        features: BeautifulSoup tree builder.
    """

    def __init__(
        self,
        today: Callable[[], date] = date.today,
        features: str = "lxml",
    ) -> None:
        self._today = today
        self._features = features

    def parse(
        self,
        raw_html: str,
        frequency: Frequency,
        start: str,
        end: str | None = None,
    ) -> list[PriceBar]:
        """Parse a history page into PriceBar records.

        Args:
            raw_html: The page (or any fragment containing the table).
            frequency: Sampling frequency the page was requested with.
            start: Requested start date, "YYYY-MM-DD".
            end: Requested end date, "YYYY-MM-DD". Defaults to today.

        Raises:
            MissingTableError: The document has no table body.
            DateParseError: start or end is not "YYYY-MM-DD".
        """
        soup = BeautifulSoup(raw_html, self._features)
        body = _find_table_body(soup)
        if body is None:
            raise MissingTableError(
                "No <tbody> element in history document",
                context={"document_length": len(raw_html)},
            )

        effective_end = end if end is not None else format_canonical(self._today())
        expected = estimate_capacity(frequency, start, effective_end)

        bars: list[PriceBar] = []
        rejected = 0
        for row in _body_rows(body):
            cells = [td.get_text(strip=True) for td in row.find_all("td")]
            scan = scan_row(cells)
            if scan.bar is None:
                rejected += 1
                logger.debug("Skipping row (%s): %s", scan.status.value, cells[:2])
                continue
            bars.append(scan.bar)

        logger.debug(
            "Extracted %d bars (%d rows skipped, estimate %s) for %s..%s %s",
            len(bars),
            rejected,
            "unknown" if expected is None else expected,
            start,
            effective_end,
            frequency,
        )
        return bars


def _find_table_body(soup: BeautifulSoup) -> Tag | None:
    """First table body in document order.

    The lxml builder never inserts the implied <tbody> of a table whose rows
    sit directly under <table>, so such a table stands in for its own body.
    """
    return soup.find(
        lambda tag: tag.name == "tbody"
        or (tag.name == "table" and tag.find("tr", recursive=False) is not None)
    )


def _body_rows(body: Tag) -> list[Tag]:
    if body.name == "table":
        return body.find_all("tr", recursive=False)
    return body.find_all("tr")


def parse_history_html(
    raw_html: str,
    frequency: Frequency,
    start: str,
    end: str | None = None,
    today: Callable[[], date] = date.today,
) -> list[PriceBar]:
    """Convenience wrapper around ``HistoryTableParser().parse``."""
    return HistoryTableParser(today=today).parse(raw_html, frequency, start, end)
