"""Expected row count of a history table, logged by the extractor."""

from __future__ import annotations

from yfp.core.models import Frequency
from yfp.prices.dates import parse_canonical_date

_SECONDS_PER_DAY = 86_400


def estimate_capacity(frequency: Frequency, start: str, end: str) -> int | None:
    """Predict how many rows a history table for this range will hold.

    Daily and weekly ranges count whole days/weeks between the bounds,
    floored at zero. Month lengths vary too much for a linear estimate,
    so monthly returns None ("unknown").

    Raises:
        DateParseError: If either bound is not "YYYY-MM-DD".
    """
    days = (parse_canonical_date(end) - parse_canonical_date(start)) // _SECONDS_PER_DAY
    days = max(days, 0)

    if frequency == Frequency.DAILY:
        return days
    if frequency == Frequency.WEEKLY:
        return days // 7
    return None
