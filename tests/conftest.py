"""Shared pytest fixtures for yfp."""

from datetime import date, datetime, timezone

import pytest

from yfp.prices.dates import DisplayDate, EpochDate
from yfp.prices.models import PriceBar


def utc_epoch(year: int, month: int, day: int) -> int:
    """Epoch seconds of a UTC midnight."""
    return int(datetime(year, month, day, tzinfo=timezone.utc).timestamp())


# A trimmed quote history page: header row, data rows in both date
# spellings, a dividend row, a split row and a footnote row.
HISTORY_HTML = """
<html>
<head><title>VOO Historical Data</title></head>
<body>
<div class="table-container">
<table class="table">
<thead>
<tr><th>Date</th><th>Open</th><th>High</th><th>Low</th><th>Close</th><th>Adj Close</th><th>Volume</th></tr>
</thead>
<tbody>
<tr><td>Dec 24, 2020</td><td>335.05</td><td>336.75</td><td>334.89</td><td>336.39</td><td>321.66</td><td>1,743,300</td></tr>
<tr><td>Dec 23,2020</td><td>335.17</td><td>336.59</td><td>334.74</td><td>335.07</td><td>320.40</td><td>2,552,600</td></tr>
<tr><td>Dec 22, 2020</td><td>0.8 Dividend</td></tr>
<tr><td>Dec 21, 2020</td><td>2-for-1 Split</td></tr>
<tr><td>Dec 18, 2020</td><td>340.20</td><td>340.59</td><td>336.83</td><td>338.16</td><td>323.35</td><td>4,884,100</td></tr>
<tr><td colspan="7">*Close price adjusted for splits.</td></tr>
</tbody>
</table>
</div>
</body>
</html>
"""


@pytest.fixture
def history_html() -> str:
    return HISTORY_HTML


@pytest.fixture
def fixed_today():
    """Clock pinned to 2021-01-04."""
    return lambda: date(2021, 1, 4)


@pytest.fixture
def sample_bars() -> list[PriceBar]:
    return [
        PriceBar(
            date=DisplayDate(text="Dec 24, 2020"),
            open=1.0,
            high=2.0,
            low=0.5,
            close=1.5,
            adj_close=1.5,
            volume=100,
        ),
        PriceBar(
            date=EpochDate(epoch=utc_epoch(2020, 12, 25)),
            open=1.5,
            high=2.5,
            low=1.0,
            close=2.0,
            adj_close=2.0,
            volume=150,
        ),
    ]
