"""Price history extraction.

Architecture
------------
A history request flows through small, separately testable pieces:

    HistoryQuery → compose_request → YahooHistoryClient (HTML)
        → HistoryTableParser → list[PriceBar] → export_bars → file

Key abstractions:

- ``PriceBar``: One date's OHLC, adjusted close and volume.
- ``EpochDate`` / ``DisplayDate``: The two forms a bar's date can take.
- ``HistoryTableParser``: Turns the first ``<tbody>`` of a page into bars.
- ``estimate_capacity``: Expected row count for a frequency and range.
- ``YahooHistoryClient``: Downloads history pages over httpx.
"""

from yfp.prices.capacity import estimate_capacity
from yfp.prices.dates import (
    DateValue,
    DisplayDate,
    EpochDate,
    date_value_from_string,
    parse_canonical_date,
    parse_compact_date,
    to_display_string,
    to_human_phrase,
)
from yfp.prices.export import (
    bars_to_records,
    export_bars,
    prepare_file_name,
    write_csv,
    write_json,
)
from yfp.prices.models import FIELD_ORDER, HistoryQuery, PriceBar
from yfp.prices.parser import (
    HistoryTableParser,
    RowScan,
    RowStatus,
    parse_history_html,
    scan_row,
)
from yfp.prices.yahoo import (
    HistoryRequest,
    YahooHistoryClient,
    compose_request,
    retrieve_history,
)

__all__ = [
    # Dates
    "DateValue",
    "DisplayDate",
    "EpochDate",
    "date_value_from_string",
    "parse_canonical_date",
    "parse_compact_date",
    "to_display_string",
    "to_human_phrase",
    # Models
    "FIELD_ORDER",
    "HistoryQuery",
    "PriceBar",
    # Extraction
    "HistoryTableParser",
    "RowScan",
    "RowStatus",
    "estimate_capacity",
    "parse_history_html",
    "scan_row",
    # Fetch
    "HistoryRequest",
    "YahooHistoryClient",
    "compose_request",
    "retrieve_history",
    # Export
    "bars_to_records",
    "export_bars",
    "prepare_file_name",
    "write_csv",
    "write_json",
]
