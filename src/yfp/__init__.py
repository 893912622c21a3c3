"""yfp: scrape quote history tables into CSV or JSON price series."""

from yfp.core import FileFormat, Frequency, YfpError, load_config
from yfp.prices import (
    HistoryQuery,
    HistoryTableParser,
    PriceBar,
    YahooHistoryClient,
    export_bars,
    parse_history_html,
    prepare_file_name,
    retrieve_history,
)

__version__ = "0.1.0"

__all__ = [
    "FileFormat",
    "Frequency",
    "HistoryQuery",
    "HistoryTableParser",
    "PriceBar",
    "YahooHistoryClient",
    "YfpError",
    "export_bars",
    "load_config",
    "parse_history_html",
    "prepare_file_name",
    "retrieve_history",
]
