"""Write extracted price bars to CSV or JSON files."""

from __future__ import annotations

import csv
import json
import logging
from collections.abc import Sequence
from datetime import date
from pathlib import Path
from typing import Any

from yfp.core.exceptions import ExportError
from yfp.core.models import FileFormat, Frequency
from yfp.prices.dates import format_canonical
from yfp.prices.models import FIELD_ORDER, PriceBar

logger = logging.getLogger(__name__)


def prepare_file_name(
    ticker: str,
    start: str,
    end: str | None,
    frequency: Frequency,
    file_name: str | None = None,
    prefix: str = "yfp",
    today: date | None = None,
) -> str:
    """Return the output file stem (no extension).

    An explicit ``file_name`` wins. Otherwise the name is
    ``{prefix}_{ticker}_{start}_{end or "today"}_{frequency}_{generated}``,
    where ``generated`` is today's date as "YYYY-MM-DD".
    """
    if file_name:
        return file_name
    generated = format_canonical(today or date.today())
    return f"{prefix}_{ticker}_{start}_{end or 'today'}_{frequency}_{generated}"


def bars_to_records(bars: Sequence[PriceBar]) -> list[dict[str, Any]]:
    """Convert bars to plain dicts, dates rendered as "Mon D, YYYY"."""
    return [bar.as_record() for bar in bars]


def write_csv(bars: Sequence[PriceBar], path: Path) -> None:
    """Write bars as CSV with a header row."""
    records = bars_to_records(bars)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(FIELD_ORDER))
        writer.writeheader()
        writer.writerows(records)


def write_json(bars: Sequence[PriceBar], path: Path) -> None:
    """Write bars as a pretty-printed JSON array."""
    records = bars_to_records(bars)
    path.write_text(json.dumps(records, indent=2), encoding="utf-8")


_WRITERS = {
    FileFormat.CSV: write_csv,
    FileFormat.JSON: write_json,
}


def export_bars(
    bars: Sequence[PriceBar],
    file_name: str,
    file_format: FileFormat,
    directory: str | Path | None = None,
) -> Path:
    """Write bars to ``{directory}/{file_name}.{csv|json}``, replacing any existing file.

    Returns:
        The path written.

    Raises:
        FormatError: A bar's date cannot be rendered.
        ExportError: The file could not be written.
    """
    target = Path(directory) if directory is not None else Path(".")
    path = target / f"{file_name}.{file_format.value}"

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        _WRITERS[file_format](bars, path)
    except OSError as e:
        raise ExportError(
            f"Could not write {path}: {e}",
            context={"path": str(path)},
        ) from e

    logger.info("File saved to %s", path)
    return path
